"""Main FastAPI application entry point."""

import socket
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Annotated

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from directory.dependencies import get_user_repository
from directory.infrastructure.user_repository import UserRepository
from directory.presentation import router as users_router
from infrastructure.database.dependencies import close_database_connections
from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultConnectionProbe, DefaultStartupProbe
from infrastructure.settings import get_directory_settings, get_settings
from infrastructure.version import __version__

INSTANCE = socket.gethostname()

_connection_probe = DefaultConnectionProbe()


@asynccontextmanager
async def directory_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Database engine lifecycle (created lazily, disposed on shutdown)
    """
    settings = get_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()
    probe.application_started(
        app_name=settings.app_name, version=__version__, instance=INSTANCE
    )

    yield

    await close_database_connections()
    probe.application_stopped(app_name=settings.app_name, instance=INSTANCE)


app = FastAPI(
    title="User Directory API",
    description="Browse, search and manage the user directory",
    version=__version__,
    lifespan=directory_lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_directory_settings().cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include Directory bounded context routes
app.include_router(users_router)


@app.get("/")
def root() -> dict:
    """Service banner naming the instance that answered."""
    return {
        "message": "Backend service is running!",
        "instance": INSTANCE,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@app.get("/health")
def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy", "instance": INSTANCE}


@app.get("/health/db")
async def health_db(
    repository: Annotated[UserRepository, Depends(get_user_repository)],
) -> dict:
    """Check database connection health.

    Returns the connection status and the number of stored users.
    """
    try:
        total_users = await repository.count()
        return {
            "status": "healthy",
            "connected": True,
            "total_users": total_users,
        }
    except Exception as e:
        _connection_probe.health_check_failed(e)
        return {
            "status": "error",
            "connected": False,
            "error": str(e),
        }
