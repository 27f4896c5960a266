"""Request-scoped database sessions for FastAPI.

The engine is created on first use and disposed by the application lifespan.
Sessions never autocommit: `UserService` opens the transaction for writes,
and reads run in the session's implicit transaction.
"""

from __future__ import annotations

from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_engine, redacted_url
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings, get_settings

_probe = DefaultConnectionProbe()

_engine: AsyncEngine | None = None
_sessionmaker: async_sessionmaker[AsyncSession] | None = None


def get_engine() -> AsyncEngine:
    """Return the shared engine, creating it and its sessionmaker on first call."""
    global _engine, _sessionmaker
    if _engine is None:
        settings = get_database_settings()
        _engine = create_engine(settings, echo=get_settings().debug)
        _sessionmaker = async_sessionmaker(_engine, expire_on_commit=False)
        _probe.engine_created(
            url=redacted_url(settings),
            pool_size=settings.pool_min_connections,
            max_connections=settings.pool_max_connections,
        )
    return _engine


def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    get_engine()
    assert _sessionmaker is not None
    return _sessionmaker


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield one session per request (FastAPI dependency)."""
    async with get_sessionmaker()() as session:
        yield session


async def close_database_connections() -> None:
    """Dispose the engine; the next request creates a fresh one."""
    global _engine, _sessionmaker
    if _engine is None:
        return

    engine = _engine
    _engine = None
    _sessionmaker = None
    await engine.dispose()
    _probe.pool_closed()
