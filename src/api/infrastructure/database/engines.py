"""Async SQLAlchemy engine for the directory database.

A single asyncpg pool serves every request. `pool_min_connections` stay
open; bursts may grow the pool up to `pool_max_connections`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

if TYPE_CHECKING:
    from infrastructure.settings import DatabaseSettings

__all__ = [
    "build_async_url",
    "create_engine",
    "redacted_url",
]


def _url(settings: DatabaseSettings) -> URL:
    return URL.create(
        drivername="postgresql+asyncpg",
        username=settings.username,
        password=settings.password.get_secret_value(),
        host=settings.host,
        port=settings.port,
        database=settings.database,
    )


def build_async_url(settings: DatabaseSettings) -> str:
    """Render the asyncpg URL with credentials percent-encoded.

    Shared by the application engine and the Alembic environment.
    """
    return _url(settings).render_as_string(hide_password=False)


def redacted_url(settings: DatabaseSettings) -> str:
    """Render the URL with the password masked, for logs."""
    return _url(settings).render_as_string(hide_password=True)


def create_engine(settings: DatabaseSettings, *, echo: bool = False) -> AsyncEngine:
    """Create the engine behind every directory session.

    Args:
        settings: Database connection settings
        echo: Log emitted SQL; the application passes its debug flag

    Returns:
        Async engine with a pre-pinged pool
    """
    return create_async_engine(
        build_async_url(settings),
        pool_size=settings.pool_min_connections,
        max_overflow=settings.pool_max_connections - settings.pool_min_connections,
        pool_pre_ping=True,
        echo=echo,
    )
