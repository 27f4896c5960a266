"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class ConnectionProbe(Protocol):
    """Domain probe for the directory database pool."""

    def engine_created(self, url: str, pool_size: int, max_connections: int) -> None:
        """Record that the engine and its pool were created."""
        ...

    def health_check_failed(self, error: Exception) -> None:
        """Record that a database health check failed."""
        ...

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def engine_created(self, url: str, pool_size: int, max_connections: int) -> None:
        """Record that the engine and its pool were created."""
        self._logger.info(
            "database_engine_created",
            url=url,
            pool_size=pool_size,
            max_connections=max_connections,
        )

    def health_check_failed(self, error: Exception) -> None:
        """Record that a database health check failed."""
        self._logger.error("database_health_check_failed", error=str(error))

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        self._logger.info("connection_pool_closed")
