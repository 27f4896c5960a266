"""Domain probe for application startup and lifecycle events."""

from __future__ import annotations

from typing import Protocol

import structlog


class StartupProbe(Protocol):
    """Domain probe for application startup operations."""

    def application_started(self, app_name: str, version: str, instance: str) -> None:
        """Record that the application finished starting up."""
        ...

    def application_stopped(self, app_name: str, instance: str) -> None:
        """Record that the application shut down."""
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def application_started(self, app_name: str, version: str, instance: str) -> None:
        self._logger.info(
            "application_started",
            app_name=app_name,
            version=version,
            instance=instance,
        )

    def application_stopped(self, app_name: str, instance: str) -> None:
        self._logger.info("application_stopped", app_name=app_name, instance=instance)
