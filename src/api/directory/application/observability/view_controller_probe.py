"""Probe for the directory view controller."""

from __future__ import annotations

from typing import Protocol

import structlog


class ViewControllerProbe(Protocol):
    """Domain probe for view controller interactions."""

    def refresh_failed(self, error: str) -> None:
        """Record that the collection could not be fetched."""
        ...

    def stale_response_ignored(self, operation: str) -> None:
        """Record that a response arrived after a newer request superseded it."""
        ...

    def submit_rejected(self, errors: list[str]) -> None:
        """Record that a form submit did not go through."""
        ...

    def user_saved(self, user_id: int, created: bool) -> None:
        """Record that a create or edit succeeded."""
        ...

    def delete_failed(self, user_id: int, error: str) -> None:
        """Record that a delete did not go through."""
        ...


class DefaultViewControllerProbe:
    """Default implementation of ViewControllerProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def refresh_failed(self, error: str) -> None:
        self._logger.warning("directory_view_refresh_failed", error=error)

    def stale_response_ignored(self, operation: str) -> None:
        self._logger.debug("directory_view_stale_response_ignored", operation=operation)

    def submit_rejected(self, errors: list[str]) -> None:
        self._logger.info("directory_view_submit_rejected", errors=errors)

    def user_saved(self, user_id: int, created: bool) -> None:
        self._logger.info("directory_view_user_saved", user_id=user_id, created=created)

    def delete_failed(self, user_id: int, error: str) -> None:
        self._logger.warning(
            "directory_view_delete_failed",
            user_id=user_id,
            error=error,
        )
