"""Domain probe for the directory API client.

Captures what the view layer's HTTP gateway saw on the wire, so a
"please retry" message on screen can be matched to its cause in the logs.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class DirectoryGatewayProbe(Protocol):
    """Domain probe for directory gateway operations."""

    def request_failed(self, method: str, path: str, error: str) -> None:
        """Record that a request never produced a response."""
        ...

    def unexpected_status(self, method: str, path: str, status_code: int) -> None:
        """Record that the API answered with a server error or unknown status."""
        ...

    def malformed_response(self, method: str, path: str, error: str) -> None:
        """Record that a successful response body could not be decoded."""
        ...


class DefaultDirectoryGatewayProbe:
    """Default implementation of DirectoryGatewayProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def request_failed(self, method: str, path: str, error: str) -> None:
        """Record that a request never produced a response."""
        self._logger.warning(
            "directory_request_failed",
            method=method,
            path=path,
            error=error,
        )

    def unexpected_status(self, method: str, path: str, status_code: int) -> None:
        """Record that the API answered with a server error or unknown status."""
        self._logger.warning(
            "directory_unexpected_status",
            method=method,
            path=path,
            status_code=status_code,
        )

    def malformed_response(self, method: str, path: str, error: str) -> None:
        """Record that a successful response body could not be decoded."""
        self._logger.warning(
            "directory_malformed_response",
            method=method,
            path=path,
            error=error,
        )
