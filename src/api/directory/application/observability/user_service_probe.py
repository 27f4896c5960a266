"""Protocol for user application service observability.

Defines the interface for domain probes that capture application-level
domain events for user service operations.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from infrastructure.observability.context import ObservationContext


class UserServiceProbe(Protocol):
    """Domain probe for user application service operations."""

    def user_created(self, user_id: int, email: str) -> None:
        """Record that a user was created."""
        ...

    def user_updated(self, user_id: int) -> None:
        """Record that a user was updated."""
        ...

    def user_deleted(self, user_id: int) -> None:
        """Record that a user was deleted."""
        ...

    def users_listed(self, count: int) -> None:
        """Record that the user collection was listed."""
        ...

    def user_not_found(self, user_id: int) -> None:
        """Record that a referenced user did not exist."""
        ...

    def validation_failed(self, errors: list[str]) -> None:
        """Record that a candidate was rejected by the field rules."""
        ...

    def duplicate_email(self, email: str) -> None:
        """Record that a write collided with an existing email."""
        ...

    def operation_failed(self, operation: str, error: str) -> None:
        """Record that an operation failed unexpectedly (store or driver fault)."""
        ...

    def with_context(self, context: ObservationContext) -> UserServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultUserServiceProbe:
    """Default implementation of UserServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultUserServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultUserServiceProbe(logger=self._logger, context=context)

    def user_created(self, user_id: int, email: str) -> None:
        """Record that a user was created."""
        self._logger.info(
            "directory_user_created",
            user_id=user_id,
            email=email,
            **self._get_context_kwargs(),
        )

    def user_updated(self, user_id: int) -> None:
        """Record that a user was updated."""
        self._logger.info(
            "directory_user_updated",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def user_deleted(self, user_id: int) -> None:
        """Record that a user was deleted."""
        self._logger.info(
            "directory_user_deleted",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def users_listed(self, count: int) -> None:
        """Record that the user collection was listed."""
        self._logger.debug(
            "directory_users_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def user_not_found(self, user_id: int) -> None:
        """Record that a referenced user did not exist."""
        self._logger.debug(
            "directory_user_not_found",
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def validation_failed(self, errors: list[str]) -> None:
        """Record that a candidate was rejected by the field rules."""
        self._logger.info(
            "directory_validation_failed",
            errors=errors,
            **self._get_context_kwargs(),
        )

    def duplicate_email(self, email: str) -> None:
        """Record that a write collided with an existing email."""
        self._logger.warning(
            "directory_duplicate_email",
            email=email,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, error: str) -> None:
        """Record that an operation failed unexpectedly (store or driver fault)."""
        self._logger.error(
            "directory_operation_failed",
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )
