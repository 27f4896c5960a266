"""Repository and gateway protocols (ports) for the directory bounded context.

`IUserRepository` is the server-side port onto the relational store.
`IDirectoryGateway` is the client-side port the view controller uses to
reach the HTTP API.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from directory.domain.aggregates import User, UserDraft
from directory.domain.value_objects import UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User record persistence.

    Update and delete are single conditional statements against the store,
    so there is no window between an existence check and the mutation.
    """

    async def list_all(self) -> list[User]:
        """List every user, newest created first.

        Returns:
            All User records ordered by created_at descending (id breaks ties)
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by id.

        Args:
            user_id: The identifier of the user

        Returns:
            The User, or None if not found
        """
        ...

    async def create(self, draft: UserDraft) -> User:
        """Insert a new user.

        Args:
            draft: Validated, normalized field values

        Returns:
            The stored User including assigned id and created_at

        Raises:
            DuplicateEmailError: If the email already exists
        """
        ...

    async def update(self, user_id: UserId, draft: UserDraft) -> User | None:
        """Replace every mutable field of a user.

        Args:
            user_id: The user to update
            draft: Validated, normalized field values

        Returns:
            The updated User, or None if no user has that id

        Raises:
            DuplicateEmailError: If the email belongs to a different user
        """
        ...

    async def delete(self, user_id: UserId) -> bool:
        """Delete a user.

        Args:
            user_id: The user to delete

        Returns:
            True if deleted, False if not found (nothing changed)
        """
        ...

    async def count(self) -> int:
        """Return the total number of users."""
        ...


@runtime_checkable
class IDirectoryGateway(Protocol):
    """Client-side access to the directory API.

    Implementations translate transport outcomes into the directory error
    taxonomy: UserValidationError, UserNotFoundError, DuplicateEmailError
    and TransientFailureError.
    """

    async def list_users(self) -> list[User]:
        """Fetch the full collection, newest first."""
        ...

    async def get_user(self, user_id: UserId) -> User:
        """Fetch one user.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...

    async def create_user(self, payload: Mapping[str, Any]) -> User:
        """Submit a new user.

        Raises:
            UserValidationError: If the API rejected the fields
            DuplicateEmailError: If the email already exists
        """
        ...

    async def update_user(self, user_id: UserId, payload: Mapping[str, Any]) -> User:
        """Submit a full replacement of a user's fields.

        Raises:
            UserValidationError: If the API rejected the fields
            UserNotFoundError: If the user does not exist
            DuplicateEmailError: If the email belongs to a different user
        """
        ...

    async def delete_user(self, user_id: UserId) -> None:
        """Delete a user.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        ...
