"""User application service for the directory bounded context.

Handles user management operations (list, read, create, update, delete).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from directory.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from directory.domain.aggregates import User, UserDraft
from directory.domain.exceptions import UserValidationError
from directory.domain.validation import normalize_user
from directory.domain.value_objects import UserId
from directory.ports.exceptions import DuplicateEmailError, UserNotFoundError
from directory.ports.repositories import IUserRepository


class UserService:
    """Application service for user management.

    This is the authoritative validation boundary: every candidate is run
    through the shared field rules here, whatever the client already
    checked. Mutations run inside a transaction owned by this service.
    """

    def __init__(
        self,
        user_repository: IUserRepository,
        session: AsyncSession,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._session = session
        self._probe = probe or DefaultUserServiceProbe()

    def _normalize(self, candidate: Mapping[str, Any]) -> UserDraft:
        try:
            return normalize_user(candidate)
        except UserValidationError as e:
            self._probe.validation_failed(e.errors)
            raise

    async def list_users(self) -> list[User]:
        """List every user, newest first."""
        users = await self._user_repository.list_all()
        self._probe.users_listed(len(users))
        return users

    async def get_user(self, user_id: UserId) -> User:
        """Retrieve a user by id.

        Raises:
            UserNotFoundError: If no user has this id
        """
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            self._probe.user_not_found(user_id.value)
            raise UserNotFoundError(user_id.value)
        return user

    async def create_user(self, candidate: Mapping[str, Any]) -> User:
        """Validate, normalize and store a new user.

        Args:
            candidate: Raw field values from the request body

        Returns:
            The stored User with its assigned id and created_at

        Raises:
            UserValidationError: If any field rule is violated
            DuplicateEmailError: If the email is already taken
        """
        draft = self._normalize(candidate)

        async with self._session.begin():
            try:
                user = await self._user_repository.create(draft)
            except DuplicateEmailError:
                self._probe.duplicate_email(draft.email)
                raise

        self._probe.user_created(user.id.value, user.email)
        return user

    async def update_user(
        self, user_id: UserId, candidate: Mapping[str, Any]
    ) -> User:
        """Validate, normalize and replace every mutable field of a user.

        The id and created_at of the stored user are preserved.

        Raises:
            UserValidationError: If any field rule is violated
            UserNotFoundError: If no user has this id
            DuplicateEmailError: If the email belongs to a different user
        """
        draft = self._normalize(candidate)

        async with self._session.begin():
            try:
                user = await self._user_repository.update(user_id, draft)
            except DuplicateEmailError:
                self._probe.duplicate_email(draft.email)
                raise

        if user is None:
            self._probe.user_not_found(user_id.value)
            raise UserNotFoundError(user_id.value)

        self._probe.user_updated(user_id.value)
        return user

    async def delete_user(self, user_id: UserId) -> None:
        """Delete a user.

        Raises:
            UserNotFoundError: If no user has this id
        """
        async with self._session.begin():
            deleted = await self._user_repository.delete(user_id)

        if not deleted:
            self._probe.user_not_found(user_id.value)
            raise UserNotFoundError(user_id.value)

        self._probe.user_deleted(user_id.value)
