"""PostgreSQL implementation of IUserRepository.

Writes are single statements with RETURNING: the insert hands back the
assigned id and created_at, and update/delete are conditional on the id so
"does it exist" and "change it" happen in one round trip with no race
window in between. Transactions are owned by the caller (UserService).
"""

from __future__ import annotations

from typing import NoReturn

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from directory.domain.aggregates import User, UserDraft
from directory.domain.value_objects import UserId
from directory.infrastructure.models import UserModel
from directory.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from directory.ports.exceptions import DuplicateEmailError
from directory.ports.repositories import IUserRepository

EMAIL_UNIQUE_INDEX = "ix_users_email"


def _to_domain(model: UserModel) -> User:
    return User(
        id=UserId(value=model.id),
        name=model.name,
        surname=model.surname,
        email=model.email,
        sex=model.sex,
        age=model.age,
        created_at=model.created_at,
    )


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User records."""

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    def _raise_for_integrity_error(
        self, error: IntegrityError, email: str
    ) -> NoReturn:
        if EMAIL_UNIQUE_INDEX in str(error):
            self._probe.duplicate_email(email)
            raise DuplicateEmailError(email) from error
        raise error

    async def list_all(self) -> list[User]:
        """Fetch all users, newest first."""
        stmt = select(UserModel).order_by(
            UserModel.created_at.desc(), UserModel.id.desc()
        )
        result = await self._session.execute(stmt)
        users = [_to_domain(model) for model in result.scalars().all()]

        self._probe.users_listed(len(users))
        return users

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Fetch one user by id, or None."""
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_retrieved(user_id.value)
        return _to_domain(model)

    async def create(self, draft: UserDraft) -> User:
        """Insert a user and return the stored row.

        Raises:
            DuplicateEmailError: If the unique email index rejects the row
        """
        stmt = insert(UserModel).values(**draft.to_payload()).returning(UserModel)
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as e:
            self._raise_for_integrity_error(e, draft.email)

        user = _to_domain(result.scalar_one())
        self._probe.user_created(user.id.value, user.email)
        return user

    async def update(self, user_id: UserId, draft: UserDraft) -> User | None:
        """Update every mutable column of the row matching user_id.

        id and created_at are never part of the SET clause.

        Raises:
            DuplicateEmailError: If the email belongs to a different row
        """
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id.value)
            .values(**draft.to_payload())
            .returning(UserModel)
        )
        try:
            result = await self._session.execute(stmt)
        except IntegrityError as e:
            self._raise_for_integrity_error(e, draft.email)

        model = result.scalar_one_or_none()
        if model is None:
            self._probe.user_not_found(user_id.value)
            return None

        self._probe.user_updated(user_id.value)
        return _to_domain(model)

    async def delete(self, user_id: UserId) -> bool:
        """Delete the row matching user_id.

        Returns:
            True if a row was deleted, False if none matched
        """
        stmt = (
            delete(UserModel)
            .where(UserModel.id == user_id.value)
            .returning(UserModel.id)
        )
        result = await self._session.execute(stmt)
        deleted_id = result.scalar_one_or_none()

        if deleted_id is None:
            self._probe.user_not_found(user_id.value)
            return False

        self._probe.user_deleted(user_id.value)
        return True

    async def count(self) -> int:
        """Count all users."""
        result = await self._session.execute(select(func.count(UserModel.id)))
        return int(result.scalar_one())
