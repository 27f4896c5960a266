"""Shared fixtures for directory unit tests."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from directory.domain.aggregates import User
from directory.domain.value_objects import UserId

BASE_TIME = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


def build_user(
    user_id: int,
    name: str = "Ann",
    surname: str = "Lee",
    email: str | None = None,
    sex: str | None = None,
    age: int | None = None,
    created_at: datetime | None = None,
) -> User:
    """Build a User; created_at defaults to one minute per id after BASE_TIME."""
    return User(
        id=UserId(value=user_id),
        name=name,
        surname=surname,
        email=email or f"user{user_id}@example.com",
        sex=sex,
        age=age,
        created_at=created_at or BASE_TIME + timedelta(minutes=user_id),
    )


@pytest.fixture
def make_user():
    """Factory fixture for User records."""
    return build_user
