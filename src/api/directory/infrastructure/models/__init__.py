"""SQLAlchemy ORM models for the directory bounded context."""

from directory.infrastructure.models.user import UserModel

__all__ = [
    "UserModel",
]
