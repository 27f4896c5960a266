"""Database infrastructure - shared engine and ORM primitives."""

from infrastructure.database.models import Base, CreatedAtMixin

__all__ = [
    "Base",
    "CreatedAtMixin",
]
