"""Domain aggregates for the directory context."""

from directory.domain.aggregates.user import User, UserDraft

__all__ = [
    "User",
    "UserDraft",
]
