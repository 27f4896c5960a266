"""User aggregate for the directory context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from directory.domain.value_objects import Sex, UserId


@dataclass(frozen=True)
class UserDraft:
    """Normalized, validated field values for creating or replacing a user.

    Drafts never carry id or created_at: both are assigned by the store and
    survive every update untouched.
    """

    name: str
    surname: str
    email: str
    sex: Sex | None = None
    age: int | None = None

    def to_payload(self) -> dict[str, Any]:
        """JSON body for the directory API (null for absent sex/age)."""
        return {
            "name": self.name,
            "surname": self.surname,
            "email": self.email,
            "sex": self.sex.value if self.sex is not None else None,
            "age": self.age,
        }


@dataclass(frozen=True)
class User:
    """User record as stored in the directory.

    `sex` holds the stored value verbatim. Rows written by this service are
    always lower-cased, but the view filters on exact stored values so it
    tolerates whatever the table contains.
    """

    id: UserId
    name: str
    surname: str
    email: str
    created_at: datetime
    sex: str | None = None
    age: int | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.id}, {self.email})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)

    def as_form(self) -> dict[str, str]:
        """Field values for pre-populating the edit form."""
        return {
            "name": self.name,
            "surname": self.surname,
            "email": self.email,
            "sex": self.sex or "",
            "age": "" if self.age is None else str(self.age),
        }
