"""Value objects for the directory domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class UserId:
    """Identifier for a User record.

    Ids are assigned by the store (identity column) and are positive,
    monotonically increasing integers.
    """

    value: int

    def __str__(self) -> str:
        """Return string representation."""
        return str(self.value)

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from a path segment or other string value.

        Args:
            value: Decimal integer string

        Returns:
            UserId instance

        Raises:
            ValueError: If value is not a positive integer
        """
        if not _INTEGER_PATTERN.fullmatch(value.strip()):
            raise ValueError(f"Invalid UserId: {value}")

        parsed = int(value)
        if parsed < 1:
            raise ValueError(f"Invalid UserId: {value}")

        return cls(value=parsed)


class Sex(StrEnum):
    """Allowed values of the optional sex field (stored lower-cased)."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class SortKey(StrEnum):
    """Record fields the directory view can be ordered by."""

    ID = "id"
    NAME = "name"
    SURNAME = "surname"
    SEX = "sex"
    AGE = "age"
    EMAIL = "email"
    CREATED_AT = "created_at"

    @property
    def is_numeric(self) -> bool:
        """Numeric keys compare as numbers, everything else as lower-cased text."""
        return self in (SortKey.ID, SortKey.AGE)


class SortDirection(StrEnum):
    """Sort direction for the directory view."""

    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    """Current ordering of the directory view.

    A spec with no key means "keep the collection order" (newest first).
    """

    key: SortKey | None = None
    direction: SortDirection = SortDirection.ASC

    def select(self, key: SortKey) -> SortSpec:
        """Return the spec produced by the user selecting a column.

        Selecting the current key flips the direction; selecting any other
        key (or the first key) starts ascending on that key.
        """
        if self.key == key:
            flipped = (
                SortDirection.DESC
                if self.direction == SortDirection.ASC
                else SortDirection.ASC
            )
            return SortSpec(key=key, direction=flipped)
        return SortSpec(key=key, direction=SortDirection.ASC)
