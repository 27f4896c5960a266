"""Field rules for user records.

This is the single rule set for the directory. The view controller runs it
before submitting (advisory, saves a round trip) and the user service runs
it again before touching the store (authoritative). Both call the same
functions, so the two checks cannot disagree about the same input.

Rules are evaluated independently and every violation is reported, in the
order name, surname, email, age, sex.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from directory.domain.aggregates import UserDraft
from directory.domain.exceptions import UserValidationError
from directory.domain.value_objects import Sex

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")
MIN_AGE = 0
MAX_AGE = 150

NAME_REQUIRED = "Name is required"
SURNAME_REQUIRED = "Surname is required"
EMAIL_REQUIRED = "Email is required"
EMAIL_INVALID = "Email format is invalid"
AGE_INVALID = f"Age must be a valid number between {MIN_AGE} and {MAX_AGE}"
SEX_INVALID = "Sex must be one of: " + ", ".join(sex.value for sex in Sex)

_MESSAGE_FIELDS = {
    NAME_REQUIRED: "name",
    SURNAME_REQUIRED: "surname",
    EMAIL_REQUIRED: "email",
    EMAIL_INVALID: "email",
    AGE_INVALID: "age",
    SEX_INVALID: "sex",
}

_INTEGER_PATTERN = re.compile(r"[+-]?\d+")


@dataclass(frozen=True)
class FieldError:
    """A violated rule and the form field it belongs to."""

    field: str
    message: str


def _text(candidate: Mapping[str, Any], field: str) -> str:
    value = candidate.get(field)
    return value.strip() if isinstance(value, str) else ""


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_age(value: Any) -> int:
    """Parse an age value into an integer.

    Accepts ints, integral floats and strings holding an optionally signed
    decimal integer. The range is not checked here.

    Raises:
        ValueError: If the value is not an integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and _INTEGER_PATTERN.fullmatch(value.strip()):
        return int(value.strip())
    raise ValueError(f"Not an integer: {value!r}")


def collect_field_errors(candidate: Mapping[str, Any]) -> list[FieldError]:
    """Check a candidate record against every field rule.

    Args:
        candidate: Raw field values (request body or form state)

    Returns:
        One FieldError per violated rule; empty when the candidate is valid
    """
    errors: list[FieldError] = []

    if not _text(candidate, "name"):
        errors.append(FieldError("name", NAME_REQUIRED))

    if not _text(candidate, "surname"):
        errors.append(FieldError("surname", SURNAME_REQUIRED))

    email = _text(candidate, "email")
    if not email:
        errors.append(FieldError("email", EMAIL_REQUIRED))
    elif not EMAIL_PATTERN.fullmatch(email):
        errors.append(FieldError("email", EMAIL_INVALID))

    age = candidate.get("age")
    if not _is_blank(age):
        try:
            parsed = parse_age(age)
        except ValueError:
            errors.append(FieldError("age", AGE_INVALID))
        else:
            if not MIN_AGE <= parsed <= MAX_AGE:
                errors.append(FieldError("age", AGE_INVALID))

    sex = candidate.get("sex")
    if not _is_blank(sex):
        allowed = {member.value for member in Sex}
        if not isinstance(sex, str) or sex.strip().lower() not in allowed:
            errors.append(FieldError("sex", SEX_INVALID))

    return errors


def validate_user(candidate: Mapping[str, Any]) -> list[str]:
    """Return the human-readable messages for every violated rule.

    Never raises; an empty list means the candidate is valid.
    """
    return [error.message for error in collect_field_errors(candidate)]


def field_for_message(message: str) -> str | None:
    """Map a rule message (e.g. from an API 400 body) back to its form field."""
    return _MESSAGE_FIELDS.get(message)


def normalize_user(candidate: Mapping[str, Any]) -> UserDraft:
    """Turn a valid candidate into the values that get persisted.

    Strings are trimmed, sex is lower-cased, age becomes an int, and an
    absent or empty sex/age becomes None (never an empty string).

    Raises:
        UserValidationError: If the candidate breaks any rule
    """
    errors = validate_user(candidate)
    if errors:
        raise UserValidationError(errors)

    sex = candidate.get("sex")
    age = candidate.get("age")

    return UserDraft(
        name=_text(candidate, "name"),
        surname=_text(candidate, "surname"),
        email=_text(candidate, "email"),
        sex=None if _is_blank(sex) else Sex(sex.strip().lower()),
        age=None if _is_blank(age) else parse_age(age),
    )
