"""Pydantic models for user API requests and responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from directory.domain.aggregates import User


class UserRequest(BaseModel):
    """Request body for creating or replacing a user.

    Fields are deliberately untyped: the shared field rules in
    `directory.domain.validation` decide what is acceptable and report
    every violation at once as a 400, instead of pydantic's 422.
    """

    model_config = ConfigDict(extra="ignore")

    name: Any = Field(default=None, description="Given name (required)")
    surname: Any = Field(default=None, description="Family name (required)")
    email: Any = Field(default=None, description="Email address (required, unique)")
    sex: Any = Field(default=None, description="male, female or other")
    age: Any = Field(default=None, description="Integer between 0 and 150")

    def to_candidate(self) -> dict[str, Any]:
        """Raw field values for validation."""
        return self.model_dump()

    @classmethod
    def from_body(cls, body: Any) -> UserRequest:
        """Build a request from any decoded JSON body.

        A missing body, an array or a scalar carries no fields, so it is
        read as `{}` and reported as missing required fields.
        """
        return cls.model_validate(body if isinstance(body, dict) else {})


class UserResponse(BaseModel):
    """Response model for a user record."""

    id: int = Field(..., description="Server-assigned user ID")
    name: str = Field(..., description="Given name")
    surname: str = Field(..., description="Family name")
    sex: str | None = Field(default=None, description="male, female, other or null")
    age: int | None = Field(default=None, description="Age or null")
    email: str = Field(..., description="Email address")
    created_at: datetime = Field(..., description="Creation timestamp (UTC)")

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User to API response.

        Args:
            user: User domain aggregate

        Returns:
            UserResponse
        """
        return cls(
            id=user.id.value,
            name=user.name,
            surname=user.surname,
            sex=user.sex,
            age=user.age,
            email=user.email,
            created_at=user.created_at,
        )


class ValidationErrorResponse(BaseModel):
    """400 body: every violated field rule, in rule order."""

    errors: list[str]


class ErrorResponse(BaseModel):
    """Error body for 404, 409 and 500 responses."""

    error: str
