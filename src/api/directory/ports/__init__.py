"""Ports for the directory bounded context."""

from directory.ports.exceptions import (
    DuplicateEmailError,
    TransientFailureError,
    UserNotFoundError,
)
from directory.ports.repositories import IDirectoryGateway, IUserRepository

__all__ = [
    "DuplicateEmailError",
    "IDirectoryGateway",
    "IUserRepository",
    "TransientFailureError",
    "UserNotFoundError",
]
