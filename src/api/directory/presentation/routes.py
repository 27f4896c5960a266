"""HTTP routes for user management."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Response, status
from fastapi.responses import JSONResponse

from directory.application.observability import UserServiceProbe
from directory.application.services import UserService
from directory.dependencies import get_user_service, get_user_service_probe
from directory.domain.exceptions import UserValidationError
from directory.domain.value_objects import UserId
from directory.ports.exceptions import DuplicateEmailError, UserNotFoundError
from directory.presentation.models import (
    ErrorResponse,
    UserRequest,
    UserResponse,
    ValidationErrorResponse,
)

USER_NOT_FOUND = "User not found"
EMAIL_EXISTS = "Email already exists"

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
)

_ERROR_RESPONSES = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}
_WRITE_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ValidationErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    **_ERROR_RESPONSES,
}

# Handlers accept any JSON body; the docs still show the expected object
_USER_BODY = {
    "requestBody": {
        "content": {"application/json": {"schema": UserRequest.model_json_schema()}}
    }
}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def _validation_error(error: UserValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": error.errors},
    )


def _parse_user_id(user_id: str) -> UserId | None:
    """Parse a path id; anything that is not a positive integer matches no user."""
    try:
        return UserId.from_string(user_id)
    except ValueError:
        return None


@router.get("", response_model=list[UserResponse], responses=_ERROR_RESPONSES)
async def list_users(
    service: Annotated[UserService, Depends(get_user_service)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> list[UserResponse] | JSONResponse:
    """List all users, newest first.

    Returns:
        Every user ordered by created_at descending
    """
    try:
        users = await service.list_users()
    except Exception as e:
        probe.operation_failed("list_users", str(e))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch users")
    return [UserResponse.from_domain(user) for user in users]


@router.get("/{user_id}", response_model=UserResponse, responses=_ERROR_RESPONSES)
async def get_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserResponse | JSONResponse:
    """Get a user by ID.

    Raises:
        404 if the id does not name an existing user
        500 for unexpected errors
    """
    user_id_obj = _parse_user_id(user_id)
    if user_id_obj is None:
        return _error(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)

    try:
        user = await service.get_user(user_id_obj)
    except UserNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)
    except Exception as e:
        probe.operation_failed("get_user", str(e))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch user")
    return UserResponse.from_domain(user)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserResponse,
    responses=_WRITE_RESPONSES,
    openapi_extra=_USER_BODY,
)
async def create_user(
    service: Annotated[UserService, Depends(get_user_service)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
    body: Annotated[Any, Body()] = None,
) -> UserResponse | JSONResponse:
    """Create a user.

    Raises:
        400 with every violated field rule
        409 if the email already exists
        500 for unexpected errors
    """
    try:
        user = await service.create_user(UserRequest.from_body(body).to_candidate())
    except UserValidationError as e:
        return _validation_error(e)
    except DuplicateEmailError:
        return _error(status.HTTP_409_CONFLICT, EMAIL_EXISTS)
    except Exception as e:
        probe.operation_failed("create_user", str(e))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to create user")
    return UserResponse.from_domain(user)


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    responses=_WRITE_RESPONSES,
    openapi_extra=_USER_BODY,
)
async def update_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
    body: Annotated[Any, Body()] = None,
) -> UserResponse | JSONResponse:
    """Replace every mutable field of a user.

    id and created_at are preserved.

    Raises:
        400 with every violated field rule
        404 if the user does not exist
        409 if the email belongs to a different user
        500 for unexpected errors
    """
    user_id_obj = _parse_user_id(user_id)
    if user_id_obj is None:
        return _error(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)

    try:
        user = await service.update_user(
            user_id_obj, UserRequest.from_body(body).to_candidate()
        )
    except UserValidationError as e:
        return _validation_error(e)
    except UserNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)
    except DuplicateEmailError:
        return _error(status.HTTP_409_CONFLICT, EMAIL_EXISTS)
    except Exception as e:
        probe.operation_failed("update_user", str(e))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update user")
    return UserResponse.from_domain(user)


@router.delete(
    "/{user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=_ERROR_RESPONSES,
)
async def delete_user(
    user_id: str,
    service: Annotated[UserService, Depends(get_user_service)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> Response:
    """Delete a user.

    Raises:
        404 if the user does not exist
        500 for unexpected errors
    """
    user_id_obj = _parse_user_id(user_id)
    if user_id_obj is None:
        return _error(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)

    try:
        await service.delete_user(user_id_obj)
    except UserNotFoundError:
        return _error(status.HTTP_404_NOT_FOUND, USER_NOT_FOUND)
    except Exception as e:
        probe.operation_failed("delete_user", str(e))
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete user")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
