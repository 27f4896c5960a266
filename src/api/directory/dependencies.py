"""FastAPI dependencies for the directory bounded context."""

from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from directory.application.observability import (
    DefaultUserServiceProbe,
    UserServiceProbe,
)
from directory.application.services import UserService
from directory.infrastructure.observability import DefaultUserRepositoryProbe
from directory.infrastructure.user_repository import UserRepository
from infrastructure.database.dependencies import get_session
from infrastructure.observability import ObservationContext


def get_observation_context(
    request: Request,
    x_request_id: Annotated[str | None, Header()] = None,
) -> ObservationContext:
    """Build the context every directory probe logs with for this request.

    Args:
        request: Incoming request
        x_request_id: Correlation id from the caller; generated if absent

    Returns:
        ObservationContext carrying the request id, method and path
    """
    return ObservationContext(
        request_id=x_request_id or uuid4().hex,
        method=request.method,
        path=request.url.path,
    )


def get_user_service_probe(
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> UserServiceProbe:
    """Get a UserServiceProbe bound to the request context."""
    return DefaultUserServiceProbe().with_context(context)


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> UserRepository:
    """Get UserRepository instance.

    Args:
        session: Async database session
        context: Request observation context for the repository probe

    Returns:
        UserRepository bound to the request's session
    """
    return UserRepository(
        session=session,
        probe=DefaultUserRepositoryProbe().with_context(context),
    )


def get_user_service(
    user_repo: Annotated[UserRepository, Depends(get_user_repository)],
    session: Annotated[AsyncSession, Depends(get_session)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        user_repo: User repository (shares session via FastAPI dependency caching)
        session: Database session for transaction management
        probe: User service probe for observability

    Returns:
        UserService instance
    """
    return UserService(user_repository=user_repo, session=session, probe=probe)
