"""HTTP implementation of IDirectoryGateway.

Used by the view controller to reach the directory API. Every transport
outcome is mapped onto the directory error taxonomy so the controller
never has to look at status codes.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from directory.domain.aggregates import User
from directory.domain.exceptions import UserValidationError
from directory.domain.value_objects import UserId
from directory.infrastructure.observability import (
    DefaultDirectoryGatewayProbe,
    DirectoryGatewayProbe,
)
from directory.ports.exceptions import (
    DuplicateEmailError,
    TransientFailureError,
    UserNotFoundError,
)
from directory.ports.repositories import IDirectoryGateway
from infrastructure.settings import DirectorySettings

USERS_PATH = "/api/users"
NETWORK_ERROR = "Network error. Please try again."
MALFORMED_RESPONSE = "Unexpected response from server"


class UserRecord(BaseModel):
    """User JSON as returned by the directory API."""

    id: int
    name: str
    surname: str
    email: str
    created_at: datetime
    sex: str | None = None
    age: int | None = None

    def to_domain(self) -> User:
        return User(
            id=UserId(value=self.id),
            name=self.name,
            surname=self.surname,
            email=self.email,
            created_at=self.created_at,
            sex=self.sex,
            age=self.age,
        )


_USER_LIST = TypeAdapter(list[UserRecord])


class DirectoryApiClient(IDirectoryGateway):
    """Directory gateway speaking the REST contract over httpx."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        probe: DirectoryGatewayProbe | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            client: AsyncClient whose base_url points at the directory API
            probe: Optional domain probe for observability
        """
        self._client = client
        self._probe = probe or DefaultDirectoryGatewayProbe()

    @classmethod
    def from_settings(cls, settings: DirectorySettings) -> DirectoryApiClient:
        """Build a gateway with its own AsyncClient from settings."""
        client = httpx.AsyncClient(
            base_url=settings.api_url,
            timeout=settings.api_timeout_seconds,
        )
        return cls(client=client)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Mapping[str, Any] | None = None,
        user_id: UserId | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                path,
                json=dict(payload) if payload is not None else None,
            )
        except httpx.HTTPError as e:
            self._probe.request_failed(method, path, str(e))
            raise TransientFailureError(NETWORK_ERROR) from e

        if response.is_success:
            return response

        body = _json_body(response)
        if response.status_code == 400 and isinstance(body.get("errors"), list):
            raise UserValidationError([str(error) for error in body["errors"]])
        if response.status_code == 404:
            raise UserNotFoundError(user_id.value if user_id else path)
        if response.status_code == 409:
            raise DuplicateEmailError()

        self._probe.unexpected_status(method, path, response.status_code)
        raise TransientFailureError(
            body.get("error") or f"Request failed with status {response.status_code}"
        )

    def _malformed(
        self, response: httpx.Response, error: ValidationError
    ) -> TransientFailureError:
        request = response.request
        self._probe.malformed_response(request.method, request.url.path, str(error))
        return TransientFailureError(MALFORMED_RESPONSE)

    def _decode_user(self, response: httpx.Response) -> User:
        """Parse a single record; undecodable bodies are transient failures."""
        try:
            return UserRecord.model_validate_json(response.content).to_domain()
        except ValidationError as e:
            raise self._malformed(response, e) from e

    def _decode_users(self, response: httpx.Response) -> list[User]:
        try:
            records = _USER_LIST.validate_json(response.content)
            return [record.to_domain() for record in records]
        except ValidationError as e:
            raise self._malformed(response, e) from e

    async def list_users(self) -> list[User]:
        response = await self._request("GET", USERS_PATH)
        return self._decode_users(response)

    async def get_user(self, user_id: UserId) -> User:
        response = await self._request(
            "GET", f"{USERS_PATH}/{user_id.value}", user_id=user_id
        )
        return self._decode_user(response)

    async def create_user(self, payload: Mapping[str, Any]) -> User:
        response = await self._request("POST", USERS_PATH, payload=payload)
        return self._decode_user(response)

    async def update_user(self, user_id: UserId, payload: Mapping[str, Any]) -> User:
        response = await self._request(
            "PUT", f"{USERS_PATH}/{user_id.value}", payload=payload, user_id=user_id
        )
        return self._decode_user(response)

    async def delete_user(self, user_id: UserId) -> None:
        await self._request("DELETE", f"{USERS_PATH}/{user_id.value}", user_id=user_id)


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
