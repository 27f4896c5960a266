"""Unit tests for the directory ViewController."""

from __future__ import annotations

import asyncio
from dataclasses import replace
from datetime import UTC, datetime
from unittest.mock import Mock

import httpx
import pytest

from directory.application.observability import ViewControllerProbe
from directory.application.view_controller import (
    EMAIL_EXISTS,
    FETCH_FAILED,
    NETWORK_ERROR,
    USER_CREATED,
    USER_DELETED,
    USER_NOT_FOUND,
    USER_UPDATED,
    ModalMode,
    NotificationKind,
    ViewController,
)
from directory.domain.aggregates import User
from directory.domain.exceptions import UserValidationError
from directory.domain.validation import normalize_user
from directory.domain.value_objects import SortKey, UserId
from directory.infrastructure.api_client import DirectoryApiClient
from directory.ports.exceptions import (
    DuplicateEmailError,
    TransientFailureError,
    UserNotFoundError,
)
from infrastructure.settings import DirectorySettings


class FakeGateway:
    """In-memory IDirectoryGateway with scriptable failures."""

    def __init__(self, users: list[User] | None = None):
        self.users: list[User] = list(users or [])
        self.calls: list[str] = []
        self.fail_next: dict[str, Exception] = {}
        self._next_id = max((u.id.value for u in self.users), default=0) + 1

    def _maybe_fail(self, operation: str) -> None:
        self.calls.append(operation)
        error = self.fail_next.pop(operation, None)
        if error is not None:
            raise error

    async def list_users(self) -> list[User]:
        self._maybe_fail("list")
        return sorted(self.users, key=lambda u: u.created_at, reverse=True)

    async def get_user(self, user_id: UserId) -> User:
        self._maybe_fail("get")
        for user in self.users:
            if user.id == user_id:
                return user
        raise UserNotFoundError(user_id.value)

    async def create_user(self, payload) -> User:
        self._maybe_fail("create")
        draft = normalize_user(payload)
        if any(u.email == draft.email for u in self.users):
            raise DuplicateEmailError(draft.email)
        user = User(
            id=UserId(value=self._next_id),
            name=draft.name,
            surname=draft.surname,
            email=draft.email,
            sex=draft.sex.value if draft.sex else None,
            age=draft.age,
            created_at=datetime.now(UTC),
        )
        self._next_id += 1
        self.users.append(user)
        return user

    async def update_user(self, user_id: UserId, payload) -> User:
        self._maybe_fail("update")
        draft = normalize_user(payload)
        for index, user in enumerate(self.users):
            if user.id == user_id:
                updated = replace(
                    user,
                    name=draft.name,
                    surname=draft.surname,
                    email=draft.email,
                    sex=draft.sex.value if draft.sex else None,
                    age=draft.age,
                )
                self.users[index] = updated
                return updated
        raise UserNotFoundError(user_id.value)

    async def delete_user(self, user_id: UserId) -> None:
        self._maybe_fail("delete")
        before = len(self.users)
        self.users = [u for u in self.users if u.id != user_id]
        if len(self.users) == before:
            raise UserNotFoundError(user_id.value)


@pytest.fixture
def settings():
    return DirectorySettings(default_page_size=10, page_size_options=[5, 10, 25])


@pytest.fixture
def mock_probe():
    return Mock(spec=ViewControllerProbe)


@pytest.fixture
def gateway(make_user):
    return FakeGateway([make_user(i, name=f"User{i:02d}") for i in range(1, 13)])


@pytest.fixture
def controller(gateway, settings, mock_probe):
    return ViewController(gateway=gateway, settings=settings, probe=mock_probe)


NEW_USER = {"name": "Zed", "surname": "Zulu", "email": "zed@x.io", "sex": "", "age": ""}


class TestRefresh:
    """Tests for refresh."""

    @pytest.mark.asyncio
    async def test_loads_collection(self, controller):
        """Refresh replaces the loaded users and clears loading."""
        await controller.refresh()

        assert len(controller.snapshot.users) == 12
        assert controller.snapshot.users[0].id.value == 12
        assert not controller.snapshot.loading

    @pytest.mark.asyncio
    async def test_failure_keeps_previous_collection(self, controller, gateway):
        """A failed refresh leaves the last good collection on screen."""
        await controller.refresh()
        gateway.fail_next["list"] = TransientFailureError("boom")

        await controller.refresh()

        assert len(controller.snapshot.users) == 12
        assert controller.snapshot.notification.kind is NotificationKind.ERROR
        assert controller.snapshot.notification.message == FETCH_FAILED
        assert not controller.snapshot.loading

    @pytest.mark.asyncio
    async def test_only_newest_refresh_is_applied(self, controller, make_user, mock_probe):
        """A slow, older response does not overwrite a newer one."""
        release_first = asyncio.Event()
        first_users = [make_user(1)]
        second_users = [make_user(1), make_user(2)]
        responses = iter([first_users, second_users])

        async def list_users():
            users = next(responses)
            if users is first_users:
                await release_first.wait()
            return users

        controller._gateway = Mock(list_users=list_users)

        first = asyncio.create_task(controller.refresh())
        await asyncio.sleep(0)
        await controller.refresh()
        release_first.set()
        await first

        assert [u.id.value for u in controller.snapshot.users] == [1, 2]
        mock_probe.stale_response_ignored.assert_called_once_with("refresh")


class TestViewTransitions:
    """Tests for search, filter, sort and paging."""

    @pytest.mark.asyncio
    async def test_search_resets_to_first_page(self, controller):
        """Searching from page 2 goes back to page 1."""
        await controller.refresh()
        controller.change_page(2)

        controller.search("user1")

        assert controller.snapshot.view.page == 1
        result = controller.visible()
        # User10-12 by name, User01 by its email user1@example.com
        assert result.page.total_filtered == 4

    @pytest.mark.asyncio
    async def test_sort_by_toggles_direction(self, controller):
        """Clicking a column twice sorts descending."""
        await controller.refresh()

        controller.sort_by("name")
        assert controller.visible().rows[0].name == "User01"

        controller.sort_by(SortKey.NAME)
        assert controller.visible().rows[0].name == "User12"

    def test_change_page_size_rejects_unoffered_sizes(self, controller):
        """Only configured page sizes are accepted."""
        with pytest.raises(ValueError):
            controller.change_page_size(7)

    @pytest.mark.asyncio
    async def test_change_page_size(self, controller):
        """A new page size applies from page 1."""
        await controller.refresh()
        controller.change_page(2)

        controller.change_page_size(5)

        result = controller.visible()
        assert len(result.rows) == 5
        assert result.page.total_pages == 3
        assert controller.snapshot.view.page == 1

    @pytest.mark.asyncio
    async def test_visible_adopts_clamped_page(self, controller):
        """An out-of-range page is replaced by the last valid page."""
        await controller.refresh()
        controller.change_page(7)

        result = controller.visible()

        assert result.page.current_page == 2
        assert controller.snapshot.view.page == 2

    def test_uses_default_page_size_from_settings(self, gateway, mock_probe):
        """Fresh views start at the configured default page size."""
        settings = DirectorySettings(default_page_size=25, page_size_options=[10, 25])
        controller = ViewController(gateway=gateway, settings=settings, probe=mock_probe)

        assert controller.snapshot.view.page_size == 25
        assert controller.page_size_options == (10, 25)


class TestModal:
    """Tests for opening and closing the create/edit modal."""

    def test_open_create_starts_with_empty_form(self, controller):
        """Create mode has a blank form."""
        controller.open_create()

        modal = controller.snapshot.modal
        assert modal.mode is ModalMode.CREATE
        assert all(value == "" for value in modal.form.values())

    def test_open_edit_prefills_form(self, controller, make_user):
        """Edit mode shows the record's values."""
        user = make_user(3, name="Ann", age=0)

        controller.open_edit(user)

        modal = controller.snapshot.modal
        assert modal.mode is ModalMode.EDIT
        assert modal.form["name"] == "Ann"
        assert modal.form["age"] == "0"

    def test_each_open_gets_a_new_token(self, controller, make_user):
        """Reopening produces a distinct modal."""
        controller.open_create()
        first = controller.snapshot.modal.token
        controller.open_edit(make_user(1))

        assert controller.snapshot.modal.token != first

    def test_close_modal(self, controller):
        """Closing clears the modal."""
        controller.open_create()
        controller.close_modal()

        assert controller.snapshot.modal is None

    def test_edit_field_clears_that_fields_error(self, controller):
        """Typing in a field clears the error shown beside it."""
        controller.open_create()
        controller._snapshot = replace(
            controller.snapshot,
            modal=replace(
                controller.snapshot.modal,
                field_errors={"name": "Name is required", "email": "Email is required"},
            ),
        )

        controller.edit_field("name", "Ann")

        modal = controller.snapshot.modal
        assert modal.form["name"] == "Ann"
        assert modal.field_errors == {"email": "Email is required"}


class TestSubmit:
    """Tests for submit."""

    @pytest.mark.asyncio
    async def test_client_validation_blocks_network_call(self, controller, gateway):
        """Invalid forms never reach the gateway."""
        controller.open_create()

        saved = await controller.submit({"name": "", "surname": "Lee", "email": "bad"})

        assert not saved
        assert gateway.calls == []
        assert controller.snapshot.modal.field_errors == {
            "name": "Name is required",
            "email": "Email format is invalid",
        }

    @pytest.mark.asyncio
    async def test_create_success_closes_modal_and_refreshes(self, controller, gateway):
        """A successful create notifies, closes the modal and re-fetches."""
        await controller.refresh()
        controller.open_create()

        saved = await controller.submit(NEW_USER)

        assert saved
        assert controller.snapshot.modal is None
        assert controller.snapshot.notification.message == USER_CREATED
        assert len(controller.snapshot.users) == 13
        assert gateway.calls[-2:] == ["create", "list"]

    @pytest.mark.asyncio
    async def test_submits_normalized_payload(self, controller, gateway):
        """Trimmed strings, null optional fields."""
        controller.open_create()

        await controller.submit({**NEW_USER, "name": "  Zed  "})

        created = gateway.users[-1]
        assert created.name == "Zed"
        assert created.sex is None
        assert created.age is None

    @pytest.mark.asyncio
    async def test_edit_success(self, controller, gateway):
        """Edits go through update_user and report an update."""
        await controller.refresh()
        user = controller.snapshot.users[0]
        controller.open_edit(user)
        controller.edit_field("surname", "Changed")

        saved = await controller.submit()

        assert saved
        assert controller.snapshot.notification.message == USER_UPDATED
        assert "update" in gateway.calls
        assert controller.snapshot.users[0].surname == "Changed"

    @pytest.mark.asyncio
    async def test_duplicate_email_keeps_modal_open(self, controller, gateway):
        """409 shows a form-level message and keeps the input."""
        controller.open_create()

        saved = await controller.submit({**NEW_USER, "email": "user1@example.com"})

        assert not saved
        modal = controller.snapshot.modal
        assert modal is not None
        assert modal.submit_error == EMAIL_EXISTS
        assert modal.form["email"] == "user1@example.com"
        assert not modal.submitting

    @pytest.mark.asyncio
    async def test_server_validation_errors_map_to_fields(self, controller, gateway):
        """400 messages are shown beside the matching fields."""
        gateway.fail_next["create"] = UserValidationError(
            ["Email format is invalid", "Something unexpected"]
        )
        controller.open_create()

        await controller.submit(NEW_USER)

        modal = controller.snapshot.modal
        assert modal.field_errors == {"email": "Email format is invalid"}
        assert modal.submit_error == "Something unexpected"

    @pytest.mark.asyncio
    async def test_edit_of_deleted_user_closes_modal_and_refreshes(
        self, controller, gateway
    ):
        """404 on update: notify, close, re-fetch."""
        await controller.refresh()
        user = controller.snapshot.users[0]
        controller.open_edit(user)
        gateway.users = [u for u in gateway.users if u.id != user.id]

        saved = await controller.submit()

        assert not saved
        assert controller.snapshot.modal is None
        assert controller.snapshot.notification.message == USER_NOT_FOUND
        assert len(controller.snapshot.users) == 11

    @pytest.mark.asyncio
    async def test_network_failure_suggests_retry(self, controller, gateway):
        """Transient failures keep the modal open with a retry message."""
        gateway.fail_next["create"] = TransientFailureError("timeout")
        controller.open_create()

        saved = await controller.submit(NEW_USER)

        assert not saved
        assert controller.snapshot.modal.submit_error == NETWORK_ERROR

    @pytest.mark.asyncio
    async def test_response_for_closed_modal_is_not_applied(
        self, controller, gateway, mock_probe
    ):
        """A late failure does not reopen or alter a newer modal."""
        gateway.fail_next["create"] = DuplicateEmailError()
        controller.open_create()
        original_create = gateway.create_user

        async def create_then_switch(payload):
            controller.open_create()
            return await original_create(payload)

        gateway.create_user = create_then_switch

        await controller.submit(NEW_USER)

        assert controller.snapshot.modal.submit_error is None
        mock_probe.stale_response_ignored.assert_called_with("submit")

    @pytest.mark.asyncio
    async def test_second_submit_while_pending_is_ignored(self, controller, gateway):
        """Only one create request is sent while the first is in flight."""
        release = asyncio.Event()
        original_create = gateway.create_user

        async def slow_create(payload):
            await release.wait()
            return await original_create(payload)

        gateway.create_user = slow_create
        controller.open_create()

        first = asyncio.create_task(controller.submit(NEW_USER))
        await asyncio.sleep(0)
        assert controller.snapshot.modal.submitting

        second = await controller.submit(NEW_USER)
        release.set()

        assert second is False
        assert await first is True
        assert [u.email for u in gateway.users].count("zed@x.io") == 1
        assert controller.snapshot.notification.message == USER_CREATED

    @pytest.mark.asyncio
    async def test_submit_allowed_again_after_failure(self, controller, gateway):
        """A failed submit clears the pending flag so the user can retry."""
        gateway.fail_next["create"] = TransientFailureError("timeout")
        controller.open_create()

        assert not await controller.submit(NEW_USER)
        assert not controller.snapshot.modal.submitting

        assert await controller.submit(NEW_USER)

    @pytest.mark.asyncio
    async def test_undecodable_list_body_ends_loading(self, controller):
        """A 200 with an HTML body surfaces as a fetch failure, not a crash."""
        controller._gateway = DirectoryApiClient(
            client=httpx.AsyncClient(
                transport=httpx.MockTransport(
                    lambda request: httpx.Response(200, text="<html>proxy</html>")
                ),
                base_url="http://directory.test",
            )
        )

        await controller.refresh()

        assert not controller.snapshot.loading
        assert controller.snapshot.notification.message == FETCH_FAILED

    @pytest.mark.asyncio
    async def test_undecodable_create_body_keeps_modal_retryable(self, controller):
        """A 201 with an unusable body leaves the modal open and not submitting."""
        controller._gateway = DirectoryApiClient(
            client=httpx.AsyncClient(
                transport=httpx.MockTransport(
                    lambda request: httpx.Response(201, text="not json")
                ),
                base_url="http://directory.test",
            )
        )
        controller.open_create()

        saved = await controller.submit(NEW_USER)

        assert not saved
        assert not controller.snapshot.modal.submitting
        assert controller.snapshot.modal.submit_error == NETWORK_ERROR

    @pytest.mark.asyncio
    async def test_submit_without_modal_does_nothing(self, controller, gateway):
        """There is nothing to submit when no modal is open."""
        assert not await controller.submit(NEW_USER)
        assert gateway.calls == []


class TestDelete:
    """Tests for delete."""

    @pytest.mark.asyncio
    async def test_delete_success_refreshes(self, controller):
        """A deleted user disappears after the refresh."""
        await controller.refresh()

        deleted = await controller.delete(UserId(value=12))

        assert deleted
        assert controller.snapshot.notification.message == USER_DELETED
        assert all(u.id.value != 12 for u in controller.snapshot.users)

    @pytest.mark.asyncio
    async def test_deleting_last_row_of_last_page_moves_back(self, controller):
        """The view lands on the new last page."""
        await controller.refresh()
        controller.change_page_size(5)
        controller.change_page(3)
        assert len(controller.visible().rows) == 2

        await controller.delete(UserId(value=1))
        await controller.delete(UserId(value=2))

        result = controller.visible()
        assert result.page.current_page == 2
        assert controller.snapshot.view.page == 2

    @pytest.mark.asyncio
    async def test_missing_user_notifies_and_refreshes(self, controller, gateway):
        """Deleting an already-deleted user is reported, then the table syncs."""
        await controller.refresh()
        gateway.users = gateway.users[1:]

        deleted = await controller.delete(UserId(value=1))

        assert not deleted
        assert controller.snapshot.notification.message == USER_NOT_FOUND
        assert len(controller.snapshot.users) == 11

    @pytest.mark.asyncio
    async def test_network_failure_keeps_collection(self, controller, gateway):
        """A failed delete changes nothing on screen."""
        await controller.refresh()
        gateway.fail_next["delete"] = TransientFailureError("down")

        deleted = await controller.delete(UserId(value=3))

        assert not deleted
        assert len(controller.snapshot.users) == 12
        assert controller.snapshot.notification.message == NETWORK_ERROR

    def test_dismiss_notification(self, controller):
        """Dismissing clears the notification."""
        controller._notify(NotificationKind.SUCCESS, "done")

        controller.dismiss_notification()

        assert controller.snapshot.notification is None
