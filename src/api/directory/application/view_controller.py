"""Client-side view controller for the user directory.

Holds a single immutable `ViewSnapshot` and replaces it on every change, so
a renderer can read `controller.snapshot` at any time and get a consistent
picture. All I/O goes through an `IDirectoryGateway`; the query pipeline and
the field rules are the same pure functions the API uses.

Responses can arrive out of order. Each refresh takes a sequence number and
only the newest refresh is applied; each opened modal takes a token and a
submit response is only applied to the modal it was sent from.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from directory.application.observability import (
    DefaultViewControllerProbe,
    ViewControllerProbe,
)
from directory.domain.aggregates import User
from directory.domain.exceptions import UserValidationError
from directory.domain.query import QueryResult, ViewState, run_query
from directory.domain.validation import (
    collect_field_errors,
    field_for_message,
    normalize_user,
)
from directory.domain.value_objects import SortKey, UserId
from directory.ports.exceptions import (
    DuplicateEmailError,
    TransientFailureError,
    UserNotFoundError,
)
from directory.ports.repositories import IDirectoryGateway
from infrastructure.settings import DirectorySettings, get_directory_settings

USER_CREATED = "User created successfully!"
USER_UPDATED = "User updated successfully!"
USER_DELETED = "User deleted successfully!"
USER_NOT_FOUND = "User not found"
EMAIL_EXISTS = "Email already exists"
NETWORK_ERROR = "Network error. Please try again."
FETCH_FAILED = "Failed to fetch users"

EMPTY_FORM: Mapping[str, str] = {
    "name": "",
    "surname": "",
    "email": "",
    "sex": "",
    "age": "",
}


class NotificationKind(StrEnum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A transient message shown above the table."""

    kind: NotificationKind
    message: str


class ModalMode(StrEnum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class ModalState:
    """The open create/edit form.

    `field_errors` maps a form field to the message shown beside it;
    `submit_error` is a form-level message (duplicate email, network).
    """

    mode: ModalMode
    token: int
    form: Mapping[str, Any] = field(default_factory=lambda: dict(EMPTY_FORM))
    user: User | None = None
    field_errors: Mapping[str, str] = field(default_factory=dict)
    submit_error: str | None = None
    submitting: bool = False


@dataclass(frozen=True)
class ViewSnapshot:
    """Everything the directory screen renders from."""

    users: tuple[User, ...] = ()
    view: ViewState = field(default_factory=ViewState)
    modal: ModalState | None = None
    notification: Notification | None = None
    loading: bool = False


class ViewController:
    """Orchestrates user intent against the directory gateway."""

    def __init__(
        self,
        gateway: IDirectoryGateway,
        settings: DirectorySettings | None = None,
        probe: ViewControllerProbe | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            gateway: Client-side access to the directory API
            settings: Page size defaults; loaded from the environment if omitted
            probe: Optional domain probe for observability
        """
        settings = settings or get_directory_settings()
        self._gateway = gateway
        self._probe = probe or DefaultViewControllerProbe()
        self._page_size_options = tuple(settings.page_size_options)
        self._snapshot = ViewSnapshot(
            view=ViewState(page_size=settings.default_page_size)
        )
        self._refresh_seq = 0
        self._modal_seq = 0

    @property
    def snapshot(self) -> ViewSnapshot:
        return self._snapshot

    @property
    def page_size_options(self) -> tuple[int, ...]:
        return self._page_size_options

    def _update(self, **changes: Any) -> None:
        self._snapshot = replace(self._snapshot, **changes)

    def _notify(self, kind: NotificationKind, message: str) -> None:
        self._update(notification=Notification(kind=kind, message=message))

    def _update_modal(self, token: int, **changes: Any) -> bool:
        """Apply changes to the modal only if it is still the one with `token`."""
        modal = self._snapshot.modal
        if modal is None or modal.token != token:
            self._probe.stale_response_ignored("submit")
            return False
        self._update(modal=replace(modal, **changes))
        return True

    # Collection

    async def refresh(self) -> None:
        """Re-fetch the full collection.

        On failure the previously loaded users stay on screen and an error
        notification is set. Only the most recently started refresh is
        applied; older responses are dropped.
        """
        self._refresh_seq += 1
        seq = self._refresh_seq
        self._update(loading=True)

        try:
            users = await self._gateway.list_users()
        except TransientFailureError as e:
            if seq != self._refresh_seq:
                self._probe.stale_response_ignored("refresh")
                return
            self._probe.refresh_failed(str(e))
            self._update(loading=False)
            self._notify(NotificationKind.ERROR, FETCH_FAILED)
            return

        if seq != self._refresh_seq:
            self._probe.stale_response_ignored("refresh")
            return
        self._update(users=tuple(users), loading=False)

    # View state transitions

    def search(self, term: str) -> None:
        self._update(view=self._snapshot.view.with_search(term))

    def filter_sex(self, value: str) -> None:
        self._update(view=self._snapshot.view.with_sex_filter(value))

    def sort_by(self, key: SortKey | str) -> None:
        self._update(view=self._snapshot.view.with_sort(SortKey(key)))

    def change_page(self, page: int) -> None:
        self._update(view=self._snapshot.view.with_page(page))

    def change_page_size(self, page_size: int) -> None:
        """Switch rows per page and go back to page 1.

        Raises:
            ValueError: If the size is not one of the offered options
        """
        if page_size not in self._page_size_options:
            raise ValueError(
                f"Page size {page_size} is not one of {self._page_size_options}"
            )
        self._update(view=self._snapshot.view.with_page_size(page_size))

    def visible(self) -> QueryResult:
        """Run the query pipeline over the loaded users.

        If the requested page no longer exists (for example after a delete
        emptied the last page) the pipeline clamps it and the clamped page
        becomes the current page.
        """
        view = self._snapshot.view
        result = run_query(self._snapshot.users, view)
        if result.page.current_page != view.page:
            self._update(view=view.with_page(result.page.current_page))
        return result

    # Modal

    def open_create(self) -> None:
        self._modal_seq += 1
        self._update(modal=ModalState(mode=ModalMode.CREATE, token=self._modal_seq))

    def open_edit(self, user: User) -> None:
        self._modal_seq += 1
        self._update(
            modal=ModalState(
                mode=ModalMode.EDIT,
                token=self._modal_seq,
                form=user.as_form(),
                user=user,
            )
        )

    def close_modal(self) -> None:
        self._update(modal=None)

    def edit_field(self, name: str, value: Any) -> None:
        """Change one form value and clear the error shown beside it."""
        modal = self._snapshot.modal
        if modal is None:
            return
        field_errors = {k: v for k, v in modal.field_errors.items() if k != name}
        self._update(
            modal=replace(
                modal,
                form={**modal.form, name: value},
                field_errors=field_errors,
                submit_error=None,
            )
        )

    async def submit(self, form: Mapping[str, Any] | None = None) -> bool:
        """Validate and send the open form.

        Field rule violations are shown in the modal without any request
        being made. Otherwise the record is created or updated through the
        gateway; on success the modal closes, a success notification is set
        and the collection is refreshed.

        Args:
            form: Values to submit; defaults to the modal's current form

        While a submit from the same modal is in flight, further submits are
        ignored.

        Returns:
            True if the record was saved
        """
        modal = self._snapshot.modal
        if modal is None or modal.submitting:
            return False

        values = dict(form) if form is not None else dict(modal.form)
        errors = collect_field_errors(values)
        if errors:
            field_errors: dict[str, str] = {}
            for error in errors:
                field_errors.setdefault(error.field, error.message)
            self._probe.submit_rejected([error.message for error in errors])
            self._update(
                modal=replace(
                    modal, form=values, field_errors=field_errors, submit_error=None
                )
            )
            return False

        payload = normalize_user(values).to_payload()
        token = modal.token
        self._update(
            modal=replace(
                modal,
                form=values,
                field_errors={},
                submit_error=None,
                submitting=True,
            )
        )

        try:
            if modal.mode is ModalMode.EDIT and modal.user is not None:
                user = await self._gateway.update_user(modal.user.id, payload)
            else:
                user = await self._gateway.create_user(payload)
        except UserValidationError as e:
            self._probe.submit_rejected(e.errors)
            self._update_modal(token, submitting=False, **_server_errors(e.errors))
            return False
        except DuplicateEmailError:
            self._probe.submit_rejected([EMAIL_EXISTS])
            self._update_modal(token, submitting=False, submit_error=EMAIL_EXISTS)
            return False
        except UserNotFoundError:
            self._probe.submit_rejected([USER_NOT_FOUND])
            if self._update_modal(token, submitting=False):
                self.close_modal()
            self._notify(NotificationKind.ERROR, USER_NOT_FOUND)
            await self.refresh()
            return False
        except TransientFailureError:
            self._probe.submit_rejected([NETWORK_ERROR])
            self._update_modal(token, submitting=False, submit_error=NETWORK_ERROR)
            return False

        created = modal.mode is ModalMode.CREATE
        self._probe.user_saved(user.id.value, created=created)
        if self._update_modal(token, submitting=False):
            self.close_modal()
        self._notify(
            NotificationKind.SUCCESS, USER_CREATED if created else USER_UPDATED
        )
        await self.refresh()
        return True

    async def delete(self, user_id: UserId) -> bool:
        """Delete a user and refresh.

        A user that is already gone produces an error notification and a
        refresh, so the stale row disappears. Network failures leave the
        collection untouched.

        Returns:
            True if the user was deleted
        """
        try:
            await self._gateway.delete_user(user_id)
        except UserNotFoundError:
            self._probe.delete_failed(user_id.value, USER_NOT_FOUND)
            self._notify(NotificationKind.ERROR, USER_NOT_FOUND)
            await self.refresh()
            return False
        except TransientFailureError as e:
            self._probe.delete_failed(user_id.value, str(e))
            self._notify(NotificationKind.ERROR, NETWORK_ERROR)
            return False

        self._notify(NotificationKind.SUCCESS, USER_DELETED)
        await self.refresh()
        return True

    def dismiss_notification(self) -> None:
        self._update(notification=None)


def _server_errors(messages: list[str]) -> dict[str, Any]:
    """Split API validation messages into per-field and form-level errors."""
    field_errors: dict[str, str] = {}
    unmatched: list[str] = []
    for message in messages:
        name = field_for_message(message)
        if name is None:
            unmatched.append(message)
        else:
            field_errors.setdefault(name, message)
    return {
        "field_errors": field_errors,
        "submit_error": "; ".join(unmatched) or None,
    }
