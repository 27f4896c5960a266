"""View pipeline: search, filter, sort and paginate a user collection.

`run_query` is a pure function of the collection and a `ViewState`. It keeps
no state between calls and never raises, so callers simply re-run it after
any change to the collection or to the view state.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import StrEnum
from typing import Any

from directory.domain.aggregates import User
from directory.domain.value_objects import SortDirection, SortKey, SortSpec

DEFAULT_PAGE_SIZE = 10


@dataclass(frozen=True)
class ViewState:
    """Everything the user has chosen about how the directory is displayed.

    Instances are immutable; each transition returns a new state. Changing
    the search term, the sex filter or the page size goes back to page 1.
    Changing the sort keeps the current page.
    """

    search: str = ""
    sex_filter: str = ""
    sort: SortSpec = field(default_factory=SortSpec)
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def with_search(self, term: str) -> ViewState:
        return replace(self, search=term, page=1)

    def with_sex_filter(self, sex: str) -> ViewState:
        return replace(self, sex_filter=sex, page=1)

    def with_page_size(self, page_size: int) -> ViewState:
        return replace(self, page_size=page_size, page=1)

    def with_sort(self, key: SortKey) -> ViewState:
        return replace(self, sort=self.sort.select(key))

    def with_page(self, page: int) -> ViewState:
        return replace(self, page=page)


class EmptyState(StrEnum):
    """Why a result has no rows."""

    NO_USERS = "no_users"
    NO_MATCHES = "no_matches"


@dataclass(frozen=True)
class PageInfo:
    """Counts needed to render the pager and the "Showing ..." line."""

    total_filtered: int
    total_all: int
    current_page: int
    total_pages: int
    page_size: int

    @property
    def has_previous(self) -> bool:
        return self.current_page > 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


@dataclass(frozen=True)
class QueryResult:
    """The visible slice of the directory plus its page metadata."""

    rows: tuple[User, ...]
    page: PageInfo

    @property
    def empty_state(self) -> EmptyState | None:
        if self.page.total_all == 0:
            return EmptyState.NO_USERS
        if self.page.total_filtered == 0:
            return EmptyState.NO_MATCHES
        return None

    def summary(self) -> str:
        """Render e.g. "Showing 10 of 12 users (filtered from 40 total)"."""
        text = f"Showing {len(self.rows)} of {self.page.total_filtered} users"
        if self.page.total_filtered != self.page.total_all:
            text += f" (filtered from {self.page.total_all} total)"
        return text


def _field(record: User, key: SortKey) -> Any:
    if key is SortKey.ID:
        return record.id.value
    return getattr(record, key.value, None)


def _matches_search(record: User, term: str) -> bool:
    if not term:
        return True
    return any(
        term in (value or "").lower()
        for value in (record.name, record.surname, record.email)
    )


def _numeric_sort_value(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


def _text_sort_value(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value).lower()


def _sort(records: list[User], spec: SortSpec) -> list[User]:
    if spec.key is None:
        return records

    key = spec.key

    def sort_value(record: User) -> float | str:
        value = _field(record, key)
        if key.is_numeric:
            return _numeric_sort_value(value)
        return _text_sort_value(value)

    # sorted() is stable in both directions: ties keep their incoming order
    return sorted(
        records,
        key=sort_value,
        reverse=spec.direction == SortDirection.DESC,
    )


def run_query(records: Sequence[User], state: ViewState) -> QueryResult:
    """Derive the visible page of the directory.

    Stages run in order: search (name, surname, email; case-insensitive),
    sex filter (exact match on the stored value), sort, paginate.

    The requested page is clamped into [1, total_pages]; the clamped value
    is reported in `PageInfo.current_page` so the caller can adopt it. An
    empty result still has one (empty) page.

    Args:
        records: Full collection, newest first as returned by the store
        state: Current view state

    Returns:
        QueryResult with the visible rows and page metadata
    """
    term = state.search.lower()
    filtered = [
        record
        for record in records
        if _matches_search(record, term)
        and (not state.sex_filter or record.sex == state.sex_filter)
    ]

    ordered = _sort(filtered, state.sort)

    page_size = max(1, state.page_size)
    total_pages = max(1, math.ceil(len(ordered) / page_size))
    current_page = min(max(1, state.page), total_pages)
    start = (current_page - 1) * page_size

    return QueryResult(
        rows=tuple(ordered[start : start + page_size]),
        page=PageInfo(
            total_filtered=len(ordered),
            total_all=len(records),
            current_page=current_page,
            total_pages=total_pages,
            page_size=page_size,
        ),
    )
