"""
List view state and its reducers.

``ListViewState`` holds everything one list page needs: the fetched
records, the search query, categorical filters, sort selection, page and
the loading/error flags. Reducers are pure: each returns a new state and
leaves its argument untouched.

Render pipeline:

    records ─▶ filter (query, filters) ─▶ sort (sort_by, sort_order) ─▶ page

Summary tiles are computed from ``state.records``, never from the filtered
list.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace

from bizdesk.services.list_filter import filter_records, is_active_filter
from bizdesk.services.list_sort import ASC, DESC, normalize_order, sort_records

DEFAULT_PER_PAGE = 10


@dataclass(frozen=True)
class ListViewState:
    records: tuple = ()
    query: str = ""
    filters: dict = field(default_factory=dict)
    sort_by: str | None = None
    sort_order: str = DESC
    page: int = 1
    per_page: int = DEFAULT_PER_PAGE
    loading: bool = False
    error: str | None = None


@dataclass(frozen=True)
class Page:
    items: list
    total: int
    page: int
    pages: int
    per_page: int

    def to_dict(self, render=None) -> dict:
        items = [render(r) for r in self.items] if render else list(self.items)
        return {
            "items": items,
            "total": self.total,
            "page": self.page,
            "pages": self.pages,
            "per_page": self.per_page,
        }


# ── Reducers ─────────────────────────────────────────────────────────────────


def start_loading(state: ListViewState) -> ListViewState:
    return replace(state, loading=True, error=None)


def records_loaded(state: ListViewState, records) -> ListViewState:
    return replace(state, records=tuple(records), loading=False, error=None)


def load_failed(state: ListViewState, message: str) -> ListViewState:
    return replace(state, loading=False, error=message)


def dismiss_error(state: ListViewState) -> ListViewState:
    return replace(state, error=None)


def set_query(state: ListViewState, query: str | None) -> ListViewState:
    return replace(state, query=query or "", page=1)


def set_filter(state: ListViewState, attr: str, value) -> ListViewState:
    filters = dict(state.filters)
    if is_active_filter(value):
        filters[attr] = value
    else:
        filters.pop(attr, None)
    return replace(state, filters=filters, page=1)


def set_sort(state: ListViewState, sort_by: str, order: str | None = None) -> ListViewState:
    """Select a sort column.

    With an explicit ``order`` it is applied as-is. Without one, selecting
    the current column toggles direction and a new column starts ascending.
    """
    if order is not None:
        return replace(state, sort_by=sort_by, sort_order=normalize_order(order))
    if sort_by == state.sort_by:
        return replace(state, sort_order=ASC if state.sort_order == DESC else DESC)
    return replace(state, sort_by=sort_by, sort_order=ASC)


def set_page(state: ListViewState, page: int, per_page: int | None = None) -> ListViewState:
    return replace(state, page=max(1, int(page)), per_page=per_page or state.per_page)


def record_added(state: ListViewState, record) -> ListViewState:
    return replace(state, records=(record,) + tuple(state.records))


def record_replaced(state: ListViewState, record) -> ListViewState:
    return replace(state, records=tuple(
        record if r.id == record.id else r for r in state.records
    ))


def record_removed(state: ListViewState, record_id) -> ListViewState:
    return replace(state, records=tuple(r for r in state.records if r.id != record_id))


# ── Derived views ────────────────────────────────────────────────────────────


def visible_records(state: ListViewState, spec) -> list:
    """Filtered and sorted records for ``spec``'s entity."""
    filtered = filter_records(state.records, state.query, state.filters, spec.searchable)
    return sort_records(filtered, spec.sort_key(state.sort_by), state.sort_order)


def paginate(records: list, page: int, per_page: int) -> Page:
    """Slice one page; ``page`` is clamped to the available range."""
    per_page = max(1, per_page)
    total = len(records)
    pages = max(1, math.ceil(total / per_page))
    page = min(max(1, page), pages)
    start = (page - 1) * per_page
    return Page(records[start:start + per_page], total, page, pages, per_page)


def current_page(state: ListViewState, spec) -> Page:
    return paginate(visible_records(state, spec), state.page, state.per_page)
