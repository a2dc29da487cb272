"""
List sort stage — type-aware ordering by a selected key.

Each sortable column is described by a ``SortKey``:

    StringKey   → ``''`` default, lower-cased, locale-aware collation
    NumericKey  → float parse, ``0`` default
    DateKey     → epoch milliseconds, ``0`` (oldest) when missing

Descending order reverses the comparison. There is no secondary tie-break:
``sorted`` is stable, so tied records keep their incoming order in both
directions.
"""

from __future__ import annotations

import locale
from collections.abc import Iterable

from bizdesk.utils.helpers import as_number, as_text, to_epoch_millis

ASC = "asc"
DESC = "desc"
SORT_ORDERS = (ASC, DESC)


class SortKey:
    """Comparable projection of one record attribute."""

    def __init__(self, attr: str) -> None:
        self.attr = attr

    def value(self, record):
        raise NotImplementedError

    def __call__(self, record):
        return self.value(getattr(record, self.attr, None))

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.attr}>"


class StringKey(SortKey):
    def value(self, raw):
        return locale.strxfrm(as_text(raw).lower())


class NumericKey(SortKey):
    def value(self, raw):
        return as_number(raw, default=0)


class DateKey(SortKey):
    def value(self, raw):
        return to_epoch_millis(raw, default=0)


def normalize_order(order: str | None, default: str = ASC) -> str:
    order = (order or "").lower()
    return order if order in SORT_ORDERS else default


def sort_records(records: Iterable, key: SortKey | None, order: str = ASC) -> list:
    """Return a new list ordered by ``key``; ``key=None`` keeps input order."""
    items = list(records)
    if key is None:
        return items
    items.sort(key=key, reverse=normalize_order(order) == DESC)
    return items
