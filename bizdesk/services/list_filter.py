"""
List filter stage — free-text search AND categorical filters.

Text match: the query is lower-cased once; a record matches when any of its
searchable fields (``None`` read as ``''``, lower-cased) contains it. An
empty query matches everything.

Categorical match: every active filter requires exact, case-sensitive
equality with the stored value. ``"all"``, ``""`` and ``None`` mean the
filter is off.

The result keeps input order and is always a subset of the input.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from bizdesk.utils.helpers import as_text

ALL = "all"


def is_active_filter(value) -> bool:
    return value is not None and value != "" and value != ALL


def matches_query(record, needle: str, searchable: Sequence[str]) -> bool:
    """True when ``needle`` (already lower-cased) occurs in a searchable field."""
    if not needle:
        return True
    for attr in searchable:
        if needle in as_text(getattr(record, attr, None)).lower():
            return True
    return False


def matches_filters(record, filters: Mapping[str, object]) -> bool:
    for attr, wanted in filters.items():
        if not is_active_filter(wanted):
            continue
        if getattr(record, attr, None) != wanted:
            return False
    return True


def filter_records(
    records: Iterable,
    query: str | None,
    filters: Mapping[str, object] | None,
    searchable: Sequence[str],
) -> list:
    """Return the records matching ``query`` and every active filter."""
    needle = as_text(query).lower()
    filters = filters or {}
    return [
        r for r in records
        if matches_query(r, needle, searchable) and matches_filters(r, filters)
    ]
