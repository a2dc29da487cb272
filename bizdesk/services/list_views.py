"""
List view service — one list page per request.

Builds a ``ListViewState`` from query arguments, fetches the full record
list from the entity's collaborator (no server-side pagination), runs the
filter → sort → paginate pipeline and computes the summary tiles over the
unfiltered records.

Query args:
    q           free-text search
    <filter>    entity categorical filters (e.g. status, role, category)
    sort_by     column name, camelCase or snake_case
    sort_order  asc | desc
    page        1-based page number
    per_page    page size (capped at MAX_PAGE_SIZE)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from bizdesk.core.exceptions import CollaboratorError, user_message
from bizdesk.services import view_state
from bizdesk.services.aggregation import tiles_payload
from bizdesk.services.list_sort import normalize_order
from bizdesk.services.normalizer import normalize_many, render_record

logger = logging.getLogger(__name__)


def _int_arg(args: Mapping, name: str, default: int) -> int:
    try:
        return int(args.get(name, default))
    except (TypeError, ValueError):
        return default


def state_from_args(spec, args: Mapping, *, default_per_page: int = 10,
                    max_per_page: int = 100) -> view_state.ListViewState:
    sort_by = args.get("sort_by") or spec.default_sort
    if spec.sort_key(sort_by) is None:
        sort_by = spec.default_sort
    per_page = min(max(1, _int_arg(args, "per_page", default_per_page)), max_per_page)
    return view_state.ListViewState(
        query=(args.get("q") or "").strip(),
        filters=spec.parse_filters(args),
        sort_by=sort_by,
        sort_order=normalize_order(args.get("sort_order"), spec.default_order),
        page=max(1, _int_arg(args, "page", 1)),
        per_page=per_page,
    )


def load_records(spec, api, state: view_state.ListViewState) -> view_state.ListViewState:
    """Fetch and normalize every record; failures land in ``state.error``."""
    state = view_state.start_loading(state)
    try:
        raws = api.get_all()
    except CollaboratorError as exc:
        logger.warning("Loading %s failed: %s", spec.name, exc, extra={"entity": spec.name})
        return view_state.load_failed(state, user_message(exc, f"Failed to load {spec.name}"))
    return view_state.records_loaded(state, normalize_many(spec.normalize, raws))


def list_view(spec, api, args: Mapping, **limits) -> tuple[dict, view_state.ListViewState]:
    """Run the whole pipeline; returns ``(payload, state)``."""
    state = load_records(spec, api, state_from_args(spec, args, **limits))
    page = view_state.current_page(state, spec)
    payload = page.to_dict(render_record)
    payload.update({
        "query": state.query,
        "filters": state.filters,
        "sort_by": state.sort_by,
        "sort_order": state.sort_order,
        "tiles": tiles_payload(spec.tiles(state.records)) if spec.tiles else [],
        "error": state.error,
    })
    return payload, state


def summary_view(spec, api) -> dict:
    state = load_records(spec, api, view_state.ListViewState())
    return {
        "entity": spec.name,
        "total": len(state.records),
        "tiles": tiles_payload(spec.tiles(state.records)) if spec.tiles else [],
        "error": state.error,
    }
