"""
Notification inbox — current-user notification operations.

Each operation calls the collaborator first and only then updates the local
list state (no re-fetch). A failed call leaves the records untouched and
sets the error banner.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from bizdesk.core.exceptions import CollaboratorError, user_message
from bizdesk.services import view_state
from bizdesk.services.aggregation import unread_count
from bizdesk.services.normalizer import normalize_many, normalize_notification
from bizdesk.services.payloads import NOTIFICATION_FORM, build_payload

logger = logging.getLogger(__name__)


def load_inbox(api, state: view_state.ListViewState | None = None) -> view_state.ListViewState:
    state = view_state.start_loading(state or view_state.ListViewState())
    try:
        raws = api.get_my_notifications()
    except CollaboratorError as exc:
        logger.warning("Loading notifications failed: %s", exc)
        return view_state.load_failed(state, user_message(exc, "Failed to load notifications"))
    return view_state.records_loaded(state, normalize_many(normalize_notification, raws))


def mark_read(api, state: view_state.ListViewState, notification_id: int) -> view_state.ListViewState:
    try:
        api.mark_my_notification_as_read(notification_id)
    except CollaboratorError as exc:
        logger.warning("Mark notification %s read failed: %s", notification_id, exc)
        return replace(state, error=user_message(exc, "Failed to mark notification as read"))
    return replace(state, records=tuple(
        replace(n, is_read=True) if n.id == notification_id else n for n in state.records
    ))


def mark_all_read(api, state: view_state.ListViewState) -> view_state.ListViewState:
    try:
        api.mark_all_my_notifications_as_read()
    except CollaboratorError as exc:
        logger.warning("Mark all notifications read failed: %s", exc)
        return replace(state, error=user_message(exc, "Failed to mark notifications as read"))
    return replace(state, records=tuple(replace(n, is_read=True) for n in state.records))


def delete_mine(api, state: view_state.ListViewState, notification_id: int) -> view_state.ListViewState:
    try:
        api.delete_my_notification(notification_id)
    except CollaboratorError as exc:
        logger.warning("Delete notification %s failed: %s", notification_id, exc)
        return replace(state, error=user_message(exc, "Failed to delete notification"))
    return view_state.record_removed(state, notification_id)


def send_to_user(api, values: dict):
    """Validate and send one notification; returns the normalized record."""
    payload = build_payload(NOTIFICATION_FORM, values)
    raw = api.send_notification_to_user(payload)
    return normalize_notification(raw or payload)


def inbox_payload(state: view_state.ListViewState, render) -> dict:
    return {
        "items": [render(n) for n in state.records],
        "unread": unread_count(state.records),
        "error": state.error,
    }
