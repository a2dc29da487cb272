"""
bizdesk — Business Dashboard BFF
Notification inbox Blueprint.

Provides:
    - Current user's inbox with unread count
    - Mark one / all as read
    - Delete from the inbox
    - Admin send-to-user
"""

from __future__ import annotations

import logging

from flask import Blueprint, jsonify

from bizdesk.blueprints import collaborators, json_body
from bizdesk.services import notifications
from bizdesk.services.normalizer import render_record
from bizdesk.utils.errors import E, api_error

logger = logging.getLogger(__name__)

notification_bp = Blueprint("notification_bp", __name__, url_prefix="/api/v1")


def _inbox_response(state):
    if state.error:
        return api_error(E.UPSTREAM, state.error)
    return jsonify(notifications.inbox_payload(state, render_record))


@notification_bp.route("/me/notifications", methods=["GET"])
def my_notifications():
    state = notifications.load_inbox(collaborators()["notifications"])
    return _inbox_response(state)


@notification_bp.route("/me/notifications/<int:notification_id>/read", methods=["POST"])
def mark_read(notification_id):
    api = collaborators()["notifications"]
    state = notifications.load_inbox(api)
    if not state.error:
        state = notifications.mark_read(api, state, notification_id)
    return _inbox_response(state)


@notification_bp.route("/me/notifications/read-all", methods=["POST"])
def mark_all_read():
    api = collaborators()["notifications"]
    state = notifications.load_inbox(api)
    if not state.error:
        state = notifications.mark_all_read(api, state)
    return _inbox_response(state)


@notification_bp.route("/me/notifications/<int:notification_id>/delete", methods=["POST"])
def delete_mine(notification_id):
    api = collaborators()["notifications"]
    state = notifications.load_inbox(api)
    if not state.error:
        state = notifications.delete_mine(api, state, notification_id)
    return _inbox_response(state)


@notification_bp.route("/notifications/send", methods=["POST"])
def send_notification():
    """Send one notification to a user (validated locally first)."""
    record = notifications.send_to_user(collaborators()["notifications"], json_body())
    logger.info("Notification sent to user %s", record.user_id,
                extra={"entity": "notifications", "record_id": record.id})
    return jsonify({"item": render_record(record), "message": "Notification sent"}), 201
