"""Standardised API error responses.

Every failing route answers with the same JSON shape, which the dashboard
shows in its dismissible error banner:

    {"error": "<message>", "code": "ERR_...", "details": {...}}

Usage
-----
    from bizdesk.utils.errors import api_error, error_response, E

    return api_error(E.UPSTREAM, "Failed to load projects")
    return error_response(exc)      # any bizdesk.core.exceptions type
"""

from __future__ import annotations

from flask import jsonify

from bizdesk.core.exceptions import (
    CollaboratorError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
    user_message,
)


class E:
    """Machine-readable error codes."""

    VALIDATION_REQUIRED = "ERR_VALIDATION_REQUIRED"
    VALIDATION_INVALID = "ERR_VALIDATION_INVALID"
    NOT_FOUND = "ERR_NOT_FOUND"
    FORBIDDEN = "ERR_FORBIDDEN"
    UPSTREAM = "ERR_UPSTREAM"
    INTERNAL = "ERR_INTERNAL"


_STATUS_FOR_CODE: dict[str, int] = {
    E.VALIDATION_REQUIRED: 400,
    E.VALIDATION_INVALID: 400,
    E.NOT_FOUND: 404,
    E.FORBIDDEN: 403,
    E.UPSTREAM: 502,
    E.INTERNAL: 500,
}


def api_error(
    code: str,
    message: str,
    *,
    status: int | None = None,
    details: dict | None = None,
):
    """Build ``(jsonify(body), http_status)`` for a Flask view.

    ``status`` overrides the code's default status; unknown codes get 400.
    """
    body: dict = {"error": message, "code": code}
    if details:
        body["details"] = details
    return jsonify(body), status or _STATUS_FOR_CODE.get(code, 400)


def upstream_status(exc: CollaboratorError) -> int:
    """Relay the backend's 4xx/5xx status; transport failures become 502."""
    status = exc.status_code
    if status and 400 <= status < 600:
        return status
    return 502


def error_response(exc: Exception):
    """Map a platform exception onto the standard error response."""
    if isinstance(exc, ValidationError):
        return api_error(E.VALIDATION_INVALID, str(exc), details=exc.details)
    if isinstance(exc, NotFoundError):
        return api_error(E.NOT_FOUND, str(exc))
    if isinstance(exc, ForbiddenError):
        return api_error(E.FORBIDDEN, str(exc))
    if isinstance(exc, CollaboratorError):
        return api_error(E.UPSTREAM, user_message(exc), status=upstream_status(exc))
    return api_error(E.INTERNAL, user_message(exc))
