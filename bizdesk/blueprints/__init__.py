"""
bizdesk — Business Dashboard BFF
Blueprint helpers shared by every route module.
"""

from flask import current_app, request

ENTITY_NAMES = "users, projects, services, notifications, shop"

# Roles shape forms only; the backend enforces real authorization
DEFAULT_ROLE = "client"


def bearer_token():
    """Return the caller's bearer token (forwarded to the backend), or None."""
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def acting_role():
    return (request.headers.get("X-User-Role") or DEFAULT_ROLE).strip().lower()


def collaborators():
    """Entity clients for this request, carrying the caller's token."""
    factory = current_app.extensions["bizdesk.collaborators"]
    return factory(bearer_token())


def json_body():
    return request.get_json(silent=True) or {}


def uploaded_file():
    """Return ``(file, size_in_bytes)`` for the ``file`` form field, or ``(None, 0)``."""
    file = request.files.get("file")
    if file is None:
        return None, 0
    stream = file.stream
    stream.seek(0, 2)
    size = stream.tell()
    stream.seek(0)
    return file, size
