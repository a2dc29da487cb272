"""
Platform-wide exception hierarchy.

Services raise these types; the app factory registers one handler per type
so every blueprint returns consistent HTTP status codes.

Usage:
    from bizdesk.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Project", resource_id=42)
    raise ValidationError("Title is required", details={"title": "required"})
"""

from __future__ import annotations

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


class NotFoundError(Exception):
    """Raised when a requested record does not exist in the backend.

    Args:
        resource: Human-readable entity name (e.g. "Project", "Service").
        resource_id: The id that was looked up.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        msg = f"{resource}"
        if resource_id is not None:
            msg += f" id={resource_id}"
        msg += " not found"
        super().__init__(msg)


class ValidationError(Exception):
    """Raised when form input fails local validation.

    Always raised before any network call, so a ValidationError never has a
    backend side effect. Maps to HTTP 400.

    Args:
        message: Human-readable explanation of what failed.
        details: Optional field-level breakdown. Keys are field names;
                 values are error descriptions.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ForbiddenError(Exception):
    """Raised when the acting role may not perform an operation. Maps to 403."""

    def __init__(self, role: str, action: str) -> None:
        self.role = role
        self.action = action
        super().__init__(f"Role '{role}' may not {action}")


class CollaboratorError(Exception):
    """Raised when a backend call fails (non-2xx response or network error).

    Args:
        message: The backend's structured message when it sent one, else a
                 description of the transport failure.
        status_code: HTTP status of the backend response, None when the
                     request never completed.
        structured: True when ``message`` came from the backend's JSON body.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        *,
        structured: bool = False,
    ) -> None:
        self.status_code = status_code
        self.structured = structured
        super().__init__(message)

    @property
    def structured_message(self) -> str | None:
        return str(self) if self.structured else None


def user_message(exc: BaseException, fallback: str = GENERIC_FAILURE_MESSAGE) -> str:
    """Derive the message shown to the user for a failed operation.

    Priority: the collaborator's structured message, then the exception's own
    message, then ``fallback``.
    """
    structured = getattr(exc, "structured_message", None)
    if structured:
        return structured
    native = str(exc).strip()
    return native or fallback
