"""
Form validation and backend payload building.

Each form is a tuple of ``FormField`` definitions. ``build_payload`` reads
submitted values (camelCase or snake_case keys), validates them and returns
the camelCase payload the backend expects:

  - required fields must be non-blank
  - ids are sent as ints, numbers must parse, percentages lie in [0, 100]
  - optional fields left blank are omitted from the payload entirely

All checks run before any network call; failures raise ``ValidationError``
with a per-field ``details`` map.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from bizdesk.core.exceptions import ForbiddenError, ValidationError
from bizdesk.models.vocab import (
    ALL_PROJECT_STATUSES,
    NOTIFICATION_TYPES,
    SHOP_ROLES,
    USER_ROLES,
)

logger = logging.getLogger(__name__)

TEXT = "text"
INT = "int"
NUMBER = "number"
PERCENT = "percent"
CHOICE = "choice"
EMAIL = "email"
PASSWORD = "password"

MIN_PASSWORD_LENGTH = 6

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


@dataclass(frozen=True)
class FormField:
    name: str
    kind: str = TEXT
    required: bool = False
    choices: tuple = ()
    label: str | None = None
    minimum: int | None = None

    @property
    def display(self) -> str:
        return self.label or self.name


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _read(values: Mapping, name: str):
    value = values.get(name)
    if value is None:
        value = values.get(snake_case(name))
    return value


def _convert(field: FormField, value):
    """Return the payload value or raise ValueError with a user message."""
    if field.kind == INT:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{field.display} must be a whole number")
        if not number.is_integer():
            raise ValueError(f"{field.display} must be a whole number")
        if field.minimum is not None and number < field.minimum:
            raise ValueError(f"{field.display} must be at least {field.minimum}")
        return int(number)
    if field.kind in (NUMBER, PERCENT):
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{field.display} must be a number")
        if number != number:
            raise ValueError(f"{field.display} must be a number")
        if field.kind == PERCENT and not 0 <= number <= 100:
            raise ValueError(f"{field.display} must be between 0 and 100")
        if field.kind == NUMBER and number < 0:
            raise ValueError(f"{field.display} must not be negative")
        return int(number) if number.is_integer() else number
    if field.kind == CHOICE:
        if value not in field.choices:
            raise ValueError(f"{field.display} must be one of: {', '.join(field.choices)}")
        return value
    if field.kind == EMAIL:
        try:
            return validate_email(str(value).strip(), check_deliverability=False).normalized
        except EmailNotValidError as exc:
            raise ValueError(f"Invalid email: {exc}")
    if field.kind == PASSWORD:
        if len(str(value)) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"{field.display} must be at least {MIN_PASSWORD_LENGTH} characters")
        return str(value)
    return str(value).strip()


def build_payload(
    form: Sequence[FormField],
    values: Mapping | None,
    *,
    partial: bool = False,
) -> dict:
    """Validate ``values`` against ``form`` and return the backend payload.

    Args:
        form: Field definitions, in display order.
        values: Submitted form values.
        partial: Update mode. Fields absent from ``values`` are skipped
                 instead of failing the required check.

    Raises:
        ValidationError: first failing field's message, with all field
                         errors in ``details``.
    """
    values = values or {}
    payload: dict = {}
    errors: dict[str, str] = {}

    for field in form:
        value = _read(values, field.name)
        if _is_blank(value):
            present = field.name in values or snake_case(field.name) in values
            if field.required and (present or not partial):
                errors[field.name] = f"{field.display} is required"
            continue
        try:
            payload[field.name] = _convert(field, value)
        except ValueError as exc:
            errors[field.name] = str(exc)

    if errors:
        first = next(iter(errors.values()))
        raise ValidationError(first, details=errors)
    return payload


# ── Forms ────────────────────────────────────────────────────────────────────

PROJECT_FORM = (
    FormField("title", required=True),
    FormField("description", required=True),
    FormField("serviceId", INT, required=True, label="Service"),
    FormField("clientId", INT, required=True, label="Client"),
    FormField("controllerId", INT, label="Controller"),
    FormField("status", CHOICE, choices=ALL_PROJECT_STATUSES),
    FormField("progress", PERCENT),
    FormField("amount", NUMBER),
    FormField("amountDescription", label="Amount description"),
)

SERVICE_FORM = (
    FormField("name", required=True),
    FormField("description", required=True),
    FormField("category", required=True),
    FormField("price", NUMBER),
)

USER_FORM = (
    FormField("email", EMAIL, required=True),
    FormField("password", PASSWORD, required=True),
    FormField("role", CHOICE, required=True, choices=USER_ROLES),
    FormField("firstName", required=True, label="First name"),
    FormField("lastName", required=True, label="Last name"),
    FormField("phone"),
)

NOTIFICATION_FORM = (
    FormField("userId", INT, required=True, label="Recipient"),
    FormField("title", required=True),
    FormField("message", required=True),
    FormField("type", CHOICE, required=True, choices=NOTIFICATION_TYPES),
)

PRODUCT_FORM = (
    FormField("name", required=True),
    FormField("description", required=True),
    FormField("price", NUMBER, required=True),
    FormField("category", required=True),
    FormField("stockQuantity", INT, required=True, label="Stock quantity", minimum=0),
    FormField("imageUrl", label="Image URL"),
)

SALE_FORM = (
    FormField("productId", INT, required=True, label="Product", minimum=1),
    FormField("quantity", INT, required=True, label="Quantity", minimum=1),
    FormField("customerName", label="Customer name"),
    FormField("customerEmail", EMAIL, label="Customer email"),
    FormField("customerPhone", label="Customer phone"),
)

REVERSE_SALE_FORM = (FormField("saleId", INT, required=True, label="Sale", minimum=1),)

STOCK_FORM = (FormField("quantity", INT, required=True, label="Stock quantity", minimum=0),)

PRICE_FORM = (FormField("price", NUMBER, required=True, label="Price"),)

# Create forms exclude ``status``: new projects always start in the backend's
# default status.
CREATE_FIELDS = {
    "projects": ("title", "description", "serviceId", "clientId", "controllerId",
                 "progress", "amount", "amountDescription"),
    "services": ("name", "description", "category", "price"),
    "users": ("email", "password", "role", "firstName", "lastName", "phone"),
    "notifications": ("userId", "title", "message", "type"),
    "shop": tuple(f.name for f in PRODUCT_FORM),
}

# Fields each role may change on an existing record
EDITABLE_FIELDS = {
    "projects": {
        "admin": ("title", "description", "serviceId", "clientId", "controllerId",
                  "status", "progress", "amount", "amountDescription"),
        "controller": ("description", "status", "progress", "amount", "amountDescription"),
        "client": ("title", "description"),
    },
    "services": {
        "admin": ("name", "description", "category", "price"),
    },
    "users": {
        "admin": ("firstName", "lastName", "phone"),
        "controller": ("firstName", "lastName", "phone"),
        "client": ("firstName", "lastName", "phone"),
    },
    "notifications": {
        "admin": ("title", "message", "type"),
    },
    "shop": {role: CREATE_FIELDS["shop"] for role in SHOP_ROLES},
}

FORMS = {
    "projects": PROJECT_FORM,
    "services": SERVICE_FORM,
    "users": USER_FORM,
    "notifications": NOTIFICATION_FORM,
    "shop": PRODUCT_FORM,
}


def _subset(form: Sequence[FormField], names: Sequence[str]) -> tuple:
    return tuple(f for f in form if f.name in names)


def create_form(entity: str) -> tuple:
    return _subset(FORMS[entity], CREATE_FIELDS[entity])


def editable_fields(entity: str, role: str) -> tuple:
    """Names of the fields ``role`` may change; raises ForbiddenError if none."""
    fields = EDITABLE_FIELDS.get(entity, {}).get(role)
    if not fields:
        raise ForbiddenError(role, f"edit {entity}")
    return fields


def build_create_payload(entity: str, values: Mapping | None) -> dict:
    return build_payload(create_form(entity), values)


def build_update_payload(entity: str, values: Mapping | None, role: str) -> dict:
    """Validate an edit form, keeping only the fields ``role`` may change."""
    allowed = editable_fields(entity, role)
    values = values or {}
    allowed_keys = set(allowed) | {snake_case(a) for a in allowed}
    dropped = [k for k in values if k not in allowed_keys]
    if dropped:
        logger.debug("Ignoring non-editable fields for %s/%s: %s", entity, role, dropped)
    return build_payload(_subset(FORMS[entity], allowed), values, partial=True)
