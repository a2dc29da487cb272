"""
Entity normalizer — backend payload → canonical record.

The backend mixes ``snake_case`` and ``camelCase`` keys and omits optional
fields. Every canonical field is resolved the same way: the camelCase key,
then the snake_case key, then a type-appropriate default. Normalizers never
raise on missing keys, never mutate their input and accept an
already-normalized record, so ``normalize(normalize(x)) == normalize(x)``.

Usage:
    from bizdesk.services.normalizer import normalize_project
    record = normalize_project({"title": "Website", "client_id": 2})
"""

from __future__ import annotations

from collections.abc import Mapping

from bizdesk.models.records import (
    NotificationRecord,
    ProjectRecord,
    SaleRecord,
    ServiceRecord,
    ShopProductRecord,
    UserRecord,
)
from bizdesk.models.vocab import CURRENCY
from bizdesk.utils.helpers import as_int, as_number, as_text, render_date

_RECORD_TYPES = (UserRecord, ProjectRecord, ServiceRecord, NotificationRecord,
                 ShopProductRecord, SaleRecord)


def _source(raw) -> Mapping:
    if isinstance(raw, _RECORD_TYPES):
        return raw.to_dict()
    if isinstance(raw, Mapping):
        return raw
    return {}


def pick(raw: Mapping, camel: str, snake: str | None = None, default=None):
    """Return ``raw[camel]``, else ``raw[snake]``, else ``default``.

    A key holding ``None`` counts as absent.
    """
    value = raw.get(camel)
    if value is None and snake:
        value = raw.get(snake)
    return default if value is None else value


def _text(raw, camel, snake=None) -> str:
    return as_text(pick(raw, camel, snake, ""))


def _optional_text(raw, camel, snake=None):
    value = pick(raw, camel, snake)
    return None if value is None else str(value)


def _optional_number(raw, camel, snake=None):
    return as_number(pick(raw, camel, snake), default=None)


def _flag(raw, camel, snake) -> bool:
    value = pick(raw, camel, snake, False)
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes")
    return bool(value)


# ── Per-entity normalizers ───────────────────────────────────────────────────


def normalize_user(raw) -> UserRecord:
    raw = _source(raw)
    return UserRecord(
        id=as_int(pick(raw, "id")),
        email=_text(raw, "email"),
        role=_text(raw, "role"),
        first_name=_text(raw, "firstName", "first_name"),
        last_name=_text(raw, "lastName", "last_name"),
        phone=_optional_text(raw, "phone"),
        is_verified=_flag(raw, "isVerified", "is_verified"),
        created_at=pick(raw, "createdAt", "created_at"),
        updated_at=pick(raw, "updatedAt", "updated_at"),
    )


def normalize_project(raw) -> ProjectRecord:
    raw = _source(raw)
    return ProjectRecord(
        id=as_int(pick(raw, "id")),
        title=_text(raw, "title"),
        description=_text(raw, "description"),
        service_id=as_int(pick(raw, "serviceId", "service_id")),
        client_id=as_int(pick(raw, "clientId", "client_id")),
        controller_id=as_int(pick(raw, "controllerId", "controller_id")),
        status=_text(raw, "status"),
        progress=as_number(pick(raw, "progress"), default=0),
        amount=_optional_number(raw, "amount"),
        amount_description=_optional_text(raw, "amountDescription", "amount_description"),
        requirements_pdf=_optional_text(raw, "requirementsPdf", "requirements_pdf"),
        client_name=_text(raw, "clientName", "client_name"),
        controller_name=_text(raw, "controllerName", "controller_name"),
        service_name=_text(raw, "serviceName", "service_name"),
        start_date=pick(raw, "startDate", "start_date"),
        end_date=pick(raw, "endDate", "end_date"),
        created_at=pick(raw, "createdAt", "created_at"),
        updated_at=pick(raw, "updatedAt", "updated_at"),
    )


def normalize_service(raw) -> ServiceRecord:
    raw = _source(raw)
    return ServiceRecord(
        id=as_int(pick(raw, "id")),
        name=_text(raw, "name"),
        description=_text(raw, "description"),
        category=_text(raw, "category"),
        price=_optional_number(raw, "price"),
        created_at=pick(raw, "createdAt", "created_at"),
        updated_at=pick(raw, "updatedAt", "updated_at"),
    )


def normalize_notification(raw) -> NotificationRecord:
    raw = _source(raw)
    return NotificationRecord(
        id=as_int(pick(raw, "id")),
        user_id=as_int(pick(raw, "userId", "user_id")),
        title=_text(raw, "title"),
        message=_text(raw, "message"),
        type=_text(raw, "type"),
        is_read=_flag(raw, "isRead", "is_read"),
        created_at=pick(raw, "createdAt", "created_at"),
        updated_at=pick(raw, "updatedAt", "updated_at"),
    )


def normalize_product(raw) -> ShopProductRecord:
    raw = _source(raw)
    return ShopProductRecord(
        id=as_int(pick(raw, "id")),
        name=_text(raw, "name"),
        description=_text(raw, "description"),
        price=_optional_number(raw, "price"),
        category=_text(raw, "category"),
        stock_quantity=as_int(pick(raw, "stockQuantity", "stock_quantity")) or 0,
        sold_quantity=as_int(pick(raw, "soldQuantity", "sold_quantity")) or 0,
        image_url=_optional_text(raw, "imageUrl", "image_url"),
        created_at=pick(raw, "createdAt", "created_at"),
        updated_at=pick(raw, "updatedAt", "updated_at"),
    )


def normalize_sale(raw) -> SaleRecord:
    raw = _source(raw)
    return SaleRecord(
        id=as_int(pick(raw, "id")),
        product_id=as_int(pick(raw, "productId", "product_id")),
        product_name=_text(raw, "productName", "product_name"),
        product_category=_text(raw, "productCategory", "product_category"),
        quantity=as_int(pick(raw, "quantity")) or 0,
        unit_price=as_number(pick(raw, "unitPrice", "unit_price")),
        total_amount=as_number(pick(raw, "totalAmount", "total_amount")),
        customer_name=_optional_text(raw, "customerName", "customer_name"),
        customer_email=_optional_text(raw, "customerEmail", "customer_email"),
        customer_phone=_optional_text(raw, "customerPhone", "customer_phone"),
        sale_date=pick(raw, "saleDate", "sale_date"),
        is_reversed=_flag(raw, "isReversed", "is_reversed"),
        created_at=pick(raw, "createdAt", "created_at"),
        updated_at=pick(raw, "updatedAt", "updated_at"),
    )


def normalize_many(normalize, raws) -> list:
    """Normalize a backend list; a non-list payload yields an empty list."""
    if not isinstance(raws, (list, tuple)):
        return []
    return [normalize(raw) for raw in raws]


# ── Display helpers ──────────────────────────────────────────────────────────


def format_amount(amount) -> str:
    if not amount:
        return "N/A"
    return f"{CURRENCY} {amount:,}"


def format_price(price) -> str:
    if price is None:
        return "Price on request"
    return f"{CURRENCY} {price:,}"


def render_record(record) -> dict:
    """Canonical dict plus the display-only fields the list tables show."""
    row = record.to_dict()
    row["createdAtDisplay"] = render_date(record.created_at)
    row["updatedAtDisplay"] = render_date(record.updated_at)
    if isinstance(record, UserRecord):
        row["displayName"] = record.display_name
    elif isinstance(record, ProjectRecord):
        row["amountDisplay"] = format_amount(record.amount)
    elif isinstance(record, ServiceRecord):
        row["priceDisplay"] = format_price(record.price)
    elif isinstance(record, ShopProductRecord):
        row["priceDisplay"] = format_price(record.price)
        row["stockLevel"] = record.stock_level
    elif isinstance(record, SaleRecord):
        row["totalDisplay"] = format_amount(record.total_amount)
        row["saleDateDisplay"] = render_date(record.sale_date)
    return row
