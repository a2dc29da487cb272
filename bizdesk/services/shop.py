"""
Shop service — stock, price and sales operations beyond the product CRUD.

Product listing, create, update and delete run through the generic list
view and mutation protocol (entity ``shop``). This module covers what only
the shop has:

    sell            record a sale; the backend decrements stock
    reverse_sale    undo a sale; the backend restores stock
    sales_history   newest first, searchable, with revenue totals
    adjust_stock    set the absolute stock quantity
    adjust_price    set a new unit price

Only admins and controllers may run these; other roles get
``ForbiddenError`` before anything is sent. Backend failures are logged and
re-raised.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from bizdesk.core.exceptions import CollaboratorError, ForbiddenError
from bizdesk.models.vocab import LOW_STOCK_THRESHOLD, SHOP_ROLES
from bizdesk.services.aggregation import sales_revenue
from bizdesk.services.list_filter import filter_records
from bizdesk.services.list_sort import DESC, DateKey, sort_records
from bizdesk.services.normalizer import normalize_many, normalize_product, normalize_sale
from bizdesk.services.payloads import (
    PRICE_FORM,
    REVERSE_SALE_FORM,
    SALE_FORM,
    STOCK_FORM,
    build_payload,
)
from bizdesk.utils.helpers import as_number

logger = logging.getLogger(__name__)

SALE_SEARCHABLE = ("product_name", "product_category", "customer_name", "customer_email")


def require_shop_role(role: str, action: str) -> None:
    if role not in SHOP_ROLES:
        raise ForbiddenError(role, action)


def sell(api, values: Mapping | None, role: str) -> tuple:
    """Validate and record a sale; returns ``(sale, updated_product_or_None)``."""
    require_shop_role(role, "sell products")
    payload = build_payload(SALE_FORM, values)
    try:
        raw = api.sell_product(payload)
    except CollaboratorError:
        logger.exception("Sale of product %s failed", payload["productId"],
                         extra={"entity": "shop", "record_id": payload["productId"]})
        raise
    sale = normalize_sale(raw.get("sale") or raw)
    updated = raw.get("updatedProduct") or raw.get("updated_product")
    product = normalize_product(updated) if updated else None
    logger.info("Sold %d x product %s (sale %s)", sale.quantity or payload["quantity"],
                payload["productId"], sale.id,
                extra={"entity": "shop", "record_id": payload["productId"]})
    if product is not None and product.stock_quantity < LOW_STOCK_THRESHOLD:
        logger.warning("Product %s is low on stock (%d left)", product.id,
                       product.stock_quantity, extra={"entity": "shop", "record_id": product.id})
    return sale, product


def reverse_sale(api, values: Mapping | None, role: str) -> dict:
    require_shop_role(role, "reverse sales")
    payload = build_payload(REVERSE_SALE_FORM, values)
    try:
        raw = api.reverse_sale(payload)
    except CollaboratorError:
        logger.exception("Reversing sale %s failed", payload["saleId"])
        raise
    updated = raw.get("updatedProduct") or raw.get("updated_product")
    logger.info("Reversed sale %s", payload["saleId"])
    return {
        "saleId": payload["saleId"],
        "reversedQuantity": as_number(raw.get("reversedQuantity"), default=0),
        "reversedAmount": as_number(raw.get("reversedAmount"), default=0),
        "product": normalize_product(updated) if updated else None,
        "message": raw.get("message") or "Sale reversed successfully",
    }


def sales_history(api, role: str, *, query: str | None = None,
                  include_reversed: bool = True) -> dict:
    """Sales newest first, plus totals over the full (unfiltered) history.

    Revenue counts only sales that have not been reversed.
    """
    require_shop_role(role, "view sales history")
    sales = normalize_many(normalize_sale, api.get_sales_history())
    visible = filter_records(sales, query, None, SALE_SEARCHABLE)
    if not include_reversed:
        visible = [s for s in visible if not s.is_reversed]
    return {
        "items": sort_records(visible, DateKey("sale_date"), DESC),
        "totalSales": sum(1 for s in sales if not s.is_reversed),
        "reversedSales": sum(1 for s in sales if s.is_reversed),
        "unitsSold": sum(s.quantity for s in sales if not s.is_reversed),
        "revenue": sales_revenue(sales),
    }


def total_revenue(api, role: str) -> float:
    require_shop_role(role, "view revenue")
    data = api.get_total_revenue()
    if isinstance(data, Mapping):
        data = data.get("total_revenue", data.get("totalRevenue"))
    return as_number(data, default=0)


def _product_after(api, record_id: int, raw, changes: dict):
    """The updated product; empty responses are filled from a re-read."""
    if raw:
        return normalize_product(raw)
    try:
        current = api.get_by_id(record_id) or {}
    except CollaboratorError:
        logger.warning("Re-reading product %s after update failed", record_id,
                       extra={"entity": "shop", "record_id": record_id})
        current = {}
    return normalize_product({**current, **changes, "id": record_id})


def adjust_stock(api, record_id: int, values: Mapping | None, role: str):
    require_shop_role(role, "adjust stock")
    quantity = build_payload(STOCK_FORM, values)["quantity"]
    try:
        raw = api.adjust_stock(record_id, quantity)
    except CollaboratorError:
        logger.exception("Stock adjustment for product %s failed", record_id,
                         extra={"entity": "shop", "record_id": record_id})
        raise
    product = _product_after(api, record_id, raw, {"stockQuantity": quantity})
    if quantity < LOW_STOCK_THRESHOLD:
        logger.warning("Product %s is low on stock (%d left)", record_id, quantity,
                       extra={"entity": "shop", "record_id": record_id})
    return product


def adjust_price(api, record_id: int, values: Mapping | None, role: str):
    require_shop_role(role, "adjust prices")
    price = build_payload(PRICE_FORM, values)["price"]
    try:
        raw = api.adjust_price(record_id, price)
    except CollaboratorError:
        logger.exception("Price adjustment for product %s failed", record_id,
                         extra={"entity": "shop", "record_id": record_id})
        raise
    return _product_after(api, record_id, raw, {"price": price})
