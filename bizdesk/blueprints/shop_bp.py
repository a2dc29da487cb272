"""
bizdesk — Business Dashboard BFF
Shop Blueprint.

Product list, detail and CRUD are served by the entity routes
(``/api/v1/shop``). This blueprint adds:
    - Inventory overview (low stock, stock value)
    - Stock and price adjustments
    - Product image upload
    - Selling, sales history, sale reversal and revenue
"""

from __future__ import annotations

import logging

from flask import Blueprint, current_app, jsonify, request

from bizdesk.blueprints import acting_role, collaborators, json_body, uploaded_file
from bizdesk.services import aggregation, shop
from bizdesk.services.entities import SHOP, parse_bool
from bizdesk.services.list_views import load_records, state_from_args
from bizdesk.services.normalizer import normalize_product, render_record
from bizdesk.services.uploads import upload_product_image
from bizdesk.utils.errors import E, api_error

logger = logging.getLogger(__name__)

shop_bp = Blueprint("shop_bp", __name__, url_prefix="/api/v1/shop")


def _api():
    return collaborators()["shop"]


@shop_bp.route("/inventory", methods=["GET"])
def inventory():
    """Shop totals and stock-level tiles over every product."""
    state = load_records(SHOP, _api(), state_from_args(SHOP, {}))
    if state.error:
        return api_error(E.UPSTREAM, state.error, details={"entity": "shop"})
    body = aggregation.shop_summary(state.records)
    body["tiles"] = aggregation.tiles_payload(aggregation.product_stock_tiles(state.records))
    body["lowStock"] = [render_record(p) for p in state.records if p.stock_level != "in_stock"]
    return jsonify(body)


@shop_bp.route("/<int:product_id>/stock", methods=["PUT"])
def adjust_stock(product_id):
    product = shop.adjust_stock(_api(), product_id, json_body(), acting_role())
    return jsonify({"item": render_record(product), "message": "Stock updated successfully"})


@shop_bp.route("/<int:product_id>/price", methods=["PUT"])
def adjust_price(product_id):
    product = shop.adjust_price(_api(), product_id, json_body(), acting_role())
    return jsonify({"item": render_record(product), "message": "Price updated successfully"})


@shop_bp.route("/<int:product_id>/image", methods=["POST"])
def upload_image(product_id):
    shop.require_shop_role(acting_role(), "upload product images")
    file, size = uploaded_file()
    if file is None:
        return api_error(E.VALIDATION_REQUIRED, "Please select a file to upload")
    result = upload_product_image(
        _api(),
        product_id,
        filename=file.filename,
        stream=file.stream,
        mimetype=file.mimetype,
        size=size,
        allowed_types=current_app.config["UPLOAD_IMAGE_TYPES"],
        max_mb=current_app.config["UPLOAD_MAX_MB"],
    )
    item = render_record(normalize_product(result)) if isinstance(result, dict) else None
    return jsonify({"uploaded": True, "item": item}), 201


# ═══════════════════════════════════════════════════════════════════════════
#  SALES
# ═══════════════════════════════════════════════════════════════════════════

@shop_bp.route("/sell", methods=["POST"])
def sell():
    sale, product = shop.sell(_api(), json_body(), acting_role())
    return jsonify({
        "sale": render_record(sale),
        "product": render_record(product) if product else None,
        "message": "Sale recorded successfully",
    }), 201


@shop_bp.route("/sales", methods=["GET"])
def sales_history():
    """Sales newest first.

    Query params:
        q                 search product, category or customer
        include_reversed  false to hide reversed sales (default true)
    """
    include = parse_bool(request.args.get("include_reversed", "true"))
    body = shop.sales_history(
        _api(), acting_role(),
        query=request.args.get("q"),
        include_reversed=include is not False,
    )
    body["items"] = [render_record(s) for s in body["items"]]
    return jsonify(body)


@shop_bp.route("/reverse-sale", methods=["POST"])
def reverse_sale():
    result = shop.reverse_sale(_api(), json_body(), acting_role())
    if result["product"] is not None:
        result["product"] = render_record(result["product"])
    return jsonify(result)


@shop_bp.route("/revenue", methods=["GET"])
def revenue():
    return jsonify({"totalRevenue": shop.total_revenue(_api(), acting_role())})
