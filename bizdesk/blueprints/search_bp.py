"""
bizdesk — Business Dashboard BFF
Global search Blueprint.

The UI debounces keystrokes before calling this endpoint; each call fans the
query out to every entity collaborator and returns whatever succeeded.
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from bizdesk.blueprints import collaborators
from bizdesk.services.search import DEFAULT_LIMIT_PER_SOURCE, fan_out_search

logger = logging.getLogger(__name__)

search_bp = Blueprint("search_bp", __name__, url_prefix="/api/v1")


@search_bp.route("/search", methods=["GET"])
def search():
    """
    Fan-out search.

    Query params:
        q        free text (blank → empty result, no backend calls)
        sources  comma-separated entity names (default: all)
        limit    max matches per source (default 5)
    """
    sources = request.args.get("sources")
    limit = request.args.get("limit", DEFAULT_LIMIT_PER_SOURCE, type=int)
    result = fan_out_search(
        request.args.get("q"),
        collaborators(),
        sources=tuple(s.strip() for s in sources.split(",") if s.strip()) if sources else None,
        limit=limit if limit and limit > 0 else None,
        max_workers=current_app.config["SEARCH_MAX_WORKERS"],
    )
    if result.failed:
        logger.warning("Search for %r returned partial results; failed=%s",
                       result.query, ",".join(result.failed))
    body = result.to_dict()
    body["debounce_ms"] = current_app.config["SEARCH_DEBOUNCE_MS"]
    return jsonify(body)
