"""
Health check blueprint.

Endpoints:
    GET /api/v1/health/ready  — simple 200 for load balancers
    GET /api/v1/health/live   — backend collaborator check
"""

import logging
import time

from flask import Blueprint, current_app, jsonify

from bizdesk.blueprints import bearer_token
from bizdesk.core.exceptions import CollaboratorError

logger = logging.getLogger(__name__)

health_bp = Blueprint("health_bp", __name__, url_prefix="/api/v1/health")


@health_bp.route("/ready", methods=["GET"])
def ready():
    """Simple readiness check — always 200 if app is running."""
    return jsonify({"status": "ok"}), 200


@health_bp.route("/live", methods=["GET"])
def live():
    """Liveness check including a round-trip to the backend."""
    checks = {}
    overall = True

    gateway = current_app.extensions["bizdesk.gateway"]
    try:
        t0 = time.perf_counter()
        gateway.ping(bearer_token())
        backend_ms = (time.perf_counter() - t0) * 1000
        checks["backend"] = {"status": "ok", "latency_ms": round(backend_ms, 1)}
    except CollaboratorError as exc:
        checks["backend"] = {"status": "error", "detail": str(exc)}
        overall = False
        logger.error("Health check — backend failed: %s", exc,
                     extra={"backend_url": gateway.base_url})

    checks["app"] = {
        "name": "bizdesk",
        "debug": current_app.debug,
        "testing": current_app.testing,
    }

    status = "ok" if overall else "degraded"
    return jsonify({"status": status, "checks": checks}), 200 if overall else 503
