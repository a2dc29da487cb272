"""
bizdesk — Business Dashboard BFF
Flask Application Factory.

Usage:
    from bizdesk import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

from flask import Flask, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from bizdesk.config import config
from bizdesk.core.exceptions import (
    CollaboratorError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from bizdesk.integrations.backend_gateway import BackendGateway
from bizdesk.integrations.entity_apis import build_collaborators
from bizdesk.middleware.logging_config import configure_logging
from bizdesk.middleware.timing import init_request_timing
from bizdesk.utils.errors import error_response

logger = logging.getLogger(__name__)


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__)
    config_cls = config[config_name]
    app.config.from_object(config_cls() if config_name == "production" else config_cls)

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    cors_origins = app.config.get("CORS_ORIGINS", "*")
    if cors_origins and cors_origins != "*":
        CORS(app, origins=[o.strip() for o in cors_origins.split(",") if o.strip()])
    else:
        CORS(app)

    # ── Backend collaborators ────────────────────────────────────────────
    gateway = BackendGateway(
        app.config["BACKEND_API_URL"],
        timeout=app.config["BACKEND_TIMEOUT"],
    )
    app.extensions["bizdesk.gateway"] = gateway
    app.extensions["bizdesk.collaborators"] = lambda token: build_collaborators(gateway, token)

    # ── Request timing middleware ────────────────────────────────────────
    init_request_timing(app)

    # ── Request guards (body size + Content-Type) ────────────────────────
    if app.config.get("MAX_CONTENT_LENGTH") is None:
        # Room for one upload plus the multipart envelope
        app.config["MAX_CONTENT_LENGTH"] = (app.config["UPLOAD_MAX_MB"] + 1) * 1024 * 1024

    @app.before_request
    def _guard_request():
        from flask import abort
        if request.method in ("POST", "PUT", "PATCH") and request.path.startswith("/api/"):
            ct = request.content_type or ""
            if request.data and "json" not in ct and "multipart/form-data" not in ct:
                abort(415, description="Content-Type must be application/json")

    # ── Blueprints ───────────────────────────────────────────────────────
    from bizdesk.blueprints.health_bp import health_bp
    from bizdesk.blueprints.search_bp import search_bp
    from bizdesk.blueprints.notification_bp import notification_bp
    from bizdesk.blueprints.dashboard_bp import dashboard_bp
    from bizdesk.blueprints.list_views_bp import list_views_bp
    from bizdesk.blueprints.shop_bp import shop_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(search_bp)
    app.register_blueprint(notification_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(shop_bp)
    app.register_blueprint(list_views_bp)

    _register_error_handlers(app)

    logger.info("bizdesk started (env=%s, backend=%s)", config_name,
                app.config["BACKEND_API_URL"],
                extra={"backend_url": app.config["BACKEND_API_URL"]})
    return app


def _register_error_handlers(app):
    """Map the platform exception types onto JSON error responses."""

    @app.errorhandler(ValidationError)
    @app.errorhandler(NotFoundError)
    @app.errorhandler(ForbiddenError)
    @app.errorhandler(CollaboratorError)
    def platform_error(e):
        return error_response(e)

    @app.errorhandler(404)
    def not_found(e):
        return {"error": "Not found", "path": request.path}, 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return {"error": "Method not allowed"}, 405

    @app.errorhandler(HTTPException)
    def http_error(e):
        return {"error": e.description or e.name}, e.code

    @app.errorhandler(500)
    def server_error(e):
        logger.error("500 error: %s", e, exc_info=True)
        return {"error": "Internal server error"}, 500
