"""
bizdesk — Business Dashboard BFF
Dashboard KPI Blueprint.

Endpoints:
    GET /api/v1/dashboard/admin                        — platform totals and breakdowns
    GET /api/v1/dashboard/controller/<controller_id>   — assigned-project stats
"""

from flask import Blueprint, jsonify

from bizdesk.blueprints import collaborators
from bizdesk.services import dashboard_service

dashboard_bp = Blueprint("dashboard_bp", __name__, url_prefix="/api/v1/dashboard")


@dashboard_bp.route("/admin", methods=["GET"])
def admin_dashboard():
    return jsonify(dashboard_service.get_admin_dashboard(collaborators()))


@dashboard_bp.route("/controller/<int:controller_id>", methods=["GET"])
def controller_dashboard(controller_id):
    return jsonify(dashboard_service.get_controller_dashboard(collaborators(), controller_id))
