"""
Dashboard service — cross-entity KPIs for the admin and controller home pages.

Each source is fetched independently; one failing source yields zeros for
its numbers and is reported in ``failed`` rather than failing the page.
"""

import logging

from bizdesk.core.exceptions import CollaboratorError
from bizdesk.services import aggregation
from bizdesk.services.normalizer import (
    normalize_many,
    normalize_product,
    normalize_project,
    normalize_service,
    normalize_user,
)

logger = logging.getLogger(__name__)


def _fetch(name, api, normalize, failed):
    try:
        return normalize_many(normalize, api.get_all())
    except CollaboratorError as exc:
        logger.warning("Dashboard source %s failed: %s", name, exc, extra={"entity": name})
        failed.append(name)
        return []


def get_admin_dashboard(collaborators):
    """Platform totals, status/role breakdowns, revenue and shop stock."""
    failed = []
    projects = _fetch("projects", collaborators["projects"], normalize_project, failed)
    users = _fetch("users", collaborators["users"], normalize_user, failed)
    services = _fetch("services", collaborators["services"], normalize_service, failed)
    products = _fetch("shop", collaborators["shop"], normalize_product, failed)

    return {
        "totalProjects": len(projects),
        "totalClients": sum(1 for u in users if u.role == "client"),
        "totalControllers": sum(1 for u in users if u.role == "controller"),
        "totalServices": len(services),
        "totalRevenue": aggregation.total_revenue(projects),
        "projectStatus": aggregation.tiles_payload(aggregation.project_status_tiles(projects)),
        "userRoles": aggregation.tiles_payload(aggregation.user_role_tiles(users)),
        "serviceCategories": aggregation.tiles_payload(aggregation.service_category_tiles(services)),
        "totalProducts": len(products),
        "lowStockItems": aggregation.low_stock_count(products),
        "failed": failed,
    }


def get_controller_dashboard(collaborators, controller_id):
    """Stats over the projects assigned to one controller."""
    failed = []
    projects = _fetch("projects", collaborators["projects"], normalize_project, failed)
    stats = aggregation.controller_stats(projects, controller_id)
    stats["failed"] = failed
    return stats
