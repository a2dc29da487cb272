"""
bizdesk — controlled vocabularies.

Roles, project statuses, notification types, stock levels and the status
bucket table used by every dashboard tile. Values are stored exactly as the
backend sends them; filters compare them case-sensitively.
"""

# ── Users ────────────────────────────────────────────────────────────────────

USER_ROLES = ("admin", "controller", "client")

# ── Projects ─────────────────────────────────────────────────────────────────

PROJECT_STATUSES = (
    "pending",
    "planning",
    "designing",
    "development",
    "testing",
    "delivery",
    "completed",
    "cancelled",
)

# Older records still carry these; they are accepted on read and on update
LEGACY_PROJECT_STATUSES = ("in_progress", "inProgress")

ALL_PROJECT_STATUSES = PROJECT_STATUSES + LEGACY_PROJECT_STATUSES

# Every status maps to exactly one dashboard bucket
STATUS_BUCKETS = {
    "pending": "pending",
    "planning": "active",
    "designing": "active",
    "development": "active",
    "testing": "active",
    "delivery": "active",
    "in_progress": "active",
    "inProgress": "active",
    "completed": "completed",
    "cancelled": "cancelled",
}

BUCKET_LABELS = ("pending", "active", "completed", "cancelled")
UNKNOWN_BUCKET = "other"


def status_bucket(status) -> str:
    """Return the dashboard bucket for a project status (``other`` if unknown)."""
    return STATUS_BUCKETS.get(status, UNKNOWN_BUCKET)


# ── Notifications ────────────────────────────────────────────────────────────

NOTIFICATION_TYPES = (
    "alert",
    "reminder",
    "message",
    "project_update",
    "service_update",
    "shop_update",
    "profile_update",
    "user_update",
)

# Rendered when received, never offered when sending
LEGACY_NOTIFICATION_TYPES = ("info", "warning", "success")

ALL_NOTIFICATION_TYPES = NOTIFICATION_TYPES + LEGACY_NOTIFICATION_TYPES

# ── Shop ─────────────────────────────────────────────────────────────────────

# Products below this many units count as low stock
LOW_STOCK_THRESHOLD = 10

STOCK_LEVELS = ("out_of_stock", "low_stock", "in_stock")

# Only these roles run the shop: selling, reversals, stock and price changes
SHOP_ROLES = ("admin", "controller")


def stock_level(quantity) -> str:
    if not quantity or quantity <= 0:
        return "out_of_stock"
    if quantity < LOW_STOCK_THRESHOLD:
        return "low_stock"
    return "in_stock"


# ── Display ──────────────────────────────────────────────────────────────────

MISSING_DATE = "N/A"
CURRENCY = "TZS"
