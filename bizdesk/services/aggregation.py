"""
Aggregation stage — summary tiles over the full, unfiltered record list.

Each tile is ``{label, count, percentage}`` where percentage is
``count / total * 100`` formatted to one decimal place, and ``"0.0"`` when
the list is empty.

Also provides the per-entity dashboard payloads (role, status bucket,
category and type breakdowns, stock levels, revenue, controller stats).
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timezone

from bizdesk.models.vocab import (
    BUCKET_LABELS,
    LOW_STOCK_THRESHOLD,
    NOTIFICATION_TYPES,
    STOCK_LEVELS,
    UNKNOWN_BUCKET,
    USER_ROLES,
    status_bucket,
)
from bizdesk.utils.helpers import as_number, parse_timestamp


@dataclass(frozen=True)
class SummaryTile:
    label: str
    count: int
    percentage: str

    def to_dict(self) -> dict:
        return {"label": self.label, "count": self.count, "percentage": self.percentage}


def percentage(count: int, total: int) -> str:
    if total == 0:
        return "0.0"
    return f"{count / total * 100:.1f}"


def aggregate(
    records: Iterable,
    categorizer: Callable[[object], str],
    labels: Sequence[str] | None = None,
) -> list[SummaryTile]:
    """Count records per category.

    Args:
        records: The unfiltered list.
        categorizer: Maps a record to its category label.
        labels: Fixed tile order; labels with no records still get a zero
                tile, and records outside ``labels`` are gathered in a
                trailing ``other`` tile so the counts always add up to the
                total. When omitted, tiles follow first appearance.
    """
    records = list(records)
    total = len(records)
    counts = Counter(categorizer(r) for r in records)
    if labels is None:
        labels = list(dict.fromkeys(categorizer(r) for r in records))
    tiles = [SummaryTile(label, counts.get(label, 0), percentage(counts.get(label, 0), total))
             for label in labels]
    leftover = total - sum(t.count for t in tiles)
    if leftover:
        tiles.append(SummaryTile(UNKNOWN_BUCKET, leftover, percentage(leftover, total)))
    return tiles


def tiles_payload(tiles: Iterable[SummaryTile]) -> list[dict]:
    return [t.to_dict() for t in tiles]


# ── Entity dashboards ────────────────────────────────────────────────────────


def user_role_tiles(users) -> list[SummaryTile]:
    return aggregate(users, lambda u: u.role, USER_ROLES)


def project_status_tiles(projects) -> list[SummaryTile]:
    return aggregate(projects, lambda p: status_bucket(p.status), BUCKET_LABELS)


def service_category_tiles(services) -> list[SummaryTile]:
    return aggregate(services, lambda s: s.category)


def notification_type_tiles(notifications) -> list[SummaryTile]:
    return aggregate(notifications, lambda n: n.type, NOTIFICATION_TYPES)


def unread_count(notifications) -> int:
    return sum(1 for n in notifications if not n.is_read)


def product_stock_tiles(products) -> list[SummaryTile]:
    return aggregate(products, lambda p: p.stock_level, STOCK_LEVELS)


def low_stock_count(products) -> int:
    """Products under the restock threshold, sold-out ones included."""
    return sum(1 for p in products if p.stock_quantity < LOW_STOCK_THRESHOLD)


def shop_summary(products) -> dict:
    priced = [as_number(p.price, default=0) for p in products]
    return {
        "totalProducts": len(products),
        "lowStockItems": low_stock_count(products),
        "outOfStockItems": sum(1 for p in products if p.stock_level == "out_of_stock"),
        "averagePrice": round(sum(priced) / len(priced), 2) if priced else 0,
        "stockValue": sum(as_number(p.price, default=0) * p.stock_quantity for p in products),
    }


def sales_revenue(sales) -> float:
    """Revenue from sales that have not been reversed."""
    return sum(as_number(s.total_amount, default=0) for s in sales if not s.is_reversed)


def total_revenue(projects) -> float:
    return sum(as_number(p.amount, default=0) for p in projects)


def controller_stats(projects, controller_id: int, *, now: datetime | None = None) -> dict:
    """Dashboard numbers for one controller's assigned projects.

    Overdue: an end date in the past on a project that is not completed.
    """
    now = now or datetime.now(timezone.utc)
    assigned = [p for p in projects if p.controller_id == controller_id]

    def _overdue(p) -> bool:
        end = parse_timestamp(p.end_date)
        return end is not None and end < now and status_bucket(p.status) != "completed"

    return {
        "totalAssignedProjects": len(assigned),
        "activeProjects": sum(1 for p in assigned if status_bucket(p.status) == "active"),
        "completedProjects": sum(1 for p in assigned if status_bucket(p.status) == "completed"),
        "overdueProjects": sum(1 for p in assigned if _overdue(p)),
        "totalProgressUpdates": sum(1 for p in assigned if as_number(p.progress) > 0),
    }
