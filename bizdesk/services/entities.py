"""
Entity registry — one list-pipeline definition per record type.

Each ``EntitySpec`` names the normalizer, the searchable fields, the
categorical filters (query param → record attribute, with a parser for the
raw query-string value), the sortable columns and the summary tiles of one
entity. Views and services look entities up here instead of branching on
entity names.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field

from bizdesk.core.exceptions import NotFoundError
from bizdesk.services import aggregation
from bizdesk.services.list_sort import DESC, DateKey, NumericKey, SortKey, StringKey
from bizdesk.services.normalizer import (
    normalize_notification,
    normalize_product,
    normalize_project,
    normalize_service,
    normalize_user,
)
from bizdesk.utils.helpers import as_int


def parse_bool(raw):
    if isinstance(raw, bool):
        return raw
    text = str(raw).strip().lower()
    if text in ("true", "1", "yes", "read"):
        return True
    if text in ("false", "0", "no", "unread"):
        return False
    return None


@dataclass(frozen=True)
class CategoricalFilter:
    param: str
    attr: str
    parse: Callable = str


@dataclass(frozen=True)
class EntitySpec:
    name: str
    label: str
    normalize: Callable
    searchable: tuple
    filters: tuple = ()
    sort_keys: Mapping[str, SortKey] = field(default_factory=dict)
    default_sort: str = "createdAt"
    default_order: str = DESC
    tiles: Callable | None = None

    def sort_key(self, name: str | None) -> SortKey | None:
        if not name:
            return None
        return self.sort_keys.get(name)

    def parse_filters(self, args: Mapping) -> dict:
        """Read categorical filters from query args → ``{attr: value}``.

        ``"all"`` / blank values and unparseable values are left out.
        """
        active = {}
        for f in self.filters:
            raw = args.get(f.param)
            if raw is None or raw == "" or raw == "all":
                continue
            value = f.parse(raw)
            if value is not None:
                active[f.attr] = value
        return active


def _keys(pairs: Sequence[tuple[str, SortKey]]) -> dict:
    """Register every sort key under its camelCase and snake_case names."""
    keys = {}
    for camel, key in pairs:
        keys[camel] = key
        keys[key.attr] = key
    return keys


USERS = EntitySpec(
    name="users",
    label="User",
    normalize=normalize_user,
    searchable=("first_name", "last_name", "email"),
    filters=(
        CategoricalFilter("role", "role"),
        CategoricalFilter("isVerified", "is_verified", parse_bool),
    ),
    sort_keys=_keys([
        ("firstName", StringKey("first_name")),
        ("lastName", StringKey("last_name")),
        ("email", StringKey("email")),
        ("role", StringKey("role")),
        ("createdAt", DateKey("created_at")),
        ("updatedAt", DateKey("updated_at")),
        ("id", NumericKey("id")),
    ]),
    tiles=aggregation.user_role_tiles,
)

PROJECTS = EntitySpec(
    name="projects",
    label="Project",
    normalize=normalize_project,
    searchable=("title", "description"),
    filters=(
        CategoricalFilter("status", "status"),
        CategoricalFilter("serviceId", "service_id", as_int),
        CategoricalFilter("clientId", "client_id", as_int),
        CategoricalFilter("controllerId", "controller_id", as_int),
    ),
    sort_keys=_keys([
        ("title", StringKey("title")),
        ("status", StringKey("status")),
        ("clientName", StringKey("client_name")),
        ("serviceName", StringKey("service_name")),
        ("progress", NumericKey("progress")),
        ("amount", NumericKey("amount")),
        ("createdAt", DateKey("created_at")),
        ("updatedAt", DateKey("updated_at")),
        ("endDate", DateKey("end_date")),
        ("id", NumericKey("id")),
    ]),
    tiles=aggregation.project_status_tiles,
)

SERVICES = EntitySpec(
    name="services",
    label="Service",
    normalize=normalize_service,
    searchable=("name", "description"),
    filters=(CategoricalFilter("category", "category"),),
    sort_keys=_keys([
        ("name", StringKey("name")),
        ("category", StringKey("category")),
        ("price", NumericKey("price")),
        ("createdAt", DateKey("created_at")),
        ("updatedAt", DateKey("updated_at")),
        ("id", NumericKey("id")),
    ]),
    tiles=aggregation.service_category_tiles,
)

NOTIFICATIONS = EntitySpec(
    name="notifications",
    label="Notification",
    normalize=normalize_notification,
    searchable=("title", "message"),
    filters=(
        CategoricalFilter("type", "type"),
        CategoricalFilter("isRead", "is_read", parse_bool),
        CategoricalFilter("userId", "user_id", as_int),
    ),
    sort_keys=_keys([
        ("title", StringKey("title")),
        ("type", StringKey("type")),
        ("createdAt", DateKey("created_at")),
        ("id", NumericKey("id")),
    ]),
    tiles=aggregation.notification_type_tiles,
)

SHOP = EntitySpec(
    name="shop",
    label="Product",
    normalize=normalize_product,
    searchable=("name", "description", "category"),
    filters=(
        CategoricalFilter("category", "category"),
        CategoricalFilter("stockLevel", "stock_level"),
    ),
    sort_keys=_keys([
        ("name", StringKey("name")),
        ("category", StringKey("category")),
        ("price", NumericKey("price")),
        ("stockQuantity", NumericKey("stock_quantity")),
        ("createdAt", DateKey("created_at")),
        ("updatedAt", DateKey("updated_at")),
        ("id", NumericKey("id")),
    ]),
    tiles=aggregation.product_stock_tiles,
)

ENTITIES = {spec.name: spec for spec in (USERS, PROJECTS, SERVICES, NOTIFICATIONS, SHOP)}


def get_entity(name: str) -> EntitySpec:
    spec = ENTITIES.get(name)
    if spec is None:
        raise NotFoundError(resource="Entity type", resource_id=name)
    return spec
