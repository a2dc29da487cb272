"""
Shared pytest fixtures for the bizdesk test suite.

Provides:
    - app: Flask application (session-scoped)
    - client: Flask test client (function-scoped)
    - backend: in-memory fake collaborators wired into the app (function-scoped)
    - fake_api: the FakeApi class, for unit tests that build their own fakes
    - fake_shop_api: a FakeShopApi loaded with the sample products and sales
"""

import copy
from types import SimpleNamespace

import pytest

from bizdesk import create_app
from bizdesk.core.exceptions import CollaboratorError


class FakeApi:
    """In-memory stand-in for an entity client.

    ``rows`` are raw backend dicts (mixed camelCase / snake_case allowed).
    Set ``fail_with`` to a CollaboratorError to make every call raise it.
    ``calls`` records (method, args) for assertions.
    """

    def __init__(self, rows=None, *, fail_with=None):
        self.rows = [dict(r) for r in rows or []]
        self.fail_with = fail_with
        self.calls = []
        self._next_id = max([r.get("id") or 0 for r in self.rows] + [0]) + 1

    def _record(self, method, *args):
        self.calls.append((method, args))
        if self.fail_with is not None:
            raise self.fail_with

    def _find(self, record_id):
        for row in self.rows:
            if row.get("id") == record_id:
                return row
        raise CollaboratorError("Record not found", 404, structured=True)

    # ── uniform contract ─────────────────────────────────────────────────

    def get_all(self):
        self._record("get_all")
        return copy.deepcopy(self.rows)

    def get_by_id(self, record_id):
        self._record("get_by_id", record_id)
        return dict(self._find(record_id))

    def create(self, payload):
        self._record("create", payload)
        row = {**payload, "id": self._next_id, "createdAt": "2024-06-01T10:00:00Z"}
        self._next_id += 1
        self.rows.append(row)
        return dict(row)

    def update(self, record_id, payload):
        self._record("update", record_id, payload)
        row = self._find(record_id)
        row.update(payload)
        return dict(row)

    def delete(self, record_id):
        self._record("delete", record_id)
        row = self._find(record_id)
        self.rows.remove(row)

    # ── notification extras ──────────────────────────────────────────────

    def get_my_notifications(self):
        self._record("get_my_notifications")
        return copy.deepcopy(self.rows)

    def mark_my_notification_as_read(self, record_id):
        self._record("mark_my_notification_as_read", record_id)
        row = self._find(record_id)
        row["isRead"] = True
        return dict(row)

    def mark_all_my_notifications_as_read(self):
        self._record("mark_all_my_notifications_as_read")
        for row in self.rows:
            row["isRead"] = True
        return {}

    def delete_my_notification(self, record_id):
        self._record("delete_my_notification", record_id)
        self.rows.remove(self._find(record_id))

    def send_notification_to_user(self, payload):
        self._record("send_notification_to_user", payload)
        return {**payload, "id": 900, "isRead": False}

    # ── project extras ───────────────────────────────────────────────────

    def upload_requirement(self, project_id, file):
        self._record("upload_requirement", project_id, file)
        return {"requirementsPdf": f"/uploads/{file[0]}"}


class FakeShopApi(FakeApi):
    """FakeApi plus the shop's stock, price and sales endpoints.

    Product rows use the backend's snake_case keys; ``sales`` holds raw sale
    rows.
    """

    def __init__(self, rows=None, sales=None, *, fail_with=None):
        super().__init__(rows, fail_with=fail_with)
        self.sales = [dict(s) for s in sales or []]

    def _find_sale(self, sale_id):
        for sale in self.sales:
            if sale.get("id") == sale_id:
                return sale
        raise CollaboratorError("Sale not found", 404, structured=True)

    def adjust_stock(self, record_id, quantity):
        self._record("adjust_stock", record_id, quantity)
        row = self._find(record_id)
        row["stock_quantity"] = quantity
        return dict(row)

    def adjust_price(self, record_id, price):
        self._record("adjust_price", record_id, price)
        row = self._find(record_id)
        row["price"] = price
        return dict(row)

    def upload_product_image(self, record_id, file):
        self._record("upload_product_image", record_id, file)
        row = self._find(record_id)
        row["image_url"] = f"/uploads/storage/images/{file[0]}"
        return dict(row)

    def sell_product(self, payload):
        self._record("sell_product", payload)
        row = self._find(payload["productId"])
        quantity = payload["quantity"]
        if row["stock_quantity"] < quantity:
            raise CollaboratorError(
                f"Insufficient stock. Only {row['stock_quantity']} units available.",
                400, structured=True)
        row["stock_quantity"] -= quantity
        sale = {
            "id": max([s["id"] for s in self.sales] + [0]) + 1,
            "product_id": row["id"],
            "quantity": quantity,
            "unit_price": row["price"],
            "total_amount": row["price"] * quantity,
            "customer_name": payload.get("customerName"),
            "customer_email": payload.get("customerEmail"),
            "sale_date": "2024-05-01T12:00:00Z",
            "is_reversed": 0,
        }
        self.sales.append(sale)
        return {"sale": dict(sale), "updatedProduct": dict(row)}

    def get_sales_history(self):
        self._record("get_sales_history")
        return copy.deepcopy(self.sales)

    def reverse_sale(self, payload):
        self._record("reverse_sale", payload)
        sale = self._find_sale(payload["saleId"])
        row = self._find(sale["product_id"])
        row["stock_quantity"] += sale["quantity"]
        sale["is_reversed"] = 1
        return {
            "message": "Sale reversed successfully",
            "saleId": sale["id"],
            "reversedQuantity": sale["quantity"],
            "reversedAmount": sale["total_amount"],
            "updatedProduct": dict(row),
        }

    def get_total_revenue(self):
        self._record("get_total_revenue")
        return float(sum(s["total_amount"] for s in self.sales if not s["is_reversed"]))


# ── Sample backend rows ──────────────────────────────────────────────────


USERS = [
    {"id": 1, "email": "admin@example.com", "role": "admin", "firstName": "Amina",
     "lastName": "Juma", "isVerified": True, "createdAt": "2024-01-05T08:00:00Z"},
    {"id": 2, "email": "ctrl@example.com", "role": "controller", "first_name": "Baraka",
     "last_name": "Mushi", "is_verified": False, "created_at": "2024-02-10T08:00:00Z"},
    {"id": 3, "email": "client@example.com", "role": "client", "firstName": "Chausiku",
     "lastName": "Kimaro", "createdAt": "2024-03-15T08:00:00Z"},
]

PROJECTS = [
    {"id": 1, "title": "Website Redesign", "description": "New marketing site",
     "status": "pending", "progress": 0, "clientId": 3, "serviceId": 1,
     "createdAt": "2024-01-10T09:00:00Z"},
    {"id": 2, "title": "Mobile App", "description": "JS based hybrid app",
     "status": "development", "progress": 40, "client_id": 3, "service_id": 2,
     "controller_id": 2, "amount": 1500000, "created_at": "2024-03-01T09:00:00Z"},
    {"id": 3, "title": "ERP rollout", "description": "Finance module",
     "status": "completed", "progress": 100, "clientId": 3, "serviceId": 1,
     "controllerId": 2, "amount": 2500000, "createdAt": "2024-02-01T09:00:00Z"},
]

SERVICES = [
    {"id": 1, "name": "Web Development", "description": "Sites and portals",
     "category": "development", "price": 500000},
    {"id": 2, "name": "Mobile Apps", "description": "iOS and Android",
     "category": "development"},
    {"id": 3, "name": "SEO Audit", "description": "Search ranking review",
     "category": "marketing", "price": 120000},
]

NOTIFICATIONS = [
    {"id": 10, "userId": 3, "title": "Project update", "message": "Mobile App moved to development",
     "type": "project_update", "isRead": False, "createdAt": "2024-03-02T10:00:00Z"},
    {"id": 11, "user_id": 3, "title": "Reminder", "message": "Upload requirements",
     "type": "reminder", "is_read": True, "created_at": "2024-03-03T10:00:00Z"},
    {"id": 12, "userId": 3, "title": "Welcome", "message": "Account created",
     "type": "info", "isRead": False},
]

SHOP_PRODUCTS = [
    {"id": 1, "name": "Office Chair", "description": "Ergonomic mesh chair",
     "category": "furniture", "price": 150000, "stock_quantity": 25,
     "created_at": "2024-01-05T08:00:00Z"},
    {"id": 2, "name": "Laptop Stand", "description": "Aluminium riser",
     "category": "accessories", "price": 45000, "stock_quantity": 4,
     "created_at": "2024-02-01T08:00:00Z"},
    {"id": 3, "name": "USB-C Hub", "description": "7-in-1 adapter",
     "category": "accessories", "price": 60000, "stock_quantity": 0,
     "created_at": "2024-03-10T08:00:00Z"},
    {"id": 4, "name": "Standing Desk", "description": "Electric height adjustable",
     "category": "furniture", "price": 600000, "stock_quantity": 12,
     "created_at": "2024-01-20T08:00:00Z"},
]

SALES = [
    {"id": 1, "product_id": 1, "product_name": "Office Chair", "product_category": "furniture",
     "quantity": 2, "unit_price": 150000, "total_amount": 300000,
     "customer_name": "Neema Said", "sale_date": "2024-04-01T10:00:00Z", "is_reversed": 0},
    {"id": 2, "product_id": 2, "product_name": "Laptop Stand", "product_category": "accessories",
     "quantity": 1, "unit_price": 45000, "total_amount": 45000,
     "customer_name": "Juma Ali", "sale_date": "2024-04-03T10:00:00Z", "is_reversed": 1},
    {"id": 3, "product_id": 4, "product_name": "Standing Desk", "product_category": "furniture",
     "quantity": 1, "unit_price": 600000, "total_amount": 600000,
     "sale_date": "2024-04-02T10:00:00Z", "is_reversed": 0},
]


# ── App fixtures ─────────────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    application = create_app("testing")
    return application


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture()
def backend(app):
    """Fake collaborators for every entity, wired into the app for one test.

    ``backend.tokens`` lists the bearer tokens the views passed through.
    """
    fakes = {
        "users": FakeApi(USERS),
        "projects": FakeApi(PROJECTS),
        "services": FakeApi(SERVICES),
        "notifications": FakeApi(NOTIFICATIONS),
        "shop": FakeShopApi(SHOP_PRODUCTS, SALES),
    }
    tokens = []

    def factory(token):
        tokens.append(token)
        return fakes

    original = app.extensions["bizdesk.collaborators"]
    app.extensions["bizdesk.collaborators"] = factory
    yield SimpleNamespace(apis=fakes, tokens=tokens)
    app.extensions["bizdesk.collaborators"] = original


@pytest.fixture()
def fake_api():
    """The FakeApi class itself: ``fake_api(rows, fail_with=...)``."""
    return FakeApi


@pytest.fixture()
def fake_shop_api():
    return FakeShopApi(SHOP_PRODUCTS, SALES)
