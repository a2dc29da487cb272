"""
Entity clients — the uniform collaborator contract per backend resource.

    get_all()            -> list[dict]
    get_by_id(id)        -> dict
    create(payload)      -> dict
    update(id, payload)  -> dict
    delete(id)           -> None

Plus per-entity extras such as project uploads, the "my notifications"
endpoints and shop sales.
Payloads in and out are raw backend dicts; normalization happens in the
service layer.
"""

from __future__ import annotations

from typing import Any

from bizdesk.integrations.backend_gateway import BackendGateway


class EntityApi:
    """REST resource at ``path`` on the backend."""

    path = ""
    list_key: str | None = None
    item_key: str | None = None

    def __init__(self, gateway: BackendGateway, token: str | None = None) -> None:
        self.gateway = gateway
        self.token = token

    def _call(self, method: str, path: str, *, key: str | None = None, **kwargs) -> Any:
        return self.gateway.request(method, path, token=self.token, envelope_key=key, **kwargs)

    def get_all(self) -> list:
        data = self._call("GET", self.path, key=self.list_key)
        return data if isinstance(data, list) else []

    def get_by_id(self, record_id: int) -> dict:
        return self._call("GET", f"{self.path}/{record_id}", key=self.item_key) or {}

    def create(self, payload: dict) -> dict:
        return self._call("POST", self.path, key=self.item_key, json_body=payload) or {}

    def update(self, record_id: int, payload: dict) -> dict:
        return self._call("PUT", f"{self.path}/{record_id}", key=self.item_key,
                          json_body=payload) or {}

    def delete(self, record_id: int) -> None:
        self._call("DELETE", f"{self.path}/{record_id}")


class UsersApi(EntityApi):
    path = "/users"


class ServicesApi(EntityApi):
    path = "/services"


class ProjectsApi(EntityApi):
    path = "/projects"

    def upload_requirement(self, project_id: int, file: tuple) -> Any:
        """Upload the requirements PDF; ``file`` is (filename, stream, mimetype)."""
        return self._call("POST", f"/uploads/project/{project_id}/requirement",
                          files={"file": file})

    def upload_project_file(self, project_id: int, file: tuple) -> Any:
        return self._call("POST", f"{self.path}/{project_id}/upload", files={"file": file})


class NotificationsApi(EntityApi):
    path = "/notifications"
    list_key = "notifications"
    item_key = "notification"

    def get_all(self) -> list:
        data = self._call("GET", f"{self.path}/all", key=self.list_key)
        return data if isinstance(data, list) else []

    def get_by_id(self, record_id: int) -> dict:
        return self._call("GET", f"{self.path}/user/{record_id}", key=self.item_key) or {}

    def delete(self, record_id: int) -> None:
        self._call("POST", f"{self.path}/{record_id}/delete")

    # ── Current user's inbox ─────────────────────────────────────────────────

    def get_my_notifications(self) -> list:
        data = self._call("GET", f"{self.path}/user", key=self.list_key)
        return data if isinstance(data, list) else []

    def mark_my_notification_as_read(self, record_id: int) -> dict:
        return self._call("POST", f"{self.path}/user/{record_id}/read", key=self.item_key) or {}

    def mark_all_my_notifications_as_read(self) -> dict:
        return self._call("POST", f"{self.path}/user/read-all") or {}

    def delete_my_notification(self, record_id: int) -> None:
        self._call("POST", f"{self.path}/user/{record_id}/delete")

    def send_notification_to_user(self, payload: dict) -> dict:
        return self._call("POST", f"{self.path}/send-to-user", key=self.item_key,
                          json_body=payload) or {}


class ShopApi(EntityApi):
    path = "/shop"

    def adjust_stock(self, record_id: int, quantity: int) -> dict:
        return self._call("PUT", f"{self.path}/{record_id}/stock",
                          json_body={"quantity": quantity}) or {}

    def adjust_price(self, record_id: int, price) -> dict:
        return self._call("PUT", f"{self.path}/{record_id}/price",
                          json_body={"price": price}) or {}

    def upload_product_image(self, record_id: int, file: tuple) -> Any:
        """Upload a product image; ``file`` is (filename, stream, mimetype)."""
        return self._call("POST", f"/uploads/product/{record_id}/image", files={"file": file})

    # ── Sales ────────────────────────────────────────────────────────────────

    def sell_product(self, payload: dict) -> dict:
        """Returns ``{"sale": ..., "updatedProduct": ...}``."""
        return self._call("POST", f"{self.path}/sell", json_body=payload) or {}

    def get_sales_history(self) -> list:
        data = self._call("GET", f"{self.path}/sales")
        return data if isinstance(data, list) else []

    def reverse_sale(self, payload: dict) -> dict:
        return self._call("POST", f"{self.path}/reverse-sale", json_body=payload) or {}

    def get_total_revenue(self) -> Any:
        """A bare number, or ``{"total_revenue": ...}`` on older backends."""
        return self._call("GET", f"{self.path}/revenue")


API_CLASSES = {
    "users": UsersApi,
    "projects": ProjectsApi,
    "services": ServicesApi,
    "notifications": NotificationsApi,
    "shop": ShopApi,
}


def build_collaborators(gateway: BackendGateway, token: str | None = None) -> dict:
    """One client per entity, all sharing ``gateway`` and the caller's token."""
    return {name: cls(gateway, token) for name, cls in API_CLASSES.items()}
