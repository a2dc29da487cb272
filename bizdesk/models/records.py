"""
bizdesk — canonical record types.

Records:
    - UserRecord
    - ProjectRecord
    - ServiceRecord
    - NotificationRecord
    - ShopProductRecord
    - SaleRecord

Attributes are snake_case; ``to_dict()`` renders the camelCase shape the
dashboard UI consumes. Instances are built only by
``bizdesk.services.normalizer``.
"""

from __future__ import annotations

from dataclasses import dataclass

from bizdesk.models.vocab import stock_level


@dataclass
class UserRecord:
    id: int | None = None
    email: str = ""
    role: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    is_verified: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def display_name(self) -> str:
        full = f"{self.first_name} {self.last_name}".strip()
        return full or self.email

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "isVerified": self.is_verified,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class ProjectRecord:
    id: int | None = None
    title: str = ""
    description: str = ""
    service_id: int | None = None
    client_id: int | None = None
    controller_id: int | None = None
    status: str = ""
    progress: int | float = 0
    amount: float | None = None
    amount_description: str | None = None
    requirements_pdf: str | None = None
    client_name: str = ""
    controller_name: str = ""
    service_name: str = ""
    start_date: str | None = None
    end_date: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "serviceId": self.service_id,
            "clientId": self.client_id,
            "controllerId": self.controller_id,
            "status": self.status,
            "progress": self.progress,
            "amount": self.amount,
            "amountDescription": self.amount_description,
            "requirementsPdf": self.requirements_pdf,
            "clientName": self.client_name,
            "controllerName": self.controller_name,
            "serviceName": self.service_name,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class ServiceRecord:
    id: int | None = None
    name: str = ""
    description: str = ""
    category: str = ""
    price: float | None = None
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "price": self.price,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class NotificationRecord:
    id: int | None = None
    user_id: int | None = None
    title: str = ""
    message: str = ""
    type: str = ""
    is_read: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "message": self.message,
            "type": self.type,
            "isRead": self.is_read,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class ShopProductRecord:
    id: int | None = None
    name: str = ""
    description: str = ""
    price: float | None = None
    category: str = ""
    stock_quantity: int = 0
    sold_quantity: int = 0
    image_url: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @property
    def stock_level(self) -> str:
        return stock_level(self.stock_quantity)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "category": self.category,
            "stockQuantity": self.stock_quantity,
            "soldQuantity": self.sold_quantity,
            "imageUrl": self.image_url,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class SaleRecord:
    id: int | None = None
    product_id: int | None = None
    product_name: str = ""
    product_category: str = ""
    quantity: int = 0
    unit_price: float = 0
    total_amount: float = 0
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    sale_date: str | None = None
    is_reversed: bool = False
    created_at: str | None = None
    updated_at: str | None = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "productId": self.product_id,
            "productName": self.product_name,
            "productCategory": self.product_category,
            "quantity": self.quantity,
            "unitPrice": self.unit_price,
            "totalAmount": self.total_amount,
            "customerName": self.customer_name,
            "customerEmail": self.customer_email,
            "customerPhone": self.customer_phone,
            "saleDate": self.sale_date,
            "isReversed": self.is_reversed,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
