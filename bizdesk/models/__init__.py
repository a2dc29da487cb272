"""
bizdesk — in-memory record types and vocabularies.

There is no persistence layer: records are fetched from the backend,
normalized into these dataclasses and discarded after each request.
"""

from bizdesk.models.records import (  # noqa: F401
    NotificationRecord,
    ProjectRecord,
    SaleRecord,
    ServiceRecord,
    ShopProductRecord,
    UserRecord,
)
