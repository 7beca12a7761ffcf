"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from app.models.site import Site, SiteType
from app.models.inventory import Item, ItemStatus, SiteItem, SiteItemAudit
from app.models.delivery import (
    Delivery,
    DeliveryConfirmation,
    DeliveryStatus,
    ConfirmRole,
)
from app.models.association_tables import delivery_items

__all__ = [
    "Site",
    "SiteType",
    "Item",
    "ItemStatus",
    "SiteItem",
    "SiteItemAudit",
    "Delivery",
    "DeliveryConfirmation",
    "DeliveryStatus",
    "ConfirmRole",
    "delivery_items",
]
