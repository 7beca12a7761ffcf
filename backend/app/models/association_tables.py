"""
Association tables for many-to-many relationships.
"""

from sqlalchemy import Table, Column, Integer, ForeignKey

from app.db.base import Base

# Delivery ↔ Item (many-to-many); the composite key keeps a delivery's item list free of duplicates
delivery_items = Table(
    "delivery_items",
    Base.metadata,
    Column("delivery_id", Integer, ForeignKey("deliveries.id", ondelete="CASCADE"), primary_key=True),
    Column("item_id", Integer, ForeignKey("items.id", ondelete="CASCADE"), primary_key=True),
)
