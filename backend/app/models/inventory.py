"""
Inventory models: items, per-site item status, and the status audit trail.

Also holds the matching eligibility rules, which depend only on a site's role
and an item's status.
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    BigInteger,
    DateTime,
    ForeignKey,
    UniqueConstraint,
    Enum as SQLEnum,
    func,
)
from sqlalchemy.orm import relationship
from typing import FrozenSet, Optional
import enum

from app.db.base import Base
from app.models.site import SiteType


class ItemStatus(str, enum.Enum):
    """Status of an item at a site."""
    AVAILABLE = "Available"
    NEEDED = "Needed"
    URGENTLY_NEEDED = "Urgently Needed"
    OVERSUPPLY = "Oversupply"

    @classmethod
    def from_text(cls, value: str) -> "ItemStatus":
        """Parse display text case-insensitively; raises ValueError on unknown text."""
        normalized = (value or "").strip().upper()
        for member in cls:
            if member.value.upper() == normalized or member.name == normalized:
                return member
        raise ValueError(f"Invalid item status: {value}")

    @property
    def is_need(self) -> bool:
        return self in DEMAND_STATUSES


DEMAND_STATUSES: FrozenSet[ItemStatus] = frozenset(
    {ItemStatus.NEEDED, ItemStatus.URGENTLY_NEEDED}
)

_SUPPLY_STATUSES_BY_SITE_TYPE = {
    SiteType.SUPPLY_HUB: frozenset({ItemStatus.AVAILABLE, ItemStatus.OVERSUPPLY}),
    SiteType.DISTRIBUTION_CENTER: frozenset({ItemStatus.OVERSUPPLY}),
}


def supply_statuses_for(site_type: Optional[SiteType]) -> FrozenSet[ItemStatus]:
    """
    Item statuses a site of the given role may offer as outbound supply.

    Supply hubs give away anything available or oversupplied; distribution
    centers only give away oversupply. Unknown or missing roles offer nothing.
    """
    return _SUPPLY_STATUSES_BY_SITE_TYPE.get(site_type, frozenset())


class Item(Base):
    """A kind of relief supply, globally unique by name."""

    __tablename__ = "items"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wss_id = Column(BigInteger, unique=True, nullable=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)


class SiteItem(Base):
    """An item that is active at a site, with its current status."""

    __tablename__ = "site_items"
    __table_args__ = (
        UniqueConstraint("site_id", "item_id", name="uq_site_item_site_item"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False, index=True)
    item_status = Column(SQLEnum(ItemStatus), nullable=False, default=ItemStatus.AVAILABLE)
    wss_id = Column(BigInteger, unique=True, nullable=True)
    last_updated = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    site = relationship("Site", back_populates="inventory")
    item = relationship("Item")


class SiteItemAudit(Base):
    """Append-only record of inventory changes at a site."""

    __tablename__ = "site_item_audits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    site_id = Column(Integer, ForeignKey("sites.id", ondelete="CASCADE"), nullable=False, index=True)
    item_id = Column(Integer, ForeignKey("items.id", ondelete="CASCADE"), nullable=False)
    old_value = Column(String(50), nullable=False)
    new_value = Column(String(50), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
