"""
Site model: supply hubs and distribution centers.
"""

from sqlalchemy import Column, String, Integer, BigInteger, Boolean, DateTime, Enum as SQLEnum
from sqlalchemy.orm import relationship
import enum

from app.db.base import Base


class SiteType(str, enum.Enum):
    """Role a site plays in the supply network."""
    SUPPLY_HUB = "Supply Hub"
    DISTRIBUTION_CENTER = "Distribution Center"

    @classmethod
    def from_text(cls, value: str) -> "SiteType":
        """Parse display text case-insensitively; raises ValueError on unknown text."""
        normalized = (value or "").strip().upper()
        for member in cls:
            if member.value.upper() == normalized or member.name == normalized:
                return member
        raise ValueError(f"Unknown site type: {value}")


class Site(Base):
    """A physical site that holds or requests relief supplies."""

    __tablename__ = "sites"

    id = Column(Integer, primary_key=True, autoincrement=True)
    wss_id = Column(BigInteger, unique=True, nullable=True, index=True)  # externally issued reference
    name = Column(String(255), unique=True, nullable=False)
    site_type = Column(SQLEnum(SiteType), nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    accepting_donations = Column(Boolean, nullable=False, default=True)

    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    county = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)
    website = Column(String(255), nullable=True)
    hours = Column(String(255), nullable=True)
    contact_name = Column(String(255), nullable=True)
    contact_number = Column(String(50), nullable=True)

    inventory_last_updated = Column(DateTime, nullable=True)

    # Relationships
    inventory = relationship("SiteItem", back_populates="site", cascade="all, delete-orphan")
