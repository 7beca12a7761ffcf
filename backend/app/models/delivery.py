"""
Delivery models: point-to-point deliveries and their per-party confirmations.
"""

from sqlalchemy import (
    Column,
    String,
    Integer,
    BigInteger,
    Date,
    DateTime,
    Text,
    ForeignKey,
    UniqueConstraint,
    Enum as SQLEnum,
    func,
)
from sqlalchemy.orm import relationship
from typing import Optional
import enum

from app.db.base import Base


class DeliveryStatus(str, enum.Enum):
    """
    Delivery progression as reported by the upstream scheduling tool.

    No transition order is enforced; only completion carries meaning.
    """
    CREATING_DISPATCH = "Creating Dispatch"
    IN_PROGRESS = "In Progress"
    DELIVERY_COMPLETED = "Delivery Completed"

    @classmethod
    def from_text(cls, value: str) -> "DeliveryStatus":
        """Parse status text case-insensitively, accepting legacy spellings."""
        normalized = (value or "").strip().upper()
        if normalized in _COMPLETE_SPELLINGS:
            return cls.DELIVERY_COMPLETED
        for member in cls:
            if member.value.upper() == normalized or member.name == normalized:
                return member
        raise ValueError(f"Unknown delivery status: {value}")

    @property
    def is_complete(self) -> bool:
        return self is DeliveryStatus.DELIVERY_COMPLETED


# Older scheduling tool versions send "complete" instead of "Delivery Completed"
_COMPLETE_SPELLINGS = frozenset({"DELIVERY COMPLETED", "COMPLETE"})


def is_complete_status(status: Optional[str]) -> bool:
    """True iff the status text names the terminal state."""
    if not status:
        return False
    return status.strip().upper() in _COMPLETE_SPELLINGS


class ConfirmRole(str, enum.Enum):
    """Parties that confirm a delivery."""
    PICKUP_SITE = "pickup-site"
    DROPOFF_SITE = "dropoff-site"
    DRIVER = "driver"


class Delivery(Base):
    """A delivery of items from one site to another."""

    __tablename__ = "deliveries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    external_ref = Column(BigInteger, unique=True, nullable=False, index=True)
    from_site_id = Column(Integer, ForeignKey("sites.id"), nullable=False, index=True)
    to_site_id = Column(Integer, ForeignKey("sites.id"), nullable=False, index=True)
    delivery_status = Column(String(50), nullable=True)
    target_delivery_date = Column(Date, nullable=True)
    dispatcher_name = Column(String(255), nullable=True)
    dispatcher_number = Column(String(50), nullable=True)
    driver_name = Column(String(255), nullable=True)
    driver_number = Column(String(50), nullable=True)
    driver_license_plates = Column(String(255), nullable=True)
    dispatcher_notes = Column(Text, nullable=True)
    public_url_key = Column(String(64), unique=True, nullable=False, index=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    from_site = relationship("Site", foreign_keys=[from_site_id])
    to_site = relationship("Site", foreign_keys=[to_site_id])
    confirmations = relationship(
        "DeliveryConfirmation",
        back_populates="delivery",
        cascade="all, delete-orphan",
    )

    @property
    def is_complete(self) -> bool:
        return is_complete_status(self.delivery_status)


class DeliveryConfirmation(Base):
    """Confirmation code issued to one party of a delivery."""

    __tablename__ = "delivery_confirmations"
    __table_args__ = (
        UniqueConstraint("delivery_id", "confirm_role", name="uq_delivery_confirmation_role"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    delivery_id = Column(Integer, ForeignKey("deliveries.id", ondelete="CASCADE"), nullable=False, index=True)
    confirm_role = Column(SQLEnum(ConfirmRole), nullable=False)
    code = Column(String(16), nullable=False)
    created_at = Column(DateTime, nullable=False, server_default=func.now())

    # Relationships
    delivery = relationship("Delivery", back_populates="confirmations")
