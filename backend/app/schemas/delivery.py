"""
Delivery Pydantic schemas for request/response validation.
"""

import logging
from datetime import date
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional

from app.models.delivery import ConfirmRole, DeliveryStatus

logger = logging.getLogger(__name__)


def first_or_none(values: List[str]) -> Optional[str]:
    """Collapse a 0-1 element list from the scheduling tool into a scalar."""
    if not values:
        return None
    value = values[0].strip() if isinstance(values[0], str) else values[0]
    return value or None


def _parse_delivery_status(value):
    if value is None or isinstance(value, DeliveryStatus):
        return value
    if isinstance(value, str) and not value.strip():
        return None
    return DeliveryStatus.from_text(value)


class DeliveryUpsert(BaseModel):
    """Delivery as pushed by the upstream scheduling tool (camelCase wire format)."""
    delivery_id: int
    delivery_status: Optional[DeliveryStatus] = None
    dispatcher_name: List[str] = Field(default_factory=list)
    dispatcher_number: List[str] = Field(default_factory=list)
    driver_name: List[str] = Field(default_factory=list)
    driver_number: List[str] = Field(default_factory=list)
    drop_off_site_wss_id: List[int] = Field(..., min_length=1)
    pickup_site_wss_id: List[int] = Field(..., min_length=1)
    item_list_wss_ids: List[int] = Field(default_factory=list)
    license_plate_numbers: List[str] = Field(default_factory=list)
    target_delivery_date: Optional[date] = None
    dispatcher_notes: Optional[str] = None
    public_url_key: Optional[str] = Field(None, max_length=64)

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator(
        "dispatcher_name",
        "dispatcher_number",
        "driver_name",
        "driver_number",
        "item_list_wss_ids",
        "license_plate_numbers",
        mode="before",
    )
    @classmethod
    def null_list_as_empty(cls, value):
        return [] if value is None else value

    @field_validator("delivery_status", mode="before")
    @classmethod
    def parse_status(cls, value):
        return _parse_delivery_status(value)

    @field_validator("target_delivery_date", mode="before")
    @classmethod
    def lenient_date(cls, value):
        if value is None or isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value).strip())
        except ValueError:
            logger.warning(f"Ignoring invalid target delivery date: {value}")
            return None

    @model_validator(mode="after")
    def sites_differ(self):
        if self.pickup_site_wss_id[0] == self.drop_off_site_wss_id[0]:
            raise ValueError("Pickup and drop-off sites must be different")
        return self


class DeliveryStatusUpdate(BaseModel):
    """Schema for changing a delivery's status."""
    delivery_status: DeliveryStatus

    @field_validator("delivery_status", mode="before")
    @classmethod
    def parse_status(cls, value):
        return _parse_delivery_status(value)


class DeliverySiteDetail(BaseModel):
    """Site detail for one party of a delivery."""
    site_id: int
    wss_id: Optional[int] = None
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    contact_name: Optional[str] = None
    contact_number: Optional[str] = None
    hours: Optional[str] = None


class DeliveryResponse(BaseModel):
    """Schema for delivery response."""
    delivery_id: int
    public_url_key: str
    delivery_status: Optional[str] = None
    is_complete: bool = False
    target_delivery_date: Optional[date] = None
    dispatcher_name: Optional[str] = None
    dispatcher_number: Optional[str] = None
    dispatcher_notes: Optional[str] = None
    driver_name: Optional[str] = None
    driver_number: Optional[str] = None
    license_plate_numbers: Optional[str] = None
    from_site: DeliverySiteDetail
    to_site: DeliverySiteDetail
    item_list: List[str] = Field(default_factory=list)


class DeliveryListResponse(BaseModel):
    """Schema for delivery list response."""
    items: List[DeliveryResponse]
    total: int


class DeliveryUpsertResponse(BaseModel):
    """Result of a delivery upsert."""
    delivery_id: int
    public_url_key: str
    item_count: int


class ConfirmationLinkResponse(BaseModel):
    """Confirmation link for one party of a delivery."""
    role: ConfirmRole
    url: str
