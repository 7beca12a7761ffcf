"""
Inventory Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional

from app.models.inventory import ItemStatus


def _parse_item_status(value):
    if value is None or isinstance(value, ItemStatus):
        return value
    return ItemStatus.from_text(value)


class ItemCreate(BaseModel):
    """Schema for creating a brand new item, optionally activating it at a site."""
    item_name: str = Field(..., min_length=1, max_length=255)
    site_id: Optional[int] = None
    item_status: Optional[ItemStatus] = None

    @field_validator("item_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("item_status", mode="before")
    @classmethod
    def parse_status(cls, value):
        return _parse_item_status(value)


class InventoryActivate(BaseModel):
    """Schema for activating an item at a site."""
    item_name: str = Field(..., min_length=1, max_length=255)
    item_status: ItemStatus

    @field_validator("item_name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("item_status", mode="before")
    @classmethod
    def parse_status(cls, value):
        return _parse_item_status(value)


class InventoryStatusUpdate(BaseModel):
    """Schema for changing an item's status at a site."""
    item_status: ItemStatus

    @field_validator("item_status", mode="before")
    @classmethod
    def parse_status(cls, value):
        return _parse_item_status(value)


class InventoryUpdateResponse(BaseModel):
    """Result of an inventory change."""
    message: str = "Updated"
    changed: bool
