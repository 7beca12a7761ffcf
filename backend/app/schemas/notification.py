"""
Outbound webhook payloads, serialized in the camelCase format the automation
scenarios expect.
"""

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional


class WebhookPayload(BaseModel):
    """Base for outbound payloads."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    def to_json_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


class NewItemPayload(WebhookPayload):
    item_name: str = Field(..., alias="item-name")


class InventoryChangePayload(WebhookPayload):
    site_name: str
    site_wss_id: Optional[int] = None
    item_name: str
    item_status: Optional[str] = None
    inventory_wss_id: Optional[int] = None
    active: bool


class SiteExportPayload(WebhookPayload):
    site_name: str
    wss_id: Optional[int] = None
    site_type: List[str]
    contact_number: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    website: Optional[str] = None
    county: Optional[str] = None
    donation_status: str
    active: bool
    urgently_needed: List[str] = Field(default_factory=list)
    needed: List[str] = Field(default_factory=list)
    available: List[str] = Field(default_factory=list)
    oversupply: List[str] = Field(default_factory=list)


class MatchComputedPayload(WebhookPayload):
    delivery_id: int
    item_list: List[str]


class DeliveryStatusPayload(WebhookPayload):
    delivery_id: int
    delivery_status: str
    pickup_confirm_link: str
    drop_off_confirm_link: str
    driver_confirm_link: str
