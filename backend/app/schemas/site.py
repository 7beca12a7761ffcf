"""
Site Pydantic schemas for request/response validation.
"""

from pydantic import BaseModel, field_validator
from typing import Optional

from app.models.site import SiteType


class SiteStatusUpdate(BaseModel):
    """Schema for updating a site's status flags (all fields optional)."""
    active: Optional[bool] = None
    accepting_donations: Optional[bool] = None
    site_type: Optional[SiteType] = None

    @field_validator("site_type", mode="before")
    @classmethod
    def parse_site_type(cls, value):
        if value is None or isinstance(value, SiteType):
            return value
        return SiteType.from_text(value)


class SiteStatusResponse(BaseModel):
    """Schema for site status response."""
    id: int
    wss_id: Optional[int] = None
    name: str
    site_type: Optional[SiteType] = None
    active: bool
    accepting_donations: bool

    class Config:
        from_attributes = True
