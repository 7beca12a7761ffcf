"""
Needs-matching Pydantic schemas.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import List


class NeedsMatchRequest(BaseModel):
    """
    Request to compute which supplies can move between two sites.

    Site references arrive as lists because the scheduling tool sends linked
    records; an empty list means the site is not known to this system.
    """
    delivery_id: int
    from_site_wss_id: List[int]
    to_site_wss_id: List[int]

    class Config:
        alias_generator = to_camel
        populate_by_name = True
