"""
Needs-match controller.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.needs_matching_service import NeedsMatchingService
from app.services.notification_dispatcher import NotificationDispatcher
from app.schemas.needs_match import NeedsMatchRequest


class NeedsMatchController(BaseController):
    """Controller for needs-matching operations."""

    def __init__(self, session: AsyncSession, dispatcher: Optional[NotificationDispatcher] = None):
        self.matching_service = NeedsMatchingService(session, dispatcher)

    async def add_supplies_to_delivery(self, request: NeedsMatchRequest) -> str:
        """Compute the match for a delivery and publish the item list."""
        return await self.matching_service.add_supplies_to_delivery(request)

    async def compute_needs_match(self, from_site_wss_id: int, to_site_wss_id: int) -> List[str]:
        return await self.matching_service.compute_needs_match(from_site_wss_id, to_site_wss_id)
