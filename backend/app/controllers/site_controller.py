"""
Site controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.site_service import SiteService
from app.services.notification_dispatcher import NotificationDispatcher
from app.schemas.site import SiteStatusUpdate, SiteStatusResponse


class SiteController(BaseController):
    """Controller for site operations."""

    def __init__(self, session: AsyncSession, dispatcher: Optional[NotificationDispatcher] = None):
        self.site_service = SiteService(session, dispatcher)

    async def update_status(self, site_id: int, data: SiteStatusUpdate) -> SiteStatusResponse:
        """Update a site's status flags."""
        return await self.site_service.update_status(site_id, data)
