"""
Health controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.schemas.health import HealthResponse
from app.services.health_service import HealthService
from app.services.notification_dispatcher import NotificationDispatcher


class HealthController(BaseController):
    """Controller for health check operations."""

    def __init__(
        self,
        health_service: HealthService,
        session: AsyncSession,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        self.health_service = health_service
        self.session = session
        self.dispatcher = dispatcher

    async def get_health(self) -> HealthResponse:
        return await self.health_service.get_health(self.session, self.dispatcher)
