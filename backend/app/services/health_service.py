"""
Health service.
Reports uptime, database connectivity and notification worker state.
"""

import time
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.services.notification_dispatcher import NotificationDispatcher
from app.db.repositories.health_repository import HealthRepository
from app.schemas.health import HealthResponse


class HealthService(BaseService):
    """Service for health check operations."""

    def __init__(self, version: str = ""):
        self.version = version
        self.start_time = time.time()

    async def get_health(
        self,
        session: AsyncSession,
        dispatcher: Optional[NotificationDispatcher] = None,
    ) -> HealthResponse:
        """
        Get system health status.

        Only the database check affects the overall status; a disabled
        notification dispatcher is a valid configuration.
        """
        uptime_seconds = int(time.time() - self.start_time)

        checks = {}
        db_ok = await HealthRepository(session).check_database()
        checks["database"] = "ok" if db_ok else "error"

        if dispatcher is None or not dispatcher.config.enabled:
            checks["notifications"] = "disabled"
        else:
            checks["notifications"] = "ok" if dispatcher.running else "idle"

        return HealthResponse(
            status="ok" if db_ok else "degraded",
            version=self.version,
            uptime=f"PT{uptime_seconds}S",  # ISO 8601 duration
            checks=checks,
        )
