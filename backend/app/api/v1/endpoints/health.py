"""
Health check endpoint.
Returns system status and uptime information.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.controllers.health_controller import HealthController
from app.deps.di_container import get_health_service, get_notification_dispatcher
from app.schemas.health import HealthResponse
from app.services.health_service import HealthService
from app.services.notification_dispatcher import NotificationDispatcher

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def get_health(
    db: AsyncSession = Depends(get_db),
    health_service: HealthService = Depends(get_health_service),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> HealthResponse:
    """
    Health check endpoint.
    Returns system status, uptime, and health checks.
    """
    controller = HealthController(health_service, db, dispatcher)
    return await controller.get_health()
