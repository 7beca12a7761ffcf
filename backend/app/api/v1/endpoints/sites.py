"""
Site API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.controllers.site_controller import SiteController
from app.deps.di_container import get_notification_dispatcher
from app.services.notification_dispatcher import NotificationDispatcher
from app.schemas.site import SiteStatusUpdate, SiteStatusResponse

router = APIRouter()


@router.patch("/{site_id}/status", response_model=SiteStatusResponse)
async def update_site_status(
    site_id: int,
    status_data: SiteStatusUpdate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> SiteStatusResponse:
    """Update a site's active, donation and role flags."""
    controller = SiteController(db, dispatcher)
    return await controller.update_status(site_id, status_data)
