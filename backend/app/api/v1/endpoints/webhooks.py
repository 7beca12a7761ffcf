"""
Inbound webhook endpoints called by the upstream scheduling tool.
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.controllers.needs_match_controller import NeedsMatchController
from app.controllers.delivery_controller import DeliveryController
from app.core.config import Settings
from app.deps.di_container import get_notification_dispatcher, get_settings
from app.services.notification_dispatcher import NotificationDispatcher
from app.schemas.needs_match import NeedsMatchRequest
from app.schemas.delivery import DeliveryUpsert, DeliveryUpsertResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/add-supplies-to-delivery", response_class=PlainTextResponse)
async def add_supplies_to_delivery(
    match_request: NeedsMatchRequest,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> str:
    """
    Compute which items the pickup site can send to the drop-off site and
    push the list to the delivery's automation.
    """
    logger.info(
        f"Received add-supplies-to-delivery for delivery {match_request.delivery_id}",
        extra={"delivery_id": match_request.delivery_id},
    )
    controller = NeedsMatchController(db, dispatcher)
    return await controller.add_supplies_to_delivery(match_request)


@router.post("/upsert-delivery", response_model=DeliveryUpsertResponse)
async def upsert_delivery(
    delivery_data: DeliveryUpsert,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    settings: Settings = Depends(get_settings),
) -> DeliveryUpsertResponse:
    """Create or update a delivery keyed by its external reference."""
    logger.info(
        f"Received delivery upsert for delivery {delivery_data.delivery_id}",
        extra={"delivery_id": delivery_data.delivery_id},
    )
    controller = DeliveryController(db, dispatcher, settings.DEPLOY_URL)
    return await controller.upsert_delivery(delivery_data)
