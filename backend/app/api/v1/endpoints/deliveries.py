"""
Delivery API endpoints.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.controllers.delivery_controller import DeliveryController
from app.core.config import Settings
from app.core.exceptions import InvalidReferenceError
from app.deps.di_container import get_notification_dispatcher, get_settings
from app.models.delivery import ConfirmRole
from app.services.notification_dispatcher import NotificationDispatcher
from app.schemas.delivery import (
    DeliveryResponse,
    DeliveryListResponse,
    DeliveryStatusUpdate,
    ConfirmationLinkResponse,
)

router = APIRouter()


@router.get("/site/{site_id}", response_model=DeliveryListResponse)
async def list_site_deliveries(
    site_id: int,
    db: AsyncSession = Depends(get_db),
) -> DeliveryListResponse:
    """List deliveries a site sends or receives, latest target date first."""
    controller = DeliveryController(db)
    return await controller.list_site_deliveries(site_id)


@router.get("/{public_url_key}", response_model=DeliveryResponse)
async def get_delivery(
    public_url_key: str,
    db: AsyncSession = Depends(get_db),
) -> DeliveryResponse:
    """Get a delivery by its public tracking key."""
    controller = DeliveryController(db)
    return await controller.get_delivery(public_url_key)


@router.delete("/{delivery_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_delivery(
    delivery_id: int,
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete a delivery by its external reference; unknown references are ignored."""
    controller = DeliveryController(db)
    await controller.delete_delivery(delivery_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{public_url_key}/confirmations/{role}", response_model=ConfirmationLinkResponse)
async def get_confirmation_link(
    public_url_key: str,
    role: str,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ConfirmationLinkResponse:
    """Get the confirmation link for one party of a delivery."""
    try:
        confirm_role = ConfirmRole(role)
    except ValueError:
        raise InvalidReferenceError("Unknown confirmation role", details={"role": role})
    controller = DeliveryController(db, tracking_domain=settings.DEPLOY_URL)
    return await controller.get_confirmation_link(public_url_key, confirm_role)


@router.post("/{public_url_key}/status", response_model=DeliveryResponse)
async def change_delivery_status(
    public_url_key: str,
    status_data: DeliveryStatusUpdate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
    settings: Settings = Depends(get_settings),
) -> DeliveryResponse:
    """Change a delivery's status."""
    controller = DeliveryController(db, dispatcher, settings.DEPLOY_URL)
    return await controller.change_status(public_url_key, status_data.delivery_status)
