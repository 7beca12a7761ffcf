"""
Delivery controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.delivery_service import DeliveryService
from app.services.notification_dispatcher import NotificationDispatcher
from app.models.delivery import ConfirmRole, DeliveryStatus
from app.schemas.delivery import (
    DeliveryUpsert,
    DeliveryUpsertResponse,
    DeliveryResponse,
    DeliveryListResponse,
    ConfirmationLinkResponse,
)


class DeliveryController(BaseController):
    """Controller for delivery operations."""

    def __init__(
        self,
        session: AsyncSession,
        dispatcher: Optional[NotificationDispatcher] = None,
        tracking_domain: str = "",
    ):
        self.delivery_service = DeliveryService(session, dispatcher, tracking_domain)

    async def upsert_delivery(self, data: DeliveryUpsert) -> DeliveryUpsertResponse:
        """Create or update a delivery from the scheduling tool."""
        return await self.delivery_service.upsert_delivery(data)

    async def get_delivery(self, public_url_key: str) -> DeliveryResponse:
        """Get a delivery by its public tracking key."""
        return await self.delivery_service.fetch_by_public_key(public_url_key)

    async def list_site_deliveries(self, site_id: int) -> DeliveryListResponse:
        """List deliveries to or from a site."""
        return await self.delivery_service.fetch_by_site(site_id)

    async def delete_delivery(self, delivery_id: int) -> bool:
        """Delete a delivery by its external reference."""
        return await self.delivery_service.delete_delivery(delivery_id)

    async def get_confirmation_link(self, public_url_key: str, role: ConfirmRole) -> ConfirmationLinkResponse:
        return await self.delivery_service.get_confirmation_link(public_url_key, role)

    async def change_status(self, public_url_key: str, status: DeliveryStatus) -> DeliveryResponse:
        """Change a delivery's status."""
        return await self.delivery_service.change_status(public_url_key, status)
