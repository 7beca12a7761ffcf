"""
Inventory controller.
"""

from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.controllers.base_controller import BaseController
from app.services.inventory_service import InventoryService
from app.services.notification_dispatcher import NotificationDispatcher
from app.schemas.inventory import (
    ItemCreate,
    InventoryActivate,
    InventoryStatusUpdate,
    InventoryUpdateResponse,
)


class InventoryController(BaseController):
    """Controller for item and site inventory operations."""

    def __init__(self, session: AsyncSession, dispatcher: Optional[NotificationDispatcher] = None):
        self.inventory_service = InventoryService(session, dispatcher)

    async def add_new_item(self, data: ItemCreate) -> InventoryUpdateResponse:
        """Create a new item."""
        return await self.inventory_service.add_new_item(data)

    async def activate_item(self, site_id: int, data: InventoryActivate) -> InventoryUpdateResponse:
        """Activate an item at a site."""
        return await self.inventory_service.activate_item(site_id, data.item_name, data.item_status)

    async def update_item_status(
        self,
        site_id: int,
        item_name: str,
        data: InventoryStatusUpdate,
    ) -> InventoryUpdateResponse:
        """Change an item's status at a site."""
        return await self.inventory_service.update_item_status(site_id, item_name, data.item_status)

    async def deactivate_item(self, site_id: int, item_name: str) -> InventoryUpdateResponse:
        """Deactivate an item at a site."""
        return await self.inventory_service.deactivate_item(site_id, item_name)
