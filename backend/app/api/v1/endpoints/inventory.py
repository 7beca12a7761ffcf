"""
Item and site inventory API endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_db
from app.controllers.inventory_controller import InventoryController
from app.deps.di_container import get_notification_dispatcher
from app.services.notification_dispatcher import NotificationDispatcher
from app.schemas.inventory import (
    ItemCreate,
    InventoryActivate,
    InventoryStatusUpdate,
    InventoryUpdateResponse,
)

items_router = APIRouter()
site_inventory_router = APIRouter()


@items_router.post("", response_model=InventoryUpdateResponse, status_code=status.HTTP_201_CREATED)
async def add_new_item(
    item_data: ItemCreate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> InventoryUpdateResponse:
    """Create a new item, optionally activating it at a site."""
    controller = InventoryController(db, dispatcher)
    return await controller.add_new_item(item_data)


@site_inventory_router.post("/{site_id}/inventory", response_model=InventoryUpdateResponse)
async def activate_item(
    site_id: int,
    item_data: InventoryActivate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> InventoryUpdateResponse:
    """Activate an item at a site."""
    controller = InventoryController(db, dispatcher)
    return await controller.activate_item(site_id, item_data)


@site_inventory_router.patch("/{site_id}/inventory/{item_name}", response_model=InventoryUpdateResponse)
async def update_item_status(
    site_id: int,
    item_name: str,
    status_data: InventoryStatusUpdate,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> InventoryUpdateResponse:
    """Change an item's status at a site."""
    controller = InventoryController(db, dispatcher)
    return await controller.update_item_status(site_id, item_name, status_data)


@site_inventory_router.delete("/{site_id}/inventory/{item_name}", response_model=InventoryUpdateResponse)
async def deactivate_item(
    site_id: int,
    item_name: str,
    db: AsyncSession = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> InventoryUpdateResponse:
    """Deactivate an item at a site."""
    controller = InventoryController(db, dispatcher)
    return await controller.deactivate_item(site_id, item_name)
