"""
Inventory service with business logic.
Manages which items are active at a site and their status, with an audit trail.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.services.notification_dispatcher import NotificationDispatcher, NotificationEvent
from app.db.repositories.site_repository import SiteRepository
from app.db.repositories.item_repository import ItemRepository
from app.db.repositories.inventory_repository import InventoryRepository
from app.models.inventory import Item, ItemStatus
from app.models.site import Site
from app.schemas.inventory import ItemCreate, InventoryUpdateResponse
from app.schemas.notification import InventoryChangePayload, NewItemPayload
from app.core.exceptions import DuplicateItemError, InvalidReferenceError

logger = logging.getLogger(__name__)

ACTIVE = "active"
INACTIVE = "inactive"


class InventoryService(BaseService):
    """Service for site inventory operations."""

    def __init__(self, session: AsyncSession, dispatcher: Optional[NotificationDispatcher] = None):
        self.session = session
        self.dispatcher = dispatcher
        self.site_repo = SiteRepository(session)
        self.item_repo = ItemRepository(session)
        self.inventory_repo = InventoryRepository(session)

    async def add_new_item(self, data: ItemCreate) -> InventoryUpdateResponse:
        """
        Create a brand new item, optionally activating it at a site right away.

        Raises:
            DuplicateItemError: If an item with the same name exists
            InvalidReferenceError: If the given site does not exist
        """
        site = await self._require_site(data.site_id) if data.site_id is not None else None

        item_id = await self.item_repo.insert_if_absent(data.item_name)
        if item_id is None:
            raise DuplicateItemError(
                "Item not added, already exists",
                details={"item_name": data.item_name},
            )

        item_status = data.item_status or ItemStatus.AVAILABLE
        activated = False
        if site is not None:
            activated = await self._activate(site, item_id, data.item_name, item_status)

        await self.session.commit()
        logger.info(f"New item created: {data.item_name}", extra={"item_id": item_id})

        self._notify(NotificationEvent.NEW_ITEM_CREATED, NewItemPayload(item_name=data.item_name))
        if activated:
            self._notify_inventory_change(site, data.item_name, item_status, active=True)
        return InventoryUpdateResponse(changed=True)

    async def activate_item(
        self,
        site_id: int,
        item_name: str,
        item_status: ItemStatus,
    ) -> InventoryUpdateResponse:
        """Make an existing item active at a site; already active is a no-op."""
        site = await self._require_site(site_id)
        item = await self._require_item(item_name)

        activated = await self._activate(site, item.id, item.name, item_status)
        await self.session.commit()

        if activated:
            self._notify_inventory_change(site, item.name, item_status, active=True)
        return InventoryUpdateResponse(changed=activated)

    async def deactivate_item(self, site_id: int, item_name: str) -> InventoryUpdateResponse:
        """Remove an item from a site's inventory; not active is a no-op."""
        site = await self._require_site(site_id)
        item = await self._require_item(item_name)

        entry = await self.inventory_repo.get_entry(site.id, item.id)
        if entry is None or not await self.inventory_repo.delete_entry(entry.id):
            return InventoryUpdateResponse(changed=False)

        await self.inventory_repo.add_audit(site.id, item.id, ACTIVE, INACTIVE)
        await self.site_repo.touch_inventory_updated(site.id)
        await self.session.commit()

        logger.info(
            f"Item {item.name} deactivated",
            extra={"site_id": site.id, "item_id": item.id},
        )
        self._notify_inventory_change(
            site,
            item.name,
            entry.item_status,
            active=False,
            inventory_wss_id=entry.wss_id,
        )
        return InventoryUpdateResponse(changed=True)

    async def update_item_status(
        self,
        site_id: int,
        item_name: str,
        item_status: ItemStatus,
    ) -> InventoryUpdateResponse:
        """
        Change an active item's status at a site.

        Raises:
            InvalidReferenceError: If the site or item is unknown, or the item is not active there
        """
        site = await self._require_site(site_id)
        item = await self._require_item(item_name)

        entry = await self.inventory_repo.get_entry(site.id, item.id)
        if entry is None:
            raise InvalidReferenceError(
                "Item is not active at site",
                details={"site_id": site.id, "item_name": item.name},
            )

        old_status = entry.item_status
        if old_status == item_status:
            return InventoryUpdateResponse(changed=False)

        await self.inventory_repo.set_status(entry.id, item_status)
        await self.inventory_repo.add_audit(site.id, item.id, old_status.value, item_status.value)
        await self.site_repo.touch_inventory_updated(site.id)
        await self.session.commit()

        logger.info(
            f"Item {item.name} status changed from {old_status.value} to {item_status.value}",
            extra={"site_id": site.id, "item_id": item.id},
        )
        self._notify_inventory_change(
            site,
            item.name,
            item_status,
            active=True,
            inventory_wss_id=entry.wss_id,
        )
        return InventoryUpdateResponse(changed=True)

    async def _activate(self, site: Site, item_id: int, item_name: str, item_status: ItemStatus) -> bool:
        inserted = await self.inventory_repo.insert_if_absent(site.id, item_id, item_status)
        if not inserted:
            # Concurrent or repeated activation; the entry already exists
            logger.warning(
                f"Item {item_name} already active at site {site.name}",
                extra={"site_id": site.id, "item_id": item_id},
            )
            return False

        await self.inventory_repo.add_audit(site.id, item_id, INACTIVE, ACTIVE)
        await self.site_repo.touch_inventory_updated(site.id)
        logger.info(f"Item {item_name} activated", extra={"site_id": site.id, "item_id": item_id})
        return True

    async def _require_site(self, site_id: int) -> Site:
        site = await self.site_repo.get(site_id)
        if site is None:
            raise InvalidReferenceError("Site not found", details={"site_id": site_id})
        return site

    async def _require_item(self, item_name: str) -> Item:
        item = await self.item_repo.get_by_name(item_name)
        if item is None:
            raise InvalidReferenceError("Item not found", details={"item_name": item_name})
        return item

    def _notify_inventory_change(
        self,
        site: Site,
        item_name: str,
        item_status: Optional[ItemStatus],
        active: bool,
        inventory_wss_id: Optional[int] = None,
    ) -> None:
        payload = InventoryChangePayload(
            site_name=site.name,
            site_wss_id=site.wss_id,
            item_name=item_name,
            item_status=item_status.value if item_status else None,
            inventory_wss_id=inventory_wss_id,
            active=active,
        )
        self._notify(NotificationEvent.INVENTORY_ITEM_CHANGED, payload)

    def _notify(self, event: NotificationEvent, payload) -> None:
        if self.dispatcher is not None:
            self.dispatcher.notify(event, payload.to_json_dict())
