"""
Inventory repository: per-site item status entries and their audit trail.
"""

from typing import Collection, List, Optional, Set
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, func

from app.db.repositories.base_repository import BaseRepository
from app.models.inventory import (
    DEMAND_STATUSES,
    Item,
    ItemStatus,
    SiteItem,
    SiteItemAudit,
)


class InventoryRepository(BaseRepository[SiteItem]):
    """Repository for site inventory operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(SiteItem, session)

    async def item_ids_with_status(
        self,
        site_id: int,
        statuses: Collection[ItemStatus],
    ) -> Set[int]:
        """IDs of items at a site whose status is one of the given statuses."""
        if not statuses:
            return set()
        result = await self.session.execute(
            select(SiteItem.item_id).where(
                SiteItem.site_id == site_id,
                SiteItem.item_status.in_(list(statuses)),
            )
        )
        return set(result.scalars().all())

    async def item_names_at_site(self, site_id: int, item_ids: Collection[int]) -> List[str]:
        """Names of the given items, restricted to entries at the site, ascending."""
        result = await self.session.execute(
            select(Item.name)
            .join(SiteItem, SiteItem.item_id == Item.id)
            .where(
                SiteItem.site_id == site_id,
                SiteItem.item_id.in_(list(item_ids)),
            )
            .order_by(Item.name.asc())
        )
        return list(result.scalars().all())

    async def get_entry(self, site_id: int, item_id: int) -> Optional[SiteItem]:
        """Get the inventory entry for a site and item."""
        result = await self.session.execute(
            select(SiteItem).where(
                SiteItem.site_id == site_id,
                SiteItem.item_id == item_id,
            )
        )
        return result.scalar_one_or_none()

    async def insert_if_absent(self, site_id: int, item_id: int, item_status: ItemStatus) -> bool:
        """
        Activate an item at a site with a single conditional insert.

        Returns:
            True if a new entry was written, False if the item was already active
        """
        stmt = (
            self.insert_stmt()
            .values(site_id=site_id, item_id=item_id, item_status=item_status)
            .on_conflict_do_nothing(index_elements=[SiteItem.site_id, SiteItem.item_id])
            .returning(SiteItem.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def delete_entry(self, entry_id: int) -> bool:
        """Delete an inventory entry by ID."""
        result = await self.session.execute(
            delete(SiteItem).where(SiteItem.id == entry_id)
        )
        return result.rowcount > 0

    async def set_status(self, entry_id: int, item_status: ItemStatus) -> None:
        """Change an entry's status in place."""
        await self.session.execute(
            update(SiteItem)
            .where(SiteItem.id == entry_id)
            .values(item_status=item_status, last_updated=func.now())
            .execution_options(synchronize_session="fetch")
        )

    async def clear_needs(self, site_id: int, item_ids: Collection[int]) -> int:
        """
        Mark needed items at a site as available again.

        Returns:
            Number of entries changed
        """
        if not item_ids:
            return 0
        result = await self.session.execute(
            update(SiteItem)
            .where(
                SiteItem.site_id == site_id,
                SiteItem.item_id.in_(list(item_ids)),
                SiteItem.item_status.in_(list(DEMAND_STATUSES)),
            )
            .values(item_status=ItemStatus.AVAILABLE, last_updated=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def add_audit(self, site_id: int, item_id: int, old_value: str, new_value: str) -> None:
        """Record an inventory change."""
        self.session.add(
            SiteItemAudit(
                site_id=site_id,
                item_id=item_id,
                old_value=old_value,
                new_value=new_value,
            )
        )
        await self.session.flush()
