"""
Site repository for database operations.
"""

from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func

from app.db.repositories.base_repository import BaseRepository
from app.models.site import Site
from app.models.inventory import Item, ItemStatus, SiteItem


class SiteRepository(BaseRepository[Site]):
    """Repository for site operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Site, session)

    async def get_by_wss_id(self, wss_id: int) -> Optional[Site]:
        """Get a site by its external reference."""
        result = await self.session.execute(
            select(Site).where(Site.wss_id == wss_id)
        )
        return result.scalar_one_or_none()

    async def touch_inventory_updated(self, site_id: int) -> None:
        """Stamp the site's inventory as updated now."""
        await self.session.execute(
            update(Site)
            .where(Site.id == site_id)
            .values(inventory_last_updated=func.now())
            .execution_options(synchronize_session=False)
        )

    async def list_inventory(self, site_id: int) -> List[Tuple[str, ItemStatus]]:
        """List (item name, status) pairs active at a site, ordered by name."""
        result = await self.session.execute(
            select(Item.name, SiteItem.item_status)
            .join(SiteItem, SiteItem.item_id == Item.id)
            .where(SiteItem.site_id == site_id)
            .order_by(Item.name)
        )
        return [(name, item_status) for name, item_status in result.all()]
