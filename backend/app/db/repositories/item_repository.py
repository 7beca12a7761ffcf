"""
Item repository for database operations.
"""

from typing import Dict, Iterable, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.db.repositories.base_repository import BaseRepository
from app.models.inventory import Item


class ItemRepository(BaseRepository[Item]):
    """Repository for item operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Item, session)

    async def get_by_name(self, name: str) -> Optional[Item]:
        """Get an item by its unique name."""
        result = await self.session.execute(
            select(Item).where(Item.name == name)
        )
        return result.scalar_one_or_none()

    async def insert_if_absent(self, name: str) -> Optional[int]:
        """
        Insert an item unless one with the same name exists.

        Returns:
            The new item's ID, or None if the name was already taken
        """
        stmt = (
            self.insert_stmt()
            .values(name=name)
            .on_conflict_do_nothing(index_elements=[Item.name])
            .returning(Item.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def ids_by_wss_ids(self, wss_ids: Iterable[int]) -> Dict[int, int]:
        """Map external item references to internal IDs, omitting unknown references."""
        wss_ids = list(wss_ids)
        if not wss_ids:
            return {}
        result = await self.session.execute(
            select(Item.wss_id, Item.id).where(Item.wss_id.in_(wss_ids))
        )
        return {wss_id: item_id for wss_id, item_id in result.all()}
