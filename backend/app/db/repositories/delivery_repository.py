"""
Delivery repository for database operations.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, or_
from sqlalchemy.orm import joinedload

from app.db.repositories.base_repository import BaseRepository
from app.models.delivery import Delivery, DeliveryConfirmation
from app.models.inventory import Item
from app.models.association_tables import delivery_items

# Columns that keep their first-written value when a delivery is upserted again
_INSERT_ONLY_COLUMNS = frozenset({"external_ref", "public_url_key"})


class DeliveryRepository(BaseRepository[Delivery]):
    """Repository for delivery operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Delivery, session)

    async def upsert(self, values: Dict[str, Any]) -> Tuple[int, str]:
        """
        Insert a delivery, or update it in place if its external reference exists.

        Args:
            values: Column values, including external_ref

        Returns:
            Internal ID and stored public URL key of the delivery
        """
        stmt = self.insert_stmt().values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Delivery.external_ref],
            set_={
                key: stmt.excluded[key]
                for key in values
                if key not in _INSERT_ONLY_COLUMNS
            },
        ).returning(Delivery.id, Delivery.public_url_key)
        result = await self.session.execute(stmt)
        delivery_id, public_url_key = result.one()
        return delivery_id, public_url_key

    async def get_by_external_ref(self, external_ref: int) -> Optional[Delivery]:
        """Get a delivery by its external reference."""
        result = await self.session.execute(
            select(Delivery).where(Delivery.external_ref == external_ref)
        )
        return result.scalar_one_or_none()

    async def get_id_by_external_ref(self, external_ref: int) -> Optional[int]:
        """Resolve an external delivery reference to its internal ID."""
        result = await self.session.execute(
            select(Delivery.id).where(Delivery.external_ref == external_ref)
        )
        return result.scalar_one_or_none()

    async def replace_items(self, delivery_id: int, item_ids: Sequence[int]) -> None:
        """Drop all item links of a delivery, then link the given items."""
        await self.session.execute(
            delete(delivery_items).where(delivery_items.c.delivery_id == delivery_id)
        )
        if item_ids:
            await self.session.execute(
                delivery_items.insert(),
                [{"delivery_id": delivery_id, "item_id": item_id} for item_id in item_ids],
            )

    async def item_ids(self, delivery_id: int) -> List[int]:
        """IDs of the items linked to a delivery."""
        result = await self.session.execute(
            select(delivery_items.c.item_id).where(delivery_items.c.delivery_id == delivery_id)
        )
        return list(result.scalars().all())

    async def item_names(self, delivery_id: int) -> List[str]:
        """Names of the items linked to a delivery, ascending."""
        result = await self.session.execute(
            select(Item.name)
            .join(delivery_items, delivery_items.c.item_id == Item.id)
            .where(delivery_items.c.delivery_id == delivery_id)
            .order_by(Item.name.asc())
        )
        return list(result.scalars().all())

    def _with_sites(self):
        return (
            select(Delivery)
            .options(
                joinedload(Delivery.from_site),
                joinedload(Delivery.to_site),
            )
            .order_by(Delivery.target_delivery_date.desc(), Delivery.id.desc())
            .execution_options(populate_existing=True)
        )

    async def get_by_public_key(self, public_url_key: str) -> Optional[Delivery]:
        """Get a delivery, with both sites loaded, by its public tracking key."""
        result = await self.session.execute(
            self._with_sites().where(Delivery.public_url_key == public_url_key)
        )
        return result.scalar_one_or_none()

    async def list_by_site(self, site_id: int) -> List[Delivery]:
        """List deliveries where the site is either pickup or drop-off."""
        result = await self.session.execute(
            self._with_sites().where(
                or_(Delivery.from_site_id == site_id, Delivery.to_site_id == site_id)
            )
        )
        return list(result.scalars().unique().all())

    async def set_status(self, delivery_id: int, delivery_status: Optional[str]) -> None:
        """Store a new status text for a delivery."""
        await self.session.execute(
            update(Delivery)
            .where(Delivery.id == delivery_id)
            .values(delivery_status=delivery_status)
            .execution_options(synchronize_session="fetch")
        )

    async def delete_with_items(self, delivery_id: int) -> None:
        """Delete a delivery together with its item links and confirmations."""
        await self.session.execute(
            delete(delivery_items).where(delivery_items.c.delivery_id == delivery_id)
        )
        await self.session.execute(
            delete(DeliveryConfirmation).where(DeliveryConfirmation.delivery_id == delivery_id)
        )
        await self.session.execute(
            delete(Delivery).where(Delivery.id == delivery_id)
        )
