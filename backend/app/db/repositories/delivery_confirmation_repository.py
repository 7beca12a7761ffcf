"""
Delivery confirmation repository for database operations.
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.db.repositories.base_repository import BaseRepository
from app.models.delivery import ConfirmRole, DeliveryConfirmation


class DeliveryConfirmationRepository(BaseRepository[DeliveryConfirmation]):
    """Repository for delivery confirmation operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(DeliveryConfirmation, session)

    async def issue_if_absent(self, delivery_id: int, role: ConfirmRole, code: str) -> bool:
        """
        Store a code for a role unless the role already has one.

        Returns:
            True if the code was stored
        """
        stmt = (
            self.insert_stmt()
            .values(delivery_id=delivery_id, confirm_role=role, code=code)
            .on_conflict_do_nothing(
                index_elements=[DeliveryConfirmation.delivery_id, DeliveryConfirmation.confirm_role]
            )
            .returning(DeliveryConfirmation.id)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def get_for_role(self, delivery_id: int, role: ConfirmRole) -> Optional[DeliveryConfirmation]:
        """Get the confirmation issued to a role on a delivery."""
        result = await self.session.execute(
            select(DeliveryConfirmation).where(
                DeliveryConfirmation.delivery_id == delivery_id,
                DeliveryConfirmation.confirm_role == role,
            )
        )
        return result.scalar_one_or_none()

    async def list_for_delivery(self, delivery_id: int) -> List[DeliveryConfirmation]:
        """List all confirmations issued on a delivery."""
        result = await self.session.execute(
            select(DeliveryConfirmation).where(DeliveryConfirmation.delivery_id == delivery_id)
        )
        return list(result.scalars().all())
