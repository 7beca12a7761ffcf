"""
Delivery confirmation service.
Issues per-party confirmation codes and builds the links parties use to confirm.
"""

import logging
import secrets
from typing import Dict
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.db.repositories.delivery_confirmation_repository import DeliveryConfirmationRepository
from app.models.delivery import ConfirmRole, Delivery
from app.core.exceptions import InvalidReferenceError

logger = logging.getLogger(__name__)

CODE_LENGTH = 8
_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"


def generate_code(length: int = CODE_LENGTH) -> str:
    """Random confirmation code without look-alike characters."""
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def build_confirmation_link(tracking_domain: str, public_url_key: str, code: str) -> str:
    return f"{tracking_domain.rstrip('/')}/delivery/{public_url_key}?code={code}"


class DeliveryConfirmationService(BaseService):
    """Service for delivery confirmation operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.confirmation_repo = DeliveryConfirmationRepository(session)

    async def issue_codes(self, delivery_id: int) -> int:
        """
        Give every role a code unless it already has one. Codes are never rotated.

        Returns:
            Number of codes newly issued
        """
        issued = 0
        for role in ConfirmRole:
            if await self.confirmation_repo.issue_if_absent(delivery_id, role, generate_code()):
                issued += 1
        if issued:
            logger.info(f"Issued {issued} confirmation codes", extra={"delivery_id": delivery_id})
        return issued

    async def confirmation_link(
        self,
        delivery: Delivery,
        role: ConfirmRole,
        tracking_domain: str,
    ) -> str:
        """
        Build the confirmation link for one party of a delivery.

        Raises:
            InvalidReferenceError: If no code was issued for the role
        """
        confirmation = await self.confirmation_repo.get_for_role(delivery.id, role)
        if confirmation is None:
            raise InvalidReferenceError(
                "No confirmation code for role",
                details={"role": role.value, "public_url_key": delivery.public_url_key},
            )
        return build_confirmation_link(tracking_domain, delivery.public_url_key, confirmation.code)

    async def confirmation_links(self, delivery: Delivery, tracking_domain: str) -> Dict[ConfirmRole, str]:
        """Links for every role that has a code."""
        confirmations = await self.confirmation_repo.list_for_delivery(delivery.id)
        return {
            confirmation.confirm_role: build_confirmation_link(
                tracking_domain, delivery.public_url_key, confirmation.code
            )
            for confirmation in confirmations
        }
