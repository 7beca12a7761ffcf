"""
Needs-matching service.
Decides which supplies may move from one site to another.
"""

import logging
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.services.notification_dispatcher import NotificationDispatcher, NotificationEvent
from app.db.repositories.site_repository import SiteRepository
from app.db.repositories.inventory_repository import InventoryRepository
from app.models.inventory import DEMAND_STATUSES, supply_statuses_for
from app.schemas.needs_match import NeedsMatchRequest
from app.schemas.notification import MatchComputedPayload

logger = logging.getLogger(__name__)

SITES_NOT_FOUND_MESSAGE = "No matches, sites are not in WSS"


class NeedsMatchingService(BaseService):
    """Service for needs-matching operations."""

    def __init__(self, session: AsyncSession, dispatcher: Optional[NotificationDispatcher] = None):
        self.session = session
        self.dispatcher = dispatcher
        self.site_repo = SiteRepository(session)
        self.inventory_repo = InventoryRepository(session)

    async def compute_needs_match(self, from_site_wss_id: int, to_site_wss_id: int) -> List[str]:
        """
        Names of the items the from-site can supply that the to-site needs.

        The from-site's role limits what it may give: supply hubs offer
        Available and Oversupply items, distribution centers only Oversupply.
        Any item Needed or Urgently Needed at the to-site counts as demand.

        Args:
            from_site_wss_id: External reference of the source site
            to_site_wss_id: External reference of the destination site

        Returns:
            Matching item names sorted ascending; empty if either site is unknown
        """
        from_site = await self.site_repo.get_by_wss_id(from_site_wss_id)
        to_site = await self.site_repo.get_by_wss_id(to_site_wss_id)
        if from_site is None or to_site is None:
            logger.warning(
                "Needs match requested for unknown site",
                extra={"from_site_wss_id": from_site_wss_id, "to_site_wss_id": to_site_wss_id},
            )
            return []

        supply_statuses = supply_statuses_for(from_site.site_type)
        supply_ids = await self.inventory_repo.item_ids_with_status(from_site.id, supply_statuses)
        if not supply_ids:
            return []

        demand_ids = await self.inventory_repo.item_ids_with_status(to_site.id, DEMAND_STATUSES)
        matched_ids = supply_ids & demand_ids
        if not matched_ids:
            return []

        return await self.inventory_repo.item_names_at_site(to_site.id, matched_ids)

    async def add_supplies_to_delivery(self, request: NeedsMatchRequest) -> str:
        """
        Compute the match for a delivery and push the item list downstream.

        Returns:
            Plain-text summary for the calling automation
        """
        if not request.from_site_wss_id or not request.to_site_wss_id:
            logger.info(
                "Needs match skipped, sites not linked",
                extra={"delivery_id": request.delivery_id},
            )
            return SITES_NOT_FOUND_MESSAGE

        matches = await self.compute_needs_match(
            request.from_site_wss_id[0],
            request.to_site_wss_id[0],
        )
        logger.info(
            f"Needs match computed for delivery {request.delivery_id}: {len(matches)} items",
            extra={"delivery_id": request.delivery_id},
        )

        if matches and self.dispatcher is not None:
            payload = MatchComputedPayload(delivery_id=request.delivery_id, item_list=matches)
            self.dispatcher.notify(NotificationEvent.MATCH_COMPUTED, payload.to_json_dict())

        return f"Matches: {len(matches)}"
