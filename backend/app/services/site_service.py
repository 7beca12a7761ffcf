"""
Site service.
Updates site status flags and publishes the site's export record.
"""

import logging
from typing import List, Optional, Tuple
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.services.notification_dispatcher import NotificationDispatcher, NotificationEvent
from app.db.repositories.site_repository import SiteRepository
from app.models.inventory import ItemStatus
from app.models.site import Site, SiteType
from app.schemas.site import SiteStatusUpdate, SiteStatusResponse
from app.schemas.notification import SiteExportPayload
from app.core.exceptions import InvalidReferenceError

logger = logging.getLogger(__name__)


def export_site_types(site_type: Optional[SiteType]) -> List[str]:
    """Site role as the downstream site sheet labels it."""
    if site_type == SiteType.DISTRIBUTION_CENTER:
        return ["POD", "POC"]
    return ["POD", "POC", "HUB"]


def donation_status(site: Site) -> str:
    if not site.active:
        return "Closed"
    if site.accepting_donations:
        return "Accepting Donations"
    return "Not Accepting Donations"


def build_site_export(site: Site, inventory: List[Tuple[str, ItemStatus]]) -> SiteExportPayload:
    """Export record for a site, with its item names grouped by status."""
    by_status = {status: [] for status in ItemStatus}
    for item_name, item_status in inventory:
        by_status[item_status].append(item_name)

    return SiteExportPayload(
        site_name=site.name,
        wss_id=site.wss_id,
        site_type=export_site_types(site.site_type),
        contact_number=site.contact_number,
        address=site.address,
        city=site.city,
        state=site.state,
        website=site.website,
        county=site.county,
        donation_status=donation_status(site),
        active=site.active,
        urgently_needed=by_status[ItemStatus.URGENTLY_NEEDED],
        needed=by_status[ItemStatus.NEEDED],
        available=by_status[ItemStatus.AVAILABLE],
        oversupply=by_status[ItemStatus.OVERSUPPLY],
    )


class SiteService(BaseService):
    """Service for site status operations."""

    def __init__(self, session: AsyncSession, dispatcher: Optional[NotificationDispatcher] = None):
        self.session = session
        self.dispatcher = dispatcher
        self.site_repo = SiteRepository(session)

    async def update_status(self, site_id: int, data: SiteStatusUpdate) -> SiteStatusResponse:
        """
        Apply the supplied status flags to a site and publish its export record.

        Raises:
            InvalidReferenceError: If the site does not exist
        """
        site = await self.site_repo.get(site_id)
        if site is None:
            raise InvalidReferenceError("Site not found", details={"site_id": site_id})

        update_dict = data.model_dump(exclude_unset=True, exclude_none=True)
        if update_dict:
            site = await self.site_repo.update(site_id, **update_dict)
        await self.session.commit()

        logger.info(
            f"Site {site.name} status updated",
            extra={"site_id": site_id, "fields": sorted(update_dict)},
        )

        if self.dispatcher is not None:
            inventory = await self.site_repo.list_inventory(site.id)
            payload = build_site_export(site, inventory)
            self.dispatcher.notify(NotificationEvent.SITE_UPSERTED, payload.to_json_dict())

        return SiteStatusResponse.model_validate(site)
