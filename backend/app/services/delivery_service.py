"""
Delivery service with business logic.
Handles the delivery record lifecycle: upsert, reads, deletion and status changes.
"""

import logging
import secrets
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.base_service import BaseService
from app.services.delivery_confirmation_service import DeliveryConfirmationService
from app.services.notification_dispatcher import NotificationDispatcher, NotificationEvent
from app.db.repositories.delivery_repository import DeliveryRepository
from app.db.repositories.site_repository import SiteRepository
from app.db.repositories.item_repository import ItemRepository
from app.db.repositories.inventory_repository import InventoryRepository
from app.models.delivery import ConfirmRole, Delivery, DeliveryStatus, is_complete_status
from app.models.site import Site
from app.schemas.delivery import (
    DeliveryUpsert,
    DeliveryUpsertResponse,
    DeliveryResponse,
    DeliveryListResponse,
    DeliverySiteDetail,
    ConfirmationLinkResponse,
    first_or_none,
)
from app.schemas.notification import DeliveryStatusPayload
from app.core.exceptions import ConflictError, InvalidReferenceError

logger = logging.getLogger(__name__)


def generate_public_url_key() -> str:
    return secrets.token_urlsafe(16)


class DeliveryService(BaseService):
    """Service for delivery operations."""

    def __init__(
        self,
        session: AsyncSession,
        dispatcher: Optional[NotificationDispatcher] = None,
        tracking_domain: str = "",
    ):
        self.session = session
        self.dispatcher = dispatcher
        self.tracking_domain = tracking_domain
        self.delivery_repo = DeliveryRepository(session)
        self.site_repo = SiteRepository(session)
        self.item_repo = ItemRepository(session)
        self.inventory_repo = InventoryRepository(session)
        self.confirmation_service = DeliveryConfirmationService(session)

    async def upsert_delivery(self, data: DeliveryUpsert) -> DeliveryUpsertResponse:
        """
        Create a delivery or update it in place, keyed by its external reference.

        The item list is replaced in full and confirmation codes are issued for
        any role that lacks one, all in a single transaction.

        Raises:
            InvalidReferenceError: If the pickup or drop-off site is unknown
            ConflictError: If a new delivery supplies a public key already in use
        """
        pickup_site = await self._require_site_by_wss_id(data.pickup_site_wss_id[0], "pickup")
        dropoff_site = await self._require_site_by_wss_id(data.drop_off_site_wss_id[0], "drop-off")
        item_ids = await self._resolve_item_ids(data.delivery_id, data.item_list_wss_ids)

        existing = await self.delivery_repo.get_by_external_ref(data.delivery_id)
        previous_status = existing.delivery_status if existing else None
        new_status = data.delivery_status.value if data.delivery_status else None

        # A new delivery cannot take a public key another delivery already holds
        if existing is None and data.public_url_key:
            holder = await self.delivery_repo.get_by_public_key(data.public_url_key)
            if holder is not None:
                raise ConflictError(
                    "Public URL key already in use",
                    details={"delivery_id": data.delivery_id, "held_by": holder.external_ref},
                )

        values = {
            "external_ref": data.delivery_id,
            "from_site_id": pickup_site.id,
            "to_site_id": dropoff_site.id,
            "delivery_status": new_status,
            "target_delivery_date": data.target_delivery_date,
            "dispatcher_name": first_or_none(data.dispatcher_name),
            "dispatcher_number": first_or_none(data.dispatcher_number),
            "driver_name": first_or_none(data.driver_name),
            "driver_number": first_or_none(data.driver_number),
            "driver_license_plates": first_or_none(data.license_plate_numbers),
            "dispatcher_notes": data.dispatcher_notes,
            # Only written on insert; an existing delivery keeps its key
            "public_url_key": data.public_url_key or generate_public_url_key(),
        }
        delivery_id, public_url_key = await self.delivery_repo.upsert(values)
        await self.delivery_repo.replace_items(delivery_id, item_ids)
        await self.confirmation_service.issue_codes(delivery_id)

        if is_complete_status(new_status) and not is_complete_status(previous_status):
            await self._apply_completion(delivery_id, dropoff_site.id)

        await self.session.commit()

        logger.info(
            f"Delivery {data.delivery_id} {'updated' if existing else 'created'}",
            extra={"delivery_id": data.delivery_id, "item_count": len(item_ids)},
        )
        return DeliveryUpsertResponse(
            delivery_id=data.delivery_id,
            public_url_key=public_url_key,
            item_count=len(item_ids),
        )

    async def fetch_by_public_key(self, public_url_key: str) -> DeliveryResponse:
        """Get a delivery with both parties' details and its item names."""
        delivery = await self._require_delivery(public_url_key)
        return await self._build_delivery_response(delivery)

    async def fetch_by_site(self, site_id: int) -> DeliveryListResponse:
        """List deliveries a site sends or receives, latest target date first."""
        site = await self.site_repo.get(site_id)
        if site is None:
            raise InvalidReferenceError("Site not found", details={"site_id": site_id})

        deliveries = await self.delivery_repo.list_by_site(site_id)
        items = [await self._build_delivery_response(delivery) for delivery in deliveries]
        return DeliveryListResponse(items=items, total=len(items))

    async def delete_delivery(self, external_ref: int) -> bool:
        """
        Delete a delivery with its item links and confirmations.

        Returns:
            True if a delivery was deleted; an unknown reference is a no-op
        """
        delivery_id = await self.delivery_repo.get_id_by_external_ref(external_ref)
        if delivery_id is None:
            logger.debug(f"Delete requested for unknown delivery {external_ref}")
            return False

        await self.delivery_repo.delete_with_items(delivery_id)
        await self.session.commit()
        logger.info(f"Delivery {external_ref} deleted", extra={"delivery_id": external_ref})
        return True

    async def change_status(self, public_url_key: str, status: DeliveryStatus) -> DeliveryResponse:
        """
        Store a new status for a delivery.

        Any status may follow any other. A real change publishes the
        delivery-status-changed notification with the three confirmation links;
        becoming complete clears the drop-off site's needs for delivered items.
        """
        delivery = await self._require_delivery(public_url_key)
        previous_status = delivery.delivery_status
        if previous_status == status.value:
            return await self._build_delivery_response(delivery)

        await self.delivery_repo.set_status(delivery.id, status.value)
        if status.is_complete and not is_complete_status(previous_status):
            await self._apply_completion(delivery.id, delivery.to_site_id)
        await self.confirmation_service.issue_codes(delivery.id)

        links = await self.confirmation_service.confirmation_links(delivery, self.tracking_domain)
        await self.session.commit()

        logger.info(
            f"Delivery {delivery.external_ref} status changed to {status.value}",
            extra={"delivery_id": delivery.external_ref, "previous_status": previous_status},
        )
        if self.dispatcher is not None:
            payload = DeliveryStatusPayload(
                delivery_id=delivery.external_ref,
                delivery_status=status.value,
                pickup_confirm_link=links[ConfirmRole.PICKUP_SITE],
                drop_off_confirm_link=links[ConfirmRole.DROPOFF_SITE],
                driver_confirm_link=links[ConfirmRole.DRIVER],
            )
            self.dispatcher.notify(NotificationEvent.DELIVERY_STATUS_CHANGED, payload.to_json_dict())

        delivery = await self._require_delivery(public_url_key)
        return await self._build_delivery_response(delivery)

    async def get_confirmation_link(self, public_url_key: str, role: ConfirmRole) -> ConfirmationLinkResponse:
        """Confirmation link for one party of a delivery."""
        delivery = await self._require_delivery(public_url_key)
        url = await self.confirmation_service.confirmation_link(delivery, role, self.tracking_domain)
        return ConfirmationLinkResponse(role=role, url=url)

    async def _apply_completion(self, delivery_id: int, dropoff_site_id: int) -> None:
        item_ids = await self.delivery_repo.item_ids(delivery_id)
        cleared = await self.inventory_repo.clear_needs(dropoff_site_id, item_ids)
        if cleared:
            await self.site_repo.touch_inventory_updated(dropoff_site_id)
        logger.info(
            f"Delivery completed, {cleared} needs cleared at drop-off site",
            extra={"site_id": dropoff_site_id, "cleared": cleared},
        )

    async def _require_site_by_wss_id(self, wss_id: int, party: str) -> Site:
        site = await self.site_repo.get_by_wss_id(wss_id)
        if site is None:
            raise InvalidReferenceError(
                f"Unknown {party} site",
                details={"wss_id": wss_id},
            )
        return site

    async def _require_delivery(self, public_url_key: str) -> Delivery:
        delivery = await self.delivery_repo.get_by_public_key(public_url_key)
        if delivery is None:
            raise InvalidReferenceError("Delivery not found", details={"public_url_key": public_url_key})
        return delivery

    async def _resolve_item_ids(self, delivery_ref: int, item_wss_ids: List[int]) -> List[int]:
        unique_wss_ids = list(dict.fromkeys(item_wss_ids))
        known = await self.item_repo.ids_by_wss_ids(unique_wss_ids)
        unknown = [wss_id for wss_id in unique_wss_ids if wss_id not in known]
        if unknown:
            logger.warning(
                f"Skipping {len(unknown)} unknown items on delivery {delivery_ref}",
                extra={"delivery_id": delivery_ref, "unknown_wss_ids": unknown},
            )
        return [known[wss_id] for wss_id in unique_wss_ids if wss_id in known]

    @staticmethod
    def _site_detail(site: Site) -> DeliverySiteDetail:
        return DeliverySiteDetail(
            site_id=site.id,
            wss_id=site.wss_id,
            name=site.name,
            address=site.address,
            city=site.city,
            state=site.state,
            contact_name=site.contact_name,
            contact_number=site.contact_number,
            hours=site.hours,
        )

    async def _build_delivery_response(self, delivery: Delivery) -> DeliveryResponse:
        """Build DeliveryResponse with site details and sorted item names."""
        return DeliveryResponse(
            delivery_id=delivery.external_ref,
            public_url_key=delivery.public_url_key,
            delivery_status=delivery.delivery_status,
            is_complete=delivery.is_complete,
            target_delivery_date=delivery.target_delivery_date,
            dispatcher_name=delivery.dispatcher_name,
            dispatcher_number=delivery.dispatcher_number,
            dispatcher_notes=delivery.dispatcher_notes,
            driver_name=delivery.driver_name,
            driver_number=delivery.driver_number,
            license_plate_numbers=delivery.driver_license_plates,
            from_site=self._site_detail(delivery.from_site),
            to_site=self._site_detail(delivery.to_site),
            item_list=await self.delivery_repo.item_names(delivery.id),
        )
