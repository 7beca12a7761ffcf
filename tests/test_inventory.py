"""
Inventory management tests: activation, deactivation, status changes and new items.
"""

import pytest
from sqlalchemy import func, select

from app.models import ItemStatus, Site, SiteItem, SiteItemAudit
from app.services.inventory_service import InventoryService
from app.services.notification_dispatcher import NotificationEvent


async def entries_at(session, site_id, item_id):
    return await session.scalar(
        select(func.count())
        .select_from(SiteItem)
        .where(SiteItem.site_id == site_id, SiteItem.item_id == item_id)
    )


async def audit_trail(session, site_id, item_id):
    result = await session.execute(
        select(SiteItemAudit.old_value, SiteItemAudit.new_value)
        .where(SiteItemAudit.site_id == site_id, SiteItemAudit.item_id == item_id)
        .order_by(SiteItemAudit.id)
    )
    return [tuple(row) for row in result.all()]


@pytest.mark.asyncio
async def test_activate_item(test_client, test_db_session, seed, recording_dispatcher):
    response = await test_client.post(
        f"/api/v1/sites/{seed.shelter.id}/inventory",
        json={"item_name": "Gloves", "item_status": "Urgently Needed"},
    )

    assert response.status_code == 200
    assert response.json() == {"message": "Updated", "changed": True}
    assert await entries_at(test_db_session, seed.shelter.id, seed.gloves.id) == 1
    assert await audit_trail(test_db_session, seed.shelter.id, seed.gloves.id) == [("inactive", "active")]

    last_updated = await test_db_session.scalar(
        select(Site.inventory_last_updated).where(Site.id == seed.shelter.id)
    )
    assert last_updated is not None

    assert recording_dispatcher.payloads(NotificationEvent.INVENTORY_ITEM_CHANGED) == [
        {
            "siteName": "Burnsville Shelter",
            "siteWssId": 3090,
            "itemName": "Gloves",
            "itemStatus": "Urgently Needed",
            "inventoryWssId": None,
            "active": True,
        }
    ]


@pytest.mark.asyncio
async def test_duplicate_activation_is_noop(test_db_session, seed, recording_dispatcher):
    service = InventoryService(test_db_session, recording_dispatcher)

    result = await service.activate_item(seed.hub.id, "Water", ItemStatus.OVERSUPPLY)

    assert result.changed is False
    assert await entries_at(test_db_session, seed.hub.id, seed.water.id) == 1
    assert await audit_trail(test_db_session, seed.hub.id, seed.water.id) == []
    assert recording_dispatcher.events == []
    # The existing status is kept
    status = await test_db_session.scalar(
        select(SiteItem.item_status).where(
            SiteItem.site_id == seed.hub.id, SiteItem.item_id == seed.water.id
        )
    )
    assert status == ItemStatus.AVAILABLE


@pytest.mark.asyncio
async def test_deactivate_item(test_client, test_db_session, seed, recording_dispatcher):
    response = await test_client.delete(f"/api/v1/sites/{seed.dc.id}/inventory/Tarps")

    assert response.status_code == 200
    assert response.json()["changed"] is True
    assert await entries_at(test_db_session, seed.dc.id, seed.tarps.id) == 0
    assert await audit_trail(test_db_session, seed.dc.id, seed.tarps.id) == [("active", "inactive")]

    payload = recording_dispatcher.payloads(NotificationEvent.INVENTORY_ITEM_CHANGED)[0]
    assert payload["active"] is False
    assert payload["itemStatus"] == "Needed"


@pytest.mark.asyncio
async def test_deactivate_inactive_item_is_noop(test_client, seed, recording_dispatcher):
    response = await test_client.delete(f"/api/v1/sites/{seed.shelter.id}/inventory/Gloves")

    assert response.status_code == 200
    assert response.json()["changed"] is False
    assert recording_dispatcher.events == []


@pytest.mark.asyncio
async def test_update_item_status(test_client, test_db_session, seed, recording_dispatcher):
    response = await test_client.patch(
        f"/api/v1/sites/{seed.hub.id}/inventory/Tarps",
        json={"item_status": "oversupply"},
    )

    assert response.status_code == 200
    assert response.json()["changed"] is True
    assert await audit_trail(test_db_session, seed.hub.id, seed.tarps.id) == [("Needed", "Oversupply")]
    payload = recording_dispatcher.payloads(NotificationEvent.INVENTORY_ITEM_CHANGED)[0]
    assert payload["itemStatus"] == "Oversupply"
    assert payload["active"] is True


@pytest.mark.asyncio
async def test_update_to_same_status_is_noop(test_client, seed, recording_dispatcher):
    response = await test_client.patch(
        f"/api/v1/sites/{seed.hub.id}/inventory/Water",
        json={"item_status": "Available"},
    )

    assert response.status_code == 200
    assert response.json()["changed"] is False
    assert recording_dispatcher.events == []


@pytest.mark.asyncio
async def test_update_inactive_item_is_rejected(test_client, seed):
    response = await test_client.patch(
        f"/api/v1/sites/{seed.shelter.id}/inventory/Gloves",
        json={"item_status": "Needed"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_with_unknown_status_is_rejected(test_client, seed):
    response = await test_client.patch(
        f"/api/v1/sites/{seed.hub.id}/inventory/Water",
        json={"item_status": "Plenty"},
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_unknown_site_is_rejected(test_client, seed):
    response = await test_client.post(
        "/api/v1/sites/999999/inventory",
        json={"item_name": "Water", "item_status": "Needed"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_add_new_item(test_client, test_db_session, seed, recording_dispatcher):
    response = await test_client.post(
        "/api/v1/items",
        json={"item_name": "  Baby Formula ", "site_id": seed.shelter.id, "item_status": "Needed"},
    )

    assert response.status_code == 201
    assert recording_dispatcher.payloads(NotificationEvent.NEW_ITEM_CREATED) == [
        {"item-name": "Baby Formula"}
    ]
    changed = recording_dispatcher.payloads(NotificationEvent.INVENTORY_ITEM_CHANGED)
    assert [payload["itemName"] for payload in changed] == ["Baby Formula"]


@pytest.mark.asyncio
async def test_add_existing_item_is_rejected(test_client, seed, recording_dispatcher):
    response = await test_client.post("/api/v1/items", json={"item_name": "Water"})

    assert response.status_code == 400
    assert response.json()["error"]["message"] == "Item not added, already exists"
    assert recording_dispatcher.events == []
