"""
Needs-matching tests: the matching rules against a seeded network, and the
add-supplies-to-delivery webhook.
"""

import pytest

from app.services.needs_matching_service import NeedsMatchingService
from app.services.notification_dispatcher import NotificationEvent


@pytest.mark.asyncio
async def test_hub_to_distribution_center(test_db_session, seed):
    service = NeedsMatchingService(test_db_session)
    matches = await service.compute_needs_match(seed.hub.wss_id, seed.dc.wss_id)
    assert matches == ["Blankets", "Water"]


@pytest.mark.asyncio
async def test_hub_needed_items_are_not_supplied(test_db_session, seed):
    """Hub has Water Available and Tarps Needed; the shelter needs both."""
    service = NeedsMatchingService(test_db_session)
    matches = await service.compute_needs_match(seed.hub.wss_id, seed.shelter.wss_id)
    assert matches == ["Water"]


@pytest.mark.asyncio
async def test_distribution_center_only_offers_oversupply(test_db_session, seed):
    service = NeedsMatchingService(test_db_session)
    # dc has Gloves Available, but only its oversupplied Diapers may leave
    assert await service.compute_needs_match(seed.dc.wss_id, seed.shelter.wss_id) == ["Diapers"]


@pytest.mark.asyncio
async def test_disjoint_sets_match_nothing(test_db_session, seed):
    service = NeedsMatchingService(test_db_session)
    assert await service.compute_needs_match(seed.dc.wss_id, seed.hub.wss_id) == []
    assert await service.compute_needs_match(seed.shelter.wss_id, seed.hub.wss_id) == []


@pytest.mark.asyncio
async def test_site_without_role_supplies_nothing(test_db_session, seed):
    service = NeedsMatchingService(test_db_session)
    assert await service.compute_needs_match(seed.popup.wss_id, seed.shelter.wss_id) == []


@pytest.mark.asyncio
async def test_unknown_site_matches_nothing(test_db_session, seed):
    service = NeedsMatchingService(test_db_session)
    assert await service.compute_needs_match(999999, seed.dc.wss_id) == []
    assert await service.compute_needs_match(seed.hub.wss_id, 999999) == []


@pytest.mark.asyncio
async def test_matches_are_sorted_and_unique(test_db_session, seed):
    service = NeedsMatchingService(test_db_session)
    matches = await service.compute_needs_match(seed.hub.wss_id, seed.dc.wss_id)
    assert matches == sorted(matches)
    assert len(matches) == len(set(matches))


@pytest.mark.asyncio
async def test_webhook_reports_match_count_and_notifies(test_client, seed, recording_dispatcher):
    response = await test_client.post(
        "/api/v1/webhook/add-supplies-to-delivery",
        json={"deliveryId": 68, "fromSiteWssId": [3088], "toSiteWssId": [3089]},
    )

    assert response.status_code == 200
    assert response.text == "Matches: 2"
    assert recording_dispatcher.payloads(NotificationEvent.MATCH_COMPUTED) == [
        {"deliveryId": 68, "itemList": ["Blankets", "Water"]}
    ]


@pytest.mark.asyncio
async def test_webhook_without_matches_does_not_notify(test_client, seed, recording_dispatcher):
    response = await test_client.post(
        "/api/v1/webhook/add-supplies-to-delivery",
        json={"deliveryId": 69, "fromSiteWssId": [3089], "toSiteWssId": [3088]},
    )

    assert response.status_code == 200
    assert response.text == "Matches: 0"
    assert recording_dispatcher.events == []


@pytest.mark.asyncio
async def test_webhook_with_unlinked_sites(test_client, seed, recording_dispatcher):
    response = await test_client.post(
        "/api/v1/webhook/add-supplies-to-delivery",
        json={"deliveryId": 70, "fromSiteWssId": [], "toSiteWssId": [3089]},
    )

    assert response.status_code == 200
    assert response.text == "No matches, sites are not in WSS"
    assert recording_dispatcher.events == []
