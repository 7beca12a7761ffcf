"""
Tests for the item status and site type vocabularies and the matching eligibility rules.
"""

import pytest

from app.models.inventory import DEMAND_STATUSES, ItemStatus, supply_statuses_for
from app.models.site import SiteType


@pytest.mark.parametrize(
    "text,expected",
    [
        ("Available", ItemStatus.AVAILABLE),
        ("needed", ItemStatus.NEEDED),
        ("URGENTLY NEEDED", ItemStatus.URGENTLY_NEEDED),
        (" Oversupply ", ItemStatus.OVERSUPPLY),
        ("URGENTLY_NEEDED", ItemStatus.URGENTLY_NEEDED),
    ],
)
def test_item_status_from_text(text, expected):
    assert ItemStatus.from_text(text) is expected


@pytest.mark.parametrize("text", ["", "Plenty", "Urgent"])
def test_item_status_rejects_unknown_text(text):
    with pytest.raises(ValueError):
        ItemStatus.from_text(text)


def test_site_type_from_text():
    assert SiteType.from_text("supply hub") is SiteType.SUPPLY_HUB
    assert SiteType.from_text("Distribution Center") is SiteType.DISTRIBUTION_CENTER
    with pytest.raises(ValueError):
        SiteType.from_text("Warehouse")


def test_demand_statuses():
    assert DEMAND_STATUSES == {ItemStatus.NEEDED, ItemStatus.URGENTLY_NEEDED}
    assert ItemStatus.URGENTLY_NEEDED.is_need
    assert not ItemStatus.OVERSUPPLY.is_need


def test_supply_hub_offers_available_and_oversupply():
    assert supply_statuses_for(SiteType.SUPPLY_HUB) == {ItemStatus.AVAILABLE, ItemStatus.OVERSUPPLY}


def test_distribution_center_offers_only_oversupply():
    assert supply_statuses_for(SiteType.DISTRIBUTION_CENTER) == {ItemStatus.OVERSUPPLY}


def test_site_without_role_offers_nothing():
    assert supply_statuses_for(None) == set()


def test_needed_items_are_never_supply():
    for site_type in list(SiteType) + [None]:
        assert not supply_statuses_for(site_type) & DEMAND_STATUSES
