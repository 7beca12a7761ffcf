"""
Pytest configuration and fixtures.
Provides an in-memory database seeded with a small supply network, a recording
notification dispatcher and a test app client.
"""

from types import SimpleNamespace

import pytest
from dependency_injector import providers
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.core.config import Settings
from app.db.base import Base
from app.db.session import get_db
from app.deps.di_container import build_container
from app.models import Item, ItemStatus, Site, SiteItem, SiteType
from app.services.notification_dispatcher import DispatcherConfig


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TRACKING_DOMAIN = "https://relief.example.org"


class RecordingDispatcher:
    """Stands in for NotificationDispatcher and keeps every submitted event."""

    def __init__(self):
        self.config = DispatcherConfig(enabled=True)
        self.running = True
        self.events = []

    def notify(self, event, payload) -> bool:
        self.events.append((event, payload))
        return True

    def payloads(self, event):
        return [payload for recorded, payload in self.events if recorded == event]


@pytest.fixture(scope="function")
async def test_engine():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
def test_session_maker(test_engine):
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture(scope="function")
async def test_db_session(test_session_maker):
    """
    Create a test database session.
    Uses in-memory SQLite for fast tests.
    """
    async with test_session_maker() as session:
        yield session


@pytest.fixture(scope="function")
async def seed(test_db_session):
    """
    Seed four sites and five items.

    hub (Supply Hub): Water Available, Blankets Oversupply, Gloves Available, Tarps Needed
    dc (Distribution Center): Water Needed, Blankets Urgently Needed, Gloves Available,
        Tarps Needed, Diapers Oversupply
    shelter (Distribution Center): Water Urgently Needed, Tarps Needed, Diapers Needed
    popup (no role): Tarps Available, Diapers Oversupply
    """
    hub = Site(wss_id=3088, name="Asheville Supply Hub", site_type=SiteType.SUPPLY_HUB,
               address="1 Depot St", city="Asheville", state="NC", contact_name="Ana",
               contact_number="828-555-0101", hours="8-5")
    dc = Site(wss_id=3089, name="Marshall Distribution", site_type=SiteType.DISTRIBUTION_CENTER,
              address="12 Main St", city="Marshall", state="NC", county="Madison")
    shelter = Site(wss_id=3090, name="Burnsville Shelter", site_type=SiteType.DISTRIBUTION_CENTER,
                   city="Burnsville", state="NC")
    popup = Site(wss_id=3091, name="Pop-up Tent", site_type=None)

    water = Item(wss_id=161, name="Water")
    blankets = Item(wss_id=191, name="Blankets")
    diapers = Item(wss_id=200, name="Diapers")
    gloves = Item(wss_id=201, name="Gloves")
    tarps = Item(wss_id=202, name="Tarps")

    test_db_session.add_all([hub, dc, shelter, popup, water, blankets, diapers, gloves, tarps])
    await test_db_session.flush()

    inventory = [
        (hub, water, ItemStatus.AVAILABLE),
        (hub, blankets, ItemStatus.OVERSUPPLY),
        (hub, gloves, ItemStatus.AVAILABLE),
        (hub, tarps, ItemStatus.NEEDED),
        (dc, water, ItemStatus.NEEDED),
        (dc, blankets, ItemStatus.URGENTLY_NEEDED),
        (dc, gloves, ItemStatus.AVAILABLE),
        (dc, tarps, ItemStatus.NEEDED),
        (dc, diapers, ItemStatus.OVERSUPPLY),
        (shelter, water, ItemStatus.URGENTLY_NEEDED),
        (shelter, tarps, ItemStatus.NEEDED),
        (shelter, diapers, ItemStatus.NEEDED),
        (popup, tarps, ItemStatus.AVAILABLE),
        (popup, diapers, ItemStatus.OVERSUPPLY),
    ]
    test_db_session.add_all(
        SiteItem(site_id=site.id, item_id=item.id, item_status=item_status)
        for site, item, item_status in inventory
    )
    await test_db_session.commit()

    return SimpleNamespace(
        hub=hub,
        dc=dc,
        shelter=shelter,
        popup=popup,
        water=water,
        blankets=blankets,
        diapers=diapers,
        gloves=gloves,
        tarps=tarps,
    )


@pytest.fixture(scope="function")
def recording_dispatcher():
    return RecordingDispatcher()


@pytest.fixture(scope="function")
def test_settings():
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        DEPLOY_URL=TRACKING_DOMAIN + "/",
        WEBHOOK_SECRET="",
        RATE_LIMIT_ENABLED=False,
    )


@pytest.fixture(scope="function")
async def test_client(test_session_maker, recording_dispatcher, test_settings):
    """
    Create a test HTTP client.

    The lifespan does not run under ASGITransport, so the container is
    installed on app.state here with the recording dispatcher in place.
    """
    container = build_container(test_settings)
    container.notification_dispatcher.override(providers.Object(recording_dispatcher))
    app.state.container = container
    app.state.limiter.enabled = False

    async def override_get_db():
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    container.notification_dispatcher.reset_override()


@pytest.fixture(scope="function")
def delivery_payload():
    """Build an upsert-delivery webhook body, hub (3088) to dc (3089) by default."""

    def _payload(**overrides):
        payload = {
            "deliveryId": 68,
            "deliveryStatus": "Creating Dispatch",
            "dispatcherName": ["Dana"],
            "dispatcherNumber": ["828-555-0199"],
            "driverName": ["Sam"],
            "driverNumber": ["828-555-0142"],
            "pickupSiteWssId": [3088],
            "dropOffSiteWssId": [3089],
            "itemListWssIds": [161, 191],
            "licensePlateNumbers": ["NC ABC-1234"],
            "targetDeliveryDate": "2024-10-12",
            "dispatcherNotes": "Use the loading dock",
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture(scope="function")
def upsert_delivery(test_client, delivery_payload):
    """Post an upsert-delivery webhook and return the response body."""

    async def _upsert(**overrides):
        response = await test_client.post(
            "/api/v1/webhook/upsert-delivery",
            json=delivery_payload(**overrides),
        )
        assert response.status_code == 200, response.text
        return response.json()

    return _upsert


@pytest.fixture(scope="function")
def tracking_domain(test_settings):
    return test_settings.DEPLOY_URL.rstrip("/")
