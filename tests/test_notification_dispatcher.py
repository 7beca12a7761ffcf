"""
Notification dispatcher tests: non-blocking submission, the bounded queue,
timeouts and transport failures.
"""

import asyncio
import logging

import aiohttp
import pytest

from app.core.config import Settings
from app.core.integrations.http.http_client import HttpClient
from app.services.notification_dispatcher import (
    DispatcherConfig,
    NotificationDispatcher,
    NotificationEvent,
)

MATCH_URL = "https://hook.example.com/match"


class FakeHttpClient:
    """Records posts; each call can be made to block, sleep or fail."""

    def __init__(self, behaviours=None):
        self.behaviours = list(behaviours or [])
        self.calls = []
        self.release = asyncio.Event()

    async def post_json(self, url, payload, headers=None):
        behaviour = self.behaviours.pop(0) if self.behaviours else "ok"
        if behaviour == "block":
            await self.release.wait()
        elif behaviour == "hang":
            await asyncio.sleep(30)
        elif behaviour == "fail":
            raise aiohttp.ClientConnectionError("connection refused")
        elif behaviour == "reject":
            self.calls.append((url, payload))
            return 500
        self.calls.append((url, payload))
        return 200


def make_dispatcher(http_client, **overrides):
    options = {
        "enabled": True,
        "endpoints": {NotificationEvent.MATCH_COMPUTED: MATCH_URL},
        "workers": 2,
        "queue_size": 10,
        "timeout_seconds": 1.0,
    }
    options.update(overrides)
    return NotificationDispatcher(DispatcherConfig(**options), http_client)


def test_config_from_settings_drops_empty_urls():
    settings = Settings(
        MAKE_ENABLED=True,
        MAKE_WEBHOOK_ADD_TO_DELIVERY=MATCH_URL,
        MAKE_WEBHOOK_NEW_ITEM="",
        NOTIFY_WORKERS=0,
    )
    config = DispatcherConfig.from_settings(settings)

    assert config.enabled is True
    assert config.endpoints == {NotificationEvent.MATCH_COMPUTED: MATCH_URL}
    assert config.workers == 1


@pytest.mark.asyncio
async def test_delivers_payload():
    client = FakeHttpClient()
    dispatcher = make_dispatcher(client)

    assert dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 1, "itemList": ["Water"]})
    await dispatcher.join()
    await dispatcher.stop()

    assert client.calls == [(MATCH_URL, {"deliveryId": 1, "itemList": ["Water"]})]
    assert not dispatcher.running


@pytest.mark.asyncio
async def test_disabled_dispatcher_sends_nothing():
    client = FakeHttpClient()
    dispatcher = make_dispatcher(client, enabled=False)

    await dispatcher.start()
    assert dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 1}) is False
    assert not dispatcher.running
    assert client.calls == []


@pytest.mark.asyncio
async def test_event_without_url_is_dropped(caplog):
    dispatcher = make_dispatcher(FakeHttpClient())

    with caplog.at_level(logging.WARNING):
        assert dispatcher.notify(NotificationEvent.NEW_ITEM_CREATED, {"item-name": "Water"}) is False

    assert "No webhook configured for new-item-created" in caplog.text


@pytest.mark.asyncio
async def test_notify_does_not_wait_for_delivery():
    client = FakeHttpClient(["block"])
    dispatcher = make_dispatcher(client)

    assert dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 1})
    await asyncio.sleep(0)
    assert client.calls == []

    client.release.set()
    await dispatcher.join()
    assert len(client.calls) == 1
    await dispatcher.stop()


@pytest.mark.asyncio
async def test_full_queue_drops_event(caplog):
    client = FakeHttpClient(["block"])
    dispatcher = make_dispatcher(client, workers=1, queue_size=1)

    with caplog.at_level(logging.WARNING):
        assert dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 1})
        assert dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 2}) is False

    assert "Notification queue full" in caplog.text
    client.release.set()
    await dispatcher.join()
    await dispatcher.stop()
    assert client.calls == [(MATCH_URL, {"deliveryId": 1})]


@pytest.mark.asyncio
async def test_timeout_is_logged_and_worker_survives(caplog):
    client = FakeHttpClient(["hang"])
    dispatcher = make_dispatcher(client, workers=1, timeout_seconds=0.05)

    with caplog.at_level(logging.ERROR):
        dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 1})
        dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 2})
        await dispatcher.join()

    assert "Timed out sending match-computed" in caplog.text
    assert client.calls == [(MATCH_URL, {"deliveryId": 2})]
    await dispatcher.stop()


@pytest.mark.asyncio
async def test_transport_failure_is_logged_and_worker_survives(caplog):
    client = FakeHttpClient(["fail", "reject"])
    dispatcher = make_dispatcher(client, workers=1)

    with caplog.at_level(logging.WARNING):
        dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 1})
        dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 2})
        dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 3})
        await dispatcher.join()

    assert "Failed to send match-computed" in caplog.text
    assert "match-computed rejected by webhook" in caplog.text
    assert [payload["deliveryId"] for _, payload in client.calls] == [2, 3]
    await dispatcher.stop()


@pytest.mark.asyncio
async def test_stop_without_start_is_safe():
    dispatcher = make_dispatcher(FakeHttpClient())
    await dispatcher.stop()
    assert not dispatcher.running


@pytest.mark.asyncio
async def test_http_client_rejects_non_http_url():
    client = HttpClient(timeout=1)
    with pytest.raises(ValueError):
        await client.post_json("ftp://hook.example.com/match", {"deliveryId": 1})
    await client.close()


@pytest.mark.asyncio
async def test_misconfigured_url_is_logged(caplog):
    client = HttpClient(timeout=1)
    dispatcher = make_dispatcher(
        client,
        workers=1,
        endpoints={NotificationEvent.MATCH_COMPUTED: "hook.example.com/match"},
    )

    with caplog.at_level(logging.WARNING):
        assert dispatcher.notify(NotificationEvent.MATCH_COMPUTED, {"deliveryId": 1})
        await dispatcher.join()

    assert "Failed to send match-computed" in caplog.text
    await dispatcher.stop()
    await client.close()
