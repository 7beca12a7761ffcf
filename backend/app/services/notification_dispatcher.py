"""
Fire-and-forget notification dispatch to outbound automation webhooks.

Callers submit an event and return immediately. Events are buffered in a
bounded queue and POSTed by a fixed pool of worker tasks, each call capped by
a timeout. Failures are logged and dropped: there is no retry.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import aiohttp

from app.core.integrations.http.http_client import HttpClient

logger = logging.getLogger(__name__)


class NotificationEvent(str, enum.Enum):
    """Kinds of state change pushed to automation webhooks."""
    NEW_ITEM_CREATED = "new-item-created"
    INVENTORY_ITEM_CHANGED = "inventory-item-changed"
    SITE_UPSERTED = "site-upserted"
    MATCH_COMPUTED = "match-computed"
    DELIVERY_STATUS_CHANGED = "delivery-status-changed"


@dataclass(frozen=True)
class DispatcherConfig:
    """Explicit dispatcher configuration, built once from settings."""
    enabled: bool
    endpoints: Mapping[NotificationEvent, str] = field(default_factory=dict)
    workers: int = 4
    queue_size: int = 100
    timeout_seconds: float = 10.0

    @classmethod
    def from_settings(cls, settings) -> "DispatcherConfig":
        endpoints = {
            NotificationEvent.NEW_ITEM_CREATED: settings.MAKE_WEBHOOK_NEW_ITEM,
            NotificationEvent.INVENTORY_ITEM_CHANGED: settings.MAKE_WEBHOOK_UPDATE_INVENTORY,
            NotificationEvent.SITE_UPSERTED: settings.MAKE_WEBHOOK_UPSERT_SITE,
            NotificationEvent.MATCH_COMPUTED: settings.MAKE_WEBHOOK_ADD_TO_DELIVERY,
            NotificationEvent.DELIVERY_STATUS_CHANGED: settings.MAKE_WEBHOOK_DELIVERY_UPDATE,
        }
        return cls(
            enabled=settings.MAKE_ENABLED,
            endpoints={event: url for event, url in endpoints.items() if url},
            workers=max(1, settings.NOTIFY_WORKERS),
            queue_size=max(1, settings.NOTIFY_QUEUE_SIZE),
            timeout_seconds=settings.NOTIFY_TIMEOUT_SECONDS,
        )


@dataclass(frozen=True)
class Notification:
    """One queued outbound call."""
    event: NotificationEvent
    url: str
    payload: Dict[str, Any]


class NotificationDispatcher:
    """
    Bounded worker pool for outbound webhook notifications.

    Workers are started lazily on the first submitted event, or explicitly
    from the application lifespan with start().
    """

    def __init__(self, config: DispatcherConfig, http_client: HttpClient):
        self.config = config
        self._http_client = http_client
        self._queue: Optional[asyncio.Queue] = None
        self._workers: List[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    def _ensure_started(self) -> None:
        if self._workers:
            return
        self._queue = asyncio.Queue(maxsize=self.config.queue_size)
        self._workers = [
            asyncio.create_task(self._worker(index), name=f"notification-worker-{index}")
            for index in range(self.config.workers)
        ]
        logger.info(
            "Notification workers started",
            extra={"workers": self.config.workers, "queue_size": self.config.queue_size},
        )

    async def start(self) -> None:
        """Start the worker pool if dispatch is enabled."""
        if self.config.enabled:
            self._ensure_started()

    def notify(self, event: NotificationEvent, payload: Dict[str, Any]) -> bool:
        """
        Submit an event without waiting for it to be sent.

        Must be called from a running event loop.

        Returns:
            True if the event was queued, False if it was dropped
        """
        if not self.config.enabled:
            logger.debug(f"Notifications disabled, skipping {event.value}")
            return False

        url = self.config.endpoints.get(event)
        if not url:
            logger.warning(f"No webhook configured for {event.value}, dropping event")
            return False

        self._ensure_started()
        try:
            self._queue.put_nowait(Notification(event=event, url=url, payload=payload))
        except asyncio.QueueFull:
            logger.warning(
                f"Notification queue full, dropping {event.value}",
                extra={"queue_size": self.config.queue_size},
            )
            return False
        return True

    async def join(self) -> None:
        """Wait until every queued event has been attempted."""
        if self._queue is not None:
            await self._queue.join()

    async def stop(self) -> None:
        """Cancel the worker pool; queued events that were not attempted are dropped."""
        if not self._workers:
            return
        pending = self._queue.qsize()
        for task in self._workers:
            task.cancel()
        await asyncio.gather(*self._workers, return_exceptions=True)
        self._workers = []
        self._queue = None
        logger.info("Notification workers stopped", extra={"dropped": pending})

    async def _worker(self, index: int) -> None:
        while True:
            notification = await self._queue.get()
            try:
                await self._deliver(notification)
            finally:
                self._queue.task_done()

    async def _deliver(self, notification: Notification) -> None:
        event = notification.event.value
        try:
            status = await asyncio.wait_for(
                self._http_client.post_json(notification.url, notification.payload),
                timeout=self.config.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Timed out sending {event} after {self.config.timeout_seconds}s",
                extra={"url": notification.url},
            )
        except (aiohttp.ClientError, ValueError) as e:
            logger.error(f"Failed to send {event}: {e}", extra={"url": notification.url})
        except Exception:
            # A worker must outlive any single failed notification
            logger.exception(f"Unexpected error sending {event}", extra={"url": notification.url})
        else:
            if 200 <= status < 300:
                logger.info(f"Sent {event}", extra={"status": status})
            else:
                logger.warning(f"{event} rejected by webhook", extra={"status": status})
