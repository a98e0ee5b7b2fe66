"""Event Publisher Implementations

Provides concrete sinks for vault lifecycle events.
"""

import logging
from typing import Optional
import httpx
from src.app.services.event_publisher import EventPublisher
from src.domain.vault_event import VaultEvent

logger = logging.getLogger(__name__)


class LoggingEventPublisher(EventPublisher):
    """
    Event publisher that logs events

    Useful for development and testing, or as a fallback.
    """

    async def publish(self, event: VaultEvent) -> bool:
        logger.info(
            f"[EVENT] {event.event_type.value} "
            f"subscription={event.subscription_id} "
            f"timestamp={event.timestamp} data={event.data}"
        )
        return True


class WebhookEventPublisher(EventPublisher):
    """
    Event publisher that POSTs events to an indexer webhook

    128-bit amounts are sent as strings.
    """

    def __init__(self, webhook_url: str, timeout: float = 10.0):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def publish(self, event: VaultEvent) -> bool:
        payload = {
            "type": event.event_type.value,
            "subscription_id": event.subscription_id,
            "timestamp": event.timestamp,
            "data": {
                key: str(value) if isinstance(value, int) and not isinstance(value, bool) else value
                for key, value in event.data.items()
            },
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.webhook_url, json=payload)
                response.raise_for_status()
                return True
        except httpx.HTTPError as e:
            logger.error(
                f"Failed to publish {event.event_type.value} event to {self.webhook_url}: {e}"
            )
            return False


class CompositeEventPublisher(EventPublisher):
    """
    Event publisher that delegates to multiple publishers

    A failing publisher never prevents the others from receiving the event.
    """

    def __init__(self, publishers: list[EventPublisher]):
        self.publishers = publishers

    async def publish(self, event: VaultEvent) -> bool:
        success = False
        for publisher in self.publishers:
            try:
                if await publisher.publish(event):
                    success = True
            except Exception as e:
                logger.error(f"Event publisher {type(publisher).__name__} failed: {e}")
        return success


def create_event_publisher(webhook_url: Optional[str] = None) -> EventPublisher:
    """
    Factory function to create the event publisher

    Args:
        webhook_url: Optional indexer webhook. If provided, events are both
                     logged and posted. Otherwise, just logged.
    """
    publishers: list[EventPublisher] = [LoggingEventPublisher()]

    if webhook_url:
        publishers.append(WebhookEventPublisher(webhook_url))

    if len(publishers) == 1:
        return publishers[0]

    return CompositeEventPublisher(publishers)
