"""
Notification channel

Clients cannot push to one another directly, so trade events are handed to
a server-side relay that owns the device tokens. Delivery is best-effort:
failures are logged and never raised or retried.
"""

import logging
from abc import ABC, abstractmethod

import httpx

from iffl_companion.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Fire-and-forget notification sender."""

    @abstractmethod
    async def send(self, recipient: str, title: str, body: str) -> bool:
        """Send a notification; returns whether it was handed off."""

    async def close(self) -> None:
        """Release any held resources."""


class LoggingNotifier(Notifier):
    """Used when no relay is configured: records the notification in the log."""

    async def send(self, recipient: str, title: str, body: str) -> bool:
        logger.info("Notification for %s: %s - %s", recipient, title, body)
        return True


class RelayNotifier(Notifier):
    """Posts notifications to the configured relay endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        if not self.settings.notification_relay_url:
            raise ValueError("notification_relay_url is not configured")
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(self.settings.http_timeout),
            transport=transport,
        )

    async def send(self, recipient: str, title: str, body: str) -> bool:
        payload = {"recipient": recipient, "title": title, "body": body}
        try:
            response = await self._client.post(
                self.settings.notification_relay_url, json=payload
            )
        except httpx.HTTPError as e:
            logger.warning("Notification to %s failed: %s", recipient, e)
            return False
        if response.status_code >= 400:
            logger.warning(
                "Notification to %s rejected with HTTP %d", recipient, response.status_code
            )
            return False
        return True

    async def close(self) -> None:
        await self._client.aclose()


def build_notifier(settings: Settings | None = None) -> Notifier:
    settings = settings or get_settings()
    if settings.notification_relay_url:
        return RelayNotifier(settings)
    return LoggingNotifier()
