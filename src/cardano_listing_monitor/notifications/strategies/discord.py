# -*- coding: utf-8 -*-
"""Discord webhook notification strategy (aiohttp)."""

from __future__ import annotations

import asyncio
import aiohttp
import structlog
from typing import Any, Callable, Optional, TYPE_CHECKING

from cardano_listing_monitor.exceptions import NotificationDeliveryError
from cardano_listing_monitor.notifications.types import LISTING_EVENT_TYPE, NotificationMessage
from cardano_listing_monitor.notifications.strategies.base import BaseNotificationStrategy

if TYPE_CHECKING:
    from cardano_listing_monitor.config.config import Settings
    from cardano_listing_monitor.notifications.types import NotificationStyler

MAX_ATTEMPTS = 3


class DiscordWebhookNotifier(BaseNotificationStrategy):
    """Post notifications to a Discord channel webhook as a single embed."""

    channel_name = "discord"

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        super().__init__(settings)
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._styler: "NotificationStyler" = styler

        cfg = self.settings.discord
        if not cfg.enabled or not cfg.webhook_url:
            raise ValueError("DiscordWebhookNotifier requires webhook_url.")
        self.webhook_url: str = cfg.webhook_url
        self._session = session
        self._owns_session = session is None
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        if self._running:
            return
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.settings.discord.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
            self._owns_session = True
        self._running = True

    async def shutdown(self) -> None:
        if not self._running:
            return
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None
        self._running = False

    def build_payload(self, message: NotificationMessage) -> dict[str, Any]:
        """Build the webhook JSON body: one embed with title, description, link, image, footer and timestamp."""
        cfg = self.settings.discord
        payload_fields = message.payload or {}
        title = message.title or message.event_type
        if message.event_type == LISTING_EVENT_TYPE:
            title = f"🛒 {title}"
            description = (
                f"**{payload_fields.get('name') or 'Unknown'}**\n"
                f"Price: {payload_fields.get('price') or 'N/A'}"
            )
        else:
            description = self._styler.render(message, parse_html=False)
        embed: dict[str, Any] = {
            "title": title,
            "description": description,
            "color": cfg.embed_color,
            "footer": {"text": cfg.footer_text},
        }
        if message.url:
            embed["url"] = message.url
        if message.image_url:
            embed["image"] = {"url": message.image_url}
        if message.timestamp is not None:
            embed["timestamp"] = message.timestamp.isoformat()
        payload: dict[str, Any] = {"embeds": [embed]}
        if cfg.username:
            payload["username"] = cfg.username
        return payload

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self._running or self._session is None:
            self._logger.warning("discord_not_running_cannot_send")
            return

        payload = self.build_payload(message)
        for attempt in range(1, MAX_ATTEMPTS + 1):
            async with self._session.post(self.webhook_url, json=payload) as response:
                if response.status == 429:
                    body = await response.json(content_type=None)
                    retry_after = float((body or {}).get("retry_after", 1.0))
                    self._logger.warning(
                        "discord_rate_limit_retry_after",
                        attempt=attempt,
                        retry_seconds=retry_after,
                    )
                    await asyncio.sleep(retry_after)
                    continue
                if response.status >= 400:
                    text = await response.text()
                    self._logger.error(
                        "discord_webhook_rejected",
                        http_status_code=response.status,
                        http_response_body=text[:500],
                    )
                    raise NotificationDeliveryError(self.channel_name, f"webhook returned {response.status}")
                return
        self._logger.error("discord_max_retries_exceeded_message_dropped")
        raise NotificationDeliveryError(self.channel_name, "rate limited on every attempt")
