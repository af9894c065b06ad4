# -*- coding: utf-8 -*-
"""Console notifier: plain-text listing blocks on stdout."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from cardano_listing_monitor.notifications.strategies.base import BaseNotificationStrategy
from cardano_listing_monitor.notifications.types import LISTING_EVENT_TYPE, NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from cardano_listing_monitor.config import Settings
    from cardano_listing_monitor.notifications.types import NotificationStyler

_SEPARATOR = "-" * 48


class ConsoleNotifier(BaseNotificationStrategy):
    """Writes each notification as a separated plain-text block.

    Listings also get an image line, since a terminal cannot show the picture.
    """

    channel_name = "console"

    def __init__(
        self,
        settings: "Settings",
        styler: "NotificationStyler",
        *,
        stream: TextIO | None = None,
    ) -> None:
        super().__init__(settings)
        self._styler = styler
        self._stream = stream
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def initialize(self) -> None:
        self._running = True

    async def shutdown(self) -> None:
        self._running = False

    def format_block(self, message: NotificationMessage) -> str:
        lines = [_SEPARATOR, self._styler.render(message, parse_html=False)]
        if message.event_type == LISTING_EVENT_TYPE and message.image_url:
            lines.append(f"🖼️ {message.image_url}")
        lines.append(_SEPARATOR)
        return "\n".join(lines)

    async def send_notification(self, message: NotificationMessage) -> None:
        if not self._running or not self.settings.console.enabled:
            return
        stream = self._stream or sys.stdout
        print(self.format_block(message), file=stream, flush=True)
