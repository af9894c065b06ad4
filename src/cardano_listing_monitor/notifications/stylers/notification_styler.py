# -*- coding: utf-8 -*-
"""Event-based notification styler with emoji headers (Telegram-style HTML or plain text)."""

from __future__ import annotations

import html
from datetime import datetime, timezone
from typing import Any

from cardano_listing_monitor.notifications.types import (
    LISTING_EVENT_TYPE,
    NotificationMessage,
    NotificationStyler,
)


class ListingNotificationStyler(NotificationStyler):
    """Render notifications by event_type: listings, system start/stop, anything else."""

    def render(self, message: NotificationMessage, *, parse_html: bool = True) -> str:
        """Dispatch to the appropriate renderer based on event_type."""
        if message.event_type == LISTING_EVENT_TYPE:
            return self._render_listing(message, parse_html)
        if message.event_type in ("system_started", "system_stopped"):
            return self._render_system(message, parse_html)
        return self._render_generic(message, parse_html)

    def _render_listing(self, message: NotificationMessage, parse_html: bool) -> str:
        payload: dict[str, Any] = message.payload or {}
        emoji, default_title = self._title(message.event_type)
        title = message.title or default_title
        name = str(payload.get("name") or "Unknown")
        price = str(payload.get("price") or "N/A")

        lines = [
            f"{emoji} {self._bold(title, parse_html)}",
            "",
            self._bold(name, parse_html),
            f"Price: {self._escape(price, parse_html)}",
        ]
        if message.url:
            lines.append("")
            if parse_html:
                lines.append(f'🔗 <a href="{html.escape(message.url, quote=True)}">View asset</a>')
            else:
                lines.append(f"🔗 {message.url}")
        if not parse_html and message.timestamp is not None:
            lines.append(f"🕒 {self._format_timestamp(message.timestamp)}")
        return "\n".join(lines).strip()

    def _render_system(self, message: NotificationMessage, parse_html: bool) -> str:
        emoji, title = self._title(message.event_type)
        lines = [f"{emoji} {self._bold(message.title or title, parse_html)}", self._escape(message.message, parse_html)]
        payload = message.payload or {}
        for label, key in (("Addresses", "addresses_count"), ("Policies", "policies_count")):
            value = payload.get(key)
            if value is not None:
                lines.append(f"{self._bold(label + ':', parse_html)} {value}")
        return "\n".join(lines).strip()

    def _render_generic(self, message: NotificationMessage, parse_html: bool) -> str:
        """Render unknown event types using message and payload."""
        emoji, title = self._title(message.event_type)
        lines = [f"{emoji} {self._bold(message.title or title, parse_html)}", self._escape(message.message, parse_html)]
        if message.payload:
            for key in sorted(message.payload.keys()):
                value = message.payload.get(key)
                if value is not None:
                    lines.append(f"{self._bold(key + ':', parse_html)} {self._escape(str(value), parse_html)}")
        return "\n".join(lines).strip()

    @staticmethod
    def _title(event_type: str) -> tuple[str, str]:
        """Get the emoji and title for the given event type."""
        mapping = {
            LISTING_EVENT_TYPE: ("🛒", "New Listing Detected"),
            "system_started": ("✅", "Monitor Started"),
            "system_stopped": ("⏹️", "Monitor Stopped"),
        }
        return mapping.get(event_type, ("ℹ️", event_type.replace("_", " ").title()))

    @staticmethod
    def _escape(text: str, parse_html: bool) -> str:
        return html.escape(text, quote=False) if parse_html else text

    @classmethod
    def _bold(cls, text: str, parse_html: bool) -> str:
        return f"<b>{cls._escape(text, True)}</b>" if parse_html else text

    @staticmethod
    def _format_timestamp(value: datetime) -> str:
        """Format a datetime as ISO-8601 UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat()
