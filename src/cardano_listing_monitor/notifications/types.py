"""Notification message types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

LISTING_EVENT_TYPE = "listing_detected"


@dataclass(frozen=True)
class NotificationMessage:
    """Message to be sent via one or more notification channels.

    url and image_url let rich channels (Telegram photo, Discord embed) link
    to the asset page and show the resolved image.
    """

    event_type: str
    message: str
    title: str | None = None
    payload: dict[str, Any] | None = None
    url: str | None = None
    image_url: str | None = None
    timestamp: datetime | None = None


class NotificationStyler(Protocol):
    """Render a message into a formatted string for delivery."""

    def render(self, message: NotificationMessage, *, parse_html: bool = True) -> str:
        """Return a formatted message for the given message.

        Args:
            message: Notification message to render.
            parse_html: If True (default), output includes HTML tags. If False, plain text.
        """
        ...
