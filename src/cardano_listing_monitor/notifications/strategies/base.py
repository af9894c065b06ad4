# -*- coding: utf-8 -*-
"""Contract every notification channel implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from cardano_listing_monitor.notifications.types import NotificationMessage

if TYPE_CHECKING:  # pragma: no cover
    from cardano_listing_monitor.config.config import Settings


class BaseNotificationStrategy(ABC):
    """A delivery channel (console, Telegram, Discord).

    NotificationService calls initialize once, send_notification for each
    queued message, and shutdown once. send_notification may raise; the
    service logs the failure and moves on.
    """

    channel_name: ClassVar[str] = "channel"

    def __init__(self, settings: "Settings"):
        self.settings = settings

    @property
    @abstractmethod
    def is_running(self) -> bool: ...

    @abstractmethod
    async def initialize(self) -> None: ...

    @abstractmethod
    async def shutdown(self) -> None: ...

    @abstractmethod
    async def send_notification(self, message: NotificationMessage) -> None:
        """Deliver one message, or raise so the failure is counted against this channel."""
