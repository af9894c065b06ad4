"""Notification subsystem."""

from cardano_listing_monitor.notifications.notification_manager import (
    NotificationService,
)
from cardano_listing_monitor.notifications.strategies import (
    BaseNotificationStrategy,
    ConsoleNotifier,
    DiscordWebhookNotifier,
    TelegramNotifier,
)
from cardano_listing_monitor.notifications.stylers.notification_styler import (
    ListingNotificationStyler,
)
from cardano_listing_monitor.notifications.types import (
    LISTING_EVENT_TYPE,
    NotificationMessage,
    NotificationStyler,
)

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "DiscordWebhookNotifier",
    "LISTING_EVENT_TYPE",
    "ListingNotificationStyler",
    "NotificationMessage",
    "NotificationService",
    "NotificationStyler",
    "TelegramNotifier",
]
