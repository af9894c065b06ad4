"""Notification strategies."""

from cardano_listing_monitor.notifications.strategies.base import (
    BaseNotificationStrategy,
)
from cardano_listing_monitor.notifications.strategies.console import ConsoleNotifier
from cardano_listing_monitor.notifications.strategies.discord import DiscordWebhookNotifier
from cardano_listing_monitor.notifications.strategies.telegram import TelegramNotifier

__all__ = [
    "BaseNotificationStrategy",
    "ConsoleNotifier",
    "DiscordWebhookNotifier",
    "TelegramNotifier",
]
