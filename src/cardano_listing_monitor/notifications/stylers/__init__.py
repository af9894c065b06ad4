"""Notification stylers."""

from cardano_listing_monitor.notifications.stylers.notification_styler import (
    ListingNotificationStyler,
)

__all__ = ["ListingNotificationStyler"]
