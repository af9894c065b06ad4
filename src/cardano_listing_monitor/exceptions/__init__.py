"""Exceptions subpackage."""

from cardano_listing_monitor.exceptions.exceptions import (
    BlockfrostAPIError,
    InvalidConfigError,
    ListingMonitorError,
    MissingRequiredConfigError,
    NotificationDeliveryError,
    RateLimitError,
)

__all__ = [
    "BlockfrostAPIError",
    "InvalidConfigError",
    "ListingMonitorError",
    "MissingRequiredConfigError",
    "NotificationDeliveryError",
    "RateLimitError",
]
