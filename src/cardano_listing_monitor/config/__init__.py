"""Configuration subpackage."""

from cardano_listing_monitor.config.config import (
    ApiSettings,
    AppSettings,
    ConsoleNotificationSettings,
    DiscordNotificationSettings,
    HealthSettings,
    ImageSettings,
    ImageStrategyName,
    LoggingSettings,
    MonitorSettings,
    Settings,
    TelegramNotificationSettings,
    get_settings,
)

__all__ = [
    "ApiSettings",
    "AppSettings",
    "ConsoleNotificationSettings",
    "DiscordNotificationSettings",
    "HealthSettings",
    "ImageSettings",
    "ImageStrategyName",
    "LoggingSettings",
    "MonitorSettings",
    "Settings",
    "TelegramNotificationSettings",
    "get_settings",
]
