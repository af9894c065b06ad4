"""Cardano listing monitor: Blockfrost polling, listing detection and notifications."""

from cardano_listing_monitor.clients import AsyncHttpClient, BlockfrostClient
from cardano_listing_monitor.config import get_settings
from cardano_listing_monitor.DI import Container
from cardano_listing_monitor.services import MonitoringCycle, MonitoringScheduler

__version__ = "0.0.1"
__all__ = [
    "AsyncHttpClient",
    "BlockfrostClient",
    "Container",
    "MonitoringCycle",
    "MonitoringScheduler",
    "get_settings",
]
