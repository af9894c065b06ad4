# -*- coding: utf-8 -*-
"""Application services."""

from cardano_listing_monitor.services.addresses import WatchedAddressResolver
from cardano_listing_monitor.services.detection import DetectionResult, ListingDetector
from cardano_listing_monitor.services.imaging import ImageResolver
from cardano_listing_monitor.services.metadata import AssetMetadataFetcher
from cardano_listing_monitor.services.monitoring import (
    CycleReport,
    MonitoringCycle,
    MonitoringScheduler,
)
from cardano_listing_monitor.services.scanner import TransactionScanner

__all__ = [
    "AssetMetadataFetcher",
    "CycleReport",
    "DetectionResult",
    "ImageResolver",
    "ListingDetector",
    "MonitoringCycle",
    "MonitoringScheduler",
    "TransactionScanner",
    "WatchedAddressResolver",
]
