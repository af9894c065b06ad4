"""Listing detection."""

from cardano_listing_monitor.services.detection.listing_detector import (
    DetectionResult,
    ListingDetector,
    matching_units,
)

__all__ = ["DetectionResult", "ListingDetector", "matching_units"]
