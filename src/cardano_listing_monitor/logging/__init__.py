"""Logging subpackage."""

from cardano_listing_monitor.logging.config import configure_logging

__all__ = ["configure_logging"]
