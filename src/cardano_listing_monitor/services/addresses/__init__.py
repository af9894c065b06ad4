"""Watched-address resolution."""

from cardano_listing_monitor.services.addresses.address_resolver import WatchedAddressResolver

__all__ = ["WatchedAddressResolver"]
