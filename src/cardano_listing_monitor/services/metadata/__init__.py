"""Asset metadata fetching."""

from cardano_listing_monitor.services.metadata.asset_metadata_fetcher import AssetMetadataFetcher

__all__ = ["AssetMetadataFetcher"]
