"""Domain models and DTOs."""

from cardano_listing_monitor.models.asset import AssetRecord
from cardano_listing_monitor.models.listing import Listing, marketplace_asset_url
from cardano_listing_monitor.models.processed_transaction import (
    ProcessedTransaction,
    ProcessingOutcome,
)
from cardano_listing_monitor.models.transaction import (
    AssetAmount,
    TransactionRecord,
    UtxoOutput,
)

__all__ = [
    "AssetAmount",
    "AssetRecord",
    "Listing",
    "ProcessedTransaction",
    "ProcessingOutcome",
    "TransactionRecord",
    "UtxoOutput",
    "marketplace_asset_url",
]
