"""Blockfrost API client and response schemas."""

from cardano_listing_monitor.clients.blockfrost.blockfrost import BlockfrostClient
from cardano_listing_monitor.clients.blockfrost.schema import (
    AccountAddressSchema,
    AddressTransactionSchema,
    AmountSchema,
    AssetSchema,
    TransactionSchema,
    TransactionUtxosSchema,
    UtxoOutputSchema,
)

__all__ = [
    "AccountAddressSchema",
    "AddressTransactionSchema",
    "AmountSchema",
    "AssetSchema",
    "BlockfrostClient",
    "TransactionSchema",
    "TransactionUtxosSchema",
    "UtxoOutputSchema",
]
