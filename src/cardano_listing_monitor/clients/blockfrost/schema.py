"""Blockfrost response types (OpenAPI schema alignment)."""

from __future__ import annotations

from typing import Any, TypedDict


class AddressTransactionSchema(TypedDict, total=False):
    """GET /addresses/{address}/transactions item."""

    tx_hash: str
    tx_index: int
    block_height: int
    block_time: int


class AmountSchema(TypedDict, total=False):
    """Quantity of one unit; quantity is a decimal string."""

    unit: str
    quantity: str


class UtxoOutputSchema(TypedDict, total=False):
    """Input or output entry of GET /txs/{hash}/utxos."""

    address: str
    amount: list[AmountSchema]
    output_index: int
    data_hash: str | None


class TransactionUtxosSchema(TypedDict, total=False):
    """GET /txs/{hash}/utxos."""

    hash: str
    inputs: list[UtxoOutputSchema]
    outputs: list[UtxoOutputSchema]


class TransactionSchema(TypedDict, total=False):
    """GET /txs/{hash} (only the fields used here)."""

    hash: str
    block: str
    block_height: int
    block_time: int
    slot: int


class AssetSchema(TypedDict, total=False):
    """GET /assets/{unit}."""

    asset: str
    policy_id: str
    asset_name: str | None
    fingerprint: str
    quantity: str
    initial_mint_tx_hash: str
    onchain_metadata: dict[str, Any] | None
    onchain_metadata_standard: str | None
    metadata: dict[str, Any] | None


class AccountAddressSchema(TypedDict, total=False):
    """GET /accounts/{stake_address}/addresses item."""

    address: str
