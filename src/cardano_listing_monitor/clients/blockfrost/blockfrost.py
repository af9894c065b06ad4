# -*- coding: utf-8 -*-
"""Blockfrost Cardano API client (the endpoints the listing monitor consumes)."""

from __future__ import annotations

import structlog
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Literal, Optional, cast
from structlog.contextvars import bound_contextvars

from cardano_listing_monitor.clients.blockfrost.schema import (
    AccountAddressSchema,
    AddressTransactionSchema,
    AssetSchema,
    TransactionSchema,
    TransactionUtxosSchema,
)
from cardano_listing_monitor.config import Settings
from cardano_listing_monitor.utils.validation import mask_address, short_hash

if TYPE_CHECKING:
    from cardano_listing_monitor.clients.http import AsyncHttpClient

SortOrder = Literal["asc", "desc"]


def _dict_items(data: Any) -> list[dict[str, Any]]:
    if not isinstance(data, list):
        return []
    return [x for x in cast(list[Any], data) if isinstance(x, dict)]


class BlockfrostClient:
    """Client for the Blockfrost REST API (addresses, txs, assets, accounts)."""

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (e.g. AsyncHttpClient).
            settings: Application settings (uses settings.api.blockfrost_host and project_id).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _base_url(self) -> str:
        return self._settings.api.blockfrost_host.rstrip("/")

    def _headers(self) -> Dict[str, str]:
        return {"project_id": self._settings.api.project_id or ""}

    async def _get(self, path: str, *, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._http.get(
            f"{self._base_url()}{path}",
            params=params,
            headers=self._headers(),
        )

    async def get_address_transactions(
        self,
        address: str,
        *,
        count: int = 100,
        page: int = 1,
        order: SortOrder = "desc",
    ) -> List[AddressTransactionSchema]:
        """Fetch one page of transactions touching an address.

        Args:
            address: Bech32 address.
            count: Page size (Blockfrost max 100).
            page: 1-based page number.
            order: "desc" for newest first.

        Returns:
            Transaction summaries (tx_hash, block_time, ...).
        """
        with bound_contextvars(
            blockfrost_address_masked=mask_address(address),
            blockfrost_page=page,
            blockfrost_count=count,
        ):
            data = await self._get(
                f"/addresses/{address}/transactions",
                params={"count": count, "page": page, "order": order},
            )
            if not isinstance(data, list):
                self._logger.warning(
                    "blockfrost_address_transactions_non_list",
                    blockfrost_response_type=type(data).__name__,
                )
                return []
            return [cast(AddressTransactionSchema, x) for x in _dict_items(data)]

    async def get_transaction_utxos(self, tx_hash: str) -> TransactionUtxosSchema:
        """Fetch inputs and outputs (with amounts) of a transaction."""
        with bound_contextvars(blockfrost_tx_hash=short_hash(tx_hash)):
            data = await self._get(f"/txs/{tx_hash}/utxos")
            if not isinstance(data, dict):
                self._logger.warning(
                    "blockfrost_utxos_non_dict",
                    blockfrost_response_type=type(data).__name__,
                )
                return cast(TransactionUtxosSchema, {"hash": tx_hash, "inputs": [], "outputs": []})
            return cast(TransactionUtxosSchema, data)

    async def get_transaction(self, tx_hash: str) -> TransactionSchema:
        """Fetch transaction details (used for block_time)."""
        with bound_contextvars(blockfrost_tx_hash=short_hash(tx_hash)):
            data = await self._get(f"/txs/{tx_hash}")
            return cast(TransactionSchema, data if isinstance(data, dict) else {})

    async def get_asset(self, unit: str) -> AssetSchema:
        """Fetch an asset record (fingerprint, on-chain metadata, hex asset name)."""
        with bound_contextvars(blockfrost_unit=unit):
            data = await self._get(f"/assets/{unit}")
            return cast(AssetSchema, data if isinstance(data, dict) else {})

    async def get_account_addresses(
        self,
        stake_address: str,
        *,
        count: int = 100,
        page: int = 1,
    ) -> List[AccountAddressSchema]:
        """Fetch one page of payment addresses associated with a stake key."""
        with bound_contextvars(
            blockfrost_stake_masked=mask_address(stake_address),
            blockfrost_page=page,
        ):
            data = await self._get(
                f"/accounts/{stake_address}/addresses",
                params={"count": count, "page": page},
            )
            return [cast(AccountAddressSchema, x) for x in _dict_items(data)]
