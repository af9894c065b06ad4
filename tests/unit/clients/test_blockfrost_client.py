# -*- coding: utf-8 -*-
"""Unit tests for BlockfrostClient request shaping."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock

from cardano_listing_monitor.clients.blockfrost import BlockfrostClient
from cardano_listing_monitor.config import Settings

HOST = "https://cardano-mainnet.blockfrost.io/api/v0"


def _client(settings: Settings, response: Any) -> tuple[BlockfrostClient, Any]:
    http: Any = SimpleNamespace(get=AsyncMock(return_value=response))
    return BlockfrostClient(http, settings), http


async def test_address_transactions_request(settings: Settings, watched_address: str) -> None:
    client, http = _client(settings, [{"tx_hash": "a", "block_time": 1}, "junk"])

    items = await client.get_address_transactions(watched_address, count=100, page=2)

    assert items == [{"tx_hash": "a", "block_time": 1}]
    http.get.assert_awaited_once_with(
        f"{HOST}/addresses/{watched_address}/transactions",
        params={"count": 100, "page": 2, "order": "desc"},
        headers={"project_id": "mainnettestproject"},
    )


async def test_address_transactions_non_list_is_empty(settings: Settings, watched_address: str) -> None:
    client, _ = _client(settings, {"error": "weird"})
    assert await client.get_address_transactions(watched_address) == []


async def test_transaction_utxos_non_dict_has_no_outputs(settings: Settings) -> None:
    client, http = _client(settings, None)

    utxos = await client.get_transaction_utxos("tx1")

    assert utxos["outputs"] == []
    assert http.get.await_args.args[0] == f"{HOST}/txs/tx1/utxos"


async def test_asset_request(settings: Settings, unit: str) -> None:
    client, http = _client(settings, {"asset": unit})

    assert await client.get_asset(unit) == {"asset": unit}
    assert http.get.await_args.args[0] == f"{HOST}/assets/{unit}"


async def test_account_addresses_request(settings: Settings) -> None:
    client, http = _client(settings, [{"address": "addr1x"}])

    assert await client.get_account_addresses("stake1abc", page=3) == [{"address": "addr1x"}]
    assert http.get.await_args.args[0] == f"{HOST}/accounts/stake1abc/addresses"
    assert http.get.await_args.kwargs["params"] == {"count": 100, "page": 3}
