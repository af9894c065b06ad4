# -*- coding: utf-8 -*-
"""Unit tests for MonitoringCycle (scan -> detect -> fetch -> resolve -> publish -> mark)."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, Mock

import pytest

from cardano_listing_monitor.clients.http import ProbeResult
from cardano_listing_monitor.config import Settings
from cardano_listing_monitor.exceptions import BlockfrostAPIError
from cardano_listing_monitor.models import ProcessingOutcome
from cardano_listing_monitor.notifications.types import LISTING_EVENT_TYPE
from cardano_listing_monitor.persistence.repositories.in_memory import (
    InMemoryProcessedTransactionRepository,
)
from cardano_listing_monitor.services.detection import ListingDetector
from cardano_listing_monitor.services.imaging import ImageResolver
from cardano_listing_monitor.services.metadata import AssetMetadataFetcher
from cardano_listing_monitor.services.monitoring import MonitoringCycle
from cardano_listing_monitor.services.scanner import TransactionScanner

IMAGE_URL = "https://nftstorage.link/ipfs/QmFancy/1.png"


def _raise_or_return(value: Any) -> Any:
    if isinstance(value, Exception):
        raise value
    return value


class FakeChain:
    """Blockfrost fake backed by dicts: address -> txs, tx_hash -> outputs, unit -> asset."""

    def __init__(
        self,
        *,
        txs: dict[str, list[dict[str, Any]]],
        outputs: dict[str, Any],
        assets: dict[str, Any],
    ) -> None:
        self.get_address_transactions = AsyncMock(
            side_effect=lambda address, **kw: list(txs.get(address, [])) if kw.get("page", 1) == 1 else []
        )
        self.get_transaction_utxos = AsyncMock(
            side_effect=lambda tx_hash: {"hash": tx_hash, "inputs": [], "outputs": _raise_or_return(outputs[tx_hash])}
        )
        self.get_transaction = AsyncMock(return_value={})
        self.get_asset = AsyncMock(side_effect=lambda unit: _raise_or_return(assets[unit]))


def _cycle(
    settings: Settings,
    chain: FakeChain,
    processed_repo: InMemoryProcessedTransactionRepository,
    *,
    addresses: list[str],
    resolver: Any = None,
    notifier: Any = None,
) -> tuple[MonitoringCycle, Any, Any]:
    resolver = resolver or SimpleNamespace(resolve=AsyncMock(return_value=IMAGE_URL))
    notifier = notifier or SimpleNamespace(notify=Mock())
    cycle = MonitoringCycle(
        settings,
        TransactionScanner(settings, chain, sleep=AsyncMock()),
        ListingDetector(settings, chain),
        AssetMetadataFetcher(settings, chain, sleep=AsyncMock()),
        resolver,
        processed_repo,
        notifier,
        addresses=addresses,
    )
    return cycle, resolver, notifier


def _deposit(address: str, *units: str) -> list[dict[str, Any]]:
    amount = [{"unit": "lovelace", "quantity": "1444443"}]
    amount.extend({"unit": u, "quantity": "1"} for u in units)
    return [{"address": address, "amount": amount}]


@pytest.fixture
def fancy_asset(unit: str) -> dict[str, Any]:
    return {
        "asset": unit,
        "fingerprint": "asset1fancy",
        "onchain_metadata": {"name": "Fancy #1", "image": "ipfs://QmFancy/1.png", "price": "50000000"},
    }


async def test_listing_is_published_once(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    unit: str,
    fancy_asset: dict[str, Any],
) -> None:
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T1", "block_time": 1700000000}]},
        outputs={"T1": _deposit(watched_address, unit)},
        assets={unit: fancy_asset},
    )
    cycle, resolver, notifier = _cycle(settings, chain, processed_repo, addresses=[watched_address])

    report = await cycle.run_once()

    notifier.notify.assert_called_once()
    message = notifier.notify.call_args.args[0]
    assert message.event_type == LISTING_EVENT_TYPE
    assert message.title == "New Listing Detected"
    assert message.payload["name"] == "Fancy #1"
    assert message.payload["price"] == "50.00 ADA"
    assert message.url == f"https://www.jpg.store/asset/{unit}"
    assert message.image_url == IMAGE_URL
    assert message.timestamp is not None
    resolver.resolve.assert_awaited_once()
    assert report.listings_published == 1
    assert report.transactions_processed == 1

    entry = await processed_repo.get("T1")
    assert entry is not None
    assert entry.outcome == ProcessingOutcome.NOTIFIED
    assert entry.address == watched_address

    second = await cycle.run_once()

    notifier.notify.assert_called_once()
    assert chain.get_transaction_utxos.await_count == 1
    assert second.transactions_scanned == 1
    assert second.transactions_processed == 0


async def test_unwatched_policy_is_marked_without_notification(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    other_policy_id: str,
) -> None:
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T2", "block_time": 1700000000}]},
        outputs={"T2": _deposit(watched_address, other_policy_id + "41")},
        assets={},
    )
    cycle, _, notifier = _cycle(settings, chain, processed_repo, addresses=[watched_address])

    await cycle.run_once()

    notifier.notify.assert_not_called()
    chain.get_asset.assert_not_awaited()
    entry = await processed_repo.get("T2")
    assert entry is not None and entry.outcome == ProcessingOutcome.NO_MATCH


async def test_utxo_failure_marks_processed_and_is_not_retried(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
) -> None:
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T3", "block_time": 1700000000}]},
        outputs={"T3": BlockfrostAPIError("server error", status_code=500)},
        assets={},
    )
    cycle, _, notifier = _cycle(settings, chain, processed_repo, addresses=[watched_address])

    await cycle.run_once()
    await cycle.run_once()

    notifier.notify.assert_not_called()
    assert chain.get_transaction_utxos.await_count == 1
    entry = await processed_repo.get("T3")
    assert entry is not None and entry.outcome == ProcessingOutcome.UTXO_FAILED


async def test_unavailable_assets_mark_processed_without_notification(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    unit: str,
) -> None:
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T4", "block_time": 1700000000}]},
        outputs={"T4": _deposit(watched_address, unit)},
        assets={unit: BlockfrostAPIError("not found", status_code=404)},
    )
    cycle, resolver, notifier = _cycle(settings, chain, processed_repo, addresses=[watched_address])

    await cycle.run_once()

    notifier.notify.assert_not_called()
    resolver.resolve.assert_not_awaited()
    entry = await processed_repo.get("T4")
    assert entry is not None and entry.outcome == ProcessingOutcome.ASSETS_UNAVAILABLE


async def test_one_listing_per_unit_in_a_transaction(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    policy_id: str,
) -> None:
    units = [policy_id + "41", policy_id + "42"]
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T5", "block_time": 1700000000}]},
        outputs={"T5": _deposit(watched_address, *units)},
        assets={u: {"asset": u, "onchain_metadata": {}} for u in units},
    )
    cycle, _, notifier = _cycle(settings, chain, processed_repo, addresses=[watched_address])

    report = await cycle.run_once()

    published = [c.args[0].payload["unit"] for c in notifier.notify.call_args_list]
    assert published == units
    assert report.listings_published == 2


async def test_publish_failure_does_not_stop_the_cycle(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    unit: str,
    fancy_asset: dict[str, Any],
) -> None:
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T6", "block_time": 1700000000}]},
        outputs={"T6": _deposit(watched_address, unit)},
        assets={unit: fancy_asset},
    )
    notifier = SimpleNamespace(notify=Mock(side_effect=RuntimeError("NotificationService not initialized")))
    cycle, _, _ = _cycle(settings, chain, processed_repo, addresses=[watched_address], notifier=notifier)

    report = await cycle.run_once()

    assert report.publish_failures == 1
    assert report.listings_published == 0
    assert await processed_repo.contains("T6") is True


async def test_unexpected_error_marks_transaction_failed(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    unit: str,
    fancy_asset: dict[str, Any],
) -> None:
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T7", "block_time": 1700000000}, {"tx_hash": "T8"}]},
        outputs={"T7": _deposit(watched_address, unit), "T8": []},
        assets={unit: fancy_asset},
    )
    resolver = SimpleNamespace(resolve=AsyncMock(side_effect=RuntimeError("unexpected")))
    cycle, _, notifier = _cycle(settings, chain, processed_repo, addresses=[watched_address], resolver=resolver)

    report = await cycle.run_once()

    notifier.notify.assert_not_called()
    failed = await processed_repo.get("T7")
    assert failed is not None and failed.outcome == ProcessingOutcome.FAILED
    later = await processed_repo.get("T8")
    assert later is not None and later.outcome == ProcessingOutcome.NO_MATCH
    assert report.outcomes == {"failed": 1, "no_match": 1}


async def test_addresses_are_visited_in_order_and_deduplicated(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
) -> None:
    chain = FakeChain(txs={}, outputs={}, assets={})
    cycle, _, _ = _cycle(settings, chain, processed_repo, addresses=[])
    cycle.set_addresses(["addr1b", "addr1a", "addr1b", ""])

    report = await cycle.run_once()

    assert cycle.addresses == ("addr1b", "addr1a")
    assert [c.args[0] for c in chain.get_address_transactions.await_args_list] == ["addr1b", "addr1a"]
    assert report.addresses_scanned == 2


async def test_end_to_end_listing_with_verified_gateway_image(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    policy_id: str,
) -> None:
    listed_unit = policy_id + "4142"
    verified = "https://ipfs.io/ipfs/Qm999"

    def _probe(url: str, *, timeout_seconds: float) -> ProbeResult:
        content_type = "image/png" if url == verified else "text/html"
        return ProbeResult(url=url, status=200, content_type=content_type)

    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T1", "block_time": 1700000000}]},
        outputs={"T1": _deposit(watched_address, listed_unit)},
        assets={
            listed_unit: {
                "asset": listed_unit,
                "onchain_metadata": {"name": "Fancy #1", "image": "ipfs://Qm999", "price": 50000000},
            }
        },
    )
    resolver = ImageResolver(settings, SimpleNamespace(probe=AsyncMock(side_effect=_probe)))
    cycle, _, notifier = _cycle(
        settings, chain, processed_repo, addresses=[watched_address], resolver=resolver
    )

    await cycle.run_once()

    message = notifier.notify.call_args.args[0]
    assert message.title == "New Listing Detected"
    assert "Fancy #1" in message.message
    assert "50.00 ADA" in message.message
    assert message.image_url == verified
    assert message.url == f"https://www.jpg.store/asset/{listed_unit}"


async def test_failing_scan_does_not_skip_remaining_addresses(
    settings: Settings,
    processed_repo: InMemoryProcessedTransactionRepository,
    watched_address: str,
    unit: str,
    fancy_asset: dict[str, Any],
) -> None:
    chain = FakeChain(
        txs={watched_address: [{"tx_hash": "T9", "block_time": 1700000000}]},
        outputs={"T9": _deposit(watched_address, unit)},
        assets={unit: fancy_asset},
    )
    cycle, _, notifier = _cycle(settings, chain, processed_repo, addresses=["addr1broken", watched_address])
    scanner = cycle._scanner
    real_scan = scanner.scan

    async def _scan(address: str) -> Any:
        if address == "addr1broken":
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return await real_scan(address)

    scanner.scan = _scan

    report = await cycle.run_once()

    notifier.notify.assert_called_once()
    assert report.addresses_scanned == 1
    assert await processed_repo.contains("T9") is True
