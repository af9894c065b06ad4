"""Monitoring cycle: scan -> detect -> fetch metadata -> resolve image -> publish -> mark processed."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Protocol

import structlog
from structlog.contextvars import bound_contextvars

from cardano_listing_monitor.models.listing import Listing
from cardano_listing_monitor.models.processed_transaction import (
    ProcessedTransaction,
    ProcessingOutcome,
)
from cardano_listing_monitor.models.transaction import TransactionRecord
from cardano_listing_monitor.notifications.types import NotificationMessage
from cardano_listing_monitor.utils.validation import mask_address, short_hash

if TYPE_CHECKING:
    from cardano_listing_monitor.config import Settings
    from cardano_listing_monitor.persistence.repositories.interfaces import (
        IProcessedTransactionRepository,
    )
    from cardano_listing_monitor.services.detection import ListingDetector
    from cardano_listing_monitor.services.imaging import ImageResolver
    from cardano_listing_monitor.services.metadata import AssetMetadataFetcher
    from cardano_listing_monitor.services.scanner import TransactionScanner


class Notifier(Protocol):
    def notify(self, message: NotificationMessage) -> None: ...


@dataclass
class CycleReport:
    """Counters for one monitoring cycle."""

    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    finished_at: datetime | None = None
    addresses_scanned: int = 0
    transactions_scanned: int = 0
    transactions_processed: int = 0
    listings_published: int = 0
    publish_failures: int = 0
    outcomes: dict[str, int] = field(default_factory=dict)

    def record_outcome(self, outcome: ProcessingOutcome) -> None:
        self.transactions_processed += 1
        self.outcomes[outcome.value] = self.outcomes.get(outcome.value, 0) + 1


class MonitoringCycle:
    """One pass over every watched address.

    Owns the watched-address list and the processed-transaction ledger.
    Every transaction inspected in a pass is added to the ledger whatever
    its outcome, so it is never inspected or notified again.
    """

    def __init__(
        self,
        settings: Settings,
        scanner: TransactionScanner,
        detector: ListingDetector,
        metadata_fetcher: AssetMetadataFetcher,
        image_resolver: ImageResolver,
        processed_repository: IProcessedTransactionRepository,
        notifier: Notifier,
        *,
        addresses: Iterable[str] = (),
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the cycle.

        Args:
            settings: Application settings (uses settings.monitor.marketplace_base_url).
            scanner: Transaction scanner (injected).
            detector: Listing detector (injected).
            metadata_fetcher: Asset metadata fetcher (injected).
            image_resolver: Image resolver (injected).
            processed_repository: Dedup ledger (injected).
            notifier: Publish sink; notify() must not block.
            addresses: Initial watched addresses (see set_addresses).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._scanner = scanner
        self._detector = detector
        self._fetcher = metadata_fetcher
        self._resolver = image_resolver
        self._processed = processed_repository
        self._notifier = notifier
        self._addresses: tuple[str, ...] = tuple(dict.fromkeys(addresses))
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def addresses(self) -> tuple[str, ...]:
        return self._addresses

    def set_addresses(self, addresses: Iterable[str]) -> None:
        """Replace the watched addresses (deduplicated, order kept)."""
        self._addresses = tuple(dict.fromkeys(a for a in addresses if a))

    async def run_once(self) -> CycleReport:
        """Visit every watched address sequentially and process unseen transactions."""
        report = CycleReport()
        self._logger.info("cycle_started", addresses_count=len(self._addresses))
        for address in self._addresses:
            with bound_contextvars(cycle_address_masked=mask_address(address)):
                await self._process_address(address, report)
        report.finished_at = datetime.now(UTC)
        self._logger.info(
            "cycle_complete",
            cycle_duration_seconds=(report.finished_at - report.started_at).total_seconds(),
            addresses_scanned=report.addresses_scanned,
            transactions_scanned=report.transactions_scanned,
            transactions_processed=report.transactions_processed,
            listings_published=report.listings_published,
            publish_failures=report.publish_failures,
            outcomes=report.outcomes,
        )
        return report

    async def _process_address(self, address: str, report: CycleReport) -> None:
        try:
            transactions = await self._scanner.scan(address)
        except Exception as exc:
            self._logger.exception(
                "cycle_scan_failed",
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            return
        report.addresses_scanned += 1
        report.transactions_scanned += len(transactions)
        for tx in transactions:
            if await self._processed.contains(tx.tx_hash):
                continue
            outcome = ProcessingOutcome.FAILED
            try:
                with bound_contextvars(cycle_tx_hash=short_hash(tx.tx_hash)):
                    outcome = await self._process_transaction(address, tx, report)
            except Exception as exc:
                self._logger.exception(
                    "cycle_transaction_failed",
                    cycle_tx_hash=short_hash(tx.tx_hash),
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
            finally:
                await self._processed.add(ProcessedTransaction.create(tx.tx_hash, address, outcome))
                report.record_outcome(outcome)

    async def _process_transaction(
        self,
        address: str,
        tx: TransactionRecord,
        report: CycleReport,
    ) -> ProcessingOutcome:
        detection = await self._detector.detect(address, tx)
        if detection.error is not None:
            return ProcessingOutcome.UTXO_FAILED
        if detection.skipped_by_epoch:
            return ProcessingOutcome.SKIPPED_EPOCH
        if not detection.matched:
            return ProcessingOutcome.NO_MATCH

        listings = await self._build_listings(address, tx.tx_hash, detection.units)
        if not listings:
            self._logger.warning("cycle_assets_unavailable", units_count=len(detection.units))
            return ProcessingOutcome.ASSETS_UNAVAILABLE

        for listing in listings:
            if self._publish(listing):
                report.listings_published += 1
            else:
                report.publish_failures += 1
        return ProcessingOutcome.NOTIFIED

    async def _build_listings(self, address: str, tx_hash: str, units: list[str]) -> list[Listing]:
        """Fetch metadata for units and resolve one image per asset, concurrently within the transaction."""
        assets = await self._fetcher.fetch_many(units)
        images = await asyncio.gather(*(self._resolver.resolve(asset) for asset in assets))
        base_url = self._settings.monitor.marketplace_base_url
        return [
            Listing.from_asset(
                asset,
                tx_hash=tx_hash,
                address=address,
                image_url=image_url,
                marketplace_base_url=base_url,
            )
            for asset, image_url in zip(assets, images)
        ]

    def _publish(self, listing: Listing) -> bool:
        try:
            self._notifier.notify(listing.to_notification())
        except Exception as exc:
            self._logger.error(
                "cycle_publish_failed",
                listing_unit=listing.unit,
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
            return False
        self._logger.info(
            "cycle_listing_published",
            listing_unit=listing.unit,
            listing_name=listing.display_name,
            listing_price=listing.price_label,
            listing_image_url=listing.image_url,
        )
        return True
