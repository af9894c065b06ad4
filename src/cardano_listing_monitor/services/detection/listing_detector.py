"""Listing detector: finds watched-policy assets deposited into a watched address by a transaction."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, cast

import structlog
from structlog.contextvars import bound_contextvars

from cardano_listing_monitor.exceptions import BlockfrostAPIError
from cardano_listing_monitor.models.transaction import TransactionRecord, UtxoOutput
from cardano_listing_monitor.utils.epoch import epoch_for
from cardano_listing_monitor.utils.validation import mask_address, short_hash

if TYPE_CHECKING:
    from cardano_listing_monitor.clients.blockfrost import BlockfrostClient
    from cardano_listing_monitor.config import Settings


@dataclass(frozen=True)
class DetectionResult:
    """Outcome of inspecting one transaction for deposits of watched assets."""

    tx_hash: str
    units: list[str] = field(default_factory=list)
    """Matching asset units, de-duplicated, in output order."""
    block_time: int | None = None
    epoch: int | None = None
    skipped_by_epoch: bool = False
    error: str | None = None
    """Set when the UTXO fetch failed; units is then empty."""

    @property
    def matched(self) -> bool:
        return bool(self.units)


def matching_units(
    outputs: Iterable[UtxoOutput],
    *,
    address: str,
    policy_ids: frozenset[str],
) -> list[str]:
    """Units under a watched policy carried by outputs paid to address (first-seen order, no repeats)."""
    found: dict[str, None] = {}
    for output in outputs:
        if output.address != address:
            continue
        for amount in output.amounts:
            if amount.is_native_currency:
                continue
            if amount.policy_id in policy_ids:
                found.setdefault(amount.unit, None)
    return list(found)


class ListingDetector:
    """Inspects transaction outputs for deposits of watched-policy assets into the scanned address."""

    def __init__(
        self,
        settings: Settings,
        blockfrost: BlockfrostClient,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the detector.

        Args:
            settings: Application settings (uses settings.monitor policy ids and epoch filter).
            blockfrost: Blockfrost client (injected).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._blockfrost = blockfrost
        self._policy_ids = frozenset(settings.monitor.policy_ids)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def detect(self, address: str, tx: TransactionRecord) -> DetectionResult:
        """Return the watched units that tx deposits into address.

        Args:
            address: Watched address being scanned; only outputs to it count.
            tx: Transaction summary from the scanner.

        Returns:
            DetectionResult; error is set (and units empty) when the UTXO fetch failed.
        """
        with bound_contextvars(
            detect_tx_hash=short_hash(tx.tx_hash),
            detect_address_masked=mask_address(address),
        ):
            try:
                utxos = await self._blockfrost.get_transaction_utxos(tx.tx_hash)
            except BlockfrostAPIError as e:
                self._logger.error(
                    "detect_utxo_fetch_failed",
                    http_status_code=e.status_code,
                    error_message=str(e),
                )
                return DetectionResult(tx_hash=tx.tx_hash, block_time=tx.block_time, error=str(e))

            mon = self._settings.monitor
            block_time = tx.block_time
            if block_time is None and mon.min_epoch is not None:
                block_time = await self._lookup_block_time(tx.tx_hash)

            epoch = epoch_for(
                block_time,
                genesis_time=mon.genesis_time,
                epoch_duration_seconds=mon.epoch_duration_seconds,
            )
            if mon.min_epoch is not None and epoch is not None and epoch < mon.min_epoch:
                self._logger.debug(
                    "detect_skipped_before_min_epoch",
                    detect_epoch=epoch,
                    detect_min_epoch=mon.min_epoch,
                )
                return DetectionResult(
                    tx_hash=tx.tx_hash,
                    block_time=block_time,
                    epoch=epoch,
                    skipped_by_epoch=True,
                )

            outputs = [
                UtxoOutput.from_response(cast(dict[str, Any], o))
                for o in utxos.get("outputs") or []
                if isinstance(o, dict)
            ]
            units = matching_units(outputs, address=address, policy_ids=self._policy_ids)
            if units:
                self._logger.info(
                    "detect_matching_assets",
                    detect_units_count=len(units),
                    detect_epoch=epoch,
                )
            return DetectionResult(tx_hash=tx.tx_hash, units=units, block_time=block_time, epoch=epoch)

    async def _lookup_block_time(self, tx_hash: str) -> int | None:
        try:
            tx = await self._blockfrost.get_transaction(tx_hash)
        except BlockfrostAPIError as e:
            self._logger.warning(
                "detect_block_time_lookup_failed",
                http_status_code=e.status_code,
                error_message=str(e),
            )
            return None
        value = tx.get("block_time")
        return int(value) if value is not None else None
