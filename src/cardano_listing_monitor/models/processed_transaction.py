"""ProcessedTransaction: ledger entry for transaction deduplication.

Identity is tx_hash. The ledger lives in memory only, so a restart starts
from an empty set and may repeat notifications.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum


class ProcessingOutcome(StrEnum):
    """Terminal outcome of inspecting one transaction."""

    NOTIFIED = "notified"
    NO_MATCH = "no_match"
    ASSETS_UNAVAILABLE = "assets_unavailable"
    UTXO_FAILED = "utxo_failed"
    SKIPPED_EPOCH = "skipped_epoch"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ProcessedTransaction:
    """Record that a transaction has been inspected (notified or skipped)."""

    tx_hash: str
    address: str
    """Watched address whose scan produced this transaction."""
    outcome: ProcessingOutcome
    processed_at: datetime

    @classmethod
    def create(
        cls,
        tx_hash: str,
        address: str,
        outcome: ProcessingOutcome,
        *,
        processed_at: datetime | None = None,
    ) -> ProcessedTransaction:
        """Create a new ledger entry."""
        tx_hash = tx_hash.strip()
        if not tx_hash:
            raise ValueError("tx_hash must be non-empty")
        return cls(
            tx_hash=tx_hash,
            address=address.strip(),
            outcome=outcome,
            processed_at=processed_at or datetime.now(UTC),
        )
