"""Abstract interface for the processed-transaction ledger (in-memory, DB, etc.)."""

from __future__ import annotations

from abc import ABC, abstractmethod

from cardano_listing_monitor.models.processed_transaction import ProcessedTransaction


class IProcessedTransactionRepository(ABC):
    """Interface for the set of transactions already notified or skipped."""

    @abstractmethod
    async def contains(self, tx_hash: str) -> bool:
        """Return True if tx_hash has been processed."""
        ...

    @abstractmethod
    async def add(self, entry: ProcessedTransaction) -> bool:
        """Record a processed transaction. Returns False if tx_hash was already recorded (no-op)."""
        ...

    @abstractmethod
    async def get(self, tx_hash: str) -> ProcessedTransaction | None:
        ...

    @abstractmethod
    async def count(self) -> int:
        ...
