# -*- coding: utf-8 -*-
"""In-memory processed-transaction ledger (keyed by tx_hash, never evicted)."""

from __future__ import annotations

from cardano_listing_monitor.models.processed_transaction import ProcessedTransaction
from cardano_listing_monitor.persistence.repositories.interfaces.processed_transaction_repository import (
    IProcessedTransactionRepository,
)


class InMemoryProcessedTransactionRepository(IProcessedTransactionRepository):
    """In-memory implementation of IProcessedTransactionRepository.

    Grows for the lifetime of the process; entries are never removed.
    """

    def __init__(self) -> None:
        """Initialize an empty in-memory store."""
        self._store: dict[str, ProcessedTransaction] = {}

    async def contains(self, tx_hash: str) -> bool:
        return tx_hash.strip() in self._store

    async def add(self, entry: ProcessedTransaction) -> bool:
        """Record the first outcome for a tx_hash; later adds for the same hash are ignored."""
        if entry.tx_hash in self._store:
            return False
        self._store[entry.tx_hash] = entry
        return True

    async def get(self, tx_hash: str) -> ProcessedTransaction | None:
        return self._store.get(tx_hash.strip())

    async def count(self) -> int:
        return len(self._store)
