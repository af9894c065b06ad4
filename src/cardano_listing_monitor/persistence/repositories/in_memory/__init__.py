"""In-memory repository implementations."""

from cardano_listing_monitor.persistence.repositories.in_memory.processed_transaction_repository import (
    InMemoryProcessedTransactionRepository,
)

__all__ = ["InMemoryProcessedTransactionRepository"]
