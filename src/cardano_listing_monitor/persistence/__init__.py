"""Persistence layer (repositories, etc.)."""

from cardano_listing_monitor.persistence.repositories import (
    IProcessedTransactionRepository,
    InMemoryProcessedTransactionRepository,
)

__all__ = [
    "IProcessedTransactionRepository",
    "InMemoryProcessedTransactionRepository",
]
