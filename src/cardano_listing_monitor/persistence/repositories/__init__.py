# -*- coding: utf-8 -*-
"""Repositories: interfaces (abstractions) and implementations (in_memory, etc.)."""

from cardano_listing_monitor.persistence.repositories.interfaces import (
    IProcessedTransactionRepository,
)
from cardano_listing_monitor.persistence.repositories.in_memory import (
    InMemoryProcessedTransactionRepository,
)

__all__ = [
    "IProcessedTransactionRepository",
    "InMemoryProcessedTransactionRepository",
]
