# -*- coding: utf-8 -*-
"""Repository interfaces (abstractions). Implementations live in in_memory/."""

from cardano_listing_monitor.persistence.repositories.interfaces.processed_transaction_repository import (
    IProcessedTransactionRepository,
)

__all__ = ["IProcessedTransactionRepository"]
