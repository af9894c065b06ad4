"""Transaction scanning."""

from cardano_listing_monitor.services.scanner.transaction_scanner import TransactionScanner

__all__ = ["TransactionScanner"]
