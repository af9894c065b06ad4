"""Transaction scanner: paginates an address's recent transactions with rate-limit recovery."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, cast

import structlog
from structlog.contextvars import bound_contextvars

from cardano_listing_monitor.exceptions import BlockfrostAPIError, RateLimitError
from cardano_listing_monitor.models.transaction import TransactionRecord
from cardano_listing_monitor.utils.validation import mask_address

if TYPE_CHECKING:
    from cardano_listing_monitor.clients.blockfrost import BlockfrostClient
    from cardano_listing_monitor.config import Settings


class TransactionScanner:
    """Returns an address's recent transactions, newest first, bounded per cycle.

    Pages of ``page_size`` are requested until a short page (end of history)
    or ``max_pages``. A 429 waits the cooldown and retries the same page;
    any other failure ends pagination for the address, keeping what was
    already fetched.
    """

    def __init__(
        self,
        settings: Settings,
        blockfrost: BlockfrostClient,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            settings: Application settings (uses settings.monitor paging and cooldowns).
            blockfrost: Blockfrost client (injected).
            sleep: Awaitable sleep (injected so tests do not wait).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._blockfrost = blockfrost
        self._settings = settings
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def scan(self, address: str) -> list[TransactionRecord]:
        """Fetch up to max_pages pages of transactions for address (newest first).

        Never raises for API failures; returns whatever was fetched before the failure.
        """
        mon = self._settings.monitor
        page_size = mon.page_size
        records: list[TransactionRecord] = []
        page = 1
        rate_limit_retries = 0

        with bound_contextvars(scan_address_masked=mask_address(address)):
            while page <= mon.max_pages:
                try:
                    items = await self._blockfrost.get_address_transactions(
                        address, count=page_size, page=page, order="desc"
                    )
                except RateLimitError as e:
                    rate_limit_retries += 1
                    if rate_limit_retries > mon.max_rate_limit_retries:
                        self._logger.error(
                            "scan_rate_limit_retries_exhausted",
                            scan_page=page,
                            scan_rate_limit_retries=rate_limit_retries - 1,
                            scan_transactions_kept=len(records),
                        )
                        break
                    self._logger.warning(
                        "scan_rate_limited_retrying_page",
                        scan_page=page,
                        scan_rate_limit_retry=rate_limit_retries,
                        scan_cooldown_seconds=mon.rate_limit_cooldown_seconds,
                        http_retry_after_seconds=e.retry_after,
                    )
                    await self._sleep(mon.rate_limit_cooldown_seconds)
                    continue
                except BlockfrostAPIError as e:
                    self._logger.error(
                        "scan_page_failed",
                        scan_page=page,
                        http_status_code=e.status_code,
                        error_message=str(e),
                        scan_transactions_kept=len(records),
                    )
                    break
                except Exception as e:
                    self._logger.exception(
                        "scan_page_failed_unexpected",
                        scan_page=page,
                        error_type=type(e).__name__,
                        error_message=str(e),
                        scan_transactions_kept=len(records),
                    )
                    break

                rate_limit_retries = 0
                for item in items:
                    record = TransactionRecord.from_response(cast(dict[str, Any], item))
                    if record.tx_hash:
                        records.append(record)

                if len(items) < page_size:
                    break
                page += 1
                if page <= mon.max_pages:
                    await self._sleep(mon.page_delay_seconds)

            self._logger.debug(
                "scan_complete",
                scan_pages_requested=min(page, mon.max_pages),
                scan_transactions_count=len(records),
            )
        return records
