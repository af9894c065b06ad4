"""Watched-address resolution: stake keys -> payment addresses, plus configured extras."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

from cardano_listing_monitor.exceptions import BlockfrostAPIError
from cardano_listing_monitor.utils.validation import mask_address

if TYPE_CHECKING:
    from cardano_listing_monitor.clients.blockfrost import BlockfrostClient
    from cardano_listing_monitor.config import Settings


class WatchedAddressResolver:
    """Builds the deduplicated, ordered list of addresses to monitor. Runs once at startup."""

    PAGE_SIZE = 100
    MAX_PAGES = 50

    def __init__(
        self,
        settings: Settings,
        blockfrost: BlockfrostClient,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._settings = settings
        self._blockfrost = blockfrost
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def resolve(self) -> list[str]:
        """Expand every stake key, append extra addresses, drop duplicates (first occurrence wins).

        A stake key that cannot be resolved is logged and skipped.
        """
        mon = self._settings.monitor
        addresses: list[str] = []
        for stake_key in mon.stake_keys:
            try:
                resolved = await self._addresses_for_stake_key(stake_key)
            except BlockfrostAPIError as e:
                self._logger.error(
                    "address_stake_key_failed",
                    stake_key_masked=mask_address(stake_key),
                    http_status_code=e.status_code,
                    error_message=str(e),
                )
                continue
            self._logger.info(
                "address_stake_key_resolved",
                stake_key_masked=mask_address(stake_key),
                addresses_count=len(resolved),
            )
            addresses.extend(resolved)

        addresses.extend(mon.extra_addresses)
        unique = list(dict.fromkeys(a for a in addresses if a))
        self._logger.info("address_monitoring", addresses_count=len(unique))
        return unique

    async def _addresses_for_stake_key(self, stake_key: str) -> list[str]:
        found: list[str] = []
        for page in range(1, self.MAX_PAGES + 1):
            items = await self._blockfrost.get_account_addresses(
                stake_key, count=self.PAGE_SIZE, page=page
            )
            found.extend(str(x["address"]) for x in items if x.get("address"))
            if len(items) < self.PAGE_SIZE:
                break
        return found
