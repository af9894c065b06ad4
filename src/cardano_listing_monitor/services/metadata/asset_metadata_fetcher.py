"""Asset metadata fetcher: unit -> AssetRecord, one throttled call per unit."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, cast

import structlog

from cardano_listing_monitor.exceptions import BlockfrostAPIError
from cardano_listing_monitor.models.asset import AssetRecord

if TYPE_CHECKING:
    from cardano_listing_monitor.clients.blockfrost import BlockfrostClient
    from cardano_listing_monitor.config import Settings


class AssetMetadataFetcher:
    """Fetches asset records; a failed unit yields None and is dropped by fetch_many."""

    def __init__(
        self,
        settings: Settings,
        blockfrost: BlockfrostClient,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._settings = settings
        self._blockfrost = blockfrost
        self._sleep = sleep
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def fetch(self, unit: str) -> AssetRecord | None:
        """Fetch one asset after the configured throttle delay. None on any API failure."""
        await self._sleep(self._settings.monitor.asset_fetch_delay_seconds)
        try:
            data = await self._blockfrost.get_asset(unit)
        except BlockfrostAPIError as e:
            log = self._logger.warning if e.is_not_found else self._logger.error
            log(
                "asset_fetch_failed",
                asset_unit=unit,
                http_status_code=e.status_code,
                error_message=str(e),
            )
            return None
        if not data:
            self._logger.warning("asset_fetch_empty", asset_unit=unit)
            return None
        record = AssetRecord.from_response(cast(dict[str, Any], data), unit=unit)
        self._logger.debug(
            "asset_fetched",
            asset_unit=unit,
            asset_fingerprint=record.fingerprint,
            asset_has_metadata=bool(record.onchain_metadata),
        )
        return record

    async def fetch_many(self, units: list[str]) -> list[AssetRecord]:
        """Fetch all units concurrently; failed units are filtered out, order is preserved."""
        results = await asyncio.gather(*(self.fetch(unit) for unit in units))
        return [r for r in results if r is not None]
