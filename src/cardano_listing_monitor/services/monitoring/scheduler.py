"""Fixed-interval scheduler for monitoring cycles."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from cardano_listing_monitor.config import Settings
    from cardano_listing_monitor.services.monitoring.monitoring_cycle import MonitoringCycle


class MonitoringScheduler:
    """Runs MonitoringCycle.run_once every poll interval until shutdown is requested.

    Cycles never overlap: a tick that falls while a cycle is still running
    is dropped and the next cycle starts as soon as the current one ends.
    An exception escaping a cycle is logged and the schedule continues.
    """

    def __init__(
        self,
        settings: Settings,
        cycle: MonitoringCycle,
        *,
        clock: Callable[[], float] = time.monotonic,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        self._settings = settings
        self._cycle = cycle
        self._clock = clock
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._cycles_run = 0

    @property
    def cycles_run(self) -> int:
        return self._cycles_run

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Loop until shutdown_event is set."""
        interval = self._settings.monitor.poll_seconds
        self._logger.info(
            "scheduler_started",
            poll_seconds=interval,
            run_on_start=self._settings.monitor.run_on_start,
        )
        stopping = False
        if not self._settings.monitor.run_on_start:
            stopping = await self._wait(shutdown_event, interval)

        while not stopping and not shutdown_event.is_set():
            started = self._clock()
            await self._run_cycle()
            elapsed = self._clock() - started
            if elapsed >= interval:
                self._logger.warning(
                    "scheduler_cycle_overran",
                    cycle_duration_seconds=elapsed,
                    poll_seconds=interval,
                )
            stopping = await self._wait(shutdown_event, max(0.0, interval - elapsed))
        self._logger.info("scheduler_stopped", cycles_run=self._cycles_run)

    async def _run_cycle(self) -> None:
        try:
            await self._cycle.run_once()
        except Exception as exc:
            self._logger.exception(
                "scheduler_cycle_failed",
                error_type=type(exc).__name__,
                error_message=str(exc),
            )
        finally:
            self._cycles_run += 1

    @staticmethod
    async def _wait(shutdown_event: asyncio.Event, timeout: float) -> bool:
        """Wait up to timeout seconds; True when shutdown was requested."""
        if shutdown_event.is_set():
            return True
        try:
            await asyncio.wait_for(shutdown_event.wait(), timeout=timeout)
        except TimeoutError:
            return False
        return True
