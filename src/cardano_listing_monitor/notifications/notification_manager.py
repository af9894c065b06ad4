"""Notification service: one queue, one worker, fan-out to every active channel."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog

from cardano_listing_monitor.notifications.strategies import BaseNotificationStrategy
from cardano_listing_monitor.notifications.types import NotificationMessage


@dataclass
class ChannelStats:
    delivered: int = 0
    failed: int = 0


@dataclass
class NotificationService:
    """Publishes listings and system messages to the configured channels.

    notify() only enqueues, so the monitoring cycle never waits on Telegram or
    Discord. A single worker delivers messages in enqueue order. A channel
    that fails to initialize is left out; a channel that fails to deliver one
    message is logged and still gets the next one.
    """

    notifiers: list[BaseNotificationStrategy]
    queue_size: int = 1000
    get_logger: Callable[[str], Any] = field(default=structlog.get_logger)
    _active: list[BaseNotificationStrategy] = field(init=False, default_factory=list)
    _stats: dict[str, ChannelStats] = field(init=False, default_factory=dict)
    _queue: asyncio.Queue[NotificationMessage] | None = field(init=False, default=None)
    _worker: asyncio.Task[None] | None = field(init=False, default=None)
    _logger: Any = field(init=False)

    def __post_init__(self) -> None:
        self._logger = self.get_logger("NotificationService")

    @property
    def active_channels(self) -> list[str]:
        return [n.channel_name for n in self._active]

    @property
    def stats(self) -> dict[str, ChannelStats]:
        return dict(self._stats)

    async def initialize(self) -> None:
        for notifier in self.notifiers:
            name = notifier.channel_name
            try:
                await notifier.initialize()
            except Exception as exc:
                self._logger.error(
                    "notification_channel_init_failed",
                    notification_channel=name,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
                continue
            self._active.append(notifier)
            self._stats[name] = ChannelStats()

        if not self.notifiers:
            self._logger.info("notification_init_no_notifiers")
            return
        self._queue = asyncio.Queue[NotificationMessage](maxsize=self.queue_size)
        self._worker = asyncio.create_task(self._drain())
        self._logger.info(
            "notification_init_complete",
            notification_channels=self.active_channels,
            notification_queue_size=self.queue_size,
        )

    async def shutdown(self) -> None:
        """Deliver what is still queued, then stop the worker and the channels."""
        queue, self._queue = self._queue, None
        if queue is not None:
            queue.shutdown()
            await queue.join()
        if self._worker is not None:
            await self._worker
            self._worker = None
        for notifier in self._active:
            await notifier.shutdown()
        self._logger.info(
            "notification_shutdown_complete",
            notification_stats={k: vars(v) for k, v in self._stats.items()},
        )

    def notify(self, message: NotificationMessage) -> None:
        """Enqueue without waiting. A no-op when no channel is configured."""
        if self._queue is None:
            if not self.notifiers:
                return
            raise RuntimeError("NotificationService not initialized")
        try:
            self._queue.put_nowait(message)
        except asyncio.QueueFull:
            self._logger.warning(
                "notification_queue_full_dropped",
                notification_event_type=message.event_type,
            )

    async def _drain(self) -> None:
        queue = self._queue
        if queue is None:
            return
        while True:
            try:
                message = await queue.get()
            except asyncio.QueueShutDown:
                return
            try:
                await self.dispatch(message)
            finally:
                queue.task_done()

    async def dispatch(self, message: NotificationMessage) -> None:
        """Send one message to every active channel, isolating channel failures."""
        for notifier in self._active:
            name = notifier.channel_name
            stats = self._stats.setdefault(name, ChannelStats())
            try:
                await notifier.send_notification(message)
            except Exception as exc:
                stats.failed += 1
                self._logger.error(
                    "notification_publish_failed",
                    notification_event_type=message.event_type,
                    notification_channel=name,
                    error_type=type(exc).__name__,
                    error_message=str(exc),
                )
            else:
                stats.delivered += 1
