# -*- coding: utf-8 -*-
"""
Entry point for the listing monitor.

Orchestrates: logging, settings, container, notifications, liveness endpoint,
watched-address resolution, startup message, scheduler, shutdown (SIGINT/SIGTERM or CancelledError).
Listings flow: scanner -> detector -> metadata fetcher -> image resolver -> notification service.

Run with: python -m cardano_listing_monitor.main
"""
from __future__ import annotations

import asyncio
import signal
from typing import Any

import structlog

from cardano_listing_monitor.DI import Container
from cardano_listing_monitor.config import get_settings
from cardano_listing_monitor.exceptions import InvalidConfigError, MissingRequiredConfigError
from cardano_listing_monitor.logging.config import configure_logging
from cardano_listing_monitor.notifications.types import NotificationMessage


def _setup_signals(shutdown_event: asyncio.Event) -> None:
    try:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.add_signal_handler(sig, shutdown_event.set)
    except NotImplementedError:
        pass  # Windows has no add_signal_handler


async def _do_shutdown(container: Container, logger: Any) -> None:
    """Stop services in reverse start order. Safe on normal shutdown or CancelledError."""
    notification_service = container.notification_service()
    notification_service.notify(
        NotificationMessage(
            event_type="system_stopped",
            title="Monitor Stopped",
            message="Listing monitor stopped",
            payload={},
        )
    )
    await notification_service.shutdown()
    await container.http_client().aclose()
    await container.health_server().stop()
    logger.info("main_shutdown_complete")


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()
    missing = settings.missing_required()
    if missing:
        logger.error(
            "main_missing_required_config",
            missing_settings=missing,
            message=f"{', '.join(missing)} not set",
        )
        raise MissingRequiredConfigError(missing)
    invalid_policies = settings.invalid_policy_ids()
    if invalid_policies:
        logger.error("main_invalid_policy_ids", invalid_policy_ids=invalid_policies)
        raise InvalidConfigError("MONITOR__POLICY_IDS", invalid_policies)

    container = Container()
    notification_service = container.notification_service()
    await notification_service.initialize()
    health_server = container.health_server()
    await health_server.start()

    shutdown_event = asyncio.Event()
    _setup_signals(shutdown_event)

    try:
        addresses = await container.address_resolver().resolve()
        cycle = container.monitoring_cycle()
        cycle.set_addresses(addresses)
        if not cycle.addresses:
            logger.warning("main_no_addresses_to_monitor")

        policies = settings.monitor.policy_ids
        logger.info(
            "main_monitoring_started",
            addresses_count=len(cycle.addresses),
            policies_count=len(policies),
            poll_seconds=settings.monitor.poll_seconds,
        )
        notification_service.notify(
            NotificationMessage(
                event_type="system_started",
                title="Monitor Started",
                message=f"Monitoring listings for {len(policies)} policies",
                payload={
                    "addresses_count": len(cycle.addresses),
                    "policies_count": len(policies),
                },
            )
        )

        await container.monitoring_scheduler().run(shutdown_event)
    except asyncio.CancelledError:
        await _do_shutdown(container, logger)
        raise
    await _do_shutdown(container, logger)


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
