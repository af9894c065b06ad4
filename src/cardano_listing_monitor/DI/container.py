# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from cardano_listing_monitor.clients.blockfrost import BlockfrostClient
from cardano_listing_monitor.clients.http import AsyncHttpClient
from cardano_listing_monitor.config import Settings, get_settings
from cardano_listing_monitor.health import HealthServer
from cardano_listing_monitor.notifications.notification_manager import NotificationService
from cardano_listing_monitor.notifications.strategies.base import BaseNotificationStrategy
from cardano_listing_monitor.notifications.strategies.console import ConsoleNotifier
from cardano_listing_monitor.notifications.strategies.discord import DiscordWebhookNotifier
from cardano_listing_monitor.notifications.strategies.telegram import TelegramNotifier
from cardano_listing_monitor.notifications.stylers.notification_styler import ListingNotificationStyler
from cardano_listing_monitor.persistence.repositories.in_memory import (
    InMemoryProcessedTransactionRepository,
)
from cardano_listing_monitor.services.addresses import WatchedAddressResolver
from cardano_listing_monitor.services.detection import ListingDetector
from cardano_listing_monitor.services.imaging import ImageResolver
from cardano_listing_monitor.services.metadata import AssetMetadataFetcher
from cardano_listing_monitor.services.monitoring import MonitoringCycle, MonitoringScheduler
from cardano_listing_monitor.services.scanner import TransactionScanner


def _build_notification_notifiers(
    settings: Settings,
    styler: ListingNotificationStyler,
) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings, styler=styler))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings, styler=styler))
    if settings.discord.enabled:
        notifiers.append(DiscordWebhookNotifier(settings=settings, styler=styler))
    return notifiers


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, HTTP/Blockfrost clients, pipeline services, notifications."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    blockfrost_client = providers.Singleton(
        BlockfrostClient,
        http_client=http_client,
        settings=config,
    )

    notification_styler = providers.Singleton(ListingNotificationStyler)

    notification_service = providers.Singleton(
        NotificationService,
        notifiers=providers.Callable(_build_notification_notifiers, config, notification_styler),
    )

    processed_transaction_repository = providers.Singleton(InMemoryProcessedTransactionRepository)

    address_resolver = providers.Singleton(
        WatchedAddressResolver,
        settings=config,
        blockfrost=blockfrost_client,
    )

    transaction_scanner = providers.Singleton(
        TransactionScanner,
        settings=config,
        blockfrost=blockfrost_client,
    )

    listing_detector = providers.Singleton(
        ListingDetector,
        settings=config,
        blockfrost=blockfrost_client,
    )

    asset_metadata_fetcher = providers.Singleton(
        AssetMetadataFetcher,
        settings=config,
        blockfrost=blockfrost_client,
    )

    image_resolver = providers.Singleton(
        ImageResolver,
        settings=config,
        http_client=http_client,
    )

    monitoring_cycle = providers.Singleton(
        MonitoringCycle,
        settings=config,
        scanner=transaction_scanner,
        detector=listing_detector,
        metadata_fetcher=asset_metadata_fetcher,
        image_resolver=image_resolver,
        processed_repository=processed_transaction_repository,
        notifier=notification_service,
    )

    monitoring_scheduler = providers.Singleton(
        MonitoringScheduler,
        settings=config,
        cycle=monitoring_cycle,
    )

    health_server = providers.Singleton(
        HealthServer,
        settings=config,
    )
