# -*- coding: utf-8 -*-
"""Unit tests for the exception hierarchy."""

from __future__ import annotations

from cardano_listing_monitor.exceptions import (
    BlockfrostAPIError,
    InvalidConfigError,
    ListingMonitorError,
    MissingRequiredConfigError,
    NotificationDeliveryError,
    RateLimitError,
)


def test_missing_config_lists_every_setting() -> None:
    error = MissingRequiredConfigError(["API__PROJECT_ID", "MONITOR__POLICY_IDS"])

    assert error.missing == ["API__PROJECT_ID", "MONITOR__POLICY_IDS"]
    assert str(error) == "API__PROJECT_ID, MONITOR__POLICY_IDS not set"
    assert isinstance(error, ListingMonitorError)


def test_rate_limit_is_a_blockfrost_error_with_status_429() -> None:
    error = RateLimitError(url="https://x/assets/abc", retry_after=7.0)

    assert isinstance(error, BlockfrostAPIError)
    assert error.status_code == 429
    assert error.retry_after == 7.0
    assert "retry after 7s" in str(error)
    assert error.is_not_found is False


def test_not_found_flag() -> None:
    assert BlockfrostAPIError("gone", status_code=404).is_not_found is True
    assert BlockfrostAPIError("timeout").is_not_found is False


def test_invalid_config_names_the_setting_and_values() -> None:
    error = InvalidConfigError("MONITOR__POLICY_IDS", ["abcdef"])

    assert error.values == ["abcdef"]
    assert str(error) == "MONITOR__POLICY_IDS has invalid entries: abcdef"


def test_delivery_error_carries_channel() -> None:
    error = NotificationDeliveryError("discord", "webhook returned 400")

    assert error.channel == "discord"
    assert str(error) == "discord delivery failed: webhook returned 400"
