# -*- coding: utf-8 -*-
"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from cardano_listing_monitor.config import Settings
from cardano_listing_monitor.persistence.repositories.in_memory import (
    InMemoryProcessedTransactionRepository,
)

POLICY_ID = "d5e6bf0500378d4f0da4e8dde6becec7621cd8cbf5cbb9b87013d4cc"
OTHER_POLICY_ID = "f0ff48bbb7bbe9d59a40f1ce90e9e9d0ff5002ec48f232b49ca0fb9a"
WATCHED_ADDRESS = "addr1qxwatched9q7kw3m5d2v0n4pufz8l6sx2hyvrtu0a3mjd4sc5u7yk"


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = {k: dict(v) if isinstance(v, dict) else v for k, v in base.items()}
    for section, values in overrides.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


@pytest.fixture
def policy_id() -> str:
    """Watched policy id used by tests."""
    return POLICY_ID


@pytest.fixture
def watched_address() -> str:
    """Default watched address used by tests."""
    return WATCHED_ADDRESS


@pytest.fixture
def unit(policy_id: str) -> str:
    """Asset unit "Fancy #1" under the watched policy."""
    return policy_id + "Fancy #1".encode().hex()


@pytest.fixture
def settings_factory(policy_id: str, watched_address: str) -> Callable[..., Settings]:
    """Build Settings with test defaults; sections can be overridden with dicts."""

    def _build(**overrides: Any) -> Settings:
        base: dict[str, Any] = {
            "api": {"project_id": "mainnettestproject"},
            "monitor": {
                "policy_ids": policy_id,
                "stake_keys": "",
                "extra_addresses": watched_address,
            },
            "console": {"enabled": False},
            "telegram": {"enabled": False},
            "discord": {"enabled": False},
            "health": {"enabled": False},
        }
        return Settings.from_env(**_merge(base, overrides))

    return _build


@pytest.fixture
def settings(settings_factory: Callable[..., Settings]) -> Settings:
    return settings_factory()


@pytest.fixture
def processed_repo() -> InMemoryProcessedTransactionRepository:
    """Fresh in-memory ledger per test."""
    return InMemoryProcessedTransactionRepository()


@pytest.fixture
def other_policy_id() -> str:
    """Policy id that is not watched."""
    return OTHER_POLICY_ID
