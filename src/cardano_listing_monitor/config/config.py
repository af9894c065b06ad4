# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, API__PROJECT_ID.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cardano_listing_monitor.utils.validation import is_policy_id

ImageStrategyName = Literal["gateway", "fingerprint", "preview"]

_DEFAULT_EXTRA_ADDRESS = (
    "addr1x8rjw3pawl0kelu4mj3c8x20fsczf5pl744s9mxz9v8n7efvjel5h55fgjcxgchp830r7h2l5msrlpt8262r3nvr8ekstg4qrx"
)

# CDN-friendly gateway first; chat renderers time out less often against it.
_DEFAULT_IPFS_GATEWAYS = ",".join(
    [
        "https://nftstorage.link",
        "https://ipfs.io",
        "https://cloudflare-ipfs.com",
        "https://gateway.pinata.cloud",
        "https://dweb.link",
    ]
)


def _split_csv(raw: str | None) -> list[str]:
    """Parse a comma-separated string into a list of stripped, non-empty items."""
    if not raw or not raw.strip():
        return []
    return [s.strip() for s in raw.split(",") if s.strip()]


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "cardano-listing-monitor"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/listing_monitor.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """Configuration for the Blockfrost indexer API (HTTP)."""

    model_config = SettingsConfigDict(extra="ignore")

    blockfrost_host: str = Field(
        default="https://cardano-mainnet.blockfrost.io/api/v0",
        description="Blockfrost API base URL.",
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Blockfrost project id, sent as the project_id header.",
    )
    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum attempts for requests failing with 5xx or network errors.",
    )


class MonitorSettings(BaseSettings):
    """Configuration for the listing monitor (addresses, policies, polling)."""

    model_config = SettingsConfigDict(extra="ignore")

    # Raw strings from env so pydantic-settings does not try to JSON-decode them.
    stake_keys_raw: str = Field(
        default="",
        description="Stake keys to expand into addresses, comma-separated. Env: MONITOR__STAKE_KEYS.",
        validation_alias="stake_keys",
    )
    policy_ids_raw: str = Field(
        default="",
        description="Watched policy ids, comma-separated. Env: MONITOR__POLICY_IDS.",
        validation_alias="policy_ids",
    )
    extra_addresses_raw: str = Field(
        default=_DEFAULT_EXTRA_ADDRESS,
        description="Addresses monitored in addition to stake-key expansion. Env: MONITOR__EXTRA_ADDRESSES.",
        validation_alias="extra_addresses",
    )
    poll_seconds: float = Field(
        default=180.0,
        ge=1.0,
        le=3600.0,
        description="Cycle interval. A cycle that overruns it delays the next one; cycles never overlap.",
    )
    run_on_start: bool = Field(
        default=False,
        description="Run the first cycle immediately instead of after one interval.",
    )
    page_size: int = Field(default=100, ge=1, le=100)
    max_pages: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Maximum transaction pages scanned per address per cycle.",
    )
    page_delay_seconds: float = Field(default=0.3, ge=0.0, le=10.0)
    rate_limit_cooldown_seconds: float = Field(default=10.0, ge=0.0, le=300.0)
    max_rate_limit_retries: int = Field(
        default=6,
        ge=0,
        le=100,
        description="Retries of a single rate-limited page before the address is given up for the cycle.",
    )
    asset_fetch_delay_seconds: float = Field(default=0.25, ge=0.0, le=10.0)
    min_epoch: Optional[int] = Field(
        default=None,
        ge=0,
        description="Skip transactions from earlier epochs. Disabled when unset.",
    )
    genesis_time: int = Field(default=1506203091, description="Network genesis (unix seconds).")
    epoch_duration_seconds: int = Field(default=432000, ge=1)
    marketplace_base_url: str = Field(default="https://www.jpg.store")

    @computed_field
    @property
    def stake_keys(self) -> list[str]:
        """Parse comma-separated stake_keys_raw into list of stripped strings."""
        return _split_csv(self.stake_keys_raw)

    @computed_field
    @property
    def policy_ids(self) -> list[str]:
        """Parse comma-separated policy_ids_raw into list of lowercase policy ids."""
        return [p.lower() for p in _split_csv(self.policy_ids_raw)]

    @computed_field
    @property
    def extra_addresses(self) -> list[str]:
        """Parse comma-separated extra_addresses_raw into list of stripped strings."""
        return _split_csv(self.extra_addresses_raw)


class ImageSettings(BaseSettings):
    """Image resolution: strategy order, gateways, verification probe, fallbacks."""

    model_config = SettingsConfigDict(extra="ignore")

    strategies_raw: str = Field(
        default="gateway,fingerprint",
        description="Ordered strategies (gateway, fingerprint, preview). Env: IMAGE__STRATEGIES.",
        validation_alias="strategies",
    )
    ipfs_gateways_raw: str = Field(
        default=_DEFAULT_IPFS_GATEWAYS,
        description="IPFS gateway hosts in preference order (path /ipfs/<cid> is appended). Env: IMAGE__IPFS_GATEWAYS.",
        validation_alias="ipfs_gateways",
    )
    arweave_gateway: str = "https://arweave.net"
    probe_timeout_seconds: float = Field(default=5.0, ge=0.5, le=60.0)
    placeholder_url: str = "https://via.placeholder.com/600x400?text=No+Image"
    fingerprint_url_template: Optional[str] = Field(
        default=None,
        description="Render-service URL keyed by asset fingerprint, e.g. https://{fingerprint}.cardano.nftcdn.io/files/{index}",
    )
    fingerprint_token: Optional[str] = None
    fingerprint_max_files: int = Field(default=3, ge=1, le=10)
    preview_base_url: str = "https://nftcdn.io/preview"
    preview_token: Optional[str] = None
    preview_size: int = Field(default=512, ge=64, le=2048)

    @computed_field
    @property
    def strategies(self) -> list[str]:
        """Parse comma-separated strategies_raw into a list of lowercase names."""
        return [s.lower() for s in _split_csv(self.strategies_raw)]

    @computed_field
    @property
    def ipfs_gateways(self) -> list[str]:
        """Parse comma-separated ipfs_gateways_raw into gateway roots without trailing slash."""
        return [g.rstrip("/") for g in _split_csv(self.ipfs_gateways_raw)]


class TelegramNotificationSettings(BaseSettings):
    """Telegram notifications (from env TELEGRAM__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    api_key: Optional[str] = Field(default=None, description="Telegram bot API key.")
    chat_id: Optional[str] = Field(default=None, description="Telegram chat ID.")
    messages_per_minute: int = Field(default=30, ge=1, le=120)
    max_retries: int = Field(default=5, ge=0, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class DiscordNotificationSettings(BaseSettings):
    """Discord webhook notifications (from env DISCORD__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    webhook_url: Optional[str] = Field(default=None, description="Channel webhook URL.")
    username: Optional[str] = None
    embed_color: int = Field(default=0x00CC99, ge=0, le=0xFFFFFF)
    footer_text: str = "Policy Monitor"
    timeout_seconds: float = Field(default=10.0, ge=1.0, le=60.0)


class ConsoleNotificationSettings(BaseSettings):
    """Console notification settings."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class HealthSettings(BaseSettings):
    """Liveness endpoint (GET / -> 200 alive)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=0, le=65535)


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, MONITOR__POLICY_IDS.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    monitor: MonitorSettings = Field(default_factory=MonitorSettings)
    image: ImageSettings = Field(default_factory=ImageSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    discord: DiscordNotificationSettings = Field(default_factory=DiscordNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)
    health: HealthSettings = Field(default_factory=HealthSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.:
        - from_env(api={"project_id": "mainnetXYZ"})
        - from_env(monitor={"policy_ids": "abc...,def..."})

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)

    def missing_required(self) -> list[str]:
        """Return env names of required values that are not configured."""
        missing: list[str] = []
        if not (self.api.project_id or "").strip():
            missing.append("API__PROJECT_ID")
        if not self.monitor.policy_ids:
            missing.append("MONITOR__POLICY_IDS")
        if not self.monitor.stake_keys and not self.monitor.extra_addresses:
            missing.append("MONITOR__STAKE_KEYS")
        return missing

    def invalid_policy_ids(self) -> list[str]:
        """Configured policy ids that are not 56 hex characters; such an id would never match."""
        return [p for p in self.monitor.policy_ids if not is_policy_id(p)]


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from cardano_listing_monitor.config import get_settings

        settings = get_settings()
        timeout = settings.api.timeout_seconds
        policies = settings.monitor.policy_ids
    """
    return Settings()
