"""Errors raised by the Blockfrost client and the monitor's startup checks."""

from __future__ import annotations

from collections.abc import Sequence


class ListingMonitorError(Exception):
    """Root of every error the monitor raises on purpose."""


class MissingRequiredConfigError(ListingMonitorError):
    """Startup aborted: one or more required settings are empty."""

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"{', '.join(self.missing)} not set")


class BlockfrostAPIError(ListingMonitorError):
    """A Blockfrost request failed.

    status_code is None for network errors and timeouts. Components turn this
    into a local degradation (stop paging, skip the tx, drop the asset).
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class RateLimitError(BlockfrostAPIError):
    """HTTP 429 from Blockfrost; retry_after comes from the Retry-After header when sent."""

    def __init__(
        self,
        message: str | None = None,
        *,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        if message is None:
            message = "Blockfrost rate limit hit (429)"
            if retry_after is not None:
                message += f", retry after {retry_after:g}s"
        super().__init__(message, url=url, status_code=429)
        self.retry_after = retry_after


class NotificationDeliveryError(ListingMonitorError):
    """A channel rejected or dropped a message after its own retries."""

    def __init__(self, channel: str, reason: str) -> None:
        self.channel = channel
        self.reason = reason
        super().__init__(f"{channel} delivery failed: {reason}")


class InvalidConfigError(ListingMonitorError):
    """Startup aborted: a setting is present but malformed."""

    def __init__(self, setting: str, values: Sequence[str]) -> None:
        self.setting = setting
        self.values = list(values)
        super().__init__(f"{setting} has invalid entries: {', '.join(self.values)}")
