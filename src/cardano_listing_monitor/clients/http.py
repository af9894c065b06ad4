# -*- coding: utf-8 -*-
"""Async HTTP client with retries, rate-limit signalling and image probes."""

from __future__ import annotations

import asyncio
import random
import uuid
import aiohttp
import structlog
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
from structlog.contextvars import bound_contextvars

from cardano_listing_monitor.config import Settings
from cardano_listing_monitor.exceptions import BlockfrostAPIError, RateLimitError


@dataclass(frozen=True, slots=True)
class ProbeResult:
    """Outcome of a metadata-only (HEAD) request."""

    url: str
    status: int | None = None
    content_type: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the request completed with a 2xx/3xx status."""
        return self.status is not None and 200 <= self.status < 400


def _retry_after_seconds(response: aiohttp.ClientResponse) -> float | None:
    header = response.headers.get("Retry-After")
    if not header:
        return None
    try:
        return float(header)
    except ValueError:
        return None


class AsyncHttpClient:
    """Async HTTP client for JSON APIs with retries on transient failures.

    HTTP 429 is not retried here: it is raised as RateLimitError so callers
    can apply their own cooldown policy. Other 4xx responses are raised
    immediately; 5xx, network errors and timeouts are retried with backoff.

    Injects Settings and optionally an aiohttp.ClientSession. If no session
    is provided, one is created and must be closed via aclose() or used
    as an async context manager.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        session: Optional[aiohttp.ClientSession] = None,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Configuration (timeout, max_retries, etc.).
            session: Optional shared aiohttp session. If None, the client
                creates and owns a session (call aclose() when done).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._session = session
        self._owns_session = session is None
        self._logger = get_logger(logger_name or self.__class__.__name__)

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self._settings.api.timeout_seconds)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def aclose(self) -> None:
        """Close the session if this client owns it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    def _backoff_delay(self, attempt: int) -> float:
        """Exponential backoff with jitter, capped at 4 seconds."""
        base = min(4.0, 0.25 * (2**attempt))
        return base + random.uniform(0.0, 0.15)

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        request_id = uuid.uuid4().hex[:12]
        max_retries = self._settings.api.max_retries
        event_prefix = f"http_{method.lower()}"
        last_error: Optional[Exception] = None

        with bound_contextvars(
            http_method=method,
            http_url=url,
            http_request_id=request_id,
            http_max_retries=max_retries,
        ):
            for attempt in range(max_retries):
                with bound_contextvars(http_attempt=attempt + 1):
                    try:
                        session = await self._get_session()
                        async with session.request(
                            method, url, params=params, json=json, headers=headers
                        ) as response:
                            if response.status == 429:
                                retry_after = _retry_after_seconds(response)
                                self._logger.warning(
                                    f"{event_prefix}_rate_limited",
                                    http_status_code=429,
                                    http_retry_after_seconds=retry_after,
                                )
                                raise RateLimitError(url=url, retry_after=retry_after)
                            if 400 <= response.status < 500:
                                body = await response.text()
                                self._logger.warning(
                                    f"{event_prefix}_client_error",
                                    http_status_code=response.status,
                                    http_response_body=body[:500],
                                )
                                raise BlockfrostAPIError(
                                    f"{method} {url} returned {response.status}",
                                    url=url,
                                    status_code=response.status,
                                )
                            response.raise_for_status()
                            if response.status == 204:
                                return None
                            try:
                                return await response.json(content_type=None)
                            except ValueError as e:
                                self._logger.warning(
                                    f"{event_prefix}_invalid_json",
                                    http_status_code=response.status,
                                    http_content_type=response.content_type,
                                )
                                raise BlockfrostAPIError(
                                    f"{method} {url} returned a non-JSON body",
                                    url=url,
                                    status_code=response.status,
                                    cause=e,
                                ) from e
                    except aiohttp.ClientResponseError as e:
                        last_error = e
                        self._logger.debug(
                            f"{event_prefix}_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                            http_status_code=getattr(e, "status", None),
                        )
                    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                        last_error = e
                        self._logger.debug(
                            f"{event_prefix}_retry",
                            error_type=type(e).__name__,
                            error_message=str(e),
                        )
                    if attempt + 1 < max_retries:
                        await asyncio.sleep(self._backoff_delay(attempt))

            status_code = (
                getattr(last_error, "status", None)
                if isinstance(last_error, aiohttp.ClientResponseError)
                else None
            )
            self._logger.error(
                f"{event_prefix}_failed",
                http_status_code=status_code,
                http_attempts=max_retries,
                error_type=type(last_error).__name__ if last_error else None,
                error_message=str(last_error) if last_error else None,
            )
            raise BlockfrostAPIError(
                f"{method} failed after {max_retries} attempts: {url}",
                url=url,
                status_code=status_code,
                cause=last_error,
            ) from last_error

    async def get(
        self,
        url: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform a GET request and return parsed JSON.

        Raises:
            RateLimitError: If the server answers 429.
            BlockfrostAPIError: On other 4xx, or when retries are exhausted.
        """
        return await self._request("GET", url, params=params, headers=headers)

    async def post(
        self,
        url: str,
        *,
        json: Optional[Any] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform a POST request with a JSON body and return parsed JSON (or None for 204)."""
        return await self._request("POST", url, json=json or {}, headers=headers)

    async def probe(self, url: str, *, timeout_seconds: float) -> ProbeResult:
        """Issue a HEAD request (no body, redirects followed) and report status and content type.

        Never raises for network or HTTP failures; those are reported via ProbeResult.error.
        """
        try:
            session = await self._get_session()
            async with session.head(
                url,
                allow_redirects=True,
                timeout=aiohttp.ClientTimeout(total=timeout_seconds),
            ) as response:
                return ProbeResult(
                    url=url,
                    status=response.status,
                    content_type=response.headers.get("Content-Type"),
                )
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            self._logger.debug(
                "http_probe_failed",
                http_url=url,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return ProbeResult(url=url, error=f"{type(e).__name__}: {e}")
