"""Image resolver: on-chain metadata -> verified renderable image URL, or a placeholder.

Strategies run in configured order until one yields a URL:

- ``gateway``: extract the raw image field, expand it to HTTP candidates
  (storage references on every gateway) and accept the first candidate
  whose HEAD probe answers 2xx/3xx with an ``image/*`` content type.
- ``fingerprint``: probe indexed files of an external render service keyed
  by the asset fingerprint, verified the same way.
- ``preview``: build a preview-service URL embedding the canonical raw URL.
  The service answers with an image or its own placeholder, so no probe.

resolve() never raises.
"""

from __future__ import annotations

import re
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any
from urllib.parse import urlencode

import structlog
from structlog.contextvars import bound_contextvars

from cardano_listing_monitor.models.asset import AssetRecord
from cardano_listing_monitor.services.imaging.uri import (
    extract_raw_image,
    http_candidates,
    is_data_image_url,
    normalize_to_canonical_url,
)

if TYPE_CHECKING:
    from cardano_listing_monitor.clients.http import AsyncHttpClient, ProbeResult
    from cardano_listing_monitor.config import Settings

KNOWN_STRATEGIES = ("gateway", "fingerprint", "preview")

_IMAGE_CONTENT_TYPE_RE = re.compile(r"^\s*image/", re.IGNORECASE)


def is_image_content_type(content_type: str | None) -> bool:
    return bool(content_type) and bool(_IMAGE_CONTENT_TYPE_RE.match(content_type or ""))


class ImageResolver:
    """Turns heterogeneous metadata image fields into one URL a chat client can render."""

    def __init__(
        self,
        settings: Settings,
        http_client: AsyncHttpClient,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: str | None = None,
    ) -> None:
        """Initialize the resolver.

        Args:
            settings: Application settings (uses settings.image).
            http_client: HTTP client used for HEAD probes (injected).
            get_logger: Logger factory (injected).
            logger_name: Optional logger name (defaults to class name).
        """
        self._settings = settings
        self._http = http_client
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._strategies: dict[str, Callable[[AssetRecord], Awaitable[str | None]]] = {
            "gateway": self._resolve_via_gateways,
            "fingerprint": self._resolve_via_fingerprint,
            "preview": self._resolve_via_preview,
        }
        unknown = [s for s in settings.image.strategies if s not in KNOWN_STRATEGIES]
        if unknown:
            self._logger.warning("image_unknown_strategies_ignored", image_strategies=unknown)
        self._order = [s for s in settings.image.strategies if s in KNOWN_STRATEGIES]

    @property
    def placeholder_url(self) -> str:
        return self._settings.image.placeholder_url

    async def resolve(self, asset: AssetRecord) -> str:
        """Return a verified image URL for asset, or the placeholder URL."""
        with bound_contextvars(image_asset_unit=asset.unit):
            for name in self._order:
                try:
                    url = await self._strategies[name](asset)
                except Exception as exc:
                    self._logger.warning(
                        "image_strategy_error",
                        image_strategy=name,
                        error_type=type(exc).__name__,
                        error_message=str(exc),
                    )
                    continue
                if url:
                    self._logger.debug("image_resolved", image_strategy=name, image_url=url)
                    return url
            self._logger.info("image_placeholder_used", image_strategies_tried=self._order)
            return self.placeholder_url

    async def verify(self, url: str) -> bool:
        """HEAD-probe url; True for a 2xx/3xx answer declaring an image content type."""
        result: ProbeResult = await self._http.probe(
            url, timeout_seconds=self._settings.image.probe_timeout_seconds
        )
        accepted = result.ok and is_image_content_type(result.content_type)
        if not accepted:
            self._logger.debug(
                "image_probe_rejected",
                image_url=url,
                http_status_code=result.status,
                http_content_type=result.content_type,
                error_message=result.error,
            )
        return accepted

    async def _first_verified(self, urls: list[str]) -> str | None:
        for url in urls:
            if await self.verify(url):
                return url
        return None

    async def _resolve_via_gateways(self, asset: AssetRecord) -> str | None:
        raw = extract_raw_image(asset.onchain_metadata)
        if raw is None:
            self._logger.debug("image_no_raw_field")
            return None
        if is_data_image_url(raw):
            return raw
        cfg = self._settings.image
        candidates = http_candidates(
            raw,
            gateway_hosts=cfg.ipfs_gateways,
            arweave_gateway=cfg.arweave_gateway,
        )
        if not candidates:
            self._logger.debug("image_unsupported_reference", image_raw=raw[:120])
            return None
        return await self._first_verified(candidates)

    async def _resolve_via_fingerprint(self, asset: AssetRecord) -> str | None:
        cfg = self._settings.image
        if not cfg.fingerprint_url_template or not asset.fingerprint:
            return None
        urls: list[str] = []
        for index in range(cfg.fingerprint_max_files):
            url = cfg.fingerprint_url_template.format(fingerprint=asset.fingerprint, index=index)
            if cfg.fingerprint_token:
                sep = "&" if "?" in url else "?"
                url = f"{url}{sep}{urlencode({'tk': cfg.fingerprint_token})}"
            urls.append(url)
        return await self._first_verified(urls)

    async def _resolve_via_preview(self, asset: AssetRecord) -> str | None:
        cfg = self._settings.image
        if not cfg.preview_token:
            return None
        canonical = normalize_to_canonical_url(
            extract_raw_image(asset.onchain_metadata),
            arweave_gateway=cfg.arweave_gateway,
        )
        if not canonical:
            return None
        return build_preview_url(
            canonical,
            base_url=cfg.preview_base_url,
            token=cfg.preview_token,
            size=cfg.preview_size,
        )


def build_preview_url(canonical_url: str, *, base_url: str, token: str, size: int) -> str:
    """Preview-service URL rendering canonical_url at size (e.g. https://nftcdn.io/preview?size=512&tk=...&url=...)."""
    params = urlencode({"size": str(size), "tk": token, "url": canonical_url})
    return f"{base_url}?{params}"
