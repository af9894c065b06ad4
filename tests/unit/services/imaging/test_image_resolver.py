# -*- coding: utf-8 -*-
"""Unit tests for ImageResolver strategies and verification."""

from __future__ import annotations

from collections.abc import Callable
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock
from urllib.parse import parse_qs, urlparse

from cardano_listing_monitor.clients.http import ProbeResult
from cardano_listing_monitor.config import Settings
from cardano_listing_monitor.models import AssetRecord
from cardano_listing_monitor.services.imaging import ImageResolver, build_preview_url, is_image_content_type

PLACEHOLDER = "https://via.placeholder.com/600x400?text=No+Image"


def _asset(unit: str, *, fingerprint: str | None = "asset1fancy", **metadata: Any) -> AssetRecord:
    return AssetRecord(
        unit=unit,
        policy_id=unit[:56],
        asset_name=unit[56:],
        fingerprint=fingerprint,
        onchain_metadata=metadata,
    )


def _http(image_urls: set[str] | None = None, *, content_type: str = "image/png") -> Any:
    """HTTP fake whose probe accepts only image_urls; everything else answers text/html."""
    accepted = image_urls or set()

    def _probe(url: str, *, timeout_seconds: float) -> ProbeResult:
        if url in accepted:
            return ProbeResult(url=url, status=200, content_type=content_type)
        return ProbeResult(url=url, status=200, content_type="text/html; charset=utf-8")

    return SimpleNamespace(probe=AsyncMock(side_effect=_probe))


def _probed(http: Any) -> list[str]:
    return [c.args[0] for c in http.probe.await_args_list]


async def test_first_verified_gateway_wins(settings: Settings, unit: str) -> None:
    http = _http({"https://ipfs.io/ipfs/Qm123/img.png"})
    resolver = ImageResolver(settings, http)

    url = await resolver.resolve(_asset(unit, image="ipfs://Qm123/img.png"))

    assert url == "https://ipfs.io/ipfs/Qm123/img.png"
    assert _probed(http) == [
        "https://nftstorage.link/ipfs/Qm123/img.png",
        "https://ipfs.io/ipfs/Qm123/img.png",
    ]


async def test_non_image_everywhere_falls_back_to_placeholder(settings: Settings, unit: str) -> None:
    http = _http()
    resolver = ImageResolver(settings, http)

    url = await resolver.resolve(_asset(unit, image="ipfs://Qm123/img.png"))

    assert url == PLACEHOLDER
    assert http.probe.await_count == len(settings.image.ipfs_gateways)


async def test_no_image_fields_uses_placeholder_without_probing(settings: Settings, unit: str) -> None:
    http = _http()
    resolver = ImageResolver(settings, http)

    url = await resolver.resolve(_asset(unit, name="Fancy #1"))

    assert url == PLACEHOLDER
    http.probe.assert_not_awaited()


async def test_data_image_url_is_used_directly(settings: Settings, unit: str) -> None:
    http = _http()
    resolver = ImageResolver(settings, http)
    data_url = "data:image/svg+xml;base64,PHN2Zy8+"

    assert await resolver.resolve(_asset(unit, image=data_url)) == data_url
    http.probe.assert_not_awaited()


async def test_probe_errors_are_treated_as_failures(settings: Settings, unit: str) -> None:
    http: Any = SimpleNamespace(
        probe=AsyncMock(side_effect=lambda url, **_: ProbeResult(url=url, error="TimeoutError: "))
    )
    resolver = ImageResolver(settings, http)

    assert await resolver.resolve(_asset(unit, image="https://slow.example/a.png")) == PLACEHOLDER


async def test_strategy_exception_does_not_escape(settings: Settings, unit: str) -> None:
    http: Any = SimpleNamespace(probe=AsyncMock(side_effect=RuntimeError("boom")))
    resolver = ImageResolver(settings, http)

    assert await resolver.resolve(_asset(unit, image="ipfs://Qm123")) == PLACEHOLDER


async def test_fingerprint_strategy_probes_indexed_files(
    settings_factory: Callable[..., Settings],
    unit: str,
) -> None:
    settings = settings_factory(
        image={
            "strategies": "fingerprint",
            "fingerprint_url_template": "https://{fingerprint}.cardano.nftcdn.io/files/{index}",
            "fingerprint_token": "tok",
        }
    )
    http = _http({"https://asset1fancy.cardano.nftcdn.io/files/1?tk=tok"})
    resolver = ImageResolver(settings, http)

    url = await resolver.resolve(_asset(unit))

    assert url == "https://asset1fancy.cardano.nftcdn.io/files/1?tk=tok"
    assert _probed(http) == [
        "https://asset1fancy.cardano.nftcdn.io/files/0?tk=tok",
        "https://asset1fancy.cardano.nftcdn.io/files/1?tk=tok",
    ]


async def test_fingerprint_strategy_needs_fingerprint(
    settings_factory: Callable[..., Settings],
    unit: str,
) -> None:
    settings = settings_factory(
        image={
            "strategies": "fingerprint",
            "fingerprint_url_template": "https://{fingerprint}.cardano.nftcdn.io/files/{index}",
        }
    )
    http = _http()

    url = await ImageResolver(settings, http).resolve(_asset(unit, fingerprint=None))

    assert url == PLACEHOLDER
    http.probe.assert_not_awaited()


async def test_preview_strategy_embeds_canonical_url(
    settings_factory: Callable[..., Settings],
    unit: str,
) -> None:
    settings = settings_factory(image={"strategies": "preview", "preview_token": "tok"})
    http = _http()

    url = await ImageResolver(settings, http).resolve(_asset(unit, image="ipfs://ipfs/Qm123/img.png"))

    parsed = urlparse(url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == "https://nftcdn.io/preview"
    assert parse_qs(parsed.query) == {
        "size": ["512"],
        "tk": ["tok"],
        "url": ["ipfs://Qm123/img.png"],
    }
    http.probe.assert_not_awaited()


async def test_preview_strategy_skipped_without_token(
    settings_factory: Callable[..., Settings],
    unit: str,
) -> None:
    settings = settings_factory(image={"strategies": "preview"})
    url = await ImageResolver(settings, _http()).resolve(_asset(unit, image="ipfs://Qm123"))
    assert url == PLACEHOLDER


async def test_unknown_strategies_are_ignored(
    settings_factory: Callable[..., Settings],
    unit: str,
) -> None:
    settings = settings_factory(image={"strategies": "magic,gateway"})
    http = _http({"https://example.com/a.png"})

    url = await ImageResolver(settings, http).resolve(_asset(unit, image="https://example.com/a.png"))

    assert url == "https://example.com/a.png"


def test_build_preview_url() -> None:
    url = build_preview_url("https://example.com/a b.png", base_url="https://nftcdn.io/preview", token="t", size=256)
    assert url == "https://nftcdn.io/preview?size=256&tk=t&url=https%3A%2F%2Fexample.com%2Fa+b.png"


def test_is_image_content_type() -> None:
    assert is_image_content_type("image/png")
    assert is_image_content_type("Image/JPEG; charset=binary")
    assert not is_image_content_type("text/html")
    assert not is_image_content_type(None)
