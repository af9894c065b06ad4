# -*- coding: utf-8 -*-
"""Unit tests for image field extraction and URI normalization."""

from __future__ import annotations

import pytest

from cardano_listing_monitor.services.imaging import (
    StorageReference,
    extract_raw_image,
    gateway_reference,
    http_candidates,
    normalize_to_canonical_url,
    parse_storage_reference,
)

CID = "QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG"
GATEWAYS = ["https://nftstorage.link", "https://ipfs.io"]


@pytest.mark.parametrize(
    "raw",
    [
        "ipfs://ipfs/Qm123/img.png",
        "ipfs://Qm123/img.png",
        "/ipfs/Qm123/img.png",
        "ipfs/Qm123/img.png",
    ],
)
def test_ipfs_spellings_share_one_canonical_form(raw: str) -> None:
    ref = parse_storage_reference(raw)
    assert ref == StorageReference("ipfs", "Qm123", "/img.png")
    assert normalize_to_canonical_url(raw) == "ipfs://Qm123/img.png"


def test_bare_cid_is_ipfs() -> None:
    assert parse_storage_reference(CID) == StorageReference("ipfs", CID, "")
    assert parse_storage_reference(f"{CID}/1.png") == StorageReference("ipfs", CID, "/1.png")


def test_ipns_reference() -> None:
    ref = parse_storage_reference("ipns://k51qzi5uqu5dlvj2/logo.svg")
    assert ref == StorageReference("ipns", "k51qzi5uqu5dlvj2", "/logo.svg")
    assert ref.gateway_url("https://ipfs.io/") == "https://ipfs.io/ipns/k51qzi5uqu5dlvj2/logo.svg"


def test_unparseable_reference() -> None:
    assert parse_storage_reference("hello world") is None
    assert parse_storage_reference("") is None


def test_normalize_passes_http_and_data_through() -> None:
    assert normalize_to_canonical_url("https://example.com/a.png") == "https://example.com/a.png"
    assert normalize_to_canonical_url("data:image/png;base64,AAAA") == "data:image/png;base64,AAAA"
    assert normalize_to_canonical_url("ar://abc123") == "https://arweave.net/abc123"
    assert normalize_to_canonical_url(None) is None


def test_extract_prefers_fields_in_order() -> None:
    meta = {"thumbnail": "ipfs://thumb", "image": "ipfs://main", "media": "ipfs://media"}
    assert extract_raw_image(meta) == "ipfs://main"
    assert extract_raw_image({"image_url": "https://x/y.png", "thumbnail": "ipfs://t"}) == "https://x/y.png"


def test_extract_joins_chunked_strings() -> None:
    meta = {"image": ["ipfs://QmYwAPJzv5CZsnA625s3Xf2n", "emtYgPpHdWEz79ojWnPbdG"]}
    assert extract_raw_image(meta) == f"ipfs://{CID}"


def test_extract_reads_url_objects_and_strips_fragment() -> None:
    assert extract_raw_image({"image": {"url": "https://x/y.png#preview"}}) == "https://x/y.png"


def test_extract_falls_back_to_first_image_file() -> None:
    meta = {
        "name": "No image field",
        "files": [
            {"mediaType": "text/html", "src": "ipfs://page"},
            {"mediaType": "image/png", "src": "ipfs://QmFile/1.png"},
        ],
    }
    assert extract_raw_image(meta) == "ipfs://QmFile/1.png"


def test_extract_without_candidates() -> None:
    assert extract_raw_image({}) is None
    assert extract_raw_image({"image": "   "}) is None
    assert extract_raw_image(None) is None


def test_http_candidates_expand_storage_reference_to_every_gateway() -> None:
    assert http_candidates("ipfs://Qm123/img.png", gateway_hosts=GATEWAYS) == [
        "https://nftstorage.link/ipfs/Qm123/img.png",
        "https://ipfs.io/ipfs/Qm123/img.png",
    ]


def test_http_candidates_for_gateway_url_try_original_first() -> None:
    url = "https://ipfs.io/ipfs/Qm123/img.png"
    assert gateway_reference(url) == StorageReference("ipfs", "Qm123", "/img.png")
    assert http_candidates(url, gateway_hosts=GATEWAYS) == [
        url,
        "https://nftstorage.link/ipfs/Qm123/img.png",
    ]


def test_http_candidates_for_plain_url_and_arweave() -> None:
    assert http_candidates("https://example.com/a.png", gateway_hosts=GATEWAYS) == ["https://example.com/a.png"]
    assert http_candidates("ar://abc", gateway_hosts=GATEWAYS) == ["https://arweave.net/abc"]
    assert http_candidates("not a reference", gateway_hosts=GATEWAYS) == []
