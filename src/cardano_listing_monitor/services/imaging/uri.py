"""Image field extraction and URI normalization for CIP-25 style metadata.

Raw values seen in the wild include plain HTTPS URLs, data URLs, ``ar://``
references, IPFS references in several spellings (``ipfs://ipfs/CID``,
``ipfs://CID``, ``/ipfs/CID``, bare CIDs), strings chunked into lists, and
objects wrapping a ``url``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

IMAGE_FIELDS: tuple[str, ...] = ("image", "image_url", "thumbnail", "media")
STORAGE_PROTOCOLS: tuple[str, ...] = ("ipfs", "ipns")

_IMAGE_MEDIA_TYPE_RE = re.compile(r"image/", re.IGNORECASE)
_HTTP_RE = re.compile(r"^https?://", re.IGNORECASE)
_DATA_RE = re.compile(r"^data:", re.IGNORECASE)
_DATA_IMAGE_RE = re.compile(r"^data:image/", re.IGNORECASE)
_ARWEAVE_RE = re.compile(r"^ar://(.+)$", re.IGNORECASE)
_BARE_CID_RE = re.compile(
    r"^(Qm[1-9A-HJ-NP-Za-km-z]{44}|b[a-z2-7]{58,})(/.*)?$"
)
_GATEWAY_PATH_RE = re.compile(
    r"^https?://[^/]+/(ipfs|ipns)/([^/?#]+)(.*)$", re.IGNORECASE
)


def _storage_patterns(protocol: str) -> list[re.Pattern[str]]:
    p = re.escape(protocol)
    return [
        re.compile(rf"^{p}://{p}/([^/?#]+)(.*)$", re.IGNORECASE),
        re.compile(rf"^{p}://([^/?#]+)(.*)$", re.IGNORECASE),
        re.compile(rf"^/{p}/([^/?#]+)(.*)$", re.IGNORECASE),
        re.compile(rf"^{p}/([^/?#]+)(.*)$", re.IGNORECASE),
    ]


_STORAGE_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    proto: _storage_patterns(proto) for proto in STORAGE_PROTOCOLS
}


@dataclass(frozen=True, slots=True)
class StorageReference:
    """Content-addressed reference: protocol, content id and optional path (with leading /)."""

    protocol: str
    cid: str
    path: str = ""

    @property
    def canonical(self) -> str:
        """Canonical form: <protocol>://<cid><path>."""
        return f"{self.protocol}://{self.cid}{self.path}"

    def gateway_url(self, gateway_host: str) -> str:
        return f"{gateway_host.rstrip('/')}/{self.protocol}/{self.cid}{self.path}"

    def gateway_urls(self, gateway_hosts: list[str]) -> list[str]:
        """HTTP URLs for this reference on each gateway, in the given preference order."""
        return [self.gateway_url(host) for host in gateway_hosts]


def _as_candidates(value: Any) -> list[Any]:
    """Expand a metadata value into candidates: chunked string lists are joined, other lists flattened."""
    if value is None:
        return []
    if isinstance(value, list):
        if value and all(isinstance(v, str) for v in value):
            return ["".join(value)]
        return [v for v in value if v is not None]
    return [value]


def _first_image_file(files: Any) -> dict[str, Any] | None:
    if not isinstance(files, list):
        return None
    for entry in files:
        if not isinstance(entry, dict):
            continue
        media_type = entry.get("mediaType") or entry.get("mimeType") or ""
        if isinstance(media_type, str) and _IMAGE_MEDIA_TYPE_RE.search(media_type):
            return entry
    return None


def extract_raw_image(meta: Any) -> str | None:
    """Pick the raw image reference from on-chain metadata, or None.

    Fields are checked in order (image, image_url, thumbnail, media, then
    src/url of the first image entry in files). The first candidate that is
    a non-empty string, or an object with a string ``url``, wins. Any
    ``#fragment`` is stripped.
    """
    if not isinstance(meta, dict):
        return None

    candidates: list[Any] = []
    for name in IMAGE_FIELDS:
        candidates.extend(_as_candidates(meta.get(name)))
    image_file = _first_image_file(meta.get("files"))
    if image_file is not None:
        candidates.extend(_as_candidates(image_file.get("src")))
        candidates.extend(_as_candidates(image_file.get("url")))

    for candidate in candidates:
        raw: Any = candidate
        if isinstance(raw, dict):
            raw = raw.get("url")
        if isinstance(raw, str) and raw.strip():
            stripped = raw.strip().split("#", 1)[0]
            if stripped:
                return stripped
    return None


def parse_storage_reference(raw: str | None) -> StorageReference | None:
    """Parse an ipfs/ipns reference in any accepted spelling; None for anything else.

    ``ipfs://ipfs/Qm123/img.png``, ``ipfs://Qm123/img.png`` and
    ``/ipfs/Qm123/img.png`` all give StorageReference("ipfs", "Qm123", "/img.png").
    """
    if not raw:
        return None
    value = raw.strip()
    for protocol, patterns in _STORAGE_PATTERNS.items():
        for pattern in patterns:
            m = pattern.match(value)
            if m:
                return StorageReference(protocol=protocol, cid=m.group(1), path=m.group(2) or "")
    m = _BARE_CID_RE.match(value)
    if m:
        return StorageReference(protocol="ipfs", cid=m.group(1), path=m.group(2) or "")
    return None


def gateway_reference(url: str | None) -> StorageReference | None:
    """Storage reference embedded in an HTTP gateway URL (https://host/ipfs/CID/...), or None."""
    if not url:
        return None
    m = _GATEWAY_PATH_RE.match(url.strip())
    if not m:
        return None
    return StorageReference(protocol=m.group(1).lower(), cid=m.group(2), path=m.group(3) or "")


def is_http_url(raw: str) -> bool:
    return bool(_HTTP_RE.match(raw))


def is_data_url(raw: str) -> bool:
    return bool(_DATA_RE.match(raw))


def is_data_image_url(raw: str) -> bool:
    return bool(_DATA_IMAGE_RE.match(raw))


def arweave_url(raw: str, *, gateway: str = "https://arweave.net") -> str | None:
    """https URL for an ar://<id> reference, or None when raw is not one."""
    m = _ARWEAVE_RE.match(raw.strip())
    if not m:
        return None
    return f"{gateway.rstrip('/')}/{m.group(1)}"


def normalize_to_canonical_url(raw: str | None, *, arweave_gateway: str = "https://arweave.net") -> str | None:
    """Rewrite raw into one canonical form.

    http(s) and data URLs are returned unchanged, ar:// becomes an arweave
    https URL, storage references become <protocol>://<cid><path>. Anything
    else is returned as-is.
    """
    if not raw:
        return None
    value = raw.strip()
    if is_http_url(value) or is_data_url(value):
        return value
    ar = arweave_url(value, gateway=arweave_gateway)
    if ar:
        return ar
    ref = parse_storage_reference(value)
    if ref:
        return ref.canonical
    return value


def http_candidates(
    raw: str,
    *,
    gateway_hosts: list[str],
    arweave_gateway: str = "https://arweave.net",
) -> list[str]:
    """Ordered HTTP URLs worth probing for raw; empty when raw has no HTTP rendition.

    Storage references expand to every gateway. An HTTP URL is tried first
    as-is; when it points at a gateway path the other gateways follow it.
    """
    value = raw.strip()
    if is_http_url(value):
        urls = [value]
        ref = gateway_reference(value)
        if ref is not None:
            urls.extend(u for u in ref.gateway_urls(gateway_hosts) if u != value)
        return urls
    ar = arweave_url(value, gateway=arweave_gateway)
    if ar:
        return [ar]
    ref = parse_storage_reference(value)
    if ref is not None:
        return ref.gateway_urls(gateway_hosts)
    return []
