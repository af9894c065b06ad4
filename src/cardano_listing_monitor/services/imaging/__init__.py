"""Image resolution for asset metadata."""

from cardano_listing_monitor.services.imaging.image_resolver import (
    ImageResolver,
    build_preview_url,
    is_image_content_type,
)
from cardano_listing_monitor.services.imaging.uri import (
    StorageReference,
    extract_raw_image,
    gateway_reference,
    http_candidates,
    normalize_to_canonical_url,
    parse_storage_reference,
)

__all__ = [
    "ImageResolver",
    "StorageReference",
    "build_preview_url",
    "extract_raw_image",
    "gateway_reference",
    "http_candidates",
    "is_image_content_type",
    "normalize_to_canonical_url",
    "parse_storage_reference",
]
