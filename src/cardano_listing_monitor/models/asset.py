"""AssetRecord: descriptive record for one asset unit (Blockfrost GET /assets/{unit})."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from cardano_listing_monitor.utils.validation import (
    asset_name_hex_of,
    decode_asset_name,
    policy_id_of,
)

LOVELACE_PER_ADA = Decimal(1_000_000)
UNKNOWN_NAME = "Unknown"
NO_PRICE = "N/A"


def _text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        value = "".join(str(v) for v in value)
    text = str(value).strip()
    return text or None


@dataclass(frozen=True, slots=True)
class AssetRecord:
    """Asset unit with its fingerprint and CIP-25 on-chain metadata."""

    unit: str
    policy_id: str
    asset_name: str | None
    """Hex-encoded asset name."""
    fingerprint: str | None = None
    onchain_metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: dict[str, Any], *, unit: str | None = None) -> AssetRecord:
        """Build from a raw /assets/{unit} response."""
        resolved_unit = str(response.get("asset") or unit or "")
        metadata = response.get("onchain_metadata")
        return cls(
            unit=resolved_unit,
            policy_id=str(response.get("policy_id") or policy_id_of(resolved_unit)),
            asset_name=response.get("asset_name") or asset_name_hex_of(resolved_unit) or None,
            fingerprint=response.get("fingerprint"),
            onchain_metadata=dict(metadata) if isinstance(metadata, dict) else {},
        )

    @property
    def display_name(self) -> str:
        """Metadata name, then metadata Asset, then decoded asset name, then "Unknown"."""
        meta = self.onchain_metadata
        return (
            _text(meta.get("name"))
            or _text(meta.get("Asset"))
            or decode_asset_name(self.asset_name)
            or UNKNOWN_NAME
        )

    @property
    def price_lovelace(self) -> int | None:
        raw = self.onchain_metadata.get("price")
        if raw is None or raw == "" or isinstance(raw, bool):
            return None
        try:
            value = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            return None
        if not value.is_finite():
            return None
        return int(value)

    @property
    def price_label(self) -> str:
        """Price in ADA with two decimals (e.g. "50.00 ADA"), or "N/A"."""
        lovelace = self.price_lovelace
        if not lovelace:
            return NO_PRICE
        ada = (Decimal(lovelace) / LOVELACE_PER_ADA).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        return f"{ada} ADA"
