"""Validation helpers for addresses, policy ids and asset units."""

from __future__ import annotations

import re
from typing import Any

POLICY_ID_LENGTH = 56
LOVELACE_UNIT = "lovelace"

_HEX_RE = re.compile(r"^[0-9a-fA-F]*$")


def is_policy_id(x: Any) -> bool:
    """Return True if x is a 28-byte policy id (56 hex chars)."""
    if not isinstance(x, str):
        return False
    s = x.strip()
    return len(s) == POLICY_ID_LENGTH and bool(_HEX_RE.match(s))


def policy_id_of(unit: str) -> str:
    """Return the policy id prefix of an asset unit (lowercased)."""
    return unit[:POLICY_ID_LENGTH].lower()


def asset_name_hex_of(unit: str) -> str:
    """Return the hex asset-name suffix of an asset unit (may be empty)."""
    return unit[POLICY_ID_LENGTH:]


def decode_asset_name(asset_name_hex: str | None) -> str | None:
    """Decode a hex asset name to text. None if empty or not valid hex."""
    if not asset_name_hex:
        return None
    try:
        raw = bytes.fromhex(asset_name_hex)
    except ValueError:
        return None
    text = raw.decode("utf-8", errors="replace").strip("\x00").strip()
    return text or None


def mask_address(addr: str | None) -> str:
    """Return a masked address for logging (e.g. addr1q...x7k2)."""
    if not addr or len(addr) < 12:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"


def short_hash(tx_hash: str | None) -> str:
    """Return a shortened transaction hash for logging."""
    if not tx_hash:
        return "***"
    return tx_hash[:12]
