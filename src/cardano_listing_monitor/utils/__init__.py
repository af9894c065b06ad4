# -*- coding: utf-8 -*-
"""Utility modules."""

from cardano_listing_monitor.utils.epoch import epoch_for
from cardano_listing_monitor.utils.validation import (
    LOVELACE_UNIT,
    POLICY_ID_LENGTH,
    asset_name_hex_of,
    decode_asset_name,
    is_policy_id,
    mask_address,
    policy_id_of,
    short_hash,
)

__all__ = [
    "LOVELACE_UNIT",
    "POLICY_ID_LENGTH",
    "asset_name_hex_of",
    "decode_asset_name",
    "epoch_for",
    "is_policy_id",
    "mask_address",
    "policy_id_of",
    "short_hash",
]
