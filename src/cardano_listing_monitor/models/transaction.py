"""Transaction DTOs built from Blockfrost responses.

TransactionRecord comes from the address transaction list; UtxoOutput from
the per-transaction UTXO endpoint. Both are ephemeral: they live for one
detection pass.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cardano_listing_monitor.utils.validation import LOVELACE_UNIT, policy_id_of


def _opt_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """Summary of a transaction touching a watched address."""

    tx_hash: str
    block_time: int | None = None
    """Unix seconds; None when the indexer did not include it."""
    tx_index: int | None = None
    block_height: int | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> TransactionRecord:
        """Build from a raw /addresses/{address}/transactions item."""
        return cls(
            tx_hash=str(response.get("tx_hash") or "").strip(),
            block_time=_opt_int(response.get("block_time")),
            tx_index=_opt_int(response.get("tx_index")),
            block_height=_opt_int(response.get("block_height")),
        )


@dataclass(frozen=True, slots=True)
class AssetAmount:
    """Quantity of one unit in an output."""

    unit: str
    quantity: int = 0

    @property
    def is_native_currency(self) -> bool:
        return self.unit == LOVELACE_UNIT

    @property
    def policy_id(self) -> str:
        return policy_id_of(self.unit)


@dataclass(frozen=True, slots=True)
class UtxoOutput:
    """A transaction output: destination address and the assets it carries."""

    address: str
    amounts: tuple[AssetAmount, ...] = field(default_factory=tuple)

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> UtxoOutput:
        """Build from a raw /txs/{hash}/utxos output entry."""
        amounts: list[AssetAmount] = []
        for raw in response.get("amount") or []:
            if not isinstance(raw, dict) or not raw.get("unit"):
                continue
            amounts.append(
                AssetAmount(unit=str(raw["unit"]), quantity=_opt_int(raw.get("quantity")) or 0)
            )
        return cls(address=str(response.get("address") or ""), amounts=tuple(amounts))
