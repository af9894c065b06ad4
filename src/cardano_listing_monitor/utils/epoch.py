"""Epoch arithmetic."""

from __future__ import annotations


def epoch_for(block_time: int | None, *, genesis_time: int, epoch_duration_seconds: int) -> int | None:
    """Return the epoch number containing block_time, or None when block_time is unknown.

    epoch = floor((block_time - genesis_time) / epoch_duration_seconds)
    """
    if not block_time:
        return None
    return (int(block_time) - genesis_time) // epoch_duration_seconds
