"""Rounding helpers for durations and intensity percentages."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up.

    Unlike the built-in ``round`` (banker's rounding), 22.5 -> 23 and
    93.5 -> 94, so tower and intensity values never drift down on ties.
    """
    return int(math.floor(value + 0.5))
