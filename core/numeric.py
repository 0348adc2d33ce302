"""core/numeric.py — Small numeric helpers shared by the trail systems."""

from __future__ import annotations
import math


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round .5 upward, matching how food and miles were always rounded.

    Python's ``round`` is banker's rounding (2.5 -> 2); the trail rules
    want 2.5 -> 3.
    """
    return int(math.floor(value + 0.5))


def round2(value: float) -> float:
    """Round to cents."""
    return round_half_up(value * 100) / 100
