"""core/rng.py — Deterministic random stream shared by every trail system.

Mulberry32 with a single uint32 of state.  The sequence is bit-exact
with saves written by the browser build of the game, so a save's
``rngState`` resumes exactly where it left off.

    rng = RNG(42)
    rng.next()        # float in [0, 1)
    rng.next_int(6)   # int in [0, 6)

All gameplay randomness (weather, conditions, events, hazards, hunting)
draws from one RNG owned by the GameSession.  Nothing here touches the
wall clock; ``random_seed()`` is the only non-deterministic call and is
used once, when a new game is created.
"""

from __future__ import annotations
import math
import secrets
from typing import Callable, Sequence, TypeVar

T = TypeVar("T")

_MASK = 0xFFFFFFFF
_TWO_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply (low 32 bits, unsigned)."""
    return (a * b) & _MASK


class RNG:
    """Mulberry32 generator.  State is a plain uint32 (0 maps to 1)."""

    def __init__(self, seed: int = 1):
        self.state = (int(seed) & _MASK) or 1

    def next(self) -> float:
        self.state = (self.state + 0x6D2B79F5) & _MASK
        t = self.state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK
        return ((t ^ (t >> 14)) & _MASK) / _TWO_32

    def next_int(self, max_value: int | float) -> int:
        """Uniform int in [0, max_value)."""
        return math.floor(self.next() * math.floor(max_value))

    def pick(self, seq: Sequence[T]) -> T:
        return seq[self.next_int(len(seq))]

    def get_state(self) -> int:
        return self.state & _MASK

    def set_state(self, state: int) -> None:
        self.state = (int(state) & _MASK) or 1


def random_seed() -> int:
    """Fresh 32-bit seed for a new game (not reproducible by design)."""
    return secrets.randbits(32)


# ── Shared draws ─────────────────────────────────────────────────────

def weighted_pick(rng: RNG, items: Sequence[T],
                  weight: Callable[[T], float]) -> T | None:
    """Pick one item proportionally to ``weight(item)`` using one draw.

    Cumulative sum against ``rng.next() * total``; the first item whose
    running total reaches the draw wins.  Negative weights count as 0.
    Returns None (and draws nothing) for an empty list or zero total.
    """
    weights = [max(0.0, float(weight(it) or 0)) for it in items]
    total = sum(weights)
    if not items or total <= 0:
        return None
    r = rng.next() * total
    acc = 0.0
    for it, w in zip(items, weights):
        acc += w
        if r <= acc:
            return it
    return items[-1]


def randint_incl(rng: RNG, a: int, b: int) -> int:
    """Uniform int in [min(a, b), max(a, b)] using one draw."""
    low = int(min(a, b))
    high = int(max(a, b))
    return low + math.floor(rng.next() * (high - low + 1))
