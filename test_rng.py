"""test_rng.py — The shared deterministic random stream.

Run:  pytest test_rng.py
"""
from __future__ import annotations

from core.numeric import clamp, round2, round_half_up
from core.rng import RNG, randint_incl, random_seed, weighted_pick


class FixedRNG:
    """Returns the same draw forever and counts calls."""

    def __init__(self, value: float):
        self.value = value
        self.calls = 0

    def next(self) -> float:
        self.calls += 1
        return self.value


# ════════════════════════════════════════════════════════════════════════
#  Mulberry32 stream
# ════════════════════════════════════════════════════════════════════════

def test_same_seed_same_sequence():
    a, b = RNG(42), RNG(42)
    assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]


def test_different_seeds_diverge():
    a, b = RNG(1), RNG(2)
    assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]


def test_draws_are_unit_interval():
    rng = RNG(7)
    for _ in range(2000):
        x = rng.next()
        assert 0.0 <= x < 1.0


def test_zero_seed_maps_to_one():
    assert RNG(0).get_state() == 1
    rng = RNG(5)
    rng.set_state(0)
    assert rng.get_state() == 1


def test_state_restores_stream():
    rng = RNG(99)
    for _ in range(10):
        rng.next()
    saved = rng.get_state()
    expected = [rng.next() for _ in range(20)]

    other = RNG(1)
    other.set_state(saved)
    assert [other.next() for _ in range(20)] == expected


def test_state_is_uint32():
    rng = RNG(2 ** 40 + 3)
    for _ in range(100):
        rng.next()
        assert 0 <= rng.get_state() <= 0xFFFFFFFF


def test_next_int_range():
    rng = RNG(3)
    seen = {rng.next_int(6) for _ in range(500)}
    assert seen == {0, 1, 2, 3, 4, 5}


def test_pick_returns_member():
    rng = RNG(11)
    items = ["a", "b", "c"]
    for _ in range(30):
        assert rng.pick(items) in items


def test_random_seed_is_uint32():
    for _ in range(10):
        assert 0 <= random_seed() <= 0xFFFFFFFF


# ════════════════════════════════════════════════════════════════════════
#  Weighted pick
# ════════════════════════════════════════════════════════════════════════

def test_weighted_pick_empty_draws_nothing():
    rng = FixedRNG(0.5)
    assert weighted_pick(rng, [], lambda x: 1) is None
    assert rng.calls == 0


def test_weighted_pick_zero_total_draws_nothing():
    rng = FixedRNG(0.5)
    assert weighted_pick(rng, ["a", "b"], lambda x: 0) is None
    assert rng.calls == 0


def test_weighted_pick_uses_one_draw():
    rng = FixedRNG(0.3)
    weighted_pick(rng, ["a", "b", "c"], lambda x: 1)
    assert rng.calls == 1


def test_weighted_pick_boundary_is_inclusive():
    # total 4, draw 0.5 -> r = 2.0; running totals 1, 2, 4
    items = [("a", 1), ("b", 1), ("c", 2)]
    pick = weighted_pick(FixedRNG(0.5), items, lambda it: it[1])
    assert pick[0] == "b"


def test_weighted_pick_negative_weight_counts_as_zero():
    items = [("neg", -5), ("pos", 1)]
    pick = weighted_pick(FixedRNG(0.5), items, lambda it: it[1])
    assert pick[0] == "pos"


def test_weighted_pick_is_proportional():
    rng = RNG(2024)
    counts = {"a": 0, "b": 0}
    for _ in range(4000):
        counts[weighted_pick(rng, ["a", "b"], lambda x: 3 if x == "a" else 1)] += 1
    assert 0.70 < counts["a"] / 4000 < 0.80


def test_randint_incl_bounds_and_swap():
    rng = RNG(8)
    seen = {randint_incl(rng, 4, 2) for _ in range(300)}
    assert seen == {2, 3, 4}


# ════════════════════════════════════════════════════════════════════════
#  Numeric helpers
# ════════════════════════════════════════════════════════════════════════

def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
    assert round_half_up(-0.5) == 0
    assert round_half_up(20.25) == 20


def test_round2_and_clamp():
    assert round2(1.005 * 100) == 100.5
    assert round2(0.125) == 0.13
    assert clamp(7, 0, 5) == 5
    assert clamp(-1, 0, 5) == 0
