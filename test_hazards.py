"""test_hazards.py — Crossing hazards: odds, outcomes and persistence.

Run:  pytest test_hazards.py
"""
from __future__ import annotations

import pytest

from components.catalog import Landmark
from core.catalogs import Catalogs
from core.rng import RNG
from core.session import GameSession
from trail.hazards import (
    UNSURE, UNUSUAL, BeaverHazard, GeeseHazard, HazardResolver, MudHazard,
    RiverHazard, SnowHazard, UnknownHazard, hazard_from_dict, rate_label,
)
from trail.travel import DayResolver


SHALLOW_FORD = Landmark(id="ford", name="Shallow Ford", mile=10,
                        hazard={"kind": "river", "depthFt": 1, "widthFt": 100,
                                "current": "slow"})


def _resolver() -> HazardResolver:
    cats = Catalogs.from_tables(
        weather=[{"id": "calm", "name": "Calm", "weight": 1}],
        conditions={"maxConcurrent": 3, "baseDailyAcquireChance": 0, "conditions": []},
    )
    return HazardResolver(DayResolver(cats).apply_rest_day)


def _peek(session: GameSession) -> float:
    rng = RNG()
    rng.set_state(session.rng.get_state())
    return rng.next()


# ════════════════════════════════════════════════════════════════════════
#  Estimates
# ════════════════════════════════════════════════════════════════════════

def test_shallow_slow_river_drive_odds():
    river = hazard_from_dict(SHALLOW_FORD.hazard)
    assert river.estimate_success("drive") == pytest.approx(0.70)
    assert river.estimate_success("service") == 0.95
    assert river.estimate_success("wait") is None
    assert river.estimate_success("detour") is None


def test_deep_fast_river_is_worse():
    deep = RiverHazard(depth_ft=4, width_ft=350, current="fast")
    assert deep.estimate_success("drive") == pytest.approx(0.05)
    assert deep.estimate_success("prep") < RiverHazard().estimate_success("prep")


@pytest.mark.parametrize("hazard", [
    RiverHazard(), MudHazard(), SnowHazard(), GeeseHazard(), BeaverHazard(),
])
def test_every_kind_offers_five_methods(hazard):
    methods = hazard.methods()
    assert [m.id for m in methods] == ["drive", "prep", "service", "wait", "detour"]
    for mid in ("drive", "prep", "service"):
        p = hazard.estimate_success(mid)
        assert 0 < p <= 1
    assert hazard.describe() and hazard.intro()


def test_rate_labels():
    assert rate_label(0.8) == "Good"
    assert rate_label(0.5) == "Fair"
    assert rate_label(0.2) == "Poor"
    assert rate_label(None) == ""


def test_parameters_are_normalized():
    assert MudHazard(badness=3).badness == 1.0
    assert SnowHazard(drift_ft=0.1).drift_ft == 0.5
    assert GeeseHazard(flock=1).flock == 5
    assert BeaverHazard(gap_ft=0).gap_ft == 8.0
    assert RiverHazard(depth_ft="deep").depth_ft == 2.0


# ════════════════════════════════════════════════════════════════════════
#  Attempts
# ════════════════════════════════════════════════════════════════════════

def test_drive_outcome_matches_the_draw():
    for seed in range(1, 30):
        s = GameSession.new_game(seed=seed)
        expected = _peek(s) < 0.70
        result = _resolver().try_method(s, SHALLOW_FORD, "drive")
        assert result.crossed is expected
        assert result.resolved is expected
        assert ("atLandmarkId" in s.flags) is not expected


def test_prep_outcome_matches_the_draw():
    river = hazard_from_dict(SHALLOW_FORD.hazard)
    assert river.estimate_success("prep") == pytest.approx(0.85)
    for seed in range(1, 30):
        s = GameSession.new_game(seed=seed)
        expected = _peek(s) < 0.85
        result = _resolver().try_method(s, SHALLOW_FORD, "prep")
        assert result.crossed is expected
        assert ("atLandmarkId" in s.flags) is not expected
        if not expected:
            assert s.day == 2


def test_wait_never_crosses_and_eases_the_river():
    s = GameSession.new_game(seed=3)
    resolver = _resolver()
    for i in range(3):
        result = resolver.try_method(s, SHALLOW_FORD, "wait")
        assert not result.resolved and not result.crossed
        assert s.flags["atLandmarkId"] == "ford"
    assert s.day == 4
    assert s.hazards["ford"].depth_ft == 0.5
    assert "Waiting at Shallow Ford (1 day)." in s.log


def test_detour_always_crosses():
    for seed in range(1, 10):
        s = GameSession.new_game(seed=seed)
        result = _resolver().try_method(s, SHALLOW_FORD, "detour")
        assert result.resolved and result.crossed
        assert "atLandmarkId" not in s.flags
        assert 3 <= s.day <= 5
        assert 35 <= s.money <= 45


def test_service_always_crosses_and_charges():
    s = GameSession.new_game(seed=6)
    result = _resolver().try_method(s, SHALLOW_FORD, "service")
    assert result.crossed
    assert s.money < 50
    assert s.day >= 2


def test_unknown_method():
    s = GameSession.new_game(seed=3)
    result = _resolver().try_method(s, SHALLOW_FORD, "teleport")
    assert result.text == UNSURE
    assert not result.resolved and s.day == 1


def test_unknown_kind_is_inert(capsys):
    lava = Landmark(id="lava", name="Lava", mile=5, hazard={"kind": "lava", "heat": 9})
    s = GameSession.new_game(seed=3)
    state = s.rng.get_state()
    result = _resolver().try_method(s, lava, "drive")
    assert result.text == UNUSUAL and not result.resolved
    assert "atLandmarkId" not in s.flags
    assert isinstance(s.hazards["lava"], UnknownHazard)
    assert s.rng.get_state() == state
    assert "[HAZARD]" in capsys.readouterr().out


def test_hazard_state_survives_reload():
    s = GameSession.new_game(seed=3)
    resolver = _resolver()
    resolver.try_method(s, SHALLOW_FORD, "wait")
    restored = GameSession.from_dict(s.to_dict())
    state = resolver.get_hazard_state(restored, SHALLOW_FORD)
    assert isinstance(state, RiverHazard)
    assert state.depth_ft == 0.5 and state.current == "slow"
    assert restored.flags["atLandmarkId"] == "ford"


def test_template_is_not_mutated():
    s = GameSession.new_game(seed=3)
    _resolver().try_method(s, SHALLOW_FORD, "wait")
    assert SHALLOW_FORD.hazard["depthFt"] == 1


def test_geese_prep_uses_food():
    geese = Landmark(id="g", name="Goose Flats", mile=5, hazard={"kind": "geese", "flock": 40})
    s = GameSession.new_game(seed=12)
    _resolver().try_method(s, geese, "prep")
    assert s.item("food") < 100
