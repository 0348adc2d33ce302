"""test_hunting.py — Hunting mini-game logic, headless.

Run:  pytest test_hunting.py
"""
from __future__ import annotations

import pygame

from components.catalog import AnimalDef
from core.catalogs import Catalogs
from core.session import GameSession
from trail.hunting import (
    TICK, Creature, HuntSession, HuntSummary, apply_hunt_summary, can_hunt_today,
    create_hunt_session,
)

RABBIT = AnimalDef(id="rabbit", name="Rabbit", w=24, h=18, speed=140, yield_lb=4, spawn_weight=5)
DEER = AnimalDef(id="deer", name="Deer", w=56, h=40, speed=110, yield_lb=60, spawn_weight=3)


def _hunt(seed: int = 5, **kw) -> HuntSession:
    s = GameSession.new_game(seed=seed)
    return HuntSession(s, (RABBIT, DEER), 640, 360, **kw)


def _place(hunt: HuntSession, species: AnimalDef, x: float, y: float) -> Creature:
    c = Creature(species=species, x=x, y=y, vx=0.0, bob_phase=0.0)
    hunt.state.creatures.append(c)
    return c


# ════════════════════════════════════════════════════════════════════════
#  Setup
# ════════════════════════════════════════════════════════════════════════

def test_field_and_limits_are_clamped():
    hunt = _hunt(duration_sec=2, carry_cap_lb=3)
    assert hunt.state.field == pygame.Rect(0, 0, 640, 360)
    assert hunt.state.duration_sec == 5
    assert hunt.state.carry_cap_lb == 10

    small = HuntSession(GameSession.new_game(seed=1), (RABBIT,), 100, 50)
    assert small.state.field.size == (320, 180)
    assert small.state.duration_sec == 30 and small.state.carry_cap_lb == 100


def test_create_from_catalogs():
    s = GameSession.new_game(seed=1)
    hunt = create_hunt_session(s, Catalogs.from_tables(animals=[
        {"id": "hare", "name": "Hare", "yieldLb": 3}]))
    assert [a.id for a in hunt.animals] == ["hare"]
    assert hunt.state.bullets_start == 30


# ════════════════════════════════════════════════════════════════════════
#  Shooting
# ════════════════════════════════════════════════════════════════════════

def test_no_bullets_no_shot():
    hunt = _hunt()
    hunt.session.inventory["bullets"] = 0
    _place(hunt, DEER, 100, 100)
    assert hunt.shoot(110, 110, 0) is False
    assert hunt.state.bullets_used == 0
    assert len(hunt.state.creatures) == 1


def test_hit_takes_meat_and_bullet():
    hunt = _hunt()
    _place(hunt, DEER, 100, 100)
    assert hunt.shoot(110, 110, 0) is True
    assert hunt.session.item("bullets") == 29
    assert hunt.state.kills_by_id == {"deer": 1}
    assert hunt.state.meat_total in (58.0, 60.0)
    assert hunt.state.creatures == []


def test_miss_still_spends_a_bullet():
    hunt = _hunt()
    _place(hunt, DEER, 100, 100)
    assert hunt.shoot(400, 300, 0) is False
    assert hunt.state.bullets_used == 1
    assert hunt.session.item("bullets") == 29


def test_far_edges_count_as_hits():
    hunt = _hunt()
    _place(hunt, RABBIT, 100.25, 50.0)
    assert hunt.shoot(124.25, 68.0, 0)
    assert hunt.state.kills_by_id == {"rabbit": 1}

    _place(hunt, RABBIT, 100.25, 50.0)
    assert not hunt.shoot(124.5, 60.0, 1000)


def test_smallest_overlapping_target_wins():
    hunt = _hunt()
    _place(hunt, DEER, 100, 100)
    _place(hunt, RABBIT, 105, 105)
    assert hunt.shoot(110, 110, 0)
    assert hunt.state.kills_by_id == {"rabbit": 1}
    assert [c.species.id for c in hunt.state.creatures] == ["deer"]


def test_shot_cooldown():
    hunt = _hunt()
    assert hunt.shoot(1, 1, 1000) is False
    assert hunt.shoot(1, 1, 1100) is False
    assert hunt.state.bullets_used == 1
    hunt.shoot(1, 1, 1200)
    assert hunt.state.bullets_used == 2


def test_no_shots_after_time_is_up():
    hunt = _hunt(duration_sec=5)
    hunt.update(6.0)
    assert hunt.state.time_left == 0
    assert hunt.shoot(1, 1, 0) is False
    assert hunt.state.bullets_used == 0


# ════════════════════════════════════════════════════════════════════════
#  Carrying and summary
# ════════════════════════════════════════════════════════════════════════

def test_carry_cap_splits_meat():
    hunt = _hunt(carry_cap_lb=10)
    hunt.state.meat_total = 35.0
    summary = hunt.end()
    assert (summary.meat_total, summary.meat_taken, summary.spoiled) == (35, 10, 25)
    assert hunt.state.ended
    assert hunt.shoot(1, 1, 0) is False


def test_summary_rounds_half_up():
    hunt = _hunt()
    hunt.state.meat_total = 2.5
    summary = hunt.end()
    assert summary.meat_taken == 3 and summary.spoiled == 0


def test_apply_summary():
    s = GameSession.new_game(seed=1)
    assert can_hunt_today(s)
    summary = HuntSummary(duration_sec=30, carry_cap_lb=100, bullets_used=3,
                          meat_total=60, meat_taken=60, spoiled=0,
                          kills_by_id={"deer": 1})
    line = apply_hunt_summary(s, summary, Catalogs.from_tables(animals=[
        {"id": "deer", "name": "Deer"}]))
    assert line == "Hunt: 1× Deer. Meat: 60 lb (spoiled 0 lb). Bullets used: 3."
    assert s.log[-1] == line
    assert s.item("food") == 160
    assert not can_hunt_today(s)
    s.day += 1
    assert can_hunt_today(s)


def test_apply_empty_hunt():
    s = GameSession.new_game(seed=1)
    summary = HuntSummary(30, 100, 2, 0, 0, 0, {})
    assert apply_hunt_summary(s, summary).startswith("Hunt: no hits. Meat: 0 lb")


# ════════════════════════════════════════════════════════════════════════
#  Fixed-step clock
# ════════════════════════════════════════════════════════════════════════

def test_spawns_over_time():
    hunt = _hunt()
    for _ in range(300):
        hunt.update(TICK)
    assert hunt.state.ticks == 300
    assert len(hunt.state.creatures) >= 2
    for c in hunt.state.creatures:
        assert c.species in (RABBIT, DEER)


def test_frame_rate_does_not_change_the_hunt():
    fine, coarse = _hunt(seed=77), _hunt(seed=77)
    for _ in range(480):
        fine.update(TICK)
    for _ in range(240):
        coarse.update(2 * TICK)

    assert fine.state.ticks == coarse.state.ticks == 480
    assert fine.session.rng.get_state() == coarse.session.rng.get_state()
    assert [(c.species.id, c.x, c.y) for c in fine.state.creatures] == \
           [(c.species.id, c.x, c.y) for c in coarse.state.creatures]


def test_negative_dt_is_ignored():
    hunt = _hunt()
    hunt.update(-1.0)
    assert hunt.state.ticks == 0


def test_hunt_runs_exactly_its_duration():
    hunt = _hunt(duration_sec=30)
    for _ in range(10000):
        hunt.update(TICK)
    assert hunt.state.ticks == 1800
    assert hunt.state.time_left == 0
