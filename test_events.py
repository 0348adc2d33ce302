"""test_events.py — Event selection, stage graph and effects.

Run:  pytest test_events.py
"""
from __future__ import annotations

import pytest

from components.events import (
    EventDef, EventSession, InventoryEffect, RollEffect, UnknownEffect,
    parse_effect, parse_effects,
)
from core.catalogs import Catalogs
from core.session import GameSession
from trail.effects import apply_effects, resolve_targets
from trail.events import EventEngine


def _event(**over) -> dict:
    raw = {
        "id": "ferry", "title": "Ferry Toll", "weight": 1,
        "stages": [
            {"id": "start", "text": "{child} stares at the ferryman.",
             "choices": [
                 {"id": "pay", "label": "Pay $10", "goto": "aboard",
                  "requires": {"moneyGte": 10},
                  "effects": [{"type": "money", "delta": -10}]},
                 {"id": "spare", "label": "Trade two wheels", "goto": "end",
                  "requires": {"inventory": {"wheelGte": 2}},
                  "effects": [{"type": "inventory", "item": "wheel", "delta": -2}]},
                 {"id": "leave", "label": "Turn back", "goto": "end"},
             ]},
            {"id": "aboard", "text": "The ferry creaks across."},
        ],
    }
    raw.update(over)
    return raw


def _engine(*events) -> EventEngine:
    return EventEngine(Catalogs.from_tables(events=list(events) or [_event()]))


def _open(engine: EventEngine, session: GameSession) -> EventSession:
    session.flags["evtCooldownDays"] = 0
    ev = engine.maybe_trigger_event(session)
    assert ev is not None
    return ev


def _bare(session: GameSession) -> EventSession:
    return EventSession(event=EventDef(id="t", title="T"), stage_id="start",
                        vars={"child": session.living_children()[0]})


# ════════════════════════════════════════════════════════════════════════
#  Selection
# ════════════════════════════════════════════════════════════════════════

def test_mile_gate():
    engine = _engine(_event(when={"mileGte": 100}))
    (ev,) = engine.catalogs.events()
    s = GameSession.new_game(seed=2)
    s.miles = 50
    assert not engine.is_eligible(ev, s)
    s.miles = 100
    assert engine.is_eligible(ev, s)


def test_day_flag_and_inventory_gates():
    engine = _engine(_event(when={"minDay": 3, "maxDay": 9, "ifFlagMissing": "seen",
                                  "ifInventory": {"foodLt": 50}}))
    (ev,) = engine.catalogs.events()
    s = GameSession.new_game(seed=2)
    s.day = 4
    assert not engine.is_eligible(ev, s)
    s.inventory["food"] = 20
    assert engine.is_eligible(ev, s)
    s.flags["seen"] = True
    assert not engine.is_eligible(ev, s)
    del s.flags["seen"]
    s.day = 10
    assert not engine.is_eligible(ev, s)


def test_cooldown_counts_down():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    s.flags["evtCooldownDays"] = 2
    assert engine.maybe_trigger_event(s) is None
    assert s.flags["evtCooldownDays"] == 1


def test_nothing_eligible_waits_a_day():
    engine = _engine(_event(when={"mileGte": 500}))
    s = GameSession.new_game(seed=2)
    state = s.rng.get_state()
    assert engine.maybe_trigger_event(s) is None
    assert s.flags["evtCooldownDays"] == 1
    assert s.rng.get_state() == state


def test_trigger_opens_event():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    ev = engine.maybe_trigger_event(s)
    assert ev.event.id == "ferry" and ev.stage_id == "start"
    assert ev.vars["child"].is_child
    assert 3 <= s.flags["evtCooldownDays"] <= 6
    assert s.log[-1] == "Event: Ferry Toll"
    assert s.active_event == {"eventId": "ferry", "stageId": "start",
                              "childId": ev.vars["child"].id}


# ════════════════════════════════════════════════════════════════════════
#  Rendering and choices
# ════════════════════════════════════════════════════════════════════════

def test_render_names_the_child():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    ev = _open(engine, s)
    view = engine.render_stage(ev, s)
    assert view.title == "Ferry Toll"
    assert view.text == f"{ev.vars['child'].name} stares at the ferryman."


def test_render_without_children():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    for m in s.living_children():
        m.kill()
    ev = _open(engine, s)
    assert ev.vars["child"] is None
    assert engine.render_stage(ev, s).text == "a child stares at the ferryman."


def test_requirements_disable_choices():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    s.money = 5
    ev = _open(engine, s)
    views = {c.id: c for c in engine.render_stage(ev, s).choices}
    assert views["pay"].disabled and views["pay"].reason == "Requires $10"
    assert views["spare"].disabled and views["spare"].reason == "Requires wheel ×2"
    assert not views["leave"].disabled


def test_unmet_requirements_change_nothing():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    s.money = 5
    ev = _open(engine, s)
    result = engine.choose(ev, "pay", s)
    assert not result.done
    assert s.money == 5 and ev.stage_id == "start"
    assert ev.logs == ["Choice requirements not met."]


def test_goto_then_continue():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    ev = _open(engine, s)
    assert not engine.choose(ev, "pay", s).done
    assert s.money == 40
    assert ev.stage_id == "aboard"
    assert s.active_event["stageId"] == "aboard"

    view = engine.render_stage(ev, s)
    assert [c.id for c in view.choices] == ["continue"]
    assert engine.choose(ev, "continue", s).done
    assert s.active_event is None


def test_unknown_choice_closes_event():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    ev = _open(engine, s)
    assert engine.choose(ev, "fly-away", s).done
    assert s.active_event is None


def test_missing_stage_falls_back_to_first():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    ev = _open(engine, s)
    ev.stage_id = "nowhere"
    assert engine.find_stage(ev).id == "start"


# ════════════════════════════════════════════════════════════════════════
#  Resume
# ════════════════════════════════════════════════════════════════════════

def test_resume_after_reload():
    engine = _engine()
    s = GameSession.new_game(seed=2)
    ev = _open(engine, s)
    engine.choose(ev, "pay", s)

    restored = GameSession.from_dict(s.to_dict())
    again = _engine().resume_event(restored)
    assert again.event.id == "ferry" and again.stage_id == "aboard"
    assert again.vars["child"].id == ev.vars["child"].id


def test_resume_drops_missing_event(capsys):
    s = GameSession.new_game(seed=2)
    s.active_event = {"eventId": "gone", "stageId": "start", "childId": None}
    assert _engine().resume_event(s) is None
    assert s.active_event is None
    assert "[EVENT]" in capsys.readouterr().out


def test_resume_with_nothing_open():
    assert _engine().resume_event(GameSession.new_game(seed=2)) is None


# ════════════════════════════════════════════════════════════════════════
#  Effects
# ════════════════════════════════════════════════════════════════════════

def test_parse_effects():
    assert parse_effect({"type": "inventory", "item": "food", "delta": 5}) == InventoryEffect("food", 5.0)
    assert isinstance(parse_effect({"type": "inventory", "item": "food"}), UnknownEffect)
    assert isinstance(parse_effect({"type": "teleport"}), UnknownEffect)
    (roll,) = parse_effects([{"type": "roll", "options": [{"weight": 2, "effects": []}]}])
    assert isinstance(roll, RollEffect) and roll.options[0].weight == 2


def test_inventory_and_money_floor_at_zero():
    s = GameSession.new_game(seed=4)
    ev = _bare(s)
    apply_effects(parse_effects([
        {"type": "inventory", "item": "food", "delta": -1000},
        {"type": "money", "delta": -80},
    ]), s, ev)
    assert s.item("food") == 0 and s.money == 0
    assert ev.logs == ["Food -1000.", "Money -80 ($0.00)."]


def test_health_effect_targets_family():
    s = GameSession.new_game(seed=4)
    s.party[1].kill()
    apply_effects(parse_effects([{"type": "health", "delta": -2, "target": "family"}]), s, _bare(s))
    assert [m.health for m in s.party] == [3, 0, 3, 3, 3, 3]


def test_status_dead_kills():
    s = GameSession.new_game(seed=4)
    apply_effects(parse_effects([{"type": "status", "status": "dead", "target": "mike"}]), s, _bare(s))
    mike = s.find_member("mike")
    assert not mike.alive and mike.health == 0


def test_time_distance_flag_buff_morale():
    s = GameSession.new_game(seed=4)
    s.miles = 2
    apply_effects(parse_effects([
        {"type": "time", "days": 2},
        {"type": "distance", "miles": -5},
        {"type": "mapFlag", "key": "metTrader"},
        {"type": "riskBuff", "key": "river", "mult": 0.5, "days": 3},
        {"type": "morale", "delta": 9},
    ]), s, _bare(s))
    assert s.day == 3 and s.miles == 0
    assert s.flags["metTrader"] is True
    assert s.buffs["river"].mult == 0.5 and s.buffs["river"].until_day == 6
    assert s.morale == 5


def test_mortality_records_epitaph():
    s = GameSession.new_game(seed=4)
    s.day, s.miles = 12, 240.4
    ev = _bare(s)
    apply_effects(parse_effects([{"type": "mortality", "target": "child"}]), s, ev)
    dead = [m for m in s.party if not m.alive]
    assert len(dead) == 1 and dead[0].is_child
    note = s.epitaphs[dead[0].id]
    assert ev.logs[-1] == f'Grave for {dead[0].name}: "{note}" (Day 12, Mile 240).'


def test_mortality_reason_becomes_epitaph():
    s = GameSession.new_game(seed=4)
    apply_effects(parse_effects([{"type": "mortality", "target": "jess", "reason": "prairie fever"}]),
                  s, _bare(s))
    assert not s.find_member("jess").alive
    assert s.epitaphs["jess"] == "prairie fever"


def test_roll_applies_one_option():
    s = GameSession.new_game(seed=4)
    ev = _bare(s)
    apply_effects(parse_effects([{"type": "roll", "options": [
        {"weight": 1, "log": "Found a cache.",
         "effects": [{"type": "inventory", "item": "bullets", "delta": 10}]},
    ]}]), s, ev)
    assert s.item("bullets") == 40
    assert ev.logs[-1] == "Found a cache."


def test_unknown_effect_is_skipped(capsys):
    s = GameSession.new_game(seed=4)
    ev = _bare(s)
    apply_effects(parse_effects([{"type": "teleport"}, {"type": "money", "delta": 1}]), s, ev)
    assert "(ignored effect: teleport)" in ev.logs
    assert s.money == 51
    assert "[EVENT]" in capsys.readouterr().out


def test_targets_skip_the_dead():
    s = GameSession.new_game(seed=4)
    for m in s.party[1:]:
        m.kill()
    for spec in ("random", "child", None, "ros"):
        assert resolve_targets(s, spec) == [s.party[0]]


def test_no_targets_when_all_dead():
    s = GameSession.new_game(seed=4)
    for m in s.party:
        m.kill()
    assert resolve_targets(s, "family") == []


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_event_outcomes_reproduce(seed):
    def play():
        s = GameSession.new_game(seed=seed)
        engine = EventEngine(Catalogs())
        s.day, s.miles = 10, 550
        for _ in range(20):
            ev = engine.maybe_trigger_event(s)
            while ev:
                view = engine.render_stage(ev, s)
                pick = next(c for c in view.choices if not c.disabled)
                if engine.choose(ev, pick.id, s).done:
                    break
        return s.to_dict()

    assert play() == play()
