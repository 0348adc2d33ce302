"""trail/effects.py — Applying event effects to the session.

One handler per effect record, registered in ``_HANDLERS``.  The table
is checked against ``components.events.EFFECT_KINDS`` at import, so a
new effect type without a handler fails loudly at startup instead of
silently doing nothing in play.
"""

from __future__ import annotations
from typing import Callable

from components.events import (
    EFFECT_KINDS, DistanceEffect, Effect, EventSession, HealthEffect,
    InventoryEffect, MapFlagEffect, MoneyEffect, MoraleEffect,
    MortalityEffect, RiskBuffEffect, RollEffect, StatusEffect, TimeEffect,
    UnknownEffect,
)
from components.party import DEAD, PartyMember
from components.trail import Buff
from core import tuning
from core.numeric import clamp, round_half_up
from core.rng import weighted_pick
from core.session import GameSession


DEFAULT_EPITAPH = "Gone ahead on the long road."

_ITEM_LABELS = {
    "food": "Food", "bullets": "Bullets", "clothes": "Clothes",
    "wheel": "Wagon Wheel", "axle": "Wagon Axle", "tongue": "Wagon Tongue",
    "medicine": "Medicine",
}


def label_item(item_id: str) -> str:
    return _ITEM_LABELS.get(item_id, item_id)


def _num(n: float) -> str:
    return f"{n:g}"


def _signed(n: float) -> str:
    return f"{'+' if n >= 0 else ''}{_num(n)}"


def _say(session: GameSession, ev: EventSession, text: str) -> None:
    ev.logs.append(text)
    session.log_line(text)


# ── Targets ──────────────────────────────────────────────────────────

def resolve_targets(session: GameSession, spec: str | None,
                    ev: EventSession | None = None) -> list[PartyMember]:
    """Living members an effect applies to.

    "family"/"all" → everyone alive; "child" → one random living child;
    "random"/None → one random member; a member id → that member.
    Anything else falls back to the event's chosen child, then random.
    """
    alive = session.alive_members()
    if not alive:
        return []
    rng = session.rng
    if spec in ("family", "all"):
        return alive
    if spec == "child":
        kids = [m for m in alive if m.is_child]
        if kids:
            return [kids[rng.next_int(len(kids))]]
    elif spec in (None, "random"):
        return [alive[rng.next_int(len(alive))]]
    else:
        match = next((m for m in alive if m.id == spec), None)
        if match is not None:
            return [match]
    child = ev.vars.get("child") if ev is not None else None
    if child is not None and child.alive:
        return [child]
    return [alive[rng.next_int(len(alive))]]


def epitaph_for(session: GameSession, member: PartyMember, reason: str | None = None) -> str:
    return str(reason or session.epitaphs.get(member.id) or DEFAULT_EPITAPH)


# ── Handlers ─────────────────────────────────────────────────────────

def _inventory(eff: InventoryEffect, session: GameSession, ev: EventSession) -> None:
    session.add_item(eff.item, eff.delta)
    _say(session, ev, f"{label_item(eff.item)} {_signed(eff.delta)}.")


def _money(eff: MoneyEffect, session: GameSession, ev: EventSession) -> None:
    session.money = max(0.0, session.money + eff.delta)
    _say(session, ev, f"Money {_signed(eff.delta)} (${session.money:.2f}).")


def _health(eff: HealthEffect, session: GameSession, ev: EventSession) -> None:
    targets = resolve_targets(session, eff.target, ev)
    for m in targets:
        if m.set_health(m.health + eff.delta):
            session.log_line(f"{m.name} died.")
    _say(session, ev, f"Health {_signed(eff.delta)} for {len(targets)} member(s).")


def _status(eff: StatusEffect, session: GameSession, ev: EventSession) -> None:
    targets = resolve_targets(session, eff.target, ev)
    for m in targets:
        if eff.status == DEAD:
            m.kill()
        elif eff.status:
            m.status = eff.status
    _say(session, ev, f'Status set to "{eff.status}" for {len(targets)} member(s).')


def _time(eff: TimeEffect, session: GameSession, ev: EventSession) -> None:
    session.day += max(0, eff.days)
    _say(session, ev, f"Lost {eff.days} day(s).")


def _distance(eff: DistanceEffect, session: GameSession, ev: EventSession) -> None:
    session.miles = max(0.0, session.miles + eff.miles)
    verb = "Advanced" if eff.miles >= 0 else "Lost ground"
    _say(session, ev, f"{verb} {abs(eff.miles):.0f} miles.")


def _map_flag(eff: MapFlagEffect, session: GameSession, ev: EventSession) -> None:
    if eff.key:
        session.flags[eff.key] = eff.value
    ev.logs.append(f"Flag {eff.key} = {session.flags.get(eff.key)}.")


def _risk_buff(eff: RiskBuffEffect, session: GameSession, ev: EventSession) -> None:
    session.buffs[eff.key] = Buff(mult=eff.mult, until_day=session.day + eff.days)
    _say(session, ev, f'Risk buff "{eff.key}" active ×{_num(eff.mult)} for {eff.days} day(s).')


def _morale(eff: MoraleEffect, session: GameSession, ev: EventSession) -> None:
    lo = int(tuning.get("morale", "min", -5))
    hi = int(tuning.get("morale", "max", 5))
    session.morale = int(clamp(session.morale + eff.delta, lo, hi))
    _say(session, ev, f"Morale {_signed(eff.delta)} (now {session.morale}).")


def _mortality(eff: MortalityEffect, session: GameSession, ev: EventSession) -> None:
    targets = resolve_targets(session, eff.target or "random", ev)
    if not targets or not targets[0].alive:
        return
    victim = targets[0]
    victim.kill()
    note = epitaph_for(session, victim, eff.reason)
    session.epitaphs[victim.id] = note
    _say(session, ev, f'Grave for {victim.name}: "{note}" '
                      f"(Day {session.day}, Mile {round_half_up(session.miles)}).")


def _roll(eff: RollEffect, session: GameSession, ev: EventSession) -> None:
    chosen = weighted_pick(session.rng, eff.options, lambda o: o.weight)
    if chosen is None:
        return
    apply_effects(chosen.effects, session, ev)
    if chosen.log:
        _say(session, ev, chosen.log)


def _unknown(eff: UnknownEffect, session: GameSession, ev: EventSession) -> None:
    print(f"[EVENT] {ev.event.id}: ignored effect type {eff.type!r}")
    ev.logs.append(f"(ignored effect: {eff.type})")


_HANDLERS: dict[type, Callable[[Effect, GameSession, EventSession], None]] = {
    InventoryEffect: _inventory,
    MoneyEffect: _money,
    HealthEffect: _health,
    StatusEffect: _status,
    TimeEffect: _time,
    DistanceEffect: _distance,
    MapFlagEffect: _map_flag,
    RiskBuffEffect: _risk_buff,
    MoraleEffect: _morale,
    MortalityEffect: _mortality,
    RollEffect: _roll,
    UnknownEffect: _unknown,
}

_missing = set(EFFECT_KINDS) - set(_HANDLERS)
if _missing:
    raise RuntimeError(f"effect kinds without a handler: {sorted(k.__name__ for k in _missing)}")


def apply_effect(eff: Effect, session: GameSession, ev: EventSession) -> None:
    _HANDLERS[type(eff)](eff, session, ev)


def apply_effects(effects, session: GameSession, ev: EventSession) -> None:
    for eff in effects:
        apply_effect(eff, session, ev)
