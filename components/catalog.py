"""components.catalog — Immutable catalog records.

Built once by ``core.catalogs`` from the data files and never mutated
afterwards.  Raw dicts are validated and defaulted on the way in, so
systems can read fields without re-checking types.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from components.trail import ConditionEffects, Modifiers


def _num(value: Any, default: float) -> float:
    return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else default


# ── Weather ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class WeatherPattern:
    id: str
    name: str
    emoji: str = ""
    blurb: str = ""
    weight: int = 1
    mods: Modifiers = field(default_factory=Modifiers)

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "WeatherPattern":
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", raw.get("id", ""))),
            emoji=str(raw.get("emoji", "")),
            blurb=str(raw.get("blurb", "")),
            weight=max(1, int(_num(raw.get("weight"), 1))),
            mods=Modifiers.from_dict(raw.get("mods")),
        )


# ── Status conditions ────────────────────────────────────────────────

@dataclass(frozen=True)
class ConditionDef:
    id: str
    name: str
    emoji: str = ""
    kind: str = "misc"
    weight: float = 1.0
    duration_days: tuple[int, int] = (2, 3)
    effects: ConditionEffects = field(default_factory=ConditionEffects)
    min_day: int = 0
    cooldown_days: int = 0
    blurb: str = ""

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "ConditionDef":
        dur = raw.get("durationDays")
        if isinstance(dur, (list, tuple)) and len(dur) >= 2:
            duration = (int(dur[0]), int(dur[1]))
        else:
            duration = (2, 3)
        trig = raw.get("trigger")
        if not isinstance(trig, dict):
            trig = {}
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", raw.get("id", ""))),
            emoji=str(raw.get("emoji", "")),
            kind=str(raw.get("kind", "misc")),
            weight=max(0.0, _num(raw.get("weight"), 1.0)),
            duration_days=duration,
            effects=ConditionEffects.from_dict(raw.get("effects")),
            min_day=max(0, int(_num(trig.get("minDay"), 0))),
            cooldown_days=max(0, int(_num(trig.get("cooldownDays"), 0))),
            blurb=str(raw.get("blurb", "")),
        )


@dataclass(frozen=True)
class StatusConfig:
    max_concurrent: int = 3
    base_daily_acquire_chance: float = 0.25
    conditions: tuple[ConditionDef, ...] = ()

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "StatusConfig":
        conds = raw.get("conditions")
        return cls(
            max_concurrent=max(0, int(_num(raw.get("maxConcurrent"), 3))),
            base_daily_acquire_chance=min(1.0, max(0.0, _num(raw.get("baseDailyAcquireChance"), 0.25))),
            conditions=tuple(ConditionDef.from_raw(c) for c in conds if isinstance(c, dict))
            if isinstance(conds, list) else (),
        )


# ── Hunting ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class AnimalDef:
    id: str
    name: str
    w: int = 48
    h: int = 32
    speed: float = 100.0           # px/s
    yield_lb: float = 40.0
    spawn_weight: float = 1.0

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "AnimalDef":
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", raw.get("id", ""))),
            w=int(_num(raw.get("w"), 48)) or 48,
            h=int(_num(raw.get("h"), 32)) or 32,
            speed=_num(raw.get("speed"), 100.0) or 100.0,
            yield_lb=_num(raw.get("yieldLb"), 40.0) or 40.0,
            spawn_weight=_num(raw.get("spawnWeight"), 1.0) or 1.0,
        )


# ── Route ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Landmark:
    """A named mile marker.  ``hazard`` is the authored template; the
    live, mutable copy lives in the session's hazard state."""
    id: str
    name: str
    mile: float = 0.0
    services: tuple[str, ...] = ()
    hazard: dict[str, Any] | None = None

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "Landmark":
        services = raw.get("services")
        hazard = raw.get("hazard")
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", raw.get("id", ""))),
            mile=_num(raw.get("mile"), 0.0),
            services=tuple(str(s) for s in services) if isinstance(services, list) else (),
            hazard=dict(hazard) if isinstance(hazard, dict) and hazard.get("kind") else None,
        )


@dataclass(frozen=True)
class ShopItem:
    id: str
    name: str
    price: float = 0.0
    stack: bool = True

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "ShopItem":
        return cls(
            id=str(raw.get("id", "")),
            name=str(raw.get("name", raw.get("id", ""))),
            price=_num(raw.get("price"), 0.0),
            stack=bool(raw.get("stack", True)),
        )
