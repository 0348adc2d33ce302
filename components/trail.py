"""components.trail — Per-day trail state carried by the session.

  WeatherToday       the pattern rolled for one in-game day
  WeatherBook        today's record + the day it was rolled for
  ConditionInstance  an active status condition ("disease")
  StatusBook         active conditions + per-condition cooldown history
  Buff               a named multiplier with an expiry day
  DaySummary         what one travel/rest day did
"""

from __future__ import annotations
from dataclasses import dataclass, field, asdict
from typing import Any


# ── Modifiers ────────────────────────────────────────────────────────

@dataclass
class Modifiers:
    """Multiplicative speed/appetite drag and an additive health delta.

    The identity value (1, 0, 1) means "no effect".
    """
    speed_mult: float = 1.0
    health_delta: int = 0
    hunger_mult: float = 1.0

    def to_dict(self) -> dict[str, Any]:
        return {"speedMult": self.speed_mult, "healthDelta": self.health_delta,
                "hungerMult": self.hunger_mult}

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "Modifiers":
        d = d or {}
        speed = d.get("speedMult", 1)
        health = d.get("healthDelta", 0)
        hunger = d.get("hungerMult", 1)
        return cls(
            speed_mult=float(speed) if isinstance(speed, (int, float)) else 1.0,
            health_delta=int(health) if isinstance(health, (int, float)) else 0,
            hunger_mult=float(hunger) if isinstance(hunger, (int, float)) else 1.0,
        )


# ── Weather ──────────────────────────────────────────────────────────

@dataclass
class WeatherToday:
    day: int
    id: str
    name: str
    emoji: str = ""
    blurb: str = ""
    mods: Modifiers = field(default_factory=Modifiers)

    def to_dict(self) -> dict[str, Any]:
        return {"day": self.day, "id": self.id, "name": self.name,
                "emoji": self.emoji, "blurb": self.blurb,
                "mods": self.mods.to_dict()}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "WeatherToday":
        return cls(day=int(d.get("day", 0)), id=str(d.get("id", "")),
                   name=str(d.get("name", "")), emoji=str(d.get("emoji", "")),
                   blurb=str(d.get("blurb", "")),
                   mods=Modifiers.from_dict(d.get("mods")))


@dataclass
class WeatherBook:
    last_rolled_day: int = 0
    today: WeatherToday | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"lastRolledDay": self.last_rolled_day,
                "today": self.today.to_dict() if self.today else None}

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "WeatherBook":
        d = d or {}
        last = d.get("lastRolledDay", 0)
        today = d.get("today")
        return cls(
            last_rolled_day=int(last) if isinstance(last, (int, float)) else 0,
            today=WeatherToday.from_dict(today) if isinstance(today, dict) else None,
        )


# ── Status conditions ────────────────────────────────────────────────

@dataclass
class ConditionEffects:
    speed_mult: float = 1.0
    hunger_mult: float = 1.0
    health_chance_per_day: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"speedMult": self.speed_mult, "hungerMult": self.hunger_mult,
                "healthChancePerDay": self.health_chance_per_day}

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "ConditionEffects":
        d = d or {}
        speed = d.get("speedMult", 1)
        hunger = d.get("hungerMult", 1)
        chance = d.get("healthChancePerDay", 0)
        chance = float(chance) if isinstance(chance, (int, float)) else 0.0
        return cls(
            speed_mult=float(speed) if isinstance(speed, (int, float)) else 1.0,
            hunger_mult=float(hunger) if isinstance(hunger, (int, float)) else 1.0,
            health_chance_per_day=min(1.0, max(0.0, chance)),
        )


@dataclass
class ConditionInstance:
    id: str
    name: str
    emoji: str = ""
    kind: str = "misc"
    days_remaining: int = 1
    effects: ConditionEffects = field(default_factory=ConditionEffects)
    blurb: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "emoji": self.emoji,
                "kind": self.kind, "daysRemaining": self.days_remaining,
                "effects": self.effects.to_dict(), "blurb": self.blurb}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "ConditionInstance":
        return cls(id=str(d.get("id", "")), name=str(d.get("name", "")),
                   emoji=str(d.get("emoji", "")), kind=str(d.get("kind", "misc")),
                   days_remaining=int(d.get("daysRemaining", 0)),
                   effects=ConditionEffects.from_dict(d.get("effects")),
                   blurb=str(d.get("blurb", "")))


@dataclass
class StatusBook:
    """Active conditions and ``history[id] = {"lastEndDay": n}``."""
    conditions: list[ConditionInstance] = field(default_factory=list)
    history: dict[str, dict[str, int]] = field(default_factory=dict)

    def is_active(self, condition_id: str) -> bool:
        return any(c.id == condition_id for c in self.conditions)

    def last_end_day(self, condition_id: str) -> int:
        return int(self.history.get(condition_id, {}).get("lastEndDay", -9999))

    def to_dict(self) -> dict[str, Any]:
        return {"conditions": [c.to_dict() for c in self.conditions],
                "history": {k: dict(v) for k, v in self.history.items()}}

    @classmethod
    def from_dict(cls, d: dict[str, Any] | None) -> "StatusBook":
        d = d or {}
        conds = d.get("conditions")
        hist = d.get("history")
        return cls(
            conditions=[ConditionInstance.from_dict(c) for c in conds
                        if isinstance(c, dict)] if isinstance(conds, list) else [],
            history={str(k): dict(v) for k, v in hist.items() if isinstance(v, dict)}
            if isinstance(hist, dict) else {},
        )


# ── Buffs ────────────────────────────────────────────────────────────

@dataclass
class Buff:
    mult: float = 1.0
    until_day: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"mult": self.mult, "untilDay": self.until_day}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Buff":
        return cls(mult=float(d.get("mult", 1)), until_day=int(d.get("untilDay", 0)))


# ── Day result ───────────────────────────────────────────────────────

@dataclass
class DaySummary:
    """Returned by apply_travel_day / apply_rest_day."""
    miles_traveled: int = 0
    food_consumed: float = 0
    health_delta: int = 0
    starvation: bool = False

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
