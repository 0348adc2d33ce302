"""components.events — Event graph definitions, effects and sessions.

Event definitions are data-declared and immutable once loaded:

    EventDef ─┬─ When            eligibility gates
              └─ StageDef[] ──── ChoiceDef[] ─┬─ Requirements
                                              └─ Effect[]

``Effect`` is a closed union of one dataclass per effect kind.  Raw
``{"type": ...}`` dicts are parsed once by ``parse_effect`` when the
catalog loads; a type nobody knows becomes ``UnknownEffect`` so the
dispatcher can log and skip it instead of failing the whole event.
"""

from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Any, Union

from components.party import PartyMember


def _num(value: Any, default: float = 0.0) -> float:
    return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else default


# ── Effects ──────────────────────────────────────────────────────────

@dataclass(frozen=True)
class InventoryEffect:
    item: str
    delta: float


@dataclass(frozen=True)
class MoneyEffect:
    delta: float


@dataclass(frozen=True)
class HealthEffect:
    delta: int
    target: str | None = None


@dataclass(frozen=True)
class StatusEffect:
    status: str
    target: str | None = None


@dataclass(frozen=True)
class TimeEffect:
    days: int


@dataclass(frozen=True)
class DistanceEffect:
    miles: float


@dataclass(frozen=True)
class MapFlagEffect:
    key: str
    value: Any = True


@dataclass(frozen=True)
class RiskBuffEffect:
    key: str
    mult: float = 1.0
    days: int = 0


@dataclass(frozen=True)
class MoraleEffect:
    delta: int


@dataclass(frozen=True)
class MortalityEffect:
    target: str | None = "random"
    reason: str | None = None


@dataclass(frozen=True)
class RollOption:
    weight: float = 1.0
    effects: tuple["Effect", ...] = ()
    log: str | None = None


@dataclass(frozen=True)
class RollEffect:
    options: tuple[RollOption, ...] = ()


@dataclass(frozen=True)
class UnknownEffect:
    type: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False)


Effect = Union[
    InventoryEffect, MoneyEffect, HealthEffect, StatusEffect, TimeEffect,
    DistanceEffect, MapFlagEffect, RiskBuffEffect, MoraleEffect,
    MortalityEffect, RollEffect, UnknownEffect,
]

EFFECT_KINDS: tuple[type, ...] = Effect.__args__


def _opt_str(value: Any) -> str | None:
    return str(value) if value is not None else None


def parse_effect(raw: dict[str, Any]) -> Effect:
    """Turn one ``{"type": ..., ...}`` dict into its effect record."""
    kind = str(raw.get("type", ""))
    if kind == "inventory":
        item = raw.get("item")
        delta = raw.get("delta")
        if not item or not isinstance(delta, (int, float)):
            return UnknownEffect(kind, dict(raw))
        return InventoryEffect(str(item), float(delta))
    if kind == "money":
        return MoneyEffect(_num(raw.get("delta")))
    if kind == "health":
        return HealthEffect(int(_num(raw.get("delta"))), _opt_str(raw.get("target")))
    if kind == "status":
        return StatusEffect(str(raw.get("status", "")).strip(), _opt_str(raw.get("target")))
    if kind == "time":
        return TimeEffect(int(_num(raw.get("days"))))
    if kind == "distance":
        return DistanceEffect(_num(raw.get("miles")))
    if kind == "mapFlag":
        return MapFlagEffect(str(raw.get("key", "")), raw.get("value", True))
    if kind == "riskBuff":
        return RiskBuffEffect(str(raw.get("key", "")), _num(raw.get("mult"), 1.0),
                              int(_num(raw.get("days"))))
    if kind == "morale":
        return MoraleEffect(int(_num(raw.get("delta"))))
    if kind == "mortality":
        return MortalityEffect(_opt_str(raw.get("target", "random")), _opt_str(raw.get("reason")))
    if kind == "roll":
        options = []
        for opt in raw.get("options") or []:
            if not isinstance(opt, dict):
                continue
            options.append(RollOption(
                weight=_num(opt.get("weight"), 1.0) or 1.0,
                effects=parse_effects(opt.get("effects")),
                log=_opt_str(opt.get("log")),
            ))
        return RollEffect(tuple(options))
    return UnknownEffect(kind, dict(raw))


def parse_effects(raw: Any) -> tuple[Effect, ...]:
    if not isinstance(raw, list):
        return ()
    return tuple(parse_effect(e) for e in raw if isinstance(e, dict))


# ── Gates ────────────────────────────────────────────────────────────

_GTE_KEY = re.compile(r"^(.*)Gte$")


@dataclass(frozen=True)
class Requirements:
    """Choice gating: ``moneyGte`` and ``inventory.<item>Gte`` keys."""
    money_gte: float | None = None
    inventory_gte: tuple[tuple[str, float], ...] = ()

    @classmethod
    def from_raw(cls, raw: Any) -> "Requirements":
        if not isinstance(raw, dict):
            return cls()
        inv: list[tuple[str, float]] = []
        inventory = raw.get("inventory")
        if not isinstance(inventory, dict):
            inventory = {}
        for key, value in inventory.items():
            m = _GTE_KEY.match(key)
            if m and isinstance(value, (int, float)):
                inv.append((m.group(1), float(value)))
        money = raw.get("moneyGte")
        return cls(money_gte=float(money) if isinstance(money, (int, float)) else None,
                   inventory_gte=tuple(inv))


@dataclass(frozen=True)
class When:
    """Eligibility gates for picking an event."""
    min_day: int | None = None
    max_day: int | None = None
    mile_gte: float | None = None
    mile_lt: float | None = None
    if_flag: str | None = None
    if_flag_missing: str | None = None
    food_lt: float | None = None
    bullets_gte: float | None = None
    medicine_gte: float | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "When":
        if not isinstance(raw, dict):
            return cls()
        inv = raw.get("ifInventory")
        if not isinstance(inv, dict):
            inv = {}

        def opt(d: dict, key: str) -> float | None:
            v = d.get(key)
            return v if isinstance(v, (int, float)) and not isinstance(v, bool) else None

        return cls(
            min_day=opt(raw, "minDay"), max_day=opt(raw, "maxDay"),
            mile_gte=opt(raw, "mileGte"), mile_lt=opt(raw, "mileLt"),
            if_flag=_opt_str(raw.get("ifFlag")),
            if_flag_missing=_opt_str(raw.get("ifFlagMissing")),
            food_lt=opt(inv, "foodLt"), bullets_gte=opt(inv, "bulletsGte"),
            medicine_gte=opt(inv, "medicineGte"),
        )


# ── Graph ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ChoiceDef:
    id: str
    label: str = ""
    goto: str | None = None
    requires: Requirements = field(default_factory=Requirements)
    effects: tuple[Effect, ...] = ()

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "ChoiceDef":
        return cls(
            id=str(raw.get("id", "")),
            label=str(raw.get("label", raw.get("id", ""))),
            goto=_opt_str(raw.get("goto")),
            requires=Requirements.from_raw(raw.get("requires")),
            effects=parse_effects(raw.get("effects")),
        )


CONTINUE_CHOICE = ChoiceDef(id="continue", label="Continue", goto="end")


@dataclass(frozen=True)
class StageDef:
    id: str
    text: str = ""
    choices: tuple[ChoiceDef, ...] = ()

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "StageDef":
        return cls(
            id=str(raw.get("id", "start")),
            text=str(raw.get("text", "")),
            choices=tuple(ChoiceDef.from_raw(c) for c in raw.get("choices") or []
                          if isinstance(c, dict)),
        )


@dataclass(frozen=True)
class EventDef:
    id: str
    title: str
    weight: float = 1.0
    when: When = field(default_factory=When)
    stages: tuple[StageDef, ...] = ()

    @classmethod
    def from_raw(cls, raw: dict[str, Any]) -> "EventDef":
        return cls(
            id=str(raw.get("id", "")),
            title=str(raw.get("title", raw.get("id", ""))),
            weight=max(0.0, _num(raw.get("weight"), 1.0) or 1.0),
            when=When.from_raw(raw.get("when")),
            stages=tuple(StageDef.from_raw(s) for s in raw.get("stages") or []
                         if isinstance(s, dict)),
        )


# ── Runtime ──────────────────────────────────────────────────────────

@dataclass
class EventSession:
    """One event being resolved.  ``vars["child"]`` feeds ``{child}``."""
    event: EventDef
    stage_id: str
    vars: dict[str, PartyMember | None] = field(default_factory=dict)
    logs: list[str] = field(default_factory=list)

    def to_ref(self) -> dict[str, Any]:
        """Resumable reference stored on the game session."""
        child = self.vars.get("child")
        return {"eventId": self.event.id, "stageId": self.stage_id,
                "childId": child.id if child else None}


@dataclass
class ChoiceView:
    id: str
    label: str
    disabled: bool = False
    reason: str = ""
    goto: str | None = None


@dataclass
class StageView:
    title: str
    text: str
    choices: list[ChoiceView] = field(default_factory=list)


@dataclass
class ChoiceResult:
    done: bool
