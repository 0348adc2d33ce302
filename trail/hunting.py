"""trail/hunting.py — Hunting mini-game logic (no drawing).

    hunt = create_hunt_session(session, catalogs, width=640, height=360)
    hunt.update(dt)                      # per frame, seconds
    hunt.shoot(x, y, now_ms)             # True on a hit
    summary = hunt.end()
    apply_hunt_summary(session, summary, catalogs)

Time advances in fixed 1/60 s ticks fed from an accumulator, so spawns
and movement depend only on total elapsed time and the RNG, never on
the caller's frame rate.  The field and the drawn creature boxes are
``pygame.Rect``s; shots test the unrounded box, edges included.

One hunt per in-game day (``flags.lastHuntDay``).  Anything shot past
the carry cap spoils on the spot.
"""

from __future__ import annotations
import math
from dataclasses import dataclass, field

import pygame

from components.catalog import AnimalDef
from core import tuning
from core.catalogs import Catalogs
from core.numeric import round_half_up
from core.rng import weighted_pick
from core.session import GameSession


TICK = 1.0 / 60.0

DURATION_SEC = 30
CARRY_CAP_LB = 100
SPAWN_EVERY_MIN = 0.8
SPAWN_EVERY_MAX = 1.6
SHOT_COOLDOWN_MS = 200
MESSY_SHOT_CHANCE = 0.15
MESSY_SHOT_LOSS_LB = 2


@dataclass
class Creature:
    species: AnimalDef
    x: float
    y: float
    vx: float
    bob_phase: float

    @property
    def w(self) -> int:
        return self.species.w

    @property
    def h(self) -> int:
        return self.species.h

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(round_half_up(self.x), round_half_up(self.y), self.w, self.h)

    def contains(self, x: float, y: float) -> bool:
        """Edge-inclusive test against the unrounded position."""
        return self.x <= x <= self.x + self.w and self.y <= y <= self.y + self.h


@dataclass
class HuntState:
    field: pygame.Rect
    duration_sec: int
    carry_cap_lb: int
    time_left: float
    bullets_start: int = 0
    bullets_used: int = 0
    meat_total: float = 0.0
    kills_by_id: dict[str, int] = field(default_factory=dict)
    creatures: list[Creature] = field(default_factory=list)
    last_shot_at: float | None = None
    ended: bool = False
    ticks: int = 0
    tick_budget: int = 0


@dataclass
class HuntSummary:
    duration_sec: int
    carry_cap_lb: int
    bullets_used: int
    meat_total: int
    meat_taken: int
    spoiled: int
    kills_by_id: dict[str, int]


class HuntSession:
    def __init__(self, session: GameSession, animals: tuple[AnimalDef, ...],
                 width: int, height: int,
                 duration_sec: float | None = None, carry_cap_lb: float | None = None):
        self.session = session
        self.animals = animals
        duration = DURATION_SEC if duration_sec is None else duration_sec
        cap = CARRY_CAP_LB if carry_cap_lb is None else carry_cap_lb
        self.spawn_min = float(tuning.get("hunting", "spawn_every_min", SPAWN_EVERY_MIN))
        self.spawn_max = float(tuning.get("hunting", "spawn_every_max", SPAWN_EVERY_MAX))
        self.shot_cooldown_ms = float(tuning.get("hunting", "shot_cooldown_ms", SHOT_COOLDOWN_MS))
        self.state = HuntState(
            field=pygame.Rect(0, 0, max(320, math.floor(width)), max(180, math.floor(height))),
            duration_sec=max(5, math.floor(duration)),
            carry_cap_lb=max(10, math.floor(cap)),
            time_left=0.0,
            bullets_start=int(session.item("bullets")),
        )
        self.state.tick_budget = round(self.state.duration_sec / TICK)
        self.state.time_left = float(self.state.duration_sec)
        self._acc = 0.0
        self._spawn_in = self._next_spawn()

    # ── clock ────────────────────────────────────────────────────────

    def update(self, dt: float) -> None:
        st = self.state
        if st.ended:
            return
        self._acc += max(0.0, dt)
        while self._acc >= TICK and st.ticks < st.tick_budget:
            self._acc -= TICK
            self._tick()

    def _tick(self) -> None:
        st = self.state
        st.ticks += 1
        st.time_left = (st.tick_budget - st.ticks) * TICK

        self._spawn_in -= TICK
        if self._spawn_in <= 0:
            self._spawn_one()
            self._spawn_in += self._next_spawn()

        for c in st.creatures:
            c.x += c.vx * TICK
            c.y += math.sin(c.bob_phase + c.x * 0.01) * 0.1

        width = st.field.width
        st.creatures = [c for c in st.creatures if -c.w - 8 < c.x < width + c.w + 8]

    def _next_spawn(self) -> float:
        return self.spawn_min + (self.spawn_max - self.spawn_min) * self.session.rng.next()

    def _spawn_one(self) -> None:
        rng = self.session.rng
        species = weighted_pick(rng, self.animals, lambda a: a.spawn_weight)
        if species is None:
            return
        from_left = rng.next() < 0.5
        height = self.state.field.height
        y = round_half_up(20 + (height - 40) * rng.next())
        x = -species.w if from_left else self.state.field.width + species.w
        vx = species.speed if from_left else -species.speed
        self.state.creatures.append(
            Creature(species=species, x=x, y=y, vx=vx, bob_phase=rng.next() * math.pi * 2))

    # ── actions ──────────────────────────────────────────────────────

    def shoot(self, x: float, y: float, now_ms: float) -> bool:
        """Fire at (x, y).  Returns True only on a hit."""
        st = self.state
        if st.ended or st.time_left <= 0:
            return False
        bullets = self.session.item("bullets")
        if bullets <= 0:
            return False
        if st.last_shot_at is not None and now_ms - st.last_shot_at < self.shot_cooldown_ms:
            return False

        self.session.add_item("bullets", -1)
        st.bullets_used += 1
        st.last_shot_at = now_ms

        hits = [c for c in st.creatures if c.contains(x, y)]
        if not hits:
            return False
        target = min(hits, key=lambda c: c.w * c.h)
        st.creatures.remove(target)
        st.meat_total += max(0.0, target.species.yield_lb)
        st.kills_by_id[target.species.id] = st.kills_by_id.get(target.species.id, 0) + 1
        if self.session.rng.next() < MESSY_SHOT_CHANCE:
            st.meat_total = max(0.0, st.meat_total - MESSY_SHOT_LOSS_LB)
        return True

    def end(self) -> HuntSummary:
        st = self.state
        st.ended = True
        carry = min(st.meat_total, st.carry_cap_lb)
        spoiled = max(0.0, st.meat_total - carry)
        return HuntSummary(
            duration_sec=st.duration_sec,
            carry_cap_lb=st.carry_cap_lb,
            bullets_used=st.bullets_used,
            meat_total=round_half_up(st.meat_total),
            meat_taken=round_half_up(carry),
            spoiled=round_half_up(spoiled),
            kills_by_id=dict(st.kills_by_id),
        )


def create_hunt_session(session: GameSession, catalogs: Catalogs,
                        width: int = 640, height: int = 360,
                        duration_sec: float | None = None,
                        carry_cap_lb: float | None = None) -> HuntSession:
    return HuntSession(session, catalogs.animals(), width, height,
                       duration_sec=duration_sec, carry_cap_lb=carry_cap_lb)


def can_hunt_today(session: GameSession) -> bool:
    return session.flags.get("lastHuntDay") != session.day


def apply_hunt_summary(session: GameSession, summary: HuntSummary,
                       catalogs: Catalogs | None = None) -> str:
    """Stow the carried meat, mark today as hunted and log the outcome."""
    names = {a.id: a.name for a in catalogs.animals()} if catalogs else {}
    session.add_item("food", summary.meat_taken)
    session.flags["lastHuntDay"] = session.day
    parts = [f"{n}× {names.get(sid, sid)}" for sid, n in summary.kills_by_id.items() if n > 0]
    line = (f"Hunt: {', '.join(parts) or 'no hits'}. "
            f"Meat: {summary.meat_taken} lb (spoiled {summary.spoiled} lb). "
            f"Bullets used: {summary.bullets_used}.")
    session.log_line(line)
    session.save()
    return line
