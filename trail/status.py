"""trail/status.py — Light-hearted party conditions ("diseases").

Per-day lifecycle run by day resolution:

  1. every active condition loses a day; those reaching 0 recover and
     stamp ``history[id]["lastEndDay"]``
  2. below the concurrency cap, one ``baseDailyAcquireChance`` roll may
     add a new condition, picked by weight among those past their
     ``minDay`` and cooldown and not already active

Conditions stack multiplicatively on speed and appetite, and each may
roll a −1 party health hit per day.
"""

from __future__ import annotations

from components.party import MAX_HEALTH
from components.trail import ConditionEffects, ConditionInstance, Modifiers
from core.catalogs import Catalogs
from core.rng import randint_incl, weighted_pick
from core.session import GameSession


class StatusTracker:
    def __init__(self, catalogs: Catalogs):
        self.catalogs = catalogs

    def tick_and_maybe_acquire(self, session: GameSession) -> list[ConditionInstance]:
        """Run one day of the lifecycle.  Returns the conditions that ended."""
        cfg = self.catalogs.status_config()
        book = session.status
        today = session.day

        recovered: list[ConditionInstance] = []
        for cond in book.conditions:
            cond.days_remaining = max(0, cond.days_remaining - 1)
            if cond.days_remaining <= 0:
                recovered.append(cond)
        if recovered:
            for cond in recovered:
                book.history.setdefault(cond.id, {})["lastEndDay"] = today
                session.log_line(f"{cond.emoji} Recovered from {cond.name}.")
            book.conditions = [c for c in book.conditions if c.days_remaining > 0]

        if len(book.conditions) < cfg.max_concurrent:
            if session.rng.next() < cfg.base_daily_acquire_chance:
                eligible = [
                    c for c in cfg.conditions
                    if today >= c.min_day
                    and today - book.last_end_day(c.id) >= c.cooldown_days
                    and not book.is_active(c.id)
                ]
                pick = weighted_pick(session.rng, eligible, lambda c: c.weight)
                if pick is not None:
                    lo, hi = pick.duration_days
                    days = max(1, randint_incl(session.rng, lo, hi))
                    inst = ConditionInstance(
                        id=pick.id, name=pick.name, emoji=pick.emoji, kind=pick.kind,
                        days_remaining=days,
                        effects=ConditionEffects(pick.effects.speed_mult,
                                                 pick.effects.hunger_mult,
                                                 pick.effects.health_chance_per_day),
                        blurb=pick.blurb,
                    )
                    book.conditions.append(inst)
                    session.log_line(f"{inst.emoji} {inst.name} — {inst.blurb} "
                                     f"({days} day{'s' if days > 1 else ''}).")

        return recovered

    def get_aggregated_modifiers(self, session: GameSession) -> Modifiers:
        """Product of speed/appetite effects, plus today's rolled health hits."""
        mods = Modifiers()
        for cond in session.status.conditions:
            e = cond.effects
            mods.speed_mult *= e.speed_mult
            mods.hunger_mult *= e.hunger_mult
            p = min(1.0, max(0.0, e.health_chance_per_day))
            if p > 0 and session.rng.next() < p:
                mods.health_delta -= 1
        return mods

    def apply_group_health_delta(self, session: GameSession, delta: int, reason: str = "") -> None:
        delta = int(delta)
        if not delta:
            return
        why = f" ({reason})" if reason else ""
        for m in session.party:
            if not m.alive:
                continue
            if m.set_health(min(MAX_HEALTH, m.health + delta)):
                session.log_line(f"{m.name} died{why}.")
        if delta > 0:
            session.log_line(f"Party recovered {delta} health each{why}.")
        else:
            session.log_line(f"Party lost {-delta} health each{why}.")

    def list_active(self, session: GameSession) -> list[dict]:
        return [
            {"id": c.id, "name": c.name, "emoji": c.emoji,
             "daysRemaining": c.days_remaining, "blurb": c.blurb}
            for c in session.status.conditions
        ]
