"""trail/travel.py — Resolving one travel or rest day.

    miles   = round_half_up(pace_miles × weather.speed × status.speed)
    need    = round_half_up(alive × rations_lb × weather.hunger × status.hunger)
    health  = pace penalty + (starving −2 | resting well +1)
              + weather.healthDelta + status.healthDelta

Weather and conditions are resolved for the current day *before* the
day counter moves, so both are idempotent for that day.  Numbers come
from ``data/tuning.toml`` with the defaults below.
"""

from __future__ import annotations

from components.trail import DaySummary
from core import tuning
from core.catalogs import Catalogs
from core.numeric import round_half_up
from core.session import GameSession
from trail.status import StatusTracker
from trail.weather import WeatherRoller


PACES = ("steady", "strenuous", "grueling")
RATIONS = ("meager", "normal", "generous")

_PACE_MILES = {"steady": 15.0, "strenuous": 18.0, "grueling": 20.25}
_PACE_HEALTH = {"steady": 0, "strenuous": -1, "grueling": -2}
_RATIONS_LB = {"meager": 1.5, "normal": 2.0, "generous": 2.5}


def pace_miles(pace: str) -> float:
    if pace not in _PACE_MILES:
        pace = "steady"
    return float(tuning.get("travel.pace_miles", pace, _PACE_MILES[pace]))


def pace_health_penalty(pace: str) -> int:
    if pace not in _PACE_HEALTH:
        pace = "steady"
    return int(tuning.get("travel.pace_health", pace, _PACE_HEALTH[pace]))


def rations_lb(rations: str) -> float:
    if rations not in _RATIONS_LB:
        rations = "normal"
    return float(tuning.get("travel.rations_lb", rations, _RATIONS_LB[rations]))


# ── Buffs ────────────────────────────────────────────────────────────

def buff_mult(session: GameSession, key: str) -> float:
    """Active multiplier for *key*, or 1 when absent or expired."""
    buff = session.buffs.get(key)
    if buff is None or buff.until_day < session.day:
        return 1.0
    return buff.mult


def prune_buffs(session: GameSession) -> list[str]:
    expired = [k for k, b in session.buffs.items() if b.until_day < session.day]
    for k in expired:
        del session.buffs[k]
    return expired


# ── Day resolution ───────────────────────────────────────────────────

class DayResolver:
    def __init__(self, catalogs: Catalogs,
                 weather: WeatherRoller | None = None,
                 status: StatusTracker | None = None):
        self.catalogs = catalogs
        self.weather = weather or WeatherRoller(catalogs)
        self.status = status or StatusTracker(catalogs)

    def miles_per_day(self, session: GameSession) -> float:
        return pace_miles(session.settings.pace)

    def apply_travel_day(self, session: GameSession) -> DaySummary:
        return self._resolve(session, travelling=True)

    def apply_rest_day(self, session: GameSession) -> DaySummary:
        return self._resolve(session, travelling=False)

    def _resolve(self, session: GameSession, travelling: bool) -> DaySummary:
        day = session.day
        self.weather.roll_for_day(session, day)
        self.status.tick_and_maybe_acquire(session)
        wx = self.weather.get_modifiers_for_today(session)
        st = self.status.get_aggregated_modifiers(session)

        speed_mult = wx.speed_mult * st.speed_mult
        appetite_mult = wx.hunger_mult * st.hunger_mult
        pace = session.settings.pace
        rations = session.settings.rations

        miles = round_half_up(pace_miles(pace) * speed_mult) if travelling else 0
        miles = max(0, miles)

        alive = session.alive_count()
        need = round_half_up(alive * rations_lb(rations) * appetite_mult) if alive else 0
        food = session.item("food")
        consumed = min(food, need)
        starvation = consumed < need

        delta = pace_health_penalty(pace) if travelling else 0
        if starvation:
            delta += int(tuning.get("travel", "starvation_health", -2))
        elif not travelling and rations in ("normal", "generous"):
            delta += int(tuning.get("travel", "rest_health", 1))
        delta += wx.health_delta + st.health_delta

        if alive:
            self.status.apply_group_health_delta(
                session, delta, "starvation" if starvation else "")

        session.miles += miles
        session.add_item("food", -consumed)
        session.day = day + 1
        prune_buffs(session)

        meal = " Short on food." if starvation else " A full meal."
        lead = f"Traveled {miles} mi." if travelling else "Rested."
        session.log_line(f"Day {day}: {lead} Ate {consumed:.1f} lb.{meal} "
                         f"Health {'+' if delta >= 0 else ''}{delta}.")
        return DaySummary(miles_traveled=miles, food_consumed=consumed,
                          health_delta=delta, starvation=starvation)
