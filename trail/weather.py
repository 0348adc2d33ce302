"""trail/weather.py — Daily weather overlay.

One pattern is rolled per in-game day and cached on the session, so
re-asking for the same day (a redraw, a reload) never re-rolls or
re-logs.  The modifiers are consumed by day resolution.
"""

from __future__ import annotations

from components.trail import Modifiers, WeatherToday
from core.catalogs import Catalogs
from core.rng import weighted_pick
from core.session import GameSession


class WeatherRoller:
    def __init__(self, catalogs: Catalogs):
        self.catalogs = catalogs

    def roll_for_day(self, session: GameSession, day: int) -> WeatherToday:
        book = session.weather
        if book.last_rolled_day == day and book.today is not None:
            return book.today

        pattern = weighted_pick(session.rng, self.catalogs.weather(), lambda p: p.weight)
        book.last_rolled_day = day
        book.today = WeatherToday(
            day=day, id=pattern.id, name=pattern.name, emoji=pattern.emoji,
            blurb=pattern.blurb,
            mods=Modifiers(pattern.mods.speed_mult, pattern.mods.health_delta,
                           pattern.mods.hunger_mult),
        )
        session.log_line(f"Weather — {pattern.emoji} {pattern.name}: {pattern.blurb}")
        return book.today

    def get_modifiers_for_today(self, session: GameSession) -> Modifiers:
        today = session.weather.today
        if today is None:
            return Modifiers()
        m = today.mods
        return Modifiers(m.speed_mult, m.health_delta, m.hunger_mult)

    def describe_today(self, session: GameSession) -> str:
        today = session.weather.today
        if today is None:
            return "Weather — (unknown)"
        m = today.mods
        parts = []
        if m.speed_mult and m.speed_mult != 1:
            parts.append(f"speed×{m.speed_mult:.2f}")
        if m.health_delta:
            parts.append(f"health {'+' if m.health_delta > 0 else ''}{m.health_delta}")
        if m.hunger_mult and m.hunger_mult != 1:
            parts.append(f"appetite×{m.hunger_mult:.2f}")
        suffix = f" ({', '.join(parts)})" if parts else ""
        return f"Weather — {today.emoji} {today.name}{suffix}"
