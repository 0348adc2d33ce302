"""trail/scoring.py — Final score for the end screen."""

from __future__ import annotations
from dataclasses import dataclass

from core.numeric import round_half_up
from core.session import GameSession

SUPPLY_VALUES = {
    "food": 1.2, "bullets": 2, "clothes": 75,
    "wheel": 60, "axle": 60, "tongue": 60,
    "medicine": 85,
}


@dataclass
class ScoreBreakdown:
    total: int
    base: int
    alive_bonus: int
    cash_bonus: int
    supplies_value: int
    day_penalty: int
    casualty_penalty: int


def compute_score(session: GameSession, total_miles: float) -> ScoreBreakdown:
    miles = max(0, round_half_up(session.miles))
    days = max(0, session.day - 1)
    survivors = session.alive_count()
    casualties = max(0, len(session.party) - survivors)
    money = max(0, round_half_up(session.money))
    supplies = round_half_up(sum(max(0.0, session.item(k)) * v for k, v in SUPPLY_VALUES.items()))

    base = miles * 10
    alive_bonus = survivors * 1200
    cash_bonus = money * 6
    expected_days = max(0, round_half_up((total_miles if total_miles > 0 else miles) / 12))
    day_penalty = max(0, (days - expected_days) * 15)
    casualty_penalty = casualties * 500
    total = max(0, base + alive_bonus + cash_bonus + supplies - day_penalty - casualty_penalty)
    return ScoreBreakdown(total=total, base=base, alive_bonus=alive_bonus,
                          cash_bonus=cash_bonus, supplies_value=supplies,
                          day_penalty=day_penalty, casualty_penalty=casualty_penalty)
