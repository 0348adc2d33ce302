"""trail/engine.py — One object that wires every trail system together.

Usage (a UI, or ``main.py``'s autoplay)::

    engine = TrailEngine(GameSession.new_game(seed=42, store=SlotStore(0)))
    report = engine.travel()
    ev = engine.maybe_trigger_event()
    if report.blocked_at:
        engine.try_method(report.blocked_at, "wait")

Each engine shares the same ``Catalogs`` context and the session's RNG,
so the whole playthrough is one reproducible stream.
"""

from __future__ import annotations

from components.catalog import Landmark
from components.events import ChoiceResult, EventSession, StageView
from components.trail import DaySummary, Modifiers, WeatherToday
from core.catalogs import Catalogs
from core.session import GameSession
from trail import hazards as hz
from trail.events import EventEngine
from trail.hazards import CrossingResult, Hazard, HazardResolver, MethodOption
from trail.hunting import (
    HuntSession, HuntSummary, apply_hunt_summary, can_hunt_today, create_hunt_session,
)
from trail.journey import Route, TravelReport, blocked_at, check_game_over, travel_day
from trail.scoring import ScoreBreakdown, compute_score
from trail.shop import ShopOffer, build_shop_catalog, purchase
from trail.status import StatusTracker
from trail.travel import DayResolver, buff_mult
from trail.weather import WeatherRoller


class TrailEngine:
    def __init__(self, session: GameSession, catalogs: Catalogs | None = None):
        self.session = session
        self.catalogs = catalogs or Catalogs()
        self.weather = WeatherRoller(self.catalogs)
        self.status = StatusTracker(self.catalogs)
        self.days = DayResolver(self.catalogs, self.weather, self.status)
        self.events = EventEngine(self.catalogs)
        self.hazards = HazardResolver(self.days.apply_rest_day)
        self.route = Route(self.catalogs.landmarks())

    # ── Weather / status ─────────────────────────────────────────────

    def roll_for_day(self, day: int | None = None) -> WeatherToday:
        return self.weather.roll_for_day(self.session, self.session.day if day is None else day)

    def get_modifiers_for_today(self) -> Modifiers:
        return self.weather.get_modifiers_for_today(self.session)

    def describe_today(self) -> str:
        return self.weather.describe_today(self.session)

    def tick_and_maybe_acquire(self):
        return self.status.tick_and_maybe_acquire(self.session)

    def get_aggregated_modifiers(self) -> Modifiers:
        return self.status.get_aggregated_modifiers(self.session)

    def apply_group_health_delta(self, delta: int, reason: str = "") -> None:
        self.status.apply_group_health_delta(self.session, delta, reason)

    def list_active(self) -> list[dict]:
        return self.status.list_active(self.session)

    # ── Days ─────────────────────────────────────────────────────────

    def apply_travel_day(self) -> DaySummary:
        return self.days.apply_travel_day(self.session)

    def apply_rest_day(self) -> DaySummary:
        return self.days.apply_rest_day(self.session)

    def miles_per_day(self) -> float:
        return self.days.miles_per_day(self.session)

    def buff_mult(self, key: str) -> float:
        return buff_mult(self.session, key)

    def travel(self) -> TravelReport:
        return travel_day(self.session, self.days, self.route)

    def blocked_at(self) -> Landmark | None:
        return blocked_at(self.session, self.route)

    def check_game_over(self) -> str | None:
        return check_game_over(self.session, self.route)

    def compute_score(self) -> ScoreBreakdown:
        return compute_score(self.session, self.route.total_trail_miles)

    # ── Events ───────────────────────────────────────────────────────

    def maybe_trigger_event(self) -> EventSession | None:
        return self.events.maybe_trigger_event(self.session)

    def resume_event(self) -> EventSession | None:
        return self.events.resume_event(self.session)

    def render_stage(self, ev: EventSession) -> StageView:
        return self.events.render_stage(ev, self.session)

    def choose(self, ev: EventSession, choice_id: str) -> ChoiceResult:
        return self.events.choose(ev, choice_id, self.session)

    # ── Hazards ──────────────────────────────────────────────────────

    def get_hazard_state(self, landmark: Landmark) -> Hazard:
        return self.hazards.get_hazard_state(self.session, landmark)

    def list_methods(self, landmark: Landmark) -> list[MethodOption]:
        return self.hazards.list_methods(self.get_hazard_state(landmark))

    def try_method(self, landmark: Landmark, method_id: str) -> CrossingResult:
        return self.hazards.try_method(self.session, landmark, method_id)

    def describe_hazard(self, landmark: Landmark) -> tuple[str, str]:
        """(intro flavor, parameter line) for the crossing screen."""
        state = self.get_hazard_state(landmark)
        return hz.flavor_intro(state), hz.describe_params(state)

    # ── Hunting / shop ───────────────────────────────────────────────

    def can_hunt_today(self) -> bool:
        return can_hunt_today(self.session)

    def create_hunt_session(self, width: int = 640, height: int = 360,
                            duration_sec: float | None = None,
                            carry_cap_lb: float | None = None) -> HuntSession:
        return create_hunt_session(self.session, self.catalogs, width, height,
                                   duration_sec=duration_sec, carry_cap_lb=carry_cap_lb)

    def finish_hunt(self, hunt: HuntSession) -> HuntSummary:
        summary = hunt.end()
        apply_hunt_summary(self.session, summary, self.catalogs)
        return summary

    def shop(self) -> list[ShopOffer]:
        return build_shop_catalog(self.session, self.catalogs, self.route)

    def buy(self, quantities: dict[str, int], where: str = "the store") -> bool:
        return purchase(self.session, self.shop(), quantities, where)
