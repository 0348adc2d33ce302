"""trail/journey.py — The route: landmarks, travel days and the finish line."""

from __future__ import annotations
from dataclasses import dataclass, field

from components.catalog import Landmark
from components.trail import DaySummary
from core.session import GameSession
from trail.hazards import HAZARD_KINDS
from trail.travel import DayResolver

DEFAULT_TRAIL_MILES = 1000.0


class Route:
    """Landmarks sorted by mile."""

    def __init__(self, landmarks):
        self.landmarks: tuple[Landmark, ...] = tuple(sorted(landmarks, key=lambda lm: lm.mile))

    @property
    def total_trail_miles(self) -> float:
        return self.landmarks[-1].mile if self.landmarks else DEFAULT_TRAIL_MILES

    def next_landmark(self, miles: float) -> Landmark | None:
        return next((lm for lm in self.landmarks if lm.mile > miles), None)

    def landmarks_crossed(self, start: float, end: float) -> list[Landmark]:
        return [lm for lm in self.landmarks if start < lm.mile <= end]

    def find_landmark(self, landmark_id: str) -> Landmark | None:
        return next((lm for lm in self.landmarks if lm.id == landmark_id), None)

    @staticmethod
    def services_for(landmark: Landmark | None) -> set[str]:
        return set(landmark.services) if landmark else set()


def has_hazard(landmark: Landmark) -> bool:
    return bool(landmark.hazard) and landmark.hazard.get("kind") in HAZARD_KINDS


def blocked_at(session: GameSession, route: Route) -> Landmark | None:
    lm_id = session.flags.get("atLandmarkId")
    return route.find_landmark(lm_id) if lm_id else None


@dataclass
class TravelReport:
    summary: DaySummary | None
    reached: list[Landmark] = field(default_factory=list)
    blocked_at: Landmark | None = None


def travel_day(session: GameSession, resolver: DayResolver, route: Route) -> TravelReport:
    """One travel day, reporting the landmarks reached.

    A party parked at a hazard doesn't move; the hazard must be crossed
    first.  Reaching a hazard landmark parks the party there.
    """
    parked = blocked_at(session, route)
    if parked is not None and has_hazard(parked):
        return TravelReport(summary=None, blocked_at=parked)
    session.flags.pop("atLandmarkId", None)

    before = session.miles
    summary = resolver.apply_travel_day(session)
    reached = route.landmarks_crossed(before, session.miles)
    stop = None
    for lm in reached:
        session.log_line(f"Reached {lm.name}.")
        if stop is None and has_hazard(lm):
            stop = lm
    if stop is not None:
        session.flags["atLandmarkId"] = stop.id
    session.save()
    return TravelReport(summary=summary, reached=reached, blocked_at=stop)


def check_game_over(session: GameSession, route: Route) -> str | None:
    """Returns "party_dead", "completed", or None while the journey goes on."""
    if session.party and session.alive_count() == 0:
        return "party_dead"
    if session.miles >= route.total_trail_miles:
        return "completed"
    return None
