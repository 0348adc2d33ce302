"""trail/hazards.py — Crossing hazards: rivers and other obstacles.

A landmark may carry an authored ``hazard = {kind = "...", ...}``.  The
first time the party reaches it, that template is copied into
``session.hazards[landmark.id]`` as one of the variants below; waiting
erodes the copy's severity and the change persists across attempts.

While ``flags.atLandmarkId`` names the landmark the party is parked.
Every kind offers the same five methods:

  drive    cheap gamble; success ``rng.next() < estimate_success``
  prep     better odds, some cost (tarp, shovel, bread, rocks)
  service  pay someone and lose a day or more; always works
  wait     one day passes and the hazard gets milder; never crosses
  detour   lose days (and maybe money); always crosses

Every day spent here is a full rest day (food, weather, conditions).
"""

from __future__ import annotations
import copy
from dataclasses import dataclass, fields
from typing import Any, ClassVar

from components.catalog import Landmark
from core.numeric import clamp, round_half_up
from core.session import GameSession

HAZARD_KINDS = ("river", "mud", "snow", "geese", "beaver")
METHOD_IDS = ("drive", "prep", "service", "wait", "detour")

UNSURE = "Unsure what to do here."
UNUSUAL = "This obstacle looks unusual. Best detour."


@dataclass
class CrossingResult:
    resolved: bool = False
    crossed: bool = False
    text: str = ""


@dataclass
class MethodOption:
    id: str
    label: str
    est_hint: str = ""


def rate_label(p: float | None) -> str:
    if p is None:
        return ""
    if p >= 0.75:
        return "Good"
    if p >= 0.5:
        return "Fair"
    return "Poor"


def _num(value: Any, default: float) -> float:
    """Authored number, with 0/missing/garbage meaning "use the default"."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    return v or default


# ── One attempt's context ────────────────────────────────────────────

class Crossing:
    """Helpers shared by every hazard kind while resolving one attempt."""

    def __init__(self, session: GameSession, landmark: Landmark, rest_day):
        self.session = session
        self.landmark = landmark
        self._rest_day = rest_day

    @property
    def rng(self):
        return self.session.rng

    def roll(self, p: float | None) -> bool:
        if p is None:
            return False
        return self.rng.next() < p

    def log(self, text: str) -> None:
        self.session.log_line(text)

    def spend_days(self, days: int, label: str) -> None:
        days = max(0, int(days))
        for _ in range(days):
            self._rest_day(self.session)
        if days > 0:
            self.log(f"{label} ({days} day{'s' if days > 1 else ''}).")

    def spend_money(self, fee: float) -> None:
        self.session.money = max(0.0, self.session.money - fee)

    def ding_health(self, delta: int = -1) -> None:
        alive = self.session.alive_members()
        if not alive:
            return
        m = alive[self.rng.next_int(len(alive))]
        if m.set_health(m.health + delta):
            self.log(f"{m.name} died.")

    def maybe_nick_part(self, chance: float = 0.3) -> None:
        if not self.roll(chance):
            return
        parts = ("wheel", "axle", "tongue")
        part = parts[self.rng.next_int(len(parts))]
        if self.session.item(part) > 0:
            self.session.add_item(part, -1)
            self.log(f"Lost a {part}.")

    def clear_block(self) -> None:
        if self.session.flags.get("atLandmarkId") == self.landmark.id:
            del self.session.flags["atLandmarkId"]
        self.session.save()

    def crossed(self, text: str, log: str | None = None) -> CrossingResult:
        self.clear_block()
        if log:
            self.log(log)
        return CrossingResult(resolved=True, crossed=True, text=text)

    @staticmethod
    def stuck(text: str) -> CrossingResult:
        return CrossingResult(resolved=False, crossed=False, text=text)


# ── Variants ─────────────────────────────────────────────────────────

class Hazard:
    """Base for the hazard variants.  Subclasses are dataclasses whose
    fields map to camelCase keys via ``_KEYS``."""
    kind: ClassVar[str] = ""
    LABELS: ClassVar[dict[str, str]] = {}
    _KEYS: ClassVar[dict[str, str]] = {}

    def methods(self) -> list[MethodOption]:
        out = []
        for mid in METHOD_IDS:
            if mid not in self.LABELS:
                continue
            p = self.estimate_success(mid)
            hint = f" (est. {rate_label(p)})" if p is not None else ""
            out.append(MethodOption(mid, self.LABELS[mid], hint))
        return out

    def estimate_success(self, method: str) -> float | None:
        return None

    def attempt(self, c: Crossing, method: str) -> CrossingResult:
        handler = getattr(self, f"_{method}", None) if method in METHOD_IDS else None
        if handler is None:
            return Crossing.stuck(UNSURE)
        return handler(c)

    def describe(self) -> str:
        return ""

    def intro(self) -> str:
        return ""

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"kind": self.kind}
        for f in fields(self):
            d[self._KEYS.get(f.name, f.name)] = getattr(self, f.name)
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "Hazard":
        keys = {v: k for k, v in cls._KEYS.items()}
        kwargs = {keys[k]: v for k, v in d.items() if k in keys}
        return cls(**kwargs)


@dataclass
class RiverHazard(Hazard):
    depth_ft: float = 2.0
    width_ft: float = 150.0
    current: str = "moderate"          # slow | moderate | fast

    kind: ClassVar[str] = "river"
    _KEYS: ClassVar[dict[str, str]] = {"depth_ft": "depthFt", "width_ft": "widthFt",
                                       "current": "current"}
    LABELS: ClassVar[dict[str, str]] = {
        "drive": "Drive through",
        "prep": "Tarp the engine & creep",
        "service": "Pay the ferry",
        "wait": "Wait a day",
        "detour": "Detour via the American side",
    }

    def __post_init__(self):
        self.depth_ft = _num(self.depth_ft, 2.0)
        self.width_ft = _num(self.width_ft, 150.0)
        self.current = str(self.current or "moderate")

    def _penalties(self) -> tuple[float, float]:
        w = self.width_ft
        width_penalty = 0.08 if w > 300 else 0.05 if w > 200 else 0.0
        flow_penalty = 0.15 if self.current == "fast" else -0.05 if self.current == "slow" else 0.0
        return width_penalty, flow_penalty

    def estimate_success(self, method: str) -> float | None:
        width_penalty, flow_penalty = self._penalties()
        depth = self.depth_ft
        if method == "drive":
            base = 0.70 if depth < 2 else 0.40 if depth < 3 else 0.15
            return clamp(base - width_penalty - max(0.0, flow_penalty), 0.05, 0.9)
        if method == "prep":
            base = 0.85
            if depth > 3:
                base -= 0.05 * (depth - 3)
            flow = flow_penalty * 0.6 if flow_penalty > 0 else 0.0
            return clamp(base - width_penalty - flow, 0.1, 0.95)
        if method == "service":
            return 0.95
        return None

    def _fail(self, c: Crossing, reason: str) -> None:
        c.spend_days(1, "Drying out after river stall")
        food_loss = 5 + c.rng.next_int(11)
        c.session.add_item("food", -food_loss)
        if c.roll(0.4) and c.session.item("clothes") > 0:
            c.session.add_item("clothes", -1)
        if c.roll(0.3) and c.session.item("bullets") > 0:
            c.session.add_item("bullets", -3)
        c.maybe_nick_part()
        c.ding_health(-1)
        c.log(f"{reason} Lost {food_loss} lb food. Everyone’s damp.")

    def _drive(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("drive")):
            return c.crossed("You ease in, water at the doors, but the engine holds. Onward.",
                             f"Crossed {c.landmark.name} by driving through.")
        self._fail(c, "The car coughs and stalls mid‑flow.")
        return c.stuck("Stalled in the current. Soaked and grumpy, you drag it back to the bank.")

    def _prep(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("prep")):
            return c.crossed("Tarp on, crawl in low gear, a polite stream of victory.",
                             f"Crossed {c.landmark.name} after tarping & creeping.")
        self._fail(c, "Water slips past the tarp.")
        return c.stuck("A slosh finds the air intake. Back to dry things out.")

    def _service(self, c: Crossing) -> CrossingResult:
        fee = 6 + (self.width_ft / 100) * 2 + self.depth_ft * 1.5 + c.rng.next_int(4)
        days = 1 + c.rng.next_int(3)
        c.spend_money(fee)
        c.spend_days(days, f"Ferry queue at {c.landmark.name}")
        if not c.roll(0.98):
            c.maybe_nick_part()
        return c.crossed(
            "A flat‑deck ferry mutters across. Someone offers you a Timbit. Civilization!",
            f"Ferry across {c.landmark.name} (${fee:.2f}, {days} day{'s' if days > 1 else ''}).")

    def _wait(self, c: Crossing) -> CrossingResult:
        c.spend_days(1, f"Waiting at {c.landmark.name}")
        self.depth_ft = max(0.5, self.depth_ft - 0.5)
        if self.current == "fast" and c.rng.next() < 0.4:
            self.current = "moderate"
        return c.stuck("You wait a day. The river drops a little.")

    def _detour(self, c: Crossing) -> CrossingResult:
        days = 2 + c.rng.next_int(3)
        fee = 5 + c.rng.next_int(11)
        c.spend_money(fee)
        c.spend_days(days, "Scenic detour through America")
        return c.crossed("A quick hello to the land of bottomless soda, then back into the pines.",
                         f"Detoured around {c.landmark.name} (${fee:.2f}, {days} days).")

    def describe(self) -> str:
        return f"Depth {self.depth_ft:.1f} ft · Width {self.width_ft:.0f} ft · Current {self.current}"

    def intro(self) -> str:
        return "A proud ribbon of water insists the road ends here."


@dataclass
class MudHazard(Hazard):
    badness: float = 0.6               # 0 easy .. 1 awful

    kind: ClassVar[str] = "mud"
    _KEYS: ClassVar[dict[str, str]] = {"badness": "badness"}
    LABELS: ClassVar[dict[str, str]] = {
        "drive": "Gun it through the gumbo",
        "prep": "Low gear & careful crawl",
        "service": "Flag a farmer’s tractor",
        "wait": "Wait for sun/wind",
        "detour": "Detour on gravel road",
    }

    def __post_init__(self):
        try:
            bad = float(self.badness)
        except (TypeError, ValueError):
            bad = 0.6
        self.badness = clamp(bad, 0.0, 1.0)

    def estimate_success(self, method: str) -> float | None:
        if method == "drive":
            return clamp(0.2 + 0.6 * (1 - self.badness), 0.05, 0.9)
        if method == "prep":
            return clamp(0.55 + 0.35 * (1 - self.badness), 0.2, 0.95)
        if method == "service":
            return 0.95
        return None

    def _drive(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("drive")):
            return c.crossed("Mud flies. Somehow traction happens.",
                             f"Powered through gumbo at {c.landmark.name}.")
        c.spend_days(1, "Stuck in mud")
        c.maybe_nick_part(0.4)
        c.ding_health(-1)
        return c.stuck("Wheels spin to clay saucers. You haul branches and swear softly.")

    def _prep(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("prep")):
            return c.crossed("Low gear, patient steering, a humble victory.",
                             f"Crawled through mud at {c.landmark.name}.")
        c.spend_days(1, "Creeping & digging")
        if c.roll(0.25):
            c.maybe_nick_part(0.3)
        return c.stuck("Almost… then a rut swallows the wheel. More digging tomorrow?")

    def _service(self, c: Crossing) -> CrossingResult:
        fee = 10 + c.rng.next_int(15)
        c.spend_money(fee)
        c.spend_days(1, "Waiting on a tractor")
        return c.crossed("A farmer in coveralls smiles and hooks a chain to your pride.",
                         f"Tractor pull at {c.landmark.name} (${fee:.2f}).")

    def _wait(self, c: Crossing) -> CrossingResult:
        c.spend_days(1, f"Waiting for sun at {c.landmark.name}")
        self.badness = clamp(self.badness - 0.2, 0.0, 1.0)
        return c.stuck("The top crust dries. It might hold tomorrow.")

    def _detour(self, c: Crossing) -> CrossingResult:
        days = 1 + c.rng.next_int(2)
        c.spend_days(days, "Gravel detour")
        return c.crossed("A scenic road past hay bales and one confused cow.")

    def describe(self) -> str:
        return f"Gumbo badness {self.badness:.2f} (0 good → 1 awful)"

    def intro(self) -> str:
        return "The prairie becomes glue. Locals call it gumbo with a straight face."


@dataclass
class SnowHazard(Hazard):
    drift_ft: float = 2.0

    kind: ClassVar[str] = "snow"
    _KEYS: ClassVar[dict[str, str]] = {"drift_ft": "driftFt"}
    LABELS: ClassVar[dict[str, str]] = {
        "drive": "Punch through the drift",
        "prep": "Shovel a path",
        "service": "Hire a plow escort",
        "wait": "Wait for the wind to drop",
        "detour": "Detour to cleared lanes",
    }

    def __post_init__(self):
        self.drift_ft = max(0.5, _num(self.drift_ft, 2.0))

    def estimate_success(self, method: str) -> float | None:
        h = self.drift_ft
        if method == "drive":
            return 0.45 if h < 1.5 else 0.25
        if method == "prep":
            return clamp(0.9 - 0.2 * (h - 1), 0.3, 0.95)
        if method == "service":
            return 0.98
        return None

    def _drive(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("drive")):
            return c.crossed("The car surfs a powdery wave. Everyone cheers, politely.",
                             f"Punched through drift at {c.landmark.name}.")
        c.spend_days(1, "Hung up on packed snow")
        if c.roll(0.35):
            c.maybe_nick_part(0.5)
        c.ding_health(-1)
        return c.stuck("You high‑center on icy ruts. Toes complain.")

    def _prep(self, c: Crossing) -> CrossingResult:
        p = self.estimate_success("prep")
        c.spend_days(1, "Shoveling a path")
        if c.roll(p):
            return c.crossed("Backs ache, but the lane holds.",
                             f"Shoveled through drift at {c.landmark.name}.")
        return c.stuck("The wind fills your work. Maybe try again.")

    def _service(self, c: Crossing) -> CrossingResult:
        fee = 12 + c.rng.next_int(20)
        c.spend_money(fee)
        c.spend_days(1, "Waiting on plow escort")
        return c.crossed("A snowplow rumbles ahead like a metal moose.",
                         f"Plow escort at {c.landmark.name} (${fee:.2f}).")

    def _wait(self, c: Crossing) -> CrossingResult:
        c.spend_days(1, f"Waiting for wind to drop at {c.landmark.name}")
        self.drift_ft = max(0.5, self.drift_ft - 0.5)
        return c.stuck("The drift slumps a little.")

    def _detour(self, c: Crossing) -> CrossingResult:
        days = 1 + c.rng.next_int(3)
        c.spend_days(days, "Detour to cleared lanes")
        return c.crossed("You shadow a convoy of salt trucks. Brine everywhere.")

    def describe(self) -> str:
        return f"Drift {self.drift_ft:.1f} ft"

    def intro(self) -> str:
        return "A wind‑packed drift squats across the highway like a sleeping mammoth."


@dataclass
class GeeseHazard(Hazard):
    flock: float = 60

    kind: ClassVar[str] = "geese"
    _KEYS: ClassVar[dict[str, str]] = {"flock": "flock"}
    LABELS: ClassVar[dict[str, str]] = {
        "drive": "Honk & edge forward",
        "prep": "Bribe with bread (use food)",
        "service": "Call the park warden",
        "wait": "Wait out the flock",
        "detour": "Detour around the lake",
    }

    def __post_init__(self):
        self.flock = max(5, _num(self.flock, 60))

    def estimate_success(self, method: str) -> float | None:
        f = self.flock
        if method == "drive":
            return clamp(0.75 - f / 200, 0.2, 0.9)
        if method == "prep":
            return clamp(0.92 - f / 400, 0.4, 0.97)
        if method == "service":
            return 0.96
        return None

    def _drive(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("drive")):
            return c.crossed("Hiss‑to‑politeness ratio drops. You slide by.",
                             f"Inched past the geese at {c.landmark.name}.")
        c.spend_days(1, "Backing off angry geese")
        if c.roll(0.4):
            c.ding_health(-1)
        return c.stuck("A beaked diplomat pecks the bumper. Retreat.")

    def _prep(self, c: Crossing) -> CrossingResult:
        p = self.estimate_success("prep")
        spend = min(c.session.item("food"), 2 + c.rng.next_int(4))
        if spend >= 2:
            c.session.add_item("food", -spend)
        else:
            self.flock += 10
        if c.roll(p):
            return c.crossed("Bread diplomacy wins the day.",
                             f"Bribed the geese at {c.landmark.name} (−{spend:.1f} lb food).")
        return c.stuck("They demand more carbs. Stalemate.")

    def _service(self, c: Crossing) -> CrossingResult:
        fee = 5 + c.rng.next_int(8)
        c.spend_money(fee)
        c.spend_days(1, "Waiting on a park warden")
        return c.crossed("A whistle, a vest, authority. The flock yields.",
                         f"Warden shooed geese at {c.landmark.name} (${fee:.2f}).")

    def _wait(self, c: Crossing) -> CrossingResult:
        c.spend_days(1, f"Waiting for geese to wander at {c.landmark.name}")
        self.flock = max(5, round_half_up(self.flock * (0.4 + c.rng.next() * 0.2)))
        return c.stuck("Fewer geese now. Ground still suspicious.")

    def _detour(self, c: Crossing) -> CrossingResult:
        days = 1 + c.rng.next_int(2)
        c.spend_days(days, "Detour around the lake")
        return c.crossed("Boardwalk, reeds, and one heroic loon.")

    def describe(self) -> str:
        return f"Flock ~{self.flock:.0f} birds"

    def intro(self) -> str:
        return "Canada geese declare eminent domain and hiss in legalese."


@dataclass
class BeaverHazard(Hazard):
    gap_ft: float = 8.0                # missing planks / washout

    kind: ClassVar[str] = "beaver"
    _KEYS: ClassVar[dict[str, str]] = {"gap_ft": "gapFt"}
    LABELS: ClassVar[dict[str, str]] = {
        "drive": "Splash and bounce across",
        "prep": "Rock‑hop & push",
        "service": "Hire a canoe/floater",
        "wait": "Wait for fresh beaver dam",
        "detour": "Detour on logging road",
    }

    def __post_init__(self):
        self.gap_ft = max(2.0, _num(self.gap_ft, 8.0))

    def estimate_success(self, method: str) -> float | None:
        g = self.gap_ft
        if method == "drive":
            return 0.55 if g < 6 else 0.25
        if method == "prep":
            return clamp(0.75 - 0.05 * (g - 6), 0.25, 0.9)
        if method == "service":
            return 0.97
        return None

    def _drive(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("drive")):
            return c.crossed("A splash, a rattle, and somehow four wheels remain.",
                             f"Bounced through washout at {c.landmark.name}.")
        c.spend_days(1, "Backing out of flooded gap")
        c.maybe_nick_part(0.5)
        c.ding_health(-1)
        return c.stuck("Something clonks. You rethink your life choices.")

    def _prep(self, c: Crossing) -> CrossingResult:
        if c.roll(self.estimate_success("prep")):
            return c.crossed("People push, tires squirm, success tastes like river mist.",
                             f"Rock‑hopped across {c.landmark.name}.")
        c.spend_days(1, "Re‑stacking rocks")
        return c.stuck("The stack shifts. One more go?")

    def _service(self, c: Crossing) -> CrossingResult:
        fee = 12 + c.rng.next_int(14)
        c.spend_money(fee)
        c.spend_days(1, "Hiring a canoe/floater")
        return c.crossed("Locals nod, beavers stare, you cross.",
                         f"Canoe assist at {c.landmark.name} (${fee:.2f}).")

    def _wait(self, c: Crossing) -> CrossingResult:
        c.spend_days(1, f"Waiting for beavers at {c.landmark.name}")
        self.gap_ft = max(2.0, self.gap_ft - 2)
        return c.stuck("New sticks appear. Nature’s contractor at work.")

    def _detour(self, c: Crossing) -> CrossingResult:
        days = 1 + c.rng.next_int(3)
        c.spend_days(days, "Logging road detour")
        return c.crossed("You bounce past spruce and dust. Good times.")

    def describe(self) -> str:
        return f"Gap ~{self.gap_ft:.1f} ft (missing planks/washout)"

    def intro(self) -> str:
        return "A bridge meets beaver renovators; planks missing, water busy."


class UnknownHazard(Hazard):
    """An authored kind this build doesn't know.  Offers nothing."""

    def __init__(self, raw: dict[str, Any] | None = None):
        self.raw = dict(raw or {})

    @property
    def kind(self) -> str:                 # type: ignore[override]
        return str(self.raw.get("kind", ""))

    def attempt(self, c: Crossing, method: str) -> CrossingResult:
        return Crossing.stuck(UNUSUAL)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


_VARIANTS: dict[str, type[Hazard]] = {
    cls.kind: cls for cls in (RiverHazard, MudHazard, SnowHazard, GeeseHazard, BeaverHazard)
}


def hazard_from_dict(d: dict[str, Any]) -> Hazard:
    cls = _VARIANTS.get(str(d.get("kind", "")))
    if cls is None:
        return UnknownHazard(d)
    return cls.from_dict(d)


# ── Public surface ───────────────────────────────────────────────────

def estimate_success(hazard: Hazard, method: str) -> float | None:
    return hazard.estimate_success(method)


def describe_params(hazard: Hazard) -> str:
    return hazard.describe()


def flavor_intro(hazard: Hazard) -> str:
    return hazard.intro()


class HazardResolver:
    """Drives crossings.  ``rest_day`` is ``DayResolver.apply_rest_day``."""

    def __init__(self, rest_day):
        self.rest_day = rest_day

    def get_hazard_state(self, session: GameSession, landmark: Landmark) -> Hazard:
        hz = session.hazards.get(landmark.id)
        if hz is None:
            hz = hazard_from_dict(copy.deepcopy(landmark.hazard or {}))
            session.hazards[landmark.id] = hz
        return hz

    def list_methods(self, hazard: Hazard) -> list[MethodOption]:
        return hazard.methods()

    def try_method(self, session: GameSession, landmark: Landmark, method_id: str) -> CrossingResult:
        hz = self.get_hazard_state(session, landmark)
        if isinstance(hz, UnknownHazard):
            print(f"[HAZARD] {landmark.id}: unknown hazard kind {hz.kind!r}")
            return CrossingResult(text=UNUSUAL)
        session.flags["atLandmarkId"] = landmark.id
        return hz.attempt(Crossing(session, landmark, self.rest_day), method_id)
