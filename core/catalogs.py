"""core/catalogs.py — Immutable data catalogs, loaded once per context.

Each catalog lives in ``data/<name>.toml`` (a ``.json`` file with the
same name works too) and is parsed into the frozen records from
``components.catalog`` / ``components.events``:

    weather     [[patterns]]                 → WeatherPattern
    conditions  maxConcurrent, [[conditions]] → StatusConfig
    events      [[events]]                   → EventDef
    animals     [[animals]]                  → AnimalDef
    landmarks   [[landmarks]]                → Landmark (sorted by mile)
    items       [[items]]                    → ShopItem

Usage::

    catalogs = Catalogs()                 # reads data/ next to core/
    for p in catalogs.weather():
        ...

A ``Catalogs`` object owns its cache.  Engines receive it explicitly,
so two sessions (or two tests) never share loaded state.  A file that
is missing or malformed is replaced by a small built-in table; the
failure is printed and kept in ``catalogs.errors`` for a UI banner.
"""

from __future__ import annotations
import json
import threading
from enum import Enum
from pathlib import Path
from typing import Any, Callable

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli

from components.catalog import (
    AnimalDef, Landmark, ShopItem, StatusConfig, WeatherPattern,
)
from components.events import EventDef


DATA_DIR = Path(__file__).resolve().parent.parent / "data"


class LoadState(Enum):
    NOT_LOADED = "not_loaded"
    LOADED = "loaded"
    FALLBACK = "fallback"


class CatalogLoader:
    """Reads raw catalog documents from a data directory."""

    def __init__(self, data_dir: str | Path | None = None):
        self.data_dir = Path(data_dir) if data_dir is not None else DATA_DIR

    def path_for(self, name: str) -> Path:
        toml_path = self.data_dir / f"{name}.toml"
        if toml_path.exists():
            return toml_path
        json_path = self.data_dir / f"{name}.json"
        if json_path.exists():
            return json_path
        return toml_path

    def load(self, name: str) -> Any:
        """Return the parsed document for *name*.

        Raises ``FileNotFoundError`` when neither file exists and
        ``ValueError`` (TOML and JSON decode errors both are) on bad
        syntax.
        """
        path = self.path_for(name)
        if not path.exists():
            raise FileNotFoundError(f"{path} not found")
        if path.suffix == ".json":
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        with open(path, "rb") as f:
            return tomllib.load(f)


# ── Builders ─────────────────────────────────────────────────────────

def _array(raw: Any, key: str) -> list[dict[str, Any]]:
    """Accept either a bare array or a table holding ``key = [...]``."""
    if isinstance(raw, dict):
        raw = raw.get(key)
    if not isinstance(raw, list):
        raise ValueError(f"expected a '{key}' array")
    return [r for r in raw if isinstance(r, dict)]


def _build_weather(raw: Any) -> tuple[WeatherPattern, ...]:
    patterns = tuple(WeatherPattern.from_raw(p) for p in _array(raw, "patterns"))
    if not patterns:
        raise ValueError("no weather patterns")
    return patterns


def _build_conditions(raw: Any) -> StatusConfig:
    if not isinstance(raw, dict):
        raise ValueError("expected a table with 'conditions'")
    return StatusConfig.from_raw(raw)


def _build_events(raw: Any) -> tuple[EventDef, ...]:
    return tuple(EventDef.from_raw(e) for e in _array(raw, "events"))


def _build_animals(raw: Any) -> tuple[AnimalDef, ...]:
    return tuple(AnimalDef.from_raw(a) for a in _array(raw, "animals"))


def _build_landmarks(raw: Any) -> tuple[Landmark, ...]:
    lms = [Landmark.from_raw(lm) for lm in _array(raw, "landmarks")]
    lms.sort(key=lambda lm: lm.mile)
    return tuple(lms)


def _build_items(raw: Any) -> tuple[ShopItem, ...]:
    return tuple(ShopItem.from_raw(it) for it in _array(raw, "items"))


# ── Built-in tables ──────────────────────────────────────────────────

FALLBACK_WEATHER = [
    {"id": "nice_day", "name": "Bluebird Nice Day", "emoji": "☀️",
     "blurb": "Clear skies.", "weight": 4,
     "mods": {"speedMult": 1.1, "healthDelta": 0, "hungerMult": 1.0}},
    {"id": "whiteout_eh", "name": "Whiteout, eh?", "emoji": "❄️",
     "blurb": "Snow from all directions.", "weight": 2,
     "mods": {"speedMult": 0.65, "healthDelta": -1, "hungerMult": 1.05}},
    {"id": "geese_headwind", "name": "Geese Headwind", "emoji": "🪿",
     "blurb": "Honks increase drag.", "weight": 3,
     "mods": {"speedMult": 0.8, "healthDelta": 0, "hungerMult": 1.0}},
]

FALLBACK_CONDITIONS = {
    "maxConcurrent": 2,
    "baseDailyAcquireChance": 0.2,
    "conditions": [
        {"id": "fallback_hockey_blues", "name": "Hockey Blues", "emoji": "🏒",
         "kind": "mood", "weight": 1, "durationDays": [2, 3],
         "effects": {"speedMult": 0.97, "healthChancePerDay": 0.05, "hungerMult": 1},
         "trigger": {"minDay": 1, "cooldownDays": 5},
         "blurb": "Craving a game."},
    ],
}

FALLBACK_EVENTS = [
    {"id": "quiet_camp", "title": "A Quiet Camp", "weight": 1,
     "stages": [{"id": "start",
                 "text": "{child} counts stars until everyone falls asleep.",
                 "choices": [{"id": "rest", "label": "Sleep in a little",
                              "goto": "end",
                              "effects": [{"type": "morale", "delta": 1}]}]}]},
]

FALLBACK_ANIMALS = [
    {"id": "rabbit", "name": "Rabbit", "w": 24, "h": 18, "speed": 140, "yieldLb": 4, "spawnWeight": 5},
    {"id": "deer", "name": "Deer", "w": 56, "h": 40, "speed": 110, "yieldLb": 60, "spawnWeight": 3},
    {"id": "buffalo", "name": "Bison", "w": 84, "h": 56, "speed": 70, "yieldLb": 300, "spawnWeight": 1},
]

FALLBACK_LANDMARKS: list[dict[str, Any]] = []

FALLBACK_ITEMS = [
    {"id": "food", "name": "Food (lb)", "price": 0.5, "stack": True},
    {"id": "bullets", "name": "Bullets", "price": 0.25, "stack": True},
    {"id": "clothes", "name": "Set of clothes", "price": 10, "stack": True},
    {"id": "medicine", "name": "Medicine kit", "price": 15, "stack": True},
    {"id": "wheel", "name": "Wagon wheel", "price": 20, "stack": True},
    {"id": "axle", "name": "Wagon axle", "price": 20, "stack": True},
    {"id": "tongue", "name": "Wagon tongue", "price": 20, "stack": True},
]


_SPECS: dict[str, tuple[Callable[[Any], Any], Any]] = {
    "weather": (_build_weather, FALLBACK_WEATHER),
    "conditions": (_build_conditions, FALLBACK_CONDITIONS),
    "events": (_build_events, FALLBACK_EVENTS),
    "animals": (_build_animals, FALLBACK_ANIMALS),
    "landmarks": (_build_landmarks, FALLBACK_LANDMARKS),
    "items": (_build_items, FALLBACK_ITEMS),
}

CATALOG_NAMES = tuple(_SPECS)


class _Slot:
    __slots__ = ("state", "value", "lock")

    def __init__(self):
        self.state = LoadState.NOT_LOADED
        self.value: Any = None
        self.lock = threading.Lock()


class Catalogs:
    """Memoized catalog context passed to every engine."""

    def __init__(self, loader: CatalogLoader | None = None):
        self.loader = loader or CatalogLoader()
        self.errors: list[str] = []
        self._slots = {name: _Slot() for name in CATALOG_NAMES}

    @classmethod
    def from_tables(cls, loader: CatalogLoader | None = None, **tables: Any) -> "Catalogs":
        """Pre-seed catalogs from raw in-memory tables (tests, tools).

        Any catalog not given is still read from *loader* on first use.
        """
        cats = cls(loader)
        for name, raw in tables.items():
            if name not in cats._slots:
                raise KeyError(f"unknown catalog: {name}")
            build, _ = _SPECS[name]
            slot = cats._slots[name]
            slot.value = build(raw)
            slot.state = LoadState.LOADED
        return cats

    # ── access ──────────────────────────────────────────────────────

    def get(self, name: str) -> Any:
        slot = self._slots[name]
        if slot.state is not LoadState.NOT_LOADED:
            return slot.value
        with slot.lock:
            if slot.state is LoadState.NOT_LOADED:
                self._fill(name, slot)
        return slot.value

    def state(self, name: str) -> LoadState:
        return self._slots[name].state

    def preload(self) -> None:
        for name in CATALOG_NAMES:
            self.get(name)

    def _fill(self, name: str, slot: _Slot) -> None:
        build, fallback = _SPECS[name]
        try:
            slot.value = build(self.loader.load(name))
            slot.state = LoadState.LOADED
            return
        except (OSError, ValueError, TypeError, AttributeError) as ex:
            print(f"[CATALOG] {name}: {ex}; using built-in table")
            self.errors.append(f"Could not load {name}: {ex}")
        slot.value = build(fallback)
        slot.state = LoadState.FALLBACK

    # ── typed accessors ─────────────────────────────────────────────

    def weather(self) -> tuple[WeatherPattern, ...]:
        return self.get("weather")

    def status_config(self) -> StatusConfig:
        return self.get("conditions")

    def events(self) -> tuple[EventDef, ...]:
        return self.get("events")

    def event_by_id(self, event_id: str) -> EventDef | None:
        return next((e for e in self.events() if e.id == event_id), None)

    def animals(self) -> tuple[AnimalDef, ...]:
        return self.get("animals")

    def landmarks(self) -> tuple[Landmark, ...]:
        return self.get("landmarks")

    def items(self) -> tuple[ShopItem, ...]:
        return self.get("items")
