"""core/session.py — The game session: one playthrough's mutable state.

Every engine call takes the session explicitly and mutates it in place.
The session owns the shared RNG, so all systems draw from one stream in
a fixed order, and ``save()`` snapshots ``rngState`` along with the
rest of the field tree.

    session = GameSession.new_game(seed=42, store=MemoryStore())
    ...
    session = GameSession.continue_game(store)   # raises SaveError
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from components.party import (
    PartyMember, Settings, default_epitaphs, default_inventory, default_party,
)
from components.trail import Buff, StatusBook, WeatherBook
from core.rng import RNG, random_seed
from core.save import SaveError

SAVE_VERSION = 1


@dataclass
class GameSession:
    rng: RNG = field(default_factory=RNG)
    rng_seed: int = 1
    day: int = 1
    miles: float = 0.0
    money: float = 50.0
    morale: int = 0
    inventory: dict[str, float] = field(default_factory=default_inventory)
    party: list[PartyMember] = field(default_factory=list)
    settings: Settings = field(default_factory=Settings)
    flags: dict[str, Any] = field(default_factory=dict)
    log: list[str] = field(default_factory=list)
    buffs: dict[str, Buff] = field(default_factory=dict)
    weather: WeatherBook = field(default_factory=WeatherBook)
    status: StatusBook = field(default_factory=StatusBook)
    epitaphs: dict[str, str] = field(default_factory=default_epitaphs)
    hazards: dict[str, Any] = field(default_factory=dict)
    active_event: dict[str, Any] | None = None
    version: int = SAVE_VERSION
    store: Any = field(default=None, repr=False, compare=False)

    # ── Lifecycle ────────────────────────────────────────────────────

    @classmethod
    def new_game(cls, seed: int | None = None, store: Any = None) -> "GameSession":
        """Fresh family at the trailhead.  Saves immediately if a store is attached."""
        if seed is None:
            seed = random_seed()
        seed &= 0xFFFFFFFF
        session = cls(
            rng=RNG(seed),
            rng_seed=seed,
            party=default_party(),
            flags={"started": True},
            log=[f"New game started with seed {seed}"],
            store=store,
        )
        session.save()
        return session

    @classmethod
    def continue_game(cls, store: Any) -> "GameSession":
        """Resume from *store*.  Raises SaveError with a message for the player."""
        data = store.read()
        if data is None:
            raise SaveError("No saved game found.")
        try:
            session = cls.from_dict(data)
        except (TypeError, ValueError, KeyError, AttributeError) as ex:
            raise SaveError("Corrupt save.") from ex
        session.store = store
        return session

    def save(self) -> None:
        if self.store is not None:
            self.store.write(self.to_dict())

    # ── Queries ──────────────────────────────────────────────────────

    def alive_members(self) -> list[PartyMember]:
        return [m for m in self.party if m.alive]

    def alive_count(self) -> int:
        return sum(1 for m in self.party if m.alive)

    def living_children(self) -> list[PartyMember]:
        return [m for m in self.party if m.alive and m.is_child]

    def find_member(self, member_id: str) -> PartyMember | None:
        return next((m for m in self.party if m.id == member_id), None)

    def item(self, item_id: str) -> float:
        return float(self.inventory.get(item_id, 0) or 0)

    def add_item(self, item_id: str, delta: float) -> float:
        """Add *delta* to an inventory count, floored at 0.  Returns the new count."""
        value = max(0.0, self.item(item_id) + delta)
        self.inventory[item_id] = int(value) if float(value).is_integer() else value
        return self.inventory[item_id]

    def log_line(self, text: str) -> None:
        self.log.append(text)

    # ── Serialization ────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "rngSeed": self.rng_seed,
            "rngState": self.rng.get_state(),
            "day": self.day,
            "miles": self.miles,
            "money": self.money,
            "morale": self.morale,
            "inventory": dict(self.inventory),
            "party": [m.to_dict() for m in self.party],
            "settings": {"pace": self.settings.pace, "rations": self.settings.rations},
            "flags": dict(self.flags),
            "log": list(self.log),
            "buffs": {k: b.to_dict() for k, b in self.buffs.items()},
            "weather": self.weather.to_dict(),
            "status": self.status.to_dict(),
            "epitaphs": dict(self.epitaphs),
            "hazardState": {k: hz.to_dict() for k, hz in self.hazards.items()},
            "activeEvent": dict(self.active_event) if self.active_event else None,
        }

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "GameSession":
        """Rebuild a session, back-filling fields older saves lack."""
        from trail.hazards import hazard_from_dict

        seed = int(d.get("rngSeed") or 1)
        state = int(d.get("rngState") or seed or 1)
        settings = d.get("settings") or {}
        buffs = d.get("buffs") or {}
        hazards = d.get("hazardState") or {}
        active = d.get("activeEvent")
        return cls(
            rng=RNG(state),
            rng_seed=seed,
            day=int(d.get("day", 1)),
            miles=float(d.get("miles", 0)),
            money=float(d.get("money", 50)),
            morale=int(d.get("morale", 0)),
            inventory=dict(d.get("inventory") or default_inventory()),
            party=[PartyMember.from_dict(m) for m in d.get("party") or []],
            settings=Settings(pace=str(settings.get("pace", "steady")),
                              rations=str(settings.get("rations", "normal"))),
            flags=dict(d.get("flags") or {}),
            log=list(d.get("log") or []),
            buffs={str(k): Buff.from_dict(v) for k, v in buffs.items() if isinstance(v, dict)},
            weather=WeatherBook.from_dict(d.get("weather")),
            status=StatusBook.from_dict(d.get("status")),
            epitaphs=dict(d.get("epitaphs") or default_epitaphs()),
            hazards={str(k): hazard_from_dict(v) for k, v in hazards.items() if isinstance(v, dict)},
            active_event=dict(active) if isinstance(active, dict) else None,
            version=int(d.get("version", SAVE_VERSION)),
        )
