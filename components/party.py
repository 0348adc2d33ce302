"""components.party — Travelling party members and the starting family."""

from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any

MAX_HEALTH = 5
DEAD = "dead"
WELL = "well"


@dataclass
class PartyMember:
    """One traveller.

    ``health`` runs 0..5.  Reaching 0 flips ``status`` to "dead" and the
    member stays dead: dead members are skipped by every targeting,
    consumption and health-drift rule but never removed from the party.
    """
    id: str
    name: str
    role: str = "adult"            # mom, dad, child, infant, ...
    health: int = MAX_HEALTH
    status: str = WELL
    age: int | None = None

    @property
    def alive(self) -> bool:
        return self.status != DEAD

    @property
    def is_child(self) -> bool:
        return self.role in ("child", "infant")

    def set_health(self, value: int) -> bool:
        """Clamp and store health.  Returns True if this call killed them."""
        if not self.alive:
            return False
        self.health = max(0, min(MAX_HEALTH, int(value)))
        if self.health == 0:
            self.status = DEAD
            return True
        return False

    def kill(self) -> None:
        self.status = DEAD
        self.health = 0

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        if d["age"] is None:
            del d["age"]
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> "PartyMember":
        health = int(d.get("health", MAX_HEALTH))
        status = str(d.get("status", WELL))
        if health <= 0:
            status = DEAD
        return cls(
            id=str(d.get("id", "")),
            name=str(d.get("name", d.get("id", "?"))),
            role=str(d.get("role", "adult")),
            health=max(0, min(MAX_HEALTH, health)),
            status=status,
            age=d.get("age"),
        )


@dataclass
class Settings:
    pace: str = "steady"           # steady | strenuous | grueling
    rations: str = "normal"        # meager | normal | generous


# ── The family ───────────────────────────────────────────────────────

def default_party() -> list[PartyMember]:
    return [
        PartyMember("merri-ellen", "Merri-Ellen", "mom"),
        PartyMember("mike", "Mike", "dad"),
        PartyMember("ros", "Ros", "child", age=9),
        PartyMember("jess", "Jess", "child", age=6),
        PartyMember("martha", "Martha", "child", age=3),
        PartyMember("rusty", "Rusty", "infant", age=1),
    ]


def default_epitaphs() -> dict[str, str]:
    return {
        "merri-ellen": "She kept the family moving.",
        "mike": "He would not leave the wagon.",
        "ros": "Bright eyes, quick hands.",
        "jess": "A laugh that warmed the camp.",
        "martha": "She loved buttons and stars.",
        "rusty": "Small hands, fierce heart.",
    }


def default_inventory() -> dict[str, float]:
    return {
        "food": 100, "bullets": 30, "clothes": 5,
        "wheel": 1, "axle": 1, "tongue": 0, "medicine": 2,
    }
