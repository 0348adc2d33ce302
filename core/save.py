"""core/save.py — Save slot storage.

A save is one JSON document per slot (``saves/slot<N>.json``) holding
the whole session field tree plus ``rngSeed`` / ``rngState``, so a
continued game draws exactly the numbers it would have drawn.

Stores are tiny objects with ``read()`` / ``write()`` / ``exists()`` /
``clear()``; ``GameSession.save()`` writes through whichever one is
attached.  ``MemoryStore`` keeps the same JSON text in memory for tests
and headless runs.
"""

from __future__ import annotations
import json
from pathlib import Path
from typing import Any


SAVES_DIR = Path("saves")


class SaveError(Exception):
    """A save could not be found or understood.  ``str()`` is user-facing."""


def get_save_file(slot: int = 0, saves_dir: str | Path | None = None) -> Path:
    """Get the path for a save slot."""
    root = Path(saves_dir) if saves_dir is not None else SAVES_DIR
    root.mkdir(parents=True, exist_ok=True)
    return root / f"slot{slot}.json"


def _decode(text: str) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except ValueError as ex:
        raise SaveError("Corrupt save.") from ex
    if not isinstance(data, dict):
        raise SaveError("Corrupt save.")
    return data


class SlotStore:
    """JSON file store for one save slot."""

    def __init__(self, slot: int = 0, saves_dir: str | Path | None = None):
        self.slot = slot
        self.saves_dir = saves_dir

    @property
    def path(self) -> Path:
        return get_save_file(self.slot, self.saves_dir)

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> dict[str, Any] | None:
        """Parsed save, or None if the slot is empty.  Raises SaveError."""
        path = self.path
        if not path.exists():
            return None
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as ex:
            raise SaveError(f"Could not read save: {ex}") from ex
        return _decode(text)

    def write(self, data: dict[str, Any]) -> Path:
        path = self.path
        tmp = path.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        tmp.replace(path)
        return path

    def clear(self) -> None:
        if self.path.exists():
            self.path.unlink()


class MemoryStore:
    """In-memory store; keeps the serialized text like a real slot."""

    def __init__(self, text: str | None = None):
        self.text = text

    def exists(self) -> bool:
        return self.text is not None

    def read(self) -> dict[str, Any] | None:
        if self.text is None:
            return None
        return _decode(self.text)

    def write(self, data: dict[str, Any]) -> None:
        self.text = json.dumps(data, ensure_ascii=False)

    def clear(self) -> None:
        self.text = None


def load_game_state(slot: int = 0) -> dict[str, Any] | None:
    """Load the raw save document for *slot*.

    Returns None if the save file doesn't exist or can't be parsed.
    """
    try:
        return SlotStore(slot).read()
    except SaveError as ex:
        print(f"[SAVE] Error loading save file: {ex}")
        return None


def has_save(slot: int = 0) -> bool:
    return SlotStore(slot).exists()
