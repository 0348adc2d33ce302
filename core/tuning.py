"""core/tuning.py — Data-driven trail tuning constants.

Pace, rations, morale bounds, event cadence and hunting defaults live in
``data/tuning.toml``.  Any system can read a value with::

    from core import tuning
    steady = tuning.get("travel.pace_miles", "steady", 15.0)

Every caller passes its own default, so a missing or unreadable file
leaves the game fully playable on built-in numbers.  The file is read
lazily on the first ``get()``; call ``reload()`` after editing it.

Tests can swap values for a block without touching the file::

    with tuning.override({"morale": {"max": 3}}):
        ...
"""

from __future__ import annotations
import copy
from contextlib import contextmanager
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli


DEFAULT_PATH = Path(__file__).resolve().parent.parent / "data" / "tuning.toml"

_data: dict = {}
_path: Path = DEFAULT_PATH
_loaded: bool = False


def load(path: str | Path | None = None) -> None:
    """Load (or reload) tuning constants from *path* (default ``data/tuning.toml``)."""
    global _data, _path, _loaded

    _path = Path(path) if path is not None else DEFAULT_PATH
    _loaded = True
    _data = {}

    if not _path.exists():
        print(f"[TUNING] {_path} not found, using defaults")
        return
    try:
        with open(_path, "rb") as f:
            _data = tomllib.load(f)
    except tomllib.TOMLDecodeError as ex:
        print(f"[TUNING] {_path} is not valid TOML ({ex}), using defaults")
        return
    print(f"[TUNING] Loaded {_count_leaves(_data)} values from {_path}")


def reload() -> None:
    load(_path)


def _table(section_path: str) -> dict | None:
    if not _loaded:
        load()
    node = _data
    for part in section_path.split("."):
        node = node.get(part) if isinstance(node, dict) else None
        if node is None:
            return None
    return node if isinstance(node, dict) else None


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation for nested tables, e.g.
    ``"travel.rations_lb"`` looks up ``[travel.rations_lb]``.

    >>> get("travel.rations_lb", "normal", 2.0)
    2.0
    """
    table = _table(section)
    if table is None:
        return default
    return table.get(key, default)


def section(section_path: str) -> dict:
    """Shallow copy of a whole table, or ``{}``."""
    table = _table(section_path)
    return dict(table) if table is not None else {}


@contextmanager
def override(values: dict):
    """Temporarily merge *values* over the loaded tables."""
    global _data
    if not _loaded:
        load()
    saved = _data
    _data = _merge(copy.deepcopy(saved), values)
    try:
        yield
    finally:
        _data = saved


def _merge(base: dict, extra: dict) -> dict:
    for k, v in extra.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _merge(base[k], v)
        else:
            base[k] = v
    return base


def _count_leaves(d: dict) -> int:
    return sum(_count_leaves(v) if isinstance(v, dict) else 1 for v in d.values())
