"""core/tuning.py — Data-driven tuning constants.

Gameplay numbers live in ``data/tuning.toml`` and are loaded once at
startup.  Any system can read a value with::

    from core.tuning import get
    speed = get("player", "speed", 350.0)

``TILEWORLD_TUNING`` in the environment points at an alternative file.
``reload()`` re-reads whichever file was loaded last.  A missing file
is not an error: every ``get`` call carries its own default.
"""

from __future__ import annotations
import os
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib


ENV_VAR = "TILEWORLD_TUNING"

_data: dict = {}
_path: Path | None = None


def default_path() -> Path:
    env = os.environ.get(ENV_VAR)
    if env:
        return Path(env)
    root = Path(__file__).resolve().parent.parent
    return root / "data" / "tuning.toml"


def load(path: str | Path | None = None) -> dict:
    """Load (or reload) tuning constants from *path*.

    Returns the loaded table so callers can inspect it.
    """
    global _data, _path

    path = Path(path) if path is not None else default_path()
    _path = path

    if not path.exists():
        print(f"[TUNING] {path} not found — using defaults")
        _data = {}
        return _data

    with open(path, "rb") as f:
        _data = tomllib.load(f)

    print(f"[TUNING] Loaded {_count_leaves(_data)} values from {path}")
    return _data


def reload() -> dict:
    """Re-read the tuning file from disk."""
    return load(_path)


def override(values: dict) -> None:
    """Replace the loaded table (tests, tools)."""
    global _data
    _data = dict(values)


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation to traverse nested tables, e.g.
    ``"player.hitbox"`` looks up ``[player.hitbox]``.  The value is cast
    to the type of *default* when one is given, so a TOML ``350`` still
    comes back as ``350.0`` for a float default.

    >>> get("player", "speed", 350.0)
    350.0
    """
    node = _lookup(section)
    if not isinstance(node, dict) or key not in node:
        return default
    raw = node[key]
    if isinstance(default, bool) or default is None:
        return raw
    if isinstance(default, float):
        return float(raw)
    if isinstance(default, int):
        return int(raw)
    if isinstance(default, tuple):
        return tuple(raw)
    return raw


def section(section_path: str) -> dict:
    """Return an entire section dict (shallow copy), or empty dict."""
    node = _lookup(section_path)
    return dict(node) if isinstance(node, dict) else {}


def _lookup(section_path: str):
    node = _data
    for part in section_path.split("."):
        if not isinstance(node, dict):
            return None
        node = node.get(part)
        if node is None:
            return None
    return node


def _count_leaves(d: dict, _n: int = 0) -> int:
    for v in d.values():
        if isinstance(v, dict):
            _n = _count_leaves(v, _n)
        else:
            _n += 1
    return _n
