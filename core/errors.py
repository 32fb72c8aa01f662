"""core/errors.py — Exceptions raised while building a world.

Everything here is raised at definition / setup time.  Nothing in the
per-frame tick raises; runtime oddities (unknown tiles, unknown maps,
full inventory) fall back to tolerant defaults instead.
"""

from __future__ import annotations


class TileworldError(Exception):
    """Base class for all tileworld errors."""


class InvalidMapShape(TileworldError):
    """Map rows are empty or not a 2D sequence."""

    def __init__(self, map_id: str, reason: str):
        super().__init__(f"map {map_id!r}: {reason}")
        self.map_id = map_id
        self.reason = reason


class AssetLoadError(TileworldError):
    """A tile or sprite visual could not be loaded.  Fatal at startup."""

    def __init__(self, source, owner: str = "", cause: Exception | None = None):
        msg = f"failed to load asset {source!r}"
        if owner:
            msg += f" for {owner}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
        self.source = source
        self.owner = owner


class WorldDataError(TileworldError):
    """World definition data (TOML) is malformed."""
