"""core/tiles.py — Tile registry: tile id → solidity + visual handle.

    registry = TileRegistry(loader)
    registry.register(1, "grass.png")
    registry.register(2, [30, 60, 90], solid=True)
    registry.is_solid(2)   # True
    registry.is_solid(99)  # False — unknown tiles are never solid

``register`` is idempotent: a second call for the same id returns the
existing definition and never touches the loader again.

The registry is deliberately lenient about unknown ids.  The *collision*
layer has its own, stricter policy for cells outside a map
(see ``core.collision.is_blocked_cell``); the two are separate.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Hashable


TileId = Hashable


@dataclass(frozen=True)
class TileDef:
    id: TileId
    solid: bool = False
    visual: Any = None        # handle from the asset loader
    height: float = 0.0       # box height for 3D renderers; unused in 2D


class TileRegistry:
    """World resource mapping tile ids to ``TileDef``."""

    def __init__(self, loader=None):
        # loader: anything with ``load(source, owner=...)``; None keeps
        # the raw source as the handle (headless / tests).
        self.loader = loader
        self._tiles: dict[TileId, TileDef] = {}

    def register(self, tile_id: TileId, visual_source=None,
                 solid: bool = False, height: float = 0.0) -> TileDef:
        existing = self._tiles.get(tile_id)
        if existing is not None:
            return existing
        if self.loader is not None and visual_source is not None:
            handle = self.loader.load(visual_source, owner=f"tile {tile_id}")
        else:
            handle = visual_source
        tile = TileDef(id=tile_id, solid=bool(solid), visual=handle,
                       height=float(height))
        self._tiles[tile_id] = tile
        return tile

    def get(self, tile_id: TileId) -> TileDef | None:
        return self._tiles.get(tile_id)

    def is_solid(self, tile_id: TileId) -> bool:
        tile = self._tiles.get(tile_id)
        return tile is not None and tile.solid

    def visual(self, tile_id: TileId):
        tile = self._tiles.get(tile_id)
        return tile.visual if tile else None

    def __contains__(self, tile_id: TileId) -> bool:
        return tile_id in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)
