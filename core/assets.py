"""core/assets.py — pygame-backed visual handle loader.

The core never inspects pixel data.  It hands a *source* to an asset
loader and stores whatever handle comes back.  A source is either

  * an image path (``"assets/grass.png"``), loaded with pygame, or
  * an RGB triple (``[50, 80, 40]``), turned into a solid-colour
    surface the size of one tile.

All loads happen once during setup, before the first tick.  Any
failure is fatal: callers get an ``AssetLoadError`` naming the owner.

    loader = AssetLoader(base_dir=Path("data"), tile_size=64)
    handle = loader.load("grass.png", owner="tile 1")
"""

from __future__ import annotations
from pathlib import Path

import pygame

from core.constants import TILE_SIZE
from core.errors import AssetLoadError


def _is_color(source) -> bool:
    return (isinstance(source, (list, tuple)) and len(source) in (3, 4)
            and all(isinstance(c, int) for c in source))


class AssetLoader:
    """Resolves visual sources to pygame surfaces, caching by source."""

    def __init__(self, base_dir: str | Path = ".", tile_size: int = TILE_SIZE):
        self.base_dir = Path(base_dir)
        self.tile_size = tile_size
        self._cache: dict[object, pygame.Surface] = {}

    def load(self, source, owner: str = "",
             size: tuple[int, int] | None = None) -> pygame.Surface:
        key = (tuple(source) if isinstance(source, list) else source, size)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        w, h = size or (self.tile_size, self.tile_size)
        if _is_color(source):
            surf = pygame.Surface((w, h), pygame.SRCALPHA)
            surf.fill(tuple(source))
        elif isinstance(source, (str, Path)):
            path = self.base_dir / source
            try:
                surf = pygame.image.load(str(path))
            except (pygame.error, FileNotFoundError, OSError) as exc:
                raise AssetLoadError(str(path), owner, exc) from exc
            if pygame.display.get_init() and pygame.display.get_surface() is not None:
                surf = surf.convert_alpha()
            if surf.get_size() != (w, h):
                surf = pygame.transform.scale(surf, (w, h))
        else:
            raise AssetLoadError(source, owner, TypeError("unsupported source"))

        self._cache[key] = surf
        print(f"[ASSETS] loaded {source!r} for {owner or '?'}")
        return surf

    def __len__(self) -> int:
        return len(self._cache)


class NullAssetLoader:
    """Returns every source unchanged.  Used headless (tests, tools)."""

    def load(self, source, owner: str = "", size=None):
        return source
