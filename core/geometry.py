"""core/geometry.py — Pixel/grid conversion and axis-aligned rectangles.

Pure functions, no state.  Everything is in world pixels; a grid cell
is ``(col, row)``.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

from core.constants import TILE_SIZE

if TYPE_CHECKING:
    from components.spatial import Position, Hitbox


def pixel_to_grid(x: float, y: float, tile_size: int = TILE_SIZE) -> tuple[int, int]:
    """Return the ``(col, row)`` cell containing pixel *(x, y)*."""
    return int(math.floor(x / tile_size)), int(math.floor(y / tile_size))


def grid_to_pixel(col: int, row: int, tile_size: int = TILE_SIZE) -> tuple[float, float]:
    """Return the top-left pixel of cell *(col, row)*."""
    return float(col * tile_size), float(row * tile_size)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in world pixels."""
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.w / 2.0, self.y + self.h / 2.0

    def corners(self) -> tuple[tuple[float, float], ...]:
        """Top-left, top-right, bottom-left, bottom-right.

        The right/bottom corners sit one pixel inside so a rect flush
        against a tile edge samples only the tiles it actually covers.
        """
        r = self.x + max(self.w - 1.0, 0.0)
        b = self.y + max(self.h - 1.0, 0.0)
        return (self.x, self.y), (r, self.y), (self.x, b), (r, b)

    def overlaps(self, other: Rect) -> bool:
        """Strict AABB overlap; shared edges do not count."""
        return (self.x < other.right and other.x < self.right
                and self.y < other.bottom and other.y < self.bottom)

    def moved(self, x: float, y: float) -> Rect:
        return Rect(x, y, self.w, self.h)


def hitbox_rect(pos: Position, hitbox: Hitbox) -> Rect:
    """World-space hitbox for an entity at *pos*."""
    return Rect(pos.x + hitbox.ox, pos.y + hitbox.oy, hitbox.w, hitbox.h)


def chebyshev(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Largest per-axis distance between two points."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))
