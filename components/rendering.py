"""components.rendering — Visual identity and display."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any


@dataclass
class Identity:
    name: str = "unnamed"
    kind: str = "npc"          # "npc", "player"


@dataclass
class Sprite:
    """Drawable bounds of an entity.

    ``source`` is what the data file named (path or colour); ``handle``
    is what the asset loader turned it into.  ``w``/``h`` are the sprite
    bounds in px, independent of the Hitbox.
    """
    source: Any = None
    handle: Any = None
    w: int = 64
    h: int = 64
    layer: int = 0             # draw order
