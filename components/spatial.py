"""components.spatial — Position, facing, and collision shapes.

All coordinates and dimensions are in world pixels.
"""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import HITBOX_OX, HITBOX_OY, HITBOX_W, HITBOX_H


@dataclass
class Position:
    """Top-left corner of the entity's sprite, on map ``map``."""
    x: float = 0.0        # px
    y: float = 0.0        # px
    map: str = ""


@dataclass
class Facing:
    """Last direction the entity moved in.

    Values: 'right', 'left', 'up', 'down'.  Read by the renderer.
    """
    direction: str = "down"


@dataclass
class Hitbox:
    """Axis-aligned collision box, offset from Position.

    The final world-space rect is:
        (pos.x + ox, pos.y + oy, w, h)   — in pixels

    ``solid`` hitboxes block other actors (NPCs default to solid).
    """
    ox: float = HITBOX_OX
    oy: float = HITBOX_OY
    w: float = HITBOX_W
    h: float = HITBOX_H
    solid: bool = True


@dataclass
class Transit:
    """Waypoint bookkeeping for an entity that can change maps.

    ``last_cell`` is the hitbox-centre cell seen at the previous
    waypoint check; a waypoint only fires when the cell changes.
    """
    last_cell: tuple[int, int] | None = None
