"""logic/movement.py — Player movement with per-axis collision.

The input vector is normalised, scaled by ``Player.speed * dt`` and then
applied one axis at a time: the X candidate is tested with the old Y,
the Y candidate with the (possibly updated) X.  A blocked axis is simply
not committed, so the player slides along walls.  Testing Y at the new
X means a diagonal step past an outer wall corner stops on one axis
instead of clipping the corner tile.

Waypoint trigger cells on the current map never block the player, so a
trigger set into a solid border works as a door.

After each committed axis the transition engine gets a look, so a
waypoint or map edge crossed mid-step fires on that same frame.  When
a transition moves the player to another map the rest of the step is
dropped.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import Facing, Hitbox, Player, Position
from core.collision import test_rect
from core.geometry import hitbox_rect
from core.zone import WorldGraph
from logic.transitions import check_transitions

if TYPE_CHECKING:
    from core.ecs import World
    from logic.input_manager import InputSnapshot


def input_vector(snapshot: "InputSnapshot") -> tuple[float, float]:
    """Normalised ``(dx, dy)`` from the held direction flags."""
    dx = float(snapshot.right) - float(snapshot.left)
    dy = float(snapshot.down) - float(snapshot.up)
    if dx != 0.0 or dy != 0.0:
        mag = (dx * dx + dy * dy) ** 0.5
        dx /= mag
        dy /= mag
    return dx, dy


def _face(facing: Facing | None, dx: float, dy: float):
    if facing is None or (dx == 0.0 and dy == 0.0):
        return
    if abs(dx) >= abs(dy):
        facing.direction = "right" if dx > 0 else "left"
    else:
        facing.direction = "down" if dy > 0 else "up"


def clamp_to_map(world: "World", pos: Position, hb: Hitbox):
    """Keep the hitbox of an entity at *pos* inside its map's pixel bounds."""
    graph = world.res(WorldGraph)
    if graph is None:
        return
    mw, mh = graph.pixel_size(pos.map)
    if mw <= 0 or mh <= 0:
        return
    pos.x = max(-hb.ox, min(pos.x, mw - hb.ox - hb.w))
    pos.y = max(-hb.oy, min(pos.y, mh - hb.oy - hb.h))


def movement_system(world: "World", snapshot: "InputSnapshot", dt: float) -> bool:
    """Move the player for one frame.  Returns True if the map changed."""
    result = world.query_one(Player, Position)
    if result is None:
        return False
    eid, player, pos = result
    hb = world.get(eid, Hitbox) or Hitbox()

    dx, dy = input_vector(snapshot)
    _face(world.get(eid, Facing), dx, dy)
    if dx == 0.0 and dy == 0.0:
        return False

    step = player.speed * dt
    start_map = pos.map
    graph = world.res(WorldGraph)
    doors = ({wp.trigger_cell for wp in graph.waypoints_from(pos.map)}
             if graph is not None else ())

    if dx != 0.0:
        nx = pos.x + dx * step
        if not test_rect(world, pos.map, hitbox_rect(Position(nx, pos.y), hb),
                         ignore=(eid,), passable=doors):
            pos.x = nx
            if check_transitions(world, eid):
                return True

    if dy != 0.0:
        ny = pos.y + dy * step
        if not test_rect(world, pos.map, hitbox_rect(Position(pos.x, ny), hb),
                         ignore=(eid,), passable=doors):
            pos.y = ny
            if check_transitions(world, eid):
                return True

    clamp_to_map(world, pos, hb)
    return pos.map != start_map

