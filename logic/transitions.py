"""logic/transitions.py — Waypoint and edge-link map transitions.

Two ways off a map, checked in this order after every committed
movement axis:

1. **Waypoints.**  The player's hitbox centre is converted to a grid
   cell and looked up in the waypoint table.  A waypoint fires only on
   *entering* its trigger cell: ``Transit.last_cell`` remembers the cell
   seen at the previous check, and arrival records the spawn cell, so
   standing on (or spawning onto) a trigger never re-fires it.

2. **Edge links.**  A hitbox within ``edge_threshold`` px of a map edge
   that has a neighbour in that direction moves the player to the
   neighbour, just inside its opposite edge.  The coordinate along the
   edge is kept.

Both go through ``move_to_map`` — the only code that changes which map
an entity is on.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import Hitbox, Position, Transit
from core import tuning
from core.constants import EDGE_THRESHOLD
from core.geometry import grid_to_pixel, hitbox_rect, pixel_to_grid
from core.zone import WorldGraph, opposite

if TYPE_CHECKING:
    from core.ecs import World


def center_cell(world: "World", eid: int, graph: WorldGraph) -> tuple[int, int]:
    pos = world.get(eid, Position)
    hb = world.get(eid, Hitbox) or Hitbox()
    cx, cy = hitbox_rect(pos, hb).center
    return pixel_to_grid(cx, cy, graph.tile_size)


def _transit(world: "World", eid: int) -> Transit:
    transit = world.get(eid, Transit)
    if transit is None:
        transit = Transit()
        world.add(eid, transit)
    return transit


def move_to_map(world: "World", eid: int, map_id: str, x: float, y: float,
                via: str = "switch") -> bool:
    """Make *map_id* active and put entity *eid* at *(x, y)* on it."""
    graph = world.res(WorldGraph)
    if graph is None or not graph.switch_to(map_id, via=via, eid=eid):
        return False
    pos = world.get(eid, Position)
    pos.x, pos.y, pos.map = float(x), float(y), map_id
    world.map_set(eid, map_id)
    _transit(world, eid).last_cell = center_cell(world, eid, graph)
    return True


def check_waypoints(world: "World", eid: int) -> bool:
    """Fire the waypoint under *eid*'s hitbox centre, if just entered."""
    graph = world.res(WorldGraph)
    pos = world.get(eid, Position)
    if graph is None or pos is None:
        return False

    cell = center_cell(world, eid, graph)
    transit = _transit(world, eid)
    if cell == transit.last_cell:
        return False
    transit.last_cell = cell

    wp = graph.find_waypoint(pos.map, cell)
    if wp is None:
        return False
    if wp.to_map not in graph:
        print(f"[WAYPOINT] {wp.from_map}{wp.trigger_cell} → unknown map {wp.to_map!r}")
        return False

    x, y = grid_to_pixel(*wp.spawn_cell, graph.tile_size)
    print(f"[WAYPOINT] {wp.from_map}{wp.trigger_cell} → {wp.to_map}{wp.spawn_cell}")
    return move_to_map(world, eid, wp.to_map, x, y, via="waypoint")


def edge_threshold() -> float:
    return tuning.get("transitions", "edge_threshold", EDGE_THRESHOLD)


def touching_edge(world: "World", eid: int) -> str | None:
    """Direction of the linked map edge *eid*'s hitbox is pressed against."""
    graph = world.res(WorldGraph)
    pos = world.get(eid, Position)
    if graph is None or pos is None:
        return None
    data = graph.get(pos.map)
    if data is None:
        return None
    rect = hitbox_rect(pos, world.get(eid, Hitbox) or Hitbox())
    mw, mh = graph.pixel_size(pos.map)
    margin = edge_threshold()

    near = {
        "left": rect.x <= margin,
        "right": rect.right >= mw - margin,
        "up": rect.y <= margin,
        "down": rect.bottom >= mh - margin,
    }
    for direction in ("left", "right", "up", "down"):
        if near[direction] and data.links.get(direction):
            return direction
    return None


def check_edge_links(world: "World", eid: int) -> bool:
    """Cross into the neighbouring map when standing at a linked edge."""
    direction = touching_edge(world, eid)
    if direction is None:
        return False
    graph = world.res(WorldGraph)
    pos = world.get(eid, Position)
    hb = world.get(eid, Hitbox) or Hitbox()
    target = graph.get(pos.map).links[direction]
    tw, th = graph.pixel_size(target)
    inset = edge_threshold() + 1.0

    # Land on the side we came in from, hitbox just clear of the margin.
    side = opposite(direction)
    x, y = pos.x, pos.y
    if side == "left":
        x = inset - hb.ox
    elif side == "right":
        x = tw - inset - hb.ox - hb.w
    elif side == "up":
        y = inset - hb.oy
    else:
        y = th - inset - hb.oy - hb.h

    # The kept coordinate may not fit a smaller map.
    x = max(-hb.ox, min(x, tw - hb.ox - hb.w))
    y = max(-hb.oy, min(y, th - hb.oy - hb.h))
    print(f"[MAP] edge {direction}: {pos.map} → {target}")
    return move_to_map(world, eid, target, x, y, via="edge")


def check_transitions(world: "World", eid: int) -> bool:
    """Waypoints first, then edge links.  True if the map changed."""
    if check_waypoints(world, eid):
        return True
    return check_edge_links(world, eid)
