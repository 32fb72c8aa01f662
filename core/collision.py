"""core/collision.py — Tile-grid and actor collision primitives.

These live in ``core/`` (not ``logic/``) because both the movement
system and the transition engine need them.

Two questions, two policies:

``is_blocked_cell``
    Strict.  Anything outside the map's rows, or past the end of a
    ragged row, or a void cell, blocks movement.  So does a solid tile.
    Unknown tile ids do *not* block (the registry's lenient default).

``test_rect``
    Samples the four corners of a rect against ``is_blocked_cell`` and
    checks AABB overlap with every solid actor hitbox on the map.
    Callers may name cells to skip in the tile pass (waypoint triggers).
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Collection, Iterable

from core.geometry import Rect, hitbox_rect, pixel_to_grid
from core.tiles import TileRegistry
from core.zone import WorldGraph

if TYPE_CHECKING:
    from core.ecs import World


def is_blocked_cell(graph: WorldGraph, tiles: TileRegistry,
                    map_id: str, col: int, row: int) -> bool:
    """Return True if *(col, row)* on *map_id* cannot be walked on."""
    data = graph.get(map_id)
    if data is None:
        return False
    if row < 0 or row >= data.height or col < 0:
        return True
    cells = data.rows[row]
    if col >= len(cells):
        return True
    tile_id = cells[col]
    if tile_id is None:
        return True
    return tiles.is_solid(tile_id)


def rect_hits_tiles(graph: WorldGraph, tiles: TileRegistry,
                    map_id: str, rect: Rect,
                    passable: Collection[tuple[int, int]] = ()) -> bool:
    """True if any corner of *rect* lands on a blocked cell.

    Cells in *passable* never block, whatever tile they hold.
    """
    for x, y in rect.corners():
        col, row = pixel_to_grid(x, y, graph.tile_size)
        if (col, row) in passable:
            continue
        if is_blocked_cell(graph, tiles, map_id, col, row):
            return True
    return False


def actor_rects(world: World, map_id: str,
                ignore: Iterable[int] = ()) -> list[tuple[int, Rect]]:
    """``(eid, hitbox rect)`` for every solid actor on *map_id*."""
    from components import Position, Hitbox

    skip = set(ignore)
    out: list[tuple[int, Rect]] = []
    for eid, pos, hb in world.query_map(map_id, Position, Hitbox):
        if eid in skip or not hb.solid or pos.map != map_id:
            continue
        out.append((eid, hitbox_rect(pos, hb)))
    return out


def test_rect(world: World, map_id: str, rect: Rect,
              ignore: Iterable[int] = (),
              passable: Collection[tuple[int, int]] = ()) -> bool:
    """Return True (blocked) if *rect* touches a blocked cell or a solid actor.

    *ignore* lists entity ids to leave out of the actor pass — the mover
    itself, usually.  *passable* lists grid cells the tile pass skips;
    the player passes the map's waypoint triggers here so a door cut
    into a solid wall can still be walked into.
    """
    graph = world.res(WorldGraph)
    tiles = world.res(TileRegistry) or TileRegistry()
    if graph is None:
        return False
    if rect_hits_tiles(graph, tiles, map_id, rect, passable):
        return True
    for _eid, other in actor_rects(world, map_id, ignore):
        if rect.overlaps(other):
            return True
    return False


# Imported by name into test modules; not itself a test.
test_rect.__test__ = False
