"""core/zone.py — Map store, world graph, and waypoint table.

A *map* is a named grid of tile ids.  Rows may be ragged: the map's
width is its longest row, and a cell past the end of a shorter row is
a void.  Rows are stored exactly as authored, never padded.

Maps connect two ways:

  * **links** — up/down/left/right neighbours.  ``define_world`` derives
    them for maps keyed by integer coordinates (``"0,0"``, ``"0,-1"``);
    the loader can also author them explicitly.
  * **waypoints** — explicit ``(from_map, trigger_cell) → (to_map,
    spawn_cell)`` records for transitions grid adjacency can't express
    (doors, stairs, interiors).  Evaluated in list order, first match wins.

``WorldGraph`` is a World resource.  It is the only place that knows
which map is active; everything else reads ``graph.current_map``.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from core.constants import DIRECTIONS, TILE_SIZE
from core.errors import InvalidMapShape, WorldDataError
from core.events import MapChanged, EventBus
from core.geometry import pixel_to_grid


Cell = tuple[int, int]   # (col, row)

_OFFSETS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}

_OPPOSITE = {"up": "down", "down": "up", "left": "right", "right": "left"}


def opposite(direction: str) -> str:
    return _OPPOSITE[direction]


@dataclass
class MapData:
    id: str
    rows: list
    width: int
    height: int
    links: dict[str, str | None] = field(
        default_factory=lambda: {d: None for d in DIRECTIONS})

    def row_length(self, row: int) -> int:
        if 0 <= row < self.height:
            return len(self.rows[row])
        return 0

    def cell(self, col: int, row: int):
        """Tile id at *(col, row)*, or None for voids / out of range."""
        if row < 0 or row >= self.height or col < 0:
            return None
        data = self.rows[row]
        if col >= len(data):
            return None
        return data[col]


@dataclass(frozen=True)
class Waypoint:
    from_map: str
    trigger_cell: Cell
    to_map: str
    spawn_cell: Cell


def parse_coord_key(key: str) -> tuple[int, int] | None:
    """``"x,y"`` → ``(x, y)``; anything else → None."""
    if not isinstance(key, str) or "," not in key:
        return None
    parts = key.split(",")
    if len(parts) != 2:
        return None
    try:
        return int(parts[0].strip()), int(parts[1].strip())
    except ValueError:
        return None


def coord_key(x: int, y: int) -> str:
    return f"{x},{y}"


class WorldGraph:
    """World resource holding every map, their links and the waypoints."""

    def __init__(self, tile_size: int = TILE_SIZE, bus: EventBus | None = None):
        self.tile_size = tile_size
        self.maps: dict[str, MapData] = {}
        self.current_map_id: str | None = None
        self.waypoints: list[Waypoint] = []
        self.bus = bus

    # ── definition ───────────────────────────────────────────────────

    def define_map(self, map_id: str, rows) -> MapData:
        """Validate and store *rows* under *map_id*.

        Raises ``InvalidMapShape`` for empty data, a non-2D sequence, or an
        empty first row.  On failure nothing is stored.
        """
        if not isinstance(rows, Sequence) or isinstance(rows, str) or not rows:
            raise InvalidMapShape(map_id, "map data must be a non-empty 2D sequence")
        for i, row in enumerate(rows):
            if not isinstance(row, Sequence) or isinstance(row, str):
                raise InvalidMapShape(map_id, f"row {i} is not a sequence")
        if not rows[0]:
            raise InvalidMapShape(map_id, "first row is empty")

        stored = [list(row) for row in rows]
        width = max(len(row) for row in stored)
        existing = self.maps.get(map_id)
        links = dict(existing.links) if existing else {d: None for d in DIRECTIONS}
        data = MapData(id=map_id, rows=stored, width=width,
                       height=len(stored), links=links)
        self.maps[map_id] = data
        return data

    def define_world(self, named_maps: Mapping[str, Sequence]) -> list[str]:
        """Bulk-define maps and derive links for coordinate-keyed ones.

        Keys like ``"0, -1"`` are normalised to ``"0,-1"`` (no spaces) and
        linked to whichever axis neighbours exist.  Other keys are
        defined as-is with no automatic links.  Returns the map ids in
        insertion order.
        """
        ids: list[str] = []
        coords: dict[str, tuple[int, int]] = {}
        for key, rows in named_maps.items():
            xy = parse_coord_key(key)
            map_id = coord_key(*xy) if xy else str(key)
            self.define_map(map_id, rows)
            ids.append(map_id)
            if xy:
                coords[map_id] = xy

        for map_id, (x, y) in coords.items():
            links = self.maps[map_id].links
            for direction, (dx, dy) in _OFFSETS.items():
                neighbour = coord_key(x + dx, y + dy)
                links[direction] = neighbour if neighbour in self.maps else None

        if self.current_map_id is None and ids:
            self.current_map_id = ids[0]
        print(f"[WORLD] defined {len(ids)} maps, {len(coords)} on the grid")
        return ids

    def link(self, map_id: str, direction: str, target: str | None):
        """Author a single directional link (second-pass population)."""
        if direction not in _OFFSETS:
            raise WorldDataError(f"map {map_id!r}: unknown link direction {direction!r}")
        data = self.maps.get(map_id)
        if data is None:
            return
        data.links[direction] = target if target in self.maps else None

    def add_waypoint(self, from_map: str, trigger_cell: Cell,
                     to_map: str, spawn_cell: Cell) -> Waypoint:
        wp = Waypoint(from_map, tuple(trigger_cell), to_map, tuple(spawn_cell))
        self.waypoints.append(wp)
        return wp

    # ── active map ───────────────────────────────────────────────────

    @property
    def current_map(self) -> MapData | None:
        if self.current_map_id is None:
            return None
        return self.maps.get(self.current_map_id)

    def switch_to(self, map_id: str, *, via: str = "switch",
                  eid: int | None = None) -> bool:
        """Make *map_id* the active map.  Unknown ids are ignored."""
        if map_id not in self.maps:
            print(f"[MAP] ignoring switch to unknown map {map_id!r}")
            return False
        old = self.current_map_id
        self.current_map_id = map_id
        print(f"[MAP] {old} → {map_id} ({via})")
        if self.bus is not None:
            self.bus.emit(MapChanged(old=old or "", new=map_id, via=via, eid=eid))
        return True

    # ── lookups ──────────────────────────────────────────────────────

    def get(self, map_id: str) -> MapData | None:
        return self.maps.get(map_id)

    def tile_at(self, map_id: str, col: int, row: int):
        data = self.maps.get(map_id)
        if data is None:
            return None
        return data.cell(col, row)

    def tile_at_pixel(self, map_id: str, x: float, y: float):
        col, row = pixel_to_grid(x, y, self.tile_size)
        return self.tile_at(map_id, col, row)

    def pixel_size(self, map_id: str) -> tuple[int, int]:
        data = self.maps.get(map_id)
        if data is None:
            return 0, 0
        return data.width * self.tile_size, data.height * self.tile_size

    def find_waypoint(self, map_id: str, cell: Cell) -> Waypoint | None:
        """First waypoint leaving *map_id* from *cell*, in list order."""
        for wp in self.waypoints:
            if wp.from_map == map_id and wp.trigger_cell == cell:
                return wp
        return None

    def waypoints_from(self, map_id: str) -> list[Waypoint]:
        return [wp for wp in self.waypoints if wp.from_map == map_id]

    def __contains__(self, map_id: str) -> bool:
        return map_id in self.maps

    def __len__(self) -> int:
        return len(self.maps)
