"""logic/entity_factory.py — Player and NPC spawning.

A small ``_COMPONENT_TABLE`` maps descriptor keys to component classes
and their field schemas.  ``spawn_from_descriptor`` reads the sub-dict
for each key, casts fields, and attaches components.  Position is
special: it needs a map id and a grid cell, and it registers the
entity in the World's map index.
"""

from __future__ import annotations
from typing import Any, Callable

from core.ecs import World
from core.geometry import grid_to_pixel
from core.zone import WorldGraph
from components import (
    DialogScript, Facing, Hitbox, Identity, Player, Position, Sprite,
    Transit,
)
from core.constants import (
    HITBOX_H, HITBOX_OX, HITBOX_OY, HITBOX_W, PLAYER_HEIGHT, PLAYER_SPEED,
    PLAYER_WIDTH, TILE_SIZE,
)
from core import tuning
from logic.transitions import center_cell


# ── Field-schema helpers ─────────────────────────────────────────────

def _float(v: Any, default: float = 0.0) -> float:
    try:
        return float(v)
    except (TypeError, ValueError):
        return default


def _int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def _bool(v: Any, default: bool = False) -> bool:
    return bool(v) if v is not None else default


# ── Component table ──────────────────────────────────────────────────
# Each entry: (descriptor_key, ComponentClass, field_map)
# field_map: dict mapping component-kwarg → (descriptor-sub-key, cast, default)

_COMPONENT_TABLE: list[tuple[str, type, dict[str, tuple[str, Callable, Any]]]] = [
    ("hitbox", Hitbox, {
        "ox":    ("ox",    _float, HITBOX_OX),
        "oy":    ("oy",    _float, HITBOX_OY),
        "w":     ("w",     _float, HITBOX_W),
        "h":     ("h",     _float, HITBOX_H),
        "solid": ("solid", _bool,  True),
    }),
    ("sprite", Sprite, {
        "source": ("source", lambda v, d: v if v is not None else d, None),
        "w":      ("w",      _int, PLAYER_WIDTH),
        "h":      ("h",      _int, PLAYER_HEIGHT),
        "layer":  ("layer",  _int, 1),
    }),
]


def _attach_table_components(world: World, eid: int, desc: dict):
    for key, comp_cls, field_map in _COMPONENT_TABLE:
        sub = desc.get(key)
        if sub is None:
            continue
        kwargs = {kw: cast(sub.get(src), default)
                  for kw, (src, cast, default) in field_map.items()}
        world.add(eid, comp_cls(**kwargs))


def place(world: World, eid: int, map_id: str, cell: tuple[int, int]) -> Position:
    """Put *eid* at the top-left of *cell* on *map_id* and index it."""
    graph = world.res(WorldGraph)
    size = graph.tile_size if graph else TILE_SIZE
    x, y = grid_to_pixel(cell[0], cell[1], size)
    pos = Position(x, y, map=map_id)
    world.add(eid, pos)
    world.map_set(eid, map_id)
    return pos


def spawn_from_descriptor(world: World, desc: dict) -> int:
    """Create one entity from a loader descriptor.

    ``desc`` keys: ``map``, ``cell``, ``name``, ``kind``, plus optional
    ``hitbox`` / ``sprite`` sub-dicts.  Sprite handles are resolved by
    the caller.
    """
    eid = world.spawn()
    world.add(eid, Identity(name=desc.get("name", "unnamed"),
                            kind=desc.get("kind", "npc")))
    place(world, eid, desc["map"], tuple(desc.get("cell", (0, 0))))
    world.add(eid, Facing())
    world.add(eid, Hitbox())
    world.add(eid, Sprite())
    _attach_table_components(world, eid, desc)
    return eid


def spawn_player(world: World, map_id: str, cell: tuple[int, int],
                 sprite=None) -> int:
    """Spawn the player and make its map the active one."""
    hb = tuning.section("player.hitbox")
    eid = spawn_from_descriptor(world, {
        "name": "player", "kind": "player", "map": map_id, "cell": cell,
        "hitbox": {**hb, "solid": False},
        "sprite": {"w": PLAYER_WIDTH, "h": PLAYER_HEIGHT, "layer": 10},
    })
    world.add(eid, Player(speed=tuning.get("player", "speed", PLAYER_SPEED)))
    if sprite is not None:
        world.get(eid, Sprite).handle = sprite
    graph = world.res(WorldGraph)
    if graph is not None and graph.current_map_id != map_id:
        graph.switch_to(map_id, via="spawn", eid=eid)
    # Spawning onto a waypoint trigger must not fire it.
    last = center_cell(world, eid, graph) if graph is not None else tuple(cell)
    world.add(eid, Transit(last_cell=last))
    return eid


def spawn_npc(world: World, name: str, map_id: str, cell: tuple[int, int],
              script: tuple = (), *, speaker: str = "", sprite=None,
              hitbox: dict | None = None) -> int:
    """Spawn a static, talkable NPC."""
    desc: dict = {"name": name, "kind": "npc", "map": map_id, "cell": cell}
    if hitbox is not None:
        desc["hitbox"] = hitbox
    eid = spawn_from_descriptor(world, desc)
    if sprite is not None:
        world.get(eid, Sprite).handle = sprite
    world.add(eid, DialogScript(nodes=tuple(script), speaker=speaker or name))
    return eid
