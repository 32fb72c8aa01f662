"""
core/data.py — World-definition TOML → World resources + entities

Reads ``data/world.toml`` and fills an existing World: tiles go into
the TileRegistry, item display data into the ItemRegistry, maps and
waypoints into the WorldGraph, NPCs become entities.

Usage:
    loader = DataLoader(world, assets)
    npc_ids = loader.load("data/world.toml")   # returns {name: entity_id}

File layout::

    [settings]                 tile_size, start_map, start_cell, player_sprite
    [tiles.<id>]               visual (path or [r, g, b]), solid, height
    [items.<name>]             name, icon
    [maps.<id>]                rows (-1 marks a void cell), optional links table
    [[waypoint]]               from, trigger, to, spawn
    [npc.<name>]               map, cell, speaker, sprite, hitbox, script

Map ids of the form ``"x,y"`` are linked to their grid neighbours
automatically; ``[maps.<id>.links]`` adds or overrides links by hand.

Anything malformed raises ``WorldDataError`` naming the offending entry.
Visual sources go through the asset loader; its ``AssetLoadError`` is
passed through untouched.
"""

from __future__ import annotations
try:
    import tomllib
except ModuleNotFoundError:  # Python < 3.11
    import tomli as tomllib
from pathlib import Path

from core.ecs import World
from core.errors import InvalidMapShape, WorldDataError
from core.tiles import TileRegistry
from core.zone import WorldGraph, parse_coord_key, coord_key


VOID = -1


def _cell(value, where: str) -> tuple[int, int]:
    if (not isinstance(value, (list, tuple)) or len(value) != 2
            or not all(isinstance(v, int) for v in value)):
        raise WorldDataError(f"{where}: expected a [col, row] pair, got {value!r}")
    return int(value[0]), int(value[1])


def _tile_id(key: str):
    try:
        return int(key)
    except (TypeError, ValueError):
        return key


def _map_id(key: str) -> str:
    xy = parse_coord_key(key)
    return coord_key(*xy) if xy else str(key)


class DataLoader:
    def __init__(self, world: World, assets=None):
        self.world = world
        self.assets = assets
        self.settings: dict = {}

    def load(self, path: str | Path) -> dict[str, int]:
        """Load a world file.  Returns ``{npc name: entity id}``."""
        path = Path(path)
        with open(path, "rb") as f:
            data = tomllib.load(f)
        ids = self.load_data(data)
        print(f"[WORLD] loaded {path}")
        return ids

    def load_data(self, data: dict) -> dict[str, int]:
        """Same as ``load`` for an already-parsed table (tests use this)."""
        self.settings = dict(data.get("settings", {}))
        graph = self.world.res(WorldGraph)
        if graph is None:
            raise WorldDataError("world has no WorldGraph resource")
        if "tile_size" in self.settings:
            graph.tile_size = int(self.settings["tile_size"])

        self.load_tiles(data.get("tiles", {}))
        self.load_items(data.get("items", {}))
        self.load_maps(data.get("maps", {}))
        self.load_waypoints(data.get("waypoint", []))
        return self.load_npcs(data.get("npc", {}))

    # ── sections ─────────────────────────────────────────────────────

    def load_tiles(self, section: dict) -> int:
        tiles = self.world.res(TileRegistry)
        if tiles is None:
            tiles = TileRegistry(self.assets)
            self.world.set_res(tiles)
        for key, spec in section.items():
            if not isinstance(spec, dict):
                raise WorldDataError(f"tiles.{key}: expected a table")
            tiles.register(_tile_id(key), spec.get("visual"),
                           solid=bool(spec.get("solid", False)),
                           height=float(spec.get("height", 0.0)))
        print(f"[TILES] {len(tiles)} tile types registered")
        return len(tiles)

    def load_items(self, section: dict) -> None:
        from components import ItemRegistry

        registry = self.world.res(ItemRegistry)
        if registry is None:
            registry = ItemRegistry()
            self.world.set_res(registry)
        for item_id, spec in section.items():
            if not isinstance(spec, dict):
                raise WorldDataError(f"items.{item_id}: expected a table")
            icon = spec.get("icon")
            if icon is not None and self.assets is not None:
                icon = self.assets.load(icon, owner=f"item {item_id}", size=(40, 40))
            extra = {k: v for k, v in spec.items() if k not in ("name", "icon")}
            registry.register(item_id, spec.get("name", item_id), icon, **extra)

    def load_maps(self, section: dict) -> list[str]:
        graph = self.world.res(WorldGraph)
        if not section:
            raise WorldDataError("world defines no maps")
        named: dict[str, list] = {}
        for key, spec in section.items():
            rows = spec.get("rows") if isinstance(spec, dict) else None
            if rows is None:
                raise WorldDataError(f"maps.{key}: missing rows")
            named[key] = [[None if c == VOID else c for c in row]
                          if isinstance(row, list) else row for row in rows]
        try:
            ids = graph.define_world(named)
        except InvalidMapShape as exc:
            raise WorldDataError(str(exc)) from exc

        for key, spec in section.items():
            for direction, target in spec.get("links", {}).items():
                target_id = _map_id(target)
                if target_id not in graph:
                    raise WorldDataError(
                        f"maps.{key}.links.{direction}: unknown map {target!r}")
                graph.link(_map_id(key), direction, target_id)

        start = self.settings.get("start_map")
        if start is not None:
            start = _map_id(start)
            if start not in graph:
                raise WorldDataError(f"settings.start_map: unknown map {start!r}")
            graph.current_map_id = start
        return ids

    def load_waypoints(self, records: list) -> int:
        graph = self.world.res(WorldGraph)
        seen: set = set()
        for i, rec in enumerate(records):
            where = f"waypoint[{i}]"
            if not isinstance(rec, dict):
                raise WorldDataError(f"{where}: expected a table")
            missing = [k for k in ("from", "trigger", "to", "spawn") if k not in rec]
            if missing:
                raise WorldDataError(f"{where}: missing {', '.join(missing)}")
            src, dst = _map_id(rec["from"]), _map_id(rec["to"])
            for label, map_id in (("from", src), ("to", dst)):
                if map_id not in graph:
                    raise WorldDataError(f"{where}.{label}: unknown map {map_id!r}")
            trigger = _cell(rec["trigger"], f"{where}.trigger")
            spawn = _cell(rec["spawn"], f"{where}.spawn")
            if (src, trigger) in seen:
                print(f"[WORLD] warning: {where} repeats trigger {src}{trigger}; "
                      f"the earlier waypoint wins")
            seen.add((src, trigger))
            graph.add_waypoint(src, trigger, dst, spawn)
        return len(records)

    def load_npcs(self, section: dict) -> dict[str, int]:
        from logic.dialogue import parse_script
        from logic.entity_factory import spawn_npc
        from components import Sprite

        graph = self.world.res(WorldGraph)
        ids: dict[str, int] = {}
        for name, spec in section.items():
            where = f"npc.{name}"
            if not isinstance(spec, dict):
                raise WorldDataError(f"{where}: expected a table")
            map_id = _map_id(spec.get("map", graph.current_map_id or ""))
            if map_id not in graph:
                raise WorldDataError(f"{where}.map: unknown map {map_id!r}")
            cell = _cell(spec.get("cell", [0, 0]), f"{where}.cell")
            script = parse_script(spec.get("script", []), f"{where}.script")
            eid = spawn_npc(self.world, name, map_id, cell, script,
                            speaker=spec.get("speaker", ""),
                            hitbox=spec.get("hitbox"))

            sprite_spec = spec.get("sprite")
            if isinstance(sprite_spec, dict):
                sprite = self.world.get(eid, Sprite)
                sprite.source = sprite_spec.get("source")
                sprite.w = int(sprite_spec.get("w", sprite.w))
                sprite.h = int(sprite_spec.get("h", sprite.h))
                sprite.handle = self.load_visual(sprite.source, where,
                                                 (sprite.w, sprite.h))
            ids[name] = eid
        if ids:
            print(f"[WORLD] spawned {len(ids)} NPCs")
        return ids

    def load_visual(self, source, owner: str, size: tuple[int, int]):
        if source is None or self.assets is None:
            return source
        return self.assets.load(source, owner=owner, size=size)
