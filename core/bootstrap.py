"""core/bootstrap.py — World bootstrap helpers.

Extracted from main.py to keep the entry point clean and readable.
Handles:
  - Creating a World with every shared resource in place
  - Loading the world definition
  - Player creation at the configured start cell
"""

from __future__ import annotations
from pathlib import Path

from components import Camera, DevLog, GameClock, ItemRegistry
from core import tuning
from core.assets import NullAssetLoader
from core.constants import INVENTORY_CAPACITY, INVENTORY_COLUMNS, TILE_SIZE
from core.data import DataLoader
from core.ecs import World
from core.events import EventBus
from core.tiles import TileRegistry
from core.zone import WorldGraph
from logic.dialogue import QuestLog
from logic.entity_factory import spawn_player
from logic.inventory import Inventory


DEFAULT_WORLD = Path(__file__).resolve().parent.parent / "data" / "world.toml"


def new_world(assets=None, tile_size: int | None = None) -> World:
    """Empty World with tiles, graph, inventory and bookkeeping resources.

    ``assets`` defaults to a ``NullAssetLoader`` so tests never need a
    display.
    """
    if tile_size is None:
        tile_size = tuning.get("world", "tile_size", TILE_SIZE)
    world = World()
    bus = EventBus()
    registry = ItemRegistry()
    world.set_res(bus)
    world.set_res(DevLog())
    world.set_res(GameClock())
    world.set_res(Camera())
    world.set_res(QuestLog())
    world.set_res(registry)
    world.set_res(TileRegistry(assets or NullAssetLoader()))
    world.set_res(WorldGraph(tile_size=tile_size, bus=bus))
    world.set_res(Inventory(
        capacity=tuning.get("inventory", "capacity", INVENTORY_CAPACITY),
        columns=tuning.get("inventory", "columns", INVENTORY_COLUMNS),
        registry=registry, bus=bus,
    ))
    return world


def build_world(path: str | Path | None = None, assets=None) -> World:
    """Load a world definition and spawn the player.

    Raises ``WorldDataError`` for malformed data and ``AssetLoadError``
    when a visual can't be loaded.
    """
    world = new_world(assets)
    loader = DataLoader(world, assets)
    loader.load(path or DEFAULT_WORLD)

    graph = world.res(WorldGraph)
    start = graph.current_map
    # No start cell: begin in the middle of the start map.
    start_cell = tuple(loader.settings.get(
        "start_cell", (start.width // 2, start.height // 2)))
    sprite = loader.load_visual(loader.settings.get("player_sprite"),
                                "player", (64, 64))
    spawn_player(world, graph.current_map_id, start_cell, sprite=sprite)
    # Spawning is setup, not gameplay: don't report it as a map change.
    world.res(EventBus).clear()
    return world
