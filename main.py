"""
main.py — Bootstrap

1. Load tuning
2. Create the app (window, fonts)
3. Load the world definition → tiles, maps, waypoints, NPCs, player
4. Push the world scene
5. Run

    python main.py [path/to/world.toml]

A visual that fails to load aborts startup with a non-zero exit code.
"""

import sys
from pathlib import Path

from core import tuning
from core.app import App
from core.assets import AssetLoader
from core.bootstrap import DEFAULT_WORLD, build_world
from core.constants import TILE_SIZE
from core.errors import AssetLoadError, WorldDataError
from scenes.world_scene import WorldScene


def main(argv: list[str]) -> int:
    tuning.load()
    world_path = Path(argv[1]) if len(argv) > 1 else DEFAULT_WORLD

    app = App(
        title=tuning.get("window", "title", "Tileworld"),
        width=tuning.get("window", "width", 960),
        height=tuning.get("window", "height", 640),
        fps=tuning.get("window", "fps", 60),
    )

    assets = AssetLoader(base_dir=world_path.parent,
                         tile_size=tuning.get("world", "tile_size", TILE_SIZE))
    try:
        app.world = build_world(world_path, assets)
    except AssetLoadError as exc:
        print(f"[MAIN] {exc}")
        return 1
    except WorldDataError as exc:
        print(f"[MAIN] bad world file {world_path}: {exc}")
        return 2

    app.push_scene(WorldScene())
    app.run()
    return 0


def run():
    sys.exit(main(sys.argv))


if __name__ == "__main__":
    run()
