"""components — ECS component dataclasses, organised by domain.

Submodules
----------
spatial        Position, Facing, Hitbox, Transit
rendering      Identity, Sprite
dialogue       DialogScript
resources      GameClock, Camera, Player
item_registry  ItemRegistry
dev_log        DevLog

All public names are re-exported here so code can do
``from components import Position``.
"""

# ── Spatial ──────────────────────────────────────────────────────────
from components.spatial import Position, Facing, Hitbox, Transit

# ── Rendering ────────────────────────────────────────────────────────
from components.rendering import Identity, Sprite

# ── Dialogue ─────────────────────────────────────────────────────────
from components.dialogue import DialogScript

# ── World resources / singletons ─────────────────────────────────────
from components.resources import GameClock, Camera, Player

# ── Registries / logs ────────────────────────────────────────────────
from components.item_registry import ItemRegistry
from components.dev_log import DevLog

__all__ = [
    # spatial
    "Position", "Facing", "Hitbox", "Transit",
    # rendering
    "Identity", "Sprite",
    # dialogue
    "DialogScript",
    # resources
    "GameClock", "Camera", "Player",
    # registries / logs
    "ItemRegistry", "DevLog",
]
