"""core/constants.py — Shared constants used across the codebase.

Centralises magic numbers so there's exactly one place to change them.
Most of these are defaults; ``data/tuning.toml`` can override the ones
read through ``core.tuning.get``.

Unit System
-----------
All gameplay positions are measured in **world pixels**:

    1 tile = TILE_SIZE px   (64 by default)

Grid cells are addressed as ``(col, row)``.  Entity positions are the
top-left corner of the sprite; collision uses the inset *hitbox*.
"""

# ── Grid ─────────────────────────────────────────────────────────────
TILE_SIZE = 64  # px per tile

# Tile id 0 is the authored "no tile" value: never drawn, never solid.
TILE_EMPTY = 0

DIRECTIONS = ("up", "down", "left", "right")

# ── Player ───────────────────────────────────────────────────────────
PLAYER_WIDTH = 64      # sprite bounds (px)
PLAYER_HEIGHT = 64
PLAYER_SPEED = 350.0   # px/s

# Hitbox inset — smaller than the sprite so movement feels better.
HITBOX_OX = 16
HITBOX_OY = 32
HITBOX_W = 32
HITBOX_H = 32

# ── Interaction ──────────────────────────────────────────────────────
INTERACT_RANGE = 80.0  # px, per axis, between hitbox centres

# Distance from a map edge (px) at which an edge link fires.
EDGE_THRESHOLD = 8.0

# ── Inventory ────────────────────────────────────────────────────────
INVENTORY_CAPACITY = 27
INVENTORY_COLUMNS = 9

# ── Render ───────────────────────────────────────────────────────────
BACKGROUND_COLOR = (20, 20, 25)
MISSING_TILE_COLOR = (255, 0, 255)
