"""scenes/world_draw.py — Rendering helpers for the world scene.

All pure-draw functions live here so that WorldScene.draw() stays thin.
Every function receives the data it needs as parameters — no implicit
coupling to the scene object beyond what is explicitly passed.

The core only ever produces *handles* (whatever the asset loader
returned) and screen rects.  ``draw_tile`` and ``draw_actor`` are the
two calls that turn a handle into pixels.
"""

from __future__ import annotations
import math
import pygame
from core.app import App
from core.constants import MISSING_TILE_COLOR, TILE_EMPTY
from core.events import EventBus
from core.geometry import hitbox_rect
from core.tiles import TileRegistry
from core.zone import WorldGraph
from components import (
    Camera, DevLog, DialogScript, Hitbox, Identity, Player, Position, Sprite,
)
from logic.inventory import Inventory


# ── Handle → pixels ────────────────────────────────────────────────

def _blit_handle(surface: pygame.Surface, handle, x: int, y: int, w: int, h: int,
                 fallback=None):
    if isinstance(handle, pygame.Surface):
        if handle.get_size() != (w, h):
            handle = pygame.transform.scale(handle, (w, h))
        surface.blit(handle, (x, y))
    elif isinstance(handle, (tuple, list)) and len(handle) in (3, 4):
        pygame.draw.rect(surface, tuple(handle), (x, y, w, h))
    elif fallback is not None:
        pygame.draw.rect(surface, fallback, (x, y, w, h))


def draw_tile(surface: pygame.Surface, handle, x: int, y: int, w: int, h: int):
    _blit_handle(surface, handle, x, y, w, h)


def draw_actor(surface: pygame.Surface, handle, x: int, y: int, w: int, h: int):
    _blit_handle(surface, handle, x, y, w, h, fallback=MISSING_TILE_COLOR)


# ── Tiles ───────────────────────────────────────────────────────────

def visible_cells(graph: WorldGraph, cam: Camera,
                  view: tuple[int, int]) -> tuple[int, int, int, int]:
    """``(start_col, start_row, end_col, end_row)`` on screen, end exclusive."""
    data = graph.current_map
    if data is None:
        return 0, 0, 0, 0
    ts = graph.tile_size
    start_col = max(0, int(math.floor(cam.x / ts)))
    start_row = max(0, int(math.floor(cam.y / ts)))
    end_col = min(data.width, int(math.ceil((cam.x + view[0]) / ts)))
    end_row = min(data.height, int(math.ceil((cam.y + view[1]) / ts)))
    return start_col, start_row, end_col, end_row


def draw_map(surface: pygame.Surface, graph: WorldGraph, tiles: TileRegistry,
             cam: Camera, show_grid: bool = False):
    data = graph.current_map
    if data is None:
        return
    ts = graph.tile_size
    start_col, start_row, end_col, end_row = visible_cells(graph, cam,
                                                           surface.get_size())
    for row in range(start_row, end_row):
        for col in range(start_col, min(end_col, data.row_length(row))):
            tile_id = data.rows[row][col]
            x = int(col * ts - cam.x)
            y = int(row * ts - cam.y)
            if tile_id is not None and tile_id != TILE_EMPTY:
                draw_tile(surface, tiles.visual(tile_id), x, y, ts, ts)
            if show_grid:
                pygame.draw.rect(surface, (255, 255, 255), (x, y, ts, ts), 1)


# ── Actors ──────────────────────────────────────────────────────────

def draw_actors(surface: pygame.Surface, app: App, cam: Camera):
    graph = app.world.res(WorldGraph)
    if graph is None or graph.current_map_id is None:
        return
    actors = []
    for eid, pos, sprite in app.world.query_map(graph.current_map_id, Position, Sprite):
        actors.append((sprite.layer, pos.y, eid, pos, sprite))
    actors.sort(key=lambda a: (a[0], a[1]))

    sw, sh = surface.get_size()
    for _, _, eid, pos, sprite in actors:
        sx = int(pos.x - cam.x)
        sy = int(pos.y - cam.y)
        if sx + sprite.w < 0 or sy + sprite.h < 0 or sx > sw or sy > sh:
            continue
        draw_actor(surface, sprite.handle, sx, sy, sprite.w, sprite.h)


def draw_talk_hint(surface: pygame.Surface, app: App, cam: Camera, npc_eid: int | None):
    """Small prompt above the NPC the player could talk to."""
    if npc_eid is None:
        return
    pos = app.world.get(npc_eid, Position)
    ident = app.world.get(npc_eid, Identity)
    if pos is None:
        return
    label = f"[E] {ident.name if ident else 'Talk'}"
    app.draw_text_bg(surface, label, int(pos.x - cam.x), int(pos.y - cam.y) - 18,
                     (255, 240, 160), font=app.font_sm)


# ── HUD ────────────────────────────────────────────────────────────

def draw_hud(surface: pygame.Surface, app: App):
    sw = surface.get_width()
    graph = app.world.res(WorldGraph)
    if graph is not None:
        app.draw_text_bg(surface, f"Map: {graph.current_map_id}", sw - 160, 8,
                         (200, 200, 255))

    inv = app.world.res(Inventory)
    if inv is None:
        return
    items = inv.items()
    if items:
        parts = [f"{s.name}x{s.count}" for _, s in items[:6]]
        if len(items) > 6:
            parts.append("…")
        items_str = ", ".join(parts)
    else:
        items_str = "(empty)"
    app.draw_text_bg(surface, f"Items: {items_str}", 8, 8, (100, 200, 255))
    app.draw_text_bg(surface, "[WASD] Move  [E] Talk  [I] Inventory  [Tab] Debug",
                     8, surface.get_height() - 22, (80, 160, 200), font=app.font_sm)


# ── Debug overlay ──────────────────────────────────────────────────

def draw_debug_overlay(surface: pygame.Surface, app: App, cam: Camera):
    world = app.world
    graph = world.res(WorldGraph)
    if graph is None:
        return
    ts = graph.tile_size

    # Hitboxes: green for the player, cyan for solid NPCs, grey otherwise.
    for eid, pos, hb in world.query_map(graph.current_map_id, Position, Hitbox):
        r = hitbox_rect(pos, hb)
        if world.has(eid, Player):
            color = (0, 255, 0)
        elif hb.solid:
            color = (0, 255, 255)
        else:
            color = (120, 120, 120)
        pygame.draw.rect(surface, color,
                         (int(r.x - cam.x), int(r.y - cam.y), int(r.w), int(r.h)), 1)
        if world.has(eid, DialogScript):
            cx, cy = r.center
            reach = int(_interact_range())
            pygame.draw.rect(surface, (255, 220, 100),
                             (int(cx - reach - cam.x), int(cy - reach - cam.y),
                              reach * 2, reach * 2), 1)

    # Waypoint triggers on this map.
    for wp in graph.waypoints_from(graph.current_map_id):
        col, row = wp.trigger_cell
        rect = (int(col * ts - cam.x), int(row * ts - cam.y), ts, ts)
        pygame.draw.rect(surface, (255, 80, 255), rect, 2)
        app.draw_text(surface, f"→{wp.to_map}", rect[0] + 2, rect[1] + 2,
                      (255, 180, 255), app.font_sm)

    # ── Left panel: state + recent DevLog entries ──────────────────
    panel_bg = pygame.Surface((340, 260), pygame.SRCALPHA)
    panel_bg.fill((0, 0, 0, 150))
    surface.blit(panel_bg, (2, 28))

    y = 34
    lines = [f"FPS: {int(app.clock.get_fps())}",
             f"Camera: ({cam.x:.0f}, {cam.y:.0f})"]
    result = world.query_one(Player, Position)
    if result:
        eid, _, pos = result
        r = hitbox_rect(pos, world.get(eid, Hitbox) or Hitbox())
        cx, cy = r.center
        lines.append(f"Player: ({pos.x:.1f}, {pos.y:.1f})  "
                     f"cell ({int(cx // ts)}, {int(cy // ts)})")
    data = graph.current_map
    if data is not None:
        links = " ".join(f"{d[0]}:{t}" for d, t in data.links.items() if t)
        lines.append(f"Map {data.id} {data.width}x{data.height}  {links or '(no links)'}")
    bus = world.res(EventBus)
    if bus is not None:
        counts = "  ".join(f"{name} {n}" for name, n in sorted(bus.stats().items()))
        lines.append(f"Events: {counts or 'none yet'}")
    for text in lines:
        app.draw_text(surface, text, 8, y, (0, 255, 0), app.font_sm)
        y += 14

    log = world.res(DevLog)
    if log is not None:
        y += 6
        for entry in log.recent(12):
            app.draw_text(surface, f"{entry['t']:7.2f} [{entry['cat']}] {entry['msg']}",
                          8, y, (200, 200, 120), app.font_sm)
            y += 14


def _interact_range() -> float:
    from logic.dialogue import interact_range
    return interact_range()
