"""
scenes/world_scene.py — Top-down tile view

Feeds pygame input through the InputManager into ``logic.tick.tick``,
keeps the modal views (dialog box, inventory grid) in step with the
World, and draws the active map.

Keys: WASD/arrows move, E talks / advances dialog, W/S pick a choice,
Esc leaves a conversation, I toggles the inventory, Tab shows the debug
overlay, G the tile grid.
"""

from __future__ import annotations
import pygame
from core.scene import Scene
from core.app import App
from core.constants import BACKGROUND_COLOR
from core.tiles import TileRegistry
from core.zone import WorldGraph
from components import Camera
from logic.camera import camera_system
from logic.dialogue import find_nearby_npc, is_engaged
from logic.input_manager import InputManager
from logic.tick import player_eid, tick
from ui import ModalStack
from scenes.world_draw import (
    draw_actors, draw_debug_overlay, draw_hud, draw_map, draw_talk_hint,
)
from scenes.world_helpers import (
    route_ui_event, subscribe_dev_log, sync_modals, update_input_context,
)


class WorldScene(Scene):
    def __init__(self):
        self.show_debug = False
        self.show_grid = False
        self.talk_target: int | None = None

        # UI modal stack
        self.modals = ModalStack()

        # Intent-based input system
        self.input = InputManager()
        self._subscribed = False

    def on_enter(self, app: App):
        if not self._subscribed:
            subscribe_dev_log(app.world)
            self._subscribed = True
        update_input_context(self, app.world)

    # ── event handler ────────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event, app: App):
        update_input_context(self, app.world)
        self.input.feed(event)
        if self.modals.is_open and event.type in (
                pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION):
            route_ui_event(self, event, app.world)

    # ── update ───────────────────────────────────────────────────────

    def update(self, dt: float, app: App):
        world = app.world
        self.input.end_frame()

        if self.input.just("toggle_debug"):
            self.show_debug = not self.show_debug
        if self.input.just("toggle_grid"):
            self.show_grid = not self.show_grid

        tick(world, self.input.snapshot(), dt)
        self.input.begin_frame()

        sync_modals(self, world)
        update_input_context(self, world)

        camera_system(world, app.size)
        pid = player_eid(world)
        self.talk_target = None
        if pid is not None and not is_engaged(world) and not self.modals.is_open:
            self.talk_target = find_nearby_npc(world, pid)

    # ── draw ─────────────────────────────────────────────────────────

    def draw(self, surface: pygame.Surface, app: App):
        surface.fill(BACKGROUND_COLOR)
        world = app.world
        cam = world.res(Camera) or Camera()
        graph = world.res(WorldGraph)
        tiles = world.res(TileRegistry) or TileRegistry()

        if graph is not None:
            draw_map(surface, graph, tiles, cam, self.show_grid)
        draw_actors(surface, app, cam)
        draw_talk_hint(surface, app, cam, self.talk_target)
        draw_hud(surface, app)

        if self.show_debug:
            draw_debug_overlay(surface, app, cam)

        if self.modals.is_open:
            self.modals.draw(surface, app)
