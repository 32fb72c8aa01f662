"""
core/scene.py — Scene interface

A scene owns one screen's worth of input handling and drawing.  The App
keeps a stack of them and drives only the top one; the tile world
itself lives on ``app.world``, so scenes can come and go without
touching game state.

    class TitleScene(Scene):
        def handle_event(self, event, app):
            if event.type == pygame.KEYDOWN:
                app.pop_scene()

        def draw(self, surface, app):
            app.draw_text(surface, "Press any key", 40, 40)
"""

from __future__ import annotations
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import pygame
    from core.app import App


class Scene:
    def on_enter(self, app: App):
        """Became the top of the stack (pushed, or the one above popped)."""

    def on_exit(self, app: App):
        """Covered by another scene or popped."""

    def handle_event(self, event: pygame.event.Event, app: App):
        """One pygame event, already mapped to virtual-screen coordinates."""

    def update(self, dt: float, app: App):
        """Advance by *dt* seconds (capped by ``App.max_dt``)."""

    def draw(self, surface: pygame.Surface, app: App):
        """Render onto the virtual screen surface."""
