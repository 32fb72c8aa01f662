"""
core/app.py — Pygame application shell

Handles the window, main loop, and scene stack.  Game logic lives in
Scenes; the App only pumps events, clocks frames and presents the
virtual surface.

    app = App(title="Tileworld", width=960, height=640)
    app.world = build_world(assets=AssetLoader("data"))
    app.push_scene(WorldScene())
    app.run()
"""

from __future__ import annotations
import pygame
from core.scene import Scene
from core.ecs import World


_MOUSE_EVENTS = (pygame.MOUSEBUTTONDOWN, pygame.MOUSEBUTTONUP, pygame.MOUSEMOTION)


class App:
    def __init__(self, title: str = "Tileworld", width: int = 960,
                 height: int = 640, fps: int = 60, max_dt: float = 0.05):
        pygame.init()
        self._windowed_size = (width, height)
        # The virtual (design) resolution — all game rendering targets this.
        self._virtual_size = (width, height)
        self._render_surface = pygame.Surface((width, height))
        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.running = True
        self.fullscreen = False
        self.fps = fps
        # A long stall must not turn into one giant step through a wall.
        self.max_dt = max_dt
        self.dt = 0.0

        # Scene stack — only the top scene is active
        self._scenes: list[Scene] = []

        # Replaced by the bootstrap once the world file is loaded
        self.world = World()

        self.font = pygame.font.SysFont("monospace", 14)
        self.font_sm = pygame.font.SysFont("monospace", 11)
        self.font_lg = pygame.font.SysFont("monospace", 18)

    @property
    def size(self) -> tuple[int, int]:
        return self._virtual_size

    # -- Scene management --

    @property
    def scene(self) -> Scene | None:
        return self._scenes[-1] if self._scenes else None

    def push_scene(self, scene: Scene):
        if self._scenes:
            self._scenes[-1].on_exit(self)
        self._scenes.append(scene)
        scene.on_enter(self)

    def pop_scene(self):
        if self._scenes:
            self._scenes[-1].on_exit(self)
            self._scenes.pop()
        if self._scenes:
            self._scenes[-1].on_enter(self)

    # -- Coordinate mapping --

    def _to_virtual(self, pos: tuple[int, int]) -> tuple[int, int]:
        sw, sh = self.screen.get_size()
        vw, vh = self._virtual_size
        return int(pos[0] * vw / sw), int(pos[1] * vh / sh)

    def _remap_mouse_event(self, event: pygame.event.Event) -> pygame.event.Event:
        """Return a copy of *event* with .pos mapped to virtual coords."""
        if not hasattr(event, "pos"):
            return event
        attrs = {k: v for k, v in event.dict.items() if k != "pos"}
        attrs["pos"] = self._to_virtual(event.pos)
        return pygame.event.Event(event.type, **attrs)

    # -- Main loop --

    def run(self):
        while self.running:
            self.dt = min(self.clock.tick(self.fps) / 1000.0, self.max_dt)

            for event in pygame.event.get():
                self._dispatch(event)

            if self.scene:
                self.scene.update(self.dt, self)
                self.scene.draw(self._render_surface, self)

            pygame.transform.scale(self._render_surface,
                                   self.screen.get_size(), self.screen)
            pygame.display.flip()

        pygame.quit()

    def _dispatch(self, event: pygame.event.Event):
        """Window events stay here; everything else goes to the top scene."""
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_F11:
            self.toggle_fullscreen()
        elif event.type == pygame.VIDEORESIZE:
            if not self.fullscreen:
                self._windowed_size = (event.w, event.h)
                self.screen = pygame.display.set_mode(self._windowed_size,
                                                      pygame.RESIZABLE)
        elif self.scene is not None:
            if event.type in _MOUSE_EVENTS:
                event = self._remap_mouse_event(event)
            self.scene.handle_event(event, self)

    def toggle_fullscreen(self):
        """Switch between windowed and fullscreen (F11)."""
        self.fullscreen = not self.fullscreen
        if self.fullscreen:
            self.screen = pygame.display.set_mode((0, 0), pygame.FULLSCREEN)
        else:
            self.screen = pygame.display.set_mode(
                self._windowed_size, pygame.RESIZABLE)

    # -- Convenience --

    def draw_text(self, surface: pygame.Surface, text: str, x: int, y: int,
                  color=(255, 255, 255), font=None):
        """Quick text draw. Returns the rect for layout chaining."""
        f = font or self.font
        return surface.blit(f.render(text, True, color), (x, y))

    def draw_text_bg(self, surface: pygame.Surface, text: str, x: int, y: int,
                     color=(255, 255, 255), bg=(0, 0, 0, 160), font=None,
                     pad: int = 2):
        """Draw text with a semi-transparent background box."""
        f = font or self.font
        img = f.render(text, True, color)
        w, h = img.get_size()
        bg_surf = pygame.Surface((w + pad * 2, h + pad * 2), pygame.SRCALPHA)
        bg_surf.fill(bg)
        surface.blit(bg_surf, (x - pad, y - pad))
        return surface.blit(img, (x, y))
