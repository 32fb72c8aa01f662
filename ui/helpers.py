"""ui.helpers — Shared drawing utilities for modal panels."""

from __future__ import annotations
import pygame


PANEL_BG = (35, 35, 55)
PANEL_BORDER = (140, 140, 180)


def draw_overlay(surface: pygame.Surface, alpha: int = 200) -> None:
    """Full-screen semi-transparent dark overlay."""
    overlay = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    overlay.fill((0, 0, 0, alpha))
    surface.blit(overlay, (0, 0))


def draw_panel(surface: pygame.Surface, rect: pygame.Rect) -> None:
    pygame.draw.rect(surface, PANEL_BG, rect)
    pygame.draw.rect(surface, PANEL_BORDER, rect, 2)


def draw_title_bar(
    surface: pygame.Surface, app,
    x: int, y: int, w: int, text: str,
) -> None:
    """Draw a 30 px title bar at the top of a panel."""
    pygame.draw.rect(surface, (50, 50, 75), (x, y, w, 30))
    app.draw_text(surface, text, x + 12, y + 7,
                  (200, 200, 255), font=app.font_lg)


# ── item icons ─────────────────────────────────────────────────────

def draw_icon(surface: pygame.Surface, app, icon, rect: pygame.Rect,
              name: str = "") -> None:
    """Draw an item icon handle inside *rect*.

    Surfaces are scaled to fit, colour triples become a filled square,
    anything else falls back to the first letter of the item's name.
    """
    inner = rect.inflate(-8, -8)
    if isinstance(icon, pygame.Surface):
        surface.blit(pygame.transform.scale(icon, inner.size), inner.topleft)
    elif isinstance(icon, (tuple, list)) and len(icon) in (3, 4):
        pygame.draw.rect(surface, tuple(icon), inner)
    else:
        letter = (name or "?")[0].upper()
        app.draw_text(surface, letter, inner.x + inner.w // 2 - 5,
                      inner.y + inner.h // 2 - 9, (220, 220, 220), font=app.font_lg)


def draw_count(surface: pygame.Surface, app, rect: pygame.Rect, count: int) -> None:
    if count > 1:
        app.draw_text(surface, str(count), rect.right - 18, rect.bottom - 16,
                      (255, 255, 255), font=app.font_sm)
