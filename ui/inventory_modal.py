"""ui.inventory_modal — Player inventory grid.

A ``columns`` × ``rows`` grid of slots (9×3 by default) drawn over the
world.  Drag and drop with the left mouse button: press on a slot to
pick its item up, release over another slot to place, merge or swap.
Releasing anywhere else sends the item back where it came from.

The modal owns no item state.  It reads the ``Inventory`` resource and
returns ``BeginDrag`` / ``DropItem`` commands for the scene to apply.
"""

from __future__ import annotations
import pygame

from ui.modal import Modal
from ui.commands import BeginDrag, DropItem, UICommand
from ui.helpers import (
    draw_count, draw_icon, draw_overlay, draw_panel, draw_title_bar,
)
from logic.inventory import Inventory


SLOT = 56      # px per slot, square
GAP = 6
PAD = 14
TITLE_H = 30


class InventoryModal(Modal):
    """Slot-grid overlay for the player's bag."""

    def __init__(self, inventory: Inventory, registry=None,
                 title: str = "Inventory") -> None:
        self.inventory = inventory
        self.registry = registry     # ItemRegistry resource (or None)
        self.title = title
        self.mouse = (0, 0)
        self._origin = (0, 0)
        self._hover_idx = -1

    # ── layout ──────────────────────────────────────────────────────

    def panel_size(self) -> tuple[int, int]:
        inv = self.inventory
        w = PAD * 2 + inv.columns * SLOT + (inv.columns - 1) * GAP
        h = TITLE_H + PAD * 2 + inv.rows * SLOT + (inv.rows - 1) * GAP + 20
        return w, h

    def layout(self, screen: tuple[int, int]) -> None:
        w, h = self.panel_size()
        self._origin = ((screen[0] - w) // 2, (screen[1] - h) // 2)

    def slot_rect(self, index: int) -> pygame.Rect:
        col = index % self.inventory.columns
        row = index // self.inventory.columns
        x = self._origin[0] + PAD + col * (SLOT + GAP)
        y = self._origin[1] + TITLE_H + PAD + row * (SLOT + GAP)
        return pygame.Rect(x, y, SLOT, SLOT)

    def slot_at(self, pos: tuple[int, int]) -> int | None:
        """Index of the slot under *pos*, or None."""
        for i in range(self.inventory.capacity):
            if self.slot_rect(i).collidepoint(pos):
                return i
        return None

    # ── Modal interface ─────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        if event.type == pygame.MOUSEMOTION:
            self.mouse = event.pos
            idx = self.slot_at(event.pos)
            self._hover_idx = -1 if idx is None else idx
            return []
        if getattr(event, "button", None) != 1:
            return []
        if event.type == pygame.MOUSEBUTTONDOWN:
            self.mouse = event.pos
            idx = self.slot_at(event.pos)
            if idx is not None and self.inventory.held is None:
                return [BeginDrag(idx)]
        elif event.type == pygame.MOUSEBUTTONUP:
            if self.inventory.held is not None:
                return [DropItem(self.slot_at(event.pos))]
        return []

    def draw(self, surface: pygame.Surface, app) -> None:
        self.layout(surface.get_size())
        draw_overlay(surface, alpha=150)

        w, h = self.panel_size()
        ox, oy = self._origin
        draw_panel(surface, pygame.Rect(ox, oy, w, h))
        draw_title_bar(surface, app, ox, oy, w, self.title)

        inv = self.inventory
        for i, slot in enumerate(inv.slots):
            rect = self.slot_rect(i)
            bg = (60, 60, 90) if i == self._hover_idx else (45, 45, 65)
            pygame.draw.rect(surface, bg, rect)
            pygame.draw.rect(surface, (90, 90, 120), rect, 1)
            if slot is not None:
                draw_icon(surface, app, slot.icon, rect, self._name(slot.name))
                draw_count(surface, app, rect, slot.count)

        if 0 <= self._hover_idx < inv.capacity and inv.held is None:
            slot = inv.slots[self._hover_idx]
            if slot is not None:
                app.draw_text_bg(surface, self._name(slot.name), self.mouse[0] + 14,
                                 self.mouse[1] + 14, font=app.font_sm)

        app.draw_text(surface, "[Drag] Move / stack / swap  [I/Esc] Close",
                      ox + PAD, oy + h - 20, (100, 180, 100), font=app.font_sm)

        # Held item follows the mouse.
        if inv.held is not None:
            rect = pygame.Rect(0, 0, SLOT, SLOT)
            rect.center = self.mouse
            draw_icon(surface, app, inv.held.icon, rect, self._name(inv.held.name))
            draw_count(surface, app, rect, inv.held.count)

    def _name(self, item_id: str) -> str:
        if self.registry is not None:
            return self.registry.display_name(item_id)
        return item_id
