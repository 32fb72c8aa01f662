"""ui/dialogue_modal.py — Conversation box for the active DialogSession."""

from __future__ import annotations
import pygame
from ui.modal import Modal
from ui.commands import AdvanceDialog, HighlightOption, UICommand
from ui.helpers import draw_overlay
from logic.dialogue import DialogSession


class DialogueModal(Modal):
    """Bottom-of-screen box: speaker, current text, choice options.

    Keyboard input goes through the tick; this modal only adds mouse
    support (hover highlights an option, click advances).
    """

    def __init__(self, world, npc_eid: int):
        self.world = world
        self.npc_eid = npc_eid
        self._choice_rects: list[pygame.Rect] = []
        self._box = pygame.Rect(0, 0, 0, 0)

    def session(self) -> DialogSession | None:
        return self.world.res(DialogSession)

    # ── Modal interface ──────────────────────────────────────────────

    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        if event.type == pygame.MOUSEMOTION:
            for i, rect in enumerate(self._choice_rects):
                if rect.collidepoint(event.pos):
                    return [HighlightOption(i)]
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for i, rect in enumerate(self._choice_rects):
                if rect.collidepoint(event.pos):
                    return [HighlightOption(i), AdvanceDialog()]
            if not self._choice_rects and self._box.collidepoint(event.pos):
                return [AdvanceDialog()]
        return []

    def draw(self, surface: pygame.Surface, app):
        session = self.session()
        self._choice_rects = []
        if session is None:
            return
        draw_overlay(surface, alpha=90)
        sw, sh = surface.get_size()

        choice = session.pending_choice
        n_opts = len(choice.options) if choice else 0
        box_w = min(640, sw - 40)
        box_h = 110 + n_opts * 26
        box_x = (sw - box_w) // 2
        box_y = sh - box_h - 20
        self._box = pygame.Rect(box_x, box_y, box_w, box_h)

        pygame.draw.rect(surface, (30, 30, 35), self._box)
        pygame.draw.rect(surface, (100, 100, 110), self._box, 2)

        app.draw_text(surface, session.speaker, box_x + 12, box_y + 8,
                      (255, 220, 100), font=app.font_lg)
        pygame.draw.line(surface, (80, 80, 90),
                         (box_x + 8, box_y + 32), (box_x + box_w - 8, box_y + 32))

        y = box_y + 42
        for line in session.text.split("\n"):
            app.draw_text(surface, line, box_x + 16, y, (220, 220, 220))
            y += 20

        if choice:
            y += 6
            for i, option in enumerate(choice.options):
                selected = i == choice.selected
                rect = pygame.Rect(box_x + 12, y, box_w - 24, 24)
                if selected:
                    pygame.draw.rect(surface, (50, 50, 60), rect)
                prefix = "> " if selected else "  "
                color = (255, 255, 255) if selected else (160, 160, 160)
                app.draw_text(surface, prefix + option.label, box_x + 16, y + 3, color)
                self._choice_rects.append(rect)
                y += 26

        hint = "[W/S] Choose  [E] Select  [Esc] Leave" if choice else "[E] Continue  [Esc] Leave"
        app.draw_text(surface, hint, box_x + box_w - 290, box_y + box_h - 18,
                      (100, 180, 100), font=app.font_sm)
