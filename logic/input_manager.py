"""logic/input_manager.py — Intent-based input layer.

Sits between raw pygame events and the tick.  The scene feeds in raw
events; the manager maps them to *intents* based on the current
**input context** (gameplay, dialog, ui), and once per frame folds them
into an ``InputSnapshot`` — the only input the core ever sees.

Usage (in world_scene):

    self.input = InputManager()
    # each frame:
    self.input.begin_frame()
    for event in events:
        self.input.feed(event)
    self.input.end_frame()          # captures held-key state
    tick(world, self.input.snapshot(), dt)

Tests skip pygame entirely and build ``InputSnapshot`` by hand.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum, auto
import pygame


# ── Snapshot handed to the core ─────────────────────────────────────

@dataclass(frozen=True)
class InputSnapshot:
    """One frame of player input.

    Directions are *held* state.  Everything else is edge-triggered:
    true only on the frame the key went down.
    """
    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    interact: bool = False
    toggle_inventory: bool = False
    choice_up: bool = False
    choice_down: bool = False
    cancel: bool = False


IDLE = InputSnapshot()


# ── Input contexts ──────────────────────────────────────────────────

class InputContext(Enum):
    """Determines which key-bindings are active."""
    GAMEPLAY = auto()   # walking around
    DIALOG   = auto()   # talking to an NPC
    UI       = auto()   # inventory modal open


# ── Default key bindings ────────────────────────────────────────────
# intent → keys.  Mouse buttons are negative (-3 = RMB).  Movement
# intents are read as *held*; the rest as presses.  Left clicks in a
# dialog belong to the DialogueModal, not to an intent.

RMB = -3

_BINDS: dict[InputContext, dict[str, tuple[int, ...]]] = {
    InputContext.GAMEPLAY: {
        "move_up":      (pygame.K_w, pygame.K_UP),
        "move_down":    (pygame.K_s, pygame.K_DOWN),
        "move_left":    (pygame.K_a, pygame.K_LEFT),
        "move_right":   (pygame.K_d, pygame.K_RIGHT),
        "interact":     (pygame.K_e, pygame.K_SPACE, RMB),
        "inventory":    (pygame.K_i,),
        "toggle_debug": (pygame.K_TAB,),
        "toggle_grid":  (pygame.K_g,),
    },
    InputContext.DIALOG: {
        "choice_up":    (pygame.K_w, pygame.K_UP),
        "choice_down":  (pygame.K_s, pygame.K_DOWN),
        "interact":     (pygame.K_e, pygame.K_SPACE, pygame.K_RETURN),
        "cancel":       (pygame.K_ESCAPE,),
        "toggle_debug": (pygame.K_TAB,),
    },
    InputContext.UI: {
        "inventory":    (pygame.K_i, pygame.K_ESCAPE),
        "toggle_debug": (pygame.K_TAB,),
    },
}


# ── InputManager ────────────────────────────────────────────────────

class InputManager:
    """Context-aware input mapper.

    ``feed(event)`` for each pygame event, ``end_frame()`` once the
    frame's events are in, read ``snapshot()`` / ``just(intent)``, then
    ``begin_frame()`` to forget this frame's presses.
    """

    def __init__(self):
        self.context: InputContext = InputContext.GAMEPLAY
        # Intents pressed since the last begin_frame (rising edge)
        self._pressed: set[str] = set()
        # Intents whose key is down right now
        self._held: set[str] = set()

    def begin_frame(self):
        self._pressed.clear()

    def feed(self, event: pygame.event.Event):
        """Map a KEYDOWN / MOUSEBUTTONDOWN to intents in the current context."""
        if event.type == pygame.KEYDOWN:
            code = event.key
        elif event.type == pygame.MOUSEBUTTONDOWN:
            code = -event.button
        else:
            return
        for intent, codes in self._binds().items():
            if code in codes:
                self._pressed.add(intent)

    def end_frame(self):
        """Capture held-key state for continuous intents (movement)."""
        keys = pygame.key.get_pressed()
        self._held = {intent for intent, codes in self._binds().items()
                      if any(c >= 0 and keys[c] for c in codes)}

    def just(self, intent: str) -> bool:
        return intent in self._pressed

    def held(self, intent: str) -> bool:
        return intent in self._held

    def snapshot(self) -> InputSnapshot:
        """Fold this frame's intents into an ``InputSnapshot``."""
        return InputSnapshot(
            up=self.held("move_up"),
            down=self.held("move_down"),
            left=self.held("move_left"),
            right=self.held("move_right"),
            interact=self.just("interact"),
            toggle_inventory=self.just("inventory"),
            choice_up=self.just("choice_up"),
            choice_down=self.just("choice_down"),
            cancel=self.just("cancel"),
        )

    def _binds(self) -> dict[str, tuple[int, ...]]:
        return _BINDS.get(self.context, {})
