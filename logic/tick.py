"""logic/tick.py — Per-frame system orchestration.

One ``tick(world, snapshot, dt)`` per frame, in this order:

    clock → inventory toggle → (dialog input | movement + transitions
    + talk) → event bus drain

While a dialog session is active the player does not move and no
transition can fire; only dialog signals are read.  While the inventory
is open the world is paused the same way.  An interact press that ends
a conversation is consumed by it: the next conversation needs a fresh
press.

Usage::

    from logic.tick import tick
    tick(world, input_manager.snapshot(), dt)
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import GameClock, Player, Position
from core.events import EventBus
from logic.dialogue import (
    can_engage, disengage, find_nearby_npc, interact, is_engaged,
    select_next, select_previous, start_dialog,
)
from logic.inventory import Inventory
from logic.movement import movement_system

if TYPE_CHECKING:
    from core.ecs import World
    from logic.input_manager import InputSnapshot


def player_eid(world: "World") -> int | None:
    result = world.query_one(Player, Position)
    return result[0] if result else None


# ── Tiny per-frame systems ───────────────────────────────────────────

def inventory_toggle_system(world: "World") -> None:
    """Open or close the bag.  Closing drops whatever is held back home."""
    inv = world.res(Inventory)
    if inv is None:
        return
    if inv.open and inv.held is not None:
        inv.cancel_drag()
    inv.open = not inv.open


def dialog_input_system(world: "World", snapshot: "InputSnapshot") -> None:
    """Route one frame of input into the active dialog session."""
    if snapshot.cancel:
        disengage(world)
        return
    if snapshot.choice_up:
        select_previous(world)
    if snapshot.choice_down:
        select_next(world)
    if snapshot.interact:
        interact(world)


def talk_system(world: "World") -> bool:
    """Start talking to the nearest NPC in reach.  True if a session began."""
    pid = player_eid(world)
    if pid is None:
        return False
    npc = find_nearby_npc(world, pid)
    if npc is None or not can_engage(world, pid, npc):
        return False
    return start_dialog(world, npc) is not None


def tick(world: "World", snapshot: "InputSnapshot", dt: float) -> None:
    """Run every core system for one frame."""
    clock = world.res(GameClock)
    if clock:
        clock.time += dt
        clock.frame += 1

    engaged = is_engaged(world)
    if snapshot.toggle_inventory and not engaged:
        inventory_toggle_system(world)

    inv = world.res(Inventory)
    if engaged:
        dialog_input_system(world, snapshot)
    elif inv is None or not inv.open:
        movement_system(world, snapshot, dt)
        if snapshot.interact:
            talk_system(world)

    bus = world.res(EventBus)
    if bus:
        bus.drain()
