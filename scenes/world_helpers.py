"""scenes/world_helpers.py — Extracted helpers for WorldScene.

Each takes a ``scene`` parameter (the WorldScene instance) so they can
read/write scene state without being class methods.
"""

from __future__ import annotations
import pygame
from components import DevLog, GameClock, ItemRegistry
from core.events import EventBus
from logic.dialogue import (
    DialogSession, interact, is_engaged, select_option, end_dialog,
)
from logic.input_manager import InputContext
from logic.inventory import Inventory
from ui import (
    AdvanceDialog, BeginDrag, CloseModal, DropItem, HighlightOption,
    DialogueModal, InventoryModal,
)


# ── Input context ────────────────────────────────────────────────────

def update_input_context(scene, world):
    """Sync InputManager context with world state."""
    inv = world.res(Inventory)
    if is_engaged(world):
        scene.input.context = InputContext.DIALOG
    elif inv is not None and inv.open:
        scene.input.context = InputContext.UI
    else:
        scene.input.context = InputContext.GAMEPLAY


# ── Modal views follow world state ───────────────────────────────────

def sync_modals(scene, world):
    """Open / close modal views so they match the World's resources."""
    session = world.res(DialogSession)
    dialog = scene.modals.find(DialogueModal)
    if session is not None and dialog is None:
        scene.modals.push(DialogueModal(world, session.npc_eid))
    elif session is None and dialog is not None:
        scene.modals.remove(dialog)

    inv = world.res(Inventory)
    bag = scene.modals.find(InventoryModal)
    if inv is not None and inv.open and bag is None:
        scene.modals.push(InventoryModal(inv, world.res(ItemRegistry)))
    elif (inv is None or not inv.open) and bag is not None:
        scene.modals.remove(bag)


# ── UI command routing ───────────────────────────────────────────────

def route_ui_event(scene, event: pygame.event.Event, world):
    """Delegate event to the modal stack and apply returned commands."""
    for cmd in scene.modals.handle_event(event):
        inv = world.res(Inventory)
        if isinstance(cmd, CloseModal):
            if is_engaged(world):
                end_dialog(world, "disengaged")
            elif inv is not None and inv.open:
                inv.cancel_drag()
                inv.open = False
        elif isinstance(cmd, AdvanceDialog):
            interact(world)
        elif isinstance(cmd, HighlightOption):
            select_option(world, cmd.index)
        elif isinstance(cmd, BeginDrag) and inv is not None:
            inv.begin_drag(cmd.index)
        elif isinstance(cmd, DropItem) and inv is not None:
            inv.drop(cmd.index)
    sync_modals(scene, world)


# ── DevLog feed ──────────────────────────────────────────────────────

def subscribe_dev_log(world):
    """Record map, dialog and inventory events into the DevLog."""
    bus = world.res(EventBus)
    log = world.res(DevLog)
    if bus is None or log is None:
        return

    def _now() -> float:
        clock = world.res(GameClock)
        return clock.time if clock else 0.0

    def _map(ev):
        log.record(ev.eid or 0, "map", f"{ev.old} → {ev.new}", t=_now(),
                   details={"via": ev.via})

    def _dialog_start(ev):
        log.record(ev.npc_eid, "dialog", f"talking to {ev.speaker}", t=_now())

    def _dialog_end(ev):
        log.record(ev.npc_eid, "dialog", f"ended ({ev.reason})", t=_now())

    def _granted(ev):
        log.record(0, "inventory", f"+{ev.count} {ev.name}", t=_now(),
                   details={"slot": ev.slot})

    def _dropped(ev):
        log.record(0, "inventory", f"bag full, lost {ev.count} {ev.name}", t=_now())

    bus.subscribe("MapChanged", _map)
    bus.subscribe("DialogStarted", _dialog_start)
    bus.subscribe("DialogEnded", _dialog_end)
    bus.subscribe("ItemGranted", _granted)
    bus.subscribe("ItemDropped", _dropped)
