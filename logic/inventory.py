"""logic/inventory.py — Slot-based player inventory.

A fixed row of slots (27 by default, shown as a 9×3 grid).  Each slot
is empty (``None``) or holds one ``Slot``: an item name, its icon
handle and a count.  Items stack by name.

Public API
----------
``grant``        add items, stacking by name; ``once=True`` gates a name
                 so it can only ever be granted a single time
``begin_drag``   lift the item out of a slot into the hand
``drop``         put the held item down: place, merge, swap or return
``cancel_drag``  put the held item back where it came from

A full inventory silently drops a grant.  ``grant`` still reports it by
returning False and emitting ``ItemDropped`` on the bus.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from core.constants import INVENTORY_CAPACITY, INVENTORY_COLUMNS
from core.events import EventBus, ItemGranted, ItemDropped


@dataclass
class Slot:
    name: str
    icon: Any = None
    count: int = 1


@dataclass
class Inventory:
    """World resource: the player's bag."""
    capacity: int = INVENTORY_CAPACITY
    columns: int = INVENTORY_COLUMNS
    slots: list = field(default_factory=list)
    # Item names already handed out under ``once=True``.  Never cleared.
    obtained_once: set[str] = field(default_factory=set)
    # Drag state — at most one item is ever in hand.
    held: Slot | None = None
    held_from: int = -1
    open: bool = False
    registry: Any = None        # ItemRegistry, for icon lookup
    bus: EventBus | None = None

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError("inventory capacity must be positive")
        if len(self.slots) < self.capacity:
            self.slots.extend([None] * (self.capacity - len(self.slots)))

    # ── queries ──────────────────────────────────────────────────────

    @property
    def rows(self) -> int:
        return -(-self.capacity // self.columns)

    @property
    def is_full(self) -> bool:
        return all(s is not None for s in self.slots)

    def valid_index(self, index) -> bool:
        return isinstance(index, int) and 0 <= index < self.capacity

    def find(self, name: str) -> int:
        """Index of the slot holding *name*, or -1."""
        for i, slot in enumerate(self.slots):
            if slot is not None and slot.name == name:
                return i
        return -1

    def count_of(self, name: str) -> int:
        total = sum(s.count for s in self.slots if s is not None and s.name == name)
        if self.held is not None and self.held.name == name:
            total += self.held.count
        return total

    def items(self) -> list[tuple[int, Slot]]:
        """``(index, slot)`` for every occupied slot."""
        return [(i, s) for i, s in enumerate(self.slots) if s is not None]

    # ── grant ────────────────────────────────────────────────────────

    def grant(self, name: str, count: int = 1, once: bool = False,
              icon=None) -> bool:
        """Add *count* of *name*.  Returns True if anything was stored."""
        if count <= 0:
            return False
        if once and name in self.obtained_once:
            return False

        index = self.find(name)
        if index >= 0:
            self.slots[index].count += count
        else:
            index = self._first_empty()
            if index < 0:
                print(f"[INV] full — dropped {count}x {name}")
                self._emit(ItemDropped(name=name, count=count))
                return False
            self.slots[index] = Slot(name=name, icon=self._icon_for(name, icon),
                                     count=count)

        if once:
            self.obtained_once.add(name)
        print(f"[INV] +{count} {name} (slot {index})")
        self._emit(ItemGranted(name=name, count=count, slot=index))
        return True

    # ── drag / drop ──────────────────────────────────────────────────

    def begin_drag(self, index: int) -> bool:
        """Lift the item in *index* into the hand.  No-op on an empty slot."""
        if self.held is not None or not self.valid_index(index):
            return False
        slot = self.slots[index]
        if slot is None:
            return False
        self.held = slot
        self.held_from = index
        self.slots[index] = None
        return True

    def drop(self, index: int | None) -> bool:
        """Put the held item into *index*.

        * empty target       → place it there
        * same item name     → merge counts into the target
        * different item     → swap; the displaced item goes to the origin
        * no / invalid slot  → return it to the origin

        Returns False when nothing was held.
        """
        if self.held is None:
            return False
        held, origin = self.held, self.held_from
        self.held = None
        self.held_from = -1

        if not self.valid_index(index):
            self.slots[origin] = held
            return True

        target = self.slots[index]
        if target is None:
            self.slots[index] = held
        elif target.name == held.name:
            target.count += held.count
        else:
            self.slots[index] = held
            self.slots[origin] = target
        return True

    def cancel_drag(self) -> bool:
        return self.drop(None)

    # ── internal ─────────────────────────────────────────────────────

    def _first_empty(self) -> int:
        for i, slot in enumerate(self.slots):
            if slot is None:
                return i
        return -1

    def _icon_for(self, name: str, icon):
        if icon is not None:
            return icon
        if self.registry is not None:
            found = self.registry.icon(name)
            if found is not None:
                return found
        return name

    def _emit(self, event) -> None:
        if self.bus is not None:
            self.bus.emit(event)
