"""components.item_registry — Item display data lookup table.

Items themselves are just names with counts in inventory slots.  The
registry supplies everything the UI needs to show them: a display name
and an icon handle.  Populated by the world loader from ``[items.*]``.

    registry = world.res(ItemRegistry)
    registry.register("key", name="Rusty Key", icon=[200, 180, 60])
    registry.icon("key")
"""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class ItemRegistry:
    """Lookup table mapping item names → display data."""
    _entries: dict = field(default_factory=dict)

    def register(self, item_id: str, name: str = "", icon=None, **extra):
        self._entries[item_id] = {"name": name or item_id, "icon": icon, **extra}

    def get_item(self, item_id: str) -> dict | None:
        """Full data dict for an item, or None."""
        return self._entries.get(item_id)

    def display_name(self, item_id: str) -> str:
        """Human-readable name for an item, falling back to the id itself."""
        entry = self._entries.get(item_id)
        return entry["name"] if entry else item_id

    def icon(self, item_id: str):
        """Icon handle for an item, or None when unregistered."""
        entry = self._entries.get(item_id)
        return entry["icon"] if entry else None

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._entries
