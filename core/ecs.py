"""
core/ecs.py — Entity-Component-System

Entities are ints. Components are any object, stored by type.
Query by component types to get matching entities.

    w = World()
    e = w.spawn()
    w.add(e, Position(64.0, 128.0, map="0,0"))
    w.add(e, Hitbox())

    for eid, pos, hb in w.query(Position, Hitbox):
        pos.x += 1

A ``World`` is also the aggregate that owns every piece of shared state:
tile registry, world graph, inventory and dialog session are stored as
*resources* (singletons keyed by type).  Nothing lives at module level,
so several worlds can exist side by side (tests do this constantly).
"""

from __future__ import annotations
from typing import Any, Iterator


class World:
    def __init__(self):
        self._next_id = 0
        self._stores: dict[type, dict[int, Any]] = {}
        # Map index: map id → set of entity ids placed on that map.
        # Kept in sync by map_set so per-map scans (NPC proximity,
        # actor collision) never walk every Position.
        self._map_index: dict[str, set[int]] = {}

    # -- Map helpers (keep index in sync) --

    def map_set(self, eid: int, new_map: str):
        """Move *eid* from whatever map it was on to *new_map*."""
        for eids in self._map_index.values():
            eids.discard(eid)
        self._map_index.setdefault(new_map, set()).add(eid)

    def map_entities(self, map_id: str) -> set[int]:
        """Entity ids on *map_id*."""
        return set(self._map_index.get(map_id, ()))

    def query_map(self, map_id: str, *types: type) -> Iterator[tuple]:
        """Yield ``(eid, comp1, comp2, ...)`` for entities on *map_id*.

        Like ``query()`` but only examines entities indexed on that map.
        Ids are visited in spawn order so results are deterministic.
        """
        eids = self._map_index.get(map_id)
        if not eids or not types:
            return
        stores = [self._stores.get(t, {}) for t in types]
        for eid in sorted(eids):
            if all(eid in s for s in stores):
                yield (eid, *(s[eid] for s in stores))

    # -- Entities --

    def spawn(self) -> int:
        self._next_id += 1
        return self._next_id

    # -- Components --

    def add(self, eid: int, comp: Any):
        self._stores.setdefault(type(comp), {})[eid] = comp

    def get(self, eid: int, comp_type: type) -> Any | None:
        return self._stores.get(comp_type, {}).get(eid)

    def has(self, eid: int, comp_type: type) -> bool:
        return eid in self._stores.get(comp_type, {})

    # -- Queries --

    def query(self, *types: type) -> Iterator[tuple]:
        """Yield (eid, comp1, comp2, ...) for entities that have ALL types."""
        if not types:
            return
        # Iterate over the smallest bucket
        buckets = [self._stores.get(t, {}) for t in types]
        smallest = min(buckets, key=len)
        for eid in list(smallest):
            if eid < 0:
                continue  # resource slot
            if all(eid in b for b in buckets):
                yield (eid, *(self._stores[t][eid] for t in types))

    def query_one(self, *types: type) -> tuple | None:
        """Return first match or None."""
        for result in self.query(*types):
            return result
        return None

    # -- Resources (singletons, not tied to entities) --

    def set_res(self, resource: Any):
        self._stores.setdefault(type(resource), {})[-1] = resource

    def res(self, res_type: type) -> Any | None:
        return self._stores.get(res_type, {}).get(-1)

    def clear_res(self, res_type: type):
        """Drop the resource of *res_type* if present."""
        store = self._stores.get(res_type)
        if store:
            store.pop(-1, None)
