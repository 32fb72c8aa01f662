"""core/events.py — Lightweight event bus.

Decouples systems that need to *signal* something from systems that
*react* to it.  The bus lives as an ECS resource::

    from core.events import EventBus
    bus = world.res(EventBus)
    bus.emit(MapChanged(old="0,0", new="0,1", via="edge"))

Consumers subscribe with a callable::

    bus.subscribe("MapChanged", my_handler)

And the tick drains once per frame::

    bus.drain()          # calls all handlers for pending events

Design rules:
  - Events are plain dataclasses — no behaviour.
  - ``emit()`` is O(1) (just appends).
  - ``drain()`` processes all queued events in FIFO order.
  - Handlers may emit new events; those are processed in the same drain.
"""

from __future__ import annotations
import traceback
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable


# ═══════════════════════════════════════════════════════════════════
#  Event definitions
# ═══════════════════════════════════════════════════════════════════

@dataclass
class MapChanged:
    """The active map was replaced."""
    old: str = ""
    new: str = ""
    via: str = ""            # "waypoint", "edge", "switch"
    eid: int | None = None   # entity that travelled, if any


@dataclass
class DialogStarted:
    npc_eid: int = 0
    speaker: str = ""


@dataclass
class DialogEnded:
    npc_eid: int = 0
    reason: str = "finished"  # "finished", "disengaged", "overrun"


@dataclass
class ItemGranted:
    name: str = ""
    count: int = 1
    slot: int = -1


@dataclass
class ItemDropped:
    """A grant could not be stored (inventory full)."""
    name: str = ""
    count: int = 1


# ═══════════════════════════════════════════════════════════════════
#  Event Bus
# ═══════════════════════════════════════════════════════════════════

class EventBus:
    """Fire-and-forget event bus stored as an ECS resource."""

    def __init__(self):
        self._queue: list[Any] = []
        self._subs: dict[str, list[Callable]] = defaultdict(list)
        self._stats: dict[str, int] = defaultdict(int)

    # ── Public API ───────────────────────────────────────────────────

    def emit(self, event) -> None:
        """Queue an event for processing on next ``drain()``."""
        self._queue.append(event)

    def subscribe(self, event_type: str, handler: Callable) -> None:
        """Register *handler* to receive events of *event_type*.

        *event_type* is the class name, e.g. ``"MapChanged"``.
        """
        self._subs[event_type].append(handler)

    def drain(self) -> int:
        """Process all queued events.  Returns number processed."""
        processed = 0
        safety = 100  # prevent handler ping-pong from looping forever
        while self._queue and safety > 0:
            batch = self._queue[:]
            self._queue.clear()
            for event in batch:
                name = type(event).__name__
                self._stats[name] += 1
                for handler in self._subs.get(name, []):
                    try:
                        handler(event)
                    except Exception as exc:
                        print(f"[EVENT] handler error for {name}: {exc}")
                        traceback.print_exc()
            processed += len(batch)
            safety -= 1
        return processed

    def clear(self) -> None:
        """Discard all pending events."""
        self._queue.clear()

    def stats(self) -> dict[str, int]:
        """Return cumulative event counts by type."""
        return dict(self._stats)

    def pending(self) -> list[Any]:
        """Snapshot of events waiting to be drained."""
        return list(self._queue)

    def __repr__(self) -> str:
        return f"EventBus(pending={len(self._queue)}, subs={len(self._subs)})"


def emit(world, event) -> None:
    """Emit on the world's bus if it has one."""
    bus = world.res(EventBus)
    if bus is not None:
        bus.emit(event)
