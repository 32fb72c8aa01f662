"""test_inventory.py — Slot inventory: grants, once-gating, drag and drop.

Run:  python test_inventory.py     (or: pytest test_inventory.py)
"""
from __future__ import annotations
import sys, traceback

from components import ItemRegistry
from core.events import EventBus, ItemDropped, ItemGranted
from logic.inventory import Inventory, Slot


# ── Test harness ─────────────────────────────────────────────────────

_passed = 0
_failed = 0

def ok(label: str):
    global _passed
    _passed += 1
    print(f"  [PASS] {label}")

def fail(label: str, detail: str = ""):
    global _failed
    _failed += 1
    msg = f"  [FAIL] {label}"
    if detail:
        msg += f" — {detail}"
    print(msg)

def check(cond: bool, label: str, detail: str = ""):
    if cond:
        ok(label)
    else:
        fail(label, detail)
    assert cond, f"{label} {detail}"


def _names(inv: Inventory) -> list:
    return [s.name if s else None for s in inv.slots]


# ════════════════════════════════════════════════════════════════════
#  1 — Grants
# ════════════════════════════════════════════════════════════════════

def test_grant():
    print("\n=== 1: Grants ===")
    bus = EventBus()
    inv = Inventory(capacity=3, columns=3, bus=bus)
    check(len(inv.slots) == 3 and inv.rows == 1, "1a: slots sized to capacity")

    check(inv.grant("apple", 2), "1b: grant into an empty bag")
    inv.grant("apple", 3)
    check(inv.slots[0].count == 5 and _names(inv) == ["apple", None, None],
          "1c: same name stacks in place")
    inv.grant("coin")
    inv.grant("fish")
    check(inv.is_full, "1d: three names fill three slots")

    check(not inv.grant("rock"), "1e: grant into a full bag is dropped")
    check(inv.count_of("rock") == 0, "1f: nothing stored")
    check(inv.grant("coin", 4) and inv.count_of("coin") == 5,
          "1g: a full bag still stacks existing names")
    dropped = [e for e in bus.pending() if isinstance(e, ItemDropped)]
    granted = [e for e in bus.pending() if isinstance(e, ItemGranted)]
    check(len(dropped) == 1 and dropped[0].name == "rock", "1h: ItemDropped emitted")
    check(len(granted) == 5 and granted[0].slot == 0, "1i: ItemGranted per stored grant")

    check(not inv.grant("coin", 0) and not inv.grant("coin", -2),
          "1j: non-positive counts are ignored")


def test_once():
    print("\n=== 2: once-only grants ===")
    inv = Inventory(capacity=4, columns=2)
    check(inv.grant("key", once=True), "2a: first once-grant stored")
    check(not inv.grant("key", once=True), "2b: second once-grant refused")
    check(inv.grant("key"), "2c: an ordinary grant of the same name still stacks")
    check(inv.count_of("key") == 2, "2d: count reflects both stored grants")

    full = Inventory(capacity=1, columns=1)
    full.grant("junk")
    check(not full.grant("map", once=True), "2e: once-grant into a full bag dropped")
    full.slots[0] = None
    check(full.grant("map", once=True), "2f: a dropped once-grant can still come later")


def test_icons():
    print("\n=== 3: Icons ===")
    reg = ItemRegistry()
    reg.register("gem", name="Gem", icon="gem-surface")
    inv = Inventory(capacity=3, columns=3, registry=reg)
    inv.grant("gem")
    inv.grant("pebble")
    inv.grant("feather", icon="feather-surface")
    check(inv.slots[0].icon == "gem-surface", "3a: icon from the item registry")
    check(inv.slots[1].icon == "pebble", "3b: unregistered item falls back to its name")
    check(inv.slots[2].icon == "feather-surface", "3c: explicit icon wins")

    try:
        Inventory(capacity=0)
        fail("3d: zero capacity rejected")
        assert False, "zero capacity accepted"
    except ValueError:
        ok("3d: zero capacity rejected")


# ════════════════════════════════════════════════════════════════════
#  2 — Drag and drop
# ════════════════════════════════════════════════════════════════════

def _bag() -> Inventory:
    inv = Inventory(capacity=4, columns=2)
    inv.slots[0] = Slot("apple", count=2)
    inv.slots[1] = Slot("coin", count=5)
    inv.slots[3] = Slot("apple", count=1)
    return inv


def test_drag_and_drop():
    print("\n=== 4: Drag and drop ===")
    inv = _bag()
    check(not inv.begin_drag(2), "4a: dragging an empty slot does nothing")
    check(not inv.begin_drag(99), "4b: dragging an invalid slot does nothing")

    check(inv.begin_drag(0) and inv.slots[0] is None and inv.held.name == "apple",
          "4c: item lifted into the hand")
    check(not inv.begin_drag(1), "4d: only one item in hand at a time")
    check(inv.count_of("apple") == 3, "4e: held items still count")
    inv.drop(2)
    check(_names(inv) == [None, "coin", "apple", "apple"] and inv.held is None,
          "4f: drop onto an empty slot places it")

    inv.begin_drag(2)
    inv.drop(3)
    check(inv.slots[3].count == 3 and inv.slots[2] is None, "4g: same name merges")

    inv.begin_drag(3)
    inv.drop(1)
    check(_names(inv) == [None, "apple", None, "coin"], "4h: different items swap",
          str(_names(inv)))

    inv.begin_drag(1)
    inv.drop(None)
    check(_names(inv) == [None, "apple", None, "coin"], "4i: no target returns it home")
    inv.begin_drag(1)
    inv.drop(17)
    check(inv.slots[1].name == "apple", "4j: invalid target returns it home")

    inv.begin_drag(3)
    check(inv.cancel_drag() and inv.slots[3].name == "coin", "4k: cancel_drag returns it home")
    check(not inv.drop(0), "4l: drop with nothing held reports False")
    check(inv.items() == [(1, inv.slots[1]), (3, inv.slots[3])], "4m: items lists occupied slots")
    check(inv.find("coin") == 3 and inv.find("gold") == -1, "4n: find by name")


if __name__ == "__main__":
    sections = [
        ("Grants", test_grant),
        ("Once", test_once),
        ("Icons", test_icons),
        ("Drag and Drop", test_drag_and_drop),
    ]
    for name, fn in sections:
        try:
            fn()
        except Exception:
            _failed += 1
            print(f"\n  [CRASH] {name} — unhandled exception:")
            traceback.print_exc()

    total = _passed + _failed
    print(f"\n{'=' * 60}")
    print(f"  Inventory Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
