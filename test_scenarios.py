"""test_scenarios.py — Movement, map transitions and the per-frame tick.

End-to-end runs through ``logic.tick.tick`` with hand-built
``InputSnapshot`` frames at 60 FPS:

  * walking through a door waypoint, and not bouncing straight back
  * a waypoint trigger cut into a solid border wall
  * crossing a linked map edge
  * talking to an NPC, picking an option, receiving an item
  * the inventory pausing the world

Run:  python test_scenarios.py     (or: pytest test_scenarios.py)
"""
from __future__ import annotations
import sys, traceback

# ── Bootstrap ────────────────────────────────────────────────────────
from core import tuning
tuning.override({})

from core.bootstrap import new_world
from core.ecs import World
from core.events import EventBus
from core.collision import test_rect
from core.geometry import Rect, grid_to_pixel, hitbox_rect
from core.tiles import TileRegistry
from core.zone import WorldGraph
from components import DevLog, Facing, GameClock, Hitbox, Position, Transit
from logic.dialogue import (
    Choice, DialogSession, Line, Option, grant, is_engaged,
)
from logic.entity_factory import spawn_npc, spawn_player
from logic.input_manager import IDLE, InputSnapshot
from logic.inventory import Inventory
from logic.movement import input_vector, movement_system
from logic.tick import tick
from logic.transitions import center_cell, check_transitions, move_to_map
from scenes.world_helpers import subscribe_dev_log


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


DT = 1.0 / 60.0  # 60 FPS
FLOOR, WALL, DOOR = 0, 1, 9

UP = InputSnapshot(up=True)
DOWN = InputSnapshot(down=True)
LEFT = InputSnapshot(left=True)
RIGHT = InputSnapshot(right=True)
TALK = InputSnapshot(interact=True)
BAG = InputSnapshot(toggle_inventory=True)


def _room(w: int, h: int) -> list[list[int]]:
    return [[FLOOR] * w for _ in range(h)]


def _make_world(maps: dict) -> World:
    world = new_world()
    tiles = world.res(TileRegistry)
    tiles.register(FLOOR)
    tiles.register(WALL, [90, 90, 90], solid=True)
    tiles.register(DOOR, [200, 160, 60])
    world.res(WorldGraph).define_world(maps)
    return world


def _run(world: World, snapshot: InputSnapshot, frames: int, until=None) -> int:
    """Tick *frames* times (or until ``until()`` holds).  Returns frames run."""
    for n in range(frames):
        tick(world, snapshot, DT)
        if until is not None and until():
            return n + 1
    return frames


def _record_map_changes(world: World) -> list:
    seen: list = []
    world.res(EventBus).subscribe("MapChanged", seen.append)
    return seen


# ════════════════════════════════════════════════════════════════════
#  1 — Movement
# ════════════════════════════════════════════════════════════════════

def test_movement():
    print("\n=== 1: Movement ===")
    dx, dy = input_vector(InputSnapshot(up=True, right=True))
    check(abs(dx - 0.7071) < 1e-3 and abs(dy + 0.7071) < 1e-3,
          "1a: diagonal input is normalised", f"({dx:.4f}, {dy:.4f})")
    check(input_vector(InputSnapshot(left=True, right=True)) == (0.0, 0.0),
          "1b: opposite keys cancel")

    world = _make_world({"0,0": _room(8, 6)})
    pid = spawn_player(world, "0,0", (1, 1))
    pos = world.get(pid, Position)
    movement_system(world, RIGHT, DT)
    check(abs(pos.x - (64.0 + 350.0 * DT)) < 1e-6 and pos.y == 64.0,
          "1c: speed × dt per frame", f"x={pos.x}")
    check(world.get(pid, Facing).direction == "right", "1d: facing follows input")

    for _ in range(120):
        movement_system(world, LEFT, DT)
    check(pos.x + world.get(pid, Hitbox).ox >= 0.0, "1e: the map edge stops the hitbox",
          f"x={pos.x}")

    # Solid NPC in the way: slide along it instead of passing through.
    world2 = _make_world({"0,0": _room(8, 6)})
    pid2 = spawn_player(world2, "0,0", (1, 1))
    spawn_npc(world2, "wall-of-a-man", "0,0", (3, 1), (Line("oof"),))
    pos2 = world2.get(pid2, Position)
    for _ in range(60):
        movement_system(world2, RIGHT, DT)
    # NPC hitbox starts at 3*64 + 16 = 208; player hitbox right = x + 48.
    check(pos2.x + 48.0 <= 208.0, "1f: solid NPC blocks", f"x={pos2.x}")

    # Wall column at col 3: diagonal input keeps sliding up.
    rows = _room(8, 6)
    for r in rows:
        r[3] = WALL
    world3 = _make_world({"0,0": rows})
    pid3 = spawn_player(world3, "0,0", (1, 3))
    pos3 = world3.get(pid3, Position)
    for _ in range(30):
        movement_system(world3, InputSnapshot(up=True, right=True), DT)
    # Right-hand corner samples at x + 16 + 31; it must stay left of col 3.
    check(pos3.x + 47.0 < 192.0 and pos3.y < 192.0 - 50.0,
          "1g: blocked axis slides along the wall", f"({pos3.x:.1f}, {pos3.y:.1f})")

    # Lone wall tile at (3, 2); approach its bottom-left corner diagonally.
    # X alone is free and Y alone (at the old X) is free, but together
    # they would cut the corner, so Y is tested at the new X and stops.
    rows = _room(8, 6)
    rows[2][3] = WALL
    world4 = _make_world({"0,0": rows})
    pid4 = spawn_player(world4, "0,0", (2, 3))
    pos4 = world4.get(pid4, Position)
    pos4.x, pos4.y = 143.0, 161.0        # hitbox right edge 190, top 193
    movement_system(world4, InputSnapshot(up=True, right=True), DT)
    check(pos4.x > 143.0 and pos4.y == 161.0,
          "1h: diagonal past an outer corner keeps X, drops Y",
          f"({pos4.x:.3f}, {pos4.y:.3f})")
    check(not test_rect(world4, "0,0", hitbox_rect(pos4, world4.get(pid4, Hitbox)),
                        ignore=(pid4,)),
          "1i: hitbox never overlaps the corner tile")


# ════════════════════════════════════════════════════════════════════
#  2 — Waypoints
# ════════════════════════════════════════════════════════════════════

def _door_world() -> World:
    a = _room(8, 6)
    a[0][4] = DOOR
    b = _room(8, 9)
    world = _make_world({"A": a, "B": b})
    graph = world.res(WorldGraph)
    graph.add_waypoint("A", (4, 0), "B", (4, 7))
    # B's arrival cell is itself a trigger back to A.
    graph.add_waypoint("B", (4, 7), "A", (4, 2))
    return world


def test_waypoint_round_trip():
    print("\n=== 2: Waypoints ===")
    world = _door_world()
    graph = world.res(WorldGraph)
    pid = spawn_player(world, "A", (4, 2))
    pos = world.get(pid, Position)
    changes = _record_map_changes(world)

    frames = _run(world, UP, 60, until=lambda: pos.map != "A")
    check(pos.map == "B" and graph.current_map_id == "B",
          "2a: walking onto the door moves the player to B", f"after {frames} frames")
    check((pos.x, pos.y) == grid_to_pixel(4, 7), "2b: placed at the spawn cell",
          f"({pos.x}, {pos.y})")
    check(len(changes) == 1 and changes[0].via == "waypoint" and changes[0].eid == pid,
          "2c: one MapChanged(via=waypoint)", str(changes))
    check(world.map_entities("B") == {pid} and pid not in world.map_entities("A"),
          "2d: map index follows the player")

    check(not check_transitions(world, pid), "2e: arriving on a trigger doesn't fire it")
    _run(world, IDLE, 10)
    _run(world, RIGHT, 3)
    check(pos.map == "B" and center_cell(world, pid, graph) == (4, 7),
          "2f: moving within the trigger cell doesn't fire it")

    _run(world, DOWN, 10, until=lambda: center_cell(world, pid, graph) == (4, 8))
    check(pos.map == "B", "2g: leaving the trigger cell is fine")
    _run(world, UP, 10, until=lambda: pos.map != "B")
    check(pos.map == "A" and (pos.x, pos.y) == grid_to_pixel(4, 2),
          "2h: re-entering the trigger cell fires it", f"{pos}")


def _walled_room(w: int, h: int) -> list[list[int]]:
    rows = _room(w, h)
    for r, row in enumerate(rows):
        for c in range(w):
            if r in (0, h - 1) or c in (0, w - 1):
                row[c] = WALL
    return rows


def test_door_in_solid_wall():
    print("\n=== 2b: Waypoint set into a solid border ===")
    world = _make_world({"A": _walled_room(9, 9), "B": _walled_room(9, 9)})
    graph = world.res(WorldGraph)
    graph.add_waypoint("A", (4, 0), "B", (4, 8))
    pid = spawn_player(world, "A", (4, 4))
    pos = world.get(pid, Position)

    frames = _run(world, UP, 300, until=lambda: pos.map != "A")
    check(pos.map == "B" and graph.current_map_id == "B",
          "2i: walking up into the wall's trigger cell reaches B",
          f"after {frames} frames at ({pos.x:.2f}, {pos.y:.2f}) on {pos.map}")
    tx, ty = grid_to_pixel(4, 8)
    check(abs(pos.x - tx) <= 2.0 and abs(pos.y - ty) <= 2.0,
          "2j: placed at B's spawn cell", f"({pos.x}, {pos.y})")

    # The rest of the border still blocks.
    world2 = _make_world({"A": _walled_room(9, 9), "B": _walled_room(9, 9)})
    world2.res(WorldGraph).add_waypoint("A", (4, 0), "B", (4, 8))
    pid2 = spawn_player(world2, "A", (2, 4))
    pos2 = world2.get(pid2, Position)
    _run(world2, UP, 120)
    check(pos2.map == "A" and pos2.y + world2.get(pid2, Hitbox).oy >= 64.0,
          "2k: a plain border tile still stops the player", f"y={pos2.y}")
    in_door = Rect(272, 16, 32, 32)
    check(test_rect(world2, "A", in_door), "2l: the trigger tile is solid by default")
    check(not test_rect(world2, "A", in_door, passable={(4, 0)}),
          "2m: listed passable cells skip the tile pass")


def test_waypoint_edge_cases():
    print("\n=== 3: Waypoint edge cases ===")
    world = _door_world()
    graph = world.res(WorldGraph)
    graph.add_waypoint("A", (1, 1), "attic", (0, 0))
    pid = spawn_player(world, "A", (2, 1))
    _run(world, LEFT, 20, until=lambda: center_cell(world, pid, graph) == (1, 1))
    check(world.get(pid, Position).map == "A", "3a: waypoint to an unknown map is ignored")

    # Spawning directly onto a trigger.
    world2 = _door_world()
    pid2 = spawn_player(world2, "A", (4, 0))
    check(world2.get(pid2, Transit).last_cell == (4, 0), "3b: spawn records the start cell")
    _run(world2, IDLE, 5)
    check(world2.get(pid2, Position).map == "A", "3c: standing on the spawn trigger is inert")

    check(not move_to_map(world2, pid2, "attic", 0, 0), "3d: move_to_map rejects unknown maps")
    check(move_to_map(world2, pid2, "B", 64, 64, via="test")
          and world2.res(WorldGraph).current_map_id == "B", "3e: move_to_map switches")


# ════════════════════════════════════════════════════════════════════
#  3 — Edge links
# ════════════════════════════════════════════════════════════════════

def test_edge_link():
    print("\n=== 4: Edge links ===")
    world = _make_world({"0,0": _room(8, 6), "0,-1": _room(8, 6)})
    pid = spawn_player(world, "0,0", (4, 1))
    pos = world.get(pid, Position)
    changes = _record_map_changes(world)

    _run(world, UP, 60, until=lambda: pos.map != "0,0")
    check(pos.map == "0,-1", "4a: walking off the top enters the map above")
    # Hitbox bottom lands threshold + 1 px above the new bottom edge.
    check(pos.x == 256.0 and pos.y == 6 * 64 - 9.0 - 32.0 - 32.0,
          "4b: arrives just inside the opposite edge", f"({pos.x}, {pos.y})")
    check(len(changes) == 1 and changes[0].via == "edge", "4c: one MapChanged(via=edge)")

    _run(world, IDLE, 5)
    check(pos.map == "0,-1", "4d: no bounce back on arrival")

    _run(world, DOWN, 60, until=lambda: pos.map != "0,-1")
    check(pos.map == "0,0" and pos.y == 9.0 - 32.0, "4e: and back down again",
          f"({pos.map}, {pos.y})")

    lone = _make_world({"0,0": _room(4, 4)})
    lpid = spawn_player(lone, "0,0", (1, 1))
    _run(lone, UP, 60)
    lpos = lone.get(lpid, Position)
    check(lpos.map == "0,0" and lpos.y + 32.0 >= 0.0, "4f: unlinked edges just block")


def test_edge_link_geometry():
    print("\n=== 5: Edge link placement ===")
    # Arriving on a smaller map: the kept coordinate is clamped.
    world = _make_world({"0,0": _room(10, 4), "1,0": _room(4, 2)})
    pid = spawn_player(world, "0,0", (9, 3))
    pos = world.get(pid, Position)
    _run(world, RIGHT, 30, until=lambda: pos.map != "0,0")
    check(pos.map == "1,0", "5a: right edge leads to the right-hand map")
    check(pos.x == 9.0 - 16.0, "5b: lands on the left side", f"x={pos.x}")
    check(pos.y + 32.0 + 32.0 <= 2 * 64, "5c: kept y clamped into the shorter map",
          f"y={pos.y}")

    # A trigger cell at a linked edge: the waypoint wins.
    world2 = _make_world({"0,0": _room(8, 6), "0,-1": _room(8, 6), "house": _room(3, 3)})
    world2.res(WorldGraph).add_waypoint("0,0", (4, 0), "house", (1, 1))
    pid2 = spawn_player(world2, "0,0", (4, 1))
    pos2 = world2.get(pid2, Position)
    pos2.y = -24.0     # hitbox top at y = 8, centre in row 0
    check(check_transitions(world2, pid2) and pos2.map == "house",
          "5d: waypoint takes precedence over the edge link")


# ════════════════════════════════════════════════════════════════════
#  4 — Talking through the tick
# ════════════════════════════════════════════════════════════════════

def test_dialog_through_tick():
    print("\n=== 6: Dialog through the tick ===")
    world = _make_world({"0,0": _room(8, 6)})
    pid = spawn_player(world, "0,0", (1, 1))
    npc = spawn_npc(world, "smith", "0,0", (2, 1), (
        Line("hi"),
        Choice("pick", (
            Option("a", (Line("nothing for you"),)),
            Option("b", (grant("key", once=True), Line("here"))),
        )),
    ))
    inv = world.res(Inventory)
    pos = world.get(pid, Position)
    clock = world.res(GameClock)

    tick(world, TALK, DT)
    s = world.res(DialogSession)
    check(s is not None and s.npc_eid == npc and s.text == "hi", "6a: interact starts talking")

    before = (pos.x, pos.y)
    tick(world, InputSnapshot(up=True, left=True), DT)
    check((pos.x, pos.y) == before, "6b: no movement while engaged")

    tick(world, TALK, DT)
    check(s.pending_choice is not None, "6c: on the choice")
    tick(world, InputSnapshot(choice_down=True), DT)
    check(s.pending_choice.selected == 1, "6d: choice_down highlights the next option")
    tick(world, TALK, DT)
    check(inv.count_of("key") == 0, "6e: the grant waits for its turn")
    tick(world, TALK, DT)
    check(inv.count_of("key") == 1 and s.text == "here", "6f: item granted")
    tick(world, TALK, DT)
    check(not is_engaged(world), "6g: the finishing press doesn't restart the talk")

    tick(world, TALK, DT)
    check(is_engaged(world), "6h: a fresh press talks again")
    tick(world, InputSnapshot(cancel=True), DT)
    check(not is_engaged(world), "6i: cancel walks away")
    check(clock.frame == 9 and abs(clock.time - 9 * DT) < 1e-9, "6j: clock advanced per tick")
    check(not world.res(EventBus).pending(), "6k: the tick drains the bus")

    world.get(pid, Position).x = 5 * 64.0
    tick(world, TALK, DT)
    check(not is_engaged(world), "6l: nobody in reach, nothing happens")


def test_inventory_pauses_world():
    print("\n=== 7: Inventory pause ===")
    world = _make_world({"0,0": _room(8, 6)})
    pid = spawn_player(world, "0,0", (1, 1))
    spawn_npc(world, "chatty", "0,0", (2, 1), (Line("hey"),))
    inv = world.res(Inventory)
    pos = world.get(pid, Position)

    tick(world, BAG, DT)
    check(inv.open, "7a: toggle opens the bag")
    before = (pos.x, pos.y)
    _run(world, DOWN, 10)
    check((pos.x, pos.y) == before, "7b: no movement while the bag is open")
    tick(world, TALK, DT)
    check(not is_engaged(world), "7c: no talking while the bag is open")

    inv.grant("apple")
    inv.begin_drag(0)
    tick(world, BAG, DT)
    check(not inv.open and inv.held is None and inv.slots[0].name == "apple",
          "7d: closing the bag puts the held item back")

    tick(world, TALK, DT)
    check(is_engaged(world), "7e: talking again once closed")
    tick(world, BAG, DT)
    check(not inv.open, "7f: the bag doesn't open mid-conversation")


def test_dev_log():
    print("\n=== 8: Dev log feed ===")
    world = _door_world()
    pid = spawn_player(world, "A", (4, 2))
    subscribe_dev_log(world)
    pos = world.get(pid, Position)
    _run(world, UP, 60, until=lambda: pos.map != "A")

    log = world.res(DevLog)
    maps = log.for_cat("map")
    check(len(maps) == 1 and maps[0]["msg"] == "A → B"
          and maps[0]["details"] == {"via": "waypoint"} and maps[0]["eid"] == pid,
          "8a: map change recorded", str(maps))
    check(maps[0]["t"] > 0.0, "8b: entries carry game time")
    check(world.res(EventBus).stats().get("MapChanged") == 1, "8c: bus counts drained events")

    log.cat_filter = {"dialog"}
    log.record(0, "map", "filtered out")
    check(len(log.for_cat("map")) == 1, "8d: category filter drops other entries")

    log.cat_filter = set()
    log.max_entries = 3
    for i in range(5):
        log.record(0, "misc", str(i))
    check([e["msg"] for e in log.recent()] == ["2", "3", "4"], "8e: ring buffer keeps the newest")


if __name__ == "__main__":
    sections = [
        ("Movement", test_movement),
        ("Waypoints", test_waypoint_round_trip),
        ("Door In A Wall", test_door_in_solid_wall),
        ("Waypoint Edge Cases", test_waypoint_edge_cases),
        ("Edge Links", test_edge_link),
        ("Edge Link Placement", test_edge_link_geometry),
        ("Dialog Through Tick", test_dialog_through_tick),
        ("Inventory Pause", test_inventory_pauses_world),
        ("Dev Log", test_dev_log),
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
    print(f"  Scenario Tests: {_passed} passed, {_failed} failed  (total {total})")
    print(f"{'=' * 60}")
    sys.exit(1 if _failed else 0)
