"""logic/dialogue.py — NPC dialog scripts and the conversation state machine.

A script is a flat sequence of nodes.  There are exactly three kinds:

    Line("Hello.")                       — NPC says something
    Action(effect)                       — run ``effect(world)`` once
    Choice("Pick one", (Option(...),))   — player picks an option

Talking to an NPC copies its script into a ``DialogSession`` (a World
resource).  Each *interact* signal advances the session by one node:

    Line    → advance
    Action  → run the effect, then advance
    Choice  → splice the selected option's outcome right after the
              cursor, then advance onto the first spliced node

``select_next`` / ``select_previous`` move the highlighted option
(wrapping around) while the cursor sits on a Choice.  The session ends
when the cursor runs off the end of the script; with no session
resource present the world is *Idle*.

Actions always run when the cursor reaches them, including actions
that arrived through a choice outcome.  Nothing runs at splice time.

Script data format (TOML, see ``data/world.toml``)::

    script = [
        { line = "Hey." },
        { choice = "Need something?", options = [
            { label = "A key", outcome = [
                { action = "grant", item = "key", once = true },
                { line = "Don't lose it." } ] },
            { label = "No", outcome = [ { line = "Suit yourself." } ] },
        ] },
    ]
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Union

from components import DialogScript, Hitbox, Identity, Position
from core import tuning
from core.constants import INTERACT_RANGE
from core.errors import WorldDataError
from core.events import DialogEnded, DialogStarted, emit
from core.geometry import chebyshev, hitbox_rect
from core.zone import WorldGraph


# ── Nodes ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Line:
    text: str


@dataclass(frozen=True)
class Action:
    effect: Callable[[Any], None]
    label: str = ""


@dataclass(frozen=True)
class Option:
    label: str
    outcome: tuple = ()


@dataclass(frozen=True)
class Choice:
    prompt: str
    options: tuple = ()


DialogNode = Union[Line, Action, Choice]


# ── Flags ────────────────────────────────────────────────────────────

@dataclass
class QuestLog:
    """World resource of story flags set by dialog actions."""
    flags: dict[str, Any] = field(default_factory=dict)

    def set_flag(self, key: str, value: Any = True):
        self.flags[key] = value

    def get_flag(self, key: str, default: Any = None) -> Any:
        return self.flags.get(key, default)

    def has_flag(self, key: str) -> bool:
        return key in self.flags


# ── Built-in actions ─────────────────────────────────────────────────

def grant(name: str, count: int = 1, once: bool = False, icon=None) -> Action:
    """Action that puts *count* × *name* into the world's Inventory."""
    from logic.inventory import Inventory

    def _effect(world):
        inv = world.res(Inventory)
        if inv is None:
            print(f"[DIALOG] no inventory to grant {name} into")
            return
        inv.grant(name, count, once, icon=icon)

    tag = " (once)" if once else ""
    return Action(_effect, label=f"grant {name} x{count}{tag}")


def set_flag(key: str, value: Any = True) -> Action:
    """Action that sets a QuestLog flag."""
    def _effect(world):
        log = world.res(QuestLog)
        if log is None:
            log = QuestLog()
            world.set_res(log)
        log.set_flag(key, value)

    return Action(_effect, label=f"set_flag {key}={value!r}")


# ── Parsing ──────────────────────────────────────────────────────────

def parse_script(raw, where: str = "script") -> tuple:
    """Build a node tuple from TOML-shaped data.  Raises WorldDataError."""
    if not isinstance(raw, (list, tuple)):
        raise WorldDataError(f"{where}: expected a list of nodes")
    nodes: list = []
    for i, entry in enumerate(raw):
        at = f"{where}[{i}]"
        if isinstance(entry, str):
            nodes.append(Line(entry))
        elif not isinstance(entry, dict):
            raise WorldDataError(f"{at}: expected a table, got {type(entry).__name__}")
        elif "line" in entry:
            nodes.append(Line(str(entry["line"])))
        elif "choice" in entry:
            options = []
            for j, opt in enumerate(entry.get("options", [])):
                if not isinstance(opt, dict) or "label" not in opt:
                    raise WorldDataError(f"{at}.options[{j}]: option needs a label")
                outcome = parse_script(opt.get("outcome", []), f"{at}.options[{j}].outcome")
                options.append(Option(str(opt["label"]), outcome))
            if not options:
                raise WorldDataError(f"{at}: choice has no options")
            nodes.append(Choice(str(entry["choice"]), tuple(options)))
        elif "action" in entry:
            nodes.append(_parse_action(entry, at))
        else:
            raise WorldDataError(f"{at}: unknown node {sorted(entry)}")
    return tuple(nodes)


def _parse_action(entry: dict, at: str) -> Action:
    kind = entry["action"]
    if kind == "grant":
        if "item" not in entry:
            raise WorldDataError(f"{at}: grant needs an item")
        return grant(str(entry["item"]), int(entry.get("count", 1)),
                     bool(entry.get("once", False)))
    if kind == "set_flag":
        if "flag" not in entry:
            raise WorldDataError(f"{at}: set_flag needs a flag")
        return set_flag(str(entry["flag"]), entry.get("value", True))
    raise WorldDataError(f"{at}: unknown action {kind!r}")


# ── Session ──────────────────────────────────────────────────────────

@dataclass
class ChoiceState:
    options: tuple
    selected: int = 0

    def step(self, delta: int):
        if self.options:
            self.selected = (self.selected + delta) % len(self.options)


@dataclass
class DialogSession:
    """World resource present only while a conversation is running."""
    npc_eid: int
    script: list
    speaker: str = ""
    cursor: int = 0
    pending_choice: ChoiceState | None = None
    # Last text shown — Action nodes have none of their own.
    text: str = ""
    chosen: list[str] = field(default_factory=list)

    @property
    def current_node(self) -> DialogNode | None:
        if 0 <= self.cursor < len(self.script):
            return self.script[self.cursor]
        return None


def active_session(world) -> DialogSession | None:
    return world.res(DialogSession)


def is_engaged(world) -> bool:
    return world.res(DialogSession) is not None


def _enter_node(session: DialogSession):
    node = session.current_node
    if isinstance(node, Line):
        session.text = node.text
    elif isinstance(node, Choice):
        session.text = node.prompt
        session.pending_choice = ChoiceState(node.options)


def start_dialog(world, npc_eid: int) -> DialogSession | None:
    """Idle → Engaged.  Returns the new session, or None."""
    if is_engaged(world):
        return None
    script = world.get(npc_eid, DialogScript)
    if script is None or not script.nodes:
        return None
    speaker = script.speaker
    if not speaker:
        ident = world.get(npc_eid, Identity)
        speaker = ident.name if ident else "NPC"
    session = DialogSession(npc_eid=npc_eid, script=list(script.nodes),
                            speaker=speaker)
    _enter_node(session)
    world.set_res(session)
    print(f"[DIALOG] talking to {speaker}")
    emit(world, DialogStarted(npc_eid=npc_eid, speaker=speaker))
    return session


def end_dialog(world, reason: str = "finished"):
    session = world.res(DialogSession)
    if session is None:
        return
    world.clear_res(DialogSession)
    print(f"[DIALOG] {session.speaker} — {reason}")
    emit(world, DialogEnded(npc_eid=session.npc_eid, reason=reason))


def disengage(world):
    """Player walked away / pressed cancel."""
    end_dialog(world, "disengaged")


def interact(world) -> DialogSession | None:
    """Advance the active session by one node.

    Returns the session if it is still running, None once Idle.
    """
    session = world.res(DialogSession)
    if session is None:
        return None
    node = session.current_node
    if node is None:
        end_dialog(world, "overrun")
        return None

    if isinstance(node, Line):
        session.cursor += 1
    elif isinstance(node, Action):
        node.effect(world)
        session.cursor += 1
    elif isinstance(node, Choice) and not node.options:
        # Nothing to pick; read it like a line.
        session.pending_choice = None
        session.cursor += 1
    elif isinstance(node, Choice):
        state = session.pending_choice or ChoiceState(node.options)
        option = node.options[state.selected % len(node.options)]
        at = session.cursor + 1
        session.script[at:at] = list(option.outcome)
        session.chosen.append(option.label)
        session.pending_choice = None
        session.cursor += 1
    else:
        raise TypeError(f"unknown dialog node {node!r}")

    # An action may have ended or replaced the session itself.
    if world.res(DialogSession) is not session:
        return world.res(DialogSession)
    if session.cursor >= len(session.script):
        end_dialog(world, "finished")
        return None
    _enter_node(session)
    return session


def select_next(world) -> int:
    return _select(world, 1)


def select_previous(world) -> int:
    return _select(world, -1)


def select_option(world, index: int) -> int:
    """Highlight option *index* directly (mouse hover)."""
    session = world.res(DialogSession)
    if session is None or session.pending_choice is None:
        return -1
    state = session.pending_choice
    if 0 <= index < len(state.options):
        state.selected = index
    return state.selected


def _select(world, delta: int) -> int:
    """Move the highlighted option.  Returns the selected index or -1."""
    session = world.res(DialogSession)
    if session is None or session.pending_choice is None:
        return -1
    session.pending_choice.step(delta)
    return session.pending_choice.selected


# ── Proximity ────────────────────────────────────────────────────────

def interact_range() -> float:
    return tuning.get("dialog", "interact_range", INTERACT_RANGE)


def _center(world, eid: int) -> tuple[float, float] | None:
    pos = world.get(eid, Position)
    hb = world.get(eid, Hitbox) or Hitbox()
    if pos is None:
        return None
    return hitbox_rect(pos, hb).center


def can_engage(world, player_eid: int, npc_eid: int,
               reach: float | None = None) -> bool:
    """Both hitbox centres within *reach* on each axis, same map, no session."""
    if is_engaged(world) or not world.has(npc_eid, DialogScript):
        return False
    ppos = world.get(player_eid, Position)
    npos = world.get(npc_eid, Position)
    if ppos is None or npos is None or ppos.map != npos.map:
        return False
    a = _center(world, player_eid)
    b = _center(world, npc_eid)
    reach = interact_range() if reach is None else reach
    return chebyshev(a, b) <= reach


def find_nearby_npc(world, player_eid: int,
                    reach: float | None = None) -> int | None:
    """Closest talkable NPC on the active map within reach, or None."""
    graph = world.res(WorldGraph)
    if graph is None or graph.current_map_id is None:
        return None
    me = _center(world, player_eid)
    if me is None:
        return None
    reach = interact_range() if reach is None else reach
    best: int | None = None
    best_d = float("inf")
    for eid, pos, _script in world.query_map(graph.current_map_id,
                                             Position, DialogScript):
        if eid == player_eid:
            continue
        d = chebyshev(me, _center(world, eid))
        if d <= reach and d < best_d:
            best, best_d = eid, d
    return best
