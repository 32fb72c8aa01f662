"""ui.commands — Command objects emitted by modals.

Modals return these instead of directly mutating game state.  The
world scene reads the list and applies each one to the World through
the same functions the tick uses, so mouse and keyboard paths end up
in identical code.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True, slots=True)
class CloseModal:
    """Close the top modal (and the state it shows)."""


@dataclass(frozen=True, slots=True)
class AdvanceDialog:
    """Same as pressing interact while talking."""


@dataclass(frozen=True, slots=True)
class HighlightOption:
    """Move the dialog choice highlight to ``index``."""
    index: int


@dataclass(frozen=True, slots=True)
class BeginDrag:
    """Pick up the item in inventory slot ``index``."""
    index: int


@dataclass(frozen=True, slots=True)
class DropItem:
    """Put the held item into slot ``index``; None returns it home."""
    index: int | None


# Union of every command type — extend as new commands are added.
UICommand = Union[CloseModal, AdvanceDialog, HighlightOption, BeginDrag, DropItem]
