"""ui.modal — Abstract Modal base class and ModalStack manager.

Every UI overlay (inventory, dialog) is a ``Modal`` subclass.  Modals
are *views*: the state they show lives in World resources (the
``Inventory``, the ``DialogSession``), and ``scenes.world_helpers``
opens and closes them to match.  Input comes back out as commands.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TypeVar

import pygame

if TYPE_CHECKING:
    from ui.commands import UICommand


M = TypeVar("M", bound="Modal")


class Modal(ABC):
    """Base class for all UI modals."""

    @abstractmethod
    def handle_event(self, event: pygame.event.Event) -> list[UICommand]:
        """Process one pygame mouse event.

        Returns a (possibly empty) list of commands for the scene to
        execute.  The modal should *not* mutate World state itself.
        """

    @abstractmethod
    def draw(self, surface: pygame.Surface, app) -> None:
        """Render the modal onto *surface*."""


class ModalStack:
    """Ordered overlays.  Draws go bottom → top; events go to the top one."""

    __slots__ = ("_stack",)

    def __init__(self) -> None:
        self._stack: list[Modal] = []

    @property
    def is_open(self) -> bool:
        return bool(self._stack)

    def find(self, modal_type: type[M]) -> M | None:
        """The first open modal of *modal_type*, or None."""
        for modal in self._stack:
            if isinstance(modal, modal_type):
                return modal
        return None

    def push(self, modal: Modal) -> None:
        self._stack.append(modal)

    def remove(self, modal: Modal) -> None:
        """Close *modal* wherever it sits in the stack."""
        if modal in self._stack:
            self._stack.remove(modal)

    def handle_event(self, event: pygame.event.Event) -> list:
        if self._stack:
            return self._stack[-1].handle_event(event)
        return []

    def draw(self, surface: pygame.Surface, app) -> None:
        for modal in self._stack:
            modal.draw(surface, app)
