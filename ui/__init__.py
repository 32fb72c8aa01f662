"""ui — Modal UI framework.

Provides a ``ModalStack`` that manages layered modal overlays
(inventory grid, dialog box).  Each modal is a self-contained ``Modal``
subclass with its own input / draw; state changes go back to the scene
as command objects.
"""

from ui.modal import Modal, ModalStack
from ui.commands import (
    AdvanceDialog, BeginDrag, CloseModal, DropItem, HighlightOption, UICommand,
)
from ui.inventory_modal import InventoryModal
from ui.dialogue_modal import DialogueModal

__all__ = [
    "Modal", "ModalStack",
    "AdvanceDialog", "BeginDrag", "CloseModal", "DropItem", "HighlightOption",
    "UICommand",
    "InventoryModal", "DialogueModal",
]
