"""components.dialogue — Marks an entity as talkable."""

from __future__ import annotations
from dataclasses import dataclass, field


@dataclass
class DialogScript:
    """An NPC's dialog template.

    ``nodes`` is an immutable tuple of ``logic.dialogue`` nodes.  Sessions
    copy it before splicing choice outcomes, so the template is shared
    safely between every conversation with this NPC.
    """
    nodes: tuple = field(default_factory=tuple)
    speaker: str = ""
