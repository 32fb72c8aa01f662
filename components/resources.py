"""components.resources — World-level singletons and the player marker."""

from __future__ import annotations
from dataclasses import dataclass

from core.constants import PLAYER_SPEED


@dataclass
class GameClock:
    """Monotonic game time — accumulated ``dt`` since session start."""
    time: float = 0.0
    frame: int = 0


@dataclass
class Camera:
    """Screen-space offset subtracted from world positions when drawing."""
    x: float = 0.0
    y: float = 0.0


@dataclass
class Player:
    """Marks the player entity."""
    speed: float = PLAYER_SPEED   # px per second
