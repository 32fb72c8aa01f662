"""logic/camera.py — Camera placement.

The Camera resource holds the world-pixel position of the screen's
top-left corner, so ``screen = world - camera``.

On each axis independently: a map narrower (or shorter) than the
screen is centred; a larger one follows the player's hitbox centre,
clamped so the view never runs past the map edge.
"""

from __future__ import annotations
from typing import TYPE_CHECKING

from components import Camera, Hitbox, Player, Position
from core.geometry import hitbox_rect
from core.zone import WorldGraph

if TYPE_CHECKING:
    from core.ecs import World


def _axis(map_len: float, view_len: float, focus: float) -> float:
    if map_len <= view_len:
        return -(view_len - map_len) / 2.0
    return max(0.0, min(focus - view_len / 2.0, map_len - view_len))


def centered_offset(map_size: tuple[float, float], view: tuple[int, int],
                    focus: tuple[float, float]) -> tuple[float, float]:
    """Camera position for a map of *map_size* px seen through *view*."""
    return (_axis(map_size[0], view[0], focus[0]),
            _axis(map_size[1], view[1], focus[1]))


def camera_system(world: "World", view: tuple[int, int]) -> Camera:
    """Move the Camera resource to frame the player on the active map."""
    cam = world.res(Camera)
    if cam is None:
        cam = Camera()
        world.set_res(cam)
    graph = world.res(WorldGraph)
    result = world.query_one(Player, Position)
    if graph is None or graph.current_map_id is None:
        return cam

    if result is not None:
        eid, _player, pos = result
        focus = hitbox_rect(pos, world.get(eid, Hitbox) or Hitbox()).center
    else:
        focus = (0.0, 0.0)
    cam.x, cam.y = centered_offset(graph.pixel_size(graph.current_map_id),
                                   view, focus)
    return cam
