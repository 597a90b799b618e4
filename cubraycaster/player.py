"""The player: start position, heading, movement and wall collision."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .errors import CubError
from .mapfile import MapInfo, is_empty_space

MOVE_SPEED = 0.1
PROBE_DISTANCE = 0.2
ROT_SPEED = 0.2
PLANE_LENGTH = 0.66

_WALL = "1"

# Start mark -> ((dir_x, dir_y), (plane_x, plane_y))
_ORIENTATIONS = {
    "N": ((0.0, 1.0), (PLANE_LENGTH, 0.0)),
    "S": ((0.0, -1.0), (-PLANE_LENGTH, 0.0)),
    "E": ((1.0, 0.0), (0.0, -PLANE_LENGTH)),
    "W": ((-1.0, 0.0), (0.0, PLANE_LENGTH)),
}


class Heading(IntEnum):
    """Quadrant of a diagonal step, relative to the player's cell."""

    RIGHT_UP = 100
    RIGHT_DOWN = 200
    LEFT_UP = 300
    LEFT_DOWN = 400


@dataclass
class Player:
    """Position, view direction and camera plane of the player."""

    pos_x: float
    pos_y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float
    direction: str

    def _try_move(self, map_info: MapInfo, dy: float, dx: float) -> bool:
        target_y = int(self.pos_y + dy * PROBE_DISTANCE)
        target_x = int(self.pos_x + dx * PROBE_DISTANCE)
        if not is_movable_place(map_info, self, target_y, target_x):
            return False
        self.pos_y += dy * MOVE_SPEED
        self.pos_x += dx * MOVE_SPEED
        return True

    def move_forward(self, map_info: MapInfo) -> bool:
        """Step along the view direction; return whether the player moved."""
        return self._try_move(map_info, self.dir_y, self.dir_x)

    def move_left(self, map_info: MapInfo) -> bool:
        """Strafe to the left; return whether the player moved."""
        return self._try_move(map_info, self.dir_x, -self.dir_y)

    def move_back(self, map_info: MapInfo) -> bool:
        """Step against the view direction; return whether the player moved."""
        return self._try_move(map_info, -self.dir_y, -self.dir_x)

    def move_right(self, map_info: MapInfo) -> bool:
        """Strafe to the right; return whether the player moved."""
        return self._try_move(map_info, -self.dir_x, self.dir_y)

    def rotate(self, angle: float) -> None:
        """Turn the view direction and camera plane by ``angle`` radians."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        self.dir_x, self.dir_y = (
            self.dir_x * cos_a - self.dir_y * sin_a,
            self.dir_x * sin_a + self.dir_y * cos_a,
        )
        self.plane_x, self.plane_y = (
            self.plane_x * cos_a - self.plane_y * sin_a,
            self.plane_x * sin_a + self.plane_y * cos_a,
        )


def init_player(map_info: MapInfo) -> Player:
    """Place a player at the centre of the map's start cell, facing its mark."""
    found: Optional[tuple[int, int, str]] = None
    for h, row in enumerate(map_info.grid[: map_info.height]):
        mark = next(
            ((w, cell) for w, cell in enumerate(row[: map_info.width]) if cell in _ORIENTATIONS),
            None,
        )
        if mark is not None:
            found = (h, mark[0], mark[1])
    if found is None:
        raise CubError("there is no starting point")
    h, w, mark = found
    (dir_x, dir_y), (plane_x, plane_y) = _ORIENTATIONS[mark]
    return Player(
        pos_x=w + 0.5,
        pos_y=h + 0.5,
        dir_x=dir_x,
        dir_y=dir_y,
        plane_x=plane_x,
        plane_y=plane_y,
        direction=mark,
    )


def _cell(map_info: MapInfo, y: int, x: int) -> Optional[str]:
    grid = map_info.grid
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    return None


def where_to_go(player: Player, y: int, x: int) -> Heading:
    """Return the quadrant of cell ``(y, x)`` seen from the player's cell."""
    right = x - int(player.pos_x) > 0
    up = y - int(player.pos_y) > 0
    if right:
        return Heading.RIGHT_UP if up else Heading.RIGHT_DOWN
    return Heading.LEFT_UP if up else Heading.LEFT_DOWN


def check_diagonal_move(map_info: MapInfo, player: Player, heading: Heading) -> bool:
    """Whether a diagonal step towards ``heading`` avoids squeezing between two walls."""
    cy = int(player.pos_y)
    cx = int(player.pos_x)
    side_x = cx - 1 if heading in (Heading.LEFT_UP, Heading.LEFT_DOWN) else cx + 1
    side_y = cy + 1 if heading in (Heading.LEFT_UP, Heading.RIGHT_UP) else cy - 1
    blocked = _cell(map_info, cy, side_x) == _WALL and _cell(map_info, side_y, cx) == _WALL
    return not blocked


def _is_diagonal_move(player: Player, y: int, x: int) -> bool:
    return int(player.pos_x) != x and int(player.pos_y) != y


def check_pass_diagonally(map_info: MapInfo, player: Player, y: int, x: int) -> bool:
    """Whether moving into cell ``(y, x)`` is not a blocked diagonal step."""
    if not _is_diagonal_move(player, y, x):
        return True
    return check_diagonal_move(map_info, player, where_to_go(player, y, x))


def is_movable_place(map_info: MapInfo, player: Player, y: int, x: int) -> bool:
    """Whether the player may step into cell ``(y, x)``.

    Cells outside the map are not checked and count as movable.
    """
    if 0 <= y < map_info.height and 0 <= x < map_info.width:
        if not check_pass_diagonally(map_info, player, y, x):
            return False
        if not is_empty_space(map_info.grid[y][x]):
            return False
    return True