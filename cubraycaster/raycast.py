"""Ray casting: one ray per screen column, walls textured by side."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from .mapfile import MapInfo
from .player import Player
from .texture import Texture

WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
NO_VALUE = 9999999.0

_WALL = "1"
_COLOR_MASK = 0xFFFFFFFF


@dataclass
class Ray:
    """State of one ray, from its direction to the wall slice it draws."""

    x: int = 0
    camera_x: float = 0.0
    ray_dir_x: float = 0.0
    ray_dir_y: float = 0.0
    map_x: int = 0
    map_y: int = 0
    delta_dist_x: float = 0.0
    delta_dist_y: float = 0.0
    side_dist_x: float = 0.0
    side_dist_y: float = 0.0
    step_x: int = 1
    step_y: int = 1
    side: int = 0
    perp_wall_dist: float = 0.0
    line_height: int = 0
    draw_start: int = 0
    draw_end: int = 0


@dataclass
class TextureSet:
    """The four wall textures with the ceiling and floor colours."""

    north: Texture
    south: Texture
    east: Texture
    west: Texture
    ceiling: int
    floor: int
    _arrays: dict = field(default_factory=dict, init=False, repr=False, compare=False)

    def for_ray(self, ray: Ray) -> Texture:
        """Return the texture of the wall face that ``ray`` hit."""
        if ray.side == 0:
            return self.east if ray.ray_dir_x > 0 else self.west
        return self.south if ray.ray_dir_y < 0 else self.north

    def _pixels(self, texture: Texture) -> np.ndarray:
        array = self._arrays.get(id(texture))
        if array is None:
            array = np.asarray(texture.data, dtype=np.uint64) & _COLOR_MASK
            array = array.astype(np.uint32).reshape(texture.height, texture.width)
            self._arrays[id(texture)] = array
        return array


@dataclass
class FrameBuffer:
    """A screen-sized image of packed colours, indexed ``pixels[y, x]``."""

    width: int = WINDOW_WIDTH
    height: int = WINDOW_HEIGHT
    pixels: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.pixels = np.zeros((self.height, self.width), dtype=np.uint32)

    def put_pixel(self, x: int, y: int, color: int) -> bool:
        """Set one pixel; points outside the buffer are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y, x] = color & _COLOR_MASK
            return True
        return False

    def _fill(self, x: int, start: int, stop: int, color: int) -> None:
        if not 0 <= x < self.width:
            return
        low = max(start, 0)
        high = min(stop, self.height)
        if low < high:
            self.pixels[low:high, x] = color & _COLOR_MASK

    def _blit(self, x: int, start: int, colors: np.ndarray) -> None:
        if not 0 <= x < self.width:
            return
        low = max(start, 0)
        high = min(start + len(colors), self.height)
        if low < high:
            self.pixels[low:high, x] = colors[low - start : high - start]


def _trunc_half(value: int) -> int:
    return value // 2 if value >= 0 else -((-value) // 2)


def _delta(along: float, across: float) -> float:
    if along != 0:
        return math.sqrt(1 + (across * across) / (along * along))
    return NO_VALUE


def _side_dist(direction: float, position: float, cell: int, delta: float) -> tuple[int, float]:
    if direction < 0:
        distance = NO_VALUE if delta == NO_VALUE else (position - cell) * delta
        return -1, distance
    distance = NO_VALUE if delta == NO_VALUE else (cell + 1.0 - position) * delta
    return 1, distance


def _find_wall(ray: Ray, map_info: MapInfo) -> None:
    grid = map_info.grid
    while True:
        if ray.side_dist_x < ray.side_dist_y:
            ray.side_dist_x += ray.delta_dist_x
            ray.map_x += ray.step_x
            ray.side = 0
        else:
            ray.side_dist_y += ray.delta_dist_y
            ray.map_y += ray.step_y
            ray.side = 1
        if not (0 <= ray.map_y < map_info.height and 0 <= ray.map_x < map_info.width):
            return
        row = grid[ray.map_y]
        if ray.map_x >= len(row) or row[ray.map_x] == _WALL:
            return


def _distance_to_wall(ray: Ray, player: Player) -> None:
    if ray.side == 0:
        numerator = ray.map_x - player.pos_x + (1 - ray.step_x) // 2
        denominator = ray.ray_dir_x
    else:
        numerator = ray.map_y - player.pos_y + (1 - ray.step_y) // 2
        denominator = ray.ray_dir_y
    ray.perp_wall_dist = math.inf if denominator == 0 else numerator / denominator


def _wall_height(ray: Ray) -> None:
    if ray.perp_wall_dist == 0:
        ray.perp_wall_dist = 1.0
    height = WINDOW_HEIGHT / ray.perp_wall_dist
    ray.line_height = int(height) if math.isfinite(height) else 0
    half = _trunc_half(ray.line_height)
    ray.draw_start = max(-half + WINDOW_HEIGHT // 2, 0)
    ray.draw_end = min(half + WINDOW_HEIGHT // 2, WINDOW_HEIGHT - 1)


def cast_ray(player: Player, map_info: MapInfo, x: int) -> Ray:
    """Cast the ray of screen column ``x`` and return where it meets a wall."""
    camera_x = 2 * (x / WINDOW_WIDTH) - 1
    ray = Ray(
        x=x,
        camera_x=camera_x,
        ray_dir_x=player.dir_x + player.plane_x * camera_x,
        ray_dir_y=player.dir_y + player.plane_y * camera_x,
        map_x=int(player.pos_x),
        map_y=int(player.pos_y),
    )
    ray.delta_dist_x = _delta(ray.ray_dir_x, ray.ray_dir_y)
    ray.delta_dist_y = _delta(ray.ray_dir_y, ray.ray_dir_x)
    ray.step_x, ray.side_dist_x = _side_dist(ray.ray_dir_x, player.pos_x, ray.map_x, ray.delta_dist_x)
    ray.step_y, ray.side_dist_y = _side_dist(ray.ray_dir_y, player.pos_y, ray.map_y, ray.delta_dist_y)
    _find_wall(ray, map_info)
    _distance_to_wall(ray, player)
    _wall_height(ray)
    return ray


def calculate_wall_x(ray: Ray, player: Player) -> float:
    """Return where along the wall face, in ``[0, 1)``, the ray landed."""
    if ray.side == 0:
        wall_x = player.pos_y + ray.perp_wall_dist * ray.ray_dir_y
    else:
        wall_x = player.pos_x + ray.perp_wall_dist * ray.ray_dir_x
    if not math.isfinite(wall_x):
        return 0.0
    return wall_x - math.floor(wall_x)


def calculate_tex_x(ray: Ray, wall_x: float, textures: TextureSet) -> int:
    """Return the texture column for ``wall_x``, mirrored on east and south faces."""
    texture = textures.for_ray(ray)
    column = int(wall_x * texture.width)
    mirrored = (ray.side == 0 and ray.ray_dir_x > 0) or (ray.side == 1 and ray.ray_dir_y < 0)
    return texture.width - column - 1 if mirrored else column


def draw_background(buffer: FrameBuffer, ray: Ray, textures: TextureSet) -> None:
    """Paint the ceiling above and the floor below the ray's wall slice."""
    buffer._fill(ray.x, 0, ray.draw_start, textures.ceiling)
    buffer._fill(ray.x, ray.draw_end, WINDOW_HEIGHT, textures.floor)


def fill_column(buffer: FrameBuffer, player: Player, ray: Ray, textures: TextureSet) -> None:
    """Draw the whole screen column of ``ray``: ceiling, textured wall, floor."""
    wall_x = calculate_wall_x(ray, player)
    tex_x = calculate_tex_x(ray, wall_x, textures)
    draw_background(buffer, ray, textures)
    count = ray.draw_end - ray.draw_start
    if count <= 0 or ray.line_height == 0:
        return
    texture = textures.for_ray(ray)
    step = 1.0 * texture.height / ray.line_height
    tex_pos = (ray.draw_start - WINDOW_HEIGHT // 2 + _trunc_half(ray.line_height)) * step
    increments = np.full(count, step, dtype=np.float64)
    increments[0] = tex_pos
    positions = np.add.accumulate(increments)
    tex_y = positions.astype(np.int64) & (texture.height - 1)
    colors = textures._pixels(texture)[tex_y, tex_x]
    buffer._blit(ray.x, ray.draw_start, colors)


def render_frame(
    buffer: FrameBuffer, player: Player, map_info: MapInfo, textures: TextureSet
) -> FrameBuffer:
    """Cast every column of the view into ``buffer`` and return it."""
    for x in range(WINDOW_WIDTH + 1):
        fill_column(buffer, player, cast_ray(player, map_info, x), textures)
    return buffer


ColorLike = Union[int, np.integer]