"""Loading and validation of ``.cub`` scene files."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Optional

from .elements import TextureSpec, is_map_element, is_texture_element
from .errors import CubError

_TEXTURE_COUNT = 6
_MAP_COMPONENTS = frozenset("01NSEW ")
_EMPTY_SPACES = frozenset("0NSEW")
_START_MARKS = frozenset("NSEW")
_WALL = "1"
_LINE = re.compile(r"[^\n]*\n|[^\n]+")


@dataclass
class MapInfo:
    """A validated scene: the map grid, its size and its texture elements.

    Row 0 of ``grid`` holds the last map line of the file, so the grid's
    ``y`` axis grows towards the top of the file.
    """

    grid: list[str]
    height: int
    width: int
    texture: TextureSpec


def read_lines(path: str) -> list[str]:
    """Read ``path`` into lines, each keeping its trailing newline."""
    try:
        with open(path, "rb") as handle:
            data = handle.read()
    except OSError as exc:
        raise CubError("can't open file") from exc
    text = data.decode("utf-8", errors="surrogateescape")
    return _LINE.findall(text)


def is_map_component(component: str) -> bool:
    """Whether ``component`` may appear in a map row."""
    return len(component) == 1 and component in _MAP_COMPONENTS


def is_empty_space(component: Optional[str]) -> bool:
    """Whether ``component`` is a walkable cell: floor or the start mark."""
    return component is not None and len(component) == 1 and component in _EMPTY_SPACES


def _body(line: str) -> str:
    return line.split("\n", 1)[0]


def read_textures(lines: Iterable[str]) -> TextureSpec:
    """Consume the six texture and colour elements from ``lines``.

    When ``lines`` is an iterator, reading stops right after the sixth
    element, leaving the rest for the map.
    """
    stream = iter(lines)
    spec = TextureSpec()
    count = 0
    while count < _TEXTURE_COUNT:
        line = next(stream, None)
        if line is None:
            break
        if line == "\n":
            continue
        if is_map_element(line):
            raise CubError("check element order")
        if not is_texture_element(line):
            raise CubError("invalid element")
        spec.assign(line)
        count += 1
    if count != _TEXTURE_COUNT:
        raise CubError("check texture element")
    return spec


def measure_map(lines: Iterable[str]) -> tuple[int, int]:
    """Return the ``(height, width)`` of the map rows in ``lines``.

    Blank lines may precede and follow the map but not split it.
    """
    height = 0
    width = 0
    after_gap = False
    for line in lines:
        if line == "\n":
            if height:
                after_gap = True
            continue
        if not is_map_element(line):
            raise CubError("invalid map element")
        if after_gap:
            raise CubError("empty line between map element")
        height += 1
        width = max(width, len(_body(line)))
    return height, width


def build_grid(lines: Iterable[str], height: int, width: int) -> list[str]:
    """Lay the map rows of ``lines`` into a ``height`` by ``width`` grid.

    Short rows are padded with spaces; the first row read goes to the
    bottom of the grid.
    """
    rows = [" " * width for _ in range(height)]
    remaining = height
    for line in lines:
        if line == "\n":
            continue
        if not is_map_element(line):
            raise CubError("invalid map element")
        body = _body(line)
        if not all(is_map_component(component) for component in body):
            raise CubError("check map element's component")
        if remaining == 0 or len(body) > width:
            raise CubError("invalid map element")
        rows[remaining - 1] = body.ljust(width)
        remaining -= 1
    return rows


def check_starting_position(grid: Sequence[str]) -> tuple[int, int]:
    """Check there is exactly one start mark and return its ``(row, column)``."""
    found: Optional[tuple[int, int]] = None
    for h, row in enumerate(grid):
        for w, cell in enumerate(row):
            if cell in _START_MARKS:
                if found is not None:
                    raise CubError("starting point is duplicated")
                found = (h, w)
    if found is None:
        raise CubError("there is no starting point")
    return found


def _cell(grid: Sequence[str], h: int, w: int) -> Optional[str]:
    if 0 <= h < len(grid) and 0 <= w < len(grid[h]):
        return grid[h][w]
    return None


def check_map_is_closed(grid: Sequence[str]) -> None:
    """Check that every walkable cell is fenced in by walls or other floor."""
    for h, row in enumerate(grid):
        for w, cell in enumerate(row):
            if not is_empty_space(cell):
                continue
            for dh, dw in ((-1, 0), (1, 0), (0, 1), (0, -1)):
                neighbour = _cell(grid, h + dh, w + dw)
                if not (is_empty_space(neighbour) or neighbour == _WALL):
                    raise CubError("map must be closed by wall")


def parse_lines(lines: Iterable[str]) -> MapInfo:
    """Parse and validate the lines of a scene file."""
    stream = iter(lines)
    texture = read_textures(stream)
    body = list(stream)
    height, width = measure_map(body)
    grid = build_grid(body, height, width)
    check_starting_position(grid)
    check_map_is_closed(grid)
    return MapInfo(grid=grid, height=height, width=width, texture=texture.trimmed())


def load_file(path: str) -> MapInfo:
    """Read, parse and validate the scene file at ``path``."""
    return parse_lines(read_lines(path))