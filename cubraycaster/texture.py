"""Wall textures read from XPM images."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import CubError

TRANSPARENT = 0xFF000000

_TOKENS = re.compile(r'/\*.*?\*/|"((?:[^"\\]|\\.)*)"', re.DOTALL)
_CONTEXT_KEYS = ("c", "g", "g4", "m", "s")
_PREFERRED_KEYS = ("c", "g", "g4", "m")

_NAMED_COLORS = {
    "black": 0x000000,
    "white": 0xFFFFFF,
    "red": 0xFF0000,
    "green": 0x00FF00,
    "blue": 0x0000FF,
    "yellow": 0xFFFF00,
    "cyan": 0x00FFFF,
    "magenta": 0xFF00FF,
    "gray": 0xBEBEBE,
    "grey": 0xBEBEBE,
}


@dataclass(frozen=True)
class Texture:
    """A decoded image: ``width * height`` packed colours, row by row."""

    width: int
    height: int
    data: tuple[int, ...]

    def __post_init__(self) -> None:
        if len(self.data) != self.width * self.height:
            raise ValueError("texture data does not match its size")

    def pixel(self, x: int, y: int) -> int:
        """Return the colour at column ``x`` of row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} texture")
        return self.data[self.width * y + x]


def _wrong() -> CubError:
    return CubError("wrong texture")


def _hex_color(digits: str) -> int:
    if len(digits) not in (3, 6, 12) or any(ch not in "0123456789abcdef" for ch in digits):
        raise _wrong()
    size = len(digits) // 3
    channels = [int(digits[start : start + size], 16) for start in range(0, len(digits), size)]
    if size == 1:
        channels = [value * 17 for value in channels]
    elif size == 4:
        channels = [value >> 8 for value in channels]
    red, green, blue = channels
    return red << 16 | green << 8 | blue


def _color_value(name: str) -> int:
    name = name.strip().lower()
    if name == "none":
        return TRANSPARENT
    if name.startswith("#"):
        return _hex_color(name[1:])
    try:
        return _NAMED_COLORS[name.replace(" ", "")]
    except KeyError:
        raise _wrong() from None


def _parse_color_spec(spec: str) -> int:
    contexts: dict[str, list[str]] = {}
    current = None
    for token in spec.split():
        if token in _CONTEXT_KEYS:
            current = token
            contexts[current] = []
        elif current is None:
            raise _wrong()
        else:
            contexts[current].append(token)
    for key in _PREFERRED_KEYS:
        if contexts.get(key):
            return _color_value(" ".join(contexts[key]))
    raise _wrong()


def parse_xpm(text: str) -> Texture:
    """Decode the text of an XPM image into a :class:`Texture`."""
    strings = [match.group(1) for match in _TOKENS.finditer(text) if match.group(1) is not None]
    if not strings:
        raise _wrong()
    header = strings[0].split()
    if len(header) < 4:
        raise _wrong()
    try:
        width, height, ncolors, cpp = (int(value) for value in header[:4])
    except ValueError:
        raise _wrong() from None
    if min(width, height, ncolors, cpp) <= 0:
        raise _wrong()

    color_lines = strings[1 : 1 + ncolors]
    pixel_lines = strings[1 + ncolors : 1 + ncolors + height]
    if len(color_lines) != ncolors or len(pixel_lines) != height:
        raise _wrong()

    palette = {}
    for line in color_lines:
        if len(line) < cpp:
            raise _wrong()
        palette[line[:cpp]] = _parse_color_spec(line[cpp:])

    data: list[int] = []
    for row in pixel_lines:
        if len(row) < width * cpp:
            raise _wrong()
        for start in range(0, width * cpp, cpp):
            try:
                data.append(palette[row[start : start + cpp]])
            except KeyError:
                raise _wrong() from None
    return Texture(width=width, height=height, data=tuple(data))


def load_xpm(path: str) -> Texture:
    """Read and decode the XPM image at ``path``."""
    try:
        with open(path, encoding="latin-1") as handle:
            text = handle.read()
    except OSError as exc:
        raise _wrong() from exc
    return parse_xpm(text)