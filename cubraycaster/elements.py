"""Texture and colour elements of the scene file header."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from .errors import CubError, ensure_readable, trim_path


class Identifier(IntEnum):
    """Identifiers that open a texture or colour line."""

    NO = 11
    SO = 12
    WE = 13
    EA = 14
    F = 15
    C = 16


_FIELDS = {
    Identifier.NO: "no_path",
    Identifier.SO: "so_path",
    Identifier.WE: "we_path",
    Identifier.EA: "ea_path",
    Identifier.F: "f_color",
    Identifier.C: "c_color",
}

_PATH_FIELDS = ("no_path", "so_path", "we_path", "ea_path")

_LEADING_DIGITS = re.compile(r"\d*")


def _split(text: str, separator: str) -> list[str]:
    """Split on ``separator``, dropping empty pieces."""
    return [piece for piece in text.split(separator) if piece]


def identify(token: Optional[str]) -> Optional[Identifier]:
    """Return the identifier spelled exactly by ``token``, or ``None``."""
    if token is None:
        return None
    try:
        return Identifier[token]
    except KeyError:
        return None


def is_texture_element(line: str) -> bool:
    """Whether ``line`` is an identifier followed by exactly one value."""
    words = _split(line, " ")
    return len(words) == 2 and identify(words[0]) is not None


def is_map_element(line: str) -> bool:
    """Whether ``line`` starts like a row of the map."""
    return line[:1] in (" ", "0", "1") and line != ""


@dataclass
class TextureSpec:
    """Wall texture paths and floor/ceiling colour strings of a scene."""

    no_path: Optional[str] = None
    so_path: Optional[str] = None
    we_path: Optional[str] = None
    ea_path: Optional[str] = None
    c_color: Optional[str] = None
    f_color: Optional[str] = None

    def assign(self, line: str) -> Identifier:
        """Record the element on ``line`` and return its identifier.

        Wall texture paths must differ from the other wall paths and name a
        readable file.
        """
        if not is_texture_element(line):
            raise CubError("invalid element")
        key, value = _split(line, " ")
        identifier = Identifier[key]
        field = _FIELDS[identifier]
        if getattr(self, field) is not None:
            raise CubError("identifier is duplicated")
        if field in _PATH_FIELDS:
            if any(
                getattr(self, other) == value
                for other in _PATH_FIELDS
                if other != field
            ):
                raise CubError("texture path is duplicated")
            ensure_readable(trim_path(value))
        setattr(self, field, value)
        return identifier

    def trimmed(self) -> "TextureSpec":
        """Return a copy whose texture paths lose surrounding newlines."""
        return dataclasses.replace(
            self,
            **{
                field: None if getattr(self, field) is None else getattr(self, field).strip("\n")
                for field in _PATH_FIELDS
            },
        )


def _valid_separators(color_string: str) -> bool:
    body = color_string.split("\n", 1)[0]
    if any(ch != "," and not ch.isdigit() for ch in body):
        return False
    return body.count(",") == 2


def _channel(piece: str) -> Optional[int]:
    if not piece or piece[0] == "\n" or len(piece) > 4:
        return None
    digits = _LEADING_DIGITS.match(piece).group()
    value = int(digits) if digits else 0
    return value if 0 <= value <= 255 else None


def parse_color(color_string: Optional[str]) -> int:
    """Turn an ``R,G,B`` string into a packed ``0xRRGGBB`` colour."""
    if color_string is None or not _valid_separators(color_string):
        raise CubError("color string is invalid")
    channels = [_channel(piece) for piece in _split(color_string, ",")]
    if len(channels) != 3 or any(channel is None for channel in channels):
        raise CubError("color string is invalid")
    red, green, blue = channels
    return red << 16 | green << 8 | blue