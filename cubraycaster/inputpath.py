"""Validation of the scene name given on the command line."""

from __future__ import annotations

from .errors import CubError, ensure_readable

_MAP_DIRECTORY = "map/"
_EXTENSION = ".cub"


def check_map_name(map_name: str) -> str:
    """Check that ``map_name`` names a ``.cub`` file and return it."""
    if len(map_name) < len(_EXTENSION):
        raise CubError("check map name")
    if not map_name.endswith(_EXTENSION):
        raise CubError("check map extension")
    return map_name


def make_map_path(map_name: str) -> str:
    """Return the path of ``map_name`` inside the map directory."""
    return _MAP_DIRECTORY + map_name


def parse_input(map_name: str) -> str:
    """Validate ``map_name`` and return the path of a readable scene file."""
    check_map_name(map_name)
    map_path = make_map_path(map_name)
    return ensure_readable(map_path)