"""Error type and small helpers shared by the scene loaders."""

from __future__ import annotations

import os
from collections.abc import Iterable
from typing import Optional

_ERROR_HEADER = "\033[0;35mError\n"
_RESET = "\033[0;0m"


class CubError(Exception):
    """A fatal problem with the command line, the scene file or its assets."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def format_error(message: str) -> str:
    """Return the coloured report printed on standard error for ``message``."""
    return f"{_ERROR_HEADER}{message.rstrip(chr(10))}\n{_RESET}"


def trim_path(path: Optional[str]) -> Optional[str]:
    """Cut ``path`` at its first newline; ``None`` stays ``None``."""
    if path is None:
        return None
    return path.split("\n", 1)[0]


def ensure_readable(path: str) -> str:
    """Check that ``path`` can be opened for reading and return it."""
    try:
        descriptor = os.open(path, os.O_RDONLY)
    except OSError as exc:
        raise CubError("can't open file") from exc
    os.close(descriptor)
    return path


def render_map(grid: Iterable[Iterable[str]]) -> str:
    """Render a map grid as text, one row per line."""
    return "".join("".join(row) + "\n" for row in grid)