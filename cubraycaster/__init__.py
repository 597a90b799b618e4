"""Textured grid raycaster: .cub scene loading, validation, rendering and play."""

__version__ = "0.1.0"

__all__ = ["errors", "inputpath", "elements", "mapfile", "player", "texture", "raycast", "game"]