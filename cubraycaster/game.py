"""The interactive game: window, keyboard handling and the render loop."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from enum import IntEnum
from typing import Optional

import numpy as np

from .elements import TextureSpec, parse_color
from .errors import CubError, format_error
from .inputpath import parse_input
from .mapfile import MapInfo, load_file
from .player import ROT_SPEED, Player, init_player
from .raycast import WINDOW_HEIGHT, WINDOW_WIDTH, FrameBuffer, TextureSet, render_frame
from .texture import load_xpm

WINDOW_TITLE = "CUB"
END_MESSAGE = "End game.."


class Key(IntEnum):
    """Key codes the game reacts to."""

    A = 0
    S = 1
    D = 2
    W = 13
    ESCAPE = 53
    LEFT = 123
    RIGHT = 124


def build_texture_set(spec: TextureSpec) -> TextureSet:
    """Load the wall textures and colours named by ``spec``."""
    for path in (spec.no_path, spec.so_path, spec.ea_path, spec.we_path):
        if path is None:
            raise CubError("wrong texture")
    return TextureSet(
        north=load_xpm(spec.no_path),
        south=load_xpm(spec.so_path),
        east=load_xpm(spec.ea_path),
        west=load_xpm(spec.we_path),
        ceiling=parse_color(spec.c_color),
        floor=parse_color(spec.f_color),
    )


def _to_rgb(pixels: np.ndarray) -> np.ndarray:
    """Turn ``pixels[y, x]`` packed colours into an ``[x, y, rgb]`` array."""
    rgb = np.stack(
        ((pixels >> 16) & 0xFF, (pixels >> 8) & 0xFF, pixels & 0xFF), axis=-1
    ).astype(np.uint8)
    return rgb.transpose(1, 0, 2)


class Game:
    """A scene being played: the map, the player and the wall textures."""

    def __init__(
        self, map_info: MapInfo, textures: TextureSet, player: Optional[Player] = None
    ) -> None:
        self.map_info = map_info
        self.textures = textures
        self.player = player if player is not None else init_player(map_info)
        self.buffer = FrameBuffer(WINDOW_WIDTH, WINDOW_HEIGHT)
        self.running = True

    def handle_key(self, key: int) -> bool:
        """React to a key press; return whether the game keeps running."""
        try:
            key = Key(key)
        except ValueError:
            return self.running
        if key is Key.ESCAPE:
            self.running = False
        elif key is Key.W:
            self.player.move_forward(self.map_info)
        elif key is Key.A:
            self.player.move_left(self.map_info)
        elif key is Key.S:
            self.player.move_back(self.map_info)
        elif key is Key.D:
            self.player.move_right(self.map_info)
        elif key is Key.RIGHT:
            self.player.rotate(-ROT_SPEED)
        elif key is Key.LEFT:
            self.player.rotate(ROT_SPEED)
        return self.running

    def render(self) -> FrameBuffer:
        """Draw a fresh frame of the current view and return it."""
        self.buffer = FrameBuffer(WINDOW_WIDTH, WINDOW_HEIGHT)
        return render_frame(self.buffer, self.player, self.map_info, self.textures)

    def run(self) -> None:
        """Open the window and play until it is closed or escape is pressed."""
        import pygame

        key_map = {
            pygame.K_w: Key.W,
            pygame.K_a: Key.A,
            pygame.K_s: Key.S,
            pygame.K_d: Key.D,
            pygame.K_ESCAPE: Key.ESCAPE,
            pygame.K_LEFT: Key.LEFT,
            pygame.K_RIGHT: Key.RIGHT,
        }
        pygame.init()
        try:
            screen = pygame.display.set_mode((WINDOW_WIDTH, WINDOW_HEIGHT))
            pygame.display.set_caption(WINDOW_TITLE)
            pygame.key.set_repeat(150, 30)
            clock = pygame.time.Clock()
            while self.running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self.running = False
                    elif event.type == pygame.KEYDOWN:
                        key = key_map.get(event.key)
                        if key is not None:
                            self.handle_key(key)
                if not self.running:
                    break
                frame = self.render()
                pygame.surfarray.blit_array(screen, _to_rgb(frame.pixels))
                pygame.display.flip()
                clock.tick(60)
        finally:
            pygame.quit()
        print(END_MESSAGE)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load the scene named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        if len(args) != 1:
            raise CubError("check arguments")
        map_info = load_file(parse_input(args[0]))
        textures = build_texture_set(map_info.texture)
        Game(map_info, textures).run()
    except CubError as exc:
        sys.stderr.write(format_error(exc.message))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())