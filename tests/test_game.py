import math

import pytest

from cubraycaster.elements import TextureSpec, parse_color
from cubraycaster.errors import CubError
from cubraycaster.game import Game, Key, build_texture_set, main
from cubraycaster.mapfile import MapInfo
from cubraycaster.player import MOVE_SPEED, ROT_SPEED, init_player
from cubraycaster.raycast import WINDOW_HEIGHT, WINDOW_WIDTH, TextureSet
from cubraycaster.texture import Texture, load_xpm

GRID = [
    "11111",
    "10001",
    "10N01",
    "10001",
    "11111",
]

XPM_RED_BLUE = """/* XPM */
static char *t[] = {
"2 2 2 1",
"a c #FF0000",
"b c #0000FF",
"ab",
"ba"
};
"""

XPM_GREEN = """/* XPM */
static char *t[] = {
"2 2 1 1",
"g c #00FF00",
"gg",
"gg"
};
"""


def _map_info():
    return MapInfo(grid=list(GRID), height=5, width=5, texture=TextureSpec())


def _textures():
    return TextureSet(
        north=Texture(2, 2, (1, 2, 3, 4)),
        south=Texture(2, 2, (5, 6, 7, 8)),
        east=Texture(2, 2, (9, 10, 11, 12)),
        west=Texture(2, 2, (13, 14, 15, 16)),
        ceiling=parse_color("10,20,30"),
        floor=parse_color("40,50,60"),
    )


def _game():
    return Game(_map_info(), _textures())


def test_game_places_player_from_map():
    game = _game()
    expected = init_player(_map_info())
    assert (game.player.pos_x, game.player.pos_y) == (expected.pos_x, expected.pos_y)
    assert game.running is True


@pytest.mark.parametrize("key", [Key.W, 13])
def test_forward_moves_along_direction(key):
    game = _game()
    before = game.player.pos_y
    assert game.handle_key(key) is True
    assert game.player.pos_y == pytest.approx(before + MOVE_SPEED)


def test_back_then_forward_returns():
    game = _game()
    start = (game.player.pos_x, game.player.pos_y)
    game.handle_key(Key.S)
    assert game.player.pos_y < start[1]
    game.handle_key(Key.W)
    assert game.player.pos_y == pytest.approx(start[1])
    assert game.player.pos_x == pytest.approx(start[0])


def test_strafe_left_and_right_cancel():
    game = _game()
    start_x = game.player.pos_x
    game.handle_key(Key.A)
    moved_x = game.player.pos_x
    assert moved_x != pytest.approx(start_x)
    game.handle_key(Key.D)
    assert game.player.pos_x == pytest.approx(start_x)


def test_escape_stops_game():
    game = _game()
    assert game.handle_key(Key.ESCAPE) is False
    assert game.running is False


def test_unknown_key_changes_nothing():
    game = _game()
    before = (game.player.pos_x, game.player.pos_y, game.player.dir_x, game.player.dir_y)
    assert game.handle_key(99) is True
    after = (game.player.pos_x, game.player.pos_y, game.player.dir_x, game.player.dir_y)
    assert after == before


def test_left_rotation_matches_player_rotate():
    game = _game()
    reference = init_player(_map_info())
    reference.rotate(ROT_SPEED)
    game.handle_key(Key.LEFT)
    assert game.player.dir_x == pytest.approx(reference.dir_x)
    assert game.player.dir_y == pytest.approx(reference.dir_y)
    assert game.player.plane_x == pytest.approx(reference.plane_x)


def test_left_then_right_restores_direction():
    game = _game()
    start = (game.player.dir_x, game.player.dir_y)
    game.handle_key(Key.LEFT)
    game.handle_key(Key.RIGHT)
    assert game.player.dir_x == pytest.approx(start[0], abs=1e-12)
    assert game.player.dir_y == pytest.approx(start[1], abs=1e-12)
    assert math.hypot(game.player.dir_x, game.player.dir_y) == pytest.approx(1.0)


def test_render_paints_ceiling_wall_and_floor():
    game = _game()
    textures = game.textures
    frame = game.render()
    assert frame.pixels.shape == (WINDOW_HEIGHT, WINDOW_WIDTH)
    centre = WINDOW_WIDTH // 2
    assert int(frame.pixels[0, centre]) == textures.ceiling
    assert int(frame.pixels[WINDOW_HEIGHT - 1, centre]) == textures.floor
    wall_colors = set(textures.north.data + textures.south.data
                      + textures.east.data + textures.west.data)
    assert int(frame.pixels[WINDOW_HEIGHT // 2, centre]) in wall_colors


def test_render_returns_fresh_buffer():
    game = _game()
    first = game.render()
    second = game.render()
    assert first is not second
    assert (first.pixels == second.pixels).all()


def _spec(tmp_path, c_color="220,100,0", f_color="0,0,0"):
    paths = {}
    for name, content in (("no", XPM_RED_BLUE), ("so", XPM_GREEN),
                          ("ea", XPM_GREEN), ("we", XPM_RED_BLUE)):
        path = tmp_path / f"{name}.xpm"
        path.write_text(content)
        paths[name] = str(path)
    return TextureSpec(
        no_path=paths["no"], so_path=paths["so"], we_path=paths["we"],
        ea_path=paths["ea"], c_color=c_color, f_color=f_color,
    )


def test_build_texture_set_maps_sides(tmp_path):
    spec = _spec(tmp_path)
    textures = build_texture_set(spec)
    assert textures.north == load_xpm(spec.no_path)
    assert textures.east == load_xpm(spec.ea_path)
    assert textures.west == load_xpm(spec.we_path)
    assert textures.south == load_xpm(spec.so_path)
    assert textures.ceiling == parse_color("220,100,0")
    assert textures.floor == 0


def test_build_texture_set_rejects_bad_color(tmp_path):
    with pytest.raises(CubError):
        build_texture_set(_spec(tmp_path, c_color="256,0,0"))


def test_build_texture_set_rejects_missing_texture(tmp_path):
    spec = _spec(tmp_path)
    spec.no_path = str(tmp_path / "missing.xpm")
    with pytest.raises(CubError) as info:
        build_texture_set(spec)
    assert info.value.message == "wrong texture"


def test_main_without_arguments_fails(capsys):
    assert main([]) == 1
    assert "Error" in capsys.readouterr().err


def test_main_rejects_bad_extension(capsys):
    assert main(["scene.txt"]) == 1
    assert "check map extension" in capsys.readouterr().err


def test_main_rejects_missing_scene(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    assert main(["absent.cub"]) == 1
    assert "can't open file" in capsys.readouterr().err