import math

import pytest

from cubraycaster.elements import TextureSpec
from cubraycaster.errors import CubError
from cubraycaster.mapfile import MapInfo
from cubraycaster.player import (
    Heading,
    Player,
    check_diagonal_move,
    check_pass_diagonally,
    init_player,
    is_movable_place,
    where_to_go,
)


def make_map(rows):
    return MapInfo(grid=list(rows), height=len(rows), width=len(rows[0]), texture=TextureSpec())


OPEN = make_map(["11111", "10001", "10N01", "10001", "11111"])
CORRIDOR = make_map(["111", "1N1", "111"])
SQUEEZE = make_map(["1111", "1N11", "1101", "1111"])


def test_init_player_north():
    player = init_player(OPEN)
    assert (player.pos_x, player.pos_y) == (2.5, 2.5)
    assert (player.dir_x, player.dir_y) == (0.0, 1.0)
    assert (player.plane_x, player.plane_y) == (0.66, 0.0)
    assert player.direction == "N"


@pytest.mark.parametrize(
    "mark, direction, plane",
    [
        ("S", (0.0, -1.0), (-0.66, 0.0)),
        ("E", (1.0, 0.0), (0.0, -0.66)),
        ("W", (-1.0, 0.0), (0.0, 0.66)),
    ],
)
def test_init_player_other_marks(mark, direction, plane):
    player = init_player(make_map(["111", f"1{mark}1", "111"]))
    assert (player.dir_x, player.dir_y) == direction
    assert (player.plane_x, player.plane_y) == plane


def test_init_player_without_start_fails():
    with pytest.raises(CubError):
        init_player(make_map(["111", "101", "111"]))


def test_move_forward_in_open_space():
    player = init_player(OPEN)
    assert player.move_forward(OPEN) is True
    assert player.pos_y > 2.5
    assert player.pos_x == 2.5


def test_forward_then_back_returns_to_start():
    player = init_player(OPEN)
    player.move_forward(OPEN)
    player.move_back(OPEN)
    assert player.pos_x == pytest.approx(2.5)
    assert player.pos_y == pytest.approx(2.5)


def test_left_and_right_are_opposite():
    player = init_player(OPEN)
    player.move_left(OPEN)
    assert player.pos_x < 2.5
    assert player.pos_y == 2.5
    player.move_right(OPEN)
    assert player.pos_x == pytest.approx(2.5)


def test_wall_stops_player():
    player = init_player(CORRIDOR)
    moves = [player.move_forward(CORRIDOR) for _ in range(20)]
    assert int(player.pos_y) == 1
    assert player.pos_y < 2
    assert moves[-1] is False


def test_rotate_keeps_lengths_and_inverts():
    player = init_player(OPEN)
    player.rotate(0.2)
    assert math.hypot(player.dir_x, player.dir_y) == pytest.approx(1.0)
    assert math.hypot(player.plane_x, player.plane_y) == pytest.approx(0.66)
    player.rotate(-0.2)
    assert player.dir_x == pytest.approx(0.0, abs=1e-12)
    assert player.dir_y == pytest.approx(1.0)
    assert player.plane_x == pytest.approx(0.66)


def test_rotate_quarter_turn():
    player = init_player(OPEN)
    player.rotate(math.pi / 2)
    assert player.dir_x == pytest.approx(-1.0)
    assert player.dir_y == pytest.approx(0.0, abs=1e-12)


def test_where_to_go_quadrants():
    player = init_player(SQUEEZE)
    assert where_to_go(player, 2, 2) is Heading.RIGHT_UP
    assert where_to_go(player, 0, 2) is Heading.RIGHT_DOWN
    assert where_to_go(player, 2, 0) is Heading.LEFT_UP
    assert where_to_go(player, 0, 0) is Heading.LEFT_DOWN


def test_diagonal_squeeze_is_blocked():
    player = init_player(SQUEEZE)
    assert check_diagonal_move(SQUEEZE, player, Heading.RIGHT_UP) is False
    assert check_pass_diagonally(SQUEEZE, player, 2, 2) is False
    assert is_movable_place(SQUEEZE, player, 2, 2) is False


def test_diagonal_in_open_space_is_allowed():
    player = init_player(OPEN)
    assert check_pass_diagonally(OPEN, player, 3, 3) is True
    assert is_movable_place(OPEN, player, 3, 3) is True


def test_straight_move_skips_diagonal_check():
    player = init_player(SQUEEZE)
    assert check_pass_diagonally(SQUEEZE, player, 1, 2) is True
    assert is_movable_place(SQUEEZE, player, 1, 2) is False


def test_outside_map_counts_as_movable():
    player = init_player(OPEN)
    assert is_movable_place(OPEN, player, -1, 2) is True
    assert is_movable_place(OPEN, player, 2, 99) is True


def test_player_fields_are_mutable():
    player = Player(1.5, 1.5, 1.0, 0.0, 0.0, -0.66, "E")
    player.move_forward(CORRIDOR)
    assert player.pos_x < 2
    assert int(player.pos_x) == 1