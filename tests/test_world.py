import math

import pytest

from raycub.scene import Facing, parse_scene_lines
from raycub.world import (
    MOUSE_SENSITIVITY,
    ROT_SPEED,
    RUN_SPEED,
    WALK_SPEED,
    WALL_DIST,
    Key,
    World,
)

HEADER = [
    "NO ./n.xpm\n",
    "SO ./s.xpm\n",
    "WE ./w.xpm\n",
    "EA ./e.xpm\n",
    "F 10,20,30\n",
    "C 40,50,60\n",
    "\n",
]

MAP = [
    "111111\n",
    "10N001\n",
    "11D111\n",
    "100001\n",
    "111111\n",
]


@pytest.fixture
def world():
    return World.from_scene(parse_scene_lines(HEADER + MAP))


def test_from_scene_places_player(world):
    t = world.tile_size
    assert world.player.x == 2 * t + t // 2
    assert world.player.y == 1 * t + t // 2
    assert world.player.angle == pytest.approx(Facing.NORTH.angle)
    assert world.width == 6
    assert world.height == 5


def test_doors_start_closed(world):
    assert world.doors[2][2] == "1"
    assert world.rows[2][2] == "D"
    assert world.doors[1][2] == "0"


def test_is_walkable(world):
    t = world.tile_size
    assert world.is_walkable(world.player.x, world.player.y)
    assert not world.is_walkable(t / 2, t / 2)
    near_left_wall = t * (1 + WALL_DIST / 2)
    assert not world.is_walkable(near_left_wall, 1.5 * t)
    assert world.is_walkable(1.5 * t, 1.5 * t)


def test_toggle_door_opens_and_closes(world):
    world.toggle_door()
    assert world.doors[2][2] == "0"
    assert world.rows[2][2] == "D"
    world.toggle_door()
    assert world.doors[2][2] == "1"


def test_door_does_not_close_on_player(world):
    t = world.tile_size
    world.toggle_door()
    world.player.y = t * (2 - WALL_DIST / 2)
    world.toggle_door()
    assert world.doors[2][2] == "0"


def test_press_and_release(world):
    world.press(ord("w"))
    world.press(12345)
    assert world.keys == {Key.W}
    world.release(ord("w"))
    world.release(12345)
    assert world.keys == set()


def test_walk_forward_north(world):
    start_x, start_y = world.player.x, world.player.y
    world.press(Key.W)
    assert world.update() is True
    assert world.player.y == pytest.approx(start_y - WALK_SPEED)
    assert world.player.x == pytest.approx(start_x)


def test_run_speed(world):
    world.press(Key.RUN)
    world.update()
    assert world.speed == RUN_SPEED
    world.release(Key.RUN)
    world.update()
    assert world.speed == WALK_SPEED


def test_walls_stop_movement(world):
    t = world.tile_size
    world.press(Key.W)
    for _ in range(100):
        world.update()
    assert world.player.y >= t * (1 + WALL_DIST) - 1e-9
    assert world.is_walkable(world.player.x, world.player.y)


def test_rotation_stays_in_range(world):
    start = world.player.angle
    world.press(Key.RIGHT)
    world.update()
    assert world.player.angle == pytest.approx((start + ROT_SPEED) % (2 * math.pi))
    for _ in range(500):
        world.update()
        assert 0 <= world.player.angle < 2 * math.pi
    world.release(Key.RIGHT)
    world.press(Key.LEFT)
    for _ in range(500):
        world.update()
        assert 0 <= world.player.angle < 2 * math.pi


def test_use_key_toggles_once_per_press(world):
    world.press(Key.E)
    world.update()
    world.update()
    assert world.doors[2][2] == "0"
    world.release(Key.E)
    world.update()
    world.press(Key.E)
    world.update()
    assert world.doors[2][2] == "1"


def test_escape_ends_game(world):
    assert world.update() is True
    world.press(Key.ESC)
    start = (world.player.x, world.player.y)
    world.press(Key.W)
    assert world.update() is False
    assert (world.player.x, world.player.y) == start


def test_mouse_move(world):
    center = world.screen_width // 2
    start = world.player.angle
    assert world.mouse_move(center + 100, 0) is True
    assert world.player.angle == start
    assert world.mouse_move(center + 1, 0) is False
    assert world.player.angle == start
    assert world.mouse_move(center + 100, 0) is True
    assert world.player.angle == pytest.approx(start + 100 * MOUSE_SENSITIVITY)


def test_mouse_move_wraps_angle(world):
    center = world.screen_width // 2
    world.mouse_move(center, 0)
    world.player.angle = 0.0
    world.mouse_move(center - 100, 0)
    assert world.player.angle == pytest.approx(2 * math.pi - 100 * MOUSE_SENSITIVITY)
    assert 0 <= world.player.angle < 2 * math.pi