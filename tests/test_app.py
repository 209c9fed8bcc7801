import pytest

from raycub.app import Game, load_textures, main
from raycub.image import Image
from raycub.overlay import MINIMAP_WALL
from raycub.raycast import DOOR_SURFACE
from raycub.scene import Facing, parse_scene_lines
from raycub.world import Key
from raycub.xpm import XpmError

COLORS = {
    Facing.NORTH: 0x110000,
    Facing.SOUTH: 0x002200,
    Facing.WEST: 0x000033,
    Facing.EAST: 0x444444,
    DOOR_SURFACE: 0x555555,
}

SCENE_LINES = [
    "NO ./north.xpm\n",
    "SO ./south.xpm\n",
    "WE ./west.xpm\n",
    "EA ./east.xpm\n",
    "F 10,20,30\n",
    "C 40,50,60\n",
    "\n",
    "11111\n",
    "10001\n",
    "10N01\n",
    "10001\n",
    "11111\n",
]


def _texture(color):
    image = Image(4, 4)
    image.fill(color)
    return image


def _game():
    scene = parse_scene_lines(SCENE_LINES)
    textures = {key: _texture(color) for key, color in COLORS.items()}
    game = Game(scene, textures, [_texture(0x808080)])
    game.canvas = Image(32, 18)
    return game


def _xpm(color_hex):
    return f'/* XPM */\nstatic char *x[] = {{\n"1 1 1 1",\n"a c #{color_hex}",\n"a"\n}};\n'


def test_frame_ends_on_escape_without_moving():
    game = _game()
    before = (game.world.player.x, game.world.player.y)
    game.world.press(Key.ESC)
    assert game.frame() is False
    assert (game.world.player.x, game.world.player.y) == before
    assert game.weapon.frame == 0


def test_frame_moves_player_forward():
    game = _game()
    start_y = game.world.player.y
    game.world.press(Key.W)
    assert game.frame() is True
    assert game.world.player.y < start_y
    assert game.weapon.frame == 1


def test_render_draws_north_wall_in_centre():
    game = _game()
    game.render()
    assert game.canvas.get_pixel(16, 9) == COLORS[Facing.NORTH]
    assert game.canvas.get_pixel(0, 0) == MINIMAP_WALL


def test_load_textures(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("north", "south", "west", "east"):
        (tmp_path / f"{name}.xpm").write_text(_xpm("FF0000"))
    (tmp_path / "asset").mkdir()
    (tmp_path / "asset" / "doors.xpm").write_text(_xpm("00FF00"))
    scene = parse_scene_lines(SCENE_LINES)
    textures = load_textures(scene)
    assert set(textures) == set(Facing) | {DOOR_SURFACE}
    assert textures[Facing.NORTH].get_pixel(0, 0) == 0xFF0000
    assert textures[DOOR_SURFACE].get_pixel(0, 0) == 0x00FF00


def test_load_textures_missing_door(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("north", "south", "west", "east"):
        (tmp_path / f"{name}.xpm").write_text(_xpm("FF0000"))
    with pytest.raises(XpmError):
        load_textures(parse_scene_lines(SCENE_LINES))


def test_main_without_arguments_fails(capsys):
    assert main([]) == 1
    assert "Error" in capsys.readouterr().err


def test_main_rejects_wrong_extension(capsys):
    assert main(["map.txt"]) == 1
    assert "Map is not a .cub" in capsys.readouterr().err


def test_main_fails_when_textures_cannot_load(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    for name in ("north", "south", "west", "east"):
        (tmp_path / f"{name}.xpm").write_text(_xpm("FF0000"))
    (tmp_path / "map.cub").write_text("".join(SCENE_LINES))
    assert main(["map.cub"]) == 1
    assert "Error" in capsys.readouterr().err