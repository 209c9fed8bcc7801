"""Background, minimap and weapon sprite drawn around the 3D view."""

from __future__ import annotations

import math
from collections.abc import Sequence

from raycub.image import BYTES_PER_PIXEL, Image
from raycub.world import DOOR, TILE_SIZE, WALL, World

MINIMAP_BACKGROUND = 0xA90807
MINIMAP_WALL = 0x000000
MINIMAP_CLOSED_DOOR = 0xFF0000
MINIMAP_OPEN_DOOR = 0x00FF00
MINIMAP_PLAYER = 0xFFFFFF
FRAMES_PER_SPRITE = 30
WEAPON_RIGHT_MARGIN = 20
WEAPON_DROP = 50
_WHITE = 0xFFFFFF


def _fill_rect(canvas: Image, x: int, y: int, width: int, height: int, color: int) -> None:
    x0, y0 = max(x, 0), max(y, 0)
    x1, y1 = min(x + width, canvas.width), min(y + height, canvas.height)
    if x0 >= x1 or y0 >= y1:
        return
    run = (color & 0xFFFFFFFF).to_bytes(BYTES_PER_PIXEL, "little") * (x1 - x0)
    for row in range(y0, y1):
        start = row * canvas.line_len + x0 * BYTES_PER_PIXEL
        canvas.data[start:start + len(run)] = run


def draw_background(canvas: Image, floor: int, ceiling: int) -> None:
    """Paint the upper half with the ceiling colour and the rest with the floor."""
    half = canvas.height // 2
    _fill_rect(canvas, 0, 0, canvas.width, half, ceiling)
    _fill_rect(canvas, 0, half, canvas.width, canvas.height - half, floor)


def draw_square(canvas: Image, x: int, y: int, color: int) -> None:
    """Draw a tile-sized square whose top row and left column are black."""
    _fill_rect(canvas, x, y, TILE_SIZE, TILE_SIZE, color)
    _fill_rect(canvas, x, y, TILE_SIZE, 1, 0)
    _fill_rect(canvas, x, y, 1, TILE_SIZE, 0)


def minimap_scale(world: World, width: int, height: int) -> int:
    """Pixels per map cell so the minimap fits a third of the screen, at least 1."""
    scale = min((width // 3) // world.width, (height // 3) // world.height)
    return max(scale, 1)


def _cell_color(world: World, row: int, col: int) -> int | None:
    cell = world.rows[row][col]
    if cell == WALL:
        return MINIMAP_WALL
    if cell == DOOR:
        return MINIMAP_CLOSED_DOOR if world.doors[row][col] == WALL else MINIMAP_OPEN_DOOR
    return None


def _draw_player(canvas: Image, world: World, scale: int) -> None:
    px = int(world.player.x / world.tile_size) * scale
    py = int(world.player.y / world.tile_size) * scale
    size = max(scale // 4, 2)
    _fill_rect(canvas, px - size, py - size, 2 * size + 1, 2 * size + 1, MINIMAP_PLAYER)
    cos_a = math.cos(world.player.angle)
    sin_a = math.sin(world.player.angle)
    for i in range(scale * 2):
        canvas.put_pixel(px + int(cos_a * i), py + int(sin_a * i), MINIMAP_PLAYER)


def draw_minimap(canvas: Image, world: World) -> None:
    """Draw the map in the top-left corner: walls, doors and the player."""
    scale = minimap_scale(world, canvas.width, canvas.height)
    _fill_rect(canvas, 0, 0, world.width * scale, world.height * scale, MINIMAP_BACKGROUND)
    for row, line in enumerate(world.rows):
        for col in range(min(len(line), world.width)):
            color = _cell_color(world, row, col)
            if color is not None:
                _fill_rect(canvas, col * scale, row * scale, scale, scale, color)
    _draw_player(canvas, world, scale)


def is_dark_color(color: int) -> bool:
    """Tell whether every RGB channel of ``color`` is below 30."""
    red = (color >> 16) & 0xFF
    green = (color >> 8) & 0xFF
    blue = color & 0xFF
    return red < 30 and green < 30 and blue < 30


class WeaponAnimator:
    """Cycles through weapon sprites, changing frame every 30 draws."""

    def __init__(self, sprites: Sequence[Image]) -> None:
        if not sprites:
            raise ValueError("at least one weapon sprite is needed")
        self.sprites = list(sprites)
        self.frame = 0
        self.scale = 1

    def draw(self, canvas: Image) -> None:
        """Advance one frame and draw the current sprite at the bottom right.

        Near-black and pure white pixels are treated as transparent.
        """
        self.frame += 1
        sprite = self.sprites[(self.frame // FRAMES_PER_SPRITE) % len(self.sprites)]
        scale = self.scale
        origin_x = canvas.width - sprite.width * scale - WEAPON_RIGHT_MARGIN
        origin_y = canvas.height - sprite.height * scale + WEAPON_DROP
        for y in range(sprite.height):
            for x in range(sprite.width):
                color = sprite.get_pixel(x, y)
                if is_dark_color(color) or color == _WHITE:
                    continue
                _fill_rect(canvas, origin_x + x * scale, origin_y + y * scale, scale, scale, color)