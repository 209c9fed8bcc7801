"""Grid ray casting (DDA) and textured wall rendering."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from raycub.image import Image
from raycub.scene import Facing
from raycub.world import DOOR, TILE_SIZE, WALL, World

FOV = math.pi / 3
DOOR_SURFACE = "door"
_FULL_TURN = 2 * math.pi


@dataclass(frozen=True)
class RayHit:
    """Where a ray met a wall.

    ``distance`` is in pixels along the ray's axis, ``wall_x`` the position
    of the hit across the wall face in [0, 1). ``side`` is 0 when an x-grid
    line was crossed last and 1 for a y-grid line. ``surface`` is the wall
    face hit (a :class:`Facing`), :data:`DOOR_SURFACE`, or None when the ray
    left the map.
    """

    angle: float
    distance: float
    wall_x: float
    side: int
    surface: Facing | str | None


@dataclass(frozen=True)
class WallSlice:
    """The screen rows one wall column spans, before and after clipping."""

    height: int
    top_unclipped: int
    top: int
    bottom: int


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def _normalize(angle: float) -> float:
    if angle < 0:
        angle += _FULL_TURN
    if angle > _FULL_TURN:
        angle -= _FULL_TURN
    return angle


def _axis(position: float, cell: int, direction: float) -> tuple[int, float, float]:
    """Return (step, delta distance, first side distance) along one axis."""
    delta = abs(1.0 / direction) if direction else math.inf
    if direction < 0:
        step, gap = -1, position - cell
    else:
        step, gap = 1, cell + 1.0 - position
    side_dist = math.inf if math.isinf(delta) else gap * delta
    return step, delta, side_dist


def _surface(world: World, col: int, row: int, side: int, step_x: int, step_y: int):
    line = world.rows[row]
    if col < len(line) and line[col] == DOOR:
        return DOOR_SURFACE
    if side == 0:
        return Facing.WEST if step_x == 1 else Facing.EAST
    return Facing.SOUTH if step_y == 1 else Facing.NORTH


def cast_ray(world: World, angle: float) -> RayHit:
    """Cast one ray from the player and return the first solid cell it meets."""
    tile = world.tile_size
    pos_x = world.player.x / tile
    pos_y = world.player.y / tile
    dir_x = math.cos(angle)
    dir_y = math.sin(angle)
    map_x = int(pos_x)
    map_y = int(pos_y)
    step_x, delta_x, side_x = _axis(pos_x, map_x, dir_x)
    step_y, delta_y, side_y = _axis(pos_y, map_y, dir_y)

    side = 0
    surface = None
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if not (0 <= map_y < world.height and 0 <= map_x < world.width):
            break
        if world.doors[map_y][map_x] == WALL:
            surface = _surface(world, map_x, map_y, side, step_x, step_y)
            break

    if side == 0:
        perp = (map_x - pos_x + (1 - step_x) / 2.0) / dir_x
        wall_x = pos_y + perp * dir_y
    else:
        perp = (map_y - pos_y + (1 - step_y) / 2.0) / dir_y
        wall_x = pos_x + perp * dir_x
    wall_x -= math.floor(wall_x)
    return RayHit(angle=angle, distance=perp * tile, wall_x=wall_x, side=side, surface=surface)


def wall_slice(distance: float, proj_dist: float, screen_height: int) -> WallSlice:
    """Project a wall at ``distance`` pixels onto a screen column.

    Distances below 1 count as 1.
    """
    distance = max(distance, 1.0)
    height = int(TILE_SIZE * proj_dist / distance)
    top_unclipped = screen_height // 2 - height // 2
    bottom = top_unclipped + height
    return WallSlice(
        height=height,
        top_unclipped=top_unclipped,
        top=_clamp(top_unclipped, 0, screen_height),
        bottom=_clamp(bottom, 0, screen_height),
    )


def cast_all(world: World, count: int) -> list[RayHit]:
    """Cast ``count`` rays spread evenly over the field of view, left to right."""
    start = world.player.angle - FOV / 2.0
    step = FOV / count
    return [cast_ray(world, _normalize(start + i * step)) for i in range(count)]


def _draw_column(
    canvas: Image, column: int, piece: WallSlice, hit: RayHit, texture: Image | None
) -> None:
    if texture is None:
        for y in range(piece.top, piece.bottom):
            canvas.put_pixel(column, y, 0)
        return
    tex_x = hit.wall_x
    if hit.surface in (Facing.NORTH, Facing.EAST):
        tex_x = 1.0 - tex_x
    texture_x = _clamp(int(tex_x * texture.width), 0, texture.width - 1)
    for y in range(piece.top, piece.bottom):
        ratio = (y - piece.top_unclipped) / piece.height
        texture_y = _clamp(int(ratio * texture.height), 0, texture.height - 1)
        canvas.put_pixel(column, y, texture.get_pixel(texture_x, texture_y))


def draw_walls(canvas: Image, world: World, textures: Mapping[object, Image]) -> None:
    """Render one textured wall column per canvas column.

    ``textures`` maps each :class:`Facing` and :data:`DOOR_SURFACE` to an
    image; surfaces without a texture are drawn black.
    """
    proj_dist = (canvas.width / 2.0) / math.tan(FOV / 2.0)
    for column, hit in enumerate(cast_all(world, canvas.width)):
        corrected = hit.distance * math.cos(hit.angle - world.player.angle)
        piece = wall_slice(corrected, proj_dist, canvas.height)
        _draw_column(canvas, column, piece, hit, textures.get(hit.surface))