"""Game state: the player, doors and input handling on a tile map."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum

from raycub.scene import Scene

TILE_SIZE = 64
SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
WALL_DIST = 0.2
ROT_SPEED = 0.05
WALK_SPEED = 3.0
RUN_SPEED = 6.0
MOUSE_SENSITIVITY = 0.002
MOUSE_DEAD_ZONE = 2

WALL = "1"
OPEN = "0"
DOOR = "D"
_FULL_TURN = 2 * math.pi


class Key(IntEnum):
    """Keys the game reacts to, valued by their X keysyms."""

    ESC = 65307
    W = ord("w")
    A = ord("a")
    S = ord("s")
    D = ord("d")
    LEFT = 65361
    RIGHT = 65363
    UP = 65362
    DOWN = 65364
    E = ord("e")
    RUN = 65505


@dataclass
class Player:
    """Player position in pixels and view angle in radians."""

    x: float
    y: float
    angle: float


@dataclass
class World:
    """The map, the door states and the player.

    ``rows`` is the map as parsed; ``doors`` is a grid of the same cells,
    padded to the map width, where closed doors and walls are ``'1'`` and
    open doors are ``'0'``.
    """

    rows: list[str]
    player: Player
    tile_size: int = TILE_SIZE
    screen_width: int = SCREEN_WIDTH
    screen_height: int = SCREEN_HEIGHT
    speed: float = WALK_SPEED
    keys: set[Key] = field(default_factory=set)
    doors: list[list[str]] = field(init=False)
    _use_latched: bool = field(default=False, init=False, repr=False)
    _mouse_ready: bool = field(default=False, init=False, repr=False)

    def __post_init__(self) -> None:
        width = self.width
        self.doors = [
            [WALL if char == DOOR else char for char in row.ljust(width)]
            for row in self.rows
        ]

    @classmethod
    def from_scene(cls, scene: Scene) -> "World":
        """Place the player at the centre of the scene's start cell."""
        col, row = scene.player
        half = TILE_SIZE // 2
        player = Player(
            x=float(col * TILE_SIZE + half),
            y=float(row * TILE_SIZE + half),
            angle=scene.facing.angle,
        )
        return cls(rows=list(scene.rows), player=player)

    @property
    def width(self) -> int:
        """Length of the longest map row."""
        return max((len(row) for row in self.rows), default=0)

    @property
    def height(self) -> int:
        """Number of map rows."""
        return len(self.rows)

    def _tile(self, col: int, row: int) -> str:
        if 0 <= row < self.height and 0 <= col < len(self.rows[row]):
            return self.rows[row][col]
        return " "

    def _blocked(self, col: int, row: int) -> bool:
        return (
            0 <= row < self.height
            and 0 <= col < self.width
            and self.doors[row][col] == WALL
        )

    def _player_cell(self) -> tuple[int, int]:
        return int(self.player.x) // self.tile_size, int(self.player.y) // self.tile_size

    def is_walkable(self, x: float, y: float) -> bool:
        """Tell whether the player may stand at pixel position (x, y).

        A position is refused inside a solid cell, or closer than
        ``WALL_DIST`` of a tile to a solid neighbouring cell.
        """
        col = int(x / self.tile_size)
        row = int(y / self.tile_size)
        frac_x = x / self.tile_size - col
        frac_y = y / self.tile_size - row
        if self._blocked(col, row):
            return False
        if frac_x > 1.0 - WALL_DIST and self._blocked(col + 1, row):
            return False
        if frac_x < WALL_DIST and self._blocked(col - 1, row):
            return False
        if frac_y > 1.0 - WALL_DIST and self._blocked(col, row + 1):
            return False
        if frac_y < WALL_DIST and self._blocked(col, row - 1):
            return False
        return True

    def press(self, keysym: int) -> None:
        """Record a key press; keys the game does not use are ignored."""
        try:
            self.keys.add(Key(keysym))
        except ValueError:
            pass

    def release(self, keysym: int) -> None:
        """Record a key release."""
        try:
            self.keys.discard(Key(keysym))
        except ValueError:
            pass

    def _neighbours(self) -> list[tuple[int, int]]:
        col, row = self._player_cell()
        return [(col, row - 1), (col, row + 1), (col - 1, row), (col + 1, row)]

    def _can_close(self, col: int, row: int) -> bool:
        if self._player_cell() == (col, row):
            return False
        self.doors[row][col] = WALL
        walkable = self.is_walkable(self.player.x, self.player.y)
        self.doors[row][col] = OPEN
        return walkable

    def toggle_door(self) -> None:
        """Open an adjacent closed door, or else close an adjacent open one.

        Neighbours are tried above, below, left, then right. A door is only
        closed if it would not trap the player inside it.
        """
        neighbours = self._neighbours()
        for col, row in neighbours:
            if self._tile(col, row) == DOOR and self.doors[row][col] == WALL:
                self.doors[row][col] = OPEN
                return
        for col, row in neighbours:
            if self._tile(col, row) == DOOR and self.doors[row][col] == OPEN:
                if self._can_close(col, row):
                    self.doors[row][col] = WALL
                return

    def mouse_move(self, x: int, y: int) -> bool:
        """Turn the view from a pointer position.

        Returns True when the pointer should be moved back to the centre of
        the screen: on the first call, and after every turn.
        """
        center_x = self.screen_width // 2
        if not self._mouse_ready:
            self._mouse_ready = True
            return True
        delta = x - center_x
        if abs(delta) <= MOUSE_DEAD_ZONE:
            return False
        angle = self.player.angle + delta * MOUSE_SENSITIVITY
        if angle < 0:
            angle += _FULL_TURN
        if angle >= _FULL_TURN:
            angle -= _FULL_TURN
        self.player.angle = angle
        return True

    def _step(self, direction: float, sign: float = 1.0) -> None:
        dx = sign * math.cos(direction) * self.speed
        dy = sign * math.sin(direction) * self.speed
        new_x = self.player.x + dx
        new_y = self.player.y + dy
        if self.is_walkable(new_x, self.player.y):
            self.player.x = new_x
        if self.is_walkable(self.player.x, new_y):
            self.player.y = new_y

    def _handle_door_key(self) -> None:
        if Key.E in self.keys:
            if not self._use_latched:
                self._use_latched = True
                self.toggle_door()
        else:
            self._use_latched = False

    def update(self) -> bool:
        """Apply one frame of held keys.

        Returns False, changing nothing, when Escape is held and the game
        should end; True otherwise.
        """
        if Key.ESC in self.keys:
            return False
        self.speed = RUN_SPEED if Key.RUN in self.keys else WALK_SPEED
        angle = self.player.angle
        if Key.W in self.keys:
            self._step(angle)
        if Key.S in self.keys:
            self._step(angle, -1.0)
        if Key.A in self.keys:
            self._step(self.player.angle - math.pi / 2)
        if Key.D in self.keys:
            self._step(self.player.angle + math.pi / 2)
        if Key.RIGHT in self.keys:
            self.player.angle += ROT_SPEED
            if self.player.angle >= _FULL_TURN:
                self.player.angle -= _FULL_TURN
        if Key.LEFT in self.keys:
            self.player.angle -= ROT_SPEED
            if self.player.angle < 0:
                self.player.angle += _FULL_TURN
        self._handle_door_key()
        return True