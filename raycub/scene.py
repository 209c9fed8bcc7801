"""Reading ``.cub`` scene descriptions: wall textures, colours and the map."""

from __future__ import annotations

import math
import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from os import PathLike

_TEXTURE_KEYS = {"NO", "SO", "WE", "EA"}
_COLOR_KEYS = {"F ": "F", "C ": "C"}
_MAP_CHARS = frozenset("10NSWE D")
_WALL_ONLY = frozenset("1 ")
_OPEN_CELLS = frozenset("0NSWE")
_REQUIRED_ENTRIES = 6
_OPAQUE = 255 << 24


class SceneError(ValueError):
    """Raised when a scene description is invalid."""


class Facing(Enum):
    """A compass direction, used both for the player start and wall sides."""

    NORTH = "N"
    SOUTH = "S"
    WEST = "W"
    EAST = "E"

    @property
    def angle(self) -> float:
        """The view angle in radians; y grows downwards, so north is 3*pi/2."""
        return {
            Facing.NORTH: 3 * math.pi / 2.0,
            Facing.SOUTH: math.pi / 2.0,
            Facing.WEST: math.pi,
            Facing.EAST: 0.0,
        }[self]


@dataclass
class Scene:
    """A parsed scene.

    ``rows`` hold the map lines with the player's start cell replaced by
    ``'0'``; ``player`` is its (column, row) cell.
    """

    textures: dict[Facing, str]
    floor: int
    ceiling: int
    rows: list[str]
    player: tuple[int, int]
    facing: Facing

    @property
    def height(self) -> int:
        """Number of map rows."""
        return len(self.rows)

    @property
    def width(self) -> int:
        """Length of the longest map row."""
        return max((len(row) for row in self.rows), default=0)


def parse_color_line(line: str) -> tuple[str, int]:
    """Parse an ``F r,g,b`` or ``C r,g,b`` line.

    Returns ("F" or "C", colour) where the colour is 0xFFRRGGBB.
    """
    kind = _COLOR_KEYS.get(line[:2])
    if kind is None:
        raise SceneError("Invalid line in the file")
    if line.count(",") != 2:
        raise SceneError("Invalid commas in the color")
    parts = [part for part in line[2:].split(",") if part]
    if len(parts) != 3:
        raise SceneError("Color size")
    if sum(char.isdigit() for char in parts[0]) > 3:
        raise SceneError("Invalid color (Too many values)")
    values = []
    for part in parts:
        if not all(char.isdigit() or char == "\n" for char in part):
            raise SceneError("Colors must be only numbers")
        digits = part.replace("\n", "")
        value = int(digits) if digits else 0
        if not 0 <= value <= 255:
            raise SceneError("Colors must contain values 0 < > 255")
        values.append(value)
    red, green, blue = values
    return kind, (red << 16) | (green << 8) | blue | _OPAQUE


def parse_texture_line(line: str) -> tuple[Facing, str]:
    """Parse a ``NO``, ``SO``, ``WE`` or ``EA`` texture line.

    After the key and its whitespace, two characters (conventionally
    ``./``) are skipped; the rest of the line is the texture path.
    """
    if line[:2] not in _TEXTURE_KEYS:
        raise SceneError("Invalid line in the file")
    text = line[:-1] if line.endswith("\n") else line
    if not text.endswith(".xpm"):
        raise SceneError("Textures must be .xpm")
    path = text[2:].lstrip(" \t")[2:]
    return Facing(text[0]), path


def _only_walls(row: str) -> bool:
    return all(char in _WALL_ONLY for char in row)


def _enclosed(rows: list[str], i: int, j: int) -> bool:
    if i == 0 or i == len(rows) - 1:
        return False
    row, above, below = rows[i], rows[i - 1], rows[i + 1]
    if j >= len(above) or j >= len(below) or j + 1 >= len(row):
        return False
    return " " not in (row[j - 1], row[j + 1], above[j], below[j])


def is_closed_map(rows: list[str]) -> bool:
    """Tell whether every open cell of the map is surrounded by walls."""
    if not rows:
        return False
    if not _only_walls(rows[0]) or not _only_walls(rows[-1]):
        return False
    for i, row in enumerate(rows):
        if not row or row[0] not in _WALL_ONLY:
            return False
        for j, char in enumerate(row[1:], start=1):
            if char in _OPEN_CELLS and not _enclosed(rows, i, j):
                return False
    return True


def _parse_header_line(line: str) -> tuple[str, object]:
    if line[:2] in _TEXTURE_KEYS:
        return ("texture", parse_texture_line(line))
    if line[:2] in _COLOR_KEYS:
        return ("color", parse_color_line(line))
    raise SceneError("Invalid line in the file")


def parse_scene_lines(lines: Iterable[str]) -> Scene:
    """Build a scene from the lines of a ``.cub`` description.

    Lines may keep their trailing newlines. Texture files are not checked
    for existence here; :func:`load_scene` does that.
    """
    lines = list(lines)
    textures: dict[Facing, str] = {}
    colors = {"F": 0, "C": 0}
    entries = 0
    map_start = None
    for index, line in enumerate(lines):
        if line[:1] in ("1", " "):
            map_start = index
            break
        if not line or line[0] == "\n":
            continue
        kind, value = _parse_header_line(line)
        if kind == "texture":
            facing, path = value
            textures.setdefault(facing, path)
        else:
            name, color = value
            colors[name] = color
        entries += 1
    if map_start is None:
        raise SceneError("No map in the file")
    if entries != _REQUIRED_ENTRIES:
        raise SceneError("Not 6 types of informations as expected")

    rows: list[str] = []
    starts: list[tuple[int, int, Facing]] = []
    for y, raw in enumerate(lines[map_start:]):
        row = raw[:-1] if raw.endswith("\n") else raw
        if any(char not in _MAP_CHARS for char in row):
            raise SceneError("Map parsing error")
        for x, char in enumerate(row):
            if char in "NSWE":
                starts.append((x, y, Facing(char)))
        rows.append("".join("0" if char in "NSWE" else char for char in row))

    if len(starts) != 1:
        raise SceneError("No player in the map")
    if not is_closed_map(rows):
        raise SceneError("Map not closed or have problem")
    if any(facing not in textures for facing in Facing):
        raise SceneError("Invalid texture path")
    x, y, facing = starts[0]
    return Scene(
        textures=textures,
        floor=colors["F"],
        ceiling=colors["C"],
        rows=rows,
        player=(x, y),
        facing=facing,
    )


def _split_keeping_newlines(text: str) -> list[str]:
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def load_scene(path: str | PathLike[str]) -> Scene:
    """Read and validate a ``.cub`` file, including its texture paths."""
    name = os.fspath(path)
    if not str(name).endswith(".cub"):
        raise SceneError("Map is not a .cub")
    try:
        with open(name, "rb") as handle:
            text = handle.read().decode("utf-8", errors="surrogateescape")
    except OSError as exc:
        raise SceneError("Cannot open the file") from exc
    scene = parse_scene_lines(_split_keeping_newlines(text))
    for facing in Facing:
        texture = scene.textures[facing]
        if not texture or not os.access(texture, os.R_OK):
            raise SceneError("Invalid texture path")
    return scene