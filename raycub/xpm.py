"""Reading XPM pixmaps into :class:`~raycub.image.Image` objects."""

from __future__ import annotations

import re
from collections.abc import Sequence
from os import PathLike

from raycub.colors import lookup_color
from raycub.image import Image

TRANSPARENT = 0xFF000000

_WORD_SEPARATORS = re.compile(r"[ \t]+")
_INT_PREFIX = re.compile(r"\s*([+-]?\d+)")
_HEX_PREFIX = re.compile(r"\s*([+-]?)(?:0[xX])?([0-9a-fA-F]+)")
_QUOTED = re.compile(r'"([^"]*)"')


class XpmError(ValueError):
    """Raised when XPM data cannot be read or is malformed."""


def split_words(text: str) -> list[str]:
    """Split on runs of spaces and tabs, dropping empty words."""
    return [word for word in _WORD_SEPARATORS.split(text) if word]


def _find_outside_quotes(text: str, token: str) -> int:
    inside = False
    for pos, char in enumerate(text[: len(text) - len(token) + 1]):
        if char == '"':
            inside = not inside
        if not inside and text.startswith(token, pos):
            return pos
    return -1


def strip_comments(text: str) -> str:
    """Blank out C comments that lie outside double quotes.

    Comments are replaced by spaces so that the text keeps its length;
    a line comment is blanked together with its newline.
    """
    while (begin := _find_outside_quotes(text, "/*")) != -1:
        end = text.find("*/", begin + 2)
        stop = len(text) if end == -1 else end + 2
        text = text[:begin] + " " * (stop - begin) + text[stop:]
    while (begin := _find_outside_quotes(text, "//")) != -1:
        end = text.find("\n", begin + 2)
        stop = len(text) if end == -1 else end + 1
        text = text[:begin] + " " * (stop - begin) + text[stop:]
    return text


def _atoi(text: str) -> int:
    match = _INT_PREFIX.match(text)
    return int(match.group(1)) if match else 0


def text_to_rgb(name: str, end: str | None) -> int:
    """Resolve an XPM colour value to 0xRRGGBB.

    ``#hex`` values are parsed directly. Otherwise ``name`` (joined with
    ``end`` when given, for two-word names) is looked up in the colour
    table; "none" gives -1 and unknown names give 0.
    """
    if name.startswith("#"):
        match = _HEX_PREFIX.match(name[1:])
        if not match:
            return 0
        value = int(match.group(2), 16)
        return -value if match.group(1) == "-" else value
    if end:
        name = f"{name} {end}"[:63]
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def _parse_header(line: str) -> tuple[int, int, int, int]:
    words = split_words(line)
    if len(words) < 4:
        raise XpmError(f"invalid XPM header: {line!r}")
    width, height, ncolors, cpp = (_atoi(word) for word in words[:4])
    if not (width and height and ncolors and cpp):
        raise XpmError(f"invalid XPM header: {line!r}")
    return width, height, ncolors, cpp


def _color_value(line: str, cpp: int) -> int:
    words = split_words(line[cpp:])
    try:
        index = words.index("c") + 1
    except ValueError:
        raise XpmError(f"colour line without 'c' key: {line!r}") from None
    if index >= len(words):
        raise XpmError(f"colour line without value: {line!r}")
    end = words[index + 1] if index + 1 < len(words) else None
    return text_to_rgb(words[index], end)


def xpm_from_data(lines: Sequence[str]) -> Image:
    """Build an image from the strings of an XPM pixmap, in order."""
    rows = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(rows)
        except StopIteration:
            raise XpmError(f"XPM data ends before the {what}") from None

    width, height, ncolors, cpp = _parse_header(next_line("header"))
    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("colour table")
        key = line[:cpp]
        value = _color_value(line, cpp)
        if cpp <= 2:
            palette[key] = value
        else:
            palette.setdefault(key, value)

    image = Image(width, height)
    for y in range(height):
        line = next_line("pixel rows")
        for x in range(width):
            color = palette.get(line[x * cpp:(x + 1) * cpp], 0)
            image.put_pixel(x, y, TRANSPARENT if color == -1 else color)
    return image


def load_xpm(path: str | PathLike[str]) -> Image:
    """Read an XPM file and return its image."""
    try:
        with open(path, "rb") as handle:
            text = handle.read().decode("latin-1")
    except OSError as exc:
        raise XpmError(f"cannot read {path}: {exc.strerror}") from exc
    return xpm_from_data(_QUOTED.findall(strip_comments(text)))