"""In-memory 32-bit pixel images and colour conversion for shallow visuals."""

from __future__ import annotations

BYTES_PER_PIXEL = 4
_PIXEL_MASK = 0xFFFFFFFF


class Image:
    """A width x height image of 32-bit pixels stored little-endian.

    Pixel values are 0xAARRGGBB integers. ``data`` holds the raw rows,
    each ``line_len`` bytes long.
    """

    bpp = BYTES_PER_PIXEL * 8
    endian = 0

    def __init__(self, width: int, height: int) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid image size {width}x{height}")
        self.width = width
        self.height = height
        self.line_len = width * BYTES_PER_PIXEL
        self.data = bytearray(self.line_len * height)

    def __repr__(self) -> str:
        return f"Image({self.width}, {self.height})"

    def _offset(self, x: int, y: int) -> int | None:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.line_len + x * BYTES_PER_PIXEL
        return None

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Write a pixel; coordinates outside the image are ignored."""
        offset = self._offset(x, y)
        if offset is None:
            return
        self.data[offset:offset + BYTES_PER_PIXEL] = (color & _PIXEL_MASK).to_bytes(
            BYTES_PER_PIXEL, "little"
        )

    def get_pixel(self, x: int, y: int) -> int:
        """Read a pixel; coordinates outside the image read as black (0)."""
        offset = self._offset(x, y)
        if offset is None:
            return 0
        return int.from_bytes(self.data[offset:offset + BYTES_PER_PIXEL], "little")

    def fill(self, color: int) -> None:
        """Set every pixel of the image to ``color``."""
        pixel = (color & _PIXEL_MASK).to_bytes(BYTES_PER_PIXEL, "little")
        self.data[:] = pixel * (self.width * self.height)


def _mask_shift(mask: int) -> tuple[int, int]:
    if mask <= 0:
        raise ValueError(f"colour mask must be a positive bit field, got {mask:#x}")
    shift = 0
    while not mask & 1:
        mask >>= 1
        shift += 1
    bits = 0
    while mask & 1:
        mask >>= 1
        bits += 1
    return shift, bits


def rgb_shifts(red_mask: int, green_mask: int, blue_mask: int) -> tuple[int, ...]:
    """Return (shift, bits) for red, green and blue, flattened to six ints."""
    return (*_mask_shift(red_mask), *_mask_shift(green_mask), *_mask_shift(blue_mask))


def good_color(color: int, depth: int, shifts: tuple[int, ...]) -> int:
    """Convert a 0xRRGGBB colour to the pixel value of a visual.

    Visuals of depth 24 or more take the colour unchanged; shallower ones
    pack each channel according to ``shifts`` as made by :func:`rgb_shifts`.
    """
    if depth >= 24:
        return color
    red = (color >> 8) & 0xFF00
    green = color & 0xFF00
    blue = (color << 8) & 0xFF00
    red_shift, red_bits, green_shift, green_bits, blue_shift, blue_bits = shifts
    pixel = (
        ((red >> (16 - red_bits)) << red_shift)
        + ((green >> (16 - green_bits)) << green_shift)
        + ((blue >> (16 - blue_bits)) << blue_shift)
    )
    return pixel & _PIXEL_MASK