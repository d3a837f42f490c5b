"""Full screen pictures: logo, intro, menu and finish screens.

A picture is stored SQZ-packed and is always 320x200 pixels. Two stored
layouts are understood: four bit planes shown with a 16 step grey ramp,
and a 256 colour VGA palette followed by one byte per pixel.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import IntEnum
from typing import Tuple, Union

from .sprites import decode_planar
from .sqz import read_sqz

BytesLike = Union[bytes, bytearray, memoryview]

IMAGE_WIDTH = 320
IMAGE_HEIGHT = 200
PALETTE_COLOURS = 256
GREY_LEVELS = 16
DEFAULT_FADE_TIME = 1000
MAX_ALPHA = 255

_PALETTE_BYTES = PALETTE_COLOURS * 3
_PIXEL_COUNT = IMAGE_WIDTH * IMAGE_HEIGHT

Colour = Tuple[int, int, int]


class ImageFormat(IntEnum):
    """How the picture is laid out once unpacked."""

    PLANAR_GRAYSCALE = 0
    PLANAR = 1
    PALETTE_256 = 2


@dataclass(frozen=True)
class Image:
    """A palette image: one palette index per pixel, rows top first."""

    width: int
    height: int
    pixels: bytes
    palette: Tuple[Colour, ...]

    def to_rgb(self) -> bytes:
        """Return the picture as packed 8-bit RGB triplets."""
        lookup = [bytes(colour) for colour in self.palette]
        try:
            return b"".join(lookup[index] for index in self.pixels)
        except IndexError as exc:
            raise ValueError("pixel refers to a colour outside the palette") from exc


def _grey_palette() -> Tuple[Colour, ...]:
    return tuple((i * 16, i * 16, i * 16) for i in range(GREY_LEVELS))


def decode_image(data: BytesLike, image_format: Union[ImageFormat, int]) -> Image:
    """Build an image from unpacked picture data."""
    image_format = ImageFormat(image_format)
    data = bytes(data)

    if image_format is ImageFormat.PLANAR_GRAYSCALE:
        surface = decode_planar(data, IMAGE_WIDTH, IMAGE_HEIGHT, 0)
        return Image(IMAGE_WIDTH, IMAGE_HEIGHT, bytes(surface.pixels), _grey_palette())

    if image_format is ImageFormat.PALETTE_256:
        needed = _PALETTE_BYTES + _PIXEL_COUNT
        if len(data) < needed:
            raise ValueError(
                f"256 colour picture too short: need {needed} bytes, have {len(data)}"
            )
        raw = data[:_PALETTE_BYTES]
        palette = tuple(
            ((r * 4) & 0xFF, (g * 4) & 0xFF, (b * 4) & 0xFF)
            for r, g, b in zip(raw[0::3], raw[1::3], raw[2::3])
        )
        pixels = data[_PALETTE_BYTES:needed]
        return Image(IMAGE_WIDTH, IMAGE_HEIGHT, pixels, palette)

    raise ValueError(f"picture format {image_format.name} is not supported")


def load_image(
    path: Union[str, os.PathLike], image_format: Union[ImageFormat, int]
) -> Image:
    """Read an SQZ-packed picture file and decode it."""
    return decode_image(read_sqz(path), image_format)


def fade_alpha(elapsed_ms: int, fade_time: int = DEFAULT_FADE_TIME, skip: int = 0) -> int:
    """Opacity step (0-255) reached ``elapsed_ms`` into a fade.

    ``skip`` is added first, so a fade can resume where an interrupted one
    stopped.
    """
    if fade_time <= 0:
        raise ValueError("fade time must be positive")
    if elapsed_ms < 0:
        raise ValueError("elapsed time must not be negative")
    return min(elapsed_ms * 256 // fade_time + skip, MAX_ALPHA)