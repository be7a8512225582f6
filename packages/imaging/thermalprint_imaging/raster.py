"""1-bit raster helpers feeding the bitmap printer path."""

from __future__ import annotations

from pathlib import Path

import numpy as np
from PIL import Image

from thermalprint_printer.models import MAX_ROW_BYTES, BitmapSpec


MAX_WIDTH = MAX_ROW_BYTES * 8
PATTERNS = ("black", "white", "checkerboard", "stripes", "border")


def image_to_bitmap(image: Image.Image, line_at_a_time: bool = False) -> BitmapSpec:
    """Pack an already monochrome image, black pixels as set bits.

    Anything that is not mode ``"1"`` is thresholded at mid-grey; no
    dithering is applied. Images wider than the head are cropped.
    """
    if image.width > MAX_WIDTH:
        image = image.crop((0, 0, MAX_WIDTH, image.height))
    if image.mode != "1":
        image = image.convert("L").convert("1", dither=Image.Dither.NONE)

    white = np.asarray(image, dtype=bool)
    packed = np.packbits(~white, axis=1)
    return BitmapSpec(
        width=image.width,
        height=image.height,
        data=packed.tobytes(),
        line_at_a_time=line_at_a_time,
    )


def load_bitmap(path: Path, line_at_a_time: bool = False) -> BitmapSpec:
    with Image.open(path) as image:
        image.load()
        return image_to_bitmap(image, line_at_a_time=line_at_a_time)


def build_test_pattern(name: str, width: int = MAX_WIDTH, height: int = 64) -> Image.Image:
    if width <= 0 or height <= 0:
        raise ValueError("Pattern dimensions must be positive")
    ys, xs = np.mgrid[0:height, 0:width]

    if name == "black":
        black = np.ones((height, width), dtype=bool)
    elif name == "white":
        black = np.zeros((height, width), dtype=bool)
    elif name == "checkerboard":
        black = ((xs // 8 + ys // 8) % 2) == 0
    elif name == "stripes":
        black = (ys // 4) % 2 == 0
    elif name == "border":
        black = (xs < 2) | (ys < 2) | (xs >= width - 2) | (ys >= height - 2)
    else:
        raise ValueError(f"Unknown pattern: {name}")

    return Image.fromarray(~black)
