"""Imaging helpers turning 1-bit images into printable bitmaps."""

from .raster import MAX_WIDTH, PATTERNS, build_test_pattern, image_to_bitmap, load_bitmap

__all__ = [
    "MAX_WIDTH",
    "PATTERNS",
    "build_test_pattern",
    "image_to_bitmap",
    "load_bitmap",
]
