"""Split packed 1-bit bitmaps into printer-sized chunks."""

from __future__ import annotations

from typing import Iterator

import numpy as np

from . import commands
from .errors import InvalidBitmap
from .models import MAX_CHUNK_HEIGHT, BitmapChunk, BitmapSpec


def validate_bitmap(spec: BitmapSpec) -> None:
    if spec.width <= 0 or spec.height <= 0:
        raise InvalidBitmap(f"Bitmap dimensions must be positive, got {spec.width}x{spec.height}")
    expected = spec.row_bytes * spec.height
    if len(spec.data) < expected:
        raise InvalidBitmap(f"Bitmap data truncated: expected {expected} bytes, got {len(spec.data)}")


class BitmapChunker:
    """Yields one chunk per ``DC2 *`` command.

    Rows wider than 48 bytes (384 dots) lose their tail; the printer cannot
    take more than that per row.
    """

    def __init__(self, spec: BitmapSpec) -> None:
        validate_bitmap(spec)
        self.spec = spec
        self.max_chunk_height = 1 if spec.line_at_a_time else MAX_CHUNK_HEIGHT
        rows = np.frombuffer(spec.data, dtype=np.uint8, count=spec.row_bytes * spec.height)
        self._rows = rows.reshape((spec.height, spec.row_bytes))[:, : spec.row_bytes_clipped]

    def __iter__(self) -> Iterator[BitmapChunk]:
        return self.chunks()

    def __len__(self) -> int:
        return -(-self.spec.height // self.max_chunk_height)

    def chunks(self) -> Iterator[BitmapChunk]:
        height = self.spec.height
        for row_start in range(0, height, self.max_chunk_height):
            chunk_height = min(self.max_chunk_height, height - row_start)
            block = self._rows[row_start : row_start + chunk_height]
            yield BitmapChunk(
                height=chunk_height,
                row_bytes=self.spec.row_bytes_clipped,
                rows=np.ascontiguousarray(block).tobytes(),
            )

    @staticmethod
    def frame(chunk: BitmapChunk) -> bytes:
        return commands.bitmap_start(chunk.height, chunk.row_bytes) + chunk.rows
