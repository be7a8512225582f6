"""Command byte layouts for the thermal printer protocol.

Every function here is pure: it maps a semantic operation to the exact frame
the printer expects. Range checks happen in the driver before encoding.
"""

from __future__ import annotations

from enum import IntEnum


class Ascii(IntEnum):
    FF = 12
    DC2 = 18
    ESC = 27
    GS = 29


TAB_STOP_FRAMES: tuple[bytes, ...] = (
    bytes([Ascii.ESC, 68]),
    bytes([4, 8, 12, 16]),
    bytes([20, 24, 28, 0]),
)

# Heat dots and heat interval stay at the vendor defaults.
HEAT_DOTS = 11
HEAT_INTERVAL = 40
PRINT_BREAK_TIME = 2


def initialize() -> bytes:
    return bytes([Ascii.ESC, 64])


def set_heat_time(heat_time: int) -> bytes:
    return bytes([Ascii.ESC, 55, HEAT_DOTS, heat_time, HEAT_INTERVAL])


def set_print_density(density: int) -> bytes:
    return bytes([Ascii.DC2, 35, (PRINT_BREAK_TIME << 5) | density])


def set_print_mode(bits: int) -> bytes:
    return bytes([Ascii.ESC, 33, bits & 0xFF])


def set_width(width: int) -> bytes:
    return bytes([Ascii.ESC, 33, width])


def set_line_height(height: int) -> bytes:
    return bytes([Ascii.ESC, 51, max(height, 24) - 24])


def feed(line_spacing: int) -> bytes:
    return bytes([Ascii.ESC, 100, line_spacing])


def feed_rows(rows: int) -> bytes:
    return bytes([Ascii.ESC, 74, rows])


def justify(justification: int) -> bytes:
    return bytes([Ascii.ESC, 97, justification])


def underline(size: int) -> bytes:
    return bytes([Ascii.ESC, 45, size])


def invert_colors(on: bool) -> bytes:
    return bytes([Ascii.GS, 66, 1 if on else 0])


def set_size(size: int) -> bytes:
    return bytes([Ascii.GS, 33, size])


def online() -> bytes:
    return bytes([Ascii.ESC, 61, 1])


def offline() -> bytes:
    return bytes([Ascii.ESC, 61, 0])


def flush() -> bytes:
    return bytes([Ascii.FF])


def tab() -> bytes:
    return b"\t"


def bitmap_start(chunk_height: int, row_bytes: int) -> bytes:
    return bytes([Ascii.DC2, 42, chunk_height, row_bytes])
