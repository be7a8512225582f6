"""Typed models for printer configuration, runtime state and bitmaps."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from .errors import UnsupportedParameter
from .print_mode import PrintModeRegister


BAUD_RATE = 9600
NEWLINE = 0x0A

MIN_HEAT_TIME = 3
MAX_HEAT_TIME = 255
MIN_DENSITY = 1
MAX_DENSITY = 31

MAX_ROW_BYTES = 48
MAX_CHUNK_HEIGHT = 255

NORMAL_CHAR_HEIGHT = 24
DOUBLE_CHAR_HEIGHT = 48
NORMAL_MAX_COLUMN = 32
DOUBLE_MAX_COLUMN = 16


class Justification(IntEnum):
    LEFT = 0
    CENTER = 1
    RIGHT = 2


class Underline(IntEnum):
    NONE = 0
    NORMAL = 1
    THICK = 2


class PrintWidth(IntEnum):
    NORMAL = 0
    SMALL = 1
    DOUBLE = 17


class CharSize(IntEnum):
    NORMAL = 0x00
    MEDIUM = 0x01
    LARGE = 0x11


@dataclass(frozen=True)
class DotTimes:
    print_s: float
    feed_s: float


@dataclass(frozen=True)
class FirmwareCapabilities:
    version: int
    native_feed: bool
    native_invert: bool
    tab_stops: bool

    @classmethod
    def for_version(cls, version: int) -> "FirmwareCapabilities":
        return cls(
            version=version,
            native_feed=version >= 264,
            native_invert=version >= 268,
            tab_stops=version >= 264,
        )


@dataclass(frozen=True)
class PrinterConfig:
    port: str = "/dev/ttyUSB0"
    baud_rate: int = BAUD_RATE
    default_heat_time: int = 120
    firmware_version: int = 268
    print_density: int = 1
    pace: bool = True

    def __post_init__(self) -> None:
        check_heat_time(self.default_heat_time)
        check_density(self.print_density)
        if self.baud_rate <= 0:
            raise UnsupportedParameter(f"Baud rate must be positive, got {self.baud_rate}")


@dataclass
class PrinterState:
    column: int = 0
    max_column: int = NORMAL_MAX_COLUMN
    char_height: int = NORMAL_CHAR_HEIGHT
    line_spacing: int = 6
    barcode_height: int = 50
    previous_byte: int = NEWLINE
    print_mode: PrintModeRegister = field(default_factory=PrintModeRegister)


@dataclass(frozen=True)
class BitmapSpec:
    width: int
    height: int
    data: bytes
    line_at_a_time: bool = False

    @property
    def row_bytes(self) -> int:
        return (self.width + 7) // 8

    @property
    def row_bytes_clipped(self) -> int:
        return min(MAX_ROW_BYTES, self.row_bytes)


@dataclass(frozen=True)
class BitmapChunk:
    height: int
    row_bytes: int
    rows: bytes


def check_heat_time(value: int) -> int:
    if not MIN_HEAT_TIME <= value <= MAX_HEAT_TIME:
        raise UnsupportedParameter(f"Heat time must be in [{MIN_HEAT_TIME}, {MAX_HEAT_TIME}], got {value}")
    return value


def check_density(value: int) -> int:
    if not MIN_DENSITY <= value <= MAX_DENSITY:
        raise UnsupportedParameter(f"Print density must be in [{MIN_DENSITY}, {MAX_DENSITY}], got {value}")
    return value


def check_byte(name: str, value: int) -> int:
    if not 0 <= value <= 0xFF:
        raise UnsupportedParameter(f"{name} must be in [0, 255], got {value}")
    return value
