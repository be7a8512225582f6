"""Command, timing and bitmap driver for serial thermal receipt printers."""

from .bitmap import BitmapChunker
from .driver import PrinterDriver
from .errors import (
    InvalidBitmap,
    PrintCancelled,
    PrinterError,
    TransportError,
    TransportUnavailable,
    UnsupportedParameter,
)
from .models import (
    BitmapChunk,
    BitmapSpec,
    CharSize,
    FirmwareCapabilities,
    Justification,
    PrinterConfig,
    PrinterState,
    PrintWidth,
    Underline,
)
from .print_mode import PrintMode, PrintModeRegister
from .replay import ReplayEvent, ReplayReport, ReplayRunner
from .timing import TimingModel
from .transport import PrinterTransport, RecordingTransport, SerialTransport

__all__ = [
    "BitmapChunk",
    "BitmapChunker",
    "BitmapSpec",
    "CharSize",
    "FirmwareCapabilities",
    "InvalidBitmap",
    "Justification",
    "PrintCancelled",
    "PrintMode",
    "PrintModeRegister",
    "PrintWidth",
    "PrinterConfig",
    "PrinterDriver",
    "PrinterError",
    "PrinterState",
    "PrinterTransport",
    "RecordingTransport",
    "ReplayEvent",
    "ReplayReport",
    "ReplayRunner",
    "SerialTransport",
    "TimingModel",
    "TransportError",
    "TransportUnavailable",
    "Underline",
]
