"""Stateful driver for serial thermal receipt printers."""

from __future__ import annotations

import logging
import threading
import time
from enum import IntEnum
from typing import Callable, TypeVar

from . import commands
from .bitmap import BitmapChunker
from .errors import PrintCancelled, UnsupportedParameter
from .models import (
    DOUBLE_CHAR_HEIGHT,
    DOUBLE_MAX_COLUMN,
    NEWLINE,
    NORMAL_CHAR_HEIGHT,
    NORMAL_MAX_COLUMN,
    BitmapSpec,
    CharSize,
    FirmwareCapabilities,
    Justification,
    PrinterConfig,
    PrinterState,
    PrintWidth,
    Underline,
    check_byte,
    check_density,
    check_heat_time,
)
from .print_mode import MODE_FLAGS, PrintMode
from .timing import TimingModel
from .transport import PrinterTransport


logger = logging.getLogger("thermalprint.printer")

_E = TypeVar("_E", bound=IntEnum)

TAB_WIDTH = 4


def _coerce(enum_type: type[_E], value: int) -> _E:
    try:
        return enum_type(value)
    except ValueError as exc:
        raise UnsupportedParameter(f"{value!r} is not a valid {enum_type.__name__}") from exc


class PrinterDriver:
    """Encodes printer operations, sends them, and paces the link.

    The printer never reports readiness, so every operation that makes the
    head print or feed stores an estimated resume time. With ``config.pace``
    enabled each send first waits that deadline out.
    """

    def __init__(
        self,
        transport: PrinterTransport,
        config: PrinterConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.transport = transport
        self.config = config or PrinterConfig()
        self.capabilities = FirmwareCapabilities.for_version(self.config.firmware_version)
        self.state = PrinterState()
        self.timing = TimingModel(
            baud_rate=self.config.baud_rate,
            density=self.config.print_density,
            clock=clock,
            sleep=sleep,
        )
        self._cancel = threading.Event()

        caps = self.capabilities
        self._feed_lines = self._feed_native if caps.native_feed else self._feed_emulated
        self._invert = self._invert_native if caps.native_invert else self._invert_with_mode
        self._tab_stop_frames = commands.TAB_STOP_FRAMES if caps.tab_stops else ()

    # -------- Link --------
    def _send(self, *frames: bytes) -> int:
        if self.config.pace and not self.wait_until_ready():
            raise PrintCancelled("wait cancelled before send")
        sent = 0
        with self.transport.session() as link:
            for frame in frames:
                sent += link.send(frame)
                logger.debug("frame sent", extra={"event": "frame_sent", "hex": frame[:16].hex()})
        return sent

    def wait_until_ready(self) -> bool:
        """Block until the resume deadline; False when cancelled first."""
        return self.timing.wait(self._cancel)

    def cancel(self) -> None:
        self._cancel.set()

    def clear_cancel(self) -> None:
        self._cancel.clear()

    @property
    def print_mode(self) -> int:
        return self.state.print_mode.value

    # -------- Setup --------
    def begin(self) -> None:
        self.set_heat_time()
        self.set_print_density(self.config.print_density)

    def initialize(self) -> None:
        self._send(commands.initialize(), *self._tab_stop_frames)
        self.state = PrinterState()
        logger.info(
            "printer initialized",
            extra={"event": "printer_initialized", "firmware": self.capabilities.version},
        )

    def reset_to_defaults(self) -> None:
        self.go_online()
        self.justify(Justification.LEFT)
        self.invert_colors(False)
        self.set_double_height(False)
        self.set_line_height(30)
        self.set_bold(False)
        self.underline(Underline.NONE)

    def set_heat_time(self, heat_time: int | None = None) -> None:
        value = check_heat_time(self.config.default_heat_time if heat_time is None else heat_time)
        self._send(commands.set_heat_time(value))

    def set_print_density(self, density: int) -> None:
        check_density(density)
        self._send(commands.set_print_density(density))
        times = self.timing.apply_density(density)
        logger.info(
            "print density set",
            extra={"event": "density_set", "density": density, "dot_print_s": times.print_s, "dot_feed_s": times.feed_s},
        )

    def set_dot_times(self, print_us: float, feed_us: float) -> None:
        self.timing.set_dot_times(print_us, feed_us)

    # -------- Print modes --------
    def set_mode(self, flag: PrintMode, on: bool) -> None:
        if flag not in MODE_FLAGS:
            raise UnsupportedParameter(f"{flag!r} is not a single print mode flag")
        flag = PrintMode(flag)
        self.state.print_mode.toggle(flag, on)
        if flag == PrintMode.DOUBLE_HEIGHT:
            self.state.char_height = DOUBLE_CHAR_HEIGHT if on else NORMAL_CHAR_HEIGHT
        elif flag == PrintMode.DOUBLE_WIDTH:
            self.state.max_column = DOUBLE_MAX_COLUMN if on else NORMAL_MAX_COLUMN
        self._send(commands.set_print_mode(self.print_mode))

    def set_inverse(self, on: bool) -> None:
        self.set_mode(PrintMode.INVERSE, on)

    def set_upside_down(self, on: bool) -> None:
        self.set_mode(PrintMode.UPSIDE_DOWN, on)

    def set_bold(self, on: bool) -> None:
        self.set_mode(PrintMode.BOLD, on)

    def set_double_height(self, on: bool) -> None:
        self.set_mode(PrintMode.DOUBLE_HEIGHT, on)

    def set_double_width(self, on: bool) -> None:
        self.set_mode(PrintMode.DOUBLE_WIDTH, on)

    def set_strikethrough(self, on: bool) -> None:
        self.set_mode(PrintMode.STRIKETHROUGH, on)

    def set_normal(self) -> None:
        self.state.print_mode.reset()
        self.state.char_height = NORMAL_CHAR_HEIGHT
        self.state.max_column = NORMAL_MAX_COLUMN
        self._send(commands.set_print_mode(self.print_mode))

    def invert_colors(self, on: bool) -> None:
        self._invert(on)

    def _invert_native(self, on: bool) -> None:
        self._send(commands.invert_colors(on))

    def _invert_with_mode(self, on: bool) -> None:
        self.set_mode(PrintMode.INVERSE, on)

    # -------- Layout --------
    def set_width(self, width: PrintWidth) -> None:
        self._send(commands.set_width(_coerce(PrintWidth, width)))

    def set_size(self, size: CharSize) -> None:
        size = _coerce(CharSize, size)
        self.state.char_height = NORMAL_CHAR_HEIGHT if size == CharSize.NORMAL else DOUBLE_CHAR_HEIGHT
        self.state.max_column = NORMAL_MAX_COLUMN
        self._send(commands.set_size(size))

    def set_line_height(self, height: int = 30) -> None:
        spacing = check_byte("Line spacing", max(height, 24) - 24)
        self.state.line_spacing = spacing
        self._send(commands.set_line_height(height))

    def justify(self, justification: Justification) -> None:
        self._send(commands.justify(_coerce(Justification, justification)))

    def underline(self, size: Underline) -> None:
        self._send(commands.underline(_coerce(Underline, size)))

    def go_online(self) -> None:
        self._send(commands.online())

    def go_offline(self) -> None:
        self._send(commands.offline())

    def flush(self) -> None:
        self._send(commands.flush())

    # -------- Paper movement --------
    def feed(self, lines: int = 1) -> None:
        if lines < 0:
            raise UnsupportedParameter(f"Line count must be non-negative, got {lines}")
        self._feed_lines(lines)

    def _feed_native(self, lines: int) -> None:
        # Firmware feeds by the configured line spacing; the count is not sent.
        self._send(commands.feed(check_byte("Line spacing", self.state.line_spacing)))
        self.timing.set_timeout(self.timing.line_feed_timeout(self.state.char_height))
        self.state.previous_byte = NEWLINE
        self.state.column = 0

    def _feed_emulated(self, lines: int) -> None:
        if lines:
            self.write_text("\n" * lines)

    def feed_rows(self, rows: int) -> None:
        check_byte("Row count", rows)
        self._send(commands.feed_rows(rows))
        self.timing.set_timeout(self.timing.row_feed_timeout(rows))
        self.state.previous_byte = NEWLINE
        self.state.column = 0

    # -------- Content --------
    def tab(self) -> None:
        self._send(commands.tab())
        self.state.column = (self.state.column + TAB_WIDTH) % self.state.max_column

    def write_text(self, text: str) -> int:
        payload = text.encode("utf-8")
        if not payload:
            return 0
        sent = self._send(payload)
        self.timing.set_timeout(self._advance_text(text))
        return sent

    def _advance_text(self, text: str) -> float:
        state = self.state
        timing = self.timing
        total = 0.0
        for char in text:
            extra_bytes = len(char.encode("utf-8")) - 1
            total += extra_bytes * timing.byte_time
            if char == "\n" or state.column >= state.max_column:
                total += timing.line_end_timeout(state.char_height, state.line_spacing)
                state.column = 0
                state.previous_byte = NEWLINE
                continue
            total += timing.text_char_timeout(state.char_height, state.line_spacing)
            if char == "\t":
                state.column = (state.column + TAB_WIDTH) % state.max_column
            else:
                state.column += 1
            state.previous_byte = ord(char)
        return total

    def print_bitmap(self, spec: BitmapSpec) -> int:
        chunker = BitmapChunker(spec)
        sent = 0
        for chunk in chunker:
            sent += self._send(chunker.frame(chunk))
            self.timing.set_timeout(self.timing.chunk_timeout(chunk.height))
        self.state.previous_byte = NEWLINE
        self.state.column = 0
        logger.info(
            "bitmap printed",
            extra={"event": "bitmap_printed", "width": spec.width, "height": spec.height, "chunks": len(chunker)},
        )
        return sent
