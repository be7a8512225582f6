"""Open-loop pacing model for a printer without a ready signal.

After bytes are issued the model stores a resume-not-before deadline
estimated from the print head's dot print and feed times. The host waits
that deadline out before sending more, instead of overrunning the printer's
small receive buffer.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from .models import BAUD_RATE, DotTimes, check_density


DEFAULT_DOT_TIMES = DotTimes(print_s=0.03, feed_s=0.0021)

# Every density level measured so far paces identically.
DENSITY_DOT_TIMES: dict[int, DotTimes] = {level: DEFAULT_DOT_TIMES for level in range(1, 32)}

# Start, 8 data and stop bits plus one idle bit.
BITS_PER_BYTE = 11


def dot_times_for_density(density: int) -> DotTimes:
    return DENSITY_DOT_TIMES[check_density(density)]


class TimingModel:
    def __init__(
        self,
        baud_rate: int = BAUD_RATE,
        density: int = 1,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        poll_s: float = 0.01,
    ) -> None:
        self.byte_time = BITS_PER_BYTE / float(baud_rate)
        self.dot_print_time = 0.0
        self.dot_feed_time = 0.0
        self.resume_time = 0.0
        self._clock = clock
        self._sleep = sleep
        self._poll_s = poll_s
        self.apply_density(density)

    def apply_density(self, density: int) -> DotTimes:
        times = dot_times_for_density(density)
        self.dot_print_time = times.print_s
        self.dot_feed_time = times.feed_s
        return times

    def set_dot_times(self, print_us: float, feed_us: float) -> None:
        """Override the density lookup with calibrated times in microseconds."""
        if print_us < 0 or feed_us < 0:
            raise ValueError("Dot times must be non-negative")
        self.dot_print_time = print_us / 1_000_000.0
        self.dot_feed_time = feed_us / 1_000_000.0

    # -------- Durations --------
    def text_char_timeout(self, char_height: int, line_spacing: int) -> float:
        return self.byte_time + char_height * self.dot_print_time + line_spacing * self.dot_feed_time

    def line_end_timeout(self, char_height: int, line_spacing: int) -> float:
        return (char_height + line_spacing) * self.dot_feed_time

    def line_feed_timeout(self, char_height: int) -> float:
        return self.dot_feed_time * char_height

    def row_feed_timeout(self, rows: int) -> float:
        return rows * self.dot_feed_time

    def chunk_timeout(self, chunk_height: int) -> float:
        return chunk_height * self.dot_feed_time

    # -------- Deadline --------
    def set_timeout(self, seconds: float) -> float:
        self.resume_time = self._clock() + seconds
        return self.resume_time

    def remaining(self) -> float:
        return max(0.0, self.resume_time - self._clock())

    def is_ready(self) -> bool:
        return self._clock() >= self.resume_time

    def wait(self, cancel: threading.Event | None = None) -> bool:
        """Sleep until the deadline; return False if ``cancel`` fired first."""
        while True:
            if cancel is not None and cancel.is_set():
                return False
            left = self.resume_time - self._clock()
            if left <= 0:
                return True
            self._sleep(min(left, self._poll_s))
