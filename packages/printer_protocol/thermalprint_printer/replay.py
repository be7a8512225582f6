"""Replay/analysis utilities for captured printer transcripts."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from .commands import Ascii


_HEX_CLEAN = re.compile(r"[^0-9a-fA-F]")

# (prefix, opcode) -> (name, total frame length)
_FIXED_COMMANDS: dict[tuple[int, int], tuple[str, int]] = {
    (Ascii.ESC, 64): ("INITIALIZE", 2),
    (Ascii.ESC, 55): ("SET_HEAT_TIME", 5),
    (Ascii.ESC, 33): ("SET_PRINT_MODE", 3),
    (Ascii.ESC, 51): ("SET_LINE_HEIGHT", 3),
    (Ascii.ESC, 100): ("FEED", 3),
    (Ascii.ESC, 74): ("FEED_ROWS", 3),
    (Ascii.ESC, 97): ("JUSTIFY", 3),
    (Ascii.ESC, 45): ("UNDERLINE", 3),
    (Ascii.ESC, 61): ("SET_ONLINE", 3),
    (Ascii.GS, 66): ("INVERT_COLORS", 3),
    (Ascii.GS, 33): ("SET_SIZE", 3),
    (Ascii.DC2, 35): ("SET_PRINT_DENSITY", 3),
}


@dataclass(frozen=True)
class ReplayEvent:
    line: int
    direction: str
    payload: bytes


@dataclass
class ReplayReport:
    total_events: int = 0
    host_to_device_events: int = 0
    device_to_host_events: int = 0
    raw_bytes_total: int = 0
    text_bytes: int = 0
    newline_count: int = 0
    bitmap_chunks: int = 0
    bitmap_rows: int = 0
    command_counts: dict[str, int] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def count(self, name: str) -> None:
        self.command_counts[name] = self.command_counts.get(name, 0) + 1


class ReplayRunner:
    @staticmethod
    def _decode_hex(value: str) -> bytes:
        cleaned = _HEX_CLEAN.sub("", value)
        if len(cleaned) % 2 == 1:
            cleaned = cleaned[:-1]
        if not cleaned:
            return b""
        return bytes.fromhex(cleaned)

    def _parse_line(self, line_no: int, line: str) -> ReplayEvent | None:
        stripped = line.strip()
        if not stripped:
            return None
        obj = json.loads(stripped)
        direction = obj.get("dir") or obj.get("direction") or "unknown"
        hex_value = obj.get("payload_hex") or obj.get("hex") or ""
        return ReplayEvent(line=line_no, direction=direction, payload=self._decode_hex(str(hex_value)))

    def parse(self, transcript_path: Path) -> list[ReplayEvent]:
        events: list[ReplayEvent] = []
        for idx, line in enumerate(transcript_path.read_text(encoding="utf-8").splitlines(), start=1):
            event = self._parse_line(idx, line)
            if event is not None:
                events.append(event)
        return events

    def run(self, transcript_path: Path, strict: bool = True) -> ReplayReport:
        events = self.parse(transcript_path)
        report = ReplayReport(total_events=len(events))

        stream = bytearray()
        for event in events:
            report.raw_bytes_total += len(event.payload)
            if event.direction == "host_to_device":
                report.host_to_device_events += 1
                stream.extend(event.payload)
            elif event.direction == "device_to_host":
                report.device_to_host_events += 1

        self.decode(bytes(stream), report)

        if strict and report.command_counts.get("INITIALIZE", 0) < 1:
            report.errors.append("missing_initialize")
        return report

    def decode(self, stream: bytes, report: ReplayReport) -> ReplayReport:
        i = 0
        n = len(stream)
        while i < n:
            byte = stream[i]
            if byte == Ascii.FF:
                report.count("FLUSH")
                i += 1
                continue

            if byte in (Ascii.ESC, Ascii.GS, Ascii.DC2) and i + 1 < n:
                op = stream[i + 1]
                if byte == Ascii.ESC and op == 68:
                    # Tab stop list runs until its 0 terminator.
                    end = stream.find(b"\x00", i + 2)
                    report.count("SET_TAB_STOPS")
                    i = n if end < 0 else end + 1
                    continue
                if byte == Ascii.DC2 and op == 42:
                    i = self._decode_bitmap(stream, i, report)
                    continue
                known = _FIXED_COMMANDS.get((byte, op))
                if known is not None:
                    name, length = known
                    if name == "SET_ONLINE" and i + 2 < n and stream[i + 2] == 0:
                        name = "SET_OFFLINE"
                    report.count(name)
                    i += length
                    continue

            report.text_bytes += 1
            if byte == 0x0A:
                report.newline_count += 1
            i += 1
        return report

    @staticmethod
    def _decode_bitmap(stream: bytes, start: int, report: ReplayReport) -> int:
        if start + 4 > len(stream):
            report.errors.append("truncated_bitmap")
            return len(stream)
        height = stream[start + 2]
        row_bytes = stream[start + 3]
        end = start + 4 + height * row_bytes
        report.count("BITMAP")
        report.bitmap_chunks += 1
        report.bitmap_rows += height
        if end > len(stream):
            report.errors.append("truncated_bitmap")
            return len(stream)
        return end
