"""Byte-sink transports for the printer link."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import serial

from .errors import TransportError, TransportUnavailable
from .models import BAUD_RATE


logger = logging.getLogger("thermalprint.transport")


@dataclass
class SerialConfig:
    port: str
    baud: int = BAUD_RATE
    timeout_ms: int = 500
    rtscts: bool = False


class PrinterTransport:
    """Scoped byte sink: open, send, close around every driver operation."""

    @property
    def is_open(self) -> bool:
        raise NotImplementedError

    def open(self) -> None:
        raise NotImplementedError

    def send(self, payload: bytes) -> int:
        raise NotImplementedError

    def close(self) -> None:
        raise NotImplementedError

    @contextmanager
    def session(self) -> Iterator["PrinterTransport"]:
        self.open()
        try:
            yield self
        finally:
            self.close()


class SerialTransport(PrinterTransport):
    """Thin wrapper over pyserial with the printer's fixed 9600 8N1 settings."""

    def __init__(self, port: str, baud: int = BAUD_RATE, timeout_ms: int = 500, probe: bool = True) -> None:
        self._serial: Any | None = None
        self.config = SerialConfig(port=port, baud=baud, timeout_ms=timeout_ms)
        if probe:
            try:
                self.open()
            except TransportError as exc:
                raise TransportUnavailable(f"Port {port} not available: {exc}") from exc
            self.close()

    @property
    def is_open(self) -> bool:
        return bool(self._serial and self._serial.is_open)

    def open(self) -> None:
        if self.is_open:
            return
        cfg = self.config
        try:
            self._serial = serial.Serial(
                port=cfg.port,
                baudrate=cfg.baud,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=max(cfg.timeout_ms, 1) / 1000,
                write_timeout=max(cfg.timeout_ms, 1) / 1000,
                rtscts=cfg.rtscts,
            )
        except (serial.SerialException, OSError) as exc:
            self._serial = None
            raise TransportError(f"open {cfg.port} failed: {exc}") from exc

    def close(self) -> None:
        if self._serial is None:
            return
        try:
            self._serial.close()
        except (serial.SerialException, OSError) as exc:
            raise TransportError(f"close {self.config.port} failed: {exc}") from exc
        finally:
            self._serial = None

    def send(self, payload: bytes) -> int:
        if not self.is_open:
            raise TransportError("Serial port is not open")
        try:
            written = int(self._serial.write(payload))
            self._serial.flush()
        except (serial.SerialException, OSError) as exc:
            raise TransportError(f"write to {self.config.port} failed: {exc}") from exc
        return written


class RecordingTransport(PrinterTransport):
    """In-memory sink used for dry runs and tests."""

    def __init__(self) -> None:
        self.frames: list[bytes] = []
        self.sessions = 0
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def data(self) -> bytes:
        return b"".join(self.frames)

    def open(self) -> None:
        if not self._open:
            self._open = True
            self.sessions += 1

    def close(self) -> None:
        self._open = False

    def send(self, payload: bytes) -> int:
        if not self._open:
            raise TransportError("Recording transport is not open")
        self.frames.append(bytes(payload))
        return len(payload)

    def clear(self) -> None:
        self.frames.clear()
        self.sessions = 0

    def transcript_lines(self) -> list[str]:
        return [json.dumps({"dir": "host_to_device", "payload_hex": frame.hex().upper()}) for frame in self.frames]

    def write_transcript(self, path: Path) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(self.transcript_lines()) + "\n", encoding="utf-8")
        logger.info("transcript written", extra={"event": "transcript_written", "frames": len(self.frames)})
        return path
