"""Typed failures raised by the printer driver and its transports."""

from __future__ import annotations


class PrinterError(Exception):
    """Base class for every driver-level failure."""


class TransportUnavailable(PrinterError):
    """The device path could not be opened when the transport was created."""


class TransportError(PrinterError):
    """Open, send or close failed during an operation."""


class InvalidBitmap(PrinterError, ValueError):
    """Non-positive bitmap dimensions or truncated pixel data."""


class UnsupportedParameter(PrinterError, ValueError):
    """A value falls outside the range the printer accepts."""


class PrintCancelled(PrinterError):
    """A pacing wait was aborted before the next send."""
