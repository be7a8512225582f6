"""8-bit print mode register for the ESC ! command."""

from __future__ import annotations

from enum import IntFlag


class PrintMode(IntFlag):
    INVERSE = 1 << 1
    UPSIDE_DOWN = 1 << 2
    BOLD = 1 << 3
    DOUBLE_HEIGHT = 1 << 4
    DOUBLE_WIDTH = 1 << 5
    STRIKETHROUGH = 1 << 6


MODE_FLAGS: tuple[PrintMode, ...] = (
    PrintMode.INVERSE,
    PrintMode.UPSIDE_DOWN,
    PrintMode.BOLD,
    PrintMode.DOUBLE_HEIGHT,
    PrintMode.DOUBLE_WIDTH,
    PrintMode.STRIKETHROUGH,
)


class PrintModeRegister:
    """Flag register; each mode owns exactly one bit.

    The register only tracks bits. Emitting the command and the geometry
    side effects of double height/width belong to ``PrinterDriver.set_mode``.
    """

    def __init__(self, value: int = 0) -> None:
        self._value = value & 0xFF

    @property
    def value(self) -> int:
        return self._value

    def set(self, flag: PrintMode) -> int:
        self._value = (self._value | int(flag)) & 0xFF
        return self._value

    def clear(self, flag: PrintMode) -> int:
        self._value = self._value & ~int(flag) & 0xFF
        return self._value

    def toggle(self, flag: PrintMode, on: bool) -> int:
        return self.set(flag) if on else self.clear(flag)

    def is_set(self, flag: PrintMode) -> bool:
        return bool(self._value & int(flag))

    def reset(self) -> None:
        self._value = 0

    def __repr__(self) -> str:
        return f"PrintModeRegister(0x{self._value:02X})"
