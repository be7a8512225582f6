"""Persistent printer settings schema and load/save helpers."""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from thermalprint_printer.models import (
    BAUD_RATE,
    MAX_DENSITY,
    MAX_HEAT_TIME,
    MIN_DENSITY,
    MIN_HEAT_TIME,
    PrinterConfig,
)


CONFIG_VERSION = 2

logger = logging.getLogger("thermalprint.config")


@dataclass
class DeviceConfig:
    port: str = "/dev/ttyUSB0"


@dataclass
class PrinterSettings:
    firmware_version: int = 268
    heat_time: int = 120
    print_density: int = 1
    pace: bool = True


@dataclass
class LayoutConfig:
    lines_before: int = 0
    lines_after: int = 3
    justify: str = "left"


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    device: DeviceConfig = field(default_factory=DeviceConfig)
    printer: PrinterSettings = field(default_factory=PrinterSettings)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "ThermalPrint"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "ThermalPrint"
    return Path.home() / ".config" / "thermalprint"


def config_path() -> Path:
    return config_root() / "config.json"


def _section(raw: Any) -> dict[str, Any]:
    return raw if isinstance(raw, dict) else {}


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    for k, v in _section(raw).items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_device(cfg: AppConfig) -> None:
    if not isinstance(cfg.device.port, str) or not cfg.device.port:
        cfg.device.port = DeviceConfig().port


def _normalize_printer(cfg: AppConfig) -> None:
    defaults = PrinterSettings()
    heat_time = _as_int(cfg.printer.heat_time, defaults.heat_time)
    density = _as_int(cfg.printer.print_density, defaults.print_density)
    cfg.printer.heat_time = max(MIN_HEAT_TIME, min(MAX_HEAT_TIME, heat_time))
    cfg.printer.print_density = max(MIN_DENSITY, min(MAX_DENSITY, density))
    cfg.printer.firmware_version = _as_int(cfg.printer.firmware_version, defaults.firmware_version)
    cfg.printer.pace = bool(cfg.printer.pace)


def _normalize_layout(cfg: AppConfig) -> None:
    defaults = LayoutConfig()
    cfg.layout.lines_before = max(0, _as_int(cfg.layout.lines_before, defaults.lines_before))
    cfg.layout.lines_after = max(0, _as_int(cfg.layout.lines_after, defaults.lines_after))
    if cfg.layout.justify not in ("left", "center", "right"):
        cfg.layout.justify = "left"


def _normalize_diagnostics(cfg: AppConfig) -> None:
    keep = _as_int(cfg.diagnostics.keep_log_files, DiagnosticsConfig().keep_log_files)
    cfg.diagnostics.keep_log_files = max(1, keep)


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = _as_int(raw.get("config_version", 1), 1)
    data = dict(raw)

    if version < 2:
        # v1 kept everything flat under "printer", port included.
        printer = dict(_section(data.get("printer")))
        device = dict(_section(data.get("device")))
        if "port" in printer:
            device.setdefault("port", printer.pop("port"))
        if "default_heat_time" in printer:
            printer.setdefault("heat_time", printer.pop("default_heat_time"))
        data["printer"] = printer
        data["device"] = device
        data.setdefault("layout", {})
        data.setdefault("diagnostics", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.warning(f"unreadable config {path}: {exc}", extra={"event": "config_unreadable"})
        return AppConfig()
    if not isinstance(raw, dict):
        logger.warning(f"ignoring config {path}: not a JSON object", extra={"event": "config_unreadable"})
        return AppConfig()

    data = _migrate(raw)
    cfg = AppConfig(
        config_version=_as_int(data.get("config_version"), CONFIG_VERSION),
        device=_merge(DeviceConfig, data.get("device")),
        printer=_merge(PrinterSettings, data.get("printer")),
        layout=_merge(LayoutConfig, data.get("layout")),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics")),
    )

    _normalize_device(cfg)
    _normalize_printer(cfg)
    _normalize_layout(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


def printer_config(cfg: AppConfig, port: str | None = None) -> PrinterConfig:
    return PrinterConfig(
        port=port or cfg.device.port,
        baud_rate=BAUD_RATE,
        default_heat_time=cfg.printer.heat_time,
        firmware_version=cfg.printer.firmware_version,
        print_density=cfg.printer.print_density,
        pace=cfg.printer.pace,
    )
