"""CLI entrypoints for printing text, images and test patterns, plus transcript replay."""

from __future__ import annotations

import argparse
import json
from dataclasses import asdict, replace
from pathlib import Path

from thermalprint_core import AppConfig, load_config, printer_config
from thermalprint_core.logging_setup import configure_logging, get_logger
from thermalprint_imaging import PATTERNS, build_test_pattern, image_to_bitmap, load_bitmap
from thermalprint_printer import (
    CharSize,
    Justification,
    PrinterDriver,
    PrinterError,
    RecordingTransport,
    ReplayRunner,
    SerialTransport,
)


JUSTIFY_CHOICES = {"left": Justification.LEFT, "center": Justification.CENTER, "right": Justification.RIGHT}
SIZE_CHOICES = {"normal": CharSize.NORMAL, "medium": CharSize.MEDIUM, "large": CharSize.LARGE}


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _open_driver(args: argparse.Namespace, cfg: AppConfig) -> PrinterDriver:
    config = printer_config(cfg, port=args.port)
    if args.dry_run:
        transport = RecordingTransport()
        config = replace(config, pace=False)
    else:
        transport = SerialTransport(config.port, baud=config.baud_rate)

    driver = PrinterDriver(transport, config)
    driver.initialize()
    driver.begin()
    driver.reset_to_defaults()
    return driver


def _finish(driver: PrinterDriver, args: argparse.Namespace, **fields: object) -> int:
    if driver.config.pace:
        driver.wait_until_ready()
    payload: dict[str, object] = {"success": True, "port": driver.config.port, "dry_run": args.dry_run}
    payload.update(fields)

    transport = driver.transport
    if isinstance(transport, RecordingTransport):
        payload["frames"] = len(transport.frames)
        payload["bytes"] = len(transport.data)
        if args.transcript_out:
            payload["transcript"] = str(transport.write_transcript(Path(args.transcript_out)))
    _print_json(payload)
    return 0


def cmd_text(args: argparse.Namespace) -> int:
    cfg = load_config()
    driver = _open_driver(args, cfg)

    lines_before = cfg.layout.lines_before if args.lines_before is None else args.lines_before
    lines_after = cfg.layout.lines_after if args.lines_after is None else args.lines_after
    driver.justify(JUSTIFY_CHOICES[args.justify or cfg.layout.justify])
    driver.set_size(SIZE_CHOICES[args.size])
    if args.bold:
        driver.set_bold(True)

    driver.feed(lines_before)
    sent = driver.write_text(args.text)
    driver.feed(lines_after)
    return _finish(driver, args, text_bytes=sent)


def cmd_image(args: argparse.Namespace) -> int:
    cfg = load_config()
    spec = load_bitmap(Path(args.path), line_at_a_time=args.line_at_a_time)
    driver = _open_driver(args, cfg)
    sent = driver.print_bitmap(spec)
    driver.feed(cfg.layout.lines_after)
    return _finish(driver, args, width=spec.width, height=spec.height, bitmap_bytes=sent)


def cmd_pattern(args: argparse.Namespace) -> int:
    cfg = load_config()
    image = build_test_pattern(args.pattern, height=args.height)
    spec = image_to_bitmap(image, line_at_a_time=args.line_at_a_time)
    driver = _open_driver(args, cfg)
    sent = driver.print_bitmap(spec)
    driver.feed(cfg.layout.lines_after)
    return _finish(driver, args, pattern=args.pattern, height=spec.height, bitmap_bytes=sent)


def cmd_feed(args: argparse.Namespace) -> int:
    cfg = load_config()
    driver = _open_driver(args, cfg)
    if args.rows is not None:
        driver.feed_rows(args.rows)
    else:
        driver.feed(args.lines)
    return _finish(driver, args)


def cmd_reset(args: argparse.Namespace) -> int:
    cfg = load_config()
    driver = _open_driver(args, cfg)
    return _finish(driver, args, firmware_version=driver.capabilities.version)


def cmd_replay(args: argparse.Namespace) -> int:
    runner = ReplayRunner()
    report = runner.run(Path(args.transcript), strict=not args.no_strict)
    payload = asdict(report)
    payload["success"] = len(report.errors) == 0
    _print_json(payload)
    return 0 if not report.errors else 2


def cmd_config(_args: argparse.Namespace) -> int:
    _print_json(asdict(load_config()))
    return 0


def _add_link_options(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--port", default=None, help="Optional explicit serial port override")
    cmd.add_argument("--dry-run", action="store_true", help="Record frames instead of opening the port")
    cmd.add_argument("--transcript-out", default=None, help="With --dry-run, write a JSONL transcript here")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="thermalprint", description="Thermal receipt printer tools")
    sub = parser.add_subparsers(dest="command", required=True)

    text_cmd = sub.add_parser("text", help="Print text")
    text_cmd.add_argument("text")
    text_cmd.add_argument("--lines-before", type=int, default=None)
    text_cmd.add_argument("--lines-after", type=int, default=None)
    text_cmd.add_argument("--justify", choices=sorted(JUSTIFY_CHOICES), default=None)
    text_cmd.add_argument("--size", choices=sorted(SIZE_CHOICES), default="normal")
    text_cmd.add_argument("--bold", action="store_true")
    _add_link_options(text_cmd)
    text_cmd.set_defaults(func=cmd_text)

    image_cmd = sub.add_parser("image", help="Print a monochrome image file")
    image_cmd.add_argument("path")
    image_cmd.add_argument("--line-at-a-time", action="store_true")
    _add_link_options(image_cmd)
    image_cmd.set_defaults(func=cmd_image)

    pat_cmd = sub.add_parser("pattern", help="Print a deterministic test pattern")
    pat_cmd.add_argument("--pattern", default="checkerboard", choices=list(PATTERNS))
    pat_cmd.add_argument("--height", type=int, default=64)
    pat_cmd.add_argument("--line-at-a-time", action="store_true")
    _add_link_options(pat_cmd)
    pat_cmd.set_defaults(func=cmd_pattern)

    feed_cmd = sub.add_parser("feed", help="Advance the paper")
    feed_group = feed_cmd.add_mutually_exclusive_group()
    feed_group.add_argument("--lines", type=int, default=1)
    feed_group.add_argument("--rows", type=int, default=None)
    _add_link_options(feed_cmd)
    feed_cmd.set_defaults(func=cmd_feed)

    reset_cmd = sub.add_parser("reset", help="Initialize the printer and restore default formatting")
    _add_link_options(reset_cmd)
    reset_cmd.set_defaults(func=cmd_reset)

    replay_cmd = sub.add_parser("replay", help="Analyze captured printer transcript")
    replay_cmd.add_argument("--transcript", required=True, help="Path to JSONL transcript")
    replay_cmd.add_argument("--no-strict", action="store_true", help="Skip the mandatory initialize check")
    replay_cmd.set_defaults(func=cmd_replay)

    config_cmd = sub.add_parser("config", help="Print effective settings")
    config_cmd.set_defaults(func=cmd_config)

    return parser


def main(argv: list[str] | None = None) -> int:
    cfg = load_config()
    configure_logging(keep_files=cfg.diagnostics.keep_log_files, console=False)
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except PrinterError as exc:
        get_logger().error(f"{args.command} failed: {exc}", extra={"event": "command_failed"})
        _print_json({"success": False, "error": str(exc), "error_type": type(exc).__name__})
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
