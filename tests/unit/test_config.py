import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "printer_protocol"))

from thermalprint_core.config import AppConfig, load_config, printer_config, save_config


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "missing.json"
            cfg = load_config(path)
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.printer.firmware_version, 268)
            self.assertEqual(cfg.printer.heat_time, 120)
            self.assertEqual(cfg.layout.lines_after, 3)

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.device.port = "/dev/cu.usbserial"
            cfg.printer.print_density = 10
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.device.port, "/dev/cu.usbserial")
            self.assertEqual(reloaded.printer.print_density, 10)

    def test_migrate_v1_shape(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            old = {"printer": {"port": "/dev/ttyAMA0", "default_heat_time": 80, "firmware_version": 260}}
            path.write_text(json.dumps(old), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.config_version, 2)
            self.assertEqual(cfg.device.port, "/dev/ttyAMA0")
            self.assertEqual(cfg.printer.heat_time, 80)
            self.assertEqual(cfg.printer.firmware_version, 260)

    def test_normalize_out_of_range(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": 2,
                "printer": {"heat_time": 999, "print_density": 0},
                "layout": {"lines_before": -4, "justify": "diagonal"},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.printer.heat_time, 255)
            self.assertEqual(cfg.printer.print_density, 1)
            self.assertEqual(cfg.layout.lines_before, 0)
            self.assertEqual(cfg.layout.justify, "left")

    def test_corrupt_file_falls_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_malformed_values_fall_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": 2,
                "device": {"port": None},
                "printer": {"heat_time": "abc", "print_density": [3], "firmware_version": "new"},
                "layout": None,
                "diagnostics": {"keep_log_files": "many"},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.device.port, "/dev/ttyUSB0")
            self.assertEqual(cfg.printer.heat_time, 120)
            self.assertEqual(cfg.printer.print_density, 1)
            self.assertEqual(cfg.printer.firmware_version, 268)
            self.assertEqual(cfg.layout.lines_after, 3)
            self.assertEqual(cfg.diagnostics.keep_log_files, 7)

    def test_null_sections_and_non_object_root(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text(json.dumps({"printer": None, "device": "usb"}), encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())
            path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_printer_config_bridge(self):
        cfg = AppConfig()
        cfg.printer.firmware_version = 264
        pc = printer_config(cfg, port="/dev/ttyS1")
        self.assertEqual(pc.port, "/dev/ttyS1")
        self.assertEqual(pc.baud_rate, 9600)
        self.assertEqual(pc.firmware_version, 264)
        self.assertEqual(printer_config(cfg).port, cfg.device.port)


if __name__ == "__main__":
    unittest.main()
