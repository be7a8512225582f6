import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "printer_protocol"))

from thermalprint_printer.replay import ReplayReport, ReplayRunner


class ReplayTests(unittest.TestCase):
    def test_replay_report_detects_core_commands(self):
        runner = ReplayRunner()
        transcript = ROOT / "tests" / "transcripts" / "session_basic.jsonl"
        report = runner.run(transcript, strict=True)

        self.assertEqual(report.total_events, 12)
        self.assertEqual(report.host_to_device_events, 11)
        self.assertEqual(report.device_to_host_events, 1)
        self.assertEqual(report.command_counts["INITIALIZE"], 1)
        self.assertEqual(report.command_counts["SET_TAB_STOPS"], 1)
        self.assertEqual(report.command_counts["SET_HEAT_TIME"], 1)
        self.assertEqual(report.command_counts["SET_PRINT_DENSITY"], 1)
        self.assertEqual(report.command_counts["SET_ONLINE"], 1)
        self.assertEqual(report.command_counts["FEED"], 1)
        self.assertEqual(report.command_counts["FLUSH"], 1)
        self.assertEqual(report.bitmap_chunks, 1)
        self.assertEqual(report.bitmap_rows, 2)
        self.assertEqual(report.text_bytes, 3)
        self.assertEqual(report.newline_count, 1)
        self.assertEqual(report.errors, [])

    def test_strict_flags_missing_initialize_and_truncation(self):
        runner = ReplayRunner()
        transcript = ROOT / "tests" / "transcripts" / "text_only.jsonl"
        report = runner.run(transcript, strict=True)
        self.assertIn("missing_initialize", report.errors)
        self.assertIn("truncated_bitmap", report.errors)

        lenient = runner.run(transcript, strict=False)
        self.assertEqual(lenient.errors, ["truncated_bitmap"])

    def test_decode_offline(self):
        report = ReplayRunner().decode(bytes([27, 61, 0]), ReplayReport())
        self.assertEqual(report.command_counts, {"SET_OFFLINE": 1})


if __name__ == "__main__":
    unittest.main()
