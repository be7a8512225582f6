import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "printer_protocol"))

from thermalprint_printer import commands


class CommandEncoderTests(unittest.TestCase):
    def test_fixed_frames(self):
        self.assertEqual(commands.initialize(), bytes([27, 64]))
        self.assertEqual(commands.online(), bytes([27, 61, 1]))
        self.assertEqual(commands.offline(), bytes([27, 61, 0]))
        self.assertEqual(commands.flush(), bytes([12]))

    def test_heat_time_vector(self):
        self.assertEqual(commands.set_heat_time(120), bytes([27, 55, 11, 120, 40]))

    def test_density_packs_break_time(self):
        self.assertEqual(commands.set_print_density(1), bytes([18, 35, 65]))
        self.assertEqual(commands.set_print_density(10), bytes([18, 35, (2 << 5) | 10]))

    def test_line_height_clamps_to_24(self):
        self.assertEqual(commands.set_line_height(30), bytes([27, 51, 6]))
        self.assertEqual(commands.set_line_height(10), commands.set_line_height(24))
        self.assertEqual(commands.set_line_height(24), bytes([27, 51, 0]))

    def test_parameterised_frames(self):
        self.assertEqual(commands.set_print_mode(0x18), bytes([27, 33, 0x18]))
        self.assertEqual(commands.feed(6), bytes([27, 100, 6]))
        self.assertEqual(commands.feed_rows(10), bytes([27, 74, 10]))
        self.assertEqual(commands.justify(1), bytes([27, 97, 1]))
        self.assertEqual(commands.underline(2), bytes([27, 45, 2]))
        self.assertEqual(commands.invert_colors(True), bytes([29, 66, 1]))
        self.assertEqual(commands.invert_colors(False), bytes([29, 66, 0]))
        self.assertEqual(commands.set_size(0x11), bytes([29, 33, 0x11]))
        self.assertEqual(commands.set_width(17), bytes([27, 33, 17]))
        self.assertEqual(commands.bitmap_start(255, 48), bytes([18, 42, 255, 48]))

    def test_tab_stops_every_four_columns(self):
        self.assertEqual(
            b"".join(commands.TAB_STOP_FRAMES),
            bytes([27, 68, 4, 8, 12, 16, 20, 24, 28, 0]),
        )


if __name__ == "__main__":
    unittest.main()
