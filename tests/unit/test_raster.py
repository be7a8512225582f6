import sys
import tempfile
import unittest
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "imaging"))
sys.path.insert(0, str(ROOT / "packages" / "printer_protocol"))

from thermalprint_imaging.raster import MAX_WIDTH, build_test_pattern, image_to_bitmap, load_bitmap


class RasterTests(unittest.TestCase):
    def test_black_pixels_become_set_bits(self):
        img = Image.new("1", (10, 2), 255)
        img.putpixel((0, 0), 0)
        img.putpixel((9, 1), 0)
        spec = image_to_bitmap(img)
        self.assertEqual((spec.width, spec.height), (10, 2))
        self.assertEqual(spec.row_bytes, 2)
        self.assertEqual(spec.data, bytes([0x80, 0x00, 0x00, 0x40]))

    def test_greyscale_is_thresholded(self):
        img = Image.new("L", (8, 1), 200)
        img.putpixel((3, 0), 10)
        spec = image_to_bitmap(img, line_at_a_time=True)
        self.assertEqual(spec.data, bytes([0x10]))
        self.assertTrue(spec.line_at_a_time)

    def test_wide_image_is_cropped(self):
        img = Image.new("1", (500, 3), 0)
        spec = image_to_bitmap(img)
        self.assertEqual(spec.width, MAX_WIDTH)
        self.assertEqual(spec.row_bytes_clipped, 48)
        self.assertEqual(len(spec.data), 48 * 3)

    def test_patterns(self):
        black = image_to_bitmap(build_test_pattern("black", width=16, height=2))
        self.assertEqual(black.data, b"\xff" * 4)
        white = image_to_bitmap(build_test_pattern("white", width=16, height=2))
        self.assertEqual(white.data, b"\x00" * 4)
        checker = image_to_bitmap(build_test_pattern("checkerboard", width=16, height=1))
        self.assertEqual(checker.data, bytes([0xFF, 0x00]))
        with self.assertRaises(ValueError):
            build_test_pattern("plaid")

    def test_load_bitmap_from_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "logo.png"
            build_test_pattern("border", width=24, height=8).save(path)
            spec = load_bitmap(path)
        self.assertEqual((spec.width, spec.height), (24, 8))
        self.assertEqual(spec.data[:3], b"\xff\xff\xff")


if __name__ == "__main__":
    unittest.main()
