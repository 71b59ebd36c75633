"""Tests for utility functions."""

import os
import shutil
import tempfile
import unittest

import numpy as np
from PIL import Image

from catpoint_security.utils import ensure_directory_exists, load_image


class TestUtils(unittest.TestCase):

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_ensure_directory_exists(self):
        path = os.path.join(self.test_dir, "a", "b")
        ensure_directory_exists(path)
        ensure_directory_exists(path)
        ensure_directory_exists("")
        self.assertTrue(os.path.isdir(path))

    def test_array_passes_through(self):
        frame = np.zeros((4, 4, 3), dtype=np.uint8)
        self.assertIs(load_image(frame), frame)

    def test_rgba_image_converted_to_rgb(self):
        image = Image.new("RGBA", (8, 6), (10, 20, 30, 255))
        array = load_image(image)

        self.assertEqual(array.shape, (6, 8, 3))
        self.assertEqual(array.dtype, np.uint8)
        self.assertEqual(tuple(array[0, 0]), (10, 20, 30))

    def test_grayscale_image_stays_2d(self):
        array = load_image(Image.new("L", (5, 5), 128))
        self.assertEqual(array.shape, (5, 5))

    def test_load_from_path(self):
        path = os.path.join(self.test_dir, "frame.png")
        Image.new("RGB", (10, 10), (255, 0, 0)).save(path)

        array = load_image(path)

        self.assertEqual(array.shape, (10, 10, 3))
        self.assertEqual(tuple(array[5, 5]), (255, 0, 0))

    def test_missing_path(self):
        with self.assertRaises(FileNotFoundError):
            load_image(os.path.join(self.test_dir, "missing.jpg"))

    def test_unsupported_type(self):
        with self.assertRaises(TypeError):
            load_image(b"raw bytes")


if __name__ == '__main__':
    unittest.main()
