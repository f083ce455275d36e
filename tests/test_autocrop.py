from __future__ import annotations

import io
import json
import tempfile
import unittest
from pathlib import Path

import numpy as np
from PIL import Image

from autocrop.artifacts import serialize_autocrop_result
from autocrop.boundary import detect_artwork_bounds, sobel_magnitude, to_grayscale
from autocrop.contracts import AutoCropConfig
from autocrop.crop import apply_crop, crop_image
from autocrop.module import run_autocrop_on_image_file
from contracts.image import CropBounds


def _framed_square(size: int = 200, lo: int = 50, hi: int = 150) -> Image.Image:
    arr = np.full((size, size, 3), 255, dtype=np.uint8)
    arr[lo:hi, lo:hi, :] = 0
    return Image.fromarray(arr)


class TestBoundaryDetection(unittest.TestCase):
    def test_uniform_image_falls_back_to_full_frame(self) -> None:
        img = Image.new("RGB", (120, 80), (200, 30, 30))
        b = detect_artwork_bounds(img)
        self.assertEqual((b.x, b.y, b.width, b.height), (0, 0, 120, 80))
        self.assertEqual(b.confidence, 0.0)

    def test_dark_square_on_white_is_enclosed(self) -> None:
        b = detect_artwork_bounds(_framed_square())

        self.assertTrue(b.fits(200, 200))
        left, top, right, bottom = b.box()
        self.assertLessEqual(left, 50)
        self.assertLessEqual(top, 50)
        self.assertGreaterEqual(right, 150)
        self.assertGreaterEqual(bottom, 150)
        # Box stays close to the square.
        self.assertGreater(left, 30)
        self.assertLess(right, 170)
        self.assertEqual(b.confidence, 0.8)

    def test_accepts_numpy_arrays(self) -> None:
        arr = np.asarray(_framed_square())
        self.assertEqual(detect_artwork_bounds(arr), detect_artwork_bounds(_framed_square()))

    def test_tiny_image_does_not_raise(self) -> None:
        b = detect_artwork_bounds(Image.new("RGB", (2, 2), (0, 0, 0)))
        self.assertEqual((b.x, b.y, b.width, b.height, b.confidence), (0, 0, 2, 2, 0.0))

    def test_sobel_border_is_zero_and_clamped(self) -> None:
        gray = to_grayscale(np.asarray(_framed_square(20, 5, 15)))
        mag = sobel_magnitude(gray)
        self.assertEqual(float(mag[0, :].max()), 0.0)
        self.assertEqual(float(mag[:, -1].max()), 0.0)
        self.assertLessEqual(float(mag.max()), 255.0)

    def test_sobel_step_edge_magnitude(self) -> None:
        gray = np.zeros((5, 5), dtype=np.float64)
        gray[:, 3:] = 10
        mag = sobel_magnitude(gray)
        self.assertEqual(mag[2, 1:4].tolist(), [0.0, 40.0, 40.0])
        self.assertEqual(float(mag[2, 4]), 0.0)

    def test_near_full_frame_subject_has_low_confidence(self) -> None:
        b = detect_artwork_bounds(_framed_square(200, 3, 197))
        self.assertEqual(b, CropBounds(x=0, y=0, width=200, height=200, confidence=0.5))

    def test_tiny_subject_has_low_confidence(self) -> None:
        b = detect_artwork_bounds(_framed_square(200, 90, 110))
        self.assertEqual(b, CropBounds(x=85, y=85, width=30, height=30, confidence=0.5))

    def test_config_is_validated(self) -> None:
        with self.assertRaises(ValueError):
            AutoCropConfig(margin_ratio=-0.1)
        with self.assertRaises(ValueError):
            AutoCropConfig(output_format="GIF")


class TestCropBounds(unittest.TestCase):
    def test_clamped_pulls_bounds_inside(self) -> None:
        b = CropBounds(x=-10, y=90, width=500, height=50, confidence=0.5).clamped(100, 100)
        self.assertEqual((b.x, b.y, b.width, b.height), (0, 90, 100, 10))
        self.assertTrue(b.fits(100, 100))
        self.assertEqual(b.confidence, 0.5)

    def test_from_dict_roundtrip(self) -> None:
        b = CropBounds(x=1, y=2, width=3, height=4, confidence=0.8)
        self.assertEqual(CropBounds.from_dict(b.to_dict()), b)


class TestCropApplicator(unittest.TestCase):
    def test_full_bounds_png_is_pixel_identical(self) -> None:
        img = _framed_square(64, 10, 40)
        data = apply_crop(img, CropBounds.full_image(64, 64), image_format="PNG")
        with Image.open(io.BytesIO(data)) as out:
            self.assertEqual(out.size, (64, 64))
            self.assertEqual(out.convert("RGB").tobytes(), img.tobytes())

    def test_crop_image_extracts_subrectangle(self) -> None:
        img = _framed_square(64, 10, 40)
        out = crop_image(img, CropBounds(x=10, y=10, width=30, height=30))
        self.assertEqual(out.size, (30, 30))
        self.assertEqual(out.getcolors(), [(900, (0, 0, 0))])

    def test_out_of_range_bounds_raise(self) -> None:
        img = Image.new("RGB", (10, 10))
        with self.assertRaises(ValueError):
            crop_image(img, CropBounds(x=5, y=5, width=10, height=10))


class TestAutoCropModule(unittest.TestCase):
    def test_missing_input_is_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            res = run_autocrop_on_image_file(
                config=AutoCropConfig(), image_file=Path(tmp) / "missing.jpg", out_file=None
            )
        self.assertFalse(res.ok)
        self.assertEqual(res.errors[0].code, "AUTOCROP_INPUT_NOT_FOUND")

    def test_undecodable_input_is_reported(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            f = Path(tmp) / "broken.jpg"
            f.write_bytes(b"not an image")
            res = run_autocrop_on_image_file(config=AutoCropConfig(), image_file=f, out_file=None)
        self.assertFalse(res.ok)
        self.assertEqual(res.errors[0].code, "AUTOCROP_DECODE_FAILED")

    def test_detect_and_write_crop(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "photo.png"
            _framed_square().save(src)
            out = Path(tmp) / "out" / "crop.png"

            res = run_autocrop_on_image_file(
                config=AutoCropConfig(output_format="PNG"), image_file=src, out_file=out
            )

            self.assertTrue(res.ok)
            self.assertEqual(res.meta["bounds_origin"], "detected")
            with Image.open(out) as cropped:
                self.assertEqual(cropped.size, (res.bounds.width, res.bounds.height))

            payload = json.loads(serialize_autocrop_result(res))
            self.assertEqual(payload["image_size"], {"width_px": 200, "height_px": 200})

    def test_provided_bounds_are_clamped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            src = Path(tmp) / "photo.png"
            _framed_square().save(src)
            res = run_autocrop_on_image_file(
                config=AutoCropConfig(),
                image_file=src,
                out_file=None,
                bounds=CropBounds(x=150, y=150, width=400, height=400),
            )
        self.assertTrue(res.ok)
        self.assertEqual(res.meta["bounds_origin"], "provided")
        self.assertEqual((res.bounds.width, res.bounds.height), (50, 50))


if __name__ == "__main__":
    unittest.main()
