from __future__ import annotations

import io
import tempfile
import unittest
from pathlib import Path

from PIL import Image

from colors import (
    COLOR_GROUPS,
    COLOR_NAMES,
    FALLBACK_COLOR,
    classify_hsl,
    classify_rgb,
    color_category,
    color_distance,
    color_palette,
    dominant_color,
    hex_to_rgb,
    rgb_to_hex,
    rgb_to_hsl,
    try_dominant_color,
)


def _png_bytes(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class TestClassifier(unittest.TestCase):
    def test_documented_boundaries(self) -> None:
        self.assertEqual(classify_hsl(0, 100, 50), "Red")
        self.assertEqual(classify_hsl(200, 100, 50), "Blue")
        self.assertEqual(classify_hsl(120, 10, 50), "Gray")

    def test_grayscale_ladder(self) -> None:
        self.assertEqual(
            [classify_hsl(0, 0, l) for l in (10, 30, 50, 70, 90)],
            ["Black", "Dark gray", "Gray", "Light gray", "White"],
        )

    def test_warm_dark_tones_are_brown(self) -> None:
        self.assertEqual(classify_hsl(20, 30, 30), "Brown")
        self.assertEqual(classify_hsl(25, 80, 40), "Brown")
        self.assertEqual(classify_hsl(25, 80, 60), "Orange")

    def test_hue_bands(self) -> None:
        cases = {350: "Red", 50: "Yellow", 100: "Green", 170: "Cyan", 270: "Violet", 300: "Pink"}
        for hue, name in cases.items():
            self.assertEqual(classify_hsl(hue, 80, 50), name, msg=f"hue={hue}")

    def test_every_name_is_in_the_closed_set(self) -> None:
        for h in range(0, 360, 7):
            for s in (5, 30, 90):
                for l in (10, 45, 75):
                    self.assertIn(classify_hsl(h, s, l), COLOR_NAMES)

    def test_rgb_helpers(self) -> None:
        self.assertEqual(rgb_to_hsl(255, 0, 0), (0, 100, 50))
        self.assertEqual(rgb_to_hsl(136, 136, 136), (0, 0, 53))
        self.assertEqual(classify_rgb((0, 0, 255)), "Blue")
        self.assertEqual(rgb_to_hex((255, 128, 0)), "#ff8000")
        self.assertEqual(hex_to_rgb("#FF8000"), (255, 128, 0))
        with self.assertRaises(ValueError):
            hex_to_rgb("#12")

    def test_categories_and_groups(self) -> None:
        self.assertEqual(color_category("#ff0000"), "red")
        self.assertEqual(color_category((0, 200, 200)), "blue")
        self.assertEqual(color_category("#888888"), "neutral")
        self.assertIsNone(color_category(None))
        self.assertIsNone(color_category("not-a-color"))
        for members in COLOR_GROUPS.values():
            for name in members:
                self.assertIn(name, COLOR_NAMES)

    def test_color_distance(self) -> None:
        self.assertEqual(color_distance((0, 0, 0), (3, 4, 0)), 5.0)


class TestExtractor(unittest.TestCase):
    def test_solid_image_dominant_color(self) -> None:
        c = dominant_color(Image.new("RGB", (40, 30), (255, 0, 0)))
        self.assertEqual(c.hex, "#ff0000")
        self.assertEqual(c.rgb, (255, 0, 0))
        self.assertEqual(c.name, "Red")

    def test_bytes_and_path_sources(self) -> None:
        img = Image.new("RGB", (20, 20), (0, 0, 255))
        self.assertEqual(dominant_color(_png_bytes(img)).name, "Blue")
        with tempfile.TemporaryDirectory() as tmp:
            p = Path(tmp) / "blue.png"
            img.save(p)
            self.assertEqual(dominant_color(p).name, "Blue")

    def test_majority_color_comes_first(self) -> None:
        img = Image.new("RGB", (100, 100), (0, 128, 0))
        img.paste((255, 255, 255), (0, 0, 100, 20))
        palette = color_palette(img, 2)
        self.assertEqual(len(palette), 2)
        self.assertEqual(palette[0].name, "Green")

    def test_undecodable_bytes_fall_back_to_gray(self) -> None:
        self.assertEqual(dominant_color(b"not an image"), FALLBACK_COLOR)
        self.assertEqual(FALLBACK_COLOR.to_dict(), {"hex": "#888888", "rgb": [136, 136, 136], "name": "Gray"})
        self.assertIsNone(try_dominant_color(b"not an image"))
        self.assertEqual(color_palette(b"not an image"), [])


if __name__ == "__main__":
    unittest.main()
