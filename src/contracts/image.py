from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class CropBounds:
    """
    Crop rectangle in source-image pixel coordinates.

    Invariant for a usable crop of a W x H image:
    0 <= x, 0 <= y, x + width <= W, y + height <= H, width > 0, height > 0.

    `confidence` is a coarse heuristic signal (0..1) for the UI, not a probability.
    """

    x: int
    y: int
    width: int
    height: int
    confidence: float = 0.0

    def box(self) -> tuple[int, int, int, int]:
        """(left, top, right, bottom), right/bottom exclusive."""
        return (self.x, self.y, self.x + self.width, self.y + self.height)

    def area(self) -> int:
        return int(self.width * self.height) if self.width > 0 and self.height > 0 else 0

    def fits(self, image_width: int, image_height: int) -> bool:
        return (
            self.x >= 0
            and self.y >= 0
            and self.width > 0
            and self.height > 0
            and self.x + self.width <= image_width
            and self.y + self.height <= image_height
        )

    def clamped(self, image_width: int, image_height: int, *, min_size: int = 1) -> "CropBounds":
        """
        Pull user-adjusted bounds back inside the image, keeping at least `min_size` pixels per side.
        """
        if image_width <= 0 or image_height <= 0:
            raise ValueError("image dimensions must be > 0")
        min_w = max(1, min(min_size, image_width))
        min_h = max(1, min(min_size, image_height))

        x = max(0, min(int(self.x), image_width - min_w))
        y = max(0, min(int(self.y), image_height - min_h))
        width = max(min_w, min(int(self.width), image_width - x))
        height = max(min_h, min(int(self.height), image_height - y))
        return CropBounds(x=x, y=y, width=width, height=height, confidence=self.confidence)

    @staticmethod
    def full_image(image_width: int, image_height: int) -> "CropBounds":
        return CropBounds(x=0, y=0, width=int(image_width), height=int(image_height), confidence=0.0)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "CropBounds":
        return CropBounds(
            x=int(d["x"]),
            y=int(d["y"]),
            width=int(d["width"]),
            height=int(d["height"]),
            confidence=float(d.get("confidence", 0.0) or 0.0),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "confidence": self.confidence,
        }


@dataclass(frozen=True, slots=True)
class ColorResult:
    hex: str  # "#rrggbb"
    rgb: tuple[int, int, int]
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"hex": self.hex, "rgb": list(self.rgb), "name": self.name}
