from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

import numpy as np
from PIL import Image

from contracts.image import CropBounds

ImageLike = Union[Image.Image, np.ndarray]

LIGHT_LEVEL = 200
SEARCH_FROM_PCT = 60  # search the bottom 40% of the frame
REGION_FROM_PCT = 70  # report the bottom 30% as the label
LIGHT_RATIO_MIN = 0.05


@dataclass(frozen=True, slots=True)
class CartelRegion:
    """
    Where a label probably sits in a photo that shows both artwork and label.

    `confidence` is the light-pixel ratio of the searched band (0..1).
    """

    detected: bool
    bounds: CropBounds | None
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "detected": self.detected,
            "bounds": self.bounds.to_dict() if self.bounds is not None else None,
            "confidence": self.confidence,
        }


def _rgb(image: ImageLike) -> np.ndarray:
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGB"), dtype=np.uint8)
    arr = np.asarray(image)
    if arr.ndim == 2:
        return np.repeat(arr[:, :, None], 3, axis=2)
    return arr[:, :, :3]


def detect_cartel_region(image: ImageLike) -> CartelRegion:
    """
    Look for a bright label in the bottom of the frame.

    Counts pixels whose three channels all exceed LIGHT_LEVEL in the bottom 40% of the
    image; more than 5% light pixels is taken as a label, reported as the bottom 30%.
    """

    rgb = _rgb(image)
    h, w = int(rgb.shape[0]), int(rgb.shape[1])

    band = rgb[(h * SEARCH_FROM_PCT) // 100 :, :, :]
    total = band.shape[0] * band.shape[1]
    if total == 0:
        return CartelRegion(detected=False, bounds=None, confidence=0.0)

    light = np.all(band > LIGHT_LEVEL, axis=2)
    ratio = float(np.count_nonzero(light)) / float(total)

    if ratio <= LIGHT_RATIO_MIN:
        return CartelRegion(detected=False, bounds=None, confidence=ratio)

    region_y = (h * REGION_FROM_PCT) // 100
    bounds = CropBounds(x=0, y=region_y, width=w, height=h - region_y, confidence=ratio)
    return CartelRegion(detected=True, bounds=bounds, confidence=ratio)
