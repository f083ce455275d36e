from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Union

import cv2
import numpy as np
from PIL import Image

from contracts.image import CropBounds

from .contracts import AutoCropConfig

logger = logging.getLogger(__name__)

ImageLike = Union[Image.Image, np.ndarray]

_LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def _as_rgb_array(image: ImageLike) -> np.ndarray:
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGB"), dtype=np.uint8)

    arr = np.asarray(image)
    if arr.ndim == 2:
        return np.repeat(arr[:, :, None], 3, axis=2).astype(np.uint8)
    if arr.ndim != 3 or arr.shape[2] not in (3, 4):
        raise ValueError(f"Expected an HxWx3 or HxWx4 array, got shape {arr.shape}")
    return arr[:, :, :3].astype(np.uint8)


def _image_size(image: ImageLike) -> tuple[int, int]:
    if isinstance(image, Image.Image):
        return image.size
    arr = np.asarray(image)
    return int(arr.shape[1]), int(arr.shape[0])


def to_grayscale(rgb: np.ndarray) -> np.ndarray:
    """Luminance 0.299R + 0.587G + 0.114B, rounded to integers."""
    return np.rint(rgb[:, :, :3].astype(np.float64) @ _LUMA)


def sobel_magnitude(gray: np.ndarray) -> np.ndarray:
    """
    3x3 Sobel gradient magnitude, clamped to [0, 255].

    Only interior pixels are kept; the one-pixel border stays 0.
    """
    h, w = gray.shape
    mag = np.zeros((h, w), dtype=np.float64)
    if h < 3 or w < 3:
        return mag

    g = gray.astype(np.float64)
    grad_x = cv2.Sobel(g, cv2.CV_64F, 1, 0, ksize=3)
    grad_y = cv2.Sobel(g, cv2.CV_64F, 0, 1, ksize=3)

    mag[1:-1, 1:-1] = np.minimum(255.0, np.sqrt(grad_x**2 + grad_y**2))[1:-1, 1:-1]
    return mag


def _span(mask: np.ndarray) -> tuple[int, int] | None:
    idx = np.flatnonzero(mask)
    if idx.size == 0:
        return None
    return int(idx[0]), int(idx[-1])


def _confidence(crop_area: float, total_area: float) -> float:
    ratio = crop_area / total_area if total_area > 0 else 0.0
    return 0.8 if 0.2 < ratio < 0.9 else 0.5


def _detect(rgb: np.ndarray, config: AutoCropConfig) -> CropBounds:
    height, width = rgb.shape[:2]
    full = CropBounds.full_image(width, height)

    edges = sobel_magnitude(to_grayscale(rgb)) > config.edge_threshold

    # Columns/rows count as artwork when their edge density is significant.
    col_span = _span(edges.sum(axis=0) > config.column_density * height)
    row_span = _span(edges.sum(axis=1) > config.row_density * width)
    if col_span is None or row_span is None:
        return full

    min_x, max_x = float(col_span[0]), float(col_span[1] + 1)
    min_y, max_y = float(row_span[0]), float(row_span[1] + 1)

    margin = min(width, height) * config.margin_ratio
    min_x = max(0.0, min_x - margin)
    max_x = min(float(width), max_x + margin)
    min_y = max(0.0, min_y - margin)
    max_y = min(float(height), max_y + margin)

    if max_x <= min_x or max_y <= min_y:
        return full

    x = int(math.floor(min_x))
    y = int(math.floor(min_y))
    crop_w = min(int(math.ceil(max_x)), width) - x
    crop_h = min(int(math.ceil(max_y)), height) - y
    if crop_w <= 0 or crop_h <= 0:
        return full

    bounds = CropBounds(x=x, y=y, width=crop_w, height=crop_h)
    return replace(bounds, confidence=_confidence(bounds.area(), width * height))


def detect_artwork_bounds(image: ImageLike, config: AutoCropConfig | None = None) -> CropBounds:
    """
    Estimate the rectangle occupied by the artwork in a photograph.

    Never raises for a decoded image: any anomaly yields the full image with confidence 0
    ("use the whole image").
    """

    cfg = config or AutoCropConfig()
    width, height = _image_size(image)

    try:
        return _detect(_as_rgb_array(image), cfg)
    except Exception:
        logger.warning("Boundary detection failed; using the full image", exc_info=True)
        return CropBounds.full_image(width, height)
