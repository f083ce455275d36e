from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Union

from PIL import Image

from contracts.image import ColorResult

from .classify import GRAY, classify_rgb, rgb_to_hex

logger = logging.getLogger(__name__)

ImageSource = Union[Image.Image, bytes, str, Path]

FALLBACK_COLOR = ColorResult(hex="#888888", rgb=(136, 136, 136), name=GRAY)

# Quantization runs on a downscaled copy; dominant colors are stable under resizing.
_SAMPLE_MAX_SIDE = 256


def load_image(source: ImageSource) -> Image.Image:
    """
    Decode `source` (PIL image, encoded bytes or a filesystem path) into an RGB image.
    """
    if isinstance(source, Image.Image):
        return source.convert("RGB")
    if isinstance(source, (bytes, bytearray)):
        with Image.open(io.BytesIO(bytes(source))) as im:
            return im.convert("RGB")
    with Image.open(Path(source)) as im:
        return im.convert("RGB")


def quantize_colors(image: Image.Image, color_count: int) -> list[tuple[int, int, int]]:
    """
    Median-cut quantization; returns up to `color_count` RGB triples, most frequent first.
    """
    if color_count < 1:
        raise ValueError("color_count must be >= 1")

    sample = image.convert("RGB")
    sample.thumbnail((_SAMPLE_MAX_SIDE, _SAMPLE_MAX_SIDE))

    quantized = sample.quantize(colors=color_count, method=Image.Quantize.MEDIANCUT)
    palette = quantized.getpalette() or []
    counts = quantized.getcolors(maxcolors=256) or []

    ranked = sorted(counts, key=lambda c: (-c[0], c[1]))
    colors: list[tuple[int, int, int]] = []
    for _, idx in ranked[:color_count]:
        r, g, b = palette[idx * 3 : idx * 3 + 3]
        colors.append((int(r), int(g), int(b)))
    return colors


def _color_result(rgb: tuple[int, int, int]) -> ColorResult:
    return ColorResult(hex=rgb_to_hex(rgb), rgb=rgb, name=classify_rgb(rgb))


def try_dominant_color(source: ImageSource) -> ColorResult | None:
    """Dominant color, or None when the image cannot be decoded or quantized."""
    try:
        colors = quantize_colors(load_image(source), 5)
    except Exception:
        logger.warning("Dominant color extraction failed", exc_info=True)
        return None
    if not colors:
        return None
    return _color_result(colors[0])


def dominant_color(source: ImageSource) -> ColorResult:
    """
    Most representative color of an image. Never raises: failures yield FALLBACK_COLOR.
    """
    return try_dominant_color(source) or FALLBACK_COLOR


def color_palette(source: ImageSource, color_count: int = 5) -> list[ColorResult]:
    """Up to `color_count` representative colors, most frequent first; [] on failure."""
    try:
        colors = quantize_colors(load_image(source), color_count)
    except Exception:
        logger.warning("Color palette extraction failed", exc_info=True)
        return []
    return [_color_result(rgb) for rgb in colors]
