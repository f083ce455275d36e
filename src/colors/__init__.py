"""
Color extraction and naming.

Quantization is delegated to Pillow's median-cut quantizer; this package owns the
single RGB -> human color name classifier used both for captured artworks and for
collection color filters.
"""

from .classify import (
    COLOR_GROUPS,
    COLOR_NAMES,
    classify_hsl,
    classify_rgb,
    color_category,
    color_distance,
    hex_to_rgb,
    rgb_to_hex,
    rgb_to_hsl,
)
from .extract import FALLBACK_COLOR, color_palette, dominant_color, load_image, try_dominant_color

__all__ = [
    "COLOR_GROUPS",
    "COLOR_NAMES",
    "FALLBACK_COLOR",
    "classify_hsl",
    "classify_rgb",
    "color_category",
    "color_distance",
    "color_palette",
    "dominant_color",
    "hex_to_rgb",
    "load_image",
    "rgb_to_hex",
    "rgb_to_hsl",
    "try_dominant_color",
]
