"""
Stage 0 - Artwork framing (photograph -> cropped artwork image).

- Boundary detection is a grayscale Sobel edge-density heuristic; it never fails and
  falls back to the full image with confidence 0.
- Crop application is a plain pixel copy plus re-encoding; no heuristics.
- No OCR, color analysis or metadata inference happens here.
"""

from .boundary import detect_artwork_bounds
from .contracts import AutoCropConfig, AutoCropError, AutoCropResult, ImageFormat
from .crop import apply_crop, crop_image, encode_image
from .module import run_autocrop_on_image_file

__all__ = [
    "AutoCropConfig",
    "AutoCropError",
    "AutoCropResult",
    "ImageFormat",
    "apply_crop",
    "crop_image",
    "detect_artwork_bounds",
    "encode_image",
    "run_autocrop_on_image_file",
]
