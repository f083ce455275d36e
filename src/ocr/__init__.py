"""
Label OCR (recognition only).

- Input: a photographed museum label (cartel)
- Output: recognized words with boxes and confidences, line-broken text, and a
  0..100 document confidence
- Constraints: no correction, no field extraction (see `cartel`); optional
  confidence floor

Data access:
- No environment variable reads in this module
- All filesystem access is via explicitly passed paths/config
"""

from .contracts import (
    BBox,
    OcrConfig,
    OcrEngineName,
    OcrError,
    OcrTextResult,
    OcrWord,
)
from .module import OcrWorker, run_ocr_on_image_file, run_ocr_on_image_relpath

__all__ = [
    "BBox",
    "OcrConfig",
    "OcrEngineName",
    "OcrError",
    "OcrTextResult",
    "OcrWord",
    "OcrWorker",
    "run_ocr_on_image_file",
    "run_ocr_on_image_relpath",
]
