"""
Museum label (cartel) field extraction.

- Input: recognized label text (see `ocr`) or a photo to search for a label
- Output: `contracts.CartelData` with title/artist/year/medium/dimensions
- Constraints: deterministic regex/line heuristics only; no spelling correction
"""

from .parse_cartel import parse_cartel_text
from .region import CartelRegion, detect_cartel_region

__all__ = ["CartelRegion", "detect_cartel_region", "parse_cartel_text"]
