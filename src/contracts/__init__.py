"""
Canonical data model shared by the ingestion stages.

Stage code should consume/produce these contract objects (not ad-hoc dicts).
Provider payloads, OCR output and AI answers are translated into them at the
stage boundary.
"""

from .artwork import (
    AiEnrichment,
    ArtworkCandidate,
    CartelData,
    MergedArtworkRecord,
    MuseumSource,
)
from .image import ColorResult, CropBounds

__all__ = [
    "AiEnrichment",
    "ArtworkCandidate",
    "CartelData",
    "ColorResult",
    "CropBounds",
    "MergedArtworkRecord",
    "MuseumSource",
]
