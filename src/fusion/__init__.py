"""
Priority-based fusion of label (OCR), AI and color data into `MergedArtworkRecord`.
"""

from .merge import (
    ValidationResult,
    build_description,
    empty_artwork_record,
    is_similar_text,
    merge_artwork_data,
    validate_artwork_record,
)

__all__ = [
    "ValidationResult",
    "build_description",
    "empty_artwork_record",
    "is_similar_text",
    "merge_artwork_data",
    "validate_artwork_record",
]
