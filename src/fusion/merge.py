from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from contracts.artwork import AiEnrichment, CartelData, MergedArtworkRecord
from contracts.image import ColorResult

SIMILARITY_PREFIX_RATIO = 0.8
DESCRIPTION_SEPARATOR = "\n\n"

AiInput = Union[AiEnrichment, Mapping[str, Any], None]

_WS_RE = re.compile(r"\s+")


def _normalize(text: str) -> str:
    return _WS_RE.sub(" ", text.lower()).strip()


def is_similar_text(a: str | None, b: str | None) -> bool:
    """
    True when either normalized text contains the first 80% of the other.

    Normalization lower-cases and collapses whitespace. Empty texts are never similar.
    """

    if not a or not b:
        return False
    n1, n2 = _normalize(a), _normalize(b)
    if not n1 or not n2:
        return False
    if n2[: math.floor(len(n2) * SIMILARITY_PREFIX_RATIO)] in n1:
        return True
    if n1[: math.floor(len(n1) * SIMILARITY_PREFIX_RATIO)] in n2:
        return True
    return False


def build_description(ocr: CartelData, ai: AiEnrichment) -> str:
    """Label description first, then the AI description unless it repeats the label."""

    parts: list[str] = []
    if ocr.description:
        parts.append(ocr.description)
    if ai.description and not (ocr.description and is_similar_text(ocr.description, ai.description)):
        parts.append(ai.description)
    return DESCRIPTION_SEPARATOR.join(parts)


def _color_hex(color: ColorResult | Mapping[str, Any] | None) -> str | None:
    if color is None:
        return None
    value = color.get("hex") if isinstance(color, Mapping) else color.hex
    return value or None


def merge_artwork_data(
    *,
    ocr_data: CartelData | None = None,
    ai_data: AiInput = None,
    color_data: ColorResult | Mapping[str, Any] | None = None,
) -> MergedArtworkRecord:
    """
    Fuse label, AI and color data into one record with a fixed per-field priority.

    - title, artist, year, medium, dimensions, museum: label first, then AI
    - artist_dates, period, style, museum_city, museum_country, curatorial_note: AI only
    - dominant_color: color extractor hex only
    - cartel_raw_text: label text as recognized

    Pure and deterministic; a missing source counts as all-empty fields.
    """

    ocr = ocr_data if ocr_data is not None else CartelData()
    ai = ai_data if isinstance(ai_data, AiEnrichment) else AiEnrichment.from_dict(ai_data)

    return MergedArtworkRecord(
        title=ocr.title or ai.title,
        artist=ocr.artist or ai.artist,
        artist_dates=ai.artist_dates,
        year=ocr.year or ai.year,
        period=ai.period,
        style=ai.style,
        medium=ocr.medium or ai.medium,
        dimensions=ocr.dimensions or ai.dimensions,
        museum=ocr.museum or ai.museum,
        museum_city=ai.museum_city,
        museum_country=ai.museum_country,
        description=build_description(ocr, ai),
        curatorial_note=ai.curatorial_note,
        dominant_color=_color_hex(color_data),
        cartel_raw_text=ocr.raw_text,
    )


def empty_artwork_record() -> MergedArtworkRecord:
    return MergedArtworkRecord()


@dataclass(frozen=True, slots=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)


def validate_artwork_record(record: MergedArtworkRecord | Mapping[str, Any]) -> ValidationResult:
    """Save-readiness check: a non-blank title is required."""

    title = record.get("title") if isinstance(record, Mapping) else record.title
    errors: list[str] = []
    if not (title or "").strip():
        errors.append("title is required")
    return ValidationResult(valid=not errors, errors=errors)
