from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Mapping


class MuseumSource(str, Enum):
    """
    Open-access collection providers, in the fixed order used for interleaving.
    """

    AIC = "aic"
    MET = "met"
    RIJKSMUSEUM = "rijksmuseum"
    CLEVELAND = "cleveland"
    HARVARD = "harvard"
    VA = "va"


@dataclass(frozen=True, slots=True)
class ArtworkCandidate:
    """
    Provider-neutral search hit.

    `id` is "{source short code}-{provider native id}" and is unique across sources.
    `year` is a free-text display string, exactly as the provider dates the object.
    """

    id: str
    title: str
    artist: str
    year: str
    museum: str
    museum_city: str
    museum_country: str
    medium: str
    dimensions: str
    image_url: str
    source: MuseumSource

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["source"] = self.source.value
        return d


@dataclass(frozen=True, slots=True)
class CartelData:
    """
    Fields parsed from a museum label. Absent fields are empty strings.

    `confidence` is the OCR engine's 0..100 document confidence (0 when unknown).
    """

    title: str = ""
    artist: str = ""
    year: str = ""
    medium: str = ""
    dimensions: str = ""
    museum: str = ""
    description: str = ""
    raw_text: str = ""
    confidence: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


@dataclass(frozen=True, slots=True)
class AiEnrichment:
    """
    Vision-service answer. Every field is optional on the wire and empty here when absent.
    """

    title: str = ""
    artist: str = ""
    artist_dates: str = ""
    year: str = ""
    period: str = ""
    style: str = ""
    medium: str = ""
    dimensions: str = ""
    museum: str = ""
    museum_city: str = ""
    museum_country: str = ""
    description: str = ""
    curatorial_note: str = ""

    @staticmethod
    def from_dict(d: Mapping[str, Any] | None) -> "AiEnrichment":
        if not d:
            return AiEnrichment()
        return AiEnrichment(**{f.name: _as_text(d.get(f.name)) for f in fields(AiEnrichment)})

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class MergedArtworkRecord:
    """
    Canonical artwork record handed to persistence.

    Every field may be empty; `title` is required before saving (see fusion.validate_artwork_record).
    """

    title: str = ""
    artist: str = ""
    artist_dates: str = ""
    year: str = ""
    period: str = ""
    style: str = ""
    medium: str = ""
    dimensions: str = ""
    museum: str = ""
    museum_city: str = ""
    museum_country: str = ""
    description: str = ""
    curatorial_note: str = ""
    dominant_color: str | None = None
    cartel_raw_text: str = ""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
