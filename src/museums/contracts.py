from __future__ import annotations

from dataclasses import dataclass

from contracts.artwork import MuseumSource

UNTITLED = "Untitled"
UNKNOWN_ARTIST = "Unknown artist"


class MissingApiKeyError(RuntimeError):
    """A keyed provider was queried without its API key configured."""

    def __init__(self, source: MuseumSource) -> None:
        super().__init__(f"No API key configured for {source.value}")
        self.source = source


@dataclass(frozen=True, slots=True)
class SourceInfo:
    source: MuseumSource
    name: str
    city: str
    country: str


MUSEUM_SOURCES: dict[MuseumSource, SourceInfo] = {
    MuseumSource.AIC: SourceInfo(
        MuseumSource.AIC, "Art Institute of Chicago", "Chicago", "United States"
    ),
    MuseumSource.MET: SourceInfo(
        MuseumSource.MET, "The Metropolitan Museum of Art", "New York", "United States"
    ),
    MuseumSource.RIJKSMUSEUM: SourceInfo(
        MuseumSource.RIJKSMUSEUM, "Rijksmuseum", "Amsterdam", "Netherlands"
    ),
    MuseumSource.CLEVELAND: SourceInfo(
        MuseumSource.CLEVELAND, "Cleveland Museum of Art", "Cleveland", "United States"
    ),
    MuseumSource.HARVARD: SourceInfo(
        MuseumSource.HARVARD, "Harvard Art Museums", "Cambridge", "United States"
    ),
    MuseumSource.VA: SourceInfo(
        MuseumSource.VA, "Victoria and Albert Museum", "London", "United Kingdom"
    ),
}


@dataclass(frozen=True, slots=True)
class MuseumApiConfig:
    """
    Museum API endpoints and credentials.

    - Keys must be passed explicitly; this package does not read environment variables.
    - `timeout_s` applies to each HTTP request made by an adapter.
    - `source_timeout_s` (optional) bounds a whole adapter call inside `search_all`.
    """

    aic_base_url: str = "https://api.artic.edu/api/v1"
    aic_iiif_url: str = "https://www.artic.edu/iiif/2"
    met_base_url: str = "https://collectionapi.metmuseum.org/public/collection/v1"
    rijksmuseum_base_url: str = "https://www.rijksmuseum.nl/api/en"
    cleveland_base_url: str = "https://openaccess-api.clevelandart.org/api"
    harvard_base_url: str = "https://api.harvardartmuseums.org"
    va_base_url: str = "https://api.vam.ac.uk/v2"
    va_iiif_url: str = "https://framemark.vam.ac.uk/collections"
    rijksmuseum_key: str | None = None
    harvard_key: str | None = None
    timeout_s: float = 15.0
    source_timeout_s: float | None = None
    met_batch_size: int = 6
    user_agent: str = "artwork-ingest/0.1"

    def __post_init__(self) -> None:
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")
        if self.source_timeout_s is not None and self.source_timeout_s <= 0:
            raise ValueError("source_timeout_s must be > 0 when set")
        if self.met_batch_size < 1:
            raise ValueError("met_batch_size must be >= 1")
        for name in ("rijksmuseum_key", "harvard_key"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise TypeError(f"{name} must be a string")
