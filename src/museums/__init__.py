"""
Open-access museum collection search.

- One async adapter per provider, each translating the provider payload into
  `contracts.ArtworkCandidate`
- `search_all` fans out to every provider and interleaves the results so no single
  museum dominates the first page
- Endpoints and API keys come from `MuseumApiConfig`; no environment reads
"""

from .adapters import (
    CURATED_AIC_IDS,
    load_aic_curated,
    search_aic,
    search_cleveland,
    search_harvard,
    search_met,
    search_rijksmuseum,
    search_va,
)
from .aggregator import ADAPTERS, interleave, interleave_by_source, search_all, search_one
from .contracts import MUSEUM_SOURCES, MissingApiKeyError, MuseumApiConfig, SourceInfo

__all__ = [
    "ADAPTERS",
    "CURATED_AIC_IDS",
    "MUSEUM_SOURCES",
    "MissingApiKeyError",
    "MuseumApiConfig",
    "SourceInfo",
    "interleave",
    "interleave_by_source",
    "load_aic_curated",
    "search_aic",
    "search_all",
    "search_cleveland",
    "search_harvard",
    "search_met",
    "search_one",
    "search_rijksmuseum",
    "search_va",
]
