"""
Artwork analysis orchestrator.

- Input: artwork image bytes, optional label image bytes, AI on/off
- Output: `AnalysisResult` holding the merged record and which sources contributed
- Constraints: sources degrade independently; the OCR worker and HTTP client are
  injected by the caller
"""

from .contracts import AnalysisConfig, AnalysisResult, AnalysisSources
from .enrichment import AiEnrichmentClient, EnrichmentConfig
from .module import ArtworkAnalyzer

__all__ = [
    "AiEnrichmentClient",
    "AnalysisConfig",
    "AnalysisResult",
    "AnalysisSources",
    "ArtworkAnalyzer",
    "EnrichmentConfig",
]
