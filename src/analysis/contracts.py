from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from contracts.artwork import MergedArtworkRecord


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """
    Orchestrator parameters.

    - `ocr_confidence_threshold` is on the OCR engine's 0..100 scale; label text at or
      below it is discarded.
    """

    ocr_confidence_threshold: float = 40.0

    def __post_init__(self) -> None:
        if self.ocr_confidence_threshold < 0.0 or self.ocr_confidence_threshold > 100.0:
            raise ValueError("ocr_confidence_threshold must be within [0.0, 100.0]")


@dataclass(frozen=True, slots=True)
class AnalysisSources:
    has_ocr: bool = False
    has_ai: bool = False
    has_color: bool = False


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """
    Outcome of one analysis.

    `success` is False only when the pipeline itself broke; `data` is then an empty
    record and `error` carries the message. Missing sources are reported in `sources`.
    """

    success: bool
    data: MergedArtworkRecord
    sources: AnalysisSources
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data.to_dict(),
            "sources": {
                "has_ocr": self.sources.has_ocr,
                "has_ai": self.sources.has_ai,
                "has_color": self.sources.has_color,
            },
            "error": self.error,
        }
