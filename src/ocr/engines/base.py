from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..contracts import OcrConfig, OcrTextResult


class OcrEngine(ABC):
    """
    A text recognizer for label photos.

    Implementations return words, boxes and confidences as the backend produced them
    (no spelling fixes, no field extraction) and report failures as coded errors in the
    result instead of raising.
    """

    @abstractmethod
    def run_on_image_file(
        self, *, config: OcrConfig, image_file: Path, source_relpath: str | None
    ) -> OcrTextResult:
        raise NotImplementedError
