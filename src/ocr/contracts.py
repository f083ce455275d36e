from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class OcrEngineName(str, Enum):
    """
    Recognition backends available to the label OCR stage.

    Recognition only: engines must not correct or interpret the text. Field extraction
    happens in the cartel parser.
    """

    TESSERACT_CLI = "tesseract_cli"


@dataclass(frozen=True, slots=True)
class BBox:
    """
    Word box in label-image pixels, right/bottom exclusive:
    - (x0, y0) is top-left
    - (x1, y1) is bottom-right
    """

    x0: int
    y0: int
    x1: int
    y1: int


@dataclass(frozen=True, slots=True)
class OcrWord:
    """
    Single recognized word, exactly as the engine emitted it.

    `line_key` is the engine's structural position (block, paragraph, line) used to
    rebuild line breaks.
    """

    text: str
    confidence: float | None  # engine-native 0..100 when available
    bbox: BBox
    line_key: tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class OcrError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class OcrTextResult:
    """
    Recognized text of one label image.

    `confidence` is the mean word confidence on the engine's 0..100 scale (0 when no
    word carried a confidence). On failure `ok` is False and `text` is empty; nothing
    is fabricated.
    """

    ok: bool
    engine: OcrEngineName
    source_image_relpath: str | None
    text: str
    confidence: float
    words: list[OcrWord]
    errors: list[OcrError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class OcrConfig:
    """
    OCR module configuration.

    - `data_root` is only needed for relpath-based runs (CLI); it must be passed
      explicitly, this module does not read environment variables.
    - `confidence_floor` (0..1) drops low-confidence words before the text is rebuilt.
    """

    data_root: Path | None = None
    engine: OcrEngineName = OcrEngineName.TESSERACT_CLI
    confidence_floor: float = 0.0
    language: str = "fra+eng"  # museum labels are commonly bilingual
    psm: int | None = None  # tesseract --psm; engine default when None
    timeout_s: float = 120.0
    compute_source_sha256: bool = False  # optional audit metadata

    def __post_init__(self) -> None:
        if self.confidence_floor < 0.0 or self.confidence_floor > 1.0:
            raise ValueError("confidence_floor must be within [0.0, 1.0]")
        if self.timeout_s <= 0:
            raise ValueError("timeout_s must be > 0")

        if self.data_root is not None and not isinstance(self.data_root, Path):
            raise TypeError("data_root must be a pathlib.Path")
