from __future__ import annotations

import json
from pathlib import Path

from .contracts import OcrTextResult


def serialize_ocr_result(result: OcrTextResult) -> str:
    """Label OCR result as stable, diff-friendly JSON (sorted keys, trailing newline)."""
    return json.dumps(result.to_dict(), ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_ocr_json_artifact(*, result: OcrTextResult, out_file: Path) -> None:
    out_file.parent.mkdir(parents=True, exist_ok=True)
    out_file.write_text(serialize_ocr_result(result), encoding="utf-8")
