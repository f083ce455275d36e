from __future__ import annotations

import csv
import subprocess
from pathlib import Path
from typing import Any, Mapping

from ..contracts import (
    BBox,
    OcrConfig,
    OcrEngineName,
    OcrError,
    OcrTextResult,
    OcrWord,
)
from .base import OcrEngine

WORD_LEVEL = 5  # TSV levels: 1 page, 2 block, 3 paragraph, 4 line, 5 word
STDERR_TAIL = 4000

_POSITION_FIELDS = ("page_num", "block_num", "par_num", "line_num", "word_num")
_BOX_FIELDS = ("left", "top", "width", "height")


def _int_field(row: Mapping[str, str | None], name: str, default: int = 0) -> int:
    value = row.get(name) or ""
    return int(value) if value != "" else default


def _raw_confidence(row: Mapping[str, str | None]) -> float | None:
    """Engine confidence on its 0..100 scale; -1 (no estimate) and junk map to None."""
    value = row.get("conf") or ""
    try:
        conf = float(value)
    except ValueError:
        return None
    return conf if conf >= 0 else None


def parse_tesseract_tsv(tsv: str, *, confidence_floor: float = 0.0) -> tuple[list[OcrWord], str, float]:
    """
    Parse `tesseract ... tsv` output into words, line-broken text and mean confidence (0..100).

    Words are ordered by (page, block, paragraph, line, word); words sharing a line are
    joined by single spaces, lines by newlines. `confidence_floor` is a 0..1 fraction of
    the engine scale; words below it are dropped before the text is rebuilt.
    """

    keyed: list[tuple[tuple[int, ...], OcrWord]] = []

    for row in csv.DictReader(tsv.splitlines(), delimiter="\t", quoting=csv.QUOTE_NONE):
        text = row.get("text") or ""
        if not text.strip():
            continue
        try:
            if _int_field(row, "level") != WORD_LEVEL:
                continue
            position = tuple(
                _int_field(row, name, default=1 if name == "page_num" else 0) for name in _POSITION_FIELDS
            )
            left, top, width, height = (_int_field(row, name) for name in _BOX_FIELDS)
        except ValueError:
            # Rows with unreadable geometry are skipped, not repaired.
            continue

        raw_conf = _raw_confidence(row)
        if raw_conf is not None and min(raw_conf, 100.0) / 100.0 < confidence_floor:
            continue

        keyed.append(
            (
                position,
                OcrWord(
                    text=text,
                    confidence=raw_conf,
                    bbox=BBox(x0=left, y0=top, x1=left + width, y1=top + height),
                    line_key=(position[1], position[2], position[3]),
                ),
            )
        )

    keyed.sort(key=lambda item: item[0])
    words = [w for _, w in keyed]

    lines: dict[tuple[int, ...], list[str]] = {}
    for position, word in keyed:
        lines.setdefault(position[:4], []).append(word.text)
    text = "\n".join(" ".join(parts) for parts in lines.values())

    confs = [w.confidence for w in words if w.confidence is not None]
    mean_conf = float(sum(confs) / len(confs)) if confs else 0.0
    return words, text, mean_conf


def build_command(*, config: OcrConfig, image_file: Path) -> list[str]:
    cmd = ["tesseract", str(image_file), "stdout", "-l", config.language]
    if config.psm is not None:
        cmd += ["--psm", str(config.psm)]
    cmd.append("tsv")
    return cmd


class TesseractCliEngine(OcrEngine):
    """
    Label OCR through the `tesseract` executable, read back as TSV.

    Text is reported exactly as recognized; the only filtering is the optional
    confidence floor. Every failure becomes an `ok=False` result with a coded error.
    """

    def _failure(
        self,
        *,
        source_relpath: str | None,
        code: str,
        message: str,
        detail: dict[str, Any],
        meta: dict[str, Any],
    ) -> OcrTextResult:
        return OcrTextResult(
            ok=False,
            engine=OcrEngineName.TESSERACT_CLI,
            source_image_relpath=source_relpath,
            text="",
            confidence=0.0,
            words=[],
            errors=[OcrError(code=code, message=message, detail=detail)],
            meta=meta,
        )

    def run_on_image_file(
        self, *, config: OcrConfig, image_file: Path, source_relpath: str | None
    ) -> OcrTextResult:
        cmd = build_command(config=config, image_file=image_file)
        meta: dict[str, Any] = {
            "backend": "tesseract",
            "language": config.language,
            "psm": config.psm,
            "confidence_floor": config.confidence_floor,
            # Image path left out so artifacts do not depend on where the file lived.
            "command_template": ["tesseract", "<IMAGE_FILE>", *cmd[2:]],
        }

        if not image_file.exists():
            detail: dict[str, Any] = {"source_image_relpath": source_relpath}
            if source_relpath is None:
                detail["image_file"] = str(image_file)
            return self._failure(
                source_relpath=source_relpath,
                code="OCR_INPUT_NOT_FOUND",
                message="Label image not found",
                detail=detail,
                meta=meta,
            )

        try:
            proc = subprocess.run(
                cmd, check=False, capture_output=True, text=True, timeout=config.timeout_s
            )
        except FileNotFoundError:
            return self._failure(
                source_relpath=source_relpath,
                code="OCR_BACKEND_NOT_INSTALLED",
                message="The tesseract executable is not on PATH",
                detail={"expected_command": "tesseract"},
                meta=meta,
            )
        except subprocess.TimeoutExpired:
            return self._failure(
                source_relpath=source_relpath,
                code="OCR_TIMEOUT",
                message=f"tesseract did not finish within {config.timeout_s}s",
                detail={"timeout_s": config.timeout_s},
                meta=meta,
            )

        if proc.returncode != 0:
            return self._failure(
                source_relpath=source_relpath,
                code="OCR_BACKEND_ERROR",
                message=f"tesseract exited with status {proc.returncode}",
                detail={"returncode": proc.returncode, "stderr": proc.stderr[-STDERR_TAIL:]},
                meta=meta,
            )

        words, text, confidence = parse_tesseract_tsv(
            proc.stdout, confidence_floor=config.confidence_floor
        )
        if not words:
            meta["note"] = "No words recognized"

        return OcrTextResult(
            ok=True,
            engine=OcrEngineName.TESSERACT_CLI,
            source_image_relpath=source_relpath,
            text=text,
            confidence=confidence,
            words=words,
            errors=[],
            meta=meta,
        )
