from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from .contracts import OcrConfig, OcrEngineName, OcrError, OcrTextResult
from .data_access import DataAccessError, resolve_under_data_root, sha256_file
from .engines.base import OcrEngine
from .engines.tesseract_cli import TesseractCliEngine


def _get_engine(engine: OcrEngineName) -> OcrEngine:
    if engine == OcrEngineName.TESSERACT_CLI:
        return TesseractCliEngine()
    raise ValueError(f"Unsupported OCR engine: {engine}")


def _with_meta(result: OcrTextResult, **extra: object) -> OcrTextResult:
    return OcrTextResult(
        ok=result.ok,
        engine=result.engine,
        source_image_relpath=result.source_image_relpath,
        text=result.text,
        confidence=result.confidence,
        words=result.words,
        errors=result.errors,
        meta={**result.meta, **extra},
    )


def _attach_source_sha256_if_enabled(
    *, config: OcrConfig, image_file: Path, result: OcrTextResult
) -> OcrTextResult:
    if not (config.compute_source_sha256 and image_file.exists()):
        return result

    try:
        return _with_meta(result, source_sha256=sha256_file(image_file))
    except OSError:
        # Hashing is audit-only; recognition stands and the failure is recorded.
        return OcrTextResult(
            ok=result.ok,
            engine=result.engine,
            source_image_relpath=result.source_image_relpath,
            text=result.text,
            confidence=result.confidence,
            words=result.words,
            errors=result.errors
            + [
                OcrError(
                    code="OCR_AUDIT_HASH_FAILED",
                    message="Could not hash the label image",
                    detail={"source_image_relpath": result.source_image_relpath},
                )
            ],
            meta=result.meta,
        )


def _failed(*, config: OcrConfig, image_relpath: str, code: str, message: str, detail: dict) -> OcrTextResult:
    return OcrTextResult(
        ok=False,
        engine=config.engine,
        source_image_relpath=image_relpath,
        text="",
        confidence=0.0,
        words=[],
        errors=[OcrError(code=code, message=message, detail=detail)],
        meta={"confidence_floor": config.confidence_floor},
    )


def run_ocr_on_image_relpath(*, config: OcrConfig, image_relpath: str) -> OcrTextResult:
    """
    Recognize a label photo given relative to `config.data_root` (CLI entry point).
    """

    if config.data_root is None:
        return _failed(
            config=config,
            image_relpath=image_relpath,
            code="OCR_DATA_ROOT_MISSING",
            message="data_root must be configured for relpath-based OCR",
            detail={"relpath": image_relpath},
        )

    try:
        image_file = resolve_under_data_root(data_root=config.data_root, relpath=image_relpath)
    except DataAccessError as e:
        return _failed(
            config=config,
            image_relpath=image_relpath,
            code="OCR_DATA_ACCESS_ERROR",
            message=str(e),
            detail={"data_root": str(config.data_root), "relpath": image_relpath},
        )

    engine = _get_engine(config.engine)
    result = engine.run_on_image_file(
        config=config, image_file=image_file, source_relpath=image_relpath
    )
    return _attach_source_sha256_if_enabled(config=config, image_file=image_file, result=result)


def run_ocr_on_image_file(
    *, config: OcrConfig, image_file: Path, source_image_relpath: str | None
) -> OcrTextResult:
    """
    Run OCR on an explicit image file path (no data_root resolution).
    """

    engine = _get_engine(config.engine)
    result = engine.run_on_image_file(
        config=config, image_file=image_file, source_relpath=source_image_relpath
    )
    return _attach_source_sha256_if_enabled(config=config, image_file=image_file, result=result)


class OcrWorker:
    """
    Reusable OCR handle owned by whoever runs analyses (one per session or process).

    Recognition requests are serialized: concurrent `recognize` calls wait for the lock,
    and the blocking engine runs in a worker thread so the event loop stays responsive.
    """

    def __init__(self, *, config: OcrConfig | None = None, engine: OcrEngine | None = None) -> None:
        self.config = config or OcrConfig()
        self._engine = engine
        self._lock = asyncio.Lock()

    @property
    def engine(self) -> OcrEngine:
        if self._engine is None:
            self._engine = _get_engine(self.config.engine)
        return self._engine

    def recognize_file(self, image_file: Path) -> OcrTextResult:
        return self.engine.run_on_image_file(
            config=self.config, image_file=image_file, source_relpath=None
        )

    def recognize_bytes(self, image_bytes: bytes) -> OcrTextResult:
        with tempfile.TemporaryDirectory(prefix="cartel_ocr_") as tmp:
            image_file = Path(tmp) / "cartel.img"
            image_file.write_bytes(image_bytes)
            return self.recognize_file(image_file)

    async def recognize(self, image_bytes: bytes) -> OcrTextResult:
        async with self._lock:
            return await asyncio.to_thread(self.recognize_bytes, image_bytes)

    def reset(self) -> None:
        """Drop the engine instance; the next recognition creates a fresh one."""
        self._engine = None
