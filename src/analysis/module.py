from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable

from cartel.parse_cartel import parse_cartel_text
from colors.extract import FALLBACK_COLOR, try_dominant_color
from contracts.artwork import AiEnrichment, CartelData
from contracts.image import ColorResult
from fusion.merge import empty_artwork_record, merge_artwork_data
from ocr.module import OcrWorker

from .contracts import AnalysisConfig, AnalysisResult, AnalysisSources
from .enrichment import AiEnrichmentClient

logger = logging.getLogger(__name__)

ProgressHook = Callable[[int, int, str], None]

STEP_COLOR = "color"
STEP_OCR = "ocr"
STEP_AI = "ai"

STEP_MESSAGES = {
    STEP_COLOR: "Extracting colors",
    STEP_OCR: "Reading label",
    STEP_AI: "AI analysis",
}
MERGE_MESSAGE = "Merging data"


class _Progress:
    def __init__(self, hook: ProgressHook | None, total: int) -> None:
        self.hook = hook
        self.total = total
        self.done = 0

    def advance(self, message: str) -> None:
        self.done += 1
        if self.hook is None:
            return
        try:
            self.hook(self.done, self.total, message)
        except Exception:
            logger.exception("progress callback failed (step %d/%d)", self.done, self.total)


class ArtworkAnalyzer:
    """
    Runs color extraction, label OCR and AI enrichment concurrently, then merges.

    The OCR worker and the enrichment client are owned by the caller; without them the
    corresponding step is skipped. Each step degrades on its own: a failing source never
    aborts the others.
    """

    def __init__(
        self,
        *,
        ocr_worker: OcrWorker | None = None,
        enrichment_client: AiEnrichmentClient | None = None,
        config: AnalysisConfig | None = None,
    ) -> None:
        self.ocr_worker = ocr_worker
        self.enrichment_client = enrichment_client
        self.config = config or AnalysisConfig()

    def plan_steps(self, *, has_cartel: bool, use_ai_enrichment: bool) -> list[str]:
        steps = [STEP_COLOR]
        if has_cartel and self.ocr_worker is not None:
            steps.append(STEP_OCR)
        if use_ai_enrichment and self.enrichment_client is not None:
            steps.append(STEP_AI)
        return steps

    async def _color(self, artwork_image: bytes) -> ColorResult | None:
        try:
            return await asyncio.to_thread(try_dominant_color, artwork_image)
        except Exception as e:
            logger.warning("color extraction failed: %r", e)
            return None

    async def _ocr(self, worker: OcrWorker, cartel_image: bytes) -> CartelData | None:
        try:
            result = await worker.recognize(cartel_image)
        except Exception as e:
            logger.warning("label OCR failed: %r", e)
            return None

        if not result.ok:
            logger.info("label OCR returned errors: %s", [err.code for err in result.errors])
            return None
        if result.confidence <= self.config.ocr_confidence_threshold:
            logger.info(
                "label OCR confidence %.1f at or below %.1f; ignoring text",
                result.confidence,
                self.config.ocr_confidence_threshold,
            )
            return None

        parsed = parse_cartel_text(result.text)
        return replace(parsed, raw_text=result.text, confidence=result.confidence)

    async def _ai(self, client: AiEnrichmentClient, artwork_image: bytes) -> AiEnrichment | None:
        try:
            return await client.enrich(artwork_image)
        except Exception as e:
            logger.warning("AI enrichment failed: %r", e)
            return None

    async def analyze(
        self,
        artwork_image: bytes,
        *,
        cartel_image: bytes | None = None,
        use_ai_enrichment: bool = True,
        on_progress: ProgressHook | None = None,
    ) -> AnalysisResult:
        steps = self.plan_steps(has_cartel=cartel_image is not None, use_ai_enrichment=use_ai_enrichment)
        progress = _Progress(on_progress, total=len(steps) + 1)

        async def tracked(step: str, work: Awaitable[Any]) -> Any:
            out = await work
            progress.advance(STEP_MESSAGES[step])
            return out

        try:
            work: dict[str, Awaitable[Any]] = {STEP_COLOR: self._color(artwork_image)}
            if STEP_OCR in steps and self.ocr_worker is not None and cartel_image is not None:
                work[STEP_OCR] = self._ocr(self.ocr_worker, cartel_image)
            if STEP_AI in steps and self.enrichment_client is not None:
                work[STEP_AI] = self._ai(self.enrichment_client, artwork_image)

            outputs = await asyncio.gather(*(tracked(step, w) for step, w in work.items()))
            results = dict(zip(work, outputs))

            color: ColorResult | None = results.get(STEP_COLOR)
            ocr_data: CartelData | None = results.get(STEP_OCR)
            ai_data: AiEnrichment | None = results.get(STEP_AI)

            merged = merge_artwork_data(
                ocr_data=ocr_data,
                ai_data=ai_data,
                color_data=color if color is not None else FALLBACK_COLOR,
            )
            progress.advance(MERGE_MESSAGE)
        except Exception as e:
            logger.exception("artwork analysis failed")
            return AnalysisResult(
                success=False,
                data=empty_artwork_record(),
                sources=AnalysisSources(),
                error=str(e),
            )

        return AnalysisResult(
            success=True,
            data=merged,
            sources=AnalysisSources(
                has_ocr=ocr_data is not None,
                has_ai=ai_data is not None,
                has_color=color is not None,
            ),
        )
