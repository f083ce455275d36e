from __future__ import annotations

import base64
import io
import json
import unittest
from unittest.mock import patch

import httpx
from PIL import Image

from analysis.contracts import AnalysisConfig
from analysis.enrichment import AiEnrichmentClient, EnrichmentConfig
from analysis.module import ArtworkAnalyzer
from contracts.artwork import AiEnrichment, MergedArtworkRecord
from ocr.contracts import OcrEngineName, OcrError, OcrTextResult

_LABEL_TEXT = "Water Lilies\nClaude Monet (1840-1926)\n1906\nOil on canvas\n89 x 93 cm"


def _png(color: tuple[int, int, int]) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (32, 32), color).save(buf, format="PNG")
    return buf.getvalue()


def _ocr_result(text: str, confidence: float, ok: bool = True) -> OcrTextResult:
    return OcrTextResult(
        ok=ok,
        engine=OcrEngineName.TESSERACT_CLI,
        source_image_relpath=None,
        text=text if ok else "",
        confidence=confidence,
        words=[],
        errors=[] if ok else [OcrError(code="OCR_BACKEND_ERROR", message="boom")],
        meta={},
    )


class _FakeOcrWorker:
    def __init__(self, result: OcrTextResult | None = None, exc: Exception | None = None) -> None:
        self.result = result
        self.exc = exc
        self.calls = 0

    async def recognize(self, image_bytes: bytes) -> OcrTextResult:
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        assert self.result is not None
        return self.result


class _FakeEnrichment:
    def __init__(self, answer: AiEnrichment | None = None, exc: Exception | None = None) -> None:
        self.answer = answer
        self.exc = exc
        self.calls = 0

    async def enrich(self, image_bytes: bytes) -> AiEnrichment:
        self.calls += 1
        if self.exc is not None:
            raise self.exc
        return self.answer or AiEnrichment()


class TestArtworkAnalyzer(unittest.IsolatedAsyncioTestCase):
    async def test_ai_failure_is_isolated(self) -> None:
        analyzer = ArtworkAnalyzer(enrichment_client=_FakeEnrichment(exc=RuntimeError("AI down")))

        with self.assertLogs("analysis.module", level="WARNING"):
            res = await analyzer.analyze(_png((255, 0, 0)))

        self.assertTrue(res.success)
        self.assertIsNone(res.error)
        self.assertFalse(res.sources.has_ai)
        self.assertFalse(res.sources.has_ocr)
        self.assertTrue(res.sources.has_color)
        self.assertEqual(res.data.dominant_color, "#ff0000")

    async def test_all_sources_merge(self) -> None:
        ai = AiEnrichment(title="Nymphéas", style="Impressionism", museum_city="Paris")
        analyzer = ArtworkAnalyzer(
            ocr_worker=_FakeOcrWorker(_ocr_result(_LABEL_TEXT, 87.5)),
            enrichment_client=_FakeEnrichment(answer=ai),
        )

        res = await analyzer.analyze(_png((0, 0, 255)), cartel_image=b"label")

        self.assertTrue(res.success)
        self.assertEqual(
            (res.sources.has_ocr, res.sources.has_ai, res.sources.has_color), (True, True, True)
        )
        self.assertEqual(res.data.title, "Water Lilies")
        self.assertEqual(res.data.artist, "Claude Monet")
        self.assertEqual(res.data.style, "Impressionism")
        self.assertEqual(res.data.museum_city, "Paris")
        self.assertEqual(res.data.cartel_raw_text, _LABEL_TEXT)
        self.assertEqual(res.data.dominant_color, "#0000ff")

    async def test_low_confidence_label_is_ignored(self) -> None:
        for confidence in (12.0, 40.0):
            analyzer = ArtworkAnalyzer(ocr_worker=_FakeOcrWorker(_ocr_result(_LABEL_TEXT, confidence)))
            res = await analyzer.analyze(_png((0, 0, 0)), cartel_image=b"label", use_ai_enrichment=False)
            self.assertTrue(res.success)
            self.assertFalse(res.sources.has_ocr, msg=f"confidence={confidence}")
            self.assertEqual(res.data.title, "")
            self.assertEqual(res.data.cartel_raw_text, "")

    async def test_threshold_is_configurable(self) -> None:
        analyzer = ArtworkAnalyzer(
            ocr_worker=_FakeOcrWorker(_ocr_result(_LABEL_TEXT, 30.0)),
            config=AnalysisConfig(ocr_confidence_threshold=20.0),
        )
        res = await analyzer.analyze(_png((0, 0, 0)), cartel_image=b"label")
        self.assertTrue(res.sources.has_ocr)

    async def test_ocr_errors_are_isolated(self) -> None:
        for worker in (
            _FakeOcrWorker(_ocr_result("", 0.0, ok=False)),
            _FakeOcrWorker(exc=OSError("worker crashed")),
        ):
            res = await ArtworkAnalyzer(ocr_worker=worker).analyze(_png((0, 0, 0)), cartel_image=b"label")
            self.assertTrue(res.success)
            self.assertFalse(res.sources.has_ocr)

    async def test_undecodable_artwork_uses_fallback_color(self) -> None:
        res = await ArtworkAnalyzer().analyze(b"not an image")
        self.assertTrue(res.success)
        self.assertFalse(res.sources.has_color)
        self.assertEqual(res.data.dominant_color, "#888888")

    async def test_merge_failure_reports_unsuccessful_analysis(self) -> None:
        with patch("analysis.module.merge_artwork_data", side_effect=RuntimeError("merge exploded")):
            with self.assertLogs("analysis.module", level="ERROR"):
                res = await ArtworkAnalyzer().analyze(_png((0, 0, 0)))

        self.assertFalse(res.success)
        self.assertEqual(res.error, "merge exploded")
        self.assertEqual(res.data, MergedArtworkRecord())
        self.assertEqual(res.to_dict()["data"]["title"], "")

    async def test_steps_are_planned_up_front(self) -> None:
        ocr = _FakeOcrWorker(_ocr_result(_LABEL_TEXT, 90.0))
        ai = _FakeEnrichment()
        analyzer = ArtworkAnalyzer(ocr_worker=ocr, enrichment_client=ai)

        await analyzer.analyze(_png((0, 0, 0)), use_ai_enrichment=False)

        self.assertEqual((ocr.calls, ai.calls), (0, 0))
        self.assertEqual(analyzer.plan_steps(has_cartel=True, use_ai_enrichment=True), ["color", "ocr", "ai"])
        self.assertEqual(ArtworkAnalyzer().plan_steps(has_cartel=True, use_ai_enrichment=True), ["color"])

    async def test_missing_collaborators_skip_their_steps(self) -> None:
        calls: list[tuple[int, int, str]] = []

        res = await ArtworkAnalyzer().analyze(
            _png((0, 0, 0)), cartel_image=b"label", on_progress=lambda s, t, m: calls.append((s, t, m))
        )

        self.assertTrue(res.success)
        self.assertEqual((res.sources.has_ocr, res.sources.has_ai, res.sources.has_color), (False, False, True))
        self.assertEqual([m for _, _, m in calls], ["Extracting colors", "Merging data"])

    async def test_progress_reports_each_step_and_merge(self) -> None:
        calls: list[tuple[int, int, str]] = []
        analyzer = ArtworkAnalyzer(
            ocr_worker=_FakeOcrWorker(_ocr_result(_LABEL_TEXT, 90.0)),
            enrichment_client=_FakeEnrichment(),
        )

        await analyzer.analyze(
            _png((0, 0, 0)), cartel_image=b"label", on_progress=lambda s, t, m: calls.append((s, t, m))
        )

        self.assertEqual([(s, t) for s, t, _ in calls], [(1, 4), (2, 4), (3, 4), (4, 4)])
        self.assertEqual(calls[-1][2], "Merging data")

    async def test_progress_callback_errors_do_not_break_analysis(self) -> None:
        def bad_progress(step: int, total: int, message: str) -> None:
            raise ValueError("ui gone")

        with self.assertLogs("analysis.module", level="ERROR"):
            res = await ArtworkAnalyzer().analyze(_png((0, 0, 0)), on_progress=bad_progress)
        self.assertTrue(res.success)


class TestAiEnrichmentClient(unittest.IsolatedAsyncioTestCase):
    async def test_posts_base64_and_unwraps_data(self) -> None:
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(
                200,
                json={"data": {"title": "The Bedroom", "artist": "Vincent van Gogh", "year": 1889, "style": None}},
            )

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = AiEnrichmentClient(http, EnrichmentConfig(endpoint_url="https://ai.example/enrich", api_key="s3cret"))
            out = await client.enrich(b"\x00\x01image")

        self.assertEqual(base64.b64decode(seen["body"]["imageBase64"]), b"\x00\x01image")
        self.assertEqual(seen["auth"], "Bearer s3cret")
        self.assertEqual(out.title, "The Bedroom")
        self.assertEqual(out.year, "1889")
        self.assertEqual(out.style, "")

    async def test_unwrapped_payload_and_http_errors(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/broken":
                return httpx.Response(500)
            return httpx.Response(200, json={"title": "Olympia"})

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            ok = AiEnrichmentClient(http, EnrichmentConfig(endpoint_url="https://ai.example/enrich"))
            self.assertEqual((await ok.enrich(b"x")).title, "Olympia")

            broken = AiEnrichmentClient(http, EnrichmentConfig(endpoint_url="https://ai.example/broken"))
            with self.assertRaises(httpx.HTTPStatusError):
                await broken.enrich(b"x")

    def test_config_is_validated(self) -> None:
        with self.assertRaises(ValueError):
            EnrichmentConfig(endpoint_url="ftp://ai.example")
        with self.assertRaises(ValueError):
            AnalysisConfig(ocr_confidence_threshold=150)


if __name__ == "__main__":
    unittest.main()
