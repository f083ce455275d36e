from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

import httpx

from ocr.contracts import OcrConfig
from ocr.module import OcrWorker

from .contracts import AnalysisConfig, AnalysisResult
from .enrichment import AiEnrichmentClient, EnrichmentConfig
from .module import ArtworkAnalyzer


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="artwork-analyze",
        description="Analyze an artwork photo (and optional label photo) into one merged record.",
    )
    p.add_argument("image", type=Path, help="Artwork photograph (ideally already cropped).")
    p.add_argument("--cartel", type=Path, default=None, help="Optional museum label photograph.")
    p.add_argument("--ai-endpoint", default=None, help="AI vision service URL (AI step skipped without it).")
    p.add_argument("--ai-key", default=None, help="Bearer key for the AI vision service.")
    p.add_argument("--no-ai", action="store_true", help="Disable AI enrichment.")
    p.add_argument("--language", default="fra+eng", help="Tesseract language hint (default: fra+eng).")
    p.add_argument("--ocr-threshold", type=float, default=40.0, help="Minimum OCR confidence (0..100).")
    p.add_argument("--out", type=Path, default=None, help="Optional JSON output file (stdout if omitted).")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def _print_progress(step: int, total: int, message: str) -> None:
    print(f"[{step}/{total}] {message}", file=sys.stderr)


async def _run(args: argparse.Namespace) -> AnalysisResult:
    artwork = args.image.read_bytes()
    cartel = args.cartel.read_bytes() if args.cartel is not None else None

    ocr_worker = OcrWorker(config=OcrConfig(language=args.language)) if cartel is not None else None
    config = AnalysisConfig(ocr_confidence_threshold=args.ocr_threshold)

    async with httpx.AsyncClient() as client:
        enrichment = None
        if args.ai_endpoint and not args.no_ai:
            enrichment = AiEnrichmentClient(
                client, EnrichmentConfig(endpoint_url=args.ai_endpoint, api_key=args.ai_key)
            )
        analyzer = ArtworkAnalyzer(ocr_worker=ocr_worker, enrichment_client=enrichment, config=config)
        return await analyzer.analyze(
            artwork,
            cartel_image=cartel,
            use_ai_enrichment=not args.no_ai,
            on_progress=_print_progress if args.verbose else None,
        )


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    result = asyncio.run(_run(args))

    payload = json.dumps(result.to_dict(), sort_keys=True, ensure_ascii=False, indent=2) + "\n"
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(payload, encoding="utf-8")
    else:
        print(payload, end="")

    return 0 if result.success else 2


if __name__ == "__main__":
    raise SystemExit(main())
