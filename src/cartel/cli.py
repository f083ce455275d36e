from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

from ocr.contracts import OcrConfig
from ocr.module import OcrWorker

from .parse_cartel import parse_cartel_text


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="artwork-cartel",
        description="Extract artwork fields from a museum label (text file or label photo).",
    )
    src = p.add_mutually_exclusive_group(required=True)
    src.add_argument("--text", type=Path, help="UTF-8 text file holding recognized label text.")
    src.add_argument("--image", type=Path, help="Label photo; recognized with tesseract first.")
    p.add_argument("--language", default="fra+eng", help="Tesseract language hint (default: fra+eng).")
    p.add_argument("--out", type=Path, default=None, help="Optional JSON output file (stdout if omitted).")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.text is not None:
        cartel = parse_cartel_text(args.text.read_text(encoding="utf-8"))
    else:
        worker = OcrWorker(config=OcrConfig(language=args.language))
        ocr_result = worker.recognize_file(args.image)
        if not ocr_result.ok:
            for err in ocr_result.errors:
                print(f"{err.code}: {err.message}", file=sys.stderr)
            return 2
        cartel = parse_cartel_text(ocr_result.text)
        cartel = replace(cartel, confidence=ocr_result.confidence)

    payload = json.dumps(cartel.to_dict(), sort_keys=True, ensure_ascii=False, indent=2) + "\n"
    if args.out is not None:
        args.out.parent.mkdir(parents=True, exist_ok=True)
        args.out.write_text(payload, encoding="utf-8")
    else:
        print(payload, end="")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
