from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .artifacts import write_ocr_json_artifact
from .contracts import OcrConfig
from .module import run_ocr_on_image_relpath


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="artwork-ocr",
        description="Recognize the text of a museum label image and emit it as JSON.",
    )
    p.add_argument("--data-root", required=True, type=Path, help="Folder holding label photos.")
    p.add_argument("--image-relpath", required=True, help="Label photo, relative to --data-root.")
    p.add_argument("--out", required=True, type=Path, help="Where to write the JSON result.")
    p.add_argument(
        "--confidence-floor",
        type=float,
        default=0.0,
        help="Ignore words recognized with less than this fraction (0..1) of full confidence.",
    )
    p.add_argument("--language", default="fra+eng", help="tesseract -l value (default: fra+eng).")
    p.add_argument("--psm", type=int, default=None, help="tesseract --psm value.")
    p.add_argument("--timeout-s", type=float, default=120.0)
    p.add_argument("--compute-source-sha256", action="store_true", help="Record the photo's SHA-256 in meta.")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    result = run_ocr_on_image_relpath(
        config=OcrConfig(
            data_root=args.data_root,
            confidence_floor=args.confidence_floor,
            language=args.language,
            psm=args.psm,
            timeout_s=args.timeout_s,
            compute_source_sha256=args.compute_source_sha256,
        ),
        image_relpath=args.image_relpath,
    )
    write_ocr_json_artifact(result=result, out_file=args.out)
    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
