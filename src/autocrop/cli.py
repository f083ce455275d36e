from __future__ import annotations

import argparse
import logging
from pathlib import Path

from contracts.image import CropBounds

from .artifacts import serialize_autocrop_result, write_autocrop_json_artifact
from .contracts import AutoCropConfig
from .module import run_autocrop_on_image_file


def _parse_bounds(value: str) -> CropBounds:
    try:
        x, y, w, h = (int(p) for p in value.split(","))
    except ValueError as e:
        raise argparse.ArgumentTypeError("bounds must be 'x,y,width,height'") from e
    return CropBounds(x=x, y=y, width=w, height=h, confidence=1.0)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="artwork-autocrop",
        description="Detect the artwork rectangle in a photograph and write the cropped image.",
    )
    p.add_argument("image", type=Path, help="Input photograph.")
    p.add_argument("--out-image", type=Path, default=None, help="Where to write the cropped image.")
    p.add_argument("--out", type=Path, default=None, help="Optional JSON artifact (stdout if omitted).")
    p.add_argument(
        "--bounds",
        type=_parse_bounds,
        default=None,
        help="Skip detection and crop to 'x,y,width,height' (clamped to the image).",
    )
    p.add_argument("--edge-threshold", type=float, default=50.0)
    p.add_argument("--margin-ratio", type=float, default=0.02)
    p.add_argument("--format", dest="output_format", default="JPEG", choices=["JPEG", "PNG", "WEBP"])
    p.add_argument("--quality", type=int, default=92, help="Encoder quality for lossy formats.")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    config = AutoCropConfig(
        edge_threshold=args.edge_threshold,
        margin_ratio=args.margin_ratio,
        output_format=args.output_format,
        quality=args.quality,
    )
    result = run_autocrop_on_image_file(
        config=config, image_file=args.image, out_file=args.out_image, bounds=args.bounds
    )

    if args.out is not None:
        write_autocrop_json_artifact(result=result, out_file=args.out)
    else:
        print(serialize_autocrop_result(result), end="")

    return 0 if result.ok else 2


if __name__ == "__main__":
    raise SystemExit(main())
