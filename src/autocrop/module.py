from __future__ import annotations

from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from contracts.image import CropBounds

from .boundary import detect_artwork_bounds
from .contracts import AutoCropConfig, AutoCropError, AutoCropResult
from .crop import apply_crop


def _params_dict(config: AutoCropConfig) -> dict[str, Any]:
    return {
        "edge_threshold": config.edge_threshold,
        "column_density": config.column_density,
        "row_density": config.row_density,
        "margin_ratio": config.margin_ratio,
        "output_format": config.output_format,
        "quality": config.quality,
    }


def _failure(
    *, config: AutoCropConfig, source_image: str, code: str, message: str, detail: dict[str, Any]
) -> AutoCropResult:
    return AutoCropResult(
        ok=False,
        source_image=source_image,
        image_size=None,
        bounds=None,
        out_image=None,
        errors=[AutoCropError(code=code, message=message, detail=detail)],
        meta={"params": _params_dict(config)},
    )


def run_autocrop_on_image_file(
    *,
    config: AutoCropConfig,
    image_file: Path,
    out_file: Path | None,
    bounds: CropBounds | None = None,
) -> AutoCropResult:
    """
    Detect the artwork rectangle in `image_file` and, when `out_file` is given, write the crop.

    `bounds` overrides detection (e.g. bounds adjusted interactively by the user); they are
    clamped to the image before use.
    """

    source_image = str(image_file)
    if not image_file.exists():
        return _failure(
            config=config,
            source_image=source_image,
            code="AUTOCROP_INPUT_NOT_FOUND",
            message="Input image file not found",
            detail={"image_file": source_image},
        )

    try:
        with Image.open(image_file) as im:
            im.load()
            image = im.copy()
    except (UnidentifiedImageError, OSError) as e:
        return _failure(
            config=config,
            source_image=source_image,
            code="AUTOCROP_DECODE_FAILED",
            message="Input image could not be decoded",
            detail={"image_file": source_image, "error": str(e)},
        )

    width, height = image.size
    meta: dict[str, Any] = {"params": _params_dict(config)}

    if bounds is None:
        chosen = detect_artwork_bounds(image, config)
        meta["bounds_origin"] = "detected"
    else:
        chosen = bounds.clamped(width, height)
        meta["bounds_origin"] = "provided"

    out_image: str | None = None
    if out_file is not None:
        data = apply_crop(image, chosen, image_format=config.output_format, quality=config.quality)
        out_file.parent.mkdir(parents=True, exist_ok=True)
        out_file.write_bytes(data)
        out_image = str(out_file)

    return AutoCropResult(
        ok=True,
        source_image=source_image,
        image_size={"width_px": width, "height_px": height},
        bounds=chosen,
        out_image=out_image,
        errors=[],
        meta=meta,
    )
