from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from contracts.image import CropBounds


class ImageFormat:
    JPEG = "JPEG"
    PNG = "PNG"
    WEBP = "WEBP"

    LOSSY = frozenset({JPEG, WEBP})


@dataclass(frozen=True, slots=True)
class AutoCropConfig:
    """
    Boundary-detection and re-encoding parameters.

    Defaults are explicit constants; the detector is deterministic for a given image.
    """

    edge_threshold: float = 50.0  # Sobel magnitude above which a pixel is an edge
    column_density: float = 0.05  # column is "artwork" when edges > density * image height
    row_density: float = 0.05  # row is "artwork" when edges > density * image width
    margin_ratio: float = 0.02  # outward margin, fraction of min(W, H)
    output_format: str = ImageFormat.JPEG
    quality: int = 92  # lossy formats only

    def __post_init__(self) -> None:
        if not (0.0 <= self.edge_threshold <= 255.0):
            raise ValueError("edge_threshold must be within [0, 255]")
        if not (0.0 <= self.column_density <= 1.0) or not (0.0 <= self.row_density <= 1.0):
            raise ValueError("column_density and row_density must be within [0, 1]")
        if not (0.0 <= self.margin_ratio < 0.5):
            raise ValueError("margin_ratio must be within [0, 0.5)")
        if self.output_format not in (ImageFormat.JPEG, ImageFormat.PNG, ImageFormat.WEBP):
            raise ValueError(f"Unsupported output_format: {self.output_format!r}")
        if not (1 <= self.quality <= 100):
            raise ValueError("quality must be within [1, 100]")


@dataclass(frozen=True, slots=True)
class AutoCropError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class AutoCropResult:
    """
    Outcome of detecting and applying a crop to one image file.

    On failure `ok` is False, `bounds` is None and nothing is written.
    """

    ok: bool
    source_image: str | None
    image_size: dict[str, int] | None  # {"width_px": int, "height_px": int}
    bounds: CropBounds | None
    out_image: str | None
    errors: list[AutoCropError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        d = asdict(self)
        d["bounds"] = None if self.bounds is None else self.bounds.to_dict()
        return d
