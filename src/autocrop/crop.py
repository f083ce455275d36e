from __future__ import annotations

import io

from PIL import Image

from contracts.image import CropBounds

from .contracts import ImageFormat


def crop_image(image: Image.Image, bounds: CropBounds) -> Image.Image:
    """
    Copy the `bounds` sub-rectangle of `image` into a new image of size width x height.

    Bounds must satisfy the CropBounds invariant for this image; callers (typically the
    interactive crop UI) are responsible for guarding them, see CropBounds.clamped.
    """

    width, height = image.size
    if not bounds.fits(width, height):
        raise ValueError(
            f"Crop bounds {bounds.box()} do not fit inside a {width}x{height} image"
        )
    return image.crop(bounds.box())


def encode_image(image: Image.Image, *, image_format: str = ImageFormat.JPEG, quality: int = 92) -> bytes:
    fmt = image_format.upper()
    if fmt == "JPG":
        fmt = ImageFormat.JPEG

    out = image
    if fmt == ImageFormat.JPEG and out.mode not in ("RGB", "L"):
        # JPEG has no alpha channel.
        out = out.convert("RGB")

    buf = io.BytesIO()
    if fmt in ImageFormat.LOSSY:
        out.save(buf, format=fmt, quality=int(quality))
    else:
        out.save(buf, format=fmt)
    return buf.getvalue()


def apply_crop(
    image: Image.Image,
    bounds: CropBounds,
    *,
    image_format: str = ImageFormat.JPEG,
    quality: int = 92,
) -> bytes:
    """
    Deterministic pixel copy of `bounds` from `image`, re-encoded to `image_format`.

    `quality` applies to lossy formats only.
    """

    return encode_image(crop_image(image, bounds), image_format=image_format, quality=quality)
