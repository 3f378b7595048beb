"""Cover-resize, center-crop and re-encode images with Pillow.

The transform is a pure function of its input bytes and target geometry.
"""

import io

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps, UnidentifiedImageError

from core.models.errors import TransformError
from core.models.image import TARGET_GEOMETRY, TargetGeometry, TransformResult
from core.utils.constants import (
    FORMAT_MIME_TYPES,
    JPEG_QUALITY,
    PNG_COMPRESS_LEVEL,
    PNG_PALETTE_COLORS,
    WEBP_QUALITY,
)

logger = Logger(UTC=True)

_ALPHA_MODES = frozenset({"RGBA", "LA", "PA", "RGBa", "La"})


def _has_alpha(image: Image.Image) -> bool:
    if image.mode in _ALPHA_MODES:
        return True
    return image.mode == "P" and "transparency" in image.info


def _decode(data: bytes) -> tuple[Image.Image, str | None]:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise TransformError(
            message=f"Unable to decode image: {exc}",
            details={"size": len(data)},
        ) from exc

    return image, image.format


def _cover_crop(image: Image.Image, geometry: TargetGeometry) -> Image.Image:
    """Scale to cover the target box, then crop the excess around the center."""
    # Palette and bilevel images resize with nearest-neighbour only.
    working_mode = "RGBA" if _has_alpha(image) else "RGB"
    if image.mode != working_mode:
        image = image.convert(working_mode)

    return ImageOps.fit(
        image,
        geometry.size,
        method=Image.Resampling.LANCZOS,
        centering=(0.5, 0.5),
    )


def _encode(image: Image.Image, source_format: str | None) -> tuple[bytes, str]:
    buffer = io.BytesIO()

    if source_format == "PNG":
        if image.mode == "RGBA":
            palette = image.quantize(colors=PNG_PALETTE_COLORS, method=Image.Quantize.FASTOCTREE)
        else:
            palette = image.quantize(colors=PNG_PALETTE_COLORS)
        palette.save(buffer, format="PNG", optimize=True, compress_level=PNG_COMPRESS_LEVEL)
        output_format = "PNG"
    elif source_format == "WEBP":
        image.save(buffer, format="WEBP", quality=WEBP_QUALITY)
        output_format = "WEBP"
    else:
        # Everything else, known or not, becomes an opaque JPEG.
        image.convert("RGB").save(
            buffer,
            format="JPEG",
            quality=JPEG_QUALITY,
            optimize=True,
            progressive=True,
        )
        output_format = "JPEG"

    return buffer.getvalue(), FORMAT_MIME_TYPES[output_format]


def transform(data: bytes, geometry: TargetGeometry = TARGET_GEOMETRY) -> TransformResult:
    """Normalize orientation, cover-crop to ``geometry`` and re-encode.

    Output encoding follows the detected source format: PNG stays a
    palette-reduced PNG with transparency, WEBP stays WEBP, and anything
    else is written as JPEG.

    Raises:
        TransformError: If the input cannot be decoded or the output encoded
    """
    if not data:
        raise TransformError(message="Unable to decode image: empty input")

    source, source_format = _decode(data)

    try:
        with source:
            oriented = ImageOps.exif_transpose(source)
            fitted = _cover_crop(oriented, geometry)
            content, mime_type = _encode(fitted, source_format)
    except (OSError, ValueError) as exc:
        logger.exception("Image transform failed", extra={"source_format": source_format})
        raise TransformError(
            message=f"Unable to transform image: {exc}",
            details={"source_format": source_format},
        ) from exc

    logger.info(
        "Image transformed",
        extra={
            "source_format": source_format,
            "mime_type": mime_type,
            "input_size": len(data),
            "output_size": len(content),
            "width": geometry.width,
            "height": geometry.height,
        },
    )

    return TransformResult(content=content, mime_type=mime_type, source_format=source_format)


class ImageTransformer:
    """Applies ``transform`` with a fixed geometry."""

    def __init__(self, geometry: TargetGeometry = TARGET_GEOMETRY) -> None:
        self.geometry = geometry

    def transform(self, data: bytes) -> TransformResult:
        return transform(data, self.geometry)
