"""Image loading, cover-resizing and transport encoding.

The classifier expects a fixed square input. Images are scaled up or down
until they cover the square, centred, and the overflowing axis is clipped
(center-crop, never letterbox).
"""

from __future__ import annotations

import base64
import io
import logging
import struct
from dataclasses import dataclass
from typing import TYPE_CHECKING

from PIL import Image, ImageOps, UnidentifiedImageError

from describex.errors import ImageEncodingError, ImageSelectionError

if TYPE_CHECKING:
    from describex.config import Settings

logger = logging.getLogger(__name__)

DEFAULT_SIZE = 224
DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Pillow surfaces malformed EXIF blocks as any of these.
_EXIF_ERRORS = (OSError, ValueError, SyntaxError, KeyError, TypeError, struct.error)

_FORMATS: dict[str, tuple[str, str]] = {
    "png": ("PNG", "image/png"),
    "jpeg": ("JPEG", "image/jpeg"),
    "webp": ("WEBP", "image/webp"),
}


@dataclass(frozen=True)
class CoverGeometry:
    """Placement of a scaled image on a square canvas.

    ``x`` and ``y`` are the canvas coordinates of the scaled image's top-left
    corner; at most one of them is negative.
    """

    scale: float
    width: float
    height: float
    x: float
    y: float


@dataclass(frozen=True)
class EncodedImage:
    """Transport bytes for a single submit."""

    data: bytes
    content_type: str
    width: int
    height: int


def cover_geometry(width: int, height: int, size: int = DEFAULT_SIZE) -> CoverGeometry:
    """Compute scale and offset that make a ``width`` x ``height`` image cover ``size`` x ``size``."""
    if width <= 0 or height <= 0:
        raise ImageEncodingError(f"Cannot scale an image of size {width}x{height}")
    scale = max(size / width, size / height)
    scaled_width = width * scale
    scaled_height = height * scale
    return CoverGeometry(
        scale=scale,
        width=scaled_width,
        height=scaled_height,
        x=size / 2 - scaled_width / 2,
        y=size / 2 - scaled_height / 2,
    )


def load_image(data: bytes, settings: Settings) -> Image.Image:
    """Decode a selected file into an upright image.

    Raises:
        ImageSelectionError: If the file is too large, not an image, exceeds
            the pixel limit, or carries unreadable EXIF orientation.
    """
    if not data:
        raise ImageSelectionError("No file selected")
    if len(data) > settings.max_file_size:
        raise ImageSelectionError(f"File exceeds {settings.max_file_size} bytes")

    try:
        image = Image.open(io.BytesIO(data))
        if image.width * image.height > settings.max_image_pixels:
            raise ImageSelectionError(f"Image exceeds {settings.max_image_pixels} pixels")
        image.load()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageSelectionError(f"Cannot read image: {exc}") from exc

    # Natural dimensions are the displayed ones, after EXIF rotation.
    try:
        return ImageOps.exif_transpose(image)
    except _EXIF_ERRORS as exc:
        raise ImageSelectionError(f"Cannot read image orientation: {exc}") from exc


def resize(image: Image.Image, size: int = DEFAULT_SIZE) -> Image.Image:
    """Draw ``image`` scaled to cover a ``size`` x ``size`` canvas, centred."""
    geometry = cover_geometry(image.width, image.height, size)
    # Canvas region expressed in source pixel coordinates.
    box = (
        -geometry.x / geometry.scale,
        -geometry.y / geometry.scale,
        (size - geometry.x) / geometry.scale,
        (size - geometry.y) / geometry.scale,
    )
    source = image if image.mode in ("RGB", "RGBA") else image.convert("RGBA")
    return source.resize((size, size), Image.Resampling.BILINEAR, box=box)


def encode(image: Image.Image, settings: Settings) -> EncodedImage:
    """Resize ``image`` and compress it into transport bytes.

    Raises:
        ImageEncodingError: If Pillow fails to resize or save the canvas.
    """
    pil_format, content_type = _FORMATS[settings.image_format]
    try:
        canvas = resize(image, settings.image_size)
        options: dict[str, object] = {}
        if pil_format != "PNG":
            options["quality"] = round(settings.image_quality * 100)
        if pil_format == "JPEG":
            canvas = canvas.convert("RGB")
        buffer = io.BytesIO()
        canvas.save(buffer, format=pil_format, **options)
    except (OSError, ValueError) as exc:
        raise ImageEncodingError(f"Cannot encode image: {exc}") from exc

    logger.debug("Encoded %dx%d image as %s (%d bytes)", canvas.width, canvas.height, content_type, buffer.tell())
    return EncodedImage(
        data=buffer.getvalue(),
        content_type=content_type,
        width=canvas.width,
        height=canvas.height,
    )


def to_data_url(data: bytes, content_type: str | None) -> str:
    """Return ``data`` as a data URL usable as an image source."""
    media_type = content_type or DEFAULT_CONTENT_TYPE
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{media_type};base64,{payload}"
