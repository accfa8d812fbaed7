"""Raster image loading and brightness analysis with Pillow."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from io import BytesIO
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image, UnidentifiedImageError

from perforations.domain.brightness import BrightnessGrid
from perforations.domain.exceptions import ImageDecodeError
from perforations.domain.services.image_sampler import brightness_histogram

logger = logging.getLogger(__name__)


MAX_IMAGE_BYTES = 50 * 1024 * 1024
# Pillow format name -> (file extension, MIME type)
FORMAT_TYPES: dict[str, tuple[str, str]] = {
    "JPEG": ("jpg", "image/jpeg"),
    "PNG": ("png", "image/png"),
    "GIF": ("gif", "image/gif"),
    "BMP": ("bmp", "image/bmp"),
    "WEBP": ("webp", "image/webp"),
}
SUPPORTED_FORMATS = tuple(FORMAT_TYPES)


@dataclass(frozen=True, eq=False)
class LoadedImage:
    """A decoded image with its brightness grid.

    Attributes:
        rgb: (H, W, 3) uint8 pixels, alpha flattened onto white.
        grid: Grayscale brightness of the same pixels.
        format: Pillow format name of the source, e.g. "PNG".
        channels: Channel count of the source image.
        size: Encoded size in bytes.
    """

    rgb: npt.NDArray[np.uint8] = field(repr=False)
    grid: BrightnessGrid = field(repr=False)
    format: str
    channels: int
    size: int

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


@dataclass(frozen=True)
class ImageStatistics:
    mean: int
    min: int
    max: int
    std_dev: int
    contrast: int
    histogram: list[int]


@dataclass(frozen=True)
class ImageAnalysis:
    width: int
    height: int
    channels: int
    format: str
    size: int
    statistics: ImageStatistics


def _flatten_alpha(image: Image.Image) -> Image.Image:
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        return Image.alpha_composite(background, rgba).convert("RGB")
    return image.convert("RGB")


def load_image(source: bytes | Path, max_dimension: int | None = None) -> LoadedImage:
    """Decode an image from bytes or a file.

    Args:
        source: Encoded image bytes, or a path to an image file.
        max_dimension: Downscale so neither side exceeds this many pixels.

    Raises:
        ImageDecodeError: If the data is too large, not an image, or in an
            unsupported format.
    """
    data = Path(source).read_bytes() if isinstance(source, Path) else bytes(source)
    if len(data) > MAX_IMAGE_BYTES:
        raise ImageDecodeError(
            f"Image is {len(data)} bytes; the limit is {MAX_IMAGE_BYTES} bytes"
        )

    try:
        with Image.open(BytesIO(data)) as image:
            image.load()
            image_format = image.format or "UNKNOWN"
            channels = len(image.getbands())
            rgb_image = _flatten_alpha(image)
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise ImageDecodeError(f"Could not decode image: {exc}") from exc

    if image_format not in SUPPORTED_FORMATS:
        raise ImageDecodeError(
            f"Unsupported image format: {image_format}. "
            f"Supported: {', '.join(SUPPORTED_FORMATS)}"
        )

    if max_dimension is not None and max(rgb_image.size) > max_dimension:
        original = rgb_image.size
        rgb_image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)
        logger.debug(f"Downscaled image from {original} to {rgb_image.size}")

    rgb = np.asarray(rgb_image, dtype=np.uint8)
    grid = BrightnessGrid(np.asarray(rgb_image.convert("L"), dtype=np.uint8))
    logger.info(
        f"Loaded {image_format} image {grid.width}x{grid.height} ({len(data)} bytes)"
    )
    return LoadedImage(rgb=rgb, grid=grid, format=image_format, channels=channels, size=len(data))


def analyze_image(image: LoadedImage) -> ImageAnalysis:
    """Brightness statistics of a loaded image (mean and std-dev rounded)."""
    values = image.grid.values.astype(np.float64)
    low = int(values.min())
    high = int(values.max())
    return ImageAnalysis(
        width=image.width,
        height=image.height,
        channels=image.channels,
        format=image.format,
        size=image.size,
        statistics=ImageStatistics(
            mean=int(np.floor(values.mean() + 0.5)),
            min=low,
            max=high,
            std_dev=int(np.floor(values.std() + 0.5)),
            contrast=high - low,
            histogram=brightness_histogram(image.grid),
        ),
    )


def encode_png(pixels: npt.ArrayLike) -> bytes:
    """Encode an (H, W, 3) RGB or (H, W, 4) RGBA uint8 array as PNG."""
    array = np.asarray(pixels, dtype=np.uint8)
    buffer = BytesIO()
    Image.fromarray(array).save(buffer, format="PNG")
    return buffer.getvalue()


__all__ = [
    "FORMAT_TYPES",
    "ImageAnalysis",
    "ImageStatistics",
    "LoadedImage",
    "MAX_IMAGE_BYTES",
    "SUPPORTED_FORMATS",
    "analyze_image",
    "encode_png",
    "load_image",
]
