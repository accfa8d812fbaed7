"""Image-driven perforation placement in canvas space.

Unlike ``PatternGenerator`` this works on a brightness grid sampled per
position, so sizes vary across the image. Coordinates are canvas units
(display pixels), not physical units.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from ..brightness import BrightnessGrid, map_size
from ..value_objects import Perforation, Point, ShapeKind

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

PROCESSED_MARK = (255, 0, 0)
PREVIEW_HIGHLIGHT = (255, 100, 100, 200)
PREVIEW_DIM_ALPHA = 128


def _round_half_up(values: npt.ArrayLike) -> npt.NDArray[np.float64]:
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5)


def luminance(rgb: npt.ArrayLike) -> npt.NDArray[np.uint8]:
    """Grayscale brightness of an (H, W, 3+) RGB array, rounded half up."""
    array = np.asarray(rgb, dtype=np.float64)
    if array.ndim != 3 or array.shape[2] < 3:
        raise ValueError(f"Expected an (H, W, 3) RGB array (got shape {array.shape})")
    r, g, b = (array[..., i] for i in range(3))
    gray = LUMA_WEIGHTS[0] * r + LUMA_WEIGHTS[1] * g + LUMA_WEIGHTS[2] * b
    return np.clip(_round_half_up(gray), 0, 255).astype(np.uint8)


def grid_from_rgb(rgb: npt.ArrayLike) -> BrightnessGrid:
    return BrightnessGrid(luminance(rgb))


def placement_mask(
    values: npt.NDArray[np.uint8], threshold: float, invert: bool
) -> npt.NDArray[np.bool_]:
    """Pixels that receive a perforation: above the threshold, or below it when inverted."""
    return values < threshold if invert else values > threshold


@dataclass(frozen=True)
class ImageProcessingOptions:
    """Sampling options for image-driven generation.

    Attributes:
        min_size: Smallest perforation size (canvas units).
        max_size: Largest perforation size (canvas units).
        min_spacing: Spacing at 100% density.
        max_spacing: Spacing at 0% density.
        density: 0-100, higher samples more densely.
        snap_to_grid: Snap positions to ``grid_size``.
        grid_size: Snap pitch in canvas units.
        threshold: Brightness threshold (0-255) for placement.
        invert: Place on dark pixels and make darker pixels larger.
    """

    min_size: float = 2.0
    max_size: float = 20.0
    min_spacing: float = 5.0
    max_spacing: float = 50.0
    density: float = 50.0
    snap_to_grid: bool = False
    grid_size: float = 10.0
    threshold: float = 128.0
    invert: bool = True

    def validate(self) -> list[str]:
        errors = []
        if self.max_size < self.min_size:
            errors.append("max_size must be greater than or equal to min_size")
        if self.max_spacing < self.min_spacing:
            errors.append("max_spacing must be greater than or equal to min_spacing")
        if not 0 <= self.density <= 100:
            errors.append("density must be between 0 and 100")
        if self.snap_to_grid and self.grid_size <= 0:
            errors.append("grid_size must be positive when snapping to grid")
        if not 0 <= self.threshold <= 255:
            errors.append("threshold must be between 0 and 255")
        return errors


@dataclass(frozen=True)
class ImageSummary:
    total_perforations: int
    average_size: float
    coverage: float


@dataclass(frozen=True, eq=False)
class ImageGenerationResult:
    """Output of ImageDrivenGenerator.

    Attributes:
        perforations: Circles in canvas coordinates.
        summary: Count, mean size and canvas coverage percentage.
        processed: (H, W, 3) uint8 RGB copy of the source with sampled
            placement pixels marked red.
        base_spacing: Spacing derived from the density setting.
        sampling_step: Pixel step used to walk the image.
    """

    perforations: tuple[Perforation, ...]
    summary: ImageSummary
    processed: npt.NDArray[np.uint8] = field(repr=False)
    base_spacing: float = 0.0
    sampling_step: int = 1


class ImageDrivenGenerator:
    """Places circular perforations by sampling a brightness grid."""

    def generate(
        self,
        grid: BrightnessGrid,
        canvas_width: float,
        canvas_height: float,
        options: ImageProcessingOptions,
        rgb: npt.ArrayLike | None = None,
    ) -> ImageGenerationResult:
        """Sample ``grid`` fitted into the canvas.

        Args:
            grid: Brightness values of the source image.
            canvas_width: Canvas width in canvas units.
            canvas_height: Canvas height in canvas units.
            options: Sampling options.
            rgb: Optional original RGB pixels for the processed preview;
                the grid is rendered as gray when omitted.
        """
        img_width, img_height = grid.width, grid.height

        scale = min(canvas_width / img_width, canvas_height / img_height)
        offset_x = (canvas_width - img_width * scale) / 2
        offset_y = (canvas_height - img_height * scale) / 2

        base_spacing = options.min_spacing + (options.max_spacing - options.min_spacing) * (
            1 - options.density / 100
        )
        step = max(1, math.floor(base_spacing / scale)) if scale > 0 else 1

        processed = self._base_image(grid, rgb)
        mask = placement_mask(grid.values, options.threshold, options.invert)

        perforations: list[Perforation] = []
        total_size = 0.0
        total_area = 0.0

        for y in range(0, img_height, step):
            for x in range(0, img_width, step):
                if not mask[y, x]:
                    continue
                brightness = grid.at(x, y)
                size = map_size(brightness, options.min_size, options.max_size, options.invert)

                canvas_x = offset_x + x * scale
                canvas_y = offset_y + y * scale
                if options.snap_to_grid:
                    canvas_x = round(canvas_x / options.grid_size) * options.grid_size
                    canvas_y = round(canvas_y / options.grid_size) * options.grid_size

                if 0 <= canvas_x <= canvas_width and 0 <= canvas_y <= canvas_height:
                    perforations.append(
                        Perforation(
                            id=f"img-{x}-{y}",
                            position=Point(canvas_x, canvas_y),
                            size=size,
                            shape=ShapeKind.CIRCLE,
                            rotation=0.0,
                        )
                    )
                    total_size += size
                    total_area += math.pi * (size / 2) ** 2

                processed[y, x] = PROCESSED_MARK

        count = len(perforations)
        canvas_area = canvas_width * canvas_height
        summary = ImageSummary(
            total_perforations=count,
            average_size=total_size / count if count else 0.0,
            coverage=total_area / canvas_area * 100 if canvas_area > 0 else 0.0,
        )
        return ImageGenerationResult(
            perforations=tuple(perforations),
            summary=summary,
            processed=processed,
            base_spacing=base_spacing,
            sampling_step=step,
        )

    @staticmethod
    def _base_image(grid: BrightnessGrid, rgb: npt.ArrayLike | None) -> npt.NDArray[np.uint8]:
        if rgb is None:
            return np.repeat(grid.values[:, :, np.newaxis], 3, axis=2).copy()
        array = np.asarray(rgb)
        if array.shape[:2] != grid.values.shape:
            raise ValueError(
                f"RGB shape {array.shape[:2]} does not match brightness grid {grid.values.shape}"
            )
        return np.array(array[:, :, :3], dtype=np.uint8, copy=True)


def processing_preview(
    rgb: npt.ArrayLike, threshold: float, invert: bool = True
) -> npt.NDArray[np.uint8]:
    """RGBA overlay highlighting where perforations would be placed.

    Placement pixels become translucent red; everything else is the source
    at half intensity and half alpha.
    """
    source = np.asarray(rgb)
    mask = placement_mask(luminance(source), threshold, invert)

    preview = np.zeros((*mask.shape, 4), dtype=np.uint8)
    preview[..., :3] = (source[..., :3].astype(np.float64) * 0.5).astype(np.uint8)
    preview[..., 3] = PREVIEW_DIM_ALPHA
    preview[mask] = PREVIEW_HIGHLIGHT
    return preview


@dataclass(frozen=True)
class ThresholdSuggestions:
    median: int
    mean: int
    quarter: int
    three_quarter: int
    histogram: list[int]


def brightness_histogram(grid: BrightnessGrid) -> list[int]:
    """256-bin brightness histogram."""
    return np.bincount(grid.values.ravel(), minlength=256).astype(int).tolist()


def suggest_thresholds(grid: BrightnessGrid) -> ThresholdSuggestions:
    """Suggest threshold values from the brightness histogram."""
    histogram = brightness_histogram(grid)
    cumulative = np.cumsum(histogram)
    total = int(cumulative[-1])
    median = int(np.searchsorted(cumulative, total / 2))
    mean = int(_round_half_up(grid.mean))
    return ThresholdSuggestions(
        median=median,
        mean=mean,
        quarter=int(_round_half_up(median * 0.75)),
        three_quarter=int(_round_half_up(median * 1.25)),
        histogram=histogram,
    )


__all__ = [
    "ImageDrivenGenerator",
    "ImageGenerationResult",
    "ImageProcessingOptions",
    "ImageSummary",
    "ThresholdSuggestions",
    "brightness_histogram",
    "grid_from_rgb",
    "luminance",
    "placement_mask",
    "processing_preview",
    "suggest_thresholds",
]
