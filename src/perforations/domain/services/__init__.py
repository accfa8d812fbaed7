"""Domain services for perforation placement and measurement."""

from .image_sampler import (
    ImageDrivenGenerator,
    ImageGenerationResult,
    ImageProcessingOptions,
    ImageSummary,
    ThresholdSuggestions,
    brightness_histogram,
    grid_from_rgb,
    luminance,
    processing_preview,
    suggest_thresholds,
)
from .patterns import (
    PATTERN_STRATEGIES,
    PatternGenerator,
    Placement,
    grid_pattern_count,
)
from .statistics import StatisticsCalculator, compute_statistics, shape_area

__all__ = [
    "ImageDrivenGenerator",
    "ImageGenerationResult",
    "ImageProcessingOptions",
    "ImageSummary",
    "PATTERN_STRATEGIES",
    "PatternGenerator",
    "Placement",
    "StatisticsCalculator",
    "ThresholdSuggestions",
    "brightness_histogram",
    "compute_statistics",
    "grid_from_rgb",
    "grid_pattern_count",
    "luminance",
    "processing_preview",
    "shape_area",
    "suggest_thresholds",
]
