"""Domain layer - perforation geometry, placement and measurement."""

from .brightness import BrightnessGrid, BrightnessSample, map_size
from .catalog import PATTERN_CATALOG, SHAPE_CATALOG, PatternInfo, ShapeInfo
from .exceptions import (
    DegenerateInputError,
    ImageDecodeError,
    InvalidPatternError,
    InvalidShapeError,
    PerforationError,
    SerializationError,
    UnsupportedFormatError,
)
from .services import (
    PATTERN_STRATEGIES,
    ImageDrivenGenerator,
    ImageGenerationResult,
    ImageProcessingOptions,
    PatternGenerator,
    StatisticsCalculator,
    compute_statistics,
    shape_area,
)
from .units import MM_PER_INCH, UnitConverter, convert_length
from .value_objects import (
    ExportFormat,
    ExportSettings,
    LayerSettings,
    PanelSpec,
    PatternKind,
    PdfSettings,
    Perforation,
    PerforationSettings,
    Point,
    ShapeKind,
    Spacing,
    Statistics,
    Units,
)

__all__ = [
    "BrightnessGrid",
    "BrightnessSample",
    "DegenerateInputError",
    "ExportFormat",
    "ExportSettings",
    "ImageDecodeError",
    "ImageDrivenGenerator",
    "ImageGenerationResult",
    "ImageProcessingOptions",
    "InvalidPatternError",
    "InvalidShapeError",
    "LayerSettings",
    "MM_PER_INCH",
    "PATTERN_CATALOG",
    "PATTERN_STRATEGIES",
    "PanelSpec",
    "PatternGenerator",
    "PatternInfo",
    "PatternKind",
    "PdfSettings",
    "Perforation",
    "PerforationError",
    "PerforationSettings",
    "Point",
    "SHAPE_CATALOG",
    "SerializationError",
    "ShapeInfo",
    "ShapeKind",
    "Spacing",
    "Statistics",
    "StatisticsCalculator",
    "UnitConverter",
    "Units",
    "UnsupportedFormatError",
    "compute_statistics",
    "convert_length",
    "map_size",
    "shape_area",
]
