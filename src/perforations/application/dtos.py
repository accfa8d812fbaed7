"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from perforations.domain import (
    BrightnessGrid,
    ExportSettings,
    ImageGenerationResult,
    ImageProcessingOptions,
    LayerSettings,
    PanelSpec,
    PatternKind,
    PdfSettings,
    Perforation,
    PerforationSettings,
    ShapeKind,
    Spacing,
    Statistics,
    Units,
    convert_length,
)

# Accepted ranges, in inches
PANEL_MIN_IN = 1.0
PANEL_MAX_IN = 120.0
SIZE_MIN_IN = 0.0625
SIZE_MAX_IN = 6.0
SPACING_MIN_IN = 0.125
SPACING_MAX_IN = 12.0
SCALE_MIN = 0.1
SCALE_MAX = 10.0

PAGE_SIZES = ("A4", "A3", "Letter", "Tabloid", "custom")
ORIENTATIONS = ("portrait", "landscape")


def _valid_units(units: str) -> bool:
    return units in [u.value for u in Units]


def _in_range_inches(value: float, units: str, low: float, high: float) -> bool:
    inches = convert_length(value, units, Units.INCHES) if _valid_units(units) else value
    return low <= inches <= high


@dataclass
class PanelInput:
    """Input DTO for panel dimensions."""

    width: float
    height: float
    units: str = "inches"

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not _valid_units(self.units):
            errors.append("Units must be inches or mm")
        if not _in_range_inches(self.width, self.units, PANEL_MIN_IN, PANEL_MAX_IN):
            errors.append("Panel width must be between 1 and 120 inches")
        if not _in_range_inches(self.height, self.units, PANEL_MIN_IN, PANEL_MAX_IN):
            errors.append("Panel height must be between 1 and 120 inches")
        return errors

    def to_panel_spec(self) -> PanelSpec:
        return PanelSpec(width=self.width, height=self.height, units=Units(self.units))


@dataclass
class PerforationSettingsInput:
    """Input DTO for pattern generation parameters.

    Lengths are in the panel's units.
    """

    min_size: float
    max_size: float
    horizontal_spacing: float
    vertical_spacing: float
    shape: str = "circle"
    pattern: str = "grid"
    rotation: float = 0.0
    density: float | None = None
    custom_shape: str | None = None

    def validate(self, units: str = "inches") -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        if not _in_range_inches(self.min_size, units, SIZE_MIN_IN, SIZE_MAX_IN):
            errors.append("Minimum size must be between 1/16 and 6 inches")
        if not _in_range_inches(self.max_size, units, SIZE_MIN_IN, SIZE_MAX_IN):
            errors.append("Maximum size must be between 1/16 and 6 inches")
        if self.max_size < self.min_size:
            errors.append("Maximum size must be greater than or equal to minimum size")
        if not _in_range_inches(self.horizontal_spacing, units, SPACING_MIN_IN, SPACING_MAX_IN):
            errors.append("Horizontal spacing must be between 1/8 and 12 inches")
        if not _in_range_inches(self.vertical_spacing, units, SPACING_MIN_IN, SPACING_MAX_IN):
            errors.append("Vertical spacing must be between 1/8 and 12 inches")

        valid_shapes = [s.value for s in ShapeKind if s is not ShapeKind.UNKNOWN]
        if self.shape not in valid_shapes:
            errors.append(f"Shape must be one of: {', '.join(valid_shapes)}")
        elif self.shape == ShapeKind.CUSTOM.value and not self.custom_shape:
            errors.append("Custom shape requires an SVG path")

        valid_patterns = [p.value for p in PatternKind]
        if self.pattern not in valid_patterns:
            errors.append(f"Pattern must be one of: {', '.join(valid_patterns)}")
        if self.density is not None and not 0 <= self.density <= 1:
            errors.append("Density must be between 0 and 1")
        return errors

    def to_settings(self) -> PerforationSettings:
        return PerforationSettings(
            min_size=self.min_size,
            max_size=self.max_size,
            shape=ShapeKind.coerce(self.shape),
            pattern=PatternKind.coerce(self.pattern),
            spacing=Spacing(self.horizontal_spacing, self.vertical_spacing),
            rotation=self.rotation,
            density=self.density,
            custom_shape=self.custom_shape,
        )


@dataclass
class GenerationInput:
    """Input DTO for pattern generation.

    Attributes:
        panel: Panel dimensions.
        settings: Generation parameters.
        brightness: Scalar mean brightness or a brightness grid for
            image-driven sizing; None for constant sizes.
        invert: Darker brightness gives larger perforations.
        seed: Seed for the random pattern.
        dpi: Compute resolution override.
    """

    panel: PanelInput
    settings: PerforationSettingsInput
    brightness: float | BrightnessGrid | None = None
    invert: bool = True
    seed: int | None = None
    dpi: float | None = None

    def validate(self) -> list[str]:
        errors = self.panel.validate() + self.settings.validate(self.panel.units)
        if isinstance(self.brightness, (int, float)) and not 0 <= self.brightness <= 255:
            errors.append("Brightness must be between 0 and 255")
        if self.dpi is not None and self.dpi <= 0:
            errors.append("DPI must be positive")
        return errors


@dataclass
class GenerationOutput:
    """Output DTO containing a generated pattern.

    Attributes:
        perforations: Generated perforations in panel units.
        statistics: Statistics of the batch, None when generation failed.
        errors: List of error messages if generation failed.
        id: Identifier of this generation.
        generated_at: UTC time of generation.
        panel: Panel the pattern was generated for.
        settings: Resolved generation settings.
    """

    perforations: tuple[Perforation, ...]
    statistics: Statistics | None
    errors: list[str] = field(default_factory=list)
    id: str = ""
    generated_at: datetime | None = None
    panel: PanelSpec | None = None
    settings: PerforationSettings | None = None

    @property
    def is_valid(self) -> bool:
        """Check if the pattern was generated successfully."""
        return len(self.errors) == 0


@dataclass
class StatisticsEstimate:
    """Statistics extrapolated from a reduced sample panel."""

    estimated_perforations: int
    estimated_coverage: float
    average_size: float
    density: float
    panel_area: float


@dataclass
class Recommendations:
    """Suggested settings for a panel size and image character."""

    size_min: float
    size_max: float
    size_recommended: float
    spacing_horizontal: float
    spacing_vertical: float
    pattern: PatternKind
    shape: ShapeKind
    estimated_holes: int
    coverage: str


@dataclass
class ExportInput:
    """Input DTO for exporting a pattern."""

    panel: PanelInput
    perforations: Sequence[Perforation]
    format: str = "svg"
    units: str = "inches"
    scale: float = 1.0
    include_outline: bool = True
    include_dimensions: bool = True
    layer_settings: LayerSettings | None = None
    pdf_settings: PdfSettings | None = None
    generated_at: datetime | None = None

    def validate(self, available_formats: Sequence[str]) -> list[str]:
        """Validate input and return list of error messages."""
        errors = self.panel.validate()
        if self.format not in available_formats:
            errors.append(f"Format must be one of: {', '.join(available_formats)}")
        if not _valid_units(self.units):
            errors.append("Units must be inches or mm")
        if not SCALE_MIN <= self.scale <= SCALE_MAX:
            errors.append("Scale must be between 0.1 and 10")
        if self.pdf_settings is not None:
            if self.pdf_settings.page_size not in PAGE_SIZES:
                errors.append(f"Page size must be one of: {', '.join(PAGE_SIZES)}")
            if self.pdf_settings.orientation not in ORIENTATIONS:
                errors.append("Orientation must be portrait or landscape")
            if self.pdf_settings.margin < 0:
                errors.append("Margin cannot be negative")
        return errors

    def to_export_settings(self) -> ExportSettings:
        return ExportSettings(
            format=self.format,
            units=Units(self.units),
            scale=self.scale,
            include_outline=self.include_outline,
            include_dimensions=self.include_dimensions,
            layer_settings=self.layer_settings or LayerSettings(),
            pdf_settings=self.pdf_settings,
        )


@dataclass
class ExportOutput:
    """Output DTO from an export.

    Attributes:
        content: Encoded document.
        mime_type: MIME type of ``content``.
        filename: Suggested download filename.
        size: Length of ``content`` in bytes.
        format: Export format name.
        path: Where the document was written, when persisted.
        errors: List of error messages if the export failed.
    """

    content: bytes
    mime_type: str
    filename: str
    size: int
    format: str = ""
    path: Path | None = None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0


@dataclass
class ImageGenerationInput:
    """Input DTO for image-driven generation in canvas units."""

    image: bytes | Path
    canvas_width: float
    canvas_height: float
    options: ImageProcessingOptions = field(default_factory=ImageProcessingOptions)
    max_dimension: int | None = 1024

    def validate(self) -> list[str]:
        errors = self.options.validate()
        if self.canvas_width <= 0 or self.canvas_height <= 0:
            errors.append("Canvas dimensions must be positive")
        return errors


@dataclass
class ImageGenerationOutput:
    result: ImageGenerationResult | None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0
