"""Value objects for the perforation domain."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from .exceptions import DegenerateInputError, InvalidPatternError, InvalidShapeError


class Units(str, Enum):
    """Physical units a panel or an export can be expressed in."""

    INCHES = "inches"
    MM = "mm"

    @property
    def label(self) -> str:
        """Suffix used in dimension annotations."""
        return '"' if self is Units.INCHES else "mm"


class ShapeKind(str, Enum):
    """Perforation shapes.

    UNKNOWN is the explicit fallback for shape names that are not part of
    the catalogue. It is rendered and measured as a circle.

    Attributes:
        CIRCLE: Round hole, size is the diameter.
        SQUARE: Square hole, size is the edge length.
        RECTANGLE: 4:3 rectangle, size is the long edge.
        HEXAGON: Regular hexagon, size is the corner-to-corner diameter.
        TRIANGLE: Equilateral triangle, size is the edge length.
        CUSTOM: User supplied outline (SVG path data).
        UNKNOWN: Unrecognized shape name.
    """

    CIRCLE = "circle"
    SQUARE = "square"
    RECTANGLE = "rectangle"
    HEXAGON = "hexagon"
    TRIANGLE = "triangle"
    CUSTOM = "custom"
    UNKNOWN = "unknown"

    @classmethod
    def coerce(cls, value: ShapeKind | str) -> ShapeKind:
        """Resolve a shape value, mapping unrecognized names to UNKNOWN.

        Raises:
            InvalidShapeError: If value is not a string at all.
        """
        if isinstance(value, ShapeKind):
            return value
        if not isinstance(value, str):
            raise InvalidShapeError(value)
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class PatternKind(str, Enum):
    """Placement algorithms.

    CUSTOM is accepted by the catalogue but has no generator; asking for it
    fails with InvalidPatternError.
    """

    GRID = "grid"
    STAGGERED = "staggered"
    RANDOM = "random"
    RADIAL = "radial"
    CUSTOM = "custom"

    @classmethod
    def coerce(cls, value: PatternKind | str) -> PatternKind:
        """Resolve a pattern value.

        Raises:
            InvalidPatternError: If value is not a known pattern name.
        """
        if isinstance(value, PatternKind):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidPatternError(value)


@dataclass(frozen=True)
class Point:
    """A position in panel space."""

    x: float
    y: float


@dataclass(frozen=True)
class PanelSpec:
    """The rectangular sheet being perforated.

    Attributes:
        width: Panel width in ``units``.
        height: Panel height in ``units``.
        units: Physical units of width, height and every length derived
            from this panel (spacing, sizes, positions).
    """

    width: float
    height: float
    units: Units = Units.INCHES

    def __post_init__(self) -> None:
        if not isinstance(self.units, Units):
            object.__setattr__(self, "units", Units(self.units))

    @property
    def area(self) -> float:
        return self.width * self.height

    def validate(self) -> None:
        """Reject dimensions that cannot describe a panel.

        Raises:
            DegenerateInputError: If a dimension is negative or not finite.
        """
        for name, value in (("width", self.width), ("height", self.height)):
            if not math.isfinite(value) or value < 0:
                raise DegenerateInputError(
                    f"Panel {name} must be a finite, non-negative number (got {value})"
                )


@dataclass(frozen=True)
class Spacing:
    """Center-to-center spacing between perforations, in panel units.

    For the radial pattern ``horizontal`` is the ring spacing and
    ``vertical`` is the angular spacing in tens of degrees.
    """

    horizontal: float
    vertical: float
    diagonal: float | None = None

    def validate(self) -> None:
        for name, value in (("horizontal", self.horizontal), ("vertical", self.vertical)):
            if not math.isfinite(value) or value <= 0:
                raise DegenerateInputError(
                    f"Spacing {name} must be a positive finite number (got {value})"
                )


DEFAULT_RANDOM_DENSITY = 0.7


@dataclass(frozen=True)
class PerforationSettings:
    """Parameters for one pattern generation.

    Callers must ensure ``max_size >= min_size``.

    Attributes:
        min_size: Smallest perforation size in panel units.
        max_size: Largest perforation size in panel units.
        shape: Shape of every perforation in the batch.
        pattern: Placement algorithm.
        spacing: Spacing between perforations.
        rotation: Base rotation in degrees applied to each perforation.
        density: Fraction of the grid count placed by the random pattern.
        custom_shape: SVG path data for custom shapes, in a unit box
            centered on the origin.
    """

    min_size: float
    max_size: float
    shape: ShapeKind
    pattern: PatternKind
    spacing: Spacing
    rotation: float = 0.0
    density: float | None = None
    custom_shape: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", ShapeKind.coerce(self.shape))

    @property
    def average_size(self) -> float:
        return (self.min_size + self.max_size) / 2

    @property
    def random_density(self) -> float:
        return DEFAULT_RANDOM_DENSITY if self.density is None else self.density


@dataclass(frozen=True)
class Perforation:
    """A single hole in a generated pattern.

    Attributes:
        id: Identifier, unique within one generation batch.
        position: Center of the hole in panel units.
        size: Diameter or edge length depending on shape.
        shape: Shape of the hole.
        rotation: Rotation in degrees about the center.
        path: Outline for custom shapes, SVG path data in a unit box.
    """

    id: str
    position: Point
    size: float
    shape: ShapeKind
    rotation: float = 0.0
    path: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "shape", ShapeKind.coerce(self.shape))


@dataclass(frozen=True)
class Statistics:
    """Aggregate measurements of a perforation batch on a panel."""

    total_perforations: int
    total_area: float
    total_perforation_area: float
    coverage: float
    average_size: float
    min_size: float
    max_size: float
    density: float


class ExportFormat(str, Enum):
    """Supported export formats."""

    DXF = "dxf"
    SVG = "svg"
    PDF = "pdf"


@dataclass(frozen=True)
class LayerSettings:
    """DXF layer names."""

    outline_layer: str = "OUTLINE"
    perforation_layer: str = "PERFORATIONS"
    dimension_layer: str = "DIMENSIONS"


PageSize = Literal["A4", "A3", "Letter", "Tabloid", "custom"]
Orientation = Literal["portrait", "landscape"]


@dataclass(frozen=True)
class PdfSettings:
    """Page setup for PDF export.

    Attributes:
        page_size: Named page preset, or "custom" to size the page to the
            panel plus two units.
        orientation: Page orientation.
        margin: Page margin in export units.
    """

    page_size: PageSize = "Letter"
    orientation: Orientation = "landscape"
    margin: float = 0.5


@dataclass(frozen=True)
class ExportSettings:
    """Options that drive a geometry serializer.

    Attributes:
        format: Target format.
        units: Units of the emitted geometry.
        scale: Extra scale factor applied to emitted geometry.
        include_outline: Draw the panel outline.
        include_dimensions: Draw width/height annotations.
        layer_settings: DXF layer names.
        pdf_settings: PDF page setup, defaults when None.
    """

    format: ExportFormat = ExportFormat.SVG
    units: Units = Units.INCHES
    scale: float = 1.0
    include_outline: bool = True
    include_dimensions: bool = True
    layer_settings: LayerSettings = field(default_factory=LayerSettings)
    pdf_settings: PdfSettings | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.format, ExportFormat):
            object.__setattr__(self, "format", ExportFormat(self.format))
        if not isinstance(self.units, Units):
            object.__setattr__(self, "units", Units(self.units))
