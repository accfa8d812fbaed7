"""Common Pydantic schemas shared across requests and responses."""

from pydantic import BaseModel, Field

from perforations.domain.value_objects import (
    Orientation,
    PageSize,
    PatternKind,
    ShapeKind,
    Units,
)


class PanelSchema(BaseModel):
    """Panel dimensions."""

    width: float = Field(..., gt=0, description="Panel width in panel units")
    height: float = Field(..., gt=0, description="Panel height in panel units")
    units: Units = Field(default=Units.INCHES, description="Panel units")


class SpacingSchema(BaseModel):
    horizontal: float = Field(..., gt=0, description="Center-to-center column pitch")
    vertical: float = Field(..., gt=0, description="Center-to-center row pitch")


class PerforationSettingsSchema(BaseModel):
    """Pattern generation parameters, lengths in panel units."""

    min_size: float = Field(..., gt=0, description="Smallest perforation size")
    max_size: float = Field(..., gt=0, description="Largest perforation size")
    shape: ShapeKind = Field(default=ShapeKind.CIRCLE, description="Perforation shape")
    pattern: PatternKind = Field(default=PatternKind.GRID, description="Placement pattern")
    spacing: SpacingSchema
    rotation: float = Field(default=0.0, description="Base rotation in degrees")
    density: float | None = Field(
        default=None, ge=0, le=1, description="Random pattern fill fraction"
    )
    custom_shape: str | None = Field(
        default=None, description="SVG path data for custom shapes"
    )


class PointSchema(BaseModel):
    x: float
    y: float


class PerforationSchema(BaseModel):
    """A single perforation, in panel units."""

    id: str = Field(..., description="Identifier unique within the batch")
    position: PointSchema
    size: float = Field(..., ge=0, description="Diameter or edge length")
    shape: str = Field(default="circle", description="Unknown names render as circles")
    rotation: float = Field(default=0.0, description="Rotation in degrees")
    path: str | None = Field(default=None, description="Custom outline path data")


class LayerSettingsSchema(BaseModel):
    outline_layer: str = Field(default="OUTLINE", min_length=1)
    perforation_layer: str = Field(default="PERFORATIONS", min_length=1)
    dimension_layer: str = Field(default="DIMENSIONS", min_length=1)


class PdfSettingsSchema(BaseModel):
    page_size: PageSize = Field(default="Letter", description="Page preset or 'custom'")
    orientation: Orientation = Field(default="landscape")
    margin: float = Field(default=0.5, ge=0, description="Margin in export units")


class StatisticsSchema(BaseModel):
    """Aggregate measurements of a perforation batch."""

    total_perforations: int
    total_area: float = Field(..., description="Panel area in square panel units")
    total_perforation_area: float
    coverage: float = Field(..., description="Open area percentage")
    average_size: float
    min_size: float
    max_size: float
    density: float = Field(..., description="Perforations per square panel unit")
