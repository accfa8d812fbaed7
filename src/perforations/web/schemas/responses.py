"""Pydantic response schemas for the REST API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from perforations.web.schemas.common import (
    PanelSchema,
    PerforationSchema,
    StatisticsSchema,
)


class GenerationResponseSchema(BaseModel):
    """Response for pattern generation."""

    id: str = Field(..., description="Generation identifier")
    is_valid: bool = Field(..., description="Whether generation was successful")
    errors: list[str] = Field(default_factory=list, description="Error messages")
    panel: PanelSchema | None = None
    perforations: list[PerforationSchema] = Field(default_factory=list)
    statistics: StatisticsSchema | None = None
    generated_at: datetime | None = None


class ShapeInfoSchema(BaseModel):
    id: str
    name: str
    description: str
    parameters: list[str]
    area_formula: str
    recommended: bool
    note: str | None = None


class ShapeListSchema(BaseModel):
    shapes: list[ShapeInfoSchema]


class PatternInfoSchema(BaseModel):
    id: str
    name: str
    description: str
    parameters: list[str]
    recommended: bool
    efficiency: str
    supported: bool


class PatternListSchema(BaseModel):
    patterns: list[PatternInfoSchema]


class StatisticsEstimateSchema(BaseModel):
    """Statistics extrapolated from a sample panel."""

    estimated_perforations: int
    estimated_coverage: float
    average_size: float
    density: float
    panel_area: float


class RecommendationsSchema(BaseModel):
    """Suggested settings for a panel (inches)."""

    size_min: float
    size_max: float
    size_recommended: float
    spacing_horizontal: float
    spacing_vertical: float
    pattern: str
    shape: str
    estimated_holes: int
    coverage: str = Field(..., description="Expected coverage range")


class ImageStatisticsSchema(BaseModel):
    mean: int
    min: int
    max: int
    std_dev: int
    contrast: int
    histogram: list[int] = Field(..., description="256-bin brightness histogram")


class ImageAnalysisSchema(BaseModel):
    """Response for image analysis."""

    width: int
    height: int
    channels: int
    format: str
    size: int = Field(..., description="Encoded size in bytes")
    statistics: ImageStatisticsSchema


class ImageFormatSchema(BaseModel):
    name: str
    extension: str
    mime_type: str


class ImageFormatsSchema(BaseModel):
    """Accepted upload formats and the upload size limit."""

    formats: list[ImageFormatSchema]
    max_bytes: int = Field(..., description="Largest accepted upload in bytes")


class ImageSummarySchema(BaseModel):
    total_perforations: int
    average_size: float
    coverage: float


class ImageGenerationResponseSchema(BaseModel):
    """Response for image-driven generation, in canvas units."""

    perforations: list[PerforationSchema]
    summary: ImageSummarySchema
    base_spacing: float
    sampling_step: int
    processed_image: str = Field(..., description="PNG data URL of the sampled image")


class ThresholdSuggestionsSchema(BaseModel):
    median: int
    mean: int
    quarter: int
    three_quarter: int
    histogram: list[int]


class ExportFormatSchema(BaseModel):
    name: str
    extension: str
    mime_type: str


class ExportFormatsSchema(BaseModel):
    """Response for available export formats."""

    formats: list[ExportFormatSchema] = Field(..., description="Registered formats")


class ExportResultSchema(BaseModel):
    """Response for a persisted export."""

    filename: str
    format: str
    size: int = Field(..., description="Size in bytes")
    mime_type: str
    download_url: str


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )
