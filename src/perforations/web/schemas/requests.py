"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field

from perforations.domain.value_objects import Units
from perforations.web.schemas.common import (
    LayerSettingsSchema,
    PanelSchema,
    PdfSettingsSchema,
    PerforationSchema,
    PerforationSettingsSchema,
)


class BrightnessStatisticsSchema(BaseModel):
    mean: float = Field(..., ge=0, le=255, description="Mean image brightness")


class ImageAnalysisInputSchema(BaseModel):
    """Result of an earlier image analysis; only the mean is used."""

    statistics: BrightnessStatisticsSchema


class GenerateRequest(BaseModel):
    """Request for generating a perforation pattern."""

    panel: PanelSchema = Field(..., description="Panel dimensions")
    settings: PerforationSettingsSchema = Field(..., description="Generation parameters")
    brightness: float | None = Field(
        default=None,
        ge=0,
        le=255,
        description="Mean image brightness driving uniform sizes",
    )
    image_analysis: ImageAnalysisInputSchema | None = Field(
        default=None,
        validation_alias=AliasChoices("image_analysis", "imageAnalysis"),
        description="Alternative to brightness: statistics.mean drives sizing",
    )
    invert: bool = Field(default=True, description="Darker brightness gives larger holes")
    seed: int | None = Field(default=None, description="Seed for the random pattern")
    dpi: float | None = Field(default=None, gt=0, description="Compute resolution override")

    def scalar_brightness(self) -> float | None:
        """Explicit brightness, else the analysed mean, else None."""
        if self.brightness is not None:
            return self.brightness
        if self.image_analysis is not None:
            return self.image_analysis.statistics.mean
        return None


class GenerateFromConfigRequest(BaseModel):
    """Request for generating from a full design configuration."""

    config: dict[str, Any] = Field(..., description="Design configuration JSON")


class CalculateRequest(BaseModel):
    """Request for estimating statistics without a full generation."""

    panel: PanelSchema
    settings: PerforationSettingsSchema


class ExportRequest(BaseModel):
    """Request for exporting a pattern to a specific format."""

    panel: PanelSchema = Field(..., description="Panel dimensions")
    perforations: list[PerforationSchema] = Field(
        default_factory=list, description="Perforations in panel units"
    )
    units: Units = Field(default=Units.INCHES, description="Units of the emitted geometry")
    scale: float = Field(default=1.0, description="Extra scale factor")
    include_outline: bool = True
    include_dimensions: bool = True
    layer_settings: LayerSettingsSchema | None = None
    pdf_settings: PdfSettingsSchema | None = None


class ExportGenerateRequest(ExportRequest):
    """Request for persisting an export and returning a download link."""

    format: str = Field(default="svg", description="Export format name")
