"""Pydantic configuration schema models for perforated panel designs.

This module defines the schema for JSON design files. A design file names
the panel, the perforation parameters and, optionally, the image that drives
sizing and the export settings. It uses Pydantic v2 for validation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from perforations.domain.value_objects import (
    Orientation,
    PageSize,
    PatternKind,
    ShapeKind,
    Units,
)

# Supported schema versions for design files
# Version 1.0: Panel, perforation and export settings
# Version 1.1: Added image-driven sizing
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})


class PanelConfig(BaseModel):
    """Panel dimensions.

    Attributes:
        width: Panel width in ``units``.
        height: Panel height in ``units``.
        units: Length unit of every dimension in the file.
    """

    model_config = ConfigDict(extra="forbid")

    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)
    units: Units = Units.INCHES


class SpacingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    horizontal: float = Field(..., gt=0)
    vertical: float = Field(..., gt=0)


class PerforationConfig(BaseModel):
    """Perforation shape, pattern and sizing parameters."""

    model_config = ConfigDict(extra="forbid")

    min_size: float = Field(..., gt=0)
    max_size: float = Field(..., gt=0)
    spacing: SpacingConfig
    shape: ShapeKind = ShapeKind.CIRCLE
    pattern: PatternKind = PatternKind.GRID
    rotation: float = 0.0
    density: float | None = Field(default=None, ge=0, le=1)
    custom_shape: str | None = Field(
        default=None, description="SVG path data for the custom shape"
    )
    seed: int | None = Field(default=None, description="Seed for the random pattern")

    @field_validator("shape")
    @classmethod
    def reject_unknown_shape(cls, v: ShapeKind) -> ShapeKind:
        if v is ShapeKind.UNKNOWN:
            raise ValueError("shape must name a concrete shape")
        return v

    @model_validator(mode="after")
    def validate_sizes(self) -> "PerforationConfig":
        if self.max_size < self.min_size:
            raise ValueError(
                f"max_size ({self.max_size}) must be greater than or equal to "
                f"min_size ({self.min_size})"
            )
        if self.shape is ShapeKind.CUSTOM and not self.custom_shape:
            raise ValueError("custom_shape is required when shape is 'custom'")
        return self


class ImageConfig(BaseModel):
    """Image whose brightness drives perforation sizes (v1.1+).

    Attributes:
        path: Image file, relative to the design file.
        invert: Darker regions get larger perforations.
        max_dimension: Downscale so neither side exceeds this many pixels.
    """

    model_config = ConfigDict(extra="forbid")

    path: str = Field(..., min_length=1)
    invert: bool = True
    max_dimension: int = Field(default=1024, gt=0)


class PdfConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    page_size: PageSize = "Letter"
    orientation: Orientation = "landscape"
    margin: float = Field(default=0.5, ge=0)


class ExportConfig(BaseModel):
    """Export settings used by ``perforations generate --config``."""

    model_config = ConfigDict(extra="forbid")

    formats: list[Literal["svg", "dxf", "pdf"]] = Field(default_factory=lambda: ["svg"])
    units: Units | None = None
    scale: float = Field(default=1.0, ge=0.1, le=10)
    include_outline: bool = True
    include_dimensions: bool = True
    output_dir: str | None = None
    pdf: PdfConfig | None = None


class DesignConfiguration(BaseModel):
    """Root configuration model for a perforated panel design file.

    Example:
        >>> config = DesignConfiguration(
        ...     schema_version="1.0",
        ...     panel=PanelConfig(width=24, height=36),
        ...     perforation=PerforationConfig(
        ...         min_size=0.25, max_size=0.5,
        ...         spacing=SpacingConfig(horizontal=1, vertical=1),
        ...     ),
        ... )
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(..., pattern=r"^\d+\.\d+$")
    panel: PanelConfig
    perforation: PerforationConfig
    image: ImageConfig | None = Field(default=None, description="Image-driven sizing (optional)")
    export: ExportConfig = Field(default_factory=ExportConfig)

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: str) -> str:
        """Validate that the schema version is supported.

        Raises:
            ValueError: If the major version is unknown, or the minor
                version is newer than any supported release.
        """
        if v in SUPPORTED_VERSIONS:
            return v

        major = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major not in supported_majors:
            raise ValueError(
                f"Unsupported schema version major: {v}. "
                f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
            )
        raise ValueError(
            f"Unsupported schema version: {v}. "
            f"Supported versions: {', '.join(sorted(SUPPORTED_VERSIONS))}"
        )

    @model_validator(mode="after")
    def image_requires_v1_1(self) -> "DesignConfiguration":
        if self.image is not None and self.schema_version == "1.0":
            raise ValueError("image settings require schema_version 1.1 or later")
        return self
