"""Pattern generation, catalogue and estimation endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query

from perforations.application.commands import recommend_settings
from perforations.application.config import config_to_inputs, load_config_from_dict
from perforations.application.dtos import GenerationInput, GenerationOutput
from perforations.domain.catalog import PATTERN_CATALOG, SHAPE_CATALOG
from perforations.web.converters import (
    panel_input,
    perforation_to_schema,
    settings_input,
    statistics_to_schema,
)
from perforations.web.dependencies import EstimateCommandDep, GenerateCommandDep
from perforations.web.exceptions import PatternGenerationError
from perforations.web.schemas.common import PanelSchema
from perforations.web.schemas.requests import (
    CalculateRequest,
    GenerateFromConfigRequest,
    GenerateRequest,
)
from perforations.web.schemas.responses import (
    GenerationResponseSchema,
    PatternInfoSchema,
    PatternListSchema,
    RecommendationsSchema,
    ShapeInfoSchema,
    ShapeListSchema,
    StatisticsEstimateSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/perforations", tags=["perforations"])


def _generation_output_to_schema(output: GenerationOutput) -> GenerationResponseSchema:
    panel = None
    if output.panel is not None:
        panel = PanelSchema(
            width=output.panel.width, height=output.panel.height, units=output.panel.units
        )
    return GenerationResponseSchema(
        id=output.id,
        is_valid=output.is_valid,
        errors=output.errors,
        panel=panel,
        perforations=[perforation_to_schema(p) for p in output.perforations],
        statistics=(
            statistics_to_schema(output.statistics) if output.statistics is not None else None
        ),
        generated_at=output.generated_at,
    )


def _run(command: GenerateCommandDep, generation_input: GenerationInput) -> GenerationResponseSchema:
    output = command.execute(generation_input)
    if not output.is_valid:
        raise PatternGenerationError(output.errors)
    return _generation_output_to_schema(output)


@router.post("/generate", response_model=GenerationResponseSchema)
def generate_pattern(
    request: GenerateRequest,
    command: GenerateCommandDep,
) -> GenerationResponseSchema:
    """Generate a perforation pattern.

    Args:
        request: Panel, generation settings and optional brightness.
        command: Injected GeneratePatternCommand.

    Returns:
        Perforations, statistics and the generation id.
    """
    return _run(
        command,
        GenerationInput(
            panel=panel_input(request.panel),
            settings=settings_input(request.settings),
            brightness=request.scalar_brightness(),
            invert=request.invert,
            seed=request.seed,
            dpi=request.dpi,
        ),
    )


@router.post("/generate/from-config", response_model=GenerationResponseSchema)
def generate_from_config(
    request: GenerateFromConfigRequest,
    command: GenerateCommandDep,
) -> GenerationResponseSchema:
    """Generate a pattern from a full design configuration.

    Image-driven designs reference files on disk and are rejected here;
    upload the image to ``/images/generate`` instead.
    """
    config = load_config_from_dict(request.config)
    if config.image is not None:
        logger.warning(f"Rejected design configuration with image path {config.image.path!r}")
        raise HTTPException(
            status_code=422,
            detail={
                "error": "Image settings are not accepted over HTTP",
                "error_type": "config_error",
            },
        )
    return _run(command, config_to_inputs(config))


@router.get("/shapes", response_model=ShapeListSchema)
def list_shapes() -> ShapeListSchema:
    """List the perforation shapes with descriptions and area formulas."""
    return ShapeListSchema(
        shapes=[
            ShapeInfoSchema(
                id=info.id.value,
                name=info.name,
                description=info.description,
                parameters=list(info.parameters),
                area_formula=info.area_formula,
                recommended=info.recommended,
                note=info.note,
            )
            for info in SHAPE_CATALOG
        ]
    )


@router.get("/patterns", response_model=PatternListSchema)
def list_patterns() -> PatternListSchema:
    """List the placement patterns."""
    return PatternListSchema(
        patterns=[
            PatternInfoSchema(
                id=info.id.value,
                name=info.name,
                description=info.description,
                parameters=list(info.parameters),
                recommended=info.recommended,
                efficiency=info.efficiency,
                supported=info.supported,
            )
            for info in PATTERN_CATALOG
        ]
    )


@router.post("/calculate", response_model=StatisticsEstimateSchema)
def calculate_statistics(
    request: CalculateRequest,
    command: EstimateCommandDep,
) -> StatisticsEstimateSchema:
    """Estimate statistics from a reduced sample panel."""
    panel = panel_input(request.panel)
    settings = settings_input(request.settings)
    errors = panel.validate() + settings.validate(panel.units)
    if errors:
        raise PatternGenerationError(errors)

    estimate = command.execute(panel, settings)
    return StatisticsEstimateSchema(
        estimated_perforations=estimate.estimated_perforations,
        estimated_coverage=estimate.estimated_coverage,
        average_size=estimate.average_size,
        density=estimate.density,
        panel_area=estimate.panel_area,
    )


@router.get("/recommendations", response_model=RecommendationsSchema)
def get_recommendations(
    width: float = Query(..., gt=0, description="Panel width in inches"),
    height: float = Query(..., gt=0, description="Panel height in inches"),
    image_contrast: float = Query(default=128, ge=0, le=255),
    image_complexity: str = Query(default="medium", pattern="^(low|medium|high)$"),
) -> RecommendationsSchema:
    """Suggest sizes, spacing, pattern and shape for a panel."""
    recommendations = recommend_settings(width, height, image_contrast, image_complexity)
    return RecommendationsSchema(
        size_min=recommendations.size_min,
        size_max=recommendations.size_max,
        size_recommended=recommendations.size_recommended,
        spacing_horizontal=recommendations.spacing_horizontal,
        spacing_vertical=recommendations.spacing_vertical,
        pattern=recommendations.pattern.value,
        shape=recommendations.shape.value,
        estimated_holes=recommendations.estimated_holes,
        coverage=recommendations.coverage,
    )
