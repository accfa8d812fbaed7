"""Image upload endpoints.

Images are sent as the raw request body (any of JPEG, PNG, GIF, BMP or
WEBP); sampling options travel as query parameters.
"""

import base64
import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from perforations.application.dtos import ImageGenerationInput
from perforations.domain.exceptions import ImageDecodeError
from perforations.domain.services import (
    ImageProcessingOptions,
    processing_preview,
    suggest_thresholds,
)
from perforations.infrastructure.images import (
    FORMAT_TYPES,
    MAX_IMAGE_BYTES,
    analyze_image,
    encode_png,
    load_image,
)
from perforations.web.converters import perforation_to_schema
from perforations.web.dependencies import ImageCommandDep
from perforations.web.exceptions import PatternGenerationError
from perforations.web.schemas.responses import (
    ImageAnalysisSchema,
    ImageFormatSchema,
    ImageFormatsSchema,
    ImageGenerationResponseSchema,
    ImageStatisticsSchema,
    ImageSummarySchema,
    ThresholdSuggestionsSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/images", tags=["images"])


async def _image_bytes(request: Request) -> bytes:
    data = await request.body()
    if not data:
        raise ImageDecodeError("No image data in request body")
    return data


ImageBytes = Annotated[bytes, Depends(_image_bytes)]


def _processing_options(
    min_size: float = Query(default=2.0, gt=0),
    max_size: float = Query(default=20.0, gt=0),
    min_spacing: float = Query(default=5.0, gt=0),
    max_spacing: float = Query(default=50.0, gt=0),
    density: float = Query(default=50.0, ge=0, le=100),
    snap_to_grid: bool = Query(default=False),
    grid_size: float = Query(default=10.0, gt=0),
    threshold: float = Query(default=128.0, ge=0, le=255),
    invert: bool = Query(default=True),
) -> ImageProcessingOptions:
    return ImageProcessingOptions(
        min_size=min_size,
        max_size=max_size,
        min_spacing=min_spacing,
        max_spacing=max_spacing,
        density=density,
        snap_to_grid=snap_to_grid,
        grid_size=grid_size,
        threshold=threshold,
        invert=invert,
    )


ProcessingOptions = Annotated[ImageProcessingOptions, Depends(_processing_options)]


@router.get("/formats", response_model=ImageFormatsSchema)
def list_image_formats() -> ImageFormatsSchema:
    """List the accepted upload formats."""
    return ImageFormatsSchema(
        formats=[
            ImageFormatSchema(name=name, extension=extension, mime_type=mime_type)
            for name, (extension, mime_type) in FORMAT_TYPES.items()
        ],
        max_bytes=MAX_IMAGE_BYTES,
    )


@router.post("/analyze", response_model=ImageAnalysisSchema)
async def analyze(data: ImageBytes) -> ImageAnalysisSchema:
    """Report dimensions and brightness statistics of an uploaded image."""
    analysis = analyze_image(load_image(data))
    stats = analysis.statistics
    return ImageAnalysisSchema(
        width=analysis.width,
        height=analysis.height,
        channels=analysis.channels,
        format=analysis.format,
        size=analysis.size,
        statistics=ImageStatisticsSchema(
            mean=stats.mean,
            min=stats.min,
            max=stats.max,
            std_dev=stats.std_dev,
            contrast=stats.contrast,
            histogram=stats.histogram,
        ),
    )


@router.post("/generate", response_model=ImageGenerationResponseSchema)
async def generate_from_image(
    data: ImageBytes,
    options: ProcessingOptions,
    command: ImageCommandDep,
    canvas_width: float = Query(default=800, gt=0),
    canvas_height: float = Query(default=600, gt=0),
) -> ImageGenerationResponseSchema:
    """Place circular perforations by sampling the uploaded image."""
    output = command.execute(
        ImageGenerationInput(
            image=data,
            canvas_width=canvas_width,
            canvas_height=canvas_height,
            options=options,
        )
    )
    if not output.is_valid:
        raise PatternGenerationError(output.errors)

    result = output.result
    processed = base64.b64encode(encode_png(result.processed)).decode("ascii")
    return ImageGenerationResponseSchema(
        perforations=[perforation_to_schema(p) for p in result.perforations],
        summary=ImageSummarySchema(
            total_perforations=result.summary.total_perforations,
            average_size=result.summary.average_size,
            coverage=result.summary.coverage,
        ),
        base_spacing=result.base_spacing,
        sampling_step=result.sampling_step,
        processed_image=f"data:image/png;base64,{processed}",
    )


@router.post("/preview")
async def preview(
    data: ImageBytes,
    threshold: float = Query(default=128.0, ge=0, le=255),
    invert: bool = Query(default=True),
) -> Response:
    """PNG overlay highlighting where perforations would be placed."""
    image = load_image(data, max_dimension=1024)
    overlay = processing_preview(image.rgb, threshold, invert)
    return Response(content=encode_png(overlay), media_type="image/png")


@router.post("/thresholds", response_model=ThresholdSuggestionsSchema)
async def thresholds(data: ImageBytes) -> ThresholdSuggestionsSchema:
    """Suggest brightness thresholds from the image histogram."""
    suggestions = suggest_thresholds(load_image(data).grid)
    logger.debug(f"Suggested thresholds around median {suggestions.median}")
    return ThresholdSuggestionsSchema(
        median=suggestions.median,
        mean=suggestions.mean,
        quarter=suggestions.quarter,
        three_quarter=suggestions.three_quarter,
        histogram=suggestions.histogram,
    )
