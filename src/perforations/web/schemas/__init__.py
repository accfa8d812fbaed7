"""Pydantic schemas for the REST API."""

from perforations.web.schemas.common import (
    LayerSettingsSchema,
    PanelSchema,
    PdfSettingsSchema,
    PerforationSchema,
    PerforationSettingsSchema,
    PointSchema,
    SpacingSchema,
    StatisticsSchema,
)
from perforations.web.schemas.requests import (
    CalculateRequest,
    ExportGenerateRequest,
    ExportRequest,
    GenerateFromConfigRequest,
    GenerateRequest,
    ImageAnalysisInputSchema,
)
from perforations.web.schemas.responses import (
    ErrorResponseSchema,
    ExportFormatSchema,
    ExportFormatsSchema,
    ExportResultSchema,
    GenerationResponseSchema,
    ImageAnalysisSchema,
    ImageFormatSchema,
    ImageFormatsSchema,
    ImageGenerationResponseSchema,
    ImageStatisticsSchema,
    ImageSummarySchema,
    PatternInfoSchema,
    PatternListSchema,
    RecommendationsSchema,
    ShapeInfoSchema,
    ShapeListSchema,
    StatisticsEstimateSchema,
    ThresholdSuggestionsSchema,
)

__all__ = [
    # Common
    "LayerSettingsSchema",
    "PanelSchema",
    "PdfSettingsSchema",
    "PerforationSchema",
    "PerforationSettingsSchema",
    "PointSchema",
    "SpacingSchema",
    "StatisticsSchema",
    # Requests
    "CalculateRequest",
    "ExportGenerateRequest",
    "ExportRequest",
    "GenerateFromConfigRequest",
    "GenerateRequest",
    "ImageAnalysisInputSchema",
    # Responses
    "ErrorResponseSchema",
    "ExportFormatSchema",
    "ExportFormatsSchema",
    "ExportResultSchema",
    "GenerationResponseSchema",
    "ImageAnalysisSchema",
    "ImageFormatSchema",
    "ImageFormatsSchema",
    "ImageGenerationResponseSchema",
    "ImageStatisticsSchema",
    "ImageSummarySchema",
    "PatternInfoSchema",
    "PatternListSchema",
    "RecommendationsSchema",
    "ShapeInfoSchema",
    "ShapeListSchema",
    "StatisticsEstimateSchema",
    "ThresholdSuggestionsSchema",
]
