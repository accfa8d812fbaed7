"""Application layer - use cases and orchestration."""

from .commands import (
    EstimateStatisticsCommand,
    ExportPanelCommand,
    GenerateFromImageCommand,
    GeneratePatternCommand,
    recommend_settings,
)
from .dtos import (
    ExportInput,
    ExportOutput,
    GenerationInput,
    GenerationOutput,
    ImageGenerationInput,
    ImageGenerationOutput,
    PanelInput,
    PerforationSettingsInput,
    Recommendations,
    StatisticsEstimate,
)

__all__ = [
    "EstimateStatisticsCommand",
    "ExportInput",
    "ExportOutput",
    "ExportPanelCommand",
    "GenerateFromImageCommand",
    "GeneratePatternCommand",
    "GenerationInput",
    "GenerationOutput",
    "ImageGenerationInput",
    "ImageGenerationOutput",
    "PanelInput",
    "PerforationSettingsInput",
    "Recommendations",
    "StatisticsEstimate",
    "recommend_settings",
]
