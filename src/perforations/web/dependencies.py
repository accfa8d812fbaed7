"""FastAPI dependency injection for perforation services."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from perforations.application.commands import (
    EstimateStatisticsCommand,
    ExportPanelCommand,
    GenerateFromImageCommand,
    GeneratePatternCommand,
)
from perforations.infrastructure.exporters import ExportManager

EXPORT_DIR_ENV = "PERFORATIONS_EXPORT_DIR"
DEFAULT_EXPORT_DIR = "exports"


@lru_cache(maxsize=1)
def get_export_manager() -> ExportManager:
    """ExportManager rooted at $PERFORATIONS_EXPORT_DIR (default ./exports)."""
    return ExportManager(output_dir=Path(os.environ.get(EXPORT_DIR_ENV, DEFAULT_EXPORT_DIR)))


def get_generate_command() -> GeneratePatternCommand:
    return GeneratePatternCommand()


def get_estimate_command() -> EstimateStatisticsCommand:
    return EstimateStatisticsCommand()


def get_export_command() -> ExportPanelCommand:
    """Dependency for in-memory exports."""
    return ExportPanelCommand()


def get_persisting_export_command(
    manager: Annotated[ExportManager, Depends(get_export_manager)],
) -> ExportPanelCommand:
    """Dependency for exports written under the export directory."""
    return ExportPanelCommand(export_manager=manager)


def get_image_command() -> GenerateFromImageCommand:
    return GenerateFromImageCommand()


# Type aliases for cleaner endpoint signatures
ExportManagerDep = Annotated[ExportManager, Depends(get_export_manager)]
GenerateCommandDep = Annotated[GeneratePatternCommand, Depends(get_generate_command)]
EstimateCommandDep = Annotated[EstimateStatisticsCommand, Depends(get_estimate_command)]
ExportCommandDep = Annotated[ExportPanelCommand, Depends(get_export_command)]
PersistingExportCommandDep = Annotated[
    ExportPanelCommand, Depends(get_persisting_export_command)
]
ImageCommandDep = Annotated[GenerateFromImageCommand, Depends(get_image_command)]
