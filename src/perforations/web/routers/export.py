"""Export format endpoints."""

import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse, Response

from perforations.application.dtos import ExportOutput
from perforations.infrastructure.exporters import ExporterRegistry
from perforations.web.converters import export_input
from perforations.web.dependencies import (
    ExportCommandDep,
    ExportManagerDep,
    PersistingExportCommandDep,
)
from perforations.web.exceptions import ExportError
from perforations.web.schemas.requests import ExportGenerateRequest, ExportRequest
from perforations.web.schemas.responses import (
    ExportFormatSchema,
    ExportFormatsSchema,
    ExportResultSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/export", tags=["export"])

DOWNLOAD_PREFIX = "/api/v1/export/download"


def _checked(output: ExportOutput, format_name: str) -> ExportOutput:
    if not output.is_valid:
        raise ExportError(output.errors, format_name)
    return output


@router.get("/formats", response_model=ExportFormatsSchema)
def list_export_formats() -> ExportFormatsSchema:
    """List all available export formats."""
    formats = []
    for name in ExporterRegistry.available_formats():
        exporter_class = ExporterRegistry.get(name)
        formats.append(
            ExportFormatSchema(
                name=name,
                extension=exporter_class.file_extension,
                mime_type=exporter_class.mime_type,
            )
        )
    return ExportFormatsSchema(formats=formats)


@router.post("/preview")
def export_preview(request: ExportRequest, command: ExportCommandDep) -> Response:
    """Render the pattern as an inline SVG preview."""
    output = _checked(command.execute(export_input(request, "svg")), "svg")
    return Response(content=output.content, media_type=output.mime_type)


@router.post("/generate", response_model=ExportResultSchema)
def export_generate(
    request: ExportGenerateRequest, command: PersistingExportCommandDep
) -> ExportResultSchema:
    """Write an export under the export directory and return its download URL."""
    ExporterRegistry.get(request.format)
    output = _checked(command.execute(export_input(request, request.format)), request.format)
    return ExportResultSchema(
        filename=output.filename,
        format=output.format,
        size=output.size,
        mime_type=output.mime_type,
        download_url=f"{DOWNLOAD_PREFIX}/{output.format}/{output.filename}",
    )


@router.get("/download/{format_name}/{filename}")
def download_export(
    format_name: str, filename: str, manager: ExportManagerDep
) -> FileResponse:
    """Download a previously persisted export."""
    exporter_class = ExporterRegistry.get(format_name)
    try:
        path = manager.path_for(exporter_class.format_name, filename)
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={"error": str(e), "error_type": "invalid_filename"},
        ) from e
    if not path.is_file():
        raise HTTPException(
            status_code=404,
            detail={"error": f"Export not found: {filename}", "error_type": "not_found"},
        )
    return FileResponse(path=path, media_type=exporter_class.mime_type, filename=filename)


@router.post("/{format_name}")
def export_format(
    format_name: str, request: ExportRequest, command: ExportCommandDep
) -> Response:
    """Export the pattern as a file download.

    Raises:
        UnsupportedFormatError: If the format is not registered (400).
    """
    ExporterRegistry.get(format_name)
    output = _checked(command.execute(export_input(request, format_name)), format_name)
    logger.debug(f"Serving {output.filename} ({output.size} bytes)")
    return Response(
        content=output.content,
        media_type=output.mime_type,
        headers={"Content-Disposition": f"attachment; filename={output.filename}"},
    )
