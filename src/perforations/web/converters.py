"""Conversions between API schemas and application DTOs."""

from perforations.application.dtos import ExportInput, PanelInput, PerforationSettingsInput
from perforations.domain.value_objects import (
    LayerSettings,
    PdfSettings,
    Perforation,
    Point,
    Statistics,
)
from perforations.web.schemas.common import (
    PanelSchema,
    PerforationSchema,
    PerforationSettingsSchema,
    PointSchema,
    StatisticsSchema,
)
from perforations.web.schemas.requests import ExportRequest


def panel_input(panel: PanelSchema) -> PanelInput:
    return PanelInput(width=panel.width, height=panel.height, units=panel.units.value)


def settings_input(settings: PerforationSettingsSchema) -> PerforationSettingsInput:
    return PerforationSettingsInput(
        min_size=settings.min_size,
        max_size=settings.max_size,
        horizontal_spacing=settings.spacing.horizontal,
        vertical_spacing=settings.spacing.vertical,
        shape=settings.shape.value,
        pattern=settings.pattern.value,
        rotation=settings.rotation,
        density=settings.density,
        custom_shape=settings.custom_shape,
    )


def perforation_to_schema(perforation: Perforation) -> PerforationSchema:
    return PerforationSchema(
        id=perforation.id,
        position=PointSchema(x=perforation.position.x, y=perforation.position.y),
        size=perforation.size,
        shape=perforation.shape.value,
        rotation=perforation.rotation,
        path=perforation.path,
    )


def schema_to_perforation(schema: PerforationSchema) -> Perforation:
    return Perforation(
        id=schema.id,
        position=Point(schema.position.x, schema.position.y),
        size=schema.size,
        shape=schema.shape,
        rotation=schema.rotation,
        path=schema.path,
    )


def statistics_to_schema(statistics: Statistics) -> StatisticsSchema:
    return StatisticsSchema(
        total_perforations=statistics.total_perforations,
        total_area=statistics.total_area,
        total_perforation_area=statistics.total_perforation_area,
        coverage=statistics.coverage,
        average_size=statistics.average_size,
        min_size=statistics.min_size,
        max_size=statistics.max_size,
        density=statistics.density,
    )


def export_input(request: ExportRequest, format_name: str) -> ExportInput:
    """Build an ExportInput for ``format_name`` from an export request."""
    layer_settings = (
        LayerSettings(**request.layer_settings.model_dump())
        if request.layer_settings is not None
        else None
    )
    pdf_settings = (
        PdfSettings(**request.pdf_settings.model_dump())
        if request.pdf_settings is not None
        else None
    )
    return ExportInput(
        panel=panel_input(request.panel),
        perforations=[schema_to_perforation(p) for p in request.perforations],
        format=format_name.lower(),
        units=request.units.value,
        scale=request.scale,
        include_outline=request.include_outline,
        include_dimensions=request.include_dimensions,
        layer_settings=layer_settings,
        pdf_settings=pdf_settings,
    )
