"""PDF format exporter for perforated panels.

Produces a single-page drawing with title, outline, perforations, dimension
text and a metadata footer. The panel is scaled down to fit inside the page
margins (never up) and centered. Layout is computed in export units with a
top-left origin, then mapped onto reportlab's point-based, bottom-left
canvas.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import ClassVar

from reportlab.lib.pagesizes import A3, A4, LETTER, TABLOID, landscape, portrait
from reportlab.lib.units import inch, mm
from reportlab.pdfgen import canvas

from perforations.domain.shapes import outline_vertices
from perforations.domain.units import convert_length
from perforations.domain.value_objects import (
    ExportSettings,
    PanelSpec,
    PdfSettings,
    Perforation,
    Units,
)
from perforations.infrastructure.exporters.base import (
    ExporterRegistry,
    format_dimension,
    serialization_context,
    unit_factor,
)

logger = logging.getLogger(__name__)


PAGE_SIZES: dict[str, tuple[float, float]] = {
    "A4": A4,
    "A3": A3,
    "Letter": LETTER,
    "Tabloid": TABLOID,
}
CUSTOM_PAGE_PADDING = 2.0  # export units added to each panel dimension

TITLE = "Perforated Panel Design"
TITLE_FONT_SIZE = 16
DIMENSION_FONT_SIZE = 10
FOOTER_FONT_SIZE = 8
FOOTER_LINE_SPACING_PT = 10
FONT_NAME = "Helvetica"

OUTLINE_RGB = (1, 0, 0)
PERFORATION_STROKE_RGB = (0, 0, 1)
PERFORATION_FILL_RGB = (1, 1, 1)
DIMENSION_RGB = (0, 128 / 255, 0)
FOOTER_RGB = (128 / 255, 128 / 255, 128 / 255)

OUTLINE_WIDTH_PT = 1.0
PERFORATION_WIDTH_PT = 0.25


@dataclass(frozen=True)
class PageLayout:
    """Placement of the panel on the page, in export units, top-left origin."""

    page_width: float
    page_height: float
    margin: float
    scale: float
    offset_x: float
    offset_y: float
    scaled_width: float
    scaled_height: float


def points_per_unit(units: Units) -> float:
    return mm if units is Units.MM else inch


def page_size(
    pdf_settings: PdfSettings, panel_width: float, panel_height: float, units: Units
) -> tuple[float, float]:
    """Page size in points for the preset, or for the panel when "custom"."""
    if pdf_settings.page_size == "custom":
        pt = points_per_unit(units)
        size = (
            (panel_width + CUSTOM_PAGE_PADDING) * pt,
            (panel_height + CUSTOM_PAGE_PADDING) * pt,
        )
    else:
        try:
            size = PAGE_SIZES[pdf_settings.page_size]
        except KeyError:
            raise ValueError(
                f"Unknown page size: {pdf_settings.page_size}. "
                f"Expected one of {', '.join([*PAGE_SIZES, 'custom'])}"
            ) from None
    return landscape(size) if pdf_settings.orientation == "landscape" else portrait(size)


def compute_layout(
    page_width: float, page_height: float, margin: float, panel_width: float, panel_height: float
) -> PageLayout:
    """Fit the panel inside the margins.

    ``scale = min(scale_x, scale_y, 1)``; a zero panel dimension does not
    constrain the scale.
    """
    available_width = page_width - 2 * margin
    available_height = page_height - 2 * margin
    scale_x = available_width / panel_width if panel_width > 0 else float("inf")
    scale_y = available_height / panel_height if panel_height > 0 else float("inf")
    scale = min(scale_x, scale_y, 1.0)

    scaled_width = panel_width * scale
    scaled_height = panel_height * scale
    return PageLayout(
        page_width=page_width,
        page_height=page_height,
        margin=margin,
        scale=scale,
        offset_x=margin + (available_width - scaled_width) / 2,
        offset_y=margin + (available_height - scaled_height) / 2,
        scaled_width=scaled_width,
        scaled_height=scaled_height,
    )


@ExporterRegistry.register("pdf")
class PdfExporter:
    """Exports a perforated panel as a one-page PDF drawing.

    The document is written in reportlab's invariant mode, so the only
    varying content is the footer timestamp. Pass ``generated_at`` to pin it.

    Attributes:
        format_name: "pdf"
        file_extension: "pdf"
        mime_type: "application/pdf"
    """

    format_name: ClassVar[str] = "pdf"
    file_extension: ClassVar[str] = "pdf"
    mime_type: ClassVar[str] = "application/pdf"

    def __init__(self, generated_at: datetime | None = None) -> None:
        """Initialize the PDF exporter.

        Args:
            generated_at: Timestamp printed in the footer. Defaults to the
                time of each export.
        """
        self.generated_at = generated_at

    def export(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
        path: Path,
    ) -> None:
        Path(path).write_bytes(self.export_bytes(panel, perforations, settings))
        logger.info(f"Exported PDF with {len(perforations)} perforations to {path}")

    def export_bytes(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
    ) -> bytes:
        with serialization_context(self.format_name):
            return self._render(panel, perforations, settings)

    def _render(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
    ) -> bytes:
        pdf_settings = settings.pdf_settings or PdfSettings()
        units = settings.units
        pt = points_per_unit(units)
        factor = unit_factor(panel, settings)
        panel_width = panel.width * factor
        panel_height = panel.height * factor

        page_w_pt, page_h_pt = page_size(pdf_settings, panel_width, panel_height, units)
        layout = compute_layout(
            page_w_pt / pt, page_h_pt / pt, pdf_settings.margin, panel_width, panel_height
        )

        def to_page(x: float, y: float) -> tuple[float, float]:
            return x * pt, (layout.page_height - y) * pt

        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=(page_w_pt, page_h_pt), invariant=1)
        pdf.setTitle(TITLE)
        pdf.setCreator("perforations")

        pdf.setFont(FONT_NAME, TITLE_FONT_SIZE)
        pdf.drawCentredString(*to_page(layout.page_width / 2, layout.margin / 2), TITLE)

        if settings.include_outline:
            pdf.setStrokeColorRGB(*OUTLINE_RGB)
            pdf.setLineWidth(OUTLINE_WIDTH_PT)
            x, y = to_page(layout.offset_x, layout.offset_y + layout.scaled_height)
            pdf.rect(x, y, layout.scaled_width * pt, layout.scaled_height * pt, stroke=1, fill=0)

        pdf.setStrokeColorRGB(*PERFORATION_STROKE_RGB)
        pdf.setFillColorRGB(*PERFORATION_FILL_RGB)
        pdf.setLineWidth(PERFORATION_WIDTH_PT)
        for perforation in perforations:
            self._draw_perforation(pdf, perforation, factor * layout.scale, layout, pt)

        if settings.include_dimensions:
            self._draw_dimensions(pdf, panel, units, layout, to_page)

        pdf.setFont(FONT_NAME, FOOTER_FONT_SIZE)
        pdf.setFillColorRGB(*FOOTER_RGB)
        generated_at = self.generated_at or datetime.now()
        footer = [
            f"Generated: {generated_at.strftime('%Y-%m-%d %H:%M:%S')}",
            f"Perforations: {len(perforations)}",
            f"Scale: {layout.scale * 100:.1f}%",
        ]
        footer_x, footer_y = to_page(layout.margin, layout.page_height - layout.margin)
        for index, text in enumerate(footer):
            pdf.drawString(footer_x, footer_y - index * FOOTER_LINE_SPACING_PT, text)

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def _draw_perforation(self, pdf, perforation, scale, layout, pt) -> None:
        def to_page(x: float, y: float) -> tuple[float, float]:
            return x * pt, (layout.page_height - y) * pt

        vertices = outline_vertices(perforation, scale=scale)
        if vertices is None:
            cx, cy = to_page(
                layout.offset_x + perforation.position.x * scale,
                layout.offset_y + perforation.position.y * scale,
            )
            pdf.circle(cx, cy, perforation.size * scale / 2 * pt, stroke=1, fill=1)
            return

        points = [to_page(layout.offset_x + vx, layout.offset_y + vy) for vx, vy in vertices]
        path = pdf.beginPath()
        path.moveTo(*points[0])
        for point in points[1:]:
            path.lineTo(*point)
        path.close()
        pdf.drawPath(path, stroke=1, fill=1)

    def _draw_dimensions(self, pdf, panel, units, layout, to_page) -> None:
        width_label = format_dimension(convert_length(panel.width, panel.units, units), units)
        height_label = format_dimension(convert_length(panel.height, panel.units, units), units)

        pdf.setFont(FONT_NAME, DIMENSION_FONT_SIZE)
        pdf.setFillColorRGB(*DIMENSION_RGB)
        pdf.drawCentredString(
            *to_page(
                layout.offset_x + layout.scaled_width / 2,
                layout.offset_y + layout.scaled_height + layout.margin / 4,
            ),
            f"Width: {width_label}",
        )

        x, y = to_page(
            layout.offset_x - layout.margin / 4,
            layout.offset_y + layout.scaled_height / 2,
        )
        pdf.saveState()
        pdf.translate(x, y)
        pdf.rotate(90)
        pdf.drawCentredString(0, 0, f"Height: {height_label}")
        pdf.restoreState()
