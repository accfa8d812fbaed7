"""SVG format exporter for perforated panels.

The document is in display pixels: lengths are converted to the export
units, multiplied by the export scale, then by the pixels-per-unit factor
(96 px per inch, 96/25.4 px per millimetre).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import ClassVar
from xml.sax.saxutils import escape, quoteattr

from perforations.domain.shapes import RECTANGLE_ASPECT, Vertex, local_outline
from perforations.domain.units import MM_PER_INCH, convert_length
from perforations.domain.value_objects import (
    ExportSettings,
    PanelSpec,
    Perforation,
    ShapeKind,
    Units,
)
from perforations.infrastructure.exporters.base import (
    ExporterRegistry,
    format_dimension,
    serialization_context,
    unit_factor,
)

logger = logging.getLogger(__name__)


SVG_PX_PER_INCH = 96.0

# Colors and fixed offsets of the drawing
BACKGROUND_FILL = "white"
BACKGROUND_STROKE = "black"
OUTLINE_STROKE = "red"
PERFORATION_FILL = "white"
PERFORATION_STROKE = "blue"
DIMENSION_FILL = "green"
DIMENSION_FONT_SIZE = 12
WIDTH_LABEL_GAP = 20.0  # px below the panel
HEIGHT_LABEL_X = -30.0  # px, left of the panel


def _num(value: float) -> str:
    """Compact, stable number formatting for attributes."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _points(vertices: list[Vertex]) -> str:
    return " ".join(f"{_num(x)},{_num(y)}" for x, y in vertices)


@ExporterRegistry.register("svg")
class SvgExporter:
    """Exports a panel and its perforations as an SVG document.

    Circles (and unknown shapes) become ``circle`` elements, squares and
    rectangles ``rect`` elements, and every other outline a ``polygon``.
    Rotation is emitted as a ``rotate`` transform about the center.

    Attributes:
        format_name: "svg"
        file_extension: "svg"
        mime_type: "image/svg+xml"
    """

    format_name: ClassVar[str] = "svg"
    file_extension: ClassVar[str] = "svg"
    mime_type: ClassVar[str] = "image/svg+xml"

    def __init__(self, px_per_inch: float = SVG_PX_PER_INCH) -> None:
        """Initialize the SVG exporter.

        Args:
            px_per_inch: Pixel density of the document.
        """
        if px_per_inch <= 0:
            raise ValueError(f"px_per_inch must be positive, got {px_per_inch}")
        self.px_per_inch = px_per_inch

    def pixels_per_unit(self, units: Units) -> float:
        return self.px_per_inch / MM_PER_INCH if units is Units.MM else self.px_per_inch

    def export(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
        path: Path,
    ) -> None:
        Path(path).write_bytes(self.export_bytes(panel, perforations, settings))
        logger.info(f"Exported SVG with {len(perforations)} perforations to {path}")

    def export_bytes(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
    ) -> bytes:
        return self.export_string(panel, perforations, settings).encode("utf-8")

    def export_string(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
    ) -> str:
        """Render the SVG document as text."""
        with serialization_context(self.format_name):
            return self._render(panel, perforations, settings)

    def _render(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
    ) -> str:
        factor = unit_factor(panel, settings) * self.pixels_per_unit(settings.units)
        width = panel.width * factor
        height = panel.height * factor

        parts: list[str] = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" '
            f'width="{_num(width)}" height="{_num(height)}" '
            f'viewBox="0 0 {_num(width)} {_num(height)}">',
            f'  <rect x="0" y="0" width="{_num(width)}" height="{_num(height)}" '
            f'fill="{BACKGROUND_FILL}" stroke="{BACKGROUND_STROKE}" stroke-width="1"/>',
        ]

        if settings.include_outline:
            parts.append(
                f'  <rect class="panel-outline" x="0" y="0" width="{_num(width)}" '
                f'height="{_num(height)}" fill="none" stroke="{OUTLINE_STROKE}" '
                f'stroke-width="2"/>'
            )

        parts.append(
            f'  <g class="perforations" fill="{PERFORATION_FILL}" '
            f'stroke="{PERFORATION_STROKE}" stroke-width="1">'
        )
        for perforation in perforations:
            parts.append(f"    {self._element(perforation, factor)}")
        parts.append("  </g>")

        if settings.include_dimensions:
            parts.extend(self._dimensions(panel, settings, width, height))

        parts.append("</svg>")
        return "\n".join(parts) + "\n"

    def _element(self, perforation: Perforation, factor: float) -> str:
        cx = perforation.position.x * factor
        cy = perforation.position.y * factor
        size = perforation.size * factor
        id_attr = f"data-id={quoteattr(perforation.id)}"

        transform = ""
        if perforation.rotation:
            transform = (
                f' transform="rotate({_num(perforation.rotation)} {_num(cx)} {_num(cy)})"'
            )

        shape = perforation.shape
        if shape in (ShapeKind.SQUARE, ShapeKind.RECTANGLE):
            rect_w = size
            rect_h = size * RECTANGLE_ASPECT if shape is ShapeKind.RECTANGLE else size
            return (
                f'<rect {id_attr} x="{_num(cx - rect_w / 2)}" y="{_num(cy - rect_h / 2)}" '
                f'width="{_num(rect_w)}" height="{_num(rect_h)}"{transform}/>'
            )

        outline = local_outline(perforation)
        if outline is None:
            # Circles, unknown shapes and custom shapes without a path
            return (
                f'<circle {id_attr} cx="{_num(cx)}" cy="{_num(cy)}" '
                f'r="{_num(size / 2)}"{transform}/>'
            )

        vertices = [(cx + vx * factor, cy + vy * factor) for vx, vy in outline]
        return f'<polygon {id_attr} points="{_points(vertices)}"{transform}/>'

    def _dimensions(
        self,
        panel: PanelSpec,
        settings: ExportSettings,
        width: float,
        height: float,
    ) -> list[str]:
        # Labels show the physical size, independent of scale
        panel_width = convert_length(panel.width, panel.units, settings.units)
        panel_height = convert_length(panel.height, panel.units, settings.units)
        width_label = escape(format_dimension(panel_width, settings.units))
        height_label = escape(format_dimension(panel_height, settings.units))
        label_y = height / 2
        return [
            f'  <g class="dimensions" fill="{DIMENSION_FILL}" '
            f'font-size="{DIMENSION_FONT_SIZE}" text-anchor="middle">',
            f'    <text x="{_num(width / 2)}" y="{_num(height + WIDTH_LABEL_GAP)}">'
            f"{width_label}</text>",
            f'    <text x="{_num(HEIGHT_LABEL_X)}" y="{_num(label_y)}" '
            f'transform="rotate(-90 {_num(HEIGHT_LABEL_X)} {_num(label_y)})">'
            f"{height_label}</text>",
            "  </g>",
        ]
