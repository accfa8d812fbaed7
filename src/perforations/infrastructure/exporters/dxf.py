"""DXF format exporter for perforated panels.

Generates R2010 DXF drawings for CNC, laser and waterjet cutting. Geometry
is emitted in the export units with three layers: panel outline,
perforations and dimension annotations.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from io import StringIO
from pathlib import Path
from typing import TYPE_CHECKING, ClassVar

import ezdxf

from perforations.domain.shapes import outline_vertices
from perforations.domain.units import convert_length
from perforations.domain.value_objects import (
    ExportSettings,
    LayerSettings,
    PanelSpec,
    Perforation,
)
from perforations.infrastructure.exporters.base import (
    ExporterRegistry,
    format_dimension,
    inches_in,
    serialization_context,
    unit_factor,
)

if TYPE_CHECKING:
    from ezdxf.document import Drawing
    from ezdxf.layouts import Modelspace


logger = logging.getLogger(__name__)


# ACI colors per layer role
OUTLINE_COLOR = 1  # Red
PERFORATION_COLOR = 5  # Blue
DIMENSION_COLOR = 3  # Green

# Dimension annotation geometry, in inches before unit conversion
DIMENSION_OFFSET_IN = 0.5
WIDTH_TEXT_GAP_IN = 0.2
HEIGHT_TEXT_GAP_IN = 0.5
TEXT_HEIGHT_IN = 0.125


# ezdxf reads the fixed-metadata flag from process-wide options
_METADATA_LOCK = threading.Lock()


@contextmanager
def _fixed_metadata() -> Iterator[None]:
    """Create and write documents with constant timestamps and GUIDs.

    Holds a module lock for the whole block so concurrent exports never
    observe each other's flag changes.
    """
    with _METADATA_LOCK:
        previous = ezdxf.options.write_fixed_meta_data_for_testing
        ezdxf.options.write_fixed_meta_data_for_testing = True
        try:
            yield
        finally:
            ezdxf.options.write_fixed_meta_data_for_testing = previous


@ExporterRegistry.register("dxf")
class DxfExporter:
    """Exports a perforated panel to DXF.

    Circles (and unknown shapes) are CIRCLE entities. Every other shape is
    a closed loop of LINE entities rotated about its center. The outline is
    four LINE entities rather than a polyline.

    Attributes:
        format_name: "dxf"
        file_extension: "dxf"
        mime_type: "application/dxf"
    """

    format_name: ClassVar[str] = "dxf"
    file_extension: ClassVar[str] = "dxf"
    mime_type: ClassVar[str] = "application/dxf"

    def __init__(self, dxfversion: str = "R2010") -> None:
        self.dxfversion = dxfversion

    def export(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
        path: Path,
    ) -> None:
        Path(path).write_bytes(self.export_bytes(panel, perforations, settings))
        logger.info(f"Exported DXF with {len(perforations)} perforations to {path}")

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
        """Export the panel as DXF text."""
        stream = StringIO()
        with _fixed_metadata():
            with serialization_context(self.format_name):
                doc = self.build_document(panel, perforations, settings)
            doc.write(stream)
        return stream.getvalue()

    def build_document(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
    ) -> Drawing:
        """Create the DXF document in memory.

        Raises:
            SerializationError: If a custom shape path is malformed.
        """
        doc = self._create_document(settings.layer_settings)
        msp = doc.modelspace()
        layers = settings.layer_settings
        factor = unit_factor(panel, settings)

        width = panel.width * factor
        height = panel.height * factor

        if settings.include_outline:
            self._draw_outline(msp, width, height, layers.outline_layer)

        for perforation in perforations:
            self._draw_perforation(msp, perforation, factor, layers.perforation_layer)

        if settings.include_dimensions:
            self._draw_dimensions(msp, panel, width, height, settings)

        return doc

    def _create_document(self, layers: LayerSettings) -> Drawing:
        doc = ezdxf.new(self.dxfversion)
        for name, color in (
            (layers.outline_layer, OUTLINE_COLOR),
            (layers.perforation_layer, PERFORATION_COLOR),
            (layers.dimension_layer, DIMENSION_COLOR),
        ):
            # Layer names may be shared between roles; first color wins
            if name not in doc.layers:
                doc.layers.add(name, color=color)
        return doc

    def _draw_outline(self, msp: Modelspace, width: float, height: float, layer: str) -> None:
        corners = [(0.0, 0.0), (width, 0.0), (width, height), (0.0, height)]
        self._draw_loop(msp, corners, layer)

    def _draw_loop(
        self, msp: Modelspace, vertices: list[tuple[float, float]], layer: str
    ) -> None:
        for i, start in enumerate(vertices):
            end = vertices[(i + 1) % len(vertices)]
            msp.add_line(start, end, dxfattribs={"layer": layer})

    def _draw_perforation(
        self, msp: Modelspace, perforation: Perforation, factor: float, layer: str
    ) -> None:
        vertices = outline_vertices(perforation, scale=factor)
        if vertices is None:
            center = (perforation.position.x * factor, perforation.position.y * factor)
            msp.add_circle(center, radius=perforation.size * factor / 2, dxfattribs={"layer": layer})
            return
        self._draw_loop(msp, vertices, layer)

    def _draw_dimensions(
        self,
        msp: Modelspace,
        panel: PanelSpec,
        width: float,
        height: float,
        settings: ExportSettings,
    ) -> None:
        units = settings.units
        # Labels show the physical size, independent of scale
        width_label = format_dimension(convert_length(panel.width, panel.units, units), units)
        height_label = format_dimension(convert_length(panel.height, panel.units, units), units)
        layer = settings.layer_settings.dimension_layer
        offset = inches_in(units, DIMENSION_OFFSET_IN)
        text_height = inches_in(units, TEXT_HEIGHT_IN)

        msp.add_line((0.0, -offset), (width, -offset), dxfattribs={"layer": layer})
        msp.add_line((-offset, 0.0), (-offset, height), dxfattribs={"layer": layer})

        msp.add_text(
            width_label,
            dxfattribs={
                "layer": layer,
                "height": text_height,
                "rotation": 0,
                "insert": (width / 2, -offset - inches_in(units, WIDTH_TEXT_GAP_IN)),
            },
        )
        msp.add_text(
            height_label,
            dxfattribs={
                "layer": layer,
                "height": text_height,
                "rotation": 90,
                "insert": (-offset - inches_in(units, HEIGHT_TEXT_GAP_IN), height / 2),
            },
        )
