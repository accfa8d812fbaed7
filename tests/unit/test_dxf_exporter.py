"""Tests for DxfExporter."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from io import StringIO

import ezdxf
import pytest

from perforations.domain import (
    ExportSettings,
    LayerSettings,
    PanelSpec,
    Perforation,
    Point,
)
from perforations.infrastructure.exporters import DxfExporter


def read_modelspace(panel: PanelSpec, perforations, **settings):
    text = DxfExporter().export_string(panel, perforations, ExportSettings(format="dxf", **settings))
    return ezdxf.read(StringIO(text)).modelspace()


def on_layer(msp, query: str, layer: str) -> list:
    return [e for e in msp.query(query) if e.dxf.layer == layer]


@pytest.fixture
def panel() -> PanelSpec:
    return PanelSpec(2, 1)


class TestDxfLayers:
    """Tests for layer setup."""

    def test_default_layers_exist(self, panel) -> None:
        """The document should define OUTLINE, PERFORATIONS and DIMENSIONS."""
        doc = DxfExporter().build_document(panel, [], ExportSettings(format="dxf"))
        for name in ("OUTLINE", "PERFORATIONS", "DIMENSIONS"):
            assert name in doc.layers
        assert doc.layers.get("OUTLINE").color == 1
        assert doc.layers.get("PERFORATIONS").color == 5
        assert doc.layers.get("DIMENSIONS").color == 3

    def test_custom_layer_names(self, panel) -> None:
        layers = LayerSettings(outline_layer="EDGE", perforation_layer="HOLES")
        msp = read_modelspace(
            panel, [Perforation("a", Point(1, 0.5), 0.25, "circle")], layer_settings=layers
        )
        assert len(on_layer(msp, "LINE", "EDGE")) == 4
        assert len(on_layer(msp, "CIRCLE", "HOLES")) == 1

    def test_shared_layer_name(self, panel) -> None:
        layers = LayerSettings(outline_layer="ALL", perforation_layer="ALL", dimension_layer="ALL")
        doc = DxfExporter().build_document(panel, [], ExportSettings(layer_settings=layers))
        assert doc.layers.get("ALL").color == 1


class TestDxfGeometry:
    """Tests for emitted entities."""

    def test_outline_is_four_lines(self, panel) -> None:
        msp = read_modelspace(panel, [], include_dimensions=False)
        lines = on_layer(msp, "LINE", "OUTLINE")
        assert len(lines) == 4
        ends = {(round(line.dxf.end.x, 6), round(line.dxf.end.y, 6)) for line in lines}
        assert ends == {(2, 0), (2, 1), (0, 1), (0, 0)}

    def test_no_outline(self, panel) -> None:
        msp = read_modelspace(panel, [], include_outline=False)
        assert on_layer(msp, "LINE", "OUTLINE") == []

    def test_circle_entity(self, panel) -> None:
        msp = read_modelspace(panel, [Perforation("a", Point(1, 0.5), 0.25, "circle")])
        (circle,) = on_layer(msp, "CIRCLE", "PERFORATIONS")
        assert circle.dxf.center.x == pytest.approx(1)
        assert circle.dxf.center.y == pytest.approx(0.5)
        assert circle.dxf.radius == pytest.approx(0.125)

    def test_units_conversion(self, panel) -> None:
        """Inch panels exported in mm are scaled by 25.4."""
        msp = read_modelspace(
            panel, [Perforation("a", Point(1, 0.5), 0.5, "circle")], units="mm"
        )
        (circle,) = on_layer(msp, "CIRCLE", "PERFORATIONS")
        assert circle.dxf.center.x == pytest.approx(25.4)
        assert circle.dxf.radius == pytest.approx(6.35)

    def test_scale(self, panel) -> None:
        msp = read_modelspace(panel, [Perforation("a", Point(1, 0.5), 0.5, "circle")], scale=2)
        (circle,) = on_layer(msp, "CIRCLE", "PERFORATIONS")
        assert circle.dxf.center.x == pytest.approx(2)
        assert circle.dxf.radius == pytest.approx(0.5)

    @pytest.mark.parametrize(
        "shape,edges", [("square", 4), ("rectangle", 4), ("hexagon", 6), ("triangle", 3)]
    )
    def test_polygons_are_line_loops(self, panel, shape: str, edges: int) -> None:
        msp = read_modelspace(panel, [Perforation("a", Point(1, 0.5), 0.25, shape)])
        assert len(on_layer(msp, "LINE", "PERFORATIONS")) == edges
        assert on_layer(msp, "CIRCLE", "PERFORATIONS") == []

    def test_rotation_applied_to_vertices(self, panel) -> None:
        perfs = [Perforation("a", Point(1, 0.5), 0.5, "square", rotation=45)]
        msp = read_modelspace(panel, perfs)
        xs = [line.dxf.start.x for line in on_layer(msp, "LINE", "PERFORATIONS")]
        assert min(xs) == pytest.approx(1 - 0.25 * 2**0.5)

    def test_dimensions(self, panel) -> None:
        msp = read_modelspace(panel, [])
        texts = on_layer(msp, "TEXT", "DIMENSIONS")
        assert sorted(t.dxf.text for t in texts) == ['1.00"', '2.00"']
        assert len(on_layer(msp, "LINE", "DIMENSIONS")) == 2
        rotations = sorted(t.dxf.rotation for t in texts)
        assert rotations == [0, 90]

    def test_dimension_labels_ignore_scale(self, panel) -> None:
        msp = read_modelspace(panel, [], scale=4, units="mm")
        texts = sorted(t.dxf.text for t in on_layer(msp, "TEXT", "DIMENSIONS"))
        assert texts == ["25.40mm", "50.80mm"]


class TestDxfOutput:
    def test_output_is_reproducible(self, panel) -> None:
        perfs = [Perforation("a", Point(1, 0.5), 0.25, "hexagon")]
        exporter = DxfExporter()
        first = exporter.export_string(panel, perfs, ExportSettings(format="dxf"))
        second = exporter.export_string(panel, perfs, ExportSettings(format="dxf"))
        assert first == second

    def test_export_bytes(self, panel) -> None:
        payload = DxfExporter().export_bytes(panel, [], ExportSettings(format="dxf"))
        assert b"SECTION" in payload

    def test_export_bytes_is_byte_identical(self) -> None:
        perfs = [Perforation("h", Point(2, 2), 1.0, "hexagon", rotation=15)]
        exporter = DxfExporter()
        settings = ExportSettings(format="dxf")
        first = exporter.export_bytes(PanelSpec(4, 4), perfs, settings)
        second = exporter.export_bytes(PanelSpec(4, 4), perfs, settings)
        assert first == second

    def test_concurrent_exports_are_identical(self, panel) -> None:
        """Exports running on worker threads all carry the fixed metadata."""
        perfs = [Perforation(f"p{i}", Point(i + 0.5, 1), 0.25, "square") for i in range(10)]
        exporter = DxfExporter()

        def run(_: int) -> bytes:
            return exporter.export_bytes(panel, perfs, ExportSettings(format="dxf"))

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(run, range(8)))

        assert len(set(results)) == 1

    def test_fixed_metadata_flag_restored(self, panel) -> None:
        before = ezdxf.options.write_fixed_meta_data_for_testing
        DxfExporter().export_string(panel, [], ExportSettings(format="dxf"))
        assert ezdxf.options.write_fixed_meta_data_for_testing == before
