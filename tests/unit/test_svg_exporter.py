"""Tests for SvgExporter."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from perforations.domain import (
    ExportSettings,
    PanelSpec,
    Perforation,
    Point,
    SerializationError,
)
from perforations.infrastructure.exporters import SvgExporter

SVG_NS = "{http://www.w3.org/2000/svg}"


def render(panel: PanelSpec, perforations, **settings) -> ET.Element:
    text = SvgExporter().export_string(panel, perforations, ExportSettings(**settings))
    return ET.fromstring(text.split("\n", 1)[1])


def perforation_elements(root: ET.Element) -> list[ET.Element]:
    group = root.find(f"{SVG_NS}g[@class='perforations']")
    assert group is not None
    return list(group)


@pytest.fixture
def panel() -> PanelSpec:
    return PanelSpec(2, 1)


class TestSvgDocument:
    """Tests for document size and decorations."""

    def test_document_size_in_pixels(self, panel) -> None:
        """Inches map to 96 pixels each."""
        root = render(panel, [])
        assert root.get("width") == "192"
        assert root.get("height") == "96"
        assert root.get("viewBox") == "0 0 192 96"

    def test_scale_multiplies_size(self, panel) -> None:
        root = render(panel, [], scale=2)
        assert root.get("width") == "384"

    def test_mm_export_keeps_physical_size(self, panel) -> None:
        root = render(panel, [], units="mm")
        assert float(root.get("width")) == pytest.approx(192)

    def test_outline_toggle(self, panel) -> None:
        with_outline = render(panel, [])
        without = render(panel, [], include_outline=False)
        assert with_outline.find(f"{SVG_NS}rect[@class='panel-outline']") is not None
        assert without.find(f"{SVG_NS}rect[@class='panel-outline']") is None

    def test_dimension_labels(self, panel) -> None:
        """Labels show the physical size in export units."""
        root = render(panel, [], scale=3)
        texts = [t.text for t in root.iter(f"{SVG_NS}text")]
        assert texts == ['2.00"', '1.00"']

    def test_dimension_labels_in_mm(self, panel) -> None:
        root = render(panel, [], units="mm")
        texts = [t.text for t in root.iter(f"{SVG_NS}text")]
        assert texts == ["50.80mm", "25.40mm"]

    def test_no_dimensions(self, panel) -> None:
        root = render(panel, [], include_dimensions=False)
        assert list(root.iter(f"{SVG_NS}text")) == []


class TestSvgPerforations:
    """Tests for perforation elements."""

    def test_circle(self, panel) -> None:
        root = render(panel, [Perforation("c1", Point(1, 0.5), 0.5, "circle")])
        (element,) = perforation_elements(root)

        assert element.tag == f"{SVG_NS}circle"
        assert element.get("data-id") == "c1"
        assert element.get("cx") == "96"
        assert element.get("cy") == "48"
        assert element.get("r") == "24"

    def test_unknown_shape_renders_as_circle(self, panel) -> None:
        root = render(panel, [Perforation("u", Point(1, 0.5), 0.5, "star")])
        assert perforation_elements(root)[0].tag == f"{SVG_NS}circle"

    def test_square_and_rectangle(self, panel) -> None:
        perfs = [
            Perforation("s", Point(1, 0.5), 0.5, "square"),
            Perforation("r", Point(1, 0.5), 0.5, "rectangle"),
        ]
        square, rect = perforation_elements(render(panel, perfs))

        assert square.tag == f"{SVG_NS}rect"
        assert square.get("x") == "72"
        assert square.get("width") == "48"
        assert square.get("height") == "48"
        assert rect.get("height") == "36"
        assert rect.get("y") == "30"

    def test_rotation_transform(self, panel) -> None:
        perfs = [Perforation("s", Point(1, 0.5), 0.5, "square", rotation=30)]
        (element,) = perforation_elements(render(panel, perfs))
        assert element.get("transform") == "rotate(30 96 48)"

    def test_no_transform_without_rotation(self, panel) -> None:
        perfs = [Perforation("s", Point(1, 0.5), 0.5, "square")]
        assert perforation_elements(render(panel, perfs))[0].get("transform") is None

    @pytest.mark.parametrize("shape,count", [("hexagon", 6), ("triangle", 3)])
    def test_polygons(self, panel, shape: str, count: int) -> None:
        perfs = [Perforation("p", Point(1, 0.5), 0.5, shape)]
        (element,) = perforation_elements(render(panel, perfs))
        assert element.tag == f"{SVG_NS}polygon"
        assert len(element.get("points").split()) == count

    def test_custom_path_polygon(self, panel) -> None:
        perfs = [Perforation("c", Point(1, 0.5), 1.0, "custom", path="M 0 0 L 0.5 0 L 0 0.5 Z")]
        (element,) = perforation_elements(render(panel, perfs))
        assert element.get("points") == "96,48 144,48 96,96"

    def test_malformed_custom_path(self, panel) -> None:
        perfs = [Perforation("c", Point(1, 0.5), 1.0, "custom", path="C 1 2 3")]
        with pytest.raises(SerializationError) as exc_info:
            SvgExporter().export_string(panel, perfs, ExportSettings())
        assert exc_info.value.format_name == "svg"

    def test_ids_are_escaped(self, panel) -> None:
        perfs = [Perforation('a"<b', Point(1, 0.5), 0.5, "circle")]
        (element,) = perforation_elements(render(panel, perfs))
        assert element.get("data-id") == 'a"<b'


class TestSvgExporterFile:
    def test_export_writes_file(self, tmp_path: Path, panel) -> None:
        path = tmp_path / "panel.svg"
        SvgExporter().export(panel, [], ExportSettings(), path)
        assert path.read_text(encoding="utf-8").startswith('<?xml version="1.0"')

    def test_invalid_density(self) -> None:
        with pytest.raises(ValueError):
            SvgExporter(px_per_inch=0)

    def test_export_bytes_is_byte_identical(self, panel) -> None:
        perfs = [
            Perforation("a", Point(0.5, 0.5), 0.25, "hexagon", rotation=30),
            Perforation("b", Point(1.5, 0.5), 0.25, "circle"),
        ]
        settings = ExportSettings(units="mm", scale=2)
        exporter = SvgExporter()
        assert exporter.export_bytes(panel, perfs, settings) == exporter.export_bytes(
            panel, perfs, settings
        )
