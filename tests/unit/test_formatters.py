"""Tests for pattern JSON documents and text formatters."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from perforations.application import (
    GeneratePatternCommand,
    GenerationInput,
    GenerationOutput,
    PanelInput,
    PerforationSettingsInput,
)
from perforations.domain import PanelSpec, Perforation, Point, Units, compute_statistics
from perforations.infrastructure import CatalogFormatter, PatternJsonExporter, StatisticsFormatter

FIXED_NOW = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def output(generator) -> GenerationOutput:
    command = GeneratePatternCommand(generator=generator, clock=lambda: FIXED_NOW)
    return command.execute(
        GenerationInput(
            panel=PanelInput(width=3, height=2),
            settings=PerforationSettingsInput(
                min_size=0.25,
                max_size=0.5,
                horizontal_spacing=1,
                vertical_spacing=1,
                shape="hexagon",
                rotation=10,
            ),
        )
    )


class TestPatternJsonExporter:
    """Tests for PatternJsonExporter."""

    def test_document_contents(self, output) -> None:
        data = json.loads(PatternJsonExporter().export(output))

        assert data["id"] == output.id
        assert data["generated_at"] == "2024-03-01T09:30:00+00:00"
        assert data["panel"] == {"width": 3, "height": 2, "units": "inches"}
        assert len(data["perforations"]) == 6
        first = data["perforations"][0]
        assert first == {
            "id": "p1",
            "position": {"x": 0.5, "y": 0.5},
            "size": 0.375,
            "shape": "hexagon",
            "rotation": 10,
        }
        assert data["statistics"]["total_perforations"] == 6

    def test_invalid_output_lists_errors(self) -> None:
        output = GenerationOutput(perforations=(), statistics=None, errors=["bad width"])
        assert json.loads(PatternJsonExporter().export(output)) == {"errors": ["bad width"]}

    def test_path_only_for_custom_shapes(self) -> None:
        exporter = PatternJsonExporter()
        plain = exporter.format_perforation(Perforation("a", Point(0, 0), 1, "circle"))
        custom = exporter.format_perforation(
            Perforation("b", Point(0, 0), 1, "custom", path="M 0 0 L 1 0 L 0 1 Z")
        )
        assert "path" not in plain
        assert custom["path"] == "M 0 0 L 1 0 L 0 1 Z"

    def test_load_reads_export(self, output) -> None:
        exporter = PatternJsonExporter()
        loaded = exporter.load(exporter.export(output))

        assert loaded.id == output.id
        assert loaded.panel == PanelSpec(3, 2, Units.INCHES)
        assert loaded.perforations == output.perforations

    def test_load_defaults(self) -> None:
        document = {
            "panel": {"width": 10, "height": 5},
            "perforations": [{"id": 1, "position": {"x": 1, "y": 2}, "size": 0.5}],
        }
        loaded = PatternJsonExporter().load(json.dumps(document))
        (perforation,) = loaded.perforations
        assert perforation.id == "1"
        assert perforation.shape.value == "circle"
        assert perforation.rotation == 0
        assert loaded.panel.units is Units.INCHES

    @pytest.mark.parametrize(
        "content",
        ["not json", "[]", '{"panel": {"width": 1, "height": 1}}', '{"errors": ["x"]}'],
    )
    def test_load_rejects_other_documents(self, content: str) -> None:
        with pytest.raises(ValueError, match="Not a pattern document"):
            PatternJsonExporter().load(content)


class TestStatisticsFormatter:
    def test_format(self) -> None:
        perfs = [Perforation("a", Point(1, 1), 1, "circle"), Perforation("b", Point(2, 2), 1, "circle")]
        text = StatisticsFormatter().format(compute_statistics(perfs, PanelSpec(10, 10)), Units.INCHES)

        lines = text.splitlines()
        assert lines[0] == "PATTERN STATISTICS"
        assert "Perforations:     2" in lines
        assert "Coverage:         1.57%" in lines
        assert "Size range:       1.000 - 1.000 inches" in lines
        assert "Density:          0.02 per sq inches" in lines


class TestCatalogFormatter:
    def test_shapes(self) -> None:
        text = CatalogFormatter().format_shapes()
        assert "circle    * π × (d/2)²" in text
        assert "rectangle" in text
        assert "unknown" not in text
        assert text.endswith("* recommended")

    def test_patterns(self) -> None:
        lines = CatalogFormatter().format_patterns().splitlines()
        staggered = next(line for line in lines if line.startswith("staggered"))
        custom = next(line for line in lines if line.startswith("custom"))
        assert "*" in staggered
        assert "very high" in staggered
        assert custom.endswith("(not generated)")
