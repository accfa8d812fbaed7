"""Text and JSON formatters for generated patterns."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from perforations.domain.catalog import PATTERN_CATALOG, SHAPE_CATALOG
from perforations.domain.value_objects import (
    PanelSpec,
    Perforation,
    Point,
    Statistics,
    Units,
)

if TYPE_CHECKING:
    from perforations.application.dtos import GenerationOutput


@dataclass(frozen=True)
class LoadedPattern:
    """A pattern read back from its JSON document."""

    panel: PanelSpec
    perforations: tuple[Perforation, ...]
    id: str = ""


class PatternJsonExporter:
    """Exports a generated pattern as JSON and reads it back.

    The document holds the panel, every perforation and the statistics, so
    ``perforations export`` can serialize a pattern without regenerating it.
    """

    def export(self, output: GenerationOutput) -> str:
        """Export generation output as JSON string."""
        if not output.is_valid:
            return json.dumps({"errors": output.errors}, indent=2)

        data: dict[str, Any] = {
            "id": output.id,
            "generated_at": output.generated_at.isoformat() if output.generated_at else None,
            "panel": {
                "width": output.panel.width,
                "height": output.panel.height,
                "units": output.panel.units.value,
            },
            "perforations": [self.format_perforation(p) for p in output.perforations],
            "statistics": self._format_statistics(output.statistics),
        }
        return json.dumps(data, indent=2)

    def format_perforation(self, perforation: Perforation) -> dict[str, Any]:
        result: dict[str, Any] = {
            "id": perforation.id,
            "position": {"x": perforation.position.x, "y": perforation.position.y},
            "size": perforation.size,
            "shape": perforation.shape.value,
            "rotation": perforation.rotation,
        }
        if perforation.path is not None:
            result["path"] = perforation.path
        return result

    def _format_statistics(self, statistics: Statistics | None) -> dict[str, Any] | None:
        if statistics is None:
            return None
        return {
            "total_perforations": statistics.total_perforations,
            "total_area": statistics.total_area,
            "total_perforation_area": statistics.total_perforation_area,
            "coverage": statistics.coverage,
            "average_size": statistics.average_size,
            "min_size": statistics.min_size,
            "max_size": statistics.max_size,
            "density": statistics.density,
        }

    def load(self, content: str) -> LoadedPattern:
        """Parse a document written by ``export``.

        Raises:
            ValueError: If the document is not valid JSON or lacks the panel
                or perforations.
        """
        try:
            data = json.loads(content)
            panel = data["panel"]
            perforations = tuple(
                Perforation(
                    id=str(item["id"]),
                    position=Point(float(item["position"]["x"]), float(item["position"]["y"])),
                    size=float(item["size"]),
                    shape=item.get("shape", "circle"),
                    rotation=float(item.get("rotation", 0.0)),
                    path=item.get("path"),
                )
                for item in data["perforations"]
            )
            return LoadedPattern(
                panel=PanelSpec(
                    width=float(panel["width"]),
                    height=float(panel["height"]),
                    units=Units(panel.get("units", "inches")),
                ),
                perforations=perforations,
                id=str(data.get("id", "")),
            )
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ValueError(f"Not a pattern document: {e}") from e


class StatisticsFormatter:
    """Formats pattern statistics for display."""

    def format(self, statistics: Statistics, units: Units) -> str:
        unit = units.value
        lines = [
            "PATTERN STATISTICS",
            "=" * 40,
            f"Perforations:     {statistics.total_perforations}",
            f"Panel area:       {statistics.total_area:.2f} sq {unit}",
            f"Open area:        {statistics.total_perforation_area:.3f} sq {unit}",
            f"Coverage:         {statistics.coverage:.2f}%",
            f"Average size:     {statistics.average_size:.3f} {unit}",
            f"Size range:       {statistics.min_size:.3f} - {statistics.max_size:.3f} {unit}",
            f"Density:          {statistics.density:.2f} per sq {unit}",
        ]
        return "\n".join(lines)


class CatalogFormatter:
    """Formats the shape and pattern catalogues as text tables."""

    def format_shapes(self) -> str:
        lines = [f"{'SHAPE':<11} {'AREA':<22} DESCRIPTION", "-" * 72]
        for info in SHAPE_CATALOG:
            marker = "*" if info.recommended else " "
            lines.append(f"{info.id.value:<10}{marker} {info.area_formula:<22} {info.description}")
        lines.append("")
        lines.append("* recommended")
        return "\n".join(lines)

    def format_patterns(self) -> str:
        lines = [f"{'PATTERN':<11} {'EFFICIENCY':<11} DESCRIPTION", "-" * 72]
        for info in PATTERN_CATALOG:
            marker = "*" if info.recommended else " "
            description = info.description if info.supported else f"{info.description} (not generated)"
            lines.append(f"{info.id.value:<10}{marker} {info.efficiency:<11} {description}")
        lines.append("")
        lines.append("* recommended")
        return "\n".join(lines)
