"""Coverage and size statistics for a perforation batch."""

from __future__ import annotations

import math
from collections.abc import Iterable

from ..shapes import RECTANGLE_ASPECT
from ..value_objects import PanelSpec, Perforation, ShapeKind, Statistics


def shape_area(shape: ShapeKind | str, size: float) -> float:
    """Area of one perforation.

    Unknown and custom shapes are measured as circles of diameter ``size``.
    """
    kind = ShapeKind.coerce(shape)
    if kind is ShapeKind.SQUARE:
        return size * size
    if kind is ShapeKind.RECTANGLE:
        return size * (size * RECTANGLE_ASPECT)
    if kind is ShapeKind.HEXAGON:
        return (3 * math.sqrt(3) / 2) * (size / 2) ** 2
    if kind is ShapeKind.TRIANGLE:
        return (math.sqrt(3) / 4) * size * size
    return math.pi * (size / 2) ** 2


class StatisticsCalculator:
    """Computes aggregate statistics for perforations on a panel.

    Rounding: coverage and density to 2 decimals, sizes to 3 decimals.
    An empty batch or a zero-area panel yields zeros rather than NaN.
    """

    def compute(self, perforations: Iterable[Perforation], panel: PanelSpec) -> Statistics:
        perfs = list(perforations)
        total_area = panel.area
        count = len(perfs)

        perforation_area = sum(shape_area(p.shape, p.size) for p in perfs)
        sizes = [p.size for p in perfs]

        if count == 0:
            return Statistics(
                total_perforations=0,
                total_area=total_area,
                total_perforation_area=0.0,
                coverage=0.0,
                average_size=0.0,
                min_size=0.0,
                max_size=0.0,
                density=0.0,
            )

        if total_area > 0:
            coverage = round(perforation_area / total_area * 100, 2)
            density = round(count / total_area, 2)
        else:
            coverage = 0.0
            density = 0.0

        return Statistics(
            total_perforations=count,
            total_area=total_area,
            total_perforation_area=perforation_area,
            coverage=coverage,
            average_size=round(sum(sizes) / count, 3),
            min_size=round(min(sizes), 3),
            max_size=round(max(sizes), 3),
            density=density,
        )


def compute_statistics(perforations: Iterable[Perforation], panel: PanelSpec) -> Statistics:
    """Shortcut for ``StatisticsCalculator().compute``."""
    return StatisticsCalculator().compute(perforations, panel)


__all__ = ["StatisticsCalculator", "compute_statistics", "shape_area"]
