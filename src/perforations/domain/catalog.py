"""Descriptive catalogue of the supported shapes and patterns."""

from __future__ import annotations

from dataclasses import dataclass

from .value_objects import PatternKind, ShapeKind


@dataclass(frozen=True)
class ShapeInfo:
    id: ShapeKind
    name: str
    description: str
    parameters: tuple[str, ...]
    area_formula: str
    recommended: bool
    note: str | None = None


@dataclass(frozen=True)
class PatternInfo:
    id: PatternKind
    name: str
    description: str
    parameters: tuple[str, ...]
    recommended: bool
    efficiency: str
    supported: bool = True


SHAPE_CATALOG: tuple[ShapeInfo, ...] = (
    ShapeInfo(
        ShapeKind.CIRCLE,
        "Circle",
        "Standard circular perforations",
        ("diameter",),
        "π × (d/2)²",
        recommended=True,
    ),
    ShapeInfo(
        ShapeKind.SQUARE,
        "Square",
        "Square perforations",
        ("side length",),
        "s²",
        recommended=True,
    ),
    ShapeInfo(
        ShapeKind.RECTANGLE,
        "Rectangle",
        "Rectangular perforations in 4:3 proportion",
        ("width",),
        "w × 0.75w",
        recommended=False,
    ),
    ShapeInfo(
        ShapeKind.HEXAGON,
        "Hexagon",
        "Hexagonal perforations",
        ("diameter",),
        "(3√3/2) × (d/2)²",
        recommended=False,
    ),
    ShapeInfo(
        ShapeKind.TRIANGLE,
        "Triangle",
        "Triangular perforations",
        ("side length",),
        "(√3/4) × s²",
        recommended=False,
    ),
    ShapeInfo(
        ShapeKind.CUSTOM,
        "Custom",
        "User-defined vector shape",
        ("SVG path",),
        "measured as a circle of the same size",
        recommended=False,
        note="Requires SVG path definition",
    ),
)


PATTERN_CATALOG: tuple[PatternInfo, ...] = (
    PatternInfo(
        PatternKind.GRID,
        "Grid",
        "Regular grid pattern with uniform spacing",
        ("horizontal spacing", "vertical spacing"),
        recommended=True,
        efficiency="high",
    ),
    PatternInfo(
        PatternKind.STAGGERED,
        "Staggered",
        "Offset grid pattern for higher density",
        ("horizontal spacing", "vertical spacing"),
        recommended=True,
        efficiency="very high",
    ),
    PatternInfo(
        PatternKind.RANDOM,
        "Random",
        "Randomly distributed perforations",
        ("density",),
        recommended=False,
        efficiency="medium",
    ),
    PatternInfo(
        PatternKind.RADIAL,
        "Radial",
        "Circular pattern radiating from center",
        ("radial spacing", "angular spacing"),
        recommended=False,
        efficiency="medium",
    ),
    PatternInfo(
        PatternKind.CUSTOM,
        "Custom",
        "User-defined pattern",
        ("pattern definition",),
        recommended=False,
        efficiency="variable",
        supported=False,
    ),
)
