"""Perforation placement algorithms.

Each pattern is a strategy that yields placements (center and rotation in
panel units). ``PatternGenerator`` resolves the strategy, sizes each
placement and assigns ids.
"""

from __future__ import annotations

import math
import random
import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import ClassVar, Protocol

from ..brightness import BrightnessGrid, BrightnessSample, map_size
from ..exceptions import InvalidPatternError
from ..units import UnitConverter
from ..value_objects import (
    PanelSpec,
    PatternKind,
    Perforation,
    PerforationSettings,
    Point,
    ShapeKind,
)

RANDOM_ROTATION_JITTER = 30.0  # full width, degrees
RADIAL_ANGLE_FACTOR = 10.0  # spacing.vertical -> degrees


@dataclass(frozen=True)
class Placement:
    """Where a perforation goes, before sizing."""

    x: float
    y: float
    rotation: float


@dataclass(frozen=True)
class GridLayout:
    """Row/column layout shared by the grid-based patterns (compute units)."""

    cols: int
    rows: int
    start_x: float
    start_y: float
    h_spacing: float
    v_spacing: float
    panel_width: float
    panel_height: float

    @property
    def count(self) -> int:
        return self.cols * self.rows

    @classmethod
    def for_panel(
        cls, panel: PanelSpec, settings: PerforationSettings, converter: UnitConverter
    ) -> GridLayout:
        width_px = converter.to_compute_units(panel.width, panel.units)
        height_px = converter.to_compute_units(panel.height, panel.units)
        h_px = converter.to_compute_units(settings.spacing.horizontal, panel.units)
        v_px = converter.to_compute_units(settings.spacing.vertical, panel.units)

        cols = math.floor(width_px / h_px)
        rows = math.floor(height_px / v_px)

        # Center the array on the panel
        start_x = (width_px - (cols - 1) * h_px) / 2
        start_y = (height_px - (rows - 1) * v_px) / 2

        return cls(
            cols=cols,
            rows=rows,
            start_x=start_x,
            start_y=start_y,
            h_spacing=h_px,
            v_spacing=v_px,
            panel_width=width_px,
            panel_height=height_px,
        )


class PatternStrategy(Protocol):
    """Protocol for placement algorithms."""

    pattern: ClassVar[PatternKind]

    def place(
        self,
        panel: PanelSpec,
        settings: PerforationSettings,
        converter: UnitConverter,
        rng: random.Random,
    ) -> Iterator[Placement]:
        ...


PATTERN_STRATEGIES: dict[PatternKind, PatternStrategy] = {}


def register_pattern(strategy_class: type) -> type:
    """Class decorator adding a strategy instance to PATTERN_STRATEGIES."""
    PATTERN_STRATEGIES[strategy_class.pattern] = strategy_class()
    return strategy_class


def grid_pattern_count(
    panel: PanelSpec, settings: PerforationSettings, converter: UnitConverter | None = None
) -> int:
    """Number of perforations the grid pattern would place."""
    return GridLayout.for_panel(panel, settings, converter or UnitConverter()).count


@register_pattern
class GridPattern:
    """Regular rows and columns, centered on the panel."""

    pattern: ClassVar[PatternKind] = PatternKind.GRID

    def place(self, panel, settings, converter, rng) -> Iterator[Placement]:
        layout = GridLayout.for_panel(panel, settings, converter)
        for row in range(layout.rows):
            for col in range(layout.cols):
                x = layout.start_x + col * layout.h_spacing
                y = layout.start_y + row * layout.v_spacing
                yield Placement(
                    converter.from_compute_units(x, panel.units),
                    converter.from_compute_units(y, panel.units),
                    settings.rotation,
                )


@register_pattern
class StaggeredPattern:
    """Grid with odd rows shifted by half the horizontal spacing.

    Shifted positions past the right edge are dropped rather than clamped,
    so offset rows can hold one perforation fewer.
    """

    pattern: ClassVar[PatternKind] = PatternKind.STAGGERED

    def place(self, panel, settings, converter, rng) -> Iterator[Placement]:
        layout = GridLayout.for_panel(panel, settings, converter)
        for row in range(layout.rows):
            offset_x = (row % 2) * (layout.h_spacing / 2)
            for col in range(layout.cols):
                x = layout.start_x + col * layout.h_spacing + offset_x
                y = layout.start_y + row * layout.v_spacing
                if x < 0 or x > layout.panel_width:
                    continue
                yield Placement(
                    converter.from_compute_units(x, panel.units),
                    converter.from_compute_units(y, panel.units),
                    settings.rotation,
                )


@register_pattern
class RandomPattern:
    """Uniform scatter over the panel.

    The count is the grid count scaled by ``settings.density``; spacing
    does not constrain positions.
    """

    pattern: ClassVar[PatternKind] = PatternKind.RANDOM

    def place(self, panel, settings, converter, rng) -> Iterator[Placement]:
        target = math.floor(
            grid_pattern_count(panel, settings, converter) * settings.random_density
        )
        for _ in range(max(target, 0)):
            x = rng.random() * panel.width
            y = rng.random() * panel.height
            jitter = (rng.random() - 0.5) * RANDOM_ROTATION_JITTER
            yield Placement(x, y, settings.rotation + jitter)


@register_pattern
class RadialPattern:
    """Concentric rings around the panel center.

    ``spacing.horizontal`` is the ring spacing; ``spacing.vertical * 10`` is
    the angular spacing in degrees. Ring hole counts are computed from the
    circumference in panel units.
    """

    pattern: ClassVar[PatternKind] = PatternKind.RADIAL

    def place(self, panel, settings, converter, rng) -> Iterator[Placement]:
        radial_spacing = settings.spacing.horizontal
        angular_spacing = settings.spacing.vertical * RADIAL_ANGLE_FACTOR
        max_radius = min(panel.width, panel.height) / 2
        rings = math.floor(max_radius / radial_spacing)

        center_x = converter.to_compute_units(panel.width / 2, panel.units)
        center_y = converter.to_compute_units(panel.height / 2, panel.units)
        width_px = converter.to_compute_units(panel.width, panel.units)
        height_px = converter.to_compute_units(panel.height, panel.units)

        for ring in range(1, rings + 1):
            radius = ring * radial_spacing
            circumference = 2 * math.pi * radius
            holes = math.floor(circumference / (angular_spacing * math.pi / 180))
            radius_px = converter.to_compute_units(radius, panel.units)

            for i in range(holes):
                angle = (i / holes) * 2 * math.pi
                x = center_x + radius_px * math.cos(angle)
                y = center_y + radius_px * math.sin(angle)
                if x < 0 or x > width_px or y < 0 or y > height_px:
                    continue
                yield Placement(
                    converter.from_compute_units(x, panel.units),
                    converter.from_compute_units(y, panel.units),
                    settings.rotation + math.degrees(angle),
                )


def _new_id() -> str:
    return str(uuid.uuid4())


class PatternGenerator:
    """Generates perforation batches from a panel and settings.

    Args:
        converter: Unit converter; its DPI sets the compute resolution.
        rng: Random source for the random pattern. Seed it for
            reproducible output.
        id_factory: Callable returning a fresh perforation id.
    """

    def __init__(
        self,
        converter: UnitConverter | None = None,
        rng: random.Random | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.converter = converter or UnitConverter()
        self.rng = rng or random.Random()
        self.id_factory = id_factory or _new_id

    def strategy_for(self, pattern: PatternKind | str) -> PatternStrategy:
        """Resolve the placement strategy for a pattern.

        Raises:
            InvalidPatternError: If the pattern has no strategy.
        """
        kind = PatternKind.coerce(pattern)
        strategy = PATTERN_STRATEGIES.get(kind)
        if strategy is None:
            raise InvalidPatternError(kind.value)
        return strategy

    def generate(
        self,
        panel: PanelSpec,
        settings: PerforationSettings,
        brightness: BrightnessSample | None = None,
        invert: bool = True,
    ) -> tuple[Perforation, ...]:
        """Generate the perforations for a panel.

        Args:
            panel: Panel dimensions and units.
            settings: Generation parameters. ``max_size >= min_size`` is
                assumed.
            brightness: None for constant mid-range sizes, a scalar for one
                mapped size across the batch, or a BrightnessGrid for
                per-position sizes.
            invert: Map darker brightness to larger sizes.

        Returns:
            Tuple of perforations in generation order.

        Raises:
            InvalidPatternError: Unsupported pattern, before any work.
            DegenerateInputError: Negative/non-finite panel dimensions or
                non-positive spacing.
        """
        strategy = self.strategy_for(settings.pattern)
        panel.validate()
        settings.spacing.validate()

        size_at = self._sizer(panel, settings, brightness, invert)
        path = settings.custom_shape if settings.shape is ShapeKind.CUSTOM else None

        return tuple(
            Perforation(
                id=self.id_factory(),
                position=Point(placement.x, placement.y),
                size=size_at(placement.x, placement.y),
                shape=settings.shape,
                rotation=placement.rotation,
                path=path,
            )
            for placement in strategy.place(panel, settings, self.converter, self.rng)
        )

    @staticmethod
    def _sizer(
        panel: PanelSpec,
        settings: PerforationSettings,
        brightness: BrightnessSample | None,
        invert: bool,
    ) -> Callable[[float, float], float]:
        if brightness is None:
            size = settings.average_size
            return lambda x, y: size

        if isinstance(brightness, BrightnessGrid):
            grid = brightness

            def sample(x: float, y: float) -> float:
                value = grid.sample(x / panel.width, y / panel.height)
                return map_size(value, settings.min_size, settings.max_size, invert)

            return sample

        mapped = map_size(float(brightness), settings.min_size, settings.max_size, invert)
        return lambda x, y: mapped


__all__ = [
    "GridLayout",
    "GridPattern",
    "PATTERN_STRATEGIES",
    "PatternGenerator",
    "PatternStrategy",
    "Placement",
    "RadialPattern",
    "RandomPattern",
    "StaggeredPattern",
    "grid_pattern_count",
    "register_pattern",
]
