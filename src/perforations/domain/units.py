"""Conversion between physical units and compute units.

Compute units are pixels at a reference resolution. Spacing and step
calculations for the grid-based patterns run in compute units; positions
are converted back to the panel's physical units before they leave the
generator.
"""

from __future__ import annotations

from dataclasses import dataclass

from .value_objects import Units

MM_PER_INCH = 25.4
DEFAULT_DPI = 300.0


@dataclass(frozen=True)
class UnitConverter:
    """Converts lengths using an explicit reference resolution.

    Attributes:
        dpi: Compute units per inch.
    """

    dpi: float = DEFAULT_DPI

    def to_compute_units(self, value: float, unit: Units | str) -> float:
        """Convert a physical length to compute units."""
        if Units(unit) is Units.MM:
            return value / MM_PER_INCH * self.dpi
        return value * self.dpi

    def from_compute_units(self, value: float, unit: Units | str) -> float:
        """Convert compute units back to a physical length."""
        if Units(unit) is Units.MM:
            return value / self.dpi * MM_PER_INCH
        return value / self.dpi

    @staticmethod
    def convert(value: float, from_unit: Units | str, to_unit: Units | str) -> float:
        """Convert a physical length between inches and millimetres."""
        return convert_length(value, from_unit, to_unit)


def to_compute_units(value: float, unit: Units | str, *, dpi: float = DEFAULT_DPI) -> float:
    return UnitConverter(dpi).to_compute_units(value, unit)


def from_compute_units(value: float, unit: Units | str, *, dpi: float = DEFAULT_DPI) -> float:
    return UnitConverter(dpi).from_compute_units(value, unit)


def convert_length(value: float, from_unit: Units | str, to_unit: Units | str) -> float:
    """Convert a physical length, e.g. inches to millimetres."""
    source = Units(from_unit)
    target = Units(to_unit)
    if source is target:
        return value
    if target is Units.MM:
        return value * MM_PER_INCH
    return value / MM_PER_INCH


__all__ = [
    "DEFAULT_DPI",
    "MM_PER_INCH",
    "UnitConverter",
    "convert_length",
    "from_compute_units",
    "to_compute_units",
]
