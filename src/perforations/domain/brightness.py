"""Brightness samples and the brightness-to-size mapping."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np
import numpy.typing as npt


def map_size(
    brightness: float, min_size: float, max_size: float, invert: bool = False
) -> float:
    """Map a 0-255 brightness value onto ``[min_size, max_size]``.

    With ``invert`` darker samples give larger sizes.
    """
    normalized = brightness / 255
    mapped = 1 - normalized if invert else normalized
    return min_size + mapped * (max_size - min_size)


@dataclass(frozen=True, eq=False)
class BrightnessGrid:
    """A 2-D grid of 0-255 brightness values in image pixel space.

    Attributes:
        values: Array of shape (height, width), row-major.
    """

    values: npt.NDArray[np.uint8]

    def __post_init__(self) -> None:
        array = np.asarray(self.values)
        if array.ndim != 2 or array.size == 0:
            raise ValueError(
                f"Brightness grid must be a non-empty 2-D array (got shape {array.shape})"
            )
        object.__setattr__(self, "values", np.clip(array, 0, 255).astype(np.uint8))

    @classmethod
    def from_rows(cls, rows: list[list[int]] | list[list[float]]) -> BrightnessGrid:
        return cls(np.array(rows, dtype=np.float64))

    @property
    def width(self) -> int:
        return int(self.values.shape[1])

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    @property
    def mean(self) -> float:
        return float(self.values.mean())

    def at(self, x: int, y: int) -> int:
        """Brightness at integer pixel coordinates."""
        return int(self.values[y, x])

    def sample(self, x_fraction: float, y_fraction: float) -> int:
        """Brightness at a position given as fractions of width and height.

        Fractions outside [0, 1) are clamped to the nearest edge pixel.
        """
        col = min(max(math.floor(x_fraction * self.width), 0), self.width - 1)
        row = min(max(math.floor(y_fraction * self.height), 0), self.height - 1)
        return self.at(col, row)


BrightnessSample = Union[float, int, BrightnessGrid]


__all__ = ["BrightnessGrid", "BrightnessSample", "map_size"]
