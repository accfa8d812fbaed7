"""Exception types raised by the perforation domain."""

from __future__ import annotations


class PerforationError(Exception):
    """Base class for all perforation core errors."""


class InvalidPatternError(PerforationError, ValueError):
    """Raised when a pattern value has no placement algorithm."""

    def __init__(self, pattern: object) -> None:
        self.pattern = pattern
        super().__init__(f"Unsupported pattern: {pattern}")


class InvalidShapeError(PerforationError, ValueError):
    """Raised when a shape value is not a shape name at all.

    Unrecognized shape *names* are not errors; they resolve to
    ``ShapeKind.UNKNOWN`` and render as circles.
    """

    def __init__(self, shape: object) -> None:
        self.shape = shape
        super().__init__(f"Invalid shape value: {shape!r}")


class DegenerateInputError(PerforationError, ValueError):
    """Raised for input that has no well-defined geometric meaning.

    Zero-area panels and spacing larger than the panel are not degenerate;
    they produce empty results. Negative or non-finite dimensions and
    non-positive spacing are.
    """


class SerializationError(PerforationError):
    """Raised when an exporter cannot encode a perforation.

    Attributes:
        perforation_id: Id of the offending perforation, if known.
        format_name: Export format that failed.
    """

    def __init__(
        self,
        message: str,
        perforation_id: str | None = None,
        format_name: str | None = None,
    ) -> None:
        self.message = message
        self.perforation_id = perforation_id
        self.format_name = format_name
        super().__init__(message)


class ImageDecodeError(PerforationError, ValueError):
    """Raised when uploaded bytes cannot be decoded as a supported image."""


class UnsupportedFormatError(PerforationError, KeyError):
    """Raised when an export format is not registered."""

    def __init__(self, format_name: str, available: list[str]) -> None:
        self.format_name = format_name
        self.available = available
        super().__init__(format_name)

    def __str__(self) -> str:
        return (
            f"Unsupported format: {self.format_name}. "
            f"Available: {', '.join(self.available) or 'none'}"
        )


__all__ = [
    "DegenerateInputError",
    "ImageDecodeError",
    "InvalidPatternError",
    "InvalidShapeError",
    "PerforationError",
    "SerializationError",
    "UnsupportedFormatError",
]
