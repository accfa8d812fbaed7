"""Outline geometry for perforation shapes.

Every exporter asks this module for the vertices of a perforation so the
shape conventions stay identical across formats. ``None`` means the
perforation is drawn as a circle of diameter ``size``.
"""

from __future__ import annotations

import math
import re

from .exceptions import SerializationError
from .value_objects import Perforation, ShapeKind

Vertex = tuple[float, float]

RECTANGLE_ASPECT = 0.75

_PATH_TOKEN = re.compile(r"[MmLlHhVvZz]|[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_PATH_VALID = re.compile(r"^[\sMmLlHhVvZz0-9eE.,+\-]*$")


def _regular_polygon(sides: int, radius: float, start_angle: float) -> list[Vertex]:
    return [
        (
            radius * math.cos(start_angle + i * 2 * math.pi / sides),
            radius * math.sin(start_angle + i * 2 * math.pi / sides),
        )
        for i in range(sides)
    ]


def unit_outline(shape: ShapeKind, size: float) -> list[Vertex] | None:
    """Vertices of a built-in shape centered on the origin, unrotated.

    Returns None for shapes drawn as circles.
    """
    if shape is ShapeKind.SQUARE:
        half = size / 2
        return [(-half, -half), (half, -half), (half, half), (-half, half)]
    if shape is ShapeKind.RECTANGLE:
        half_w = size / 2
        half_h = size * RECTANGLE_ASPECT / 2
        return [(-half_w, -half_h), (half_w, -half_h), (half_w, half_h), (-half_w, half_h)]
    if shape is ShapeKind.HEXAGON:
        return _regular_polygon(6, size / 2, 0.0)
    if shape is ShapeKind.TRIANGLE:
        # Equilateral with edge ``size``; apex toward negative y.
        return _regular_polygon(3, size / math.sqrt(3), -math.pi / 2)
    return None


def parse_path(path: str) -> list[Vertex]:
    """Parse straight-segment SVG path data into a polygon.

    Supports M, L, H, V and Z in absolute and relative form. Only the
    first subpath is used.

    Raises:
        ValueError: If the path is empty, uses unsupported commands, or has
            fewer than three vertices.
    """
    if not path or not _PATH_VALID.match(path):
        raise ValueError(f"Unsupported or empty path data: {path!r}")

    tokens = _PATH_TOKEN.findall(path)
    vertices: list[Vertex] = []
    x = y = 0.0
    command: str | None = None
    index = 0

    def number() -> float:
        nonlocal index
        if index >= len(tokens) or tokens[index].isalpha():
            raise ValueError(f"Expected a number in path data: {path!r}")
        value = float(tokens[index])
        index += 1
        return value

    while index < len(tokens):
        token = tokens[index]
        if token.isalpha():
            command = token
            index += 1
            if command in "Zz":
                break
            if command in "Mm" and vertices:
                break
        elif command is None:
            raise ValueError(f"Path data must start with a command: {path!r}")

        if command in "Mm" or command in "Ll":
            dx, dy = number(), number()
            if command.islower():
                x, y = x + dx, y + dy
            else:
                x, y = dx, dy
            if command == "M":
                command = "L"
            elif command == "m":
                command = "l"
        elif command in "Hh":
            value = number()
            x = x + value if command == "h" else value
        elif command in "Vv":
            value = number()
            y = y + value if command == "v" else value
        vertices.append((x, y))

    if len(vertices) >= 2 and vertices[0] == vertices[-1]:
        vertices.pop()
    if len(vertices) < 3:
        raise ValueError(f"Path must describe at least three vertices: {path!r}")
    return vertices


def rotate(vertices: list[Vertex], degrees: float) -> list[Vertex]:
    """Rotate vertices about the origin."""
    if not degrees:
        return list(vertices)
    theta = math.radians(degrees)
    cos_t = math.cos(theta)
    sin_t = math.sin(theta)
    return [(vx * cos_t - vy * sin_t, vx * sin_t + vy * cos_t) for vx, vy in vertices]


def local_outline(perforation: Perforation) -> list[Vertex] | None:
    """Unrotated outline of a perforation relative to its center.

    Raises:
        SerializationError: If a custom path cannot be parsed.
    """
    shape = perforation.shape
    if shape is ShapeKind.CUSTOM:
        if not perforation.path:
            return None
        try:
            points = parse_path(perforation.path)
        except ValueError as exc:
            raise SerializationError(
                f"Malformed custom shape path for perforation {perforation.id}: {exc}",
                perforation_id=perforation.id,
            ) from exc
        return [(px * perforation.size, py * perforation.size) for px, py in points]
    return unit_outline(shape, perforation.size)


def outline_vertices(
    perforation: Perforation, scale: float = 1.0, rotated: bool = True
) -> list[Vertex] | None:
    """Absolute outline of a perforation in (scaled) panel coordinates.

    Args:
        perforation: The perforation to outline.
        scale: Factor applied to position and size.
        rotated: Apply the perforation's rotation to the vertices.

    Returns:
        Vertex list, or None when the perforation is drawn as a circle.
    """
    local = local_outline(perforation)
    if local is None:
        return None
    if rotated:
        local = rotate(local, perforation.rotation)
    cx = perforation.position.x * scale
    cy = perforation.position.y * scale
    return [(cx + vx * scale, cy + vy * scale) for vx, vy in local]


__all__ = [
    "RECTANGLE_ASPECT",
    "Vertex",
    "local_outline",
    "outline_vertices",
    "parse_path",
    "rotate",
    "unit_outline",
]
