"""Pytest configuration and shared fixtures for perforation tests."""

from __future__ import annotations

import itertools
import random
from collections.abc import Callable
from io import BytesIO

import pytest
from PIL import Image

from perforations.domain import (
    PanelSpec,
    PatternGenerator,
    PatternKind,
    PerforationSettings,
    ShapeKind,
    Spacing,
    Units,
)


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Domain fixtures
# =============================================================================


@pytest.fixture
def panel() -> PanelSpec:
    """A 24 x 36 inch panel."""
    return PanelSpec(width=24.0, height=36.0, units=Units.INCHES)


@pytest.fixture
def make_settings() -> Callable[..., PerforationSettings]:
    """Factory for PerforationSettings with 1 inch spacing by default."""

    def _make(
        pattern: PatternKind | str = PatternKind.GRID,
        shape: ShapeKind | str = ShapeKind.CIRCLE,
        min_size: float = 0.25,
        max_size: float = 0.5,
        horizontal: float = 1.0,
        vertical: float = 1.0,
        **kwargs,
    ) -> PerforationSettings:
        return PerforationSettings(
            min_size=min_size,
            max_size=max_size,
            shape=shape,
            pattern=PatternKind.coerce(pattern),
            spacing=Spacing(horizontal, vertical),
            **kwargs,
        )

    return _make


@pytest.fixture
def generator() -> PatternGenerator:
    """Generator with a seeded random source and sequential ids."""
    counter = itertools.count(1)
    return PatternGenerator(rng=random.Random(42), id_factory=lambda: f"p{next(counter)}")


# =============================================================================
# Image fixtures
# =============================================================================


def png_bytes(image: Image.Image) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def make_png() -> Callable[[Image.Image], bytes]:
    """Encode a Pillow image as PNG bytes."""
    return png_bytes


@pytest.fixture
def gradient_png() -> bytes:
    """A 16 x 8 horizontal gradient, black on the left to white on the right."""
    image = Image.new("L", (16, 8))
    image.putdata([x * 17 for _ in range(8) for x in range(16)])
    return png_bytes(image.convert("RGB"))


@pytest.fixture
def black_png() -> bytes:
    """A 4 x 4 solid black image."""
    return png_bytes(Image.new("RGB", (4, 4), (0, 0, 0)))
