"""Tests for PdfExporter and page layout."""

from __future__ import annotations

from datetime import datetime

import pytest

from perforations.domain import (
    ExportSettings,
    PanelSpec,
    PdfSettings,
    Perforation,
    Point,
    SerializationError,
    Units,
)
from perforations.infrastructure.exporters import PdfExporter
from perforations.infrastructure.exporters.pdf import compute_layout, page_size


class TestPageSize:
    """Tests for page presets and orientation."""

    def test_letter_landscape(self) -> None:
        assert page_size(PdfSettings(), 24, 36, Units.INCHES) == (792, 612)

    def test_a4_portrait(self) -> None:
        width, height = page_size(PdfSettings(page_size="A4", orientation="portrait"), 1, 1, Units.MM)
        assert width < height

    def test_custom_fits_panel(self) -> None:
        """Custom pages are the panel plus two units on each dimension."""
        size = page_size(PdfSettings(page_size="custom", orientation="portrait"), 10, 20, Units.INCHES)
        assert size == pytest.approx((864, 1584))

    def test_custom_in_mm(self) -> None:
        size = page_size(PdfSettings(page_size="custom"), 98, 48, Units.MM)
        assert size == pytest.approx((100 * 72 / 25.4, 50 * 72 / 25.4))

    def test_unknown_preset(self) -> None:
        with pytest.raises(ValueError):
            page_size(PdfSettings(page_size="B5"), 1, 1, Units.INCHES)


class TestComputeLayout:
    """Tests for fitting the panel between the margins."""

    def test_large_panel_scaled_down(self) -> None:
        layout = compute_layout(11, 8.5, 0.5, 24, 36)
        assert layout.scale == pytest.approx(7.5 / 36)
        assert layout.scaled_height == pytest.approx(7.5)
        assert layout.offset_y == pytest.approx(0.5)
        assert layout.offset_x == pytest.approx(0.5 + (10 - 24 * 7.5 / 36) / 2)

    def test_small_panel_never_scaled_up(self) -> None:
        layout = compute_layout(11, 8.5, 0.5, 2, 2)
        assert layout.scale == 1
        assert layout.offset_x == pytest.approx(4.5)
        assert layout.offset_y == pytest.approx(3.25)

    def test_zero_dimension_does_not_constrain(self) -> None:
        layout = compute_layout(11, 8.5, 0.5, 0, 100)
        assert layout.scale == pytest.approx(0.075)


class TestPdfExporter:
    """Tests for the rendered document."""

    @pytest.fixture
    def perforations(self) -> list[Perforation]:
        return [
            Perforation("a", Point(1, 1), 0.5, "circle"),
            Perforation("b", Point(2, 1), 0.5, "triangle", rotation=15),
            Perforation("c", Point(3, 1), 0.5, "square"),
        ]

    def test_produces_pdf(self, perforations) -> None:
        payload = PdfExporter().export_bytes(PanelSpec(4, 2), perforations, ExportSettings(format="pdf"))
        assert payload.startswith(b"%PDF")
        assert payload.rstrip().endswith(b"%%EOF")

    def test_fixed_timestamp_is_reproducible(self, perforations) -> None:
        exporter = PdfExporter(generated_at=datetime(2024, 5, 1, 12, 0, 0))
        settings = ExportSettings(format="pdf")
        first = exporter.export_bytes(PanelSpec(4, 2), perforations, settings)
        second = exporter.export_bytes(PanelSpec(4, 2), perforations, settings)
        assert first == second

    def test_custom_page_mm(self, perforations) -> None:
        settings = ExportSettings(
            format="pdf",
            units="mm",
            include_dimensions=False,
            pdf_settings=PdfSettings(page_size="custom", margin=10),
        )
        payload = PdfExporter().export_bytes(PanelSpec(4, 2), perforations, settings)
        assert payload.startswith(b"%PDF")

    def test_empty_panel(self) -> None:
        payload = PdfExporter().export_bytes(PanelSpec(0, 0), [], ExportSettings(format="pdf"))
        assert payload.startswith(b"%PDF")

    def test_malformed_custom_shape(self) -> None:
        perfs = [Perforation("x", Point(1, 1), 0.5, "custom", path="M 0 0")]
        with pytest.raises(SerializationError) as exc_info:
            PdfExporter().export_bytes(PanelSpec(4, 2), perfs, ExportSettings(format="pdf"))
        assert exc_info.value.format_name == "pdf"
