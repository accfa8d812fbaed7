"""Tests for application DTO validation."""

import pytest

from perforations.application import (
    ExportInput,
    GenerationInput,
    ImageGenerationInput,
    PanelInput,
    PerforationSettingsInput,
)
from perforations.domain import (
    BrightnessGrid,
    ExportFormat,
    ImageProcessingOptions,
    PatternKind,
    PdfSettings,
    ShapeKind,
    Units,
)


def settings_input(**overrides) -> PerforationSettingsInput:
    values = dict(min_size=0.25, max_size=0.5, horizontal_spacing=1, vertical_spacing=1)
    values.update(overrides)
    return PerforationSettingsInput(**values)


class TestPanelInput:
    """Tests for PanelInput validation."""

    def test_valid_panel(self) -> None:
        assert PanelInput(24, 36).validate() == []

    @pytest.mark.parametrize("width", [0.5, 121, -1])
    def test_width_out_of_range(self, width: float) -> None:
        assert PanelInput(width, 36).validate() == ["Panel width must be between 1 and 120 inches"]

    def test_ranges_checked_in_inches(self) -> None:
        """A 600 mm panel is about 23.6 inches and is accepted."""
        assert PanelInput(600, 600, "mm").validate() == []
        assert PanelInput(20, 600, "mm").validate() == [
            "Panel width must be between 1 and 120 inches"
        ]

    def test_invalid_units(self) -> None:
        assert PanelInput(10, 10, "cm").validate() == ["Units must be inches or mm"]

    def test_to_panel_spec(self) -> None:
        spec = PanelInput(100, 200, "mm").to_panel_spec()
        assert spec.units is Units.MM
        assert spec.area == 20000


class TestPerforationSettingsInput:
    """Tests for PerforationSettingsInput validation."""

    def test_valid_settings(self) -> None:
        assert settings_input().validate() == []

    def test_size_order(self) -> None:
        errors = settings_input(min_size=0.5, max_size=0.25).validate()
        assert errors == ["Maximum size must be greater than or equal to minimum size"]

    def test_size_range(self) -> None:
        errors = settings_input(min_size=0.01).validate()
        assert errors == ["Minimum size must be between 1/16 and 6 inches"]

    def test_spacing_range_in_mm(self) -> None:
        errors = settings_input(
            min_size=5, max_size=10, horizontal_spacing=25, vertical_spacing=400
        ).validate("mm")
        assert errors == ["Vertical spacing must be between 1/8 and 12 inches"]

    def test_unknown_shape(self) -> None:
        errors = settings_input(shape="star").validate()
        assert len(errors) == 1
        assert errors[0].startswith("Shape must be one of: circle, square")
        assert "unknown" not in errors[0]

    def test_custom_shape_needs_path(self) -> None:
        assert settings_input(shape="custom").validate() == ["Custom shape requires an SVG path"]
        assert settings_input(shape="custom", custom_shape="M 0 0 L 1 0 L 0 1 Z").validate() == []

    def test_unknown_pattern(self) -> None:
        errors = settings_input(pattern="spiral").validate()
        assert errors == ["Pattern must be one of: grid, staggered, random, radial, custom"]

    def test_density_range(self) -> None:
        assert settings_input(density=1.5).validate() == ["Density must be between 0 and 1"]

    def test_to_settings(self) -> None:
        settings = settings_input(shape="triangle", pattern="staggered", rotation=30).to_settings()
        assert settings.shape is ShapeKind.TRIANGLE
        assert settings.pattern is PatternKind.STAGGERED
        assert settings.spacing.horizontal == 1
        assert settings.rotation == 30


class TestGenerationInput:
    def test_collects_panel_and_settings_errors(self) -> None:
        generation_input = GenerationInput(PanelInput(0, 10), settings_input(density=2))
        assert len(generation_input.validate()) == 2

    def test_brightness_range(self) -> None:
        generation_input = GenerationInput(PanelInput(10, 10), settings_input(), brightness=300)
        assert generation_input.validate() == ["Brightness must be between 0 and 255"]

    def test_grid_brightness_not_range_checked(self) -> None:
        grid = BrightnessGrid.from_rows([[0, 255]])
        assert GenerationInput(PanelInput(10, 10), settings_input(), brightness=grid).validate() == []

    def test_dpi_must_be_positive(self) -> None:
        generation_input = GenerationInput(PanelInput(10, 10), settings_input(), dpi=0)
        assert generation_input.validate() == ["DPI must be positive"]


class TestExportInput:
    """Tests for ExportInput validation."""

    formats = ["dxf", "pdf", "svg"]

    def test_valid(self) -> None:
        assert ExportInput(PanelInput(24, 36), []).validate(self.formats) == []

    def test_unknown_format(self) -> None:
        errors = ExportInput(PanelInput(24, 36), [], format="stl").validate(self.formats)
        assert errors == ["Format must be one of: dxf, pdf, svg"]

    def test_scale_range(self) -> None:
        errors = ExportInput(PanelInput(24, 36), [], scale=20).validate(self.formats)
        assert errors == ["Scale must be between 0.1 and 10"]

    def test_pdf_settings(self) -> None:
        export_input = ExportInput(
            PanelInput(24, 36),
            [],
            format="pdf",
            pdf_settings=PdfSettings(page_size="B5", orientation="sideways", margin=-1),
        )
        assert export_input.validate(self.formats) == [
            "Page size must be one of: A4, A3, Letter, Tabloid, custom",
            "Orientation must be portrait or landscape",
            "Margin cannot be negative",
        ]

    def test_to_export_settings(self) -> None:
        settings = ExportInput(PanelInput(24, 36), [], format="dxf", units="mm").to_export_settings()
        assert settings.format is ExportFormat.DXF
        assert settings.units is Units.MM
        assert settings.layer_settings.perforation_layer == "PERFORATIONS"
        assert settings.pdf_settings is None


class TestImageGenerationInput:
    def test_canvas_must_be_positive(self) -> None:
        image_input = ImageGenerationInput(b"", canvas_width=0, canvas_height=100)
        assert image_input.validate() == ["Canvas dimensions must be positive"]

    def test_includes_option_errors(self) -> None:
        image_input = ImageGenerationInput(
            b"", 100, 100, options=ImageProcessingOptions(density=200)
        )
        assert image_input.validate() == ["density must be between 0 and 100"]
