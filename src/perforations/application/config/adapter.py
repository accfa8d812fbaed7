"""Adapter to convert a DesignConfiguration into command DTOs.

The configuration schema mirrors the JSON file; the commands take flat
dataclass inputs. These functions map one onto the other, decoding the
driving image when the design names one.
"""

from collections.abc import Sequence
from pathlib import Path

from perforations.application.config.schema import DesignConfiguration
from perforations.application.dtos import (
    ExportInput,
    GenerationInput,
    PanelInput,
    PerforationSettingsInput,
)
from perforations.domain.value_objects import PdfSettings, Perforation
from perforations.infrastructure.images import load_image


def config_to_panel_input(config: DesignConfiguration) -> PanelInput:
    return PanelInput(
        width=config.panel.width,
        height=config.panel.height,
        units=config.panel.units.value,
    )


def config_to_settings_input(config: DesignConfiguration) -> PerforationSettingsInput:
    perforation = config.perforation
    return PerforationSettingsInput(
        min_size=perforation.min_size,
        max_size=perforation.max_size,
        horizontal_spacing=perforation.spacing.horizontal,
        vertical_spacing=perforation.spacing.vertical,
        shape=perforation.shape.value,
        pattern=perforation.pattern.value,
        rotation=perforation.rotation,
        density=perforation.density,
        custom_shape=perforation.custom_shape,
    )


def config_to_inputs(
    config: DesignConfiguration, base_dir: Path | None = None
) -> GenerationInput:
    """Convert a DesignConfiguration to a GenerationInput.

    When the design names an image, it is decoded and its brightness grid
    drives perforation sizes.

    Args:
        config: Validated design configuration.
        base_dir: Directory that relative image paths are resolved against.

    Raises:
        ImageDecodeError: If the image cannot be decoded.
    """
    brightness = None
    invert = True
    if config.image is not None:
        image_path = Path(config.image.path)
        if base_dir is not None and not image_path.is_absolute():
            image_path = base_dir / image_path
        brightness = load_image(image_path, max_dimension=config.image.max_dimension).grid
        invert = config.image.invert

    return GenerationInput(
        panel=config_to_panel_input(config),
        settings=config_to_settings_input(config),
        brightness=brightness,
        invert=invert,
        seed=config.perforation.seed,
    )


def config_to_export_inputs(
    config: DesignConfiguration, perforations: Sequence[Perforation]
) -> list[ExportInput]:
    """One ExportInput per configured export format."""
    export = config.export
    units = (export.units or config.panel.units).value
    pdf_settings = (
        PdfSettings(
            page_size=export.pdf.page_size,
            orientation=export.pdf.orientation,
            margin=export.pdf.margin,
        )
        if export.pdf is not None
        else None
    )
    return [
        ExportInput(
            panel=config_to_panel_input(config),
            perforations=perforations,
            format=format_name,
            units=units,
            scale=export.scale,
            include_outline=export.include_outline,
            include_dimensions=export.include_dimensions,
            pdf_settings=pdf_settings,
        )
        for format_name in export.formats
    ]
