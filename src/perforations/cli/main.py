"""Typer CLI for perforated panel design."""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from perforations.application import (
    ExportInput,
    ExportPanelCommand,
    GenerateFromImageCommand,
    GeneratePatternCommand,
    GenerationInput,
    ImageGenerationInput,
    PanelInput,
    PerforationSettingsInput,
)
from perforations.application.config import (
    ConfigError,
    config_to_export_inputs,
    config_to_inputs,
    load_config,
)
from perforations.domain import (
    DegenerateInputError,
    ImageDecodeError,
    ImageProcessingOptions,
    InvalidPatternError,
    PdfSettings,
    SerializationError,
)
from perforations.infrastructure import (
    CatalogFormatter,
    ExporterRegistry,
    ExportManager,
    PatternJsonExporter,
    StatisticsFormatter,
    encode_png,
    load_image,
)

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="perforations",
    help="Design perforated panels and export them for CNC, laser and print.",
)


@app.callback()
def main(
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_formats(output_formats: str) -> list[str]:
    if output_formats.lower() == "all":
        return ExporterRegistry.available_formats()
    formats = [f.strip().lower() for f in output_formats.split(",") if f.strip()]
    available = ExporterRegistry.available_formats()
    invalid = [f for f in formats if f not in available]
    if invalid:
        typer.echo(f"Unknown formats: {', '.join(invalid)}", err=True)
        typer.echo(f"Available formats: {', '.join(available)}", err=True)
        raise typer.Exit(code=1)
    return formats


def _display_config_error(error: ConfigError) -> None:
    typer.echo(f"Error: {error.message}", err=True)
    if error.error_type == "validation":
        return
    for detail in error.details:
        if "line" in detail:
            typer.echo(
                f"  Line {detail['line']}, column {detail['column']}: {detail['message']}",
                err=True,
            )


def _run_exports(
    export_inputs: list[ExportInput], output_dir: Path
) -> list[Path]:
    logger.debug(f"Exporting {len(export_inputs)} format(s) under {output_dir}")
    command = ExportPanelCommand(export_manager=ExportManager(output_dir=output_dir))
    paths: list[Path] = []
    for export_input in export_inputs:
        output = command.execute(export_input)
        if not output.is_valid:
            for error in output.errors:
                typer.echo(f"Error: {error}", err=True)
            raise typer.Exit(code=1)
        paths.append(output.path)
    return paths


@app.command()
def generate(
    config_file: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="Path to JSON design file"),
    ] = None,
    width: Annotated[
        float | None, typer.Option("--width", "-w", help="Panel width")
    ] = None,
    height: Annotated[
        float | None, typer.Option("--height", "-h", help="Panel height")
    ] = None,
    units: Annotated[
        str, typer.Option("--units", "-u", help="Panel units: inches or mm")
    ] = "inches",
    min_size: Annotated[
        float, typer.Option("--min-size", help="Smallest perforation size")
    ] = 0.25,
    max_size: Annotated[
        float, typer.Option("--max-size", help="Largest perforation size")
    ] = 0.5,
    spacing_x: Annotated[
        float, typer.Option("--spacing-x", help="Horizontal spacing")
    ] = 1.0,
    spacing_y: Annotated[
        float, typer.Option("--spacing-y", help="Vertical spacing")
    ] = 1.0,
    shape: Annotated[
        str,
        typer.Option(
            "--shape", "-s", help="circle, square, rectangle, hexagon, triangle or custom"
        ),
    ] = "circle",
    pattern: Annotated[
        str, typer.Option("--pattern", "-p", help="grid, staggered, random or radial")
    ] = "grid",
    rotation: Annotated[
        float, typer.Option("--rotation", help="Rotation in degrees")
    ] = 0.0,
    density: Annotated[
        float | None, typer.Option("--density", help="Random pattern fill fraction (0-1)")
    ] = None,
    custom_shape: Annotated[
        str | None, typer.Option("--custom-shape", help="SVG path data for custom shapes")
    ] = None,
    seed: Annotated[
        int | None, typer.Option("--seed", help="Seed for the random pattern")
    ] = None,
    brightness: Annotated[
        float | None,
        typer.Option("--brightness", help="Mean brightness (0-255) driving uniform sizes"),
    ] = None,
    image: Annotated[
        Path | None,
        typer.Option("--image", "-i", help="Image whose brightness drives sizes"),
    ] = None,
    invert: Annotated[
        bool, typer.Option("--invert/--no-invert", help="Darker areas get larger holes")
    ] = True,
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the pattern as JSON to this file"),
    ] = None,
    output_formats: Annotated[
        str | None,
        typer.Option("--output-formats", help="Comma-separated export formats (or 'all')"),
    ] = None,
    output_dir: Annotated[
        Path | None,
        typer.Option("--output-dir", help="Output directory for exports"),
    ] = None,
) -> None:
    """Generate a perforation pattern from flags or a design file."""
    config = None
    if config_file is not None:
        try:
            config = load_config(config_file)
        except ConfigError as e:
            _display_config_error(e)
            raise typer.Exit(code=1)

    try:
        if config is not None:
            generation_input = config_to_inputs(config, base_dir=config_file.parent)
        else:
            if width is None or height is None:
                typer.echo("Error: --width and --height are required without --config", err=True)
                raise typer.Exit(code=1)
            grid = None
            if image is not None:
                grid = load_image(image, max_dimension=1024).grid
            generation_input = GenerationInput(
                panel=PanelInput(width=width, height=height, units=units),
                settings=PerforationSettingsInput(
                    min_size=min_size,
                    max_size=max_size,
                    horizontal_spacing=spacing_x,
                    vertical_spacing=spacing_y,
                    shape=shape,
                    pattern=pattern,
                    rotation=rotation,
                    density=density,
                    custom_shape=custom_shape,
                ),
                brightness=grid if grid is not None else brightness,
                invert=invert,
                seed=seed,
            )
        result = GeneratePatternCommand().execute(generation_input)
    except (ImageDecodeError, InvalidPatternError, DegenerateInputError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not result.is_valid:
        for error in result.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)

    typer.echo(StatisticsFormatter().format(result.statistics, result.panel.units))

    if output_file is not None:
        output_file.write_text(PatternJsonExporter().export(result), encoding="utf-8")
        typer.echo(f"Pattern written to {output_file}")

    export_inputs: list[ExportInput] = []
    if output_formats is not None:
        for format_name in _parse_formats(output_formats):
            export_inputs.append(
                ExportInput(
                    panel=generation_input.panel,
                    perforations=result.perforations,
                    format=format_name,
                    units=generation_input.panel.units,
                )
            )
    elif config is not None and (config.export.output_dir or output_dir):
        export_inputs = config_to_export_inputs(config, result.perforations)

    if export_inputs:
        target = output_dir or Path(
            config.export.output_dir if config and config.export.output_dir else "."
        )
        try:
            paths = _run_exports(export_inputs, target)
        except SerializationError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(code=1)
        for path in paths:
            typer.echo(f"Exported {path}")


@app.command()
def export(
    pattern_file: Annotated[
        Path, typer.Argument(help="Pattern JSON written by 'perforations generate -o'")
    ],
    output_format: Annotated[
        str, typer.Option("--format", "-f", help="Export format")
    ] = "svg",
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: suggested filename)"),
    ] = None,
    units: Annotated[
        str | None, typer.Option("--units", "-u", help="Export units (default: panel units)")
    ] = None,
    scale: Annotated[float, typer.Option("--scale", help="Extra scale factor")] = 1.0,
    outline: Annotated[
        bool, typer.Option("--outline/--no-outline", help="Draw the panel outline")
    ] = True,
    dimensions: Annotated[
        bool, typer.Option("--dimensions/--no-dimensions", help="Draw dimension labels")
    ] = True,
    page_size: Annotated[
        str, typer.Option("--page-size", help="PDF page: A4, A3, Letter, Tabloid or custom")
    ] = "Letter",
    orientation: Annotated[
        str, typer.Option("--orientation", help="PDF orientation: portrait or landscape")
    ] = "landscape",
    margin: Annotated[
        float, typer.Option("--margin", help="PDF margin in export units")
    ] = 0.5,
) -> None:
    """Export a generated pattern to DXF, SVG or PDF."""
    try:
        pattern = PatternJsonExporter().load(pattern_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    panel = pattern.panel
    export_input = ExportInput(
        panel=PanelInput(width=panel.width, height=panel.height, units=panel.units.value),
        perforations=pattern.perforations,
        format=output_format.lower(),
        units=units or panel.units.value,
        scale=scale,
        include_outline=outline,
        include_dimensions=dimensions,
        pdf_settings=PdfSettings(page_size=page_size, orientation=orientation, margin=margin),
    )

    try:
        output = ExportPanelCommand().execute(export_input)
    except SerializationError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not output.is_valid:
        for error in output.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)

    target = output_file or Path(output.filename)
    target.write_bytes(output.content)
    typer.echo(f"Exported {output.size} bytes to {target}")


@app.command(name="image")
def image_command(
    image_file: Annotated[Path, typer.Argument(help="Image to sample")],
    canvas_width: Annotated[
        float, typer.Option("--canvas-width", help="Canvas width")
    ] = 800.0,
    canvas_height: Annotated[
        float, typer.Option("--canvas-height", help="Canvas height")
    ] = 600.0,
    min_size: Annotated[float, typer.Option("--min-size")] = 2.0,
    max_size: Annotated[float, typer.Option("--max-size")] = 20.0,
    min_spacing: Annotated[float, typer.Option("--min-spacing")] = 5.0,
    max_spacing: Annotated[float, typer.Option("--max-spacing")] = 50.0,
    density: Annotated[
        float, typer.Option("--density", help="Sampling density (0-100)")
    ] = 50.0,
    threshold: Annotated[
        float, typer.Option("--threshold", help="Brightness threshold (0-255)")
    ] = 128.0,
    invert: Annotated[bool, typer.Option("--invert/--no-invert")] = True,
    snap: Annotated[
        float | None, typer.Option("--snap", help="Snap positions to this grid size")
    ] = None,
    output_file: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write perforations as JSON")
    ] = None,
    processed_file: Annotated[
        Path | None,
        typer.Option("--processed", help="Write the sampled image as PNG"),
    ] = None,
) -> None:
    """Place perforations by sampling an image's brightness."""
    options = ImageProcessingOptions(
        min_size=min_size,
        max_size=max_size,
        min_spacing=min_spacing,
        max_spacing=max_spacing,
        density=density,
        snap_to_grid=snap is not None,
        grid_size=snap if snap is not None else 10.0,
        threshold=threshold,
        invert=invert,
    )
    try:
        output = GenerateFromImageCommand().execute(
            ImageGenerationInput(
                image=image_file,
                canvas_width=canvas_width,
                canvas_height=canvas_height,
                options=options,
            )
        )
    except (ImageDecodeError, OSError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)

    if not output.is_valid:
        for error in output.errors:
            typer.echo(f"Error: {error}", err=True)
        raise typer.Exit(code=1)

    summary = output.result.summary
    typer.echo(f"Perforations: {summary.total_perforations}")
    typer.echo(f"Average size: {summary.average_size:.2f}")
    typer.echo(f"Coverage:     {summary.coverage:.2f}%")

    if output_file is not None:
        exporter = PatternJsonExporter()
        data = {
            "canvas": {"width": canvas_width, "height": canvas_height},
            "perforations": [exporter.format_perforation(p) for p in output.result.perforations],
            "summary": {
                "total_perforations": summary.total_perforations,
                "average_size": summary.average_size,
                "coverage": summary.coverage,
            },
        }
        output_file.write_text(json.dumps(data, indent=2), encoding="utf-8")
        typer.echo(f"Perforations written to {output_file}")

    if processed_file is not None:
        processed_file.write_bytes(encode_png(output.result.processed))
        typer.echo(f"Processed image written to {processed_file}")


@app.command()
def shapes() -> None:
    """List perforation shapes."""
    typer.echo(CatalogFormatter().format_shapes())


@app.command()
def patterns() -> None:
    """List placement patterns."""
    typer.echo(CatalogFormatter().format_patterns())


@app.command()
def formats() -> None:
    """List export formats."""
    for name in ExporterRegistry.available_formats():
        exporter_class = ExporterRegistry.get(name)
        typer.echo(f"{name:<6} .{exporter_class.file_extension:<5} {exporter_class.mime_type}")


if __name__ == "__main__":
    app()
