"""Application commands (use cases) for perforation design."""

from __future__ import annotations

import logging
import math
import random
import uuid
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timezone

from perforations.domain import (
    ImageDrivenGenerator,
    PanelSpec,
    PatternGenerator,
    PatternKind,
    ShapeKind,
    Spacing,
    StatisticsCalculator,
    UnitConverter,
)
from perforations.infrastructure.exporters import ExporterRegistry, ExportManager, suggest_filename
from perforations.infrastructure.images import load_image

from .dtos import (
    ExportInput,
    ExportOutput,
    GenerationInput,
    GenerationOutput,
    ImageGenerationInput,
    ImageGenerationOutput,
    PanelInput,
    PerforationSettingsInput,
    Recommendations,
    StatisticsEstimate,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


class GeneratePatternCommand:
    """Command to generate a perforation pattern and its statistics."""

    def __init__(
        self,
        generator: PatternGenerator | None = None,
        statistics_calculator: StatisticsCalculator | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.generator = generator or PatternGenerator()
        self.statistics_calculator = statistics_calculator or StatisticsCalculator()
        self.clock = clock or _utc_now

    def _generator_for(self, generation_input: GenerationInput) -> PatternGenerator:
        if generation_input.seed is None and generation_input.dpi is None:
            return self.generator
        converter = (
            UnitConverter(generation_input.dpi)
            if generation_input.dpi is not None
            else self.generator.converter
        )
        rng = (
            random.Random(generation_input.seed)
            if generation_input.seed is not None
            else self.generator.rng
        )
        return PatternGenerator(converter=converter, rng=rng, id_factory=self.generator.id_factory)

    def execute(self, generation_input: GenerationInput) -> GenerationOutput:
        """Execute the generation command.

        Validation failures are reported in ``errors``. An unsupported
        pattern (such as "custom") raises InvalidPatternError.

        Returns:
            GenerationOutput with perforations and statistics.
        """
        errors = generation_input.validate()
        if errors:
            return GenerationOutput(perforations=(), statistics=None, errors=errors)

        panel = generation_input.panel.to_panel_spec()
        settings = generation_input.settings.to_settings()
        generation_id = str(uuid.uuid4())

        logger.info(
            f"Generating {settings.pattern.value} pattern {generation_id} for "
            f"{panel.width}x{panel.height} {panel.units.value} panel"
        )
        perforations = self._generator_for(generation_input).generate(
            panel,
            settings,
            brightness=generation_input.brightness,
            invert=generation_input.invert,
        )
        statistics = self.statistics_calculator.compute(perforations, panel)
        logger.info(
            f"Generated pattern {generation_id}: {statistics.total_perforations} "
            f"perforations, {statistics.coverage}% coverage"
        )

        return GenerationOutput(
            perforations=perforations,
            statistics=statistics,
            id=generation_id,
            generated_at=self.clock(),
            panel=panel,
            settings=settings,
        )


SAMPLE_PANEL_MAX = 6.0
SAMPLE_SPACING_MAX = 1.0


class EstimateStatisticsCommand:
    """Estimate statistics without generating the full pattern.

    A sample panel (at most 6x6, spacing at most 1) is generated and its
    statistics are scaled by the area ratio and the spacing ratio.
    """

    def __init__(
        self,
        generator: PatternGenerator | None = None,
        statistics_calculator: StatisticsCalculator | None = None,
    ) -> None:
        self.generator = generator or PatternGenerator()
        self.statistics_calculator = statistics_calculator or StatisticsCalculator()

    def execute(
        self, panel_input: PanelInput, settings_input: PerforationSettingsInput
    ) -> StatisticsEstimate:
        panel = panel_input.to_panel_spec()
        settings = settings_input.to_settings()

        sample_panel = PanelSpec(
            width=min(panel.width, SAMPLE_PANEL_MAX),
            height=min(panel.height, SAMPLE_PANEL_MAX),
            units=panel.units,
        )
        sample_settings = replace(
            settings,
            spacing=Spacing(
                min(settings.spacing.horizontal, SAMPLE_SPACING_MAX),
                min(settings.spacing.vertical, SAMPLE_SPACING_MAX),
            ),
        )

        sample = self.generator.generate(sample_panel, sample_settings)
        stats = self.statistics_calculator.compute(sample, sample_panel)

        area_factor = panel.area / sample_panel.area if sample_panel.area > 0 else 0.0
        spacing_factor = (settings.spacing.horizontal * settings.spacing.vertical) / (
            sample_settings.spacing.horizontal * sample_settings.spacing.vertical
        )
        logger.debug(
            f"Estimate sample: {stats.total_perforations} perforations, "
            f"area factor {area_factor:.3f}, spacing factor {spacing_factor:.3f}"
        )

        return StatisticsEstimate(
            estimated_perforations=_round_half_up(
                stats.total_perforations * area_factor / spacing_factor
            ),
            estimated_coverage=stats.coverage,
            average_size=stats.average_size,
            density=stats.density / spacing_factor,
            panel_area=panel.area,
        )


HIGH_CONTRAST = 150
HOLE_PITCH_AREA = 0.64


def recommend_settings(
    width: float,
    height: float,
    image_contrast: float = 128,
    image_complexity: str = "medium",
) -> Recommendations:
    """Suggest sizes, spacing, pattern and shape for a panel (in inches)."""
    shortest = min(width, height)
    high_contrast = image_contrast > HIGH_CONTRAST
    return Recommendations(
        size_min=max(0.0625, shortest * 0.01),
        size_max=min(2.0, shortest * 0.1),
        size_recommended=min(0.5, shortest * 0.05),
        spacing_horizontal=min(1.0, shortest * 0.08),
        spacing_vertical=min(1.0, shortest * 0.08),
        pattern=PatternKind.STAGGERED if high_contrast else PatternKind.GRID,
        shape=ShapeKind.CIRCLE if image_complexity == "high" else ShapeKind.SQUARE,
        estimated_holes=math.floor(width * height / HOLE_PITCH_AREA),
        coverage="25-35%" if high_contrast else "15-25%",
    )


class ExportPanelCommand:
    """Command to serialize a pattern, optionally persisting it.

    Args:
        export_manager: When given, every export is also written under the
            manager's output directory.
        clock: Source of the filename timestamp.
    """

    def __init__(
        self,
        export_manager: ExportManager | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.export_manager = export_manager
        self.clock = clock or _utc_now

    def execute(self, export_input: ExportInput) -> ExportOutput:
        """Execute the export command.

        Raises:
            SerializationError: If a perforation cannot be encoded.
        """
        errors = export_input.validate(ExporterRegistry.available_formats())
        if errors:
            return ExportOutput(content=b"", mime_type="", filename="", size=0, errors=errors)

        panel = export_input.panel.to_panel_spec()
        settings = export_input.to_export_settings()
        now = self.clock()
        exporter_class = ExporterRegistry.get(settings.format.value)
        if settings.format.value == "pdf":
            exporter = exporter_class(generated_at=export_input.generated_at or now)
        else:
            exporter = exporter_class()

        logger.info(
            f"Export started: {settings.format.value}, "
            f"{len(export_input.perforations)} perforations"
        )
        content = exporter.export_bytes(panel, export_input.perforations, settings)
        filename = suggest_filename(panel, settings, now)

        path = None
        if self.export_manager is not None:
            path = self.export_manager.path_for(settings.format.value, filename)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)

        logger.info(f"Export completed: {filename} ({len(content)} bytes)")
        return ExportOutput(
            content=content,
            mime_type=exporter.mime_type,
            filename=filename,
            size=len(content),
            format=settings.format.value,
            path=path,
        )


class GenerateFromImageCommand:
    """Command to place perforations from an uploaded image."""

    def __init__(self, generator: ImageDrivenGenerator | None = None) -> None:
        self.generator = generator or ImageDrivenGenerator()

    def execute(self, image_input: ImageGenerationInput) -> ImageGenerationOutput:
        """Decode the image and sample it.

        Raises:
            ImageDecodeError: If the image cannot be decoded.
        """
        errors = image_input.validate()
        if errors:
            return ImageGenerationOutput(result=None, errors=errors)

        image = load_image(image_input.image, max_dimension=image_input.max_dimension)
        result = self.generator.generate(
            image.grid,
            image_input.canvas_width,
            image_input.canvas_height,
            image_input.options,
            rgb=image.rgb,
        )
        logger.info(
            f"Image-driven generation placed {result.summary.total_perforations} "
            f"perforations (step {result.sampling_step})"
        )
        return ImageGenerationOutput(result=result)


__all__ = [
    "EstimateStatisticsCommand",
    "ExportPanelCommand",
    "GenerateFromImageCommand",
    "GeneratePatternCommand",
    "recommend_settings",
]
