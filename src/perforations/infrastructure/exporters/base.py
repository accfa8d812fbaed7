"""Base exporter framework with Protocol, Registry, and Manager."""

from __future__ import annotations

import logging
from abc import abstractmethod
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import ClassVar, Protocol, runtime_checkable

from perforations.domain.exceptions import SerializationError, UnsupportedFormatError
from perforations.domain.units import convert_length
from perforations.domain.value_objects import ExportSettings, PanelSpec, Perforation, Units

logger = logging.getLogger(__name__)


@runtime_checkable
class Exporter(Protocol):
    """Protocol for all exporters.

    Exporters serialize a panel and its perforations to one format. Each
    exporter defines its format name, file extension and MIME type, and
    implements ``export_bytes``; ``export`` writes that payload to disk.

    Attributes:
        format_name: Registry key for the format (e.g., "svg", "dxf").
        file_extension: File extension without leading dot.
        mime_type: MIME type of the payload.
    """

    format_name: ClassVar[str]
    file_extension: ClassVar[str]
    mime_type: ClassVar[str]

    @abstractmethod
    def export_bytes(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
    ) -> bytes:
        """Serialize the panel and perforations.

        Args:
            panel: Panel dimensions and units.
            perforations: Perforations in panel units.
            settings: Export options.

        Returns:
            The encoded document.

        Raises:
            SerializationError: If a perforation cannot be encoded.
        """
        ...

    @abstractmethod
    def export(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
        path: Path,
    ) -> None:
        """Serialize and write the document to ``path``."""
        ...


class ExporterRegistry:
    """Registry for exporter classes.

    Exporters register themselves using the @ExporterRegistry.register
    decorator.

    Example:
        @ExporterRegistry.register("svg")
        class SvgExporter:
            format_name = "svg"
            file_extension = "svg"
            mime_type = "image/svg+xml"
            ...
    """

    _exporters: ClassVar[dict[str, type[Exporter]]] = {}

    @classmethod
    def register(cls, format_name: str) -> type:
        """Decorator to register an exporter class.

        Args:
            format_name: The format name to register (e.g., "svg").

        Returns:
            Decorator function that registers the class.
        """

        def decorator(exporter_class: type[Exporter]) -> type[Exporter]:
            if format_name in cls._exporters:
                logger.warning(
                    f"Overwriting existing exporter for format '{format_name}'"
                )
            cls._exporters[format_name] = exporter_class
            logger.debug(f"Registered exporter '{format_name}': {exporter_class.__name__}")
            return exporter_class

        return decorator

    @classmethod
    def get(cls, format_name: str) -> type[Exporter]:
        """Get an exporter class by format name.

        Raises:
            UnsupportedFormatError: If no exporter is registered for the
                format. It is also a KeyError.
        """
        key = str(format_name).lower()
        if key not in cls._exporters:
            raise UnsupportedFormatError(format_name, cls.available_formats())
        return cls._exporters[key]

    @classmethod
    def available_formats(cls) -> list[str]:
        """Sorted list of registered format names."""
        return sorted(cls._exporters.keys())

    @classmethod
    def is_registered(cls, format_name: str) -> bool:
        return str(format_name).lower() in cls._exporters

    @classmethod
    def clear(cls) -> None:
        """Clear all registered exporters.

        This is primarily useful for testing.
        """
        cls._exporters.clear()


def unit_factor(panel: PanelSpec, settings: ExportSettings) -> float:
    """Multiplier from panel units to emitted units, including ``settings.scale``."""
    return convert_length(1.0, panel.units, settings.units) * settings.scale


def inches_in(units: Units, value: float) -> float:
    """A length given in inches, expressed in ``units``."""
    return convert_length(value, Units.INCHES, units)


def format_dimension(value: float, units: Units) -> str:
    """Dimension label, e.g. ``24.00"`` or ``609.60mm``."""
    return f"{value:.2f}{units.label}"


@contextmanager
def serialization_context(format_name: str) -> Iterator[None]:
    """Tag SerializationErrors raised inside the block with the format name."""
    try:
        yield
    except SerializationError as exc:
        if exc.format_name is None:
            exc.format_name = format_name
        raise


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def suggest_filename(
    panel: PanelSpec, settings: ExportSettings, now: datetime | None = None
) -> str:
    """Download filename for an export.

    Format: ``panel_{width}x{height}{units}_{timestamp}.{format}`` where the
    timestamp is ISO 8601 UTC with ":" and "." replaced by "-".
    """
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    stamp = moment.isoformat(timespec="milliseconds") + "Z"
    stamp = stamp.replace(":", "-").replace(".", "-")
    return (
        f"panel_{_format_number(panel.width)}x{_format_number(panel.height)}"
        f"{settings.units.value}_{stamp}.{settings.format.value}"
    )


class ExportManager:
    """Manages export operations to one or more formats.

    Files are written to ``output_dir/{format}/{filename}`` and the write
    completes before the path is returned.

    Attributes:
        output_dir: Root directory for exported files.
    """

    def __init__(self, output_dir: Path) -> None:
        """Initialize the export manager.

        Args:
            output_dir: Root directory for exported files. Format
                subdirectories are created on demand.
        """
        self.output_dir = Path(output_dir)

    def path_for(self, format_name: str, filename: str) -> Path:
        """Location of an exported file.

        Raises:
            ValueError: If ``filename`` would escape the format directory.
        """
        if Path(filename).name != filename or filename in ("", ".", ".."):
            raise ValueError(f"Invalid export filename: {filename!r}")
        return self.output_dir / format_name / filename

    def export_single(
        self,
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
        filename: str | None = None,
        now: datetime | None = None,
    ) -> Path:
        """Export to the format named in ``settings``.

        Returns:
            Path to the exported file.

        Raises:
            UnsupportedFormatError: If the format is not registered.
            SerializationError: If a perforation cannot be encoded.
            OSError: If file operations fail.
        """
        format_name = settings.format.value
        exporter = ExporterRegistry.get(format_name)()
        filepath = self.path_for(format_name, filename or suggest_filename(panel, settings, now))
        filepath.parent.mkdir(parents=True, exist_ok=True)

        logger.info(f"Exporting to {format_name}: {filepath}")
        exporter.export(panel, perforations, settings, filepath)
        return filepath

    def export_all(
        self,
        formats: Sequence[str],
        panel: PanelSpec,
        perforations: Sequence[Perforation],
        settings: ExportSettings,
        now: datetime | None = None,
    ) -> dict[str, Path]:
        """Export to several formats sharing the remaining settings.

        Returns:
            Dictionary mapping format names to output file paths.
        """
        moment = now or datetime.now(timezone.utc)
        results: dict[str, Path] = {}
        for format_name in formats:
            ExporterRegistry.get(format_name)
            format_settings = _with_format(settings, format_name)
            results[format_name] = self.export_single(
                panel, perforations, format_settings, now=moment
            )
        return results


def _with_format(settings: ExportSettings, format_name: str) -> ExportSettings:
    return replace(settings, format=format_name.lower())
