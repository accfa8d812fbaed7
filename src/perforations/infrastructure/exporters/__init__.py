"""Exporter framework for perforated panel designs.

This package provides:
- Exporter Protocol: Defines the interface for all exporters
- ExporterRegistry: Central registry for format discovery
- ExportManager: Persists exports under ``output_dir/{format}/``

Registered exporters:
- dxf: R2010 DXF for CNC, laser and waterjet cutting
- pdf: One-page print drawing with dimensions and metadata footer
- svg: Display-pixel vector drawing for previews and the web

Usage:
    from perforations.infrastructure.exporters import ExporterRegistry, ExportManager

    exporter = ExporterRegistry.get("dxf")()
    payload = exporter.export_bytes(panel, perforations, settings)

    manager = ExportManager(output_dir=Path("./exports"))
    path = manager.export_single(panel, perforations, settings)
"""

from perforations.infrastructure.exporters.base import (
    Exporter,
    ExporterRegistry,
    ExportManager,
    suggest_filename,
    unit_factor,
)

# Import exporters to trigger registration
from perforations.infrastructure.exporters.dxf import DxfExporter
from perforations.infrastructure.exporters.pdf import PdfExporter
from perforations.infrastructure.exporters.svg import SvgExporter

__all__ = [
    # Framework
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    "suggest_filename",
    "unit_factor",
    # Registered exporters
    "DxfExporter",
    "PdfExporter",
    "SvgExporter",
]
