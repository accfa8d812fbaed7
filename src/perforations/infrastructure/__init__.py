"""Infrastructure layer - exporters and raster image I/O."""

from .exporters import (
    DxfExporter,
    Exporter,
    ExporterRegistry,
    ExportManager,
    PdfExporter,
    SvgExporter,
    suggest_filename,
)
from .formatters import (
    CatalogFormatter,
    LoadedPattern,
    PatternJsonExporter,
    StatisticsFormatter,
)
from .images import ImageAnalysis, LoadedImage, analyze_image, encode_png, load_image

__all__ = [
    "CatalogFormatter",
    "DxfExporter",
    "Exporter",
    "ExporterRegistry",
    "ExportManager",
    "ImageAnalysis",
    "LoadedPattern",
    "LoadedImage",
    "PdfExporter",
    "PatternJsonExporter",
    "StatisticsFormatter",
    "SvgExporter",
    "analyze_image",
    "encode_png",
    "load_image",
    "suggest_filename",
]
