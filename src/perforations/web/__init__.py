"""FastAPI REST API for perforated panel design.

This module provides a REST API for generating patterns, analysing images
and exporting to DXF, SVG and PDF.

Usage:
    uvicorn perforations.web:app --reload
"""

from perforations.web.app import app, create_app

__all__ = ["app", "create_app"]
