"""Custom exceptions and error handlers for the REST API."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from perforations.application.config import ConfigError
from perforations.domain.exceptions import (
    DegenerateInputError,
    ImageDecodeError,
    InvalidPatternError,
    InvalidShapeError,
    SerializationError,
    UnsupportedFormatError,
)

logger = logging.getLogger(__name__)


class PatternGenerationError(Exception):
    """Raised when request input fails application-level validation."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        super().__init__(f"Generation failed: {errors}")


class ExportError(Exception):
    """Raised when export input fails validation."""

    def __init__(self, errors: list[str], format_name: str) -> None:
        self.errors = errors
        self.format_name = format_name
        super().__init__(f"Export failed: {errors}")


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(PatternGenerationError)
    async def generation_error_handler(
        request: Request, exc: PatternGenerationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "Pattern generation failed",
                "error_type": "validation",
                "details": [{"message": e} for e in exc.errors],
            },
        )

    @app.exception_handler(ExportError)
    async def export_error_handler(request: Request, exc: ExportError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "Export failed",
                "error_type": "export",
                "details": [{"message": e, "format": exc.format_name} for e in exc.errors],
            },
        )

    @app.exception_handler(InvalidPatternError)
    async def invalid_pattern_handler(
        request: Request, exc: InvalidPatternError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": str(exc),
                "error_type": "invalid_pattern",
                "details": {"pattern": str(exc.pattern)},
            },
        )

    @app.exception_handler(InvalidShapeError)
    async def invalid_shape_handler(
        request: Request, exc: InvalidShapeError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": str(exc),
                "error_type": "invalid_shape",
                "details": None,
            },
        )

    @app.exception_handler(DegenerateInputError)
    async def degenerate_input_handler(
        request: Request, exc: DegenerateInputError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": str(exc),
                "error_type": "degenerate_input",
                "details": None,
            },
        )

    @app.exception_handler(SerializationError)
    async def serialization_error_handler(
        request: Request, exc: SerializationError
    ) -> JSONResponse:
        logger.warning(f"Serialization failed: {exc.message}")
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": "serialization",
                "details": {
                    "perforation_id": exc.perforation_id,
                    "format": exc.format_name,
                },
            },
        )

    @app.exception_handler(UnsupportedFormatError)
    async def unsupported_format_handler(
        request: Request, exc: UnsupportedFormatError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": str(exc),
                "error_type": "unsupported_format",
                "details": {"format": exc.format_name, "available": exc.available},
            },
        )

    @app.exception_handler(ImageDecodeError)
    async def image_decode_handler(
        request: Request, exc: ImageDecodeError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={
                "error": str(exc),
                "error_type": "image_decode",
                "details": None,
            },
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details or None,
            },
        )
