"""Design file loading.

A design file goes through three stages: read, JSON parse and schema
validation. Each stage reports failures as a ConfigError with its own
``error_type``, so callers can tell a missing file from a typo in a field.
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from perforations.application.config.schema import DesignConfiguration

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """A design file could not be read, parsed or validated.

    Attributes:
        message: Human-readable summary.
        error_type: One of file_not_found, file_read_error, json_parse
            or validation.
        path: Design file path, None for in-memory designs.
        details: Per-problem dicts. JSON errors carry line/column;
            validation errors carry path/message/value/error_type.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _json_path(loc: tuple[str | int, ...]) -> str:
    """``("export", "formats", 1)`` -> ``"export.formats[1]"``."""
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path += f".{segment}" if path else str(segment)
    return path


def _summary_line(detail: dict[str, Any]) -> str:
    line = f"  - {detail['path'] or '(root)'}: {detail['message']}"
    value = detail["value"]
    # Whole sections are too long to echo back
    if value is None or isinstance(value, (dict, list)):
        return line
    return f"{line} (got: {value!r})"


def _validate(data: Any, path: Path | None) -> DesignConfiguration:
    try:
        return DesignConfiguration.model_validate(data)
    except PydanticValidationError as e:
        details = [
            {
                "path": _json_path(err["loc"]),
                "message": err["msg"],
                "value": err.get("input"),
                "error_type": err["type"],
            }
            for err in e.errors()
        ]
        message = "\n".join(
            ["Configuration validation failed:", *(_summary_line(d) for d in details)]
        )
        raise ConfigError(message, "validation", path, details) from e


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}", "file_not_found", path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Error reading config file {path}: {e}", "file_read_error", path) from e

    try:
        return json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}",
            "json_parse",
            path,
            [{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e


def load_config(path: Path) -> DesignConfiguration:
    """Load and validate a design file.

    Raises:
        ConfigError: If the file is missing, unreadable, not JSON or not a
            valid design.
    """
    path = Path(path)
    config = _validate(_read_json(path), path)
    logger.debug(f"Loaded design configuration {path} (schema {config.schema_version})")
    return config


def load_config_from_dict(data: dict[str, Any]) -> DesignConfiguration:
    """Validate an in-memory design, e.g. one posted to the API."""
    return _validate(data, None)
