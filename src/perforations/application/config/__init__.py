"""Configuration schema and loading for perforated panel design files.

Public API:
    - DesignConfiguration: Root configuration model
    - PanelConfig, PerforationConfig, SpacingConfig: Pattern inputs
    - ImageConfig: Image-driven sizing (v1.1+)
    - ExportConfig, PdfConfig: Export settings
    - load_config: Load configuration from a JSON file
    - load_config_from_dict: Load configuration from a dictionary
    - ConfigError: Exception for configuration errors
    - config_to_inputs: Convert a configuration to a GenerationInput
    - config_to_export_inputs: Convert export settings to ExportInputs

Example:
    >>> from pathlib import Path
    >>> from perforations.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     config = load_config(Path("panel.json"))
    ...     print(f"Panel: {config.panel.width}x{config.panel.height}")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from perforations.application.config.adapter import (
    config_to_export_inputs,
    config_to_inputs,
    config_to_panel_input,
    config_to_settings_input,
)
from perforations.application.config.loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
)
from perforations.application.config.schema import (
    SUPPORTED_VERSIONS,
    DesignConfiguration,
    ExportConfig,
    ImageConfig,
    PanelConfig,
    PdfConfig,
    PerforationConfig,
    SpacingConfig,
)

__all__ = [
    "ConfigError",
    "DesignConfiguration",
    "ExportConfig",
    "ImageConfig",
    "PanelConfig",
    "PdfConfig",
    "PerforationConfig",
    "SUPPORTED_VERSIONS",
    "SpacingConfig",
    "config_to_export_inputs",
    "config_to_inputs",
    "config_to_panel_input",
    "config_to_settings_input",
    "load_config",
    "load_config_from_dict",
]
