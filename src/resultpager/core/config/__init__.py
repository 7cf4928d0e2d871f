"""Configuration loading and validation."""

from .loader import ConfigError, default_config_path, load_app_config, validate_app_config_file
from .models import (
    # Enums
    ExportDestination,
    ExportFormat,
    MappingMode,
    # Config models
    AppConfig,
    LoggingConfig,
    Mapping,
    ProgressConfig,
    ResultConfig,
    default_mappings,
)

__all__ = [
    # Enums
    "ExportDestination",
    "ExportFormat",
    "MappingMode",
    # Config models
    "AppConfig",
    "LoggingConfig",
    "Mapping",
    "ProgressConfig",
    "ResultConfig",
    "default_mappings",
    # Loaders
    "ConfigError",
    "default_config_path",
    "load_app_config",
    "validate_app_config_file",
]
