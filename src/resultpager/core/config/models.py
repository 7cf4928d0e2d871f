"""
Pydantic configuration models for resultpager.

These models provide type-safe configuration with validation for:
- Result viewer settings (page size, key mappings)
- Progress display
- Logging
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from rich.spinner import SPINNERS


# =============================================================================
# Enums
# =============================================================================


class MappingMode(str, Enum):
    """Editor mode a key mapping is active in."""

    NORMAL = "normal"
    VISUAL = "visual"


class ExportFormat(str, Enum):
    """Result export formats understood by the bundled engine."""

    JSON = "json"
    CSV = "csv"


class ExportDestination(str, Enum):
    """Result export destinations understood by the bundled engine."""

    YANK = "yank"
    FILE = "file"


# =============================================================================
# Key Mappings
# =============================================================================


class Mapping(BaseModel):
    """Key sequence bound to a result action."""

    key: str = Field(
        ...,
        min_length=1,
        description="Key sequence that triggers the action",
    )
    mode: MappingMode = Field(
        default=MappingMode.NORMAL,
        description="Mode the key sequence is active in",
    )


def default_mappings() -> dict[str, Mapping]:
    """Default key mappings for the result viewer."""
    visual = MappingMode.VISUAL
    return {
        "page_next": Mapping(key="L"),
        "page_prev": Mapping(key="H"),
        "yank_current_json": Mapping(key="yaj"),
        "yank_selection_json": Mapping(key="yaj", mode=visual),
        "yank_all_json": Mapping(key="yaJ"),
        "yank_current_csv": Mapping(key="yac"),
        "yank_selection_csv": Mapping(key="yac", mode=visual),
        "yank_all_csv": Mapping(key="yaC"),
    }


# =============================================================================
# Progress Configuration
# =============================================================================


class ProgressConfig(BaseModel):
    """Busy indicator shown while a call is executing."""

    text_prefix: str = Field(
        default="Executing query:",
        description="Text shown before the spinner",
    )
    spinner: str = Field(
        default="dots",
        description="Name of a rich spinner",
    )
    interval_ms: int = Field(
        default=80,
        ge=10,
        le=5000,
        description="Delay between spinner frames in milliseconds",
    )

    @field_validator("spinner")
    @classmethod
    def spinner_exists(cls, v: str) -> str:
        """Ensure the spinner is one rich knows about."""
        if v not in SPINNERS:
            raise ValueError(f"unknown spinner: {v}")
        return v


# =============================================================================
# Result Configuration
# =============================================================================


class ResultConfig(BaseModel):
    """Result viewer settings."""

    page_size: int = Field(
        default=100,
        ge=1,
        description="Number of rows rendered per page",
    )
    progress: ProgressConfig = Field(default_factory=ProgressConfig)
    mappings: dict[str, Mapping] = Field(
        default_factory=default_mappings,
        description="Action name to key mapping",
    )

    @field_validator("mappings")
    @classmethod
    def merge_with_defaults(cls, v: dict[str, Mapping]) -> dict[str, Mapping]:
        """Fill actions the user did not remap with their default keys."""
        merged = default_mappings()
        merged.update(v)
        return merged


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    file: Path | None = Field(
        default=None,
        description="Log file path",
    )
    json_format: bool = Field(
        default=True,
        description="Use JSON format for file logs",
    )
    rich_console: bool = Field(
        default=True,
        description="Use Rich for console output",
    )

    @field_validator("level")
    @classmethod
    def known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level


# =============================================================================
# Application Configuration
# =============================================================================


class AppConfig(BaseModel):
    """Root application configuration.

    This is the main configuration object loaded from app.yaml.
    """

    result: ResultConfig = Field(default_factory=ResultConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
