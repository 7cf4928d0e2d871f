"""
YAML configuration loading.

``${VAR}`` and ``${VAR:-default}`` references in string values are expanded
from the environment before validation. A missing configuration file is not
an error: every setting has a default.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import AppConfig

DEFAULT_CONFIG_PATH = Path("configs/app.yaml")
CONFIG_ENV_VAR = "RESULTPAGER_CONFIG"

_ENV_REF = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


class ConfigError(Exception):
    """Configuration could not be read or is invalid."""

    def __init__(self, message: str, path: Path | None = None, details: str | None = None):
        self.path = path
        self.details = details
        super().__init__(message)


def default_config_path() -> Path:
    """``$RESULTPAGER_CONFIG`` if set, else ``configs/app.yaml``."""
    override = os.environ.get(CONFIG_ENV_VAR)
    return Path(override) if override else DEFAULT_CONFIG_PATH


def _read_yaml(path: Path) -> dict[str, Any]:
    """Parse ``path`` into a mapping.

    Raises:
        ConfigError: If the file is unreadable, not YAML, or not a mapping
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}", path=path, details=str(e)) from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}", path=path, details=str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top level of {path} must be a mapping", path=path)
    return data


def expand_env(value: Any) -> Any:
    """Expand environment references in every string inside ``value``."""
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    if isinstance(value, dict):
        return {k: expand_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    return value


def load_app_config(path: Path | str | None = None, expand_env_vars: bool = True) -> AppConfig:
    """Load and validate the application configuration.

    Args:
        path: YAML file (default: see ``default_config_path``)
        expand_env_vars: Expand ``${VAR}`` references first

    Raises:
        ConfigError: If the file exists but is invalid
    """
    path = default_config_path() if path is None else Path(path)
    if not path.exists():
        return AppConfig()

    data = _read_yaml(path)
    if expand_env_vars:
        data = expand_env(data)

    try:
        return AppConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid app configuration in {path}", path=path, details=str(e)) from e


def validate_app_config_file(path: Path | str) -> list[str]:
    """Check a configuration file, returning one message per problem."""
    path = Path(path)
    if not path.exists():
        return [f"File not found: {path}"]

    try:
        data = expand_env(_read_yaml(path))
        AppConfig.model_validate(data)
    except ConfigError as e:
        return [str(e)]
    except ValidationError as e:
        return [f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()]
    return []
