"""
Helpers shared by CLI commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from resultpager.core.config import AppConfig, ConfigError, load_app_config
from resultpager.core.logging import setup_logging

err_console = Console(stderr=True)


def load_config(config_path: Optional[Path], page_size: Optional[int] = None) -> AppConfig:
    """Load configuration, apply CLI overrides and set up logging.

    Exits with status 1 on invalid configuration.
    """
    try:
        config = load_app_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(1)

    if page_size is not None:
        config.result.page_size = page_size

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.file,
        json_format=config.logging.json_format,
        rich_console=config.logging.rich_console,
    )
    return config


def parse_rows(value: str) -> tuple[int, int]:
    """Parse ``START:END`` (1-based, inclusive) row numbers."""
    start_text, sep, end_text = value.partition(":")
    if not sep:
        start_text = end_text = value
    try:
        start, end = int(start_text), int(end_text)
    except ValueError:
        raise typer.BadParameter(f"expected START:END, got {value!r}") from None
    if start < 1 or end < start:
        raise typer.BadParameter(f"invalid row range {value!r}")
    return start, end
