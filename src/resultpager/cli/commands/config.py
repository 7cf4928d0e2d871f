"""
Configuration commands.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.syntax import Syntax

from resultpager.core.config import ConfigError, default_config_path, load_app_config, validate_app_config_file

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    help="Inspect and validate configuration",
    no_args_is_help=True,
)


@app.command("show")
def show_config(
    path: Optional[Path] = typer.Argument(None, help="Path to app.yaml"),
) -> None:
    """Print the effective configuration, defaults included."""
    try:
        config = load_app_config(path)
    except ConfigError as e:
        err_console.print(f"[red]{e}[/red]")
        if e.details:
            err_console.print(f"[dim]{e.details}[/dim]")
        raise typer.Exit(1)

    data = config.model_dump(mode="json")
    console.print(Syntax(yaml.safe_dump(data, sort_keys=False), "yaml"))


@app.command("validate")
def validate_config(
    path: Optional[Path] = typer.Argument(None, help="Path to app.yaml"),
) -> None:
    """Validate a configuration file."""
    path = path or default_config_path()
    errors = validate_app_config_file(path)
    if errors:
        err_console.print(f"[red]Invalid configuration:[/red] {path}")
        for error in errors:
            err_console.print(f"  - {error}")
        raise typer.Exit(1)

    console.print(f"[green]OK[/green] {path}")
