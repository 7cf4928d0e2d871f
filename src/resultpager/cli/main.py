"""
resultpager CLI - Main entry point.

Pages through and exports result sets from the terminal.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.panel import Panel
from rich.traceback import install as install_rich_traceback

from resultpager import __app_name__, __version__

# Load environment variables from .env (if present)
load_dotenv()

install_rich_traceback(show_locals=False, width=120)

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name=__app_name__,
    help="Page through and export query results",
    rich_markup_mode="rich",
    no_args_is_help=True,
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold cyan]{__app_name__}[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """resultpager - paged result viewer."""
    pass


# =============================================================================
# Import and register subcommand modules
# =============================================================================

from .commands import config, export, view  # noqa: E402

app.command("view")(view.view)
app.command("export")(export.export)
app.add_typer(config.app, name="config", help="Inspect and validate configuration")


# =============================================================================
# Init Command
# =============================================================================


DEFAULT_APP_CONFIG = """\
# resultpager configuration

result:
  page_size: 100
  progress:
    text_prefix: "Executing query:"
    spinner: dots
    interval_ms: 80
  # Unlisted actions keep their default keys
  mappings:
    page_next: {key: L}
    page_prev: {key: H}
    yank_current_json: {key: yaj}
    yank_selection_json: {key: yaj, mode: visual}
    yank_all_json: {key: yaJ}
    yank_current_csv: {key: yac}
    yank_selection_csv: {key: yac, mode: visual}
    yank_all_csv: {key: yaC}

logging:
  level: ${RESULTPAGER_LOG_LEVEL:-WARNING}
  file: logs/resultpager.log
  json_format: true
  rich_console: true
"""


@app.command()
def init(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
    path: Path = typer.Option(
        Path("configs/app.yaml"),
        "--path",
        "-p",
        help="Where to write the configuration",
    ),
) -> None:
    """Write a default configuration file."""
    if path.exists() and not force:
        err_console.print(f"[yellow]{path} already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_APP_CONFIG, encoding="utf-8")

    console.print(Panel.fit(
        f"[bold green]OK - wrote [cyan]{path}[/cyan][/bold green]\n\n"
        "Next steps:\n"
        f"  1. Check it: [yellow]{__app_name__} config validate {path}[/yellow]\n"
        f"  2. View a file: [yellow]{__app_name__} view <file.csv>[/yellow]",
        title="[bold]Initialization Complete[/bold]",
        border_style="green",
    ))


# =============================================================================
# Entry Point
# =============================================================================


def run() -> None:
    """Run the CLI application."""
    app()


if __name__ == "__main__":
    run()
