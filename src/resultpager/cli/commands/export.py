"""
Non-interactive export of a result set.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from resultpager.core.config import ExportDestination, ExportFormat
from resultpager.core.engine import DEFAULT_REGISTER, CallState, EngineError, MemoryEngine, file_source
from resultpager.core.result import ExportDispatcher, status_line
from resultpager.core.surface import TextSurface

from .common import load_config, parse_rows

err_console = Console(stderr=True)


def export(
    path: Path = typer.Argument(..., help="CSV or JSON file to export from", exists=True, dir_okay=False),
    format: ExportFormat = typer.Option(
        ExportFormat.JSON,
        "--format",
        "-f",
        help="Output format",
    ),
    rows: Optional[str] = typer.Option(
        None,
        "--rows",
        "-r",
        help="Row numbers START:END as displayed by the viewer (default: all rows)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to this file instead of stdout",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to app.yaml",
    ),
) -> None:
    """Export rows of a file as JSON or CSV.

    Examples:
        resultpager export data/orders.csv --format json --rows 3:7
        resultpager export data/orders.json --format csv -o out/orders.csv
    """
    load_config(config_path)
    selection = parse_rows(rows) if rows else None

    engine = MemoryEngine(TextSurface())
    call = engine.execute(str(path), file_source(path))
    call = engine.run(call.id)

    if call.state != CallState.ARCHIVED:
        err_console.print(f"[red]{status_line(call)}[/red]")
        if call.error:
            err_console.print(f"[dim]{call.error}[/dim]")
        raise typer.Exit(1)

    if output is not None:
        destination, extra_arg = ExportDestination.FILE.value, str(output)
    else:
        destination, extra_arg = ExportDestination.YANK.value, DEFAULT_REGISTER

    dispatcher = ExportDispatcher(engine)
    try:
        if selection is None:
            dispatcher.store_all(call.id, format.value, destination, extra_arg)
        else:
            dispatcher.store_selection(call.id, selection[0], selection[1], format.value, destination, extra_arg)
    except EngineError as e:
        err_console.print(f"[red]Export failed:[/red] {e}")
        raise typer.Exit(1)

    if output is not None:
        err_console.print(f"[green]Wrote[/green] {output}")
    else:
        sys.stdout.write(engine.registers[DEFAULT_REGISTER])
        if not engine.registers[DEFAULT_REGISTER].endswith("\n"):
            sys.stdout.write("\n")
