"""
Interactive result viewer.

Loads a file through the in-memory engine and pages through it in the
terminal. Key sequences are typed one per line.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from resultpager.core.engine import DEFAULT_REGISTER, EngineError, MemoryEngine, file_source
from resultpager.core.result import Result, ResultError
from resultpager.core.surface import Cursor

from .common import load_config

console = Console()
err_console = Console(stderr=True)

VIEWER_KEYS = {
    "j": "cursor down",
    "k": "cursor up",
    "gg": "first line",
    "G": "last line",
    "V": "start visual selection",
    "<esc>": "back to normal mode",
    "?": "show keys",
    "q": "quit",
}


def _help_table(mappings: dict) -> Table:
    table = Table(title="Keys", show_header=True, header_style="bold magenta")
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Mode")
    table.add_column("Action")
    for action, mapping in mappings.items():
        table.add_row(mapping.key, mapping.mode.value, action)
    for key, action in VIEWER_KEYS.items():
        table.add_row(key, "any", action)
    return table


def view(
    path: Path = typer.Argument(..., help="CSV or JSON file to view", exists=True, dir_okay=False),
    page_size: Optional[int] = typer.Option(
        None,
        "--page-size",
        "-n",
        min=1,
        help="Rows per page (overrides configuration)",
    ),
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to app.yaml",
    ),
) -> None:
    """Page through a result set interactively.

    Examples:
        resultpager view data/orders.csv
        resultpager view data/orders.json --page-size 20
    """
    from resultpager.cli.terminal import TerminalSurface

    config = load_config(config_path, page_size)

    surface = TerminalSurface(console)
    engine = MemoryEngine(surface, width=max(console.width - 2, 40))
    winid = surface.open_window()

    done = False

    def on_quit() -> None:
        nonlocal done
        done = True

    result = Result(engine, surface, on_quit, config.result)
    result.show(winid)

    call = engine.execute(str(path), file_source(path))
    result.set_call(call)
    engine.run(call.id)

    try:
        while not done:
            surface.tick()
            surface.draw(winid)
            keys = console.input("[dim]keys>[/dim] ").strip()
            if not keys:
                continue

            before = dict(engine.registers)
            try:
                _handle_keys(surface, winid, keys, config.result.mappings)
            except (ResultError, EngineError) as e:
                err_console.print(f"[red]{e}[/red]")
                continue

            yanked = engine.registers.get(DEFAULT_REGISTER)
            if yanked is not None and yanked != before.get(DEFAULT_REGISTER):
                console.print(Panel(Text(yanked), title="Yanked", border_style="green"))
    except (EOFError, KeyboardInterrupt):
        console.print()
    finally:
        result.close()


def _handle_keys(surface, winid: int, keys: str, mappings: dict) -> None:
    window = surface.window(winid)
    line = window.cursor.line

    if keys == "q":
        surface.quit(winid)
    elif keys == "?":
        console.print(_help_table(mappings))
    elif keys == "j":
        surface.set_cursor(winid, Cursor(line + 1))
    elif keys == "k":
        surface.set_cursor(winid, Cursor(line - 1))
    elif keys == "gg":
        surface.set_cursor(winid, Cursor(1))
    elif keys == "G":
        surface.set_cursor(winid, Cursor(len(surface.get_lines(window.bufnr))))
    elif keys == "V":
        surface.start_visual(winid)
    elif keys == "<esc>":
        surface.stop_visual(winid)
    elif not surface.feed(winid, keys):
        err_console.print(f"[yellow]No mapping for[/yellow] {keys} [dim](? for help)[/dim]")
