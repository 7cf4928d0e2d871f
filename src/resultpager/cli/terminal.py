"""
Terminal rendering of a text surface with Rich.
"""

from __future__ import annotations

from rich.console import Console
from rich.rule import Rule
from rich.text import Text

from resultpager.core.surface.text import TextSurface


class TerminalSurface(TextSurface):
    """Text surface that can draw a window to a Rich console."""

    def __init__(self, console: Console | None = None):
        super().__init__()
        self.console = console or Console()

    def draw(self, winid: int) -> None:
        """Print the window: status rule, then buffer lines with the cursor
        marked and the visual selection highlighted."""
        window = self.window(winid)
        left, right = window.status
        title = f"{left}  {right}".strip()

        self.console.print(Rule(Text(title), align="left"))
        if window.bufnr is None:
            return

        selection = None
        if window.visual_anchor is not None:
            selection = self.visual_selection(winid)

        for lnum, line in enumerate(self.get_lines(window.bufnr), start=1):
            gutter = ">" if lnum == window.cursor.line else " "
            style = ""
            if selection and selection[0] <= lnum <= selection[1]:
                style = "reverse"
            text = Text(f"{gutter} ")
            text.append(line, style=style)
            self.console.print(text, no_wrap=window.options.wrap is False, overflow="crop")
