"""
Row index recovery from rendered text.

Only the visible page is kept client-side, so the logical number of the row
under the cursor is read back from the page itself: every rendered row starts
with its 1-based row number, and continuation lines of a row do not. The scan
walks upward from the cursor to the nearest such marker.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager

from resultpager.core.logging import get_logger
from resultpager.core.result.errors import InvalidWindowError, RowResolutionError
from resultpager.core.surface.base import Cursor, Surface, SurfaceError

logger = get_logger("result.resolver")

ROW_MARKER_PATTERN = r"^\s*(\d+)"


class RowMarkerScanner(ABC):
    """Strategy locating and reading row markers in rendered lines."""

    @abstractmethod
    def find(self, lines: list[str], origin: int) -> int | None:
        """Return the 1-based number of the nearest marker line at or above
        ``origin`` (1-based), or None."""

    @abstractmethod
    def parse(self, line: str) -> int:
        """Extract the row number from a marker line.

        Raises:
            ValueError: If the line carries no usable number
        """


class RegexRowMarkerScanner(RowMarkerScanner):
    """Markers are lines matching a regular expression.

    The first capture group (or the whole match without groups) holds the
    row number.
    """

    def __init__(self, pattern: str = ROW_MARKER_PATTERN):
        self.pattern = re.compile(pattern)

    def find(self, lines: list[str], origin: int) -> int | None:
        start = min(origin, len(lines))
        for lnum in range(start, 0, -1):
            if self.pattern.search(lines[lnum - 1]):
                return lnum
        return None

    def parse(self, line: str) -> int:
        match = self.pattern.search(line)
        if match is None:
            raise ValueError(f"no row marker in {line!r}")
        text = match.group(1) if self.pattern.groups else match.group(0)
        return int(text.strip())


def resolve_row_index(lines: list[str], origin: int, scanner: RowMarkerScanner | None = None) -> int:
    """Row number of the row containing line ``origin`` (1-based).

    Raises:
        RowResolutionError: If no marker is found or it cannot be parsed
    """
    scanner = scanner or RegexRowMarkerScanner()
    lnum = scanner.find(lines, origin)
    if lnum is None:
        raise RowResolutionError(f"couldn't retrieve row number above line {origin}", line=origin)
    try:
        return scanner.parse(lines[lnum - 1])
    except ValueError as e:
        raise RowResolutionError(f"couldn't parse row number on line {lnum}", line=lnum) from e


@contextmanager
def preserved_cursor(surface: Surface, winid: int) -> Iterator[Cursor]:
    """Restore the window cursor on exit, whatever happens inside."""
    saved = surface.get_cursor(winid)
    try:
        yield saved
    finally:
        surface.set_cursor(winid, saved)


class RowIndexResolver:
    """Resolves row numbers under the cursor or the visual selection."""

    def __init__(self, surface: Surface, bufnr: int, scanner: RowMarkerScanner | None = None):
        self.surface = surface
        self.bufnr = bufnr
        self.scanner = scanner or RegexRowMarkerScanner()

    def _require_window(self, winid: int | None) -> int:
        if winid is None or not self.surface.is_window_valid(winid):
            raise InvalidWindowError("result cannot operate without a valid window")
        return winid

    def _at_cursor(self, winid: int) -> int:
        cursor = self.surface.get_cursor(winid)
        lines = self.surface.get_lines(self.bufnr)
        return resolve_row_index(lines, cursor.line, self.scanner)

    def current_row(self, winid: int | None) -> int:
        """Row number under the cursor (1-based)."""
        return self._at_cursor(self._require_window(winid))

    def row_range(self, winid: int | None) -> tuple[int, int]:
        """Row numbers of the first and last selected lines (1-based, inclusive)."""
        winid = self._require_window(winid)
        try:
            first, last = self.surface.visual_selection(winid)
        except SurfaceError as e:
            raise RowResolutionError("no selection to resolve") from e

        with preserved_cursor(self.surface, winid):
            self.surface.set_cursor(winid, Cursor(first))
            start = self._at_cursor(winid)
            self.surface.set_cursor(winid, Cursor(last))
            end = self._at_cursor(winid)

        logger.debug("Resolved selection lines %d-%d to rows %d-%d", first, last, start, end)
        return start, end
