"""
In-memory text surface.

Keeps buffers as lists of lines and windows as cursor/selection state. Timers
do not fire on their own; the owner advances them with ``tick()``. Used by the
terminal viewer and the test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from itertools import count

from resultpager.core.config.models import MappingMode
from resultpager.core.logging import get_logger
from resultpager.core.surface.base import (
    BufferOptions,
    Cursor,
    InvalidBufferError,
    InvalidWindowHandleError,
    Keymap,
    Surface,
    SurfaceError,
    WindowOptions,
)

logger = get_logger("surface")


@dataclass
class TextBuffer:
    name: str
    options: BufferOptions
    lines: list[str] = field(default_factory=lambda: [""])
    mappings: dict[tuple[MappingMode, str], Callable[[], None]] = field(default_factory=dict)
    quit_handle: Callable[[], None] | None = None


@dataclass
class TextWindow:
    bufnr: int | None = None
    options: WindowOptions = field(default_factory=WindowOptions)
    status: tuple[str, str] = ("", "")
    cursor: Cursor = field(default_factory=lambda: Cursor(1))
    visual_anchor: int | None = None

    @property
    def mode(self) -> MappingMode:
        return MappingMode.NORMAL if self.visual_anchor is None else MappingMode.VISUAL


@dataclass(eq=False)
class _Timer:
    interval: float
    callback: Callable[[], None]
    active: bool = True


class TextSurface(Surface):
    """Surface service backed by plain Python lists."""

    def __init__(self) -> None:
        self._buffers: dict[int, TextBuffer] = {}
        self._windows: dict[int, TextWindow] = {}
        self._timers: list[_Timer] = []
        self._bufnrs = count(1)
        self._winids = count(1000)

    # -------------------------------------------------------------------------
    # Buffers
    # -------------------------------------------------------------------------

    def create_blank_buffer(self, name: str, options: BufferOptions) -> int:
        bufnr = next(self._bufnrs)
        self._buffers[bufnr] = TextBuffer(name=name, options=options)
        logger.debug("Created buffer %d (%s)", bufnr, name)
        return bufnr

    def buffer(self, bufnr: int) -> TextBuffer:
        try:
            return self._buffers[bufnr]
        except KeyError:
            raise InvalidBufferError(f"invalid buffer: {bufnr}") from None

    def has_buffer(self, bufnr: int) -> bool:
        return bufnr in self._buffers

    def configure_buffer_mappings(self, bufnr: int, keymap: list[Keymap]) -> None:
        buf = self.buffer(bufnr)
        for entry in keymap:
            if entry.mapping is None:
                continue
            buf.mappings[(entry.mapping.mode, entry.mapping.key)] = entry.action

    def configure_buffer_quit_handle(self, bufnr: int, callback: Callable[[], None]) -> None:
        self.buffer(bufnr).quit_handle = callback

    def set_lines(self, bufnr: int, lines: list[str]) -> None:
        # a buffer always has at least one (possibly empty) line
        self.buffer(bufnr).lines = list(lines) or [""]
        for window in self._windows.values():
            if window.bufnr == bufnr:
                window.cursor = self._clamp(bufnr, window.cursor)

    def get_lines(self, bufnr: int) -> list[str]:
        return list(self.buffer(bufnr).lines)

    # -------------------------------------------------------------------------
    # Windows
    # -------------------------------------------------------------------------

    def open_window(self) -> int:
        """Create an empty window and return its id."""
        winid = next(self._winids)
        self._windows[winid] = TextWindow()
        return winid

    def close_window(self, winid: int) -> None:
        """Close a window, dropping its buffer if nothing else shows it."""
        window = self.window(winid)
        del self._windows[winid]
        bufnr = window.bufnr
        if bufnr is None or bufnr not in self._buffers:
            return
        still_shown = any(w.bufnr == bufnr for w in self._windows.values())
        if not still_shown and self._buffers[bufnr].options.bufhidden == "delete":
            del self._buffers[bufnr]
            logger.debug("Deleted hidden buffer %d", bufnr)

    def window(self, winid: int | None) -> TextWindow:
        if winid is None or winid not in self._windows:
            raise InvalidWindowHandleError(f"invalid window: {winid}")
        return self._windows[winid]

    def is_window_valid(self, winid: int | None) -> bool:
        return winid is not None and winid in self._windows

    def configure_window_options(self, winid: int, options: WindowOptions) -> None:
        self.window(winid).options = options

    def set_window_buffer(self, winid: int, bufnr: int) -> None:
        self.buffer(bufnr)
        window = self.window(winid)
        window.bufnr = bufnr
        window.visual_anchor = None
        window.cursor = self._clamp(bufnr, window.cursor)

    def set_window_status(self, winid: int, left: str, right: str = "") -> None:
        self.window(winid).status = (left, right)

    def get_cursor(self, winid: int) -> Cursor:
        return self.window(winid).cursor

    def set_cursor(self, winid: int, cursor: Cursor) -> None:
        window = self.window(winid)
        if window.bufnr is None:
            window.cursor = cursor
            return
        window.cursor = self._clamp(window.bufnr, cursor)

    def _clamp(self, bufnr: int, cursor: Cursor) -> Cursor:
        last = len(self.buffer(bufnr).lines)
        return Cursor(min(max(cursor.line, 1), last), max(cursor.col, 0))

    # -------------------------------------------------------------------------
    # Visual selection
    # -------------------------------------------------------------------------

    def start_visual(self, winid: int) -> None:
        window = self.window(winid)
        window.visual_anchor = window.cursor.line

    def stop_visual(self, winid: int) -> None:
        self.window(winid).visual_anchor = None

    def select_lines(self, winid: int, first: int, last: int) -> None:
        """Enter visual mode selecting ``first``..``last``, cursor on ``last``."""
        self.set_cursor(winid, Cursor(first))
        self.start_visual(winid)
        self.set_cursor(winid, Cursor(last))

    def visual_selection(self, winid: int) -> tuple[int, int]:
        window = self.window(winid)
        if window.visual_anchor is None:
            raise SurfaceError(f"window {winid} has no visual selection")
        first, last = sorted((window.visual_anchor, window.cursor.line))
        return first, last

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def feed(self, winid: int, keys: str) -> bool:
        """Run the action mapped to ``keys`` in the window's current mode.

        Returns:
            True if a mapping was found
        """
        window = self.window(winid)
        if window.bufnr is None:
            return False
        action = self.buffer(window.bufnr).mappings.get((window.mode, keys))
        if action is None:
            return False
        action()
        return True

    def quit(self, winid: int) -> None:
        """Invoke the quit handle of the buffer shown in a window."""
        window = self.window(winid)
        if window.bufnr is None:
            return
        handle = self.buffer(window.bufnr).quit_handle
        if handle is not None:
            handle()

    # -------------------------------------------------------------------------
    # Timers
    # -------------------------------------------------------------------------

    def start_timer(self, interval: float, callback: Callable[[], None]) -> Callable[[], None]:
        timer = _Timer(interval, callback)
        self._timers.append(timer)

        def cancel() -> None:
            timer.active = False
            if timer in self._timers:
                self._timers.remove(timer)

        return cancel

    def tick(self) -> int:
        """Fire every active timer once. Returns the number fired."""
        self._timers = [t for t in self._timers if t.active]
        for timer in list(self._timers):
            if timer.active:
                timer.callback()
        return len(self._timers)

    @property
    def active_timers(self) -> int:
        return sum(1 for t in self._timers if t.active)
