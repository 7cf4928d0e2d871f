"""
Rendering surface base classes.

A surface service owns text buffers and the windows showing them. The result
viewer writes into buffers and reads the cursor back, but never creates or
destroys windows itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass

from resultpager.core.config.models import Mapping


@dataclass(frozen=True)
class BufferOptions:
    """Options for a newly created buffer."""

    listed: bool = False
    bufhidden: str = "delete"  # buffer is dropped once no window shows it
    buftype: str = "nofile"
    swapfile: bool = False


@dataclass(frozen=True)
class WindowOptions:
    """Display options applied to a window."""

    wrap: bool = False
    fixed_height: bool = True
    fixed_width: bool = True
    number: bool = False


@dataclass
class Keymap:
    """Action bound to a key mapping. Entries without a mapping are skipped."""

    action: Callable[[], None]
    mapping: Mapping | None = None


@dataclass(frozen=True)
class Cursor:
    """Cursor position: 1-based line, 0-based column."""

    line: int
    col: int = 0


class Surface(ABC):
    """Abstract rendering surface service."""

    @abstractmethod
    def create_blank_buffer(self, name: str, options: BufferOptions) -> int:
        """Create an empty buffer and return its number."""

    @abstractmethod
    def configure_buffer_mappings(self, bufnr: int, keymap: list[Keymap]) -> None:
        """Bind keymap entries to a buffer."""

    @abstractmethod
    def configure_buffer_quit_handle(self, bufnr: int, callback: Callable[[], None]) -> None:
        """Call ``callback`` when the buffer is quit."""

    @abstractmethod
    def configure_window_options(self, winid: int, options: WindowOptions) -> None:
        """Apply display options to a window."""

    @abstractmethod
    def set_window_buffer(self, winid: int, bufnr: int) -> None:
        """Show a buffer in a window."""

    @abstractmethod
    def is_window_valid(self, winid: int | None) -> bool:
        """Whether the window exists."""

    @abstractmethod
    def set_window_status(self, winid: int, left: str, right: str = "") -> None:
        """Set the status bar of a window."""

    @abstractmethod
    def set_lines(self, bufnr: int, lines: list[str]) -> None:
        """Replace the whole content of a buffer."""

    @abstractmethod
    def get_lines(self, bufnr: int) -> list[str]:
        """Return the whole content of a buffer."""

    @abstractmethod
    def get_cursor(self, winid: int) -> Cursor:
        """Return the cursor of a window."""

    @abstractmethod
    def set_cursor(self, winid: int, cursor: Cursor) -> None:
        """Move the cursor of a window."""

    @abstractmethod
    def visual_selection(self, winid: int) -> tuple[int, int]:
        """Return first and last selected line (1-based, inclusive)."""

    @abstractmethod
    def start_timer(self, interval: float, callback: Callable[[], None]) -> Callable[[], None]:
        """Call ``callback`` every ``interval`` seconds until the returned
        cancel function is invoked."""


class SurfaceError(Exception):
    """Base exception for surface errors."""
    pass


class InvalidBufferError(SurfaceError):
    """Buffer does not exist."""
    pass


class InvalidWindowHandleError(SurfaceError):
    """Window does not exist."""
    pass
