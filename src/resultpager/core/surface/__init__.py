"""Rendering surface service and its in-memory implementation."""

from .base import (
    BufferOptions,
    Cursor,
    InvalidBufferError,
    InvalidWindowHandleError,
    Keymap,
    Surface,
    SurfaceError,
    WindowOptions,
)
from .text import TextBuffer, TextSurface, TextWindow

__all__ = [
    "BufferOptions",
    "Cursor",
    "InvalidBufferError",
    "InvalidWindowHandleError",
    "Keymap",
    "Surface",
    "SurfaceError",
    "WindowOptions",
    "TextBuffer",
    "TextSurface",
    "TextWindow",
]
