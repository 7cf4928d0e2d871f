"""
Busy indicator written into a buffer while a call executes.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from rich.spinner import Spinner

from resultpager.core.config.models import ProgressConfig
from resultpager.core.surface.base import Surface

StopHandle = Callable[[], None]


def noop_stop() -> None:
    """Stop handle used when nothing is being displayed."""


def display(surface: Surface, bufnr: int, options: ProgressConfig | None = None) -> StopHandle:
    """Start animating a spinner in ``bufnr``.

    Args:
        surface: Surface owning the buffer
        bufnr: Buffer to draw into
        options: Spinner text and timing

    Returns:
        Idempotent function stopping the animation
    """
    options = options or ProgressConfig()
    frames = Spinner(options.spinner).frames
    started = time.monotonic()
    frame = 0
    stopped = False

    def draw() -> None:
        nonlocal frame
        if stopped:
            return
        elapsed = time.monotonic() - started
        icon = frames[frame % len(frames)]
        frame += 1
        surface.set_lines(bufnr, [f"{options.text_prefix} {icon} {elapsed:.3f} seconds"])

    draw()
    cancel_timer = surface.start_timer(options.interval_ms / 1000, draw)

    def stop() -> None:
        nonlocal stopped
        if stopped:
            return
        stopped = True
        cancel_timer()

    return stop
