"""Tests for the progress spinner."""

from rich.spinner import Spinner

from resultpager.core import progress
from resultpager.core.config.models import ProgressConfig
from resultpager.core.surface.base import BufferOptions


def test_draws_immediately_and_animates(surface):
    bufnr = surface.create_blank_buffer("result", BufferOptions())
    frames = Spinner("line").frames
    options = ProgressConfig(text_prefix="Working", spinner="line")

    stop = progress.display(surface, bufnr, options)
    first = surface.get_lines(bufnr)[0]
    assert first.startswith(f"Working {frames[0]} ")
    assert first.endswith(" seconds")

    surface.tick()
    assert surface.get_lines(bufnr)[0].startswith(f"Working {frames[1]} ")
    stop()


def test_stop_is_idempotent(surface):
    bufnr = surface.create_blank_buffer("result", BufferOptions())
    stop = progress.display(surface, bufnr)
    assert surface.active_timers == 1

    stop()
    stop()
    assert surface.active_timers == 0

    surface.set_lines(bufnr, ["rows"])
    surface.tick()
    assert surface.get_lines(bufnr) == ["rows"]


def test_noop_stop():
    progress.noop_stop()
    progress.noop_stop()
