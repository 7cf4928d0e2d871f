"""Shared fixtures: an in-memory surface and a scriptable engine."""

from __future__ import annotations

from typing import Any

import pytest

from resultpager.core.engine.base import (
    CALL_STATE_CHANGED,
    Call,
    CallState,
    CallStateChanged,
    EngineError,
    Handler,
    RowRange,
)
from resultpager.core.engine.events import EventBus
from resultpager.core.surface.text import TextSurface


class FakeHandler(Handler):
    """Engine double: renders numbered rows and records every request."""

    def __init__(self, surface: TextSurface, total_rows: int = 250):
        self.surface = surface
        self.total_rows = total_rows
        self.bus = EventBus()
        self.display_calls: list[tuple[str, int, int, int]] = []
        self.store_calls: list[dict[str, Any]] = []
        self.fail_display = False

    def register_event_listener(self, topic, callback):
        return self.bus.subscribe(topic, callback)

    def emit(self, call: Call) -> None:
        self.bus.publish(CALL_STATE_CHANGED, CallStateChanged(call))

    def call_display_result(self, call_id, bufnr, from_, to):
        if self.fail_display:
            raise EngineError("display failed", call_id=call_id)
        self.display_calls.append((call_id, bufnr, from_, to))
        lines = ["  # | value", "----+------"]
        for index in range(from_, min(to, self.total_rows)):
            lines.append(f"{index + 1:>3} | row {index}")
        self.surface.set_lines(bufnr, lines)
        return self.total_rows

    def call_store_result(self, call_id, format, destination, range: RowRange | None = None, extra_arg=None):
        self.store_calls.append(
            {
                "call_id": call_id,
                "format": format,
                "destination": destination,
                "range": range,
                "extra_arg": extra_arg,
            }
        )


def make_call(call_id: str = "c1", state: CallState = CallState.EXECUTING, time_taken_us: int = 0, **kwargs: Any) -> Call:
    return Call(id=call_id, state=state, time_taken_us=time_taken_us, **kwargs)


@pytest.fixture
def surface() -> TextSurface:
    return TextSurface()


@pytest.fixture
def handler(surface: TextSurface) -> FakeHandler:
    return FakeHandler(surface)


@pytest.fixture
def window(surface: TextSurface) -> int:
    return surface.open_window()
