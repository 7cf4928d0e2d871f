"""
Export of row ranges through the engine.

Row numbers read from the page are 1-based and inclusive, the engine slices
0-based with an exclusive upper bound. A single row ``i`` therefore becomes
``[i-1, i)`` and a selection ``s..e`` becomes ``[s-1, e)``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from resultpager.core.engine.base import Handler, RowRange
from resultpager.core.logging import get_logger

logger = get_logger("result.export")


def current_row_range(index: int) -> RowRange:
    """Engine range for the single displayed row ``index``."""
    start = max(index - 1, 0)
    return RowRange(start, start + 1)


def selection_range(first: int, last: int) -> RowRange:
    """Engine range for displayed rows ``first`` through ``last``."""
    start = max(first - 1, 0)
    return RowRange(start, max(last, start))


@dataclass(frozen=True)
class ExportRequest:
    """One store request. ``range`` of None means every row."""

    call_id: str
    format: str
    destination: str
    range: RowRange | None = None
    extra_arg: Any = None


class ExportDispatcher:
    """Sends export requests to the engine, once each, without retrying."""

    def __init__(self, handler: Handler):
        self.handler = handler

    def dispatch(self, request: ExportRequest) -> ExportRequest:
        logger.info(
            "Storing %s rows as %s to %s",
            "all" if request.range is None else f"[{request.range.start}, {request.range.end})",
            request.format,
            request.destination,
            extra={"call_id": request.call_id},
        )
        self.handler.call_store_result(
            request.call_id,
            request.format,
            request.destination,
            request.range,
            request.extra_arg,
        )
        return request

    def store_current(self, call_id: str, index: int, format: str, destination: str, extra_arg: Any = None) -> ExportRequest:
        return self.dispatch(ExportRequest(call_id, format, destination, current_row_range(index), extra_arg))

    def store_selection(
        self,
        call_id: str,
        first: int,
        last: int,
        format: str,
        destination: str,
        extra_arg: Any = None,
    ) -> ExportRequest:
        return self.dispatch(ExportRequest(call_id, format, destination, selection_range(first, last), extra_arg))

    def store_all(self, call_id: str, format: str, destination: str, extra_arg: Any = None) -> ExportRequest:
        return self.dispatch(ExportRequest(call_id, format, destination, None, extra_arg))
