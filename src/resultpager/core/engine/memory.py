"""
In-process execution engine.

Runs calls synchronously from row sources, keeps their rows in memory, and
implements the display and store primitives the result viewer uses. Pages
are drawn as borderless rich tables behind a gutter of 1-based row numbers.
"""

from __future__ import annotations

import csv
import io
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any
from uuid import uuid4

import orjson
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from resultpager.core.config.models import ExportDestination, ExportFormat
from resultpager.core.engine.base import (
    CALL_STATE_CHANGED,
    Call,
    CallState,
    CallStateChanged,
    Handler,
    ResultUnavailableError,
    RowRange,
    StoreError,
    UnknownCallError,
)
from resultpager.core.engine.events import EventBus
from resultpager.core.engine.sources import RowSource
from resultpager.core.logging import get_contextual_logger
from resultpager.core.surface.base import Surface

DEFAULT_REGISTER = '"'

# States in which rows can be displayed and stored
_READABLE = {CallState.RETRIEVING, CallState.ARCHIVED}


@dataclass
class CallRecord:
    call: Call
    source: RowSource
    started_ns: int
    columns: list[str] = field(default_factory=list)
    rows: list[list[Any]] = field(default_factory=list)


def _now_us() -> int:
    return time.time_ns() // 1000


def _cell(value: Any) -> str:
    if value is None:
        return "NULL"
    # one rendered line per row
    return str(value).replace("\r", "\\r").replace("\n", "\\n")


class MemoryEngine(Handler):
    """Engine keeping every result set in memory."""

    def __init__(self, surface: Surface, width: int = 200, bus: EventBus | None = None):
        self.surface = surface
        self.width = width
        self.bus = bus or EventBus()
        self.registers: dict[str, str] = {}
        self._calls: dict[str, CallRecord] = {}

    # -------------------------------------------------------------------------
    # Call lifecycle
    # -------------------------------------------------------------------------

    def execute(self, query: str, source: RowSource) -> Call:
        """Register a call. It runs when ``run`` is invoked."""
        call = Call(
            id=uuid4().hex[:12],
            state=CallState.EXECUTING,
            query=query,
            timestamp_us=_now_us(),
        )
        self._calls[call.id] = CallRecord(call=call, source=source, started_ns=time.perf_counter_ns())
        return call

    def run(self, call_id: str) -> Call:
        """Execute a registered call, publishing each state change."""
        record = self._record(call_id)
        log = get_contextual_logger("engine", call_id=call_id)
        self._transition(record, CallState.EXECUTING)

        try:
            columns, rows = record.source()
        except Exception as e:
            log.warning("Execution failed: %s", e)
            return self._transition(record, CallState.EXECUTING_FAILED, error=str(e))

        record.columns = list(columns)
        record.rows = [list(row) for row in rows]
        log.info("Retrieved %d rows", len(record.rows))

        self._transition(record, CallState.RETRIEVING)
        return self._transition(record, CallState.ARCHIVED)

    def cancel(self, call_id: str) -> Call:
        return self._transition(self._record(call_id), CallState.CANCELED)

    def get_call(self, call_id: str) -> Call:
        return self._record(call_id).call

    def _record(self, call_id: str) -> CallRecord:
        try:
            return self._calls[call_id]
        except KeyError:
            raise UnknownCallError(f"unknown call: {call_id}", call_id=call_id) from None

    def _transition(self, record: CallRecord, state: CallState, error: str | None = None) -> Call:
        elapsed_us = (time.perf_counter_ns() - record.started_ns) // 1000
        record.call = replace(record.call, state=state, time_taken_us=elapsed_us, error=error)
        self.bus.publish(CALL_STATE_CHANGED, CallStateChanged(record.call))
        return record.call

    # -------------------------------------------------------------------------
    # Handler interface
    # -------------------------------------------------------------------------

    def register_event_listener(
        self,
        topic: str,
        callback: Callable[[CallStateChanged], None],
    ) -> Callable[[], None]:
        return self.bus.subscribe(topic, callback)

    def _readable(self, call_id: str) -> CallRecord:
        record = self._record(call_id)
        if record.call.state not in _READABLE:
            raise ResultUnavailableError(
                f"call {call_id} has no result in state {record.call.state.value}",
                call_id=call_id,
            )
        return record

    def call_display_result(self, call_id: str, bufnr: int, from_: int, to: int) -> int:
        record = self._readable(call_id)
        self.surface.set_lines(bufnr, self.render(record.columns, record.rows, from_, to))
        return len(record.rows)

    def render(self, columns: list[str], rows: list[list[Any]], from_: int, to: int) -> list[str]:
        """Lines for rows ``[from_, to)``, each row prefixed with its number.

        The numbers are a gutter outside the table, so a table squeezed into
        a narrow width loses cell text but never row numbers.
        """
        page = rows[from_:to]
        numbers = [str(from_ + offset + 1) for offset in range(len(page))]
        gutter = max([1, *(len(number) for number in numbers)])

        table = Table(box=box.SIMPLE_HEAD, show_edge=False, pad_edge=False, highlight=False)
        for column in columns:
            table.add_column(Text(column), no_wrap=True, overflow="ellipsis")
        for row in page:
            table.add_row(*(Text(_cell(v)) for v in row))

        # header, rule, then exactly one line per row
        body = self._capture(table, max(self.width - gutter - 1, 1)) if columns else []
        header, rule, *cells = body or ["", ""]
        cells += [""] * (len(numbers) - len(cells))

        lines = [f"{'#':>{gutter}} {header}", "─" * (gutter + 1) + rule]
        lines += [f"{number:>{gutter}} {line}" for number, line in zip(numbers, cells)]
        return [line.rstrip() for line in lines]

    def _capture(self, table: Table, width: int) -> list[str]:
        console = Console(
            file=io.StringIO(),
            width=width,
            color_system=None,
            legacy_windows=False,
            emoji=False,
        )
        console.print(table)
        return console.file.getvalue().splitlines()

    def call_store_result(
        self,
        call_id: str,
        format: str,
        destination: str,
        range: RowRange | None = None,
        extra_arg: Any = None,
    ) -> None:
        record = self._readable(call_id)
        rows = record.rows if range is None else record.rows[range.start:range.end]
        text = self.format_rows(record.columns, rows, format)

        if destination == ExportDestination.YANK:
            register = extra_arg or DEFAULT_REGISTER
            self.registers[register] = text
        elif destination == ExportDestination.FILE:
            if not extra_arg:
                raise StoreError("file destination needs a path", call_id=call_id)
            try:
                path = Path(extra_arg)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(text, encoding="utf-8")
            except OSError as e:
                raise StoreError(f"Cannot write {extra_arg}", call_id=call_id, cause=e) from e
        else:
            raise StoreError(f"unsupported destination: {destination}", call_id=call_id)

    def format_rows(self, columns: list[str], rows: list[list[Any]], format: str) -> str:
        if format == ExportFormat.JSON:
            records = [dict(zip(columns, row)) for row in rows]
            return orjson.dumps(records, option=orjson.OPT_INDENT_2, default=str).decode("utf-8")
        if format == ExportFormat.CSV:
            out = io.StringIO()
            writer = csv.writer(out, lineterminator="\n")
            writer.writerow(columns)
            writer.writerows(rows)
            return out.getvalue()
        raise StoreError(f"unsupported format: {format}")
