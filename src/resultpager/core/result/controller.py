"""
Result viewer driven by call lifecycle events.

A ``Result`` tracks exactly one call. Events for any other call are dropped.
Depending on the tracked call's state it shows a progress spinner, renders
the current page, or writes a one-line status for failed and canceled calls.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from resultpager.core import progress
from resultpager.core.config.models import ExportDestination, ExportFormat, ResultConfig
from resultpager.core.engine.base import CALL_STATE_CHANGED, Call, CallState, CallStateChanged, Handler
from resultpager.core.logging import get_contextual_logger
from resultpager.core.result.errors import NoCallError
from resultpager.core.result.export import ExportDispatcher, ExportRequest
from resultpager.core.result.pagination import Pager
from resultpager.core.result.resolver import RowIndexResolver, RowMarkerScanner
from resultpager.core.surface.base import BufferOptions, Keymap, Surface, WindowOptions

BUFFER_NAME = "resultpager-result"

STATUS_MESSAGES = {
    CallState.EXECUTING_FAILED: "Call execution failed",
    CallState.RETRIEVING_FAILED: "Failed retrieving results",
    CallState.CANCELED: "Call canceled",
}

RENDER_FAILED_MESSAGE = "Failed displaying results"


def status_line(call: Call) -> str:
    """Status shown for a failed or canceled call."""
    msg = STATUS_MESSAGES.get(call.state, "")
    return f"{msg} after {call.seconds:.3f} seconds"


class Result:
    """The result pane: one buffer, one tracked call, one page at a time."""

    def __init__(
        self,
        handler: Handler,
        surface: Surface,
        quit_handle: Callable[[], None] | None = None,
        config: ResultConfig | None = None,
        scanner: RowMarkerScanner | None = None,
    ):
        if handler is None:
            raise ValueError("no Handler passed to Result")

        self.config = config or ResultConfig()
        self.handler = handler
        self.surface = surface
        self.winid: int | None = None
        self.current_call: Call | None = None
        self.page_index = 0
        self._stop_progress: progress.StopHandle = progress.noop_stop
        self._log = get_contextual_logger("result")

        self.bufnr = surface.create_blank_buffer(BUFFER_NAME, BufferOptions())
        surface.configure_buffer_mappings(self.bufnr, self.generate_keymap())
        surface.configure_buffer_quit_handle(self.bufnr, quit_handle or (lambda: None))

        self.pager = Pager(handler, surface, self.bufnr, self.config.page_size)
        self.resolver = RowIndexResolver(surface, self.bufnr, scanner)
        self.exporter = ExportDispatcher(handler)

        self._unsubscribe = handler.register_event_listener(CALL_STATE_CHANGED, self.on_call_state_changed)

    @property
    def page_amount(self) -> int:
        return self.pager.page_amount

    # -------------------------------------------------------------------------
    # Call tracking
    # -------------------------------------------------------------------------

    def set_call(self, call: Call) -> None:
        """Track ``call`` from now on, starting over at page 0."""
        self.page_index = 0
        self.pager.reset()
        self.current_call = call
        self._log = self._log.with_context(call_id=call.id)
        self.stop_progress()
        self._log.debug("Tracking call in state %s", call.state.value)
        self._apply_state(call)

    def on_call_state_changed(self, event: CallStateChanged) -> None:
        """Engine event listener."""
        call = event.call

        if self.current_call is None or call.id != self.current_call.id:
            self._log.debug("Ignoring event for call %s (%s)", call.id, call.state.value)
            return

        self.current_call = call
        self._apply_state(call)

    def _apply_state(self, call: Call) -> None:
        self._log.debug("Call state is now %s", call.state.value, extra={"state": call.state.value})
        if call.state == CallState.EXECUTING:
            self.stop_progress()
            self.display_progress()
        elif call.state == CallState.RETRIEVING:
            self.stop_progress()
            self._render_from_event()
        elif call.state in STATUS_MESSAGES:
            self.stop_progress()
            self.display_status()
        else:
            self.stop_progress()

    def _render_from_event(self) -> None:
        # lifecycle transitions never raise
        try:
            self.page_current()
        except Exception as e:
            self._log.exception("Failed rendering results")
            self.surface.set_lines(self.bufnr, [f"{RENDER_FAILED_MESSAGE}: {e}"])

    # -------------------------------------------------------------------------
    # Progress and status
    # -------------------------------------------------------------------------

    def display_progress(self) -> None:
        self._stop_progress = progress.display(self.surface, self.bufnr, self.config.progress)

    def stop_progress(self) -> None:
        self._stop_progress()
        self._stop_progress = progress.noop_stop

    def display_status(self) -> None:
        call = self._require_call()
        if call.error:
            self._log.warning("%s: %s", STATUS_MESSAGES.get(call.state, call.state.value), call.error)
        self.surface.set_lines(self.bufnr, [status_line(call)])

    # -------------------------------------------------------------------------
    # Pagination
    # -------------------------------------------------------------------------

    def _require_call(self) -> Call:
        if self.current_call is None:
            raise NoCallError("no call is being tracked")
        return self.current_call

    def _display_result(self, page: int) -> int:
        return self.pager.render_page(self._require_call(), page, self.winid)

    def page_current(self) -> None:
        self.page_index = self._display_result(self.page_index)

    def page_next(self) -> None:
        self.page_index = self._display_result(self.page_index + 1)

    def page_prev(self) -> None:
        self.page_index = self._display_result(self.page_index - 1)

    # -------------------------------------------------------------------------
    # Export
    # -------------------------------------------------------------------------

    def store_current(self, format: str, destination: str, extra_arg: Any = None) -> ExportRequest:
        """Store the row under the cursor."""
        call = self._require_call()
        index = self.resolver.current_row(self.winid)
        return self.exporter.store_current(call.id, index, format, destination, extra_arg)

    def store_selection(self, format: str, destination: str, extra_arg: Any = None) -> ExportRequest:
        """Store the visually selected rows."""
        call = self._require_call()
        first, last = self.resolver.row_range(self.winid)
        return self.exporter.store_selection(call.id, first, last, format, destination, extra_arg)

    def store_all(self, format: str, destination: str, extra_arg: Any = None) -> ExportRequest:
        """Store every row of the result."""
        call = self._require_call()
        return self.exporter.store_all(call.id, format, destination, extra_arg)

    # -------------------------------------------------------------------------
    # Surface wiring
    # -------------------------------------------------------------------------

    def generate_keymap(self) -> list[Keymap]:
        mappings = self.config.mappings
        as_json, as_csv = ExportFormat.JSON.value, ExportFormat.CSV.value
        yank = ExportDestination.YANK.value
        return [
            Keymap(self.page_next, mappings.get("page_next")),
            Keymap(self.page_prev, mappings.get("page_prev")),
            # yank functions
            Keymap(lambda: self.store_current(as_json, yank), mappings.get("yank_current_json")),
            Keymap(lambda: self.store_selection(as_json, yank), mappings.get("yank_selection_json")),
            Keymap(lambda: self.store_all(as_json, yank), mappings.get("yank_all_json")),
            Keymap(lambda: self.store_current(as_csv, yank), mappings.get("yank_current_csv")),
            Keymap(lambda: self.store_selection(as_csv, yank), mappings.get("yank_selection_csv")),
            Keymap(lambda: self.store_all(as_csv, yank), mappings.get("yank_all_csv")),
        ]

    def show(self, winid: int) -> None:
        """Display the result buffer in ``winid``."""
        self.winid = winid
        self.surface.configure_window_options(winid, WindowOptions())
        self.surface.set_window_buffer(winid, self.bufnr)

    def close(self) -> None:
        """Stop listening to the engine and stop any progress display."""
        self._unsubscribe()
        self.stop_progress()
