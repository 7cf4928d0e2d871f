"""
Execution engine base classes and data structures.

Defines the interface contract the result viewer expects from whatever runs
queries: lifecycle events, page rendering and result storing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

CALL_STATE_CHANGED = "call_state_changed"


class CallState(str, Enum):
    """Lifecycle state of a call."""

    UNKNOWN = "unknown"
    EXECUTING = "executing"
    EXECUTING_FAILED = "executing_failed"
    RETRIEVING = "retrieving"
    RETRIEVING_FAILED = "retrieving_failed"
    ARCHIVED = "archived"
    ARCHIVE_FAILED = "archive_failed"
    CANCELED = "canceled"


@dataclass(frozen=True)
class Call:
    """Snapshot of a call as reported by the engine."""

    id: str
    state: CallState = CallState.UNKNOWN
    time_taken_us: int = 0
    query: str = ""
    timestamp_us: int = 0
    error: str | None = None

    @property
    def seconds(self) -> float:
        """Elapsed time in seconds."""
        return self.time_taken_us / 1_000_000


@dataclass(frozen=True)
class CallStateChanged:
    """Event published whenever a call changes state."""

    call: Call


@dataclass(frozen=True)
class RowRange:
    """Half-open logical row range ``[start, end)``."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid row range [{self.start}, {self.end})")

    def __len__(self) -> int:
        return self.end - self.start


class Handler(ABC):
    """Abstract execution engine as seen by the result viewer.

    The engine owns calls and their rows. The viewer only asks it to draw a
    window of rows into a buffer or to store a range of rows somewhere.
    """

    @abstractmethod
    def register_event_listener(
        self,
        topic: str,
        callback: Callable[[CallStateChanged], None],
    ) -> Callable[[], None]:
        """Subscribe to engine events.

        Args:
            topic: Event topic, e.g. ``call_state_changed``
            callback: Receives each event

        Returns:
            Callable that removes the subscription
        """

    @abstractmethod
    def call_display_result(self, call_id: str, bufnr: int, from_: int, to: int) -> int:
        """Render rows ``[from_, to)`` of a call into a buffer.

        Returns:
            Total number of rows in the call's result set

        Raises:
            EngineError: If the result cannot be displayed
        """

    @abstractmethod
    def call_store_result(
        self,
        call_id: str,
        format: str,
        destination: str,
        range: RowRange | None = None,
        extra_arg: Any = None,
    ) -> None:
        """Store a range of rows (all rows when ``range`` is None).

        Raises:
            EngineError: If the result cannot be stored
        """


class EngineError(Exception):
    """Base exception for engine errors."""

    def __init__(self, message: str, call_id: str | None = None, cause: Exception | None = None):
        super().__init__(message)
        self.call_id = call_id
        self.cause = cause


class UnknownCallError(EngineError):
    """The engine has no call with the given id."""
    pass


class ResultUnavailableError(EngineError):
    """The call has no rows to display yet (or never will)."""
    pass


class StoreError(EngineError):
    """Storing a result failed."""
    pass
