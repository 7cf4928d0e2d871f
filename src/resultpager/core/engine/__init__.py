"""Execution engine interface and the bundled in-memory engine."""

from .base import (
    CALL_STATE_CHANGED,
    Call,
    CallState,
    CallStateChanged,
    EngineError,
    Handler,
    ResultUnavailableError,
    RowRange,
    StoreError,
    UnknownCallError,
)
from .events import EventBus
from .memory import DEFAULT_REGISTER, MemoryEngine
from .sources import RowSource, SourceError, file_source, load_rows, static_source

__all__ = [
    # Base classes
    "CALL_STATE_CHANGED",
    "Call",
    "CallState",
    "CallStateChanged",
    "Handler",
    "RowRange",
    # Errors
    "EngineError",
    "UnknownCallError",
    "ResultUnavailableError",
    "StoreError",
    # Events
    "EventBus",
    # Memory engine
    "DEFAULT_REGISTER",
    "MemoryEngine",
    # Sources
    "RowSource",
    "SourceError",
    "file_source",
    "load_rows",
    "static_source",
]
