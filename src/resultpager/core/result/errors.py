"""Errors raised by result viewer actions."""

from __future__ import annotations


class ResultError(Exception):
    """Base exception for result viewer errors."""

    def __init__(self, message: str, call_id: str | None = None):
        super().__init__(message)
        self.call_id = call_id


class RowResolutionError(ResultError):
    """A logical row number could not be read from the rendered page."""

    def __init__(self, message: str, call_id: str | None = None, line: int | None = None):
        super().__init__(message, call_id)
        self.line = line


class InvalidWindowError(ResultError):
    """The action needs a window showing the result, but there is none."""
    pass


class NoCallError(ResultError):
    """The action needs a tracked call, but none is set."""
    pass
