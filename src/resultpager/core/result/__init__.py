"""Result viewer: call tracking, pagination, row resolution and export."""

from .controller import Result, status_line
from .errors import InvalidWindowError, NoCallError, ResultError, RowResolutionError
from .export import ExportDispatcher, ExportRequest, current_row_range, selection_range
from .pagination import Pager, clamp_page, page_amount, page_window
from .resolver import (
    RegexRowMarkerScanner,
    RowIndexResolver,
    RowMarkerScanner,
    preserved_cursor,
    resolve_row_index,
)

__all__ = [
    # Controller
    "Result",
    "status_line",
    # Errors
    "ResultError",
    "RowResolutionError",
    "InvalidWindowError",
    "NoCallError",
    # Export
    "ExportDispatcher",
    "ExportRequest",
    "current_row_range",
    "selection_range",
    # Pagination
    "Pager",
    "clamp_page",
    "page_amount",
    "page_window",
    # Row resolution
    "RowMarkerScanner",
    "RegexRowMarkerScanner",
    "RowIndexResolver",
    "preserved_cursor",
    "resolve_row_index",
]
