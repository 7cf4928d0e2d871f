"""
Page arithmetic and page rendering.

Pages are zero based. ``page_amount`` is the highest valid page index, not the
number of pages: 250 rows at 100 per page give pages 0, 1 and 2, so the page
amount is 2, and 200 rows give 1 (never an empty trailing page).
"""

from __future__ import annotations

from resultpager.core.engine.base import Call, Handler, RowRange
from resultpager.core.logging import get_logger
from resultpager.core.surface.base import Surface

logger = get_logger("result.pagination")


def page_amount(total_rows: int, page_size: int) -> int:
    """Highest zero-based page index for ``total_rows`` rows."""
    if page_size <= 0:
        raise ValueError(f"page_size must be positive, got {page_size}")
    if total_rows < 0:
        raise ValueError(f"total_rows must not be negative, got {total_rows}")
    amount = total_rows // page_size
    if total_rows % page_size == 0 and amount != 0:
        amount -= 1
    return amount


def clamp_page(page_index: int, amount: int) -> int:
    """Clamp ``page_index`` into ``[0, amount]``."""
    return max(0, min(page_index, amount))


def page_window(page_index: int, page_size: int) -> RowRange:
    """Half-open row range covered by a page."""
    return RowRange(page_size * page_index, page_size * (page_index + 1))


def format_status(page_index: int, amount: int, seconds: float) -> tuple[str, str]:
    """Window status for a rendered page: position on the left, timing on the right."""
    return f"{page_index + 1}/{amount + 1}", f"Took {seconds:.3f}s"


class Pager:
    """Renders pages of the tracked call through the engine.

    Holds the page amount learned from the last successful render. The
    page index itself belongs to the caller.
    """

    def __init__(self, handler: Handler, surface: Surface, bufnr: int, page_size: int = 100):
        if page_size <= 0:
            raise ValueError(f"page_size must be positive, got {page_size}")
        self.handler = handler
        self.surface = surface
        self.bufnr = bufnr
        self.page_size = page_size
        self.page_amount = 0

    def reset(self) -> None:
        self.page_amount = 0

    def render_page(self, call: Call, page_index: int, winid: int | None = None) -> int:
        """Render one page of ``call`` into the buffer.

        The requested index is clamped against the page amount known before
        this render; the engine's row count then updates the amount.

        Args:
            call: Call whose rows are rendered
            page_index: Requested zero-based page
            winid: Window whose status shows the position, if any

        Returns:
            The page actually rendered

        Raises:
            EngineError: If the engine cannot display the rows; the page
                amount is left untouched
        """
        page = clamp_page(page_index, self.page_amount)
        window = page_window(page, self.page_size)

        total = self.handler.call_display_result(call.id, self.bufnr, window.start, window.end)

        self.page_amount = page_amount(total, self.page_size)
        logger.debug(
            "Rendered rows [%d, %d) of %d",
            window.start,
            window.end,
            total,
            extra={"call_id": call.id, "page": page},
        )

        if self.surface.is_window_valid(winid):
            left, right = format_status(page, self.page_amount, call.seconds)
            self.surface.set_window_status(winid, left, right)

        return page
