"""Tests for page arithmetic and page rendering."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from conftest import make_call
from resultpager.core.engine.base import CallState, EngineError, RowRange
from resultpager.core.result.pagination import Pager, clamp_page, format_status, page_amount, page_window
from resultpager.core.surface.base import BufferOptions


class TestPageAmount:
    @pytest.mark.parametrize(
        ("total_rows", "page_size", "expected"),
        [
            (250, 100, 2),
            (200, 100, 1),
            (100, 100, 0),
            (99, 100, 0),
            (101, 100, 1),
            (0, 100, 0),
            (1, 1, 0),
            (7, 3, 2),
        ],
    )
    def test_examples(self, total_rows, page_size, expected):
        assert page_amount(total_rows, page_size) == expected

    @given(total_rows=st.integers(min_value=0, max_value=10**7), page_size=st.integers(min_value=1, max_value=10**4))
    def test_formula(self, total_rows, page_size):
        expected = total_rows // page_size
        if total_rows % page_size == 0 and total_rows > 0:
            expected -= 1
        assert page_amount(total_rows, page_size) == expected

    @given(total_rows=st.integers(min_value=1, max_value=10**6), page_size=st.integers(min_value=1, max_value=1000))
    def test_last_page_is_never_empty(self, total_rows, page_size):
        last = page_window(page_amount(total_rows, page_size), page_size)
        assert last.start < total_rows <= last.end

    def test_rejects_non_positive_page_size(self):
        with pytest.raises(ValueError):
            page_amount(10, 0)


class TestClampAndWindow:
    def test_clamp(self):
        assert clamp_page(-3, 2) == 0
        assert clamp_page(1, 2) == 1
        assert clamp_page(9, 2) == 2

    def test_window_is_half_open(self):
        assert page_window(0, 100) == RowRange(0, 100)
        assert page_window(2, 100) == RowRange(200, 300)

    def test_status_text(self):
        assert format_status(0, 2, 1.5) == ("1/3", "Took 1.500s")


class TestPager:
    @pytest.fixture
    def pager(self, handler, surface):
        bufnr = surface.create_blank_buffer("result", BufferOptions())
        return Pager(handler, surface, bufnr, page_size=100)

    def test_first_render_learns_page_amount(self, pager, handler):
        call = make_call(state=CallState.RETRIEVING)
        assert pager.render_page(call, 0) == 0
        assert pager.page_amount == 2
        assert handler.display_calls == [("c1", pager.bufnr, 0, 100)]

    def test_clamps_against_known_amount(self, pager, handler):
        call = make_call(state=CallState.RETRIEVING)
        pager.render_page(call, 0)

        assert pager.render_page(call, 10) == 2
        assert handler.display_calls[-1][2:] == (200, 300)
        assert pager.render_page(call, -4) == 0
        assert handler.display_calls[-1][2:] == (0, 100)

    def test_failed_render_keeps_page_amount(self, pager, handler):
        call = make_call(state=CallState.RETRIEVING)
        pager.render_page(call, 0)
        handler.fail_display = True
        handler.total_rows = 5000

        with pytest.raises(EngineError):
            pager.render_page(call, 1)
        assert pager.page_amount == 2

    def test_status_set_on_valid_window(self, pager, surface, window):
        call = make_call(state=CallState.RETRIEVING, time_taken_us=2_500_000)
        pager.render_page(call, 0, window)
        assert surface.window(window).status == ("1/3", "Took 2.500s")

    def test_invalid_window_still_renders(self, pager, surface, handler):
        call = make_call(state=CallState.RETRIEVING)
        assert pager.render_page(call, 0, winid=424242) == 0
        assert len(handler.display_calls) == 1
        assert surface.get_lines(pager.bufnr)[2].strip().startswith("1 |")

    def test_rejects_bad_page_size(self, handler, surface):
        with pytest.raises(ValueError):
            Pager(handler, surface, 1, page_size=0)
