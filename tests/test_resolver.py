"""Tests for recovering row numbers from rendered pages."""

import pytest

from resultpager.core.result.errors import InvalidWindowError, RowResolutionError
from resultpager.core.result.resolver import (
    RegexRowMarkerScanner,
    RowIndexResolver,
    preserved_cursor,
    resolve_row_index,
)
from resultpager.core.surface.base import BufferOptions, Cursor

PAGE = [
    "  # | name  | note",
    "----+-------+------",
    "101 | alpha | one",
    "    |       | two",
    "102 | beta  | three",
    "  7 | gamma | four",
    "    |       | 12 continued",
]


@pytest.fixture
def bufnr(surface, window):
    nr = surface.create_blank_buffer("result", BufferOptions())
    surface.set_lines(nr, PAGE)
    surface.set_window_buffer(window, nr)
    return nr


@pytest.fixture
def resolver(surface, bufnr):
    return RowIndexResolver(surface, bufnr)


class TestResolveRowIndex:
    def test_marker_on_origin_line(self):
        assert resolve_row_index(PAGE, 3) == 101

    def test_searches_upward(self):
        assert resolve_row_index(PAGE, 4) == 101

    def test_leading_whitespace(self):
        assert resolve_row_index(PAGE, 6) == 7

    def test_no_marker_above_origin(self):
        with pytest.raises(RowResolutionError) as exc:
            resolve_row_index(PAGE, 2)
        assert exc.value.line == 2

    def test_page_without_markers(self):
        with pytest.raises(RowResolutionError):
            resolve_row_index(["Call canceled after 1.000 seconds"], 1)

    def test_empty_page(self):
        with pytest.raises(RowResolutionError):
            resolve_row_index([""], 1)

    def test_unparseable_marker(self):
        scanner = RegexRowMarkerScanner(r"^\s*(\d+|x+)")
        with pytest.raises(RowResolutionError):
            resolve_row_index(["  xx | bad"], 1, scanner)

    def test_origin_past_end(self):
        assert resolve_row_index(PAGE, 99) == 7

    def test_pattern_without_group(self):
        scanner = RegexRowMarkerScanner(r"^\s*\d+")
        assert resolve_row_index(PAGE, 5, scanner) == 102


class TestRowIndexResolver:
    def test_current_row(self, resolver, surface, window):
        surface.set_cursor(window, Cursor(5))
        assert resolver.current_row(window) == 102

    def test_current_row_on_header(self, resolver, surface, window):
        surface.set_cursor(window, Cursor(1))
        with pytest.raises(RowResolutionError):
            resolver.current_row(window)

    def test_requires_window(self, resolver):
        with pytest.raises(InvalidWindowError):
            resolver.current_row(None)
        with pytest.raises(InvalidWindowError):
            resolver.row_range(31337)

    def test_row_range_restores_cursor(self, resolver, surface, window):
        surface.select_lines(window, 4, 6)
        assert resolver.row_range(window) == (101, 7)
        assert surface.get_cursor(window) == Cursor(6)

    def test_row_range_restores_cursor_on_failure(self, resolver, surface, window):
        surface.select_lines(window, 6, 1)
        with pytest.raises(RowResolutionError):
            resolver.row_range(window)
        assert surface.get_cursor(window) == Cursor(1)

    def test_row_range_without_selection(self, resolver, surface, window):
        surface.set_cursor(window, Cursor(3))
        with pytest.raises(RowResolutionError):
            resolver.row_range(window)
        assert surface.get_cursor(window) == Cursor(3)


def test_preserved_cursor(surface, window, bufnr):
    surface.set_cursor(window, Cursor(2, 3))
    with pytest.raises(RuntimeError):
        with preserved_cursor(surface, window) as saved:
            assert saved == Cursor(2, 3)
            surface.set_cursor(window, Cursor(6))
            raise RuntimeError("boom")
    assert surface.get_cursor(window) == Cursor(2, 3)
