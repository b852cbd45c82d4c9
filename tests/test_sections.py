"""Tests for locating `####`-delimited sections."""

from __future__ import annotations

import logging

import pytest

from cypherpad.sections import (
    Position,
    extract_section,
    find_section_end,
    find_section_start,
    section_range,
    text_in_range,
)

DOCUMENT = ["a", "####", "MATCH (n) RETURN n", "####", "b"]


def test_extracts_section_between_markers() -> None:
    assert extract_section(DOCUMENT, Position(2, 0)) == "MATCH (n) RETURN n"


def test_section_bounds_exclude_markers() -> None:
    start, end = section_range(DOCUMENT, Position(2, 5))

    assert start == Position(2, 0)
    assert end == Position(3, 0)


def test_section_before_first_marker_starts_at_document_start() -> None:
    assert find_section_start(DOCUMENT, Position(0, 0)) == Position(0, 0)
    assert extract_section(DOCUMENT, Position(0, 0)) == "a"


def test_section_after_last_marker_runs_to_document_end() -> None:
    assert find_section_end(DOCUMENT, Position(4, 1)) == Position(5, 0)
    assert extract_section(DOCUMENT, Position(4, 1)) == "b"


def test_cursor_on_marker_starts_after_it() -> None:
    assert find_section_start(DOCUMENT, Position(1, 2)) == Position(2, 0)
    assert extract_section(DOCUMENT, Position(1, 0)) == "MATCH (n) RETURN n"


def test_cursor_on_closing_marker_selects_following_section() -> None:
    assert extract_section(DOCUMENT, Position(3, 0)) == "b"


def test_empty_document_yields_empty_range() -> None:
    assert section_range([], Position(0, 0)) == (Position(0, 0), Position(0, 0))
    assert extract_section([], Position(0, 0)) == ""


def test_adjacent_markers_yield_empty_section() -> None:
    lines = ["MATCH (a) RETURN a", "####", "####", "MATCH (b) RETURN b"]

    assert extract_section(lines, Position(1, 0)) == ""


def test_marker_is_a_prefix_match() -> None:
    lines = ["RETURN 1", "#### second query", "RETURN 2", "### not a marker", "RETURN 3"]

    assert extract_section(lines, Position(2, 0)) == "RETURN 2\n### not a marker\nRETURN 3"


def test_indented_hashes_are_not_markers() -> None:
    lines = ["RETURN 1", "  ####", "RETURN 2"]

    assert extract_section(lines, Position(2, 0)) == "RETURN 1\n  ####\nRETURN 2"


def test_multi_line_section_keeps_inner_newlines() -> None:
    lines = ["####", "MATCH (n)", "WHERE n.id = 1", "RETURN n", "####"]

    assert extract_section(lines, Position(2, 3)) == "MATCH (n)\nWHERE n.id = 1\nRETURN n"


def test_trailing_marker_at_document_end_yields_empty_section() -> None:
    lines = ["RETURN 1", "####"]

    assert extract_section(lines, Position(1, 0)) == ""


def test_cursor_past_last_line_is_clamped() -> None:
    lines = ["RETURN 1", "####", "RETURN 2"]

    assert extract_section(lines, Position(3, 0)) == "RETURN 2"


@pytest.mark.parametrize("cursor_line", range(4))
def test_document_without_markers_is_one_section(cursor_line: int) -> None:
    lines = ["MATCH (n)", "", "RETURN n", "LIMIT 5"]
    cursor = Position(cursor_line, 0)

    assert find_section_start(lines, cursor) == Position(0, 0)
    assert find_section_end(lines, cursor) == Position(len(lines), 0)
    assert extract_section(lines, cursor) == "\n".join(lines)


@pytest.mark.parametrize("cursor_line", [0, 2, 4, 5, 7])
def test_bounds_surround_non_marker_cursor(cursor_line: int) -> None:
    lines = ["x", "####", "y", "####", "z", "w", "####", "v"]
    cursor = Position(cursor_line, 0)

    start, end = section_range(lines, cursor)

    assert 0 <= start.line <= cursor_line <= end.line <= len(lines)
    assert "####" not in extract_section(lines, cursor)


def test_text_in_range_respects_columns() -> None:
    lines = ["abc", "def", "ghi"]

    assert text_in_range(lines, Position(0, 1), Position(2, 2)) == "bc\ndef\ngh"
    assert text_in_range(lines, Position(1, 1), Position(1, 3)) == "ef"


def test_bounds_are_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="cypherpad.sections"):
        section_range(DOCUMENT, Position(2, 0))

    assert "Section starts at (2,0)" in caplog.text
    assert "Section ends at (3,0)" in caplog.text
