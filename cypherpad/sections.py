"""Locate the `####`-delimited section surrounding the editor cursor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

LOG = logging.getLogger(__name__)

SECTION_MARKER = "####"


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Zero-based (line, column) location inside a document."""

    line: int
    column: int = 0


def is_marker(text: str) -> bool:
    return text.startswith(SECTION_MARKER)


def find_section_start(lines: Sequence[str], cursor: Position) -> Position:
    """Return the first position after the nearest marker at or above the cursor.

    The cursor's own line counts, so a cursor resting on a marker starts the
    section on the following line. Without any marker the section starts at the
    top of the document.
    """

    for index in range(_clamp(lines, cursor.line), -1, -1):
        if is_marker(lines[index]):
            start = Position(index + 1, 0)
            LOG.info("Section starts at (%d,%d)", start.line, start.column)
            return start
    LOG.info("Section starts at (0,0)")
    return Position(0, 0)


def find_section_end(lines: Sequence[str], cursor: Position) -> Position:
    """Return the position of the next marker strictly below the cursor.

    The marker line itself is excluded from the section. Without a following
    marker the section runs to `(len(lines), 0)`.
    """

    line_count = len(lines)
    for index in range(_clamp(lines, cursor.line) + 1, line_count):
        if is_marker(lines[index]):
            LOG.info("Section ends at (%d,0)", index)
            return Position(index, 0)
    LOG.info("Section ends at (%d,0)", line_count)
    return Position(line_count, 0)


def section_range(lines: Sequence[str], cursor: Position) -> tuple[Position, Position]:
    """Both bounds of the section at the cursor as a half-open range."""

    return find_section_start(lines, cursor), find_section_end(lines, cursor)


def extract_section(lines: Sequence[str], cursor: Position) -> str:
    """Text of the section at the cursor, without its surrounding markers."""

    start, end = section_range(lines, cursor)
    return text_in_range(lines, start, end)


def text_in_range(lines: Sequence[str], start: Position, end: Position) -> str:
    """Slice `[start, end)` out of newline-joined lines.

    A range ending at column 0 stops before the line break that precedes it,
    so a section never carries the newline in front of its closing marker.
    """

    if end <= start:
        return ""
    if start.line == end.line:
        return lines[start.line][start.column : end.column]
    parts = [lines[start.line][start.column :]]
    parts.extend(lines[start.line + 1 : end.line])
    if end.column and end.line < len(lines):
        parts.append(lines[end.line][: end.column])
    return "\n".join(parts)


def _clamp(lines: Sequence[str], line: int) -> int:
    # Editors may report the cursor one past the final line.
    return max(-1, min(line, len(lines) - 1))


__all__ = [
    "Position",
    "SECTION_MARKER",
    "extract_section",
    "find_section_end",
    "find_section_start",
    "is_marker",
    "section_range",
    "text_in_range",
]
