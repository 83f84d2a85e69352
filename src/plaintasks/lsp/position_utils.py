"""Utilities for mapping LSP positions onto PlainTasks documents."""

from lsprotocol.types import Position, Range

from plaintasks.parser import split_lines


def get_line_at_position(text: str, position: Position) -> str | None:
    """Return the line a position points into.

    Only the line number is used; the character offset is ignored.

    Args:
        text: The full document text
        position: The position to look up

    Returns:
        The line text without its terminator, or None if the line number is
        past the end of the document
    """
    lines = split_lines(text)
    if position.line >= len(lines):
        return None
    return lines[position.line]


def utf16_length(text: str) -> int:
    """Length of ``text`` in UTF-16 code units, the unit of LSP columns."""
    return len(text.encode("utf-16-le")) // 2


def whole_line_range(line_number: int, line: str) -> Range:
    """Range covering the full text of a line, excluding its terminator."""
    return Range(
        start=Position(line=line_number, character=0),
        end=Position(line=line_number, character=utf16_length(line)),
    )


def insertion_range(line_number: int) -> Range:
    """Zero-width range at the start of a line."""
    position = Position(line=line_number, character=0)
    return Range(start=position, end=position)
