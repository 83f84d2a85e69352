"""Lexical building blocks of the PlainTasks format.

Task lines start with one of three marker glyphs, followed by whitespace
and the task body. Tags are ``@name`` tokens with an optional
parenthesised value, e.g. ``@high`` or ``@done(24-01-15 10:30)``.
"""

from __future__ import annotations

import enum
import re

PENDING_MARKER = "☐"
DONE_MARKER = "✔"
CANCELLED_MARKER = "✘"

# Character typed by the user to start a tag
TAG_TRIGGER = "@"


class LineKind(enum.Enum):
    """Mutually exclusive classification of a single line."""

    PENDING = "pending"
    DONE = "done"
    CANCELLED = "cancelled"
    PROJECT = "project"
    PLAIN = "plain"

    @property
    def is_task(self) -> bool:
        return self in (LineKind.PENDING, LineKind.DONE, LineKind.CANCELLED)


def _task_line_pattern(marker: str) -> re.Pattern[str]:
    return re.compile(rf"(\s*){re.escape(marker)}\s+(.*)")


PENDING_PATTERN = _task_line_pattern(PENDING_MARKER)
DONE_PATTERN = _task_line_pattern(DONE_MARKER)
CANCELLED_PATTERN = _task_line_pattern(CANCELLED_MARKER)

MARKERS = {
    LineKind.PENDING: PENDING_MARKER,
    LineKind.DONE: DONE_MARKER,
    LineKind.CANCELLED: CANCELLED_MARKER,
}

TAG_PATTERN = re.compile(r"@(\w+)(?:\(([^)]*)\))?")
# Names only; a value such as "(see @bob)" must not hide the tags inside it
TAG_NAME_PATTERN = re.compile(r"@(\w+)")

DONE_TAG_PATTERN = re.compile(r"\s*@done\([^)]+\)")
CANCELLED_TAG_PATTERN = re.compile(r"\s*@cancelled\([^)]+\)")

STATE_TAG_PATTERNS = {
    LineKind.DONE: DONE_TAG_PATTERN,
    LineKind.CANCELLED: CANCELLED_TAG_PATTERN,
}
