"""Line classification for PlainTasks documents.

Every line maps to exactly one ``LineKind``. Task-marker rules are tried
before the project-header rule, so ``☐ Ask about:`` is a pending task and
not a project.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Optional

from plaintasks.grammar import (
    CANCELLED_PATTERN,
    DONE_PATTERN,
    PENDING_PATTERN,
    LineKind,
)
from plaintasks.tags import Tag, parse_tags

_LINE_BREAK = re.compile(r"\r\n|\r|\n")

__all__ = [
    "TaskLine",
    "CLASSIFICATION_ORDER",
    "classify",
    "leading_whitespace",
    "split_lines",
]


@dataclass(frozen=True)
class TaskLine:
    """A classified line and its structural parts.

    Attributes:
        kind: Classification of the line
        indentation: Leading whitespace, kept exactly as written
        body: Task text for task lines, the title for projects, and the
            trimmed text for plain lines
        tags: Tags found in the body
        raw: The original line
    """

    kind: LineKind
    indentation: str
    body: str
    raw: str
    tags: tuple[Tag, ...] = field(default=())


def leading_whitespace(line: str) -> str:
    """Return the whitespace prefix of ``line``."""
    return line[: len(line) - len(line.lstrip())]


def _match_task(pattern: re.Pattern[str], kind: LineKind) -> Callable[[str], Optional[TaskLine]]:
    def rule(line: str) -> Optional[TaskLine]:
        match = pattern.fullmatch(line)
        if match is None:
            return None
        indentation, body = match.group(1), match.group(2)
        return TaskLine(kind, indentation, body, line, tuple(parse_tags(body)))

    return rule


def _match_project(line: str) -> Optional[TaskLine]:
    stripped = line.rstrip()
    if not stripped.endswith(":"):
        return None
    title = stripped[:-1].strip()
    return TaskLine(LineKind.PROJECT, leading_whitespace(line), title, line, tuple(parse_tags(title)))


def _match_plain(line: str) -> TaskLine:
    body = line.strip()
    return TaskLine(LineKind.PLAIN, leading_whitespace(line), body, line, tuple(parse_tags(body)))


# Precedence order of the classification rules; the first match wins.
CLASSIFICATION_ORDER: tuple[tuple[LineKind, Callable[[str], Optional[TaskLine]]], ...] = (
    (LineKind.PENDING, _match_task(PENDING_PATTERN, LineKind.PENDING)),
    (LineKind.DONE, _match_task(DONE_PATTERN, LineKind.DONE)),
    (LineKind.CANCELLED, _match_task(CANCELLED_PATTERN, LineKind.CANCELLED)),
    (LineKind.PROJECT, _match_project),
)


def classify(line: str) -> TaskLine:
    """Classify a single, already split line.

    Args:
        line: One line of text without its line terminator

    Returns:
        TaskLine describing the line. Lines that match no rule are PLAIN.
    """
    for _kind, rule in CLASSIFICATION_ORDER:
        result = rule(line)
        if result is not None:
            return result
    return _match_plain(line)


def split_lines(text: str) -> list[str]:
    """Split document text into lines the way editors number them.

    Lines end at ``\\r\\n``, ``\\r`` or ``\\n``, as in LSP. A final line
    terminator does not start a new (empty) line.
    """
    if not text:
        return []
    lines = _LINE_BREAK.split(text)
    if text.endswith(("\n", "\r")):
        lines.pop()
    return lines
