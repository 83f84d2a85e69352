"""Tag extraction for PlainTasks documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from plaintasks.grammar import STATE_TAG_PATTERNS, TAG_NAME_PATTERN, TAG_PATTERN, LineKind

__all__ = ["Tag", "parse_tags", "extract_all_tags", "strip_state_tag"]


@dataclass(frozen=True)
class Tag:
    """A single ``@name`` or ``@name(value)`` token."""

    name: str
    value: Optional[str] = None

    def __str__(self) -> str:
        if self.value is None:
            return f"@{self.name}"
        return f"@{self.name}({self.value})"


def parse_tags(text: str) -> list[Tag]:
    """Return the tags in ``text`` in order of appearance.

    A tag whose parentheses are never closed is returned without a value,
    the dangling ``(`` being left as ordinary text.
    """
    return [Tag(match.group(1), match.group(2)) for match in TAG_PATTERN.finditer(text)]


def extract_all_tags(text: str) -> set[str]:
    """Collect every distinct tag name used anywhere in ``text``.

    Names are case-sensitive. A bare ``@`` with no word characters after it
    is not a tag and is ignored.

    Args:
        text: Full document text (may span many lines)

    Returns:
        Set of tag names without the leading ``@``
    """
    return {match.group(1) for match in TAG_NAME_PATTERN.finditer(text)}


def strip_state_tag(body: str, kind: LineKind) -> str:
    """Remove the completion tag belonging to ``kind`` from a task body.

    For DONE bodies every ``@done(...)`` tag is removed, for CANCELLED bodies
    every ``@cancelled(...)`` tag. Other tags are left alone and the result
    is trimmed. Bodies of any other kind are returned unchanged.

    Applying this twice gives the same result as applying it once.
    """
    pattern = STATE_TAG_PATTERNS.get(kind)
    if pattern is None:
        return body
    # Removing one tag can join its neighbours into another
    while True:
        stripped = pattern.sub("", body)
        if stripped == body:
            return stripped.strip()
        body = stripped
