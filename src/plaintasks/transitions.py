"""State transitions between PlainTasks line kinds.

Given a line, ``propose_transitions`` returns every edit that makes sense
for it: completing or cancelling a pending task, reverting a finished one,
turning a plain line into a task, and inserting a fresh task below.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from plaintasks.grammar import (
    CANCELLED_MARKER,
    DONE_MARKER,
    PENDING_MARKER,
    LineKind,
)
from plaintasks.parser import TaskLine, classify
from plaintasks.tags import strip_state_tag

__all__ = [
    "Clock",
    "TIMESTAMP_FORMAT",
    "TransitionKind",
    "LineEdit",
    "Transition",
    "local_now",
    "format_timestamp",
    "mark_done",
    "mark_cancelled",
    "revert_to_pending",
    "convert_to_todo",
    "insert_todo_below",
    "propose_transitions",
]

# Returns the current local wall-clock time
Clock = Callable[[], datetime]

TIMESTAMP_FORMAT = "%y-%m-%d %H:%M"

MARK_DONE_TITLE = "Mark as Done"
MARK_CANCELLED_TITLE = "Mark as Cancelled"
REVERT_TITLE = "Revert to Pending"
CONVERT_TITLE = "Convert to Todo item"
INSERT_BELOW_TITLE = "Insert new Todo item below"


class TransitionKind(enum.Enum):
    QUICKFIX = "quickfix"
    REFACTOR = "refactor"


@dataclass(frozen=True)
class LineEdit:
    """Edit against a single line.

    When ``insert`` is False, ``text`` replaces the whole of line ``line``.
    When True, ``text`` is inserted at column 0 of line ``line``.
    """

    line: int
    text: str
    insert: bool = False


@dataclass(frozen=True)
class Transition:
    title: str
    kind: TransitionKind
    preferred: bool
    edit: LineEdit


def local_now() -> datetime:
    return datetime.now()


def format_timestamp(moment: datetime) -> str:
    """Format ``moment`` as ``YY-MM-DD HH:MM``."""
    return moment.strftime(TIMESTAMP_FORMAT)


def mark_done(task: TaskLine, timestamp: str) -> str:
    return f"{task.indentation}{DONE_MARKER} {task.body} @done({timestamp})"


def mark_cancelled(task: TaskLine, timestamp: str) -> str:
    return f"{task.indentation}{CANCELLED_MARKER} {task.body} @cancelled({timestamp})"


def revert_to_pending(task: TaskLine) -> str:
    return f"{task.indentation}{PENDING_MARKER} {strip_state_tag(task.body, task.kind)}"


def convert_to_todo(task: TaskLine) -> str:
    # Plain bodies are already trimmed; an empty one leaves "☐ "
    return f"{task.indentation}{PENDING_MARKER} {task.body}"


def insert_todo_below(task: TaskLine) -> str:
    return f"{task.indentation}{PENDING_MARKER} \n"


def propose_transitions(line: str, line_number: int, clock: Clock = local_now) -> list[Transition]:
    """Build all transitions available for ``line``.

    The clock is read once, when the transitions are built, so every
    timestamp in the result is identical.

    Args:
        line: Text of the line, without its terminator
        line_number: 0-based index of the line in its document
        clock: Source of the current local time

    Returns:
        Transitions in a fixed order: state changes first, then
        "Convert to Todo item" (plain lines only), then "Insert new Todo
        item below", which is always present.
    """
    task = classify(line)
    transitions: list[Transition] = []

    if task.kind is LineKind.PENDING:
        timestamp = format_timestamp(clock())
        transitions.append(
            Transition(
                MARK_DONE_TITLE,
                TransitionKind.QUICKFIX,
                True,
                LineEdit(line_number, mark_done(task, timestamp)),
            )
        )
        transitions.append(
            Transition(
                MARK_CANCELLED_TITLE,
                TransitionKind.QUICKFIX,
                False,
                LineEdit(line_number, mark_cancelled(task, timestamp)),
            )
        )
    elif task.kind in (LineKind.DONE, LineKind.CANCELLED):
        transitions.append(
            Transition(
                REVERT_TITLE,
                TransitionKind.QUICKFIX,
                True,
                LineEdit(line_number, revert_to_pending(task)),
            )
        )
    elif task.kind is LineKind.PLAIN:
        transitions.append(
            Transition(
                CONVERT_TITLE,
                TransitionKind.REFACTOR,
                True,
                LineEdit(line_number, convert_to_todo(task)),
            )
        )

    transitions.append(
        Transition(
            INSERT_BELOW_TITLE,
            TransitionKind.REFACTOR,
            False,
            LineEdit(line_number + 1, insert_todo_below(task), insert=True),
        )
    )
    return transitions
