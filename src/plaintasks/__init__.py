"""PlainTasks - a language server for plain-text todo lists."""

__version__ = "0.1.0"

from plaintasks.grammar import LineKind
from plaintasks.parser import TaskLine, classify, split_lines
from plaintasks.tags import Tag, extract_all_tags, parse_tags, strip_state_tag
from plaintasks.transitions import (
    LineEdit,
    Transition,
    TransitionKind,
    format_timestamp,
    propose_transitions,
)

__all__ = [
    "__version__",
    "LineKind",
    "TaskLine",
    "classify",
    "split_lines",
    "Tag",
    "extract_all_tags",
    "parse_tags",
    "strip_state_tag",
    "LineEdit",
    "Transition",
    "TransitionKind",
    "format_timestamp",
    "propose_transitions",
]
