"""Completion and code action providers for the PlainTasks LSP server.

These functions turn document text into lsprotocol results. They hold no
state; the server looks up the document text and passes it in.
"""

from __future__ import annotations

from typing import Iterable

from lsprotocol.types import (
    CodeAction,
    CodeActionKind,
    CompletionItem,
    CompletionItemKind,
    Position,
    TextEdit,
    WorkspaceEdit,
)

from plaintasks.grammar import TAG_TRIGGER
from plaintasks.lsp.position_utils import (
    get_line_at_position,
    insertion_range,
    whole_line_range,
)
from plaintasks.tags import extract_all_tags
from plaintasks.transitions import Clock, Transition, TransitionKind, local_now, propose_transitions

__all__ = ["complete_tags", "build_completion_items", "build_code_actions"]

_CODE_ACTION_KINDS = {
    TransitionKind.QUICKFIX: CodeActionKind.QuickFix,
    TransitionKind.REFACTOR: CodeActionKind.Refactor,
}


def complete_tags(text: str, vocabulary: Iterable[str]) -> list[str]:
    """Tag names to offer for a document.

    Args:
        text: Full document text
        vocabulary: Tags offered regardless of the document content

    Returns:
        Sorted, distinct tag names from the vocabulary and the document
    """
    return sorted(extract_all_tags(text).union(vocabulary))


def build_completion_items(text: str, vocabulary: Iterable[str]) -> list[CompletionItem]:
    """Completion items for every known tag.

    The label shows the tag as written (``@high``); the inserted text omits
    the ``@`` because the user has already typed it.
    """
    return [
        CompletionItem(
            label=f"{TAG_TRIGGER}{tag}",
            kind=CompletionItemKind.Keyword,
            insert_text=tag,
        )
        for tag in complete_tags(text, vocabulary)
    ]


def _to_code_action(uri: str, line: str, transition: Transition) -> CodeAction:
    edit = transition.edit
    if edit.insert:
        edit_range = insertion_range(edit.line)
    else:
        edit_range = whole_line_range(edit.line, line)

    return CodeAction(
        title=transition.title,
        kind=_CODE_ACTION_KINDS[transition.kind],
        is_preferred=True if transition.preferred else None,
        edit=WorkspaceEdit(
            changes={uri: [TextEdit(range=edit_range, new_text=edit.text)]}
        ),
    )


def build_code_actions(
    uri: str, text: str, line_number: int, clock: Clock = local_now
) -> list[CodeAction]:
    """Code actions for the line ``line_number`` of a document.

    Args:
        uri: Document URI the edits apply to
        text: Full document text
        line_number: 0-based line the request points at
        clock: Source of the current local time for completion stamps

    Returns:
        List of code actions, empty if the line is past the end of the document
    """
    line = get_line_at_position(text, Position(line=line_number, character=0))
    if line is None:
        return []
    return [
        _to_code_action(uri, line, transition)
        for transition in propose_transitions(line, line_number, clock)
    ]
