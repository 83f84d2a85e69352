"""PlainTasks LSP server main entry point."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import unquote

from pygls.lsp.server import LanguageServer
from lsprotocol.types import (
    InitializeParams,
    InitializeResult,
    InitializedParams,
    ServerCapabilities,
    CompletionOptions,
    CodeActionOptions,
    CodeActionKind,
    CodeActionParams,
    CodeAction,
    TextDocumentSyncKind,
    DidOpenTextDocumentParams,
    DidChangeTextDocumentParams,
    DidCloseTextDocumentParams,
    CompletionParams,
    CompletionList,
    LogMessageParams,
    MessageType,
)

import plaintasks
from plaintasks.config import ConfigError, ServerConfig, load_config
from plaintasks.grammar import TAG_TRIGGER
from plaintasks.lsp.builtin_tags import BUILTIN_TAGS
from plaintasks.lsp.document_store import DocumentStore
from plaintasks.lsp.features import build_code_actions, build_completion_items
from plaintasks.transitions import Clock, local_now

logger = logging.getLogger(__name__)

__all__ = ["PlainTasksLanguageServer", "create_server", "main"]

CODE_ACTION_KINDS = [CodeActionKind.QuickFix, CodeActionKind.Refactor]


def _uri_to_path(uri: str) -> str | None:
    """Convert a file:// URI to a filesystem path.

    Args:
        uri: Document URI (e.g. "file:///home/user/notes/work.todo")

    Returns:
        Filesystem path string, or None if the URI is not a file:// URI.
    """
    if uri.startswith("file://"):
        return unquote(uri[len("file://"):])
    return None


def _workspace_root(params: InitializeParams) -> Path | None:
    """Pick the directory to search for a project config from."""
    uris = []
    if params.workspace_folders:
        uris.extend(folder.uri for folder in params.workspace_folders)
    if params.root_uri:
        uris.append(params.root_uri)
    for uri in uris:
        path = _uri_to_path(uri)
        if path:
            return Path(path)
    return None


class PlainTasksLanguageServer(LanguageServer):
    """Language server for PlainTasks todo files.

    Capabilities:
    - Full document sync
    - Tag completion triggered by '@'
    - Code actions to complete, cancel and revert tasks, convert plain lines
      to tasks and insert a new task below the current line
    """

    def __init__(
        self,
        name: str,
        version: str,
        config: Optional[ServerConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """Initialize the language server."""
        super().__init__(name, version, text_document_sync_kind=TextDocumentSyncKind.Full)
        # Open documents, owned by this server for its whole lifetime
        self.documents = DocumentStore()
        self.config = config if config is not None else ServerConfig()
        # Extra config file given on the command line, re-applied on initialize
        self.config_path = config_path
        # Store handler references for testing
        self.handlers: dict[str, Callable] = {}

    @property
    def tag_vocabulary(self) -> list[str]:
        return BUILTIN_TAGS + [tag for tag in self.config.extra_tags if tag not in BUILTIN_TAGS]


def create_server(
    config: Optional[ServerConfig] = None,
    clock: Clock = local_now,
    config_path: Optional[Path] = None,
) -> PlainTasksLanguageServer:
    """Create and configure the PlainTasks LSP server.

    Args:
        config: Initial configuration (defaults apply when None)
        clock: Source of local time used to stamp @done/@cancelled tags
        config_path: Extra config file applied after the project config
    """
    server = PlainTasksLanguageServer("plaintasks-lsp", plaintasks.__version__, config, config_path)
    documents = server.documents

    @server.feature("initialize")
    def initialize(params: InitializeParams) -> InitializeResult:
        """Handle LSP initialize request.

        Loads the project configuration from the workspace root, if the
        client sent one. An invalid config is logged and the previous
        configuration is kept.

        Returns:
            InitializeResult with full text sync, completion triggered by '@'
            and quick fix / refactor code actions

        The result is informational: pygls builds the capabilities it sends
        from the options registered with each feature below.
        """
        root = _workspace_root(params)
        if root is not None:
            try:
                server.config = load_config(root, server.config_path)
                logger.debug(f"Loaded configuration for workspace {root}")
            except ConfigError as e:
                logger.warning(f"Using previous configuration: {e}")

        return InitializeResult(
            capabilities=ServerCapabilities(
                text_document_sync=TextDocumentSyncKind.Full,
                completion_provider=CompletionOptions(
                    trigger_characters=[TAG_TRIGGER],
                ),
                code_action_provider=CodeActionOptions(
                    code_action_kinds=CODE_ACTION_KINDS,
                ),
            )
        )

    @server.feature("initialized")
    def initialized(params: InitializedParams) -> None:
        """Handle LSP initialized notification by greeting the client log."""
        server.window_log_message(
            LogMessageParams(type=MessageType.Info, message="PlainTasks LSP initialized")
        )

    @server.feature("shutdown")
    def shutdown(params=None) -> None:
        """Handle LSP shutdown request by dropping all open documents."""
        documents.clear()

    @server.feature("exit")
    def exit(params=None) -> None:
        """Handle LSP exit notification."""
        pass

    @server.feature("textDocument/didOpen")
    def did_open(params: DidOpenTextDocumentParams) -> None:
        """Handle document open notification.

        Args:
            params: Document open parameters containing URI and initial text content
        """
        documents.open(params.text_document.uri, params.text_document.text)

    @server.feature("textDocument/didChange")
    def did_change(params: DidChangeTextDocumentParams) -> None:
        """Handle document change notification.

        Operates in full sync mode: the first change carries the entire
        document, and any later entries in the batch are ignored.

        Args:
            params: Document change parameters containing URI and content changes
        """
        documents.change(params.text_document.uri, params.content_changes)

    @server.feature("textDocument/didClose")
    def did_close(params: DidCloseTextDocumentParams) -> None:
        """Handle document close notification."""
        documents.close(params.text_document.uri)

    @server.feature(
        "textDocument/completion",
        CompletionOptions(trigger_characters=[TAG_TRIGGER]),
    )
    @server.thread()
    def completion(params: CompletionParams) -> CompletionList:
        """Handle completion request.

        Offers every tag used anywhere in the document plus the built-in
        vocabulary. The cursor position is not used to filter candidates.

        Args:
            params: Completion request parameters containing document URI and cursor position

        Returns:
            CompletionList of tag names, empty if the document isn't open
        """
        text = documents.get(params.text_document.uri)
        if text is None:
            return CompletionList(is_incomplete=False, items=[])

        items = build_completion_items(text, server.tag_vocabulary)
        return CompletionList(is_incomplete=False, items=items)

    @server.feature(
        "textDocument/codeAction",
        CodeActionOptions(code_action_kinds=CODE_ACTION_KINDS),
    )
    @server.thread()
    def code_action(params: CodeActionParams) -> list[CodeAction]:
        """Handle code action request.

        Actions are computed for the line at the start of the requested range.

        Args:
            params: Code action parameters containing document URI and range

        Returns:
            List of CodeActions, empty if the document isn't open or the line
            doesn't exist
        """
        uri = params.text_document.uri
        text = documents.get(uri)
        if text is None:
            return []
        return build_code_actions(uri, text, params.range.start.line, clock)

    # Store handler references for testing
    server.handlers["initialize"] = initialize
    server.handlers["initialized"] = initialized
    server.handlers["shutdown"] = shutdown
    server.handlers["exit"] = exit
    server.handlers["textDocument/didOpen"] = did_open
    server.handlers["textDocument/didChange"] = did_change
    server.handlers["textDocument/didClose"] = did_close
    server.handlers["textDocument/completion"] = completion
    server.handlers["textDocument/codeAction"] = code_action

    return server


def main() -> None:
    """Start the PlainTasks LSP server."""
    server = create_server()
    server.start_io()


if __name__ == "__main__":
    main()
