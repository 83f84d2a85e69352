"""Tests for LSP server module."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock, patch

import plaintasks
from plaintasks.config import ServerConfig
from plaintasks.lsp.builtin_tags import BUILTIN_TAGS
from plaintasks.lsp.document_store import DocumentStore
from plaintasks.lsp.server import PlainTasksLanguageServer, _uri_to_path, create_server, main
from lsprotocol.types import (
    CodeActionKind,
    CodeActionOptions,
    CompletionList,
    CompletionOptions,
    InitializeParams,
    InitializedParams,
    MessageType,
    TextDocumentSyncKind,
)

from helpers.lsp import (
    TEST_URI,
    change_params,
    close_params,
    code_action_params,
    completion_params,
    fixed_clock,
    open_params,
)


class TestPlainTasksLanguageServer(unittest.TestCase):
    """Tests for PlainTasksLanguageServer class."""

    def test_server_instantiation(self):
        """Test that the LSP server can be instantiated."""
        server = PlainTasksLanguageServer("test-server", "v0.1")
        self.assertEqual(server.name, "test-server")
        self.assertEqual(server.version, "v0.1")
        self.assertIsInstance(server.documents, DocumentStore)
        self.assertEqual(len(server.documents), 0)

    def test_each_server_owns_its_store(self):
        first = PlainTasksLanguageServer("a", "1")
        second = PlainTasksLanguageServer("b", "1")
        self.assertIsNot(first.documents, second.documents)

    def test_tag_vocabulary_includes_configured_tags(self):
        server = PlainTasksLanguageServer(
            "s", "1", config=ServerConfig(extra_tags=["waiting", "high"])
        )
        self.assertEqual(server.tag_vocabulary, BUILTIN_TAGS + ["waiting"])


class TestUriToPath(unittest.TestCase):

    def test_file_uri(self):
        self.assertEqual(_uri_to_path("file:///home/me/My%20Notes"), "/home/me/My Notes")

    def test_non_file_uri(self):
        self.assertIsNone(_uri_to_path("untitled:Untitled-1"))


class TestCreateServer(unittest.TestCase):
    """Tests for create_server function."""

    def setUp(self):
        self.server = create_server(clock=fixed_clock)

    def _open(self, text):
        self.server.handlers["textDocument/didOpen"](open_params(text))

    def test_create_server_returns_language_server(self):
        self.assertIsInstance(self.server, PlainTasksLanguageServer)
        self.assertEqual(self.server.name, "plaintasks-lsp")
        self.assertEqual(self.server.version, plaintasks.__version__)

    def test_handlers_registered(self):
        for name in [
            "initialize",
            "initialized",
            "shutdown",
            "exit",
            "textDocument/didOpen",
            "textDocument/didChange",
            "textDocument/didClose",
            "textDocument/completion",
            "textDocument/codeAction",
        ]:
            with self.subTest(handler=name):
                self.assertIn(name, self.server.handlers)

    def test_initialize_returns_capabilities(self):
        params = InitializeParams(process_id=12345, root_uri=None, capabilities={})
        result = self.server.handlers["initialize"](params)

        capabilities = result.capabilities
        self.assertEqual(capabilities.text_document_sync, TextDocumentSyncKind.Full)
        self.assertIsInstance(capabilities.completion_provider, CompletionOptions)
        self.assertEqual(capabilities.completion_provider.trigger_characters, ["@"])
        self.assertIsInstance(capabilities.code_action_provider, CodeActionOptions)
        self.assertEqual(
            capabilities.code_action_provider.code_action_kinds,
            [CodeActionKind.QuickFix, CodeActionKind.Refactor],
        )

    def test_initialize_loads_project_config(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / ".plaintasks-config.yml").write_text("completion:\n  tags: [waiting]\n")
            missing = root / "missing.yml"
            with patch("plaintasks.config.get_user_config_path", return_value=missing), patch(
                "plaintasks.config.get_machine_config_path", return_value=missing
            ):
                params = InitializeParams(
                    process_id=1, root_uri=root.as_uri(), capabilities={}
                )
                self.server.handlers["initialize"](params)

        self.assertEqual(self.server.config.extra_tags, ["waiting"])

    def test_initialize_keeps_config_when_project_config_invalid(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / ".plaintasks-config.yml").write_text("completion: [not, a, dict]\n")
            missing = root / "missing.yml"
            with patch("plaintasks.config.get_user_config_path", return_value=missing), patch(
                "plaintasks.config.get_machine_config_path", return_value=missing
            ):
                params = InitializeParams(
                    process_id=1, root_uri=root.as_uri(), capabilities={}
                )
                with self.assertLogs("plaintasks.lsp.server", level="WARNING"):
                    result = self.server.handlers["initialize"](params)

        self.assertIsNotNone(result.capabilities)
        self.assertEqual(self.server.config.extra_tags, [])

    def test_initialized_logs_to_client(self):
        self.server.window_log_message = MagicMock()
        self.server.handlers["initialized"](InitializedParams())

        self.server.window_log_message.assert_called_once()
        message = self.server.window_log_message.call_args.args[0]
        self.assertEqual(message.type, MessageType.Info)
        self.assertEqual(message.message, "PlainTasks LSP initialized")

    def test_shutdown_clears_documents(self):
        self._open("☐ a")
        result = self.server.handlers["shutdown"]()
        self.assertIsNone(result)
        self.assertEqual(len(self.server.documents), 0)

    def test_exit_handler_callable(self):
        self.assertIsNone(self.server.handlers["exit"]())

    def test_did_open_stores_document(self):
        self._open("Work:\n  ☐ Report")
        self.assertEqual(self.server.documents.get(TEST_URI), "Work:\n  ☐ Report")

    def test_did_change_updates_document(self):
        self._open("☐ a")
        self.server.handlers["textDocument/didChange"](change_params("✔ a", "ignored"))
        self.assertEqual(self.server.documents.get(TEST_URI), "✔ a")

    def test_did_close_removes_document(self):
        self._open("☐ a")
        self.server.handlers["textDocument/didClose"](close_params())
        self.assertNotIn(TEST_URI, self.server.documents)

    def test_completion_unknown_document(self):
        result = self.server.handlers["textDocument/completion"](completion_params())
        self.assertIsInstance(result, CompletionList)
        self.assertFalse(result.is_incomplete)
        self.assertEqual(result.items, [])

    def test_completion_returns_tags(self):
        self._open("☐ Plan @high @est(2h)\n☐ Wait @waiting")
        result = self.server.handlers["textDocument/completion"](completion_params(1, 5))
        labels = [item.label for item in result.items]
        self.assertIn("@waiting", labels)
        self.assertEqual(len(labels), len(set(labels)))
        self.assertTrue({f"@{tag}" for tag in BUILTIN_TAGS} <= set(labels))

    def test_completion_includes_configured_tags(self):
        server = create_server(config=ServerConfig(extra_tags=["someday"]))
        server.handlers["textDocument/didOpen"](open_params("☐ a"))
        result = server.handlers["textDocument/completion"](completion_params())
        self.assertIn("someday", [item.insert_text for item in result.items])

    def test_code_action_unknown_document(self):
        self.assertEqual(self.server.handlers["textDocument/codeAction"](code_action_params(0)), [])

    def test_code_action_uses_injected_clock(self):
        self._open("☐ Buy milk")
        actions = self.server.handlers["textDocument/codeAction"](code_action_params(0))
        new_text = actions[0].edit.changes[TEST_URI][0].new_text
        self.assertEqual(new_text, "✔ Buy milk @done(24-01-15 10:30)")

    def test_code_action_out_of_range(self):
        self._open("☐ Buy milk\n")
        self.assertEqual(self.server.handlers["textDocument/codeAction"](code_action_params(1)), [])


class TestMain(unittest.TestCase):

    @patch("plaintasks.lsp.server.create_server")
    def test_main_starts_io(self, mock_create_server):
        server = MagicMock()
        mock_create_server.return_value = server
        main()
        server.start_io.assert_called_once_with()
