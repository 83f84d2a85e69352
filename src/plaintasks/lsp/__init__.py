"""PlainTasks Language Server Protocol (LSP) implementation.

This package provides the LSP server for PlainTasks todo files, offering
tag completion and code actions that move tasks between pending, done and
cancelled states.
"""

__all__ = ["server"]
