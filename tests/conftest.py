"""Pytest fixtures for PlainTasks tests."""

import pytest

from helpers.lsp import fixed_clock as _fixed_clock
from plaintasks.transitions import Clock


@pytest.fixture
def fixed_clock() -> Clock:
    """Provide a clock frozen at 2024-01-15 10:30 local time."""
    return _fixed_clock
