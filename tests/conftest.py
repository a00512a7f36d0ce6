"""Shared test fixtures for the termrelay test suite.

Provides common fixtures used across unit tests: a session store,
a scripted language model, a shell executor, and a wired relay.
"""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from termrelay.llm.base import LanguageModel
from termrelay.relay.executor import ShellExecutor
from termrelay.relay.service import CommandRelay
from termrelay.sessions.store import SessionStore


# ---------------------------------------------------------------------------
# Session Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> SessionStore:
    """An unbounded in-memory session store."""
    return SessionStore()


# ---------------------------------------------------------------------------
# Model / Executor Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_model() -> AsyncMock:
    """A mock LanguageModel; set ``generate.return_value`` per test."""
    mock = AsyncMock(spec=LanguageModel)
    mock.provider_name = "gemini"
    mock.model = "mock-model"
    mock.generate.return_value = "CLI output."
    return mock


@pytest.fixture
def executor(tmp_path) -> ShellExecutor:
    """A real shell executor running in a temporary directory."""
    return ShellExecutor(working_directory=str(tmp_path))


@pytest.fixture
def relay(store: SessionStore, mock_model: AsyncMock, executor: ShellExecutor) -> CommandRelay:
    """A relay wired to the mock model and a real executor."""
    return CommandRelay(store=store, model=mock_model, executor=executor)
