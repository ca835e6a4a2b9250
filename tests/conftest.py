"""Pytest configuration and shared fixtures for Lootbox tests."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def write_mcp_config(tmp_path: Path) -> Callable[[Any], Path]:
    """Write a parsed MCP config document to a temporary .mcp.json file."""

    def _write(document: Any) -> Path:
        path = tmp_path / ".mcp.json"
        path.write_text(json.dumps(document))
        return path

    return _write


@pytest.fixture
def mock_session() -> AsyncMock:
    """Create a mock ClientSession with initialize()."""
    session = AsyncMock()
    session.initialize = AsyncMock()
    return session


@pytest.fixture
def mock_client_session_cls(mock_session: AsyncMock) -> MagicMock:
    """ClientSession(read, write) replacement whose context yields mock_session."""
    session_ctx = AsyncMock()
    session_ctx.__aenter__ = AsyncMock(return_value=mock_session)
    session_ctx.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=session_ctx)

