"""
Unit Test Fixtures.

Fixtures for unit tests - all external dependencies are mocked.
Unit tests should be fast and isolated, never touching the network.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from modules.client.remote import RemoteError, RemoteResult


# =============================================================================
# Settings Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_settings() -> MagicMock:
    """
    Mock secrets object.

    Usage:
        def test_with_settings(mock_settings):
            with patch("module.get_settings", return_value=mock_settings):
                # Test code that uses secrets
    """
    settings = MagicMock()
    settings.db_password = "test_pass"
    settings.jwt_secret = "test-secret-key"
    return settings


# =============================================================================
# Remote API Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_remote() -> MagicMock:
    """
    Mock RemoteClient for client state tests.

    Every verb is an AsyncMock; set return_value to a RemoteResult.

    Usage:
        async def test_refresh(mock_remote):
            mock_remote.get.return_value = ok([note_payload()])
            store = NotesStore(mock_remote)
            await store.refresh_notes()
    """
    remote = MagicMock()
    remote.signed_in = True
    remote.get = AsyncMock(return_value=RemoteResult(data=[]))
    remote.post = AsyncMock()
    remote.put = AsyncMock(return_value=RemoteResult())
    remote.patch = AsyncMock()
    remote.delete = AsyncMock(return_value=RemoteResult())
    return remote


def ok(data: Any = None) -> RemoteResult:
    return RemoteResult(data=data)


def failed(code: str = "SYS_INTERNAL_ERROR", message: str = "boom", status: int | None = 500) -> RemoteResult:
    return RemoteResult(error=RemoteError(code=code, message=message, status=status))


@pytest.fixture
def ok_result() -> Callable[..., RemoteResult]:
    return ok


@pytest.fixture
def failed_result() -> Callable[..., RemoteResult]:
    return failed


def note_payload(
    note_id: str = "n1",
    title: str = "Untitled Note",
    content: str = "<p>Start writing...</p>",
    folder_id: str | None = None,
    updated_at: datetime = datetime(2024, 3, 10, 9, 30),
    created_at: datetime = datetime(2024, 3, 1, 8, 0),
    is_deleted: bool = False,
    deleted_at: datetime | None = None,
    is_pinned: bool = False,
) -> dict[str, Any]:
    """A note as the API returns it."""
    return {
        "id": note_id,
        "user_id": "user-1",
        "title": title,
        "content": content,
        "folder_id": folder_id,
        "created_at": created_at.isoformat(),
        "updated_at": updated_at.isoformat(),
        "is_deleted": is_deleted,
        "deleted_at": deleted_at.isoformat() if deleted_at else None,
        "is_pinned": is_pinned,
    }


@pytest.fixture
def make_note_payload() -> Callable[..., dict[str, Any]]:
    return note_payload
