"""
Integration Test Fixtures.

Fixtures for integration tests - uses real database and services.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator, Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.dependencies import get_object_storage, get_text_generation_service
from modules.backend.services.ai import TextGenerationService
from modules.backend.services.storage import LocalObjectStorage


PUBLIC_BASE_URL = "http://test/files"


# =============================================================================
# Settings and Service Fixtures
# =============================================================================


def _create_mock_settings(test_settings: dict[str, Any]) -> Any:
    """Create a mock secrets object, since no config/.env exists in tests."""
    settings = MagicMock()
    settings.db_password = test_settings["db_password"]
    settings.jwt_secret = test_settings["jwt_secret"]
    return settings


@pytest.fixture
def patched_settings(test_settings: dict[str, Any]) -> Generator[Any, None, None]:
    """Patch get_settings wherever it is resolved at call time."""
    mock_settings = _create_mock_settings(test_settings)
    with patch("modules.backend.core.config.get_settings", return_value=mock_settings), \
         patch("modules.backend.core.security.get_settings", return_value=mock_settings):
        yield mock_settings


@pytest.fixture
def storage(tmp_path: Path) -> LocalObjectStorage:
    """Attachment storage rooted in a temporary directory."""
    return LocalObjectStorage(tmp_path / "storage", PUBLIC_BASE_URL)


def _unavailable_model(model_name: str) -> Any:
    raise OSError(f"{model_name} is not available offline")


@pytest.fixture
def ai_service() -> TextGenerationService:
    """Assistant whose model can never load, so chat always falls back."""
    return TextGenerationService(
        model_name="test/tiny-model",
        system_prompt="You are a helpful assistant.",
        generation={
            "max_new_tokens": 16,
            "temperature": 0.7,
            "top_p": 0.9,
            "repetition_penalty": 1.1,
        },
        loader=_unavailable_model,
    )


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def app(
    db_session: AsyncSession,
    patched_settings: Any,
    storage: LocalObjectStorage,
    ai_service: TextGenerationService,
) -> Generator[FastAPI, None, None]:
    """
    Application wired to the test database session, a temporary
    attachment store and an offline assistant.
    """
    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    with patch("modules.backend.main.get_storage", return_value=storage):
        from modules.backend.main import create_app

        application = create_app()

    application.dependency_overrides[get_db_session] = override_get_db_session
    application.dependency_overrides[get_object_storage] = lambda: storage
    application.dependency_overrides[get_text_generation_service] = lambda: ai_service

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client for the application.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is True, f"Response not successful: {data}"
        return data

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()


# =============================================================================
# Authentication Fixtures
# =============================================================================


def _bearer(user_id: str) -> dict[str, str]:
    from modules.backend.core.security import create_access_token

    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def auth_headers(patched_settings: Any, user_id: str) -> dict[str, str]:
    """
    Authentication headers for the primary test user.

    Usage:
        async def test_protected_endpoint(client: AsyncClient, auth_headers: dict):
            response = await client.get("/api/v1/notes", headers=auth_headers)
            assert response.status_code == 200
    """
    return _bearer(user_id)


@pytest.fixture
def other_auth_headers(patched_settings: Any, other_user_id: str) -> dict[str, str]:
    """Authentication headers for a second, unrelated user."""
    return _bearer(other_user_id)
