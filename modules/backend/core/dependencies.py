"""
FastAPI Dependencies.

Shared dependencies for request handling.
"""

from typing import Annotated

import structlog
from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.database import get_db_session
from modules.backend.core.exceptions import AuthenticationError
from modules.backend.core.logging import get_logger
from modules.backend.core.security import decode_token

logger = get_logger(__name__)

# Type alias for database session dependency
DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer = HTTPBearer(auto_error=False)


async def get_request_id(request: Request, x_request_id: str | None = Header(None)) -> str:
    """
    Request ID bound by RequestContextMiddleware, falling back to the
    header or a fresh UUID when the middleware is not installed.

    Used for request tracing and correlation.
    """
    import uuid

    return getattr(request.state, "request_id", None) or x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """
    Resolve the authenticated user id from the bearer token.

    Tokens are issued by the identity provider; the `sub` claim
    carries the user id that scopes every row.

    Raises:
        AuthenticationError: If the token is missing, invalid, or has no subject
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Authentication required")

    payload = decode_token(credentials.credentials)
    user_id = payload.get("sub")
    if not user_id:
        raise AuthenticationError("Token has no subject")

    structlog.contextvars.bind_contextvars(user_id=user_id)
    return str(user_id)


CurrentUserId = Annotated[str, Depends(get_current_user_id)]


def get_object_storage():
    """Object storage for attachments (configured in storage.yaml)."""
    from modules.backend.services.storage import get_storage

    return get_storage()


def get_text_generation_service():
    """Process-wide AI assistant."""
    from modules.backend.services.ai import get_ai_service

    return get_ai_service()
