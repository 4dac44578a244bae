"""
Exception Handlers.

Turn application errors, request validation failures and unexpected
exceptions into the ErrorResponse envelope. The client package reads
`error.code` (for example RES_CONFLICT on a duplicate tag) and
`error.details.validation_errors[].field` from these responses.

Usage:
    from modules.backend.core.exception_handlers import register_exception_handlers

    app = FastAPI()
    register_exception_handlers(app)
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from modules.backend.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    ConflictError,
    DatabaseError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from modules.backend.core.logging import get_logger
from modules.backend.schemas.base import ErrorDetail, ErrorResponse, ResponseMetadata

logger = get_logger(__name__)

EXCEPTION_STATUS_MAP: dict[type[ApplicationError], int] = {
    NotFoundError: 404,
    ValidationError: 400,
    AuthenticationError: 401,
    ConflictError: 409,
    ExternalServiceError: 502,
    DatabaseError: 503,
}

# Leading entries of a pydantic error location that name the request part.
_REQUEST_PARTS = frozenset({"body", "query", "path", "header", "cookie"})


def _get_request_id(request: Request) -> str | None:
    """Request id set by RequestContextMiddleware, else the raw header."""
    if hasattr(request.state, "request_id"):
        return request.state.request_id
    return request.headers.get("x-request-id")


def _detailed_errors_enabled() -> bool:
    """Read the api_detailed_errors flag from features.yaml."""
    from modules.backend.core.config import get_app_config

    return get_app_config().features.api_detailed_errors


def _field_name(loc: tuple | list) -> str:
    """("body", "title") -> "title"; a bare ("body",) stays "body"."""
    parts = [str(p) for p in loc]
    if len(parts) > 1 and parts[0] in _REQUEST_PARTS:
        parts = parts[1:]
    return ".".join(parts)


def _log_context(request: Request, request_id: str | None) -> dict[str, Any]:
    context: dict[str, Any] = {"path": request.url.path, "method": request.method}
    if request_id:
        context["request_id"] = request_id
    return context


def _error_response(
    status_code: int,
    detail: ErrorDetail,
    request_id: str | None,
) -> JSONResponse:
    response = ErrorResponse(error=detail, metadata=ResponseMetadata(request_id=request_id))
    return JSONResponse(status_code=status_code, content=response.model_dump(mode="json"))


async def application_error_handler(
    request: Request,
    exc: ApplicationError,
) -> JSONResponse:
    """
    Handle ApplicationError subclasses raised by services and dependencies.

    Unmapped subclasses are treated as server errors. Errors that carry
    details (upload size and type checks) pass them through.
    """
    status_code = EXCEPTION_STATUS_MAP.get(type(exc), 500)
    request_id = _get_request_id(request)

    log_extra = {
        **_log_context(request, request_id),
        "code": exc.code,
        "message": exc.message,
        "status": status_code,
    }
    if status_code >= 500:
        logger.error("Server error", extra=log_extra)
    else:
        logger.warning("Client error", extra=log_extra)

    detail = ErrorDetail(code=exc.code, message=exc.message)
    details = getattr(exc, "details", None)
    if details:
        detail.details = details

    return _error_response(status_code, detail, request_id)


async def validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Report malformed requests as 422 with one entry per invalid field."""
    request_id = _get_request_id(request)
    errors = exc.errors()

    logger.warning(
        "Request validation failed",
        extra={**_log_context(request, request_id), "error_count": len(errors)},
    )

    detail = ErrorDetail(
        code="VAL_REQUEST_INVALID",
        message="Request validation failed",
        details={
            "validation_errors": [
                {
                    "field": _field_name(err.get("loc", ())),
                    "message": err.get("msg", "Validation error"),
                    "type": err.get("type", "unknown"),
                }
                for err in errors
            ]
        },
    )
    return _error_response(422, detail, request_id)


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Log the full traceback and return a generic 500.

    The message is never exposed; the exception type is included only
    when api_detailed_errors is on.
    """
    request_id = _get_request_id(request)

    logger.exception(
        "Unhandled exception",
        extra={**_log_context(request, request_id), "exception_type": type(exc).__name__},
    )

    detail = ErrorDetail(code="SYS_INTERNAL_ERROR", message="An unexpected error occurred")
    if _detailed_errors_enabled():
        detail.details = {"exception_type": type(exc).__name__}

    return _error_response(500, detail, request_id)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the application, validation and catch-all handlers."""
    app.add_exception_handler(ApplicationError, application_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    logger.debug("Exception handlers registered")
