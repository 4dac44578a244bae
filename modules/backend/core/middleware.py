"""
Request Context Middleware.

Binds a request id and the calling frontend to structlog for the
lifetime of each request, and reports the response time.

Headers:
    X-Request-ID     - propagated when supplied, generated otherwise
    X-Frontend-ID    - caller identity (web, cli, client, api, internal)
    X-Response-Time  - duration in milliseconds, set on the response
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

# Should stay a subset of VALID_SOURCES in logging.py
KNOWN_FRONTENDS = frozenset({"web", "cli", "client", "api", "internal"})


def _request_logging_enabled() -> bool:
    from modules.backend.core.config import get_app_config

    return get_app_config().features.api_request_logging


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Adds request context to every request.

    Handlers can read request.state.request_id and request.state.frontend.
    Completed requests are logged at info level when
    `features.api_request_logging` is on, otherwise at debug.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = request.headers.get("X-Frontend-ID", "unknown").lower()
        if frontend not in KNOWN_FRONTENDS:
            frontend = "unknown"

        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={
                    "duration_ms": int((time.perf_counter() - started) * 1000),
                    "error_type": type(exc).__name__,
                },
            )
            raise
        else:
            duration_ms = int((time.perf_counter() - started) * 1000)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"

            log = logger.info if _request_logging_enabled() else logger.debug
            log(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            structlog.contextvars.clear_contextvars()
