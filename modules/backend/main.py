"""
FastAPI Application Entry Point.

Serves the notes API under /api/v1, health checks, and stored
attachments under /files.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from modules.backend.api import health
from modules.backend.api.v1 import router as api_v1_router
from modules.backend.core.concurrency import shutdown_pools
from modules.backend.core.config import get_app_config
from modules.backend.core.database import dispose_engine
from modules.backend.core.exception_handlers import register_exception_handlers
from modules.backend.core.logging import get_logger, setup_logging
from modules.backend.core.middleware import RequestContextMiddleware
from modules.backend.services.ai import get_ai_service
from modules.backend.services.storage import LocalObjectStorage, get_storage

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level, format_type=app_config.logging.format)

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )

    preload_task = None
    if app_config.features.ai_model_enabled and app_config.features.ai_preload_on_startup:
        preload_task = asyncio.ensure_future(get_ai_service().ensure_loaded())

    yield

    logger.info("Application shutting down")
    if preload_task is not None and not preload_task.done():
        preload_task.cancel()
    await shutdown_pools()
    await dispose_engine()


def _mount_attachment_files(app: FastAPI) -> None:
    """Serve stored attachments read-only at /files."""
    storage = get_storage()
    if isinstance(storage, LocalObjectStorage):
        storage.root.mkdir(parents=True, exist_ok=True)
        app.mount("/files", StaticFiles(directory=storage.root), name="files")
        logger.debug("Attachment files mounted", extra={"root": str(storage.root)})


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app_config = get_app_config()
    app_settings = app_config.application

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.docs_enabled else None,
        redoc_url="/redoc" if app_settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_v1_router, prefix=app_settings.api_prefix)

    if app_config.features.attachments_enabled:
        _mount_attachment_files(app)

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn modules.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
