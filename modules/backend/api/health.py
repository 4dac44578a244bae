"""
Health Check Endpoints.

Provides liveness, readiness, and detailed health checks.

Endpoints:
- /health: Liveness check (process running)
- /health/ready: Readiness check (database and attachment storage available)
- /health/detailed: Component-by-component status, including the AI model
"""

import asyncio
from typing import Any

from fastapi import APIRouter, HTTPException
from sqlalchemy import text

from modules.backend.core.logging import get_logger
from modules.backend.core.utils import utc_now

router = APIRouter()
logger = get_logger(__name__)


async def check_database() -> dict[str, Any]:
    """
    Check database connectivity.

    Returns:
        Dict with status, latency, and optional error message
    """
    from modules.backend.core.database import get_session_factory

    try:
        start = utc_now()
        async with get_session_factory()() as session:
            await session.execute(text("SELECT 1"))
        latency_ms = int((utc_now() - start).total_seconds() * 1000)
        return {"status": "healthy", "latency_ms": latency_ms}
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}


async def check_storage() -> dict[str, Any]:
    """Check that the attachment storage root exists or can be created."""
    from modules.backend.core.concurrency import run_blocking
    from modules.backend.services.storage import LocalObjectStorage, get_storage

    storage = get_storage()
    if not isinstance(storage, LocalObjectStorage):
        return {"status": "not_configured"}

    try:
        await run_blocking(storage.root.mkdir, parents=True, exist_ok=True)
        return {"status": "healthy", "root": str(storage.root)}
    except OSError as e:
        logger.warning("Storage health check failed", extra={"error": str(e)})
        return {"status": "unhealthy", "error": str(e)}


def check_ai_model() -> dict[str, Any]:
    """Report the model lifecycle state. An unavailable model is degraded, not unhealthy."""
    from modules.backend.schemas.ai import ModelState
    from modules.backend.services.ai import get_ai_service

    service = get_ai_service()
    status = "degraded" if service.state is ModelState.UNAVAILABLE else "healthy"
    return {"status": status, "state": service.state.value, "model": service.model_name}


async def _run_checks(timeout: float | None = None) -> dict[str, dict[str, Any]]:
    db_result: dict[str, Any] = {"status": "error", "error": "check did not run"}
    storage_result: dict[str, Any] = {"status": "error", "error": "check did not run"}

    try:
        async with asyncio.timeout(timeout):
            async with asyncio.TaskGroup() as tg:
                db_task = tg.create_task(check_database())
                storage_task = tg.create_task(check_storage())
            db_result = db_task.result()
            storage_result = storage_task.result()
    except* Exception as eg:
        for exc in eg.exceptions:
            logger.warning("Health check task failed", extra={"error": str(exc)})

    return {"database": db_result, "storage": storage_result}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """
    Liveness check.

    Returns 200 if the process is running.
    No dependency checks - this endpoint should always respond quickly.
    """
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check() -> dict[str, Any]:
    """
    Readiness check.

    Checks critical dependencies in parallel within the configured timeout.
    Returns 503 if any critical dependency is unhealthy.
    """
    from modules.backend.core.config import get_app_config

    timeout = get_app_config().observability.health_checks.ready_timeout_seconds
    checks = await _run_checks(timeout)

    unhealthy_checks = [
        name for name, check in checks.items()
        if check.get("status") in ("unhealthy", "error")
    ]

    if unhealthy_checks:
        logger.warning(
            "Readiness check failed",
            extra={"unhealthy": unhealthy_checks, "checks": checks},
        )
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }


@router.get("/health/detailed")
async def detailed_health_check() -> dict[str, Any]:
    """
    Detailed health check.

    Returns dependency checks, the AI model state, application info
    and thread pool metrics.
    """
    from modules.backend.core.config import get_app_config

    checks = await _run_checks()
    checks["ai_model"] = check_ai_model()

    app_settings = get_app_config().application
    app_info = {
        "name": app_settings.name,
        "env": app_settings.environment,
        "debug": app_settings.debug,
        "version": app_settings.version,
    }

    statuses = [check.get("status") for check in checks.values()]
    overall_status = "unhealthy" if "unhealthy" in statuses or "error" in statuses else "healthy"

    return {
        "status": overall_status,
        "application": app_info,
        "checks": checks,
        "pools": _get_pool_status(),
        "timestamp": utc_now().isoformat(),
    }


def _get_pool_status() -> dict[str, Any]:
    """Collect current pool and semaphore metrics for health reporting."""
    from modules.backend.core import concurrency

    pools: dict[str, Any] = {}

    if concurrency._io_pool is not None:
        pools["thread_pool"] = {"max_workers": concurrency._io_pool._max_workers}

    if concurrency._semaphores:
        pools["semaphores"] = {
            name: {
                "capacity": concurrency._semaphore_capacities.get(name, "unknown"),
                "available": sem._value,
            }
            for name, sem in concurrency._semaphores.items()
        }

    return pools
