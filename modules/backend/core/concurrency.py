"""
Concurrency Infrastructure.

Thread pool and semaphore management for the application.
The pool is created lazily on first access and cleaned up during shutdown.

Pool:
    _io_pool - TracedThreadPoolExecutor for blocking work: model loading,
               text generation, attachment file I/O

Semaphores:
    Created per-dependency to limit concurrent access (database, storage, llm).
    Sizing is configured in config/settings/concurrency.yaml.

Usage:
    from modules.backend.core.concurrency import run_blocking, get_semaphore

    # Run blocking code in the thread pool (preserves structlog context)
    data = await run_blocking(path.read_bytes)

    # Serialize access to the local model
    async with get_semaphore("llm"):
        output = await run_blocking(pipeline, prompt)
"""

import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable

from modules.backend.core.logging import get_logger

logger = get_logger(__name__)

_io_pool: ThreadPoolExecutor | None = None
_semaphores: dict[str, asyncio.Semaphore] = {}
_semaphore_capacities: dict[str, int] = {}


class TracedThreadPoolExecutor(ThreadPoolExecutor):
    """ThreadPoolExecutor that propagates contextvars to worker threads.

    Standard ThreadPoolExecutor does not carry structlog context or the
    request_id into worker threads. This subclass copies the current
    context before dispatching.
    """

    def submit(self, fn, /, *args, **kwargs):
        ctx = contextvars.copy_context()
        return super().submit(ctx.run, fn, *args, **kwargs)


def get_io_pool() -> TracedThreadPoolExecutor:
    """Get the shared thread pool for blocking operations.

    Creates the pool lazily on first call using config from concurrency.yaml.
    """
    global _io_pool
    if _io_pool is None:
        from modules.backend.core.config import get_app_config
        max_workers = get_app_config().concurrency.thread_pool.max_workers
        _io_pool = TracedThreadPoolExecutor(max_workers=max_workers)
        logger.info("Thread pool created", extra={"max_workers": max_workers})
    return _io_pool


async def run_blocking(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Run a blocking callable in the shared thread pool and await its result."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_io_pool(), partial(fn, *args, **kwargs))


def get_semaphore(name: str) -> asyncio.Semaphore:
    """Get a named semaphore for concurrency-limiting blocking or external calls.

    Semaphores are created lazily. The capacity is read from concurrency.yaml
    under `semaphores.<name>`. If the name is not configured, defaults to 20.
    """
    if name not in _semaphores:
        from modules.backend.core.config import get_app_config
        semaphore_config = get_app_config().concurrency.semaphores
        capacity = getattr(semaphore_config, name, 20)
        _semaphores[name] = asyncio.Semaphore(capacity)
        _semaphore_capacities[name] = capacity
        logger.debug("Semaphore created", extra={"name": name, "capacity": capacity})
    return _semaphores[name]


async def shutdown_pools() -> None:
    """Shut down the pool gracefully. Called during application shutdown.

    Pool shutdown is blocking, so it runs in a thread to avoid stalling
    the event loop.
    """
    global _io_pool

    if _io_pool is not None:
        await asyncio.to_thread(_io_pool.shutdown, wait=True)
        logger.info("Thread pool shut down")
        _io_pool = None

    _semaphores.clear()
    _semaphore_capacities.clear()
    logger.debug("Semaphores cleared")
