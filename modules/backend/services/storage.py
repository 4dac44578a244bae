"""
Object Storage.

Stores attachment bytes under a configured root directory and derives
their public URLs. File I/O is blocking, so it runs in the shared
thread pool behind the `storage` semaphore.

Usage:
    from modules.backend.services.storage import get_storage

    storage = get_storage()
    path = await storage.upload("user/note/123-abc.png", data)
    url = storage.public_url(path)
"""

from abc import ABC, abstractmethod
from functools import lru_cache
from pathlib import Path, PurePosixPath

from modules.backend.core.concurrency import get_semaphore, run_blocking
from modules.backend.core.exceptions import ExternalServiceError, ValidationError
from modules.backend.core.logging import get_logger

logger = get_logger(__name__)


class ObjectStorage(ABC):
    """Bucket-style object storage keyed by relative POSIX paths."""

    @abstractmethod
    async def upload(self, path: str, data: bytes) -> str:
        """Store data at path and return the path."""

    @abstractmethod
    def public_url(self, path: str) -> str:
        """Public URL for a stored object."""

    @abstractmethod
    async def remove(self, paths: list[str]) -> None:
        """Remove objects. Missing objects are ignored."""

    async def remove_quietly(self, paths: list[str]) -> None:
        """Remove objects, logging instead of raising on failure."""
        try:
            await self.remove(paths)
        except ExternalServiceError as e:
            logger.error(
                "Error deleting from storage",
                extra={"paths": paths, "error": e.message},
            )


class LocalObjectStorage(ObjectStorage):
    """Object storage on the local filesystem."""

    def __init__(self, root: Path, public_base_url: str) -> None:
        self.root = root.resolve()
        self.public_base_url = public_base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        relative = PurePosixPath(path)
        if relative.is_absolute() or ".." in relative.parts or not relative.parts:
            raise ValidationError("Invalid storage path", details={"path": path})
        return self.root.joinpath(*relative.parts)

    @staticmethod
    def _write(target: Path, data: bytes) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    async def upload(self, path: str, data: bytes) -> str:
        target = self._resolve(path)
        try:
            async with get_semaphore("storage"):
                await run_blocking(self._write, target, data)
        except OSError as e:
            logger.error("Storage upload failed", extra={"path": path, "error": str(e)})
            raise ExternalServiceError("Failed to store attachment")
        logger.debug("Object stored", extra={"path": path, "size": len(data)})
        return path

    def public_url(self, path: str) -> str:
        return f"{self.public_base_url}/{path}"

    async def remove(self, paths: list[str]) -> None:
        targets = [self._resolve(p) for p in paths]
        try:
            async with get_semaphore("storage"):
                for target in targets:
                    await run_blocking(target.unlink, missing_ok=True)
        except OSError as e:
            logger.error("Storage remove failed", extra={"paths": paths, "error": str(e)})
            raise ExternalServiceError("Failed to remove attachment")
        logger.debug("Objects removed", extra={"count": len(paths)})


@lru_cache
def get_storage() -> ObjectStorage:
    """Storage configured from storage.yaml, rooted under the project root."""
    from modules.backend.core.config import find_project_root, get_app_config

    storage_config = get_app_config().storage
    root = Path(storage_config.root_path)
    if not root.is_absolute():
        root = find_project_root() / root
    return LocalObjectStorage(root, storage_config.public_base_url)
