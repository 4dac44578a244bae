"""
Base Repository.

Base class for all repositories with common CRUD operations.
Rows are always scoped by the owning user id; a row that belongs
to someone else is reported exactly like a missing row.
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.logging import get_logger
from modules.backend.models.base import Base

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """
    Base repository with common CRUD operations for user-owned models.

    Subclasses should set the model class:

        class FolderRepository(BaseRepository[Folder]):
            model = Folder
    """

    model: type[ModelType]

    def __init__(self, session: AsyncSession, user_id: str) -> None:
        self.session = session
        self.user_id = user_id

    def _owned(self):
        """Select statement restricted to the current user's rows."""
        return select(self.model).where(self.model.user_id == self.user_id)

    async def get_by_id(self, id: str) -> ModelType:
        """
        Get a single record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def get_by_id_or_none(self, id: str) -> ModelType | None:
        """Get a single record by ID, returning None if not found."""
        result = await self.session.execute(
            self._owned().where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def get_all(self, *order_by: Any) -> list[ModelType]:
        """Get all of the user's records in the given order."""
        result = await self.session.execute(self._owned().order_by(*order_by))
        return list(result.scalars().all())

    async def create(self, **kwargs: Any) -> ModelType:
        """Create a new record owned by the current user."""
        instance = self.model(user_id=self.user_id, **kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str, **kwargs: Any) -> ModelType:
        """
        Update an existing record.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str) -> None:
        """
        Delete a record by ID.

        Raises:
            NotFoundError: If record not found
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def exists(self, id: str) -> bool:
        """Check if a record exists by ID."""
        result = await self.session.execute(
            select(self.model.id)
            .where(self.model.id == str(id))
            .where(self.model.user_id == self.user_id)
        )
        return result.scalar_one_or_none() is not None
