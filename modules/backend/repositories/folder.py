"""
Folder Repository.
"""

from modules.backend.models.folder import Folder
from modules.backend.repositories.base import BaseRepository


class FolderRepository(BaseRepository[Folder]):
    """Repository for Folder model."""

    model = Folder

    async def get_all_oldest_first(self) -> list[Folder]:
        return await self.get_all(Folder.created_at.asc())
