"""
Folder Service.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.models.folder import Folder
from modules.backend.repositories.folder import FolderRepository
from modules.backend.schemas.note import FolderCreate
from modules.backend.services.base import BaseService


class FolderService(BaseService):
    """Folders are created and listed; they are never deleted."""

    def __init__(self, session: AsyncSession, user_id: str) -> None:
        super().__init__(session, user_id)
        self.repo = FolderRepository(session, user_id)

    async def list_folders(self) -> list[Folder]:
        return await self.repo.get_all_oldest_first()

    async def create_folder(self, data: FolderCreate) -> Folder:
        self._log_operation("Creating folder", name=data.name)
        return await self._execute_db_operation(
            "create_folder",
            self.repo.create(name=data.name, icon=data.icon, color=data.color),
        )
