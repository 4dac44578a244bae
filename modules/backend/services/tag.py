"""
Tag Service.

Tags are unique per user by name. Links between notes and tags are
validated against both owners before they are written.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ConflictError, NotFoundError
from modules.backend.models.tag import NoteTag, Tag
from modules.backend.repositories.note import NoteRepository
from modules.backend.repositories.tag import TagRepository
from modules.backend.schemas.tag import TagCreate
from modules.backend.services.base import BaseService


class TagService(BaseService):
    """Service for tags and note-tag links."""

    def __init__(self, session: AsyncSession, user_id: str) -> None:
        super().__init__(session, user_id)
        self.repo = TagRepository(session, user_id)
        self.note_repo = NoteRepository(session, user_id)

    async def list_tags(self) -> list[Tag]:
        return await self.repo.get_all_by_name()

    async def list_links(self) -> list[NoteTag]:
        return await self.repo.get_links()

    async def create_tag(self, data: TagCreate) -> Tag:
        """
        Create a tag.

        Raises:
            ConflictError: If the user already has a tag with this name
        """
        if await self.repo.get_by_name(data.name) is not None:
            raise ConflictError(f"Tag '{data.name}' already exists")

        self._log_operation("Creating tag", name=data.name)
        return await self._execute_db_operation(
            "create_tag",
            self.repo.create(name=data.name, color=data.color),
        )

    async def delete_tag(self, tag_id: str) -> None:
        """
        Delete a tag and its links.

        Raises:
            NotFoundError: If tag not found
        """
        tag = await self.repo.get_by_id(tag_id)
        self._log_operation("Deleting tag", tag_id=tag_id)
        await self._execute_db_operation("delete_tag", self.repo.delete_with_links(tag))

    async def add_tag_to_note(self, note_id: str, tag_id: str) -> NoteTag:
        """
        Link a tag to a note.

        Raises:
            NotFoundError: If the note or the tag is not found
            ConflictError: If the link already exists
        """
        await self.note_repo.get_by_id(note_id)
        await self.repo.get_by_id(tag_id)

        if await self.repo.get_link(note_id, tag_id) is not None:
            raise ConflictError("Tag already linked to note")

        self._log_debug("Linking tag", note_id=note_id, tag_id=tag_id)
        return await self._execute_db_operation(
            "add_tag_to_note",
            self.repo.add_link(note_id, tag_id),
        )

    async def remove_tag_from_note(self, note_id: str, tag_id: str) -> None:
        """
        Raises:
            NotFoundError: If the tag or the link is not found
        """
        await self.repo.get_by_id(tag_id)
        link = await self.repo.get_link(note_id, tag_id)
        if link is None:
            raise NotFoundError("Tag is not linked to note")

        self._log_debug("Unlinking tag", note_id=note_id, tag_id=tag_id)
        await self._execute_db_operation("remove_tag_from_note", self.repo.remove_link(link))
