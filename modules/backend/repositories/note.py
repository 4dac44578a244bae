"""
Note Repository.

Data access layer for notes.
"""

from sqlalchemy import delete, select

from modules.backend.models.attachment import Attachment
from modules.backend.models.note import Note
from modules.backend.models.tag import NoteTag
from modules.backend.repositories.base import BaseRepository


class NoteRepository(BaseRepository[Note]):
    """
    Repository for Note model.

    Inherits standard CRUD operations from BaseRepository
    and adds note-specific queries.
    """

    model = Note

    async def get_all_by_recency(self) -> list[Note]:
        """Get every note of the user, most recently updated first."""
        return await self.get_all(Note.updated_at.desc())

    async def get_attachments(self, note_id: str) -> list[Attachment]:
        """Attachments that belong to a note, for cleanup before erase."""
        result = await self.session.execute(
            select(Attachment).where(Attachment.note_id == note_id)
        )
        return list(result.scalars().all())

    async def erase(self, note: Note) -> None:
        """
        Permanently delete a note together with its tag links
        and attachment rows.
        """
        await self.session.execute(delete(NoteTag).where(NoteTag.note_id == note.id))
        await self.session.execute(delete(Attachment).where(Attachment.note_id == note.id))
        await self.session.delete(note)
        await self.session.flush()
