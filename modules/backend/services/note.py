"""
Note Service.

Business logic layer for notes: creation with placeholder content,
partial updates, pinning, the recycle bin, and permanent deletion.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import NotFoundError
from modules.backend.core.utils import utc_now
from modules.backend.models.note import DEFAULT_NOTE_CONTENT, DEFAULT_NOTE_TITLE, Note
from modules.backend.repositories.folder import FolderRepository
from modules.backend.repositories.note import NoteRepository
from modules.backend.schemas.note import NoteCreate, NoteUpdate
from modules.backend.services.base import BaseService
from modules.backend.services.storage import ObjectStorage

# Columns that cannot be null; a null in a patch for these is ignored.
_NON_NULLABLE = ("title", "content", "is_pinned", "is_deleted")


class NoteService(BaseService):
    """
    Service for note business logic.

    Keeps is_deleted and deleted_at consistent: whenever is_deleted
    changes, deleted_at is stamped or cleared in the same update.
    Trashing a note that is already trashed keeps its deletion time.
    Trashing or restoring alone leaves updated_at untouched, so a
    restored note reappears under the same dates it had before.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_id: str,
        storage: ObjectStorage | None = None,
    ) -> None:
        super().__init__(session, user_id)
        self.repo = NoteRepository(session, user_id)
        self.folder_repo = FolderRepository(session, user_id)
        self.storage = storage

    async def _check_folder(self, folder_id: str | None) -> None:
        if folder_id is not None and not await self.folder_repo.exists(folder_id):
            raise NotFoundError("Folder not found")

    async def create_note(self, data: NoteCreate) -> Note:
        """
        Create a new note with placeholder title and content.

        Raises:
            NotFoundError: If the folder does not exist
        """
        await self._check_folder(data.folder_id)
        self._log_operation("Creating note", folder_id=data.folder_id)

        note = await self._execute_db_operation(
            "create_note",
            self.repo.create(
                title=DEFAULT_NOTE_TITLE,
                content=DEFAULT_NOTE_CONTENT,
                folder_id=data.folder_id,
            ),
        )

        self._log_debug("Note created", note_id=note.id)
        return note

    async def get_note(self, note_id: str) -> Note:
        """
        Raises:
            NotFoundError: If note not found
        """
        return await self.repo.get_by_id(note_id)

    async def list_notes(self) -> list[Note]:
        """All of the user's notes, deleted ones included, newest update first."""
        return await self.repo.get_all_by_recency()

    async def update_note(self, note_id: str, data: NoteUpdate) -> Note:
        """
        Apply a partial update to a note.

        Args:
            note_id: Note ID to update
            data: Update data; only fields set in the request are applied

        Raises:
            NotFoundError: If the note or the target folder is not found
        """
        update_data = data.model_dump(exclude_unset=True)
        for field in _NON_NULLABLE:
            if field in update_data and update_data[field] is None:
                del update_data[field]

        if not update_data:
            return await self.repo.get_by_id(note_id)

        if "folder_id" in update_data:
            await self._check_folder(update_data["folder_id"])

        if "is_deleted" in update_data:
            note = await self.repo.get_by_id(note_id)
            if note.is_deleted == update_data["is_deleted"]:
                # Already there; keep the original deletion time.
                del update_data["is_deleted"]
                if not update_data:
                    return note
            else:
                update_data["deleted_at"] = utc_now() if update_data["is_deleted"] else None
                if set(update_data) == {"is_deleted", "deleted_at"}:
                    # Moving in or out of the recycle bin is not an edit. Assigning
                    # the column itself keeps the stored value and skips onupdate.
                    update_data["updated_at"] = Note.__table__.c.updated_at

        self._log_operation(
            "Updating note",
            note_id=note_id,
            fields=list(update_data.keys()),
        )

        return await self._execute_db_operation(
            "update_note",
            self.repo.update(note_id, **update_data),
        )

    async def toggle_pin(self, note_id: str) -> Note:
        note = await self.repo.get_by_id(note_id)
        self._log_operation("Toggling pin", note_id=note_id, pinned=not note.is_pinned)
        return await self._execute_db_operation(
            "toggle_pin",
            self.repo.update(note_id, is_pinned=not note.is_pinned),
        )

    async def trash_note(self, note_id: str) -> Note:
        """Move a note to the recycle bin."""
        return await self.update_note(note_id, NoteUpdate(is_deleted=True))

    async def restore_note(self, note_id: str) -> Note:
        """Bring a note back from the recycle bin."""
        return await self.update_note(note_id, NoteUpdate(is_deleted=False))

    async def delete_note(self, note_id: str) -> None:
        """
        Permanently delete a note, its tag links, its attachment rows
        and the stored attachment objects.

        Rows are erased first; stored objects are removed afterwards and
        removal failures are only logged.

        Raises:
            NotFoundError: If note not found
        """
        note = await self.repo.get_by_id(note_id)
        attachments = await self.repo.get_attachments(note.id)
        self._log_operation(
            "Deleting note",
            note_id=note_id,
            attachment_count=len(attachments),
        )

        paths = [a.file_path for a in attachments]
        await self._execute_db_operation("delete_note", self.repo.erase(note))

        if paths and self.storage is not None:
            await self.storage.remove_quietly(paths)
