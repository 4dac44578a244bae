"""
Notes and Folders Store.

Caches the signed-in user's notes and folders and exposes the
mutations and read queries the UI works with.

Mutations go to the backend first. Only when the backend accepts a
change is it merged into the cache; on failure the error is logged
and the call returns None with local state untouched.
"""

import asyncio
from datetime import date
from typing import Any, Literal

from modules.backend.core.logging import get_logger, log_with_source
from modules.backend.core.utils import utc_now
from modules.client.models import Folder, Note
from modules.client.remote import RemoteClient, RemoteResult

logger = get_logger(__name__)

ALL_FOLDERS = "all"

SortKey = Literal["updated", "created", "title"]

UPDATABLE_FIELDS = frozenset({"title", "content", "folder_id", "is_pinned", "is_deleted"})


class NotesStore:
    """
    In-memory notes/folders cache for one user session.

    Attributes:
        notes: All notes, including the recycle bin
        folders: Folders, oldest first
        active_note: The note open in the editor, kept in sync with updates
        active_folder: Selected folder id, or "all"
        loading: True while refresh() is in flight
    """

    def __init__(self, remote: RemoteClient) -> None:
        self.remote = remote
        self.notes: list[Note] = []
        self.folders: list[Folder] = []
        self.active_note: Note | None = None
        self.active_folder: str = ALL_FOLDERS
        self.loading: bool = False

    def _log_error(self, message: str, result: RemoteResult, **context: Any) -> None:
        log_with_source(
            logger, "client", "error", message,
            code=result.error.code, error=result.error.message, **context,
        )

    def get_note(self, note_id: str) -> Note | None:
        return next((n for n in self.notes if n.id == note_id), None)

    def set_active_note(self, note: Note | None) -> None:
        self.active_note = note

    def set_active_folder(self, folder_id: str) -> None:
        self.active_folder = folder_id

    async def refresh(self) -> None:
        """Reload notes and folders. Signed out, the cache is cleared."""
        if not self.remote.signed_in:
            self.notes = []
            self.folders = []
            self.active_note = None
            self.loading = False
            return

        self.loading = True
        try:
            await asyncio.gather(self.refresh_notes(), self.refresh_folders())
        finally:
            self.loading = False

    async def refresh_notes(self) -> None:
        result = await self.remote.get("/notes")
        if not result.ok:
            self._log_error("Error fetching notes", result)
            return
        self.notes = [Note.model_validate(n) for n in result.data]

    async def refresh_folders(self) -> None:
        result = await self.remote.get("/folders")
        if not result.ok:
            self._log_error("Error fetching folders", result)
            return
        self.folders = [Folder.model_validate(f) for f in result.data]

    async def create_note(self, folder_id: str | None = None) -> Note | None:
        """Create a placeholder note, put it first and make it active."""
        result = await self.remote.post("/notes", json={"folder_id": folder_id or None})
        if not result.ok:
            self._log_error("Error creating note", result, folder_id=folder_id)
            return None

        note = Note.model_validate(result.data)
        self.notes.insert(0, note)
        self.active_note = note
        return note

    async def update_note(self, note_id: str, **changes: Any) -> Note | None:
        """
        Patch a note.

        Accepts title, content, folder_id, is_pinned and is_deleted.
        Changing is_deleted also stamps or clears deleted_at.

        Returns:
            The merged note, or None if the backend rejected the change
        """
        unknown = set(changes) - UPDATABLE_FIELDS
        if unknown:
            raise TypeError(f"Unknown note fields: {sorted(unknown)}")

        result = await self.remote.patch(f"/notes/{note_id}", json=changes)
        if not result.ok:
            self._log_error("Error updating note", result, note_id=note_id)
            return None

        return self._merge(note_id, changes, result.data)

    def _merge(self, note_id: str, changes: dict[str, Any], remote: dict | None) -> Note | None:
        merged_fields = dict(changes)
        remote_note = Note.model_validate(remote) if remote else None
        stamp = remote_note.updated_at if remote_note else utc_now()
        merged_fields["updated_at"] = stamp

        if "is_deleted" in changes:
            if changes["is_deleted"]:
                remote_deleted_at = remote_note.deleted_at if remote_note else None
                merged_fields["deleted_at"] = remote_deleted_at or stamp
            else:
                merged_fields["deleted_at"] = None

        merged: Note | None = None
        for index, note in enumerate(self.notes):
            if note.id == note_id:
                merged = note.model_copy(update=merged_fields)
                self.notes[index] = merged

        if self.active_note is not None and self.active_note.id == note_id:
            self.active_note = self.active_note.model_copy(update=merged_fields)

        return merged if merged is not None else remote_note

    async def toggle_pin(self, note_id: str) -> Note | None:
        note = self.get_note(note_id)
        if note is None:
            return None
        return await self.update_note(note_id, is_pinned=not note.is_pinned)

    async def delete_note(self, note_id: str) -> Note | None:
        """Move a note to the recycle bin. An active note is closed."""
        note = await self.update_note(note_id, is_deleted=True)
        if note is not None and self.active_note is not None and self.active_note.id == note_id:
            self.active_note = None
        return note

    async def restore_note(self, note_id: str) -> Note | None:
        return await self.update_note(note_id, is_deleted=False)

    async def permanently_delete_note(self, note_id: str) -> bool:
        result = await self.remote.delete(f"/notes/{note_id}")
        if not result.ok:
            self._log_error("Error deleting note", result, note_id=note_id)
            return False

        self.notes = [n for n in self.notes if n.id != note_id]
        if self.active_note is not None and self.active_note.id == note_id:
            self.active_note = None
        return True

    async def create_folder(
        self,
        name: str,
        icon: str = "Folder",
        color: str = "default",
    ) -> Folder | None:
        result = await self.remote.post("/folders", json={"name": name, "icon": icon, "color": color})
        if not result.ok:
            self._log_error("Error creating folder", result, name=name)
            return None

        folder = Folder.model_validate(result.data)
        self.folders.append(folder)
        return folder

    # Read queries. None of them include the recycle bin except get_deleted_notes.

    def get_notes_for_folder(self, folder_id: str) -> list[Note]:
        if folder_id == ALL_FOLDERS:
            return [n for n in self.notes if not n.is_deleted]
        return [n for n in self.notes if n.folder_id == folder_id and not n.is_deleted]

    def get_recent_notes(self, limit: int = 5) -> list[Note]:
        live = [n for n in self.notes if not n.is_deleted]
        return sorted(live, key=lambda n: n.updated_at, reverse=True)[:limit]

    def get_deleted_notes(self) -> list[Note]:
        return [n for n in self.notes if n.is_deleted]

    def get_notes_for_date(self, day: date) -> list[Note]:
        """Notes last updated on a calendar day (timestamps are UTC)."""
        return [
            n for n in self.notes
            if not n.is_deleted and n.updated_at.date() == day
        ]

    def list_notes(
        self,
        folder_id: str = ALL_FOLDERS,
        query: str = "",
        sort_by: SortKey = "updated",
    ) -> list[Note]:
        """
        Filter and sort notes for the notes list.

        Matches the query case-insensitively against title and content.
        Pinned notes always come first; within each group notes are sorted
        by title (A-Z), or by created/updated time (newest first).
        """
        result = self.get_notes_for_folder(folder_id)

        if query:
            needle = query.lower()
            result = [
                n for n in result
                if needle in n.title.lower() or needle in n.content.lower()
            ]

        if sort_by == "title":
            result.sort(key=lambda n: n.title.casefold())
        elif sort_by == "created":
            result.sort(key=lambda n: n.created_at, reverse=True)
        else:
            result.sort(key=lambda n: n.updated_at, reverse=True)

        # Stable sort keeps the secondary order inside each group.
        result.sort(key=lambda n: not n.is_pinned)
        return result
