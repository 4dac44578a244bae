"""
Editor Auto-Save.

Debounces edits to one note: every edit restarts a timer, and when the
timer fires the latest title and content are saved if they differ
from the stored note.
"""

import asyncio

from modules.backend.core.config import get_app_config
from modules.backend.core.logging import get_logger, log_with_source
from modules.client.notes_store import NotesStore

logger = get_logger(__name__)


class AutoSaver:
    """
    Debounced saver for a single open editor.

    Args:
        store: Store that owns the note
        note_id: Note being edited
        delay: Quiet period in seconds. If None, reads client.yaml.
    """

    def __init__(self, store: NotesStore, note_id: str, delay: float | None = None) -> None:
        self.store = store
        self.note_id = note_id
        self.delay = delay if delay is not None else get_app_config().client.autosave_delay_seconds
        note = store.get_note(note_id)
        self.title = note.title if note else ""
        self.content = note.content if note else ""
        self.saving = False
        self._timer: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def edit(self, title: str | None = None, content: str | None = None) -> None:
        """Record an edit and restart the debounce timer."""
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        self.cancel()
        self._timer = asyncio.ensure_future(self._save_after_delay())

    async def _save_after_delay(self) -> None:
        await asyncio.sleep(self.delay)
        # Detach so a later edit cannot cancel a save already in flight.
        self._timer = None
        await self._save()

    async def _save(self) -> bool:
        note = self.store.get_note(self.note_id)
        if note is None:
            return False
        if self.title == note.title and self.content == note.content:
            return False

        self.saving = True
        try:
            saved = await self.store.update_note(self.note_id, title=self.title, content=self.content)
        finally:
            self.saving = False

        log_with_source(logger, "client", "debug", "Auto-saved note", note_id=self.note_id, saved=saved is not None)
        return saved is not None

    async def flush(self) -> bool:
        """Save now instead of waiting for the timer."""
        self.cancel()
        return await self._save()

    def cancel(self) -> None:
        """Drop the pending save, if any."""
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None
