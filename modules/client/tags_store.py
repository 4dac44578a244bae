"""
Tag Store.

Caches the user's tags and note-tag links. A tag name that already
exists and a link that already exists are expected outcomes: they are
logged at debug level and return quietly.
"""

import asyncio

from modules.backend.core.logging import get_logger, log_with_source
from modules.client.models import NoteTag, Tag
from modules.client.remote import RemoteClient

logger = get_logger(__name__)

CONFLICT = "RES_CONFLICT"
DEFAULT_TAG_COLOR = "#6366f1"


class TagStore:
    def __init__(self, remote: RemoteClient) -> None:
        self.remote = remote
        self.tags: list[Tag] = []
        self.note_tags: list[NoteTag] = []
        self.loading: bool = False

    async def refresh(self) -> None:
        self.loading = True
        try:
            await asyncio.gather(self.refresh_tags(), self.refresh_links())
        finally:
            self.loading = False

    async def refresh_tags(self) -> None:
        result = await self.remote.get("/tags")
        if not result.ok:
            log_with_source(logger, "client", "error", "Error fetching tags", error=result.error.message)
            return
        self.tags = [Tag.model_validate(t) for t in result.data]

    async def refresh_links(self) -> None:
        result = await self.remote.get("/tags/links")
        if not result.ok:
            log_with_source(logger, "client", "error", "Error fetching note tags", error=result.error.message)
            return
        self.note_tags = [NoteTag.model_validate(nt) for nt in result.data]

    async def create_tag(self, name: str, color: str = DEFAULT_TAG_COLOR) -> Tag | None:
        """Create a tag. Returns None, without raising, if the name is taken."""
        result = await self.remote.post("/tags", json={"name": name, "color": color})
        if not result.ok:
            if result.error.code == CONFLICT:
                log_with_source(logger, "client", "debug", "Tag already exists", name=name)
            else:
                log_with_source(logger, "client", "error", "Error creating tag", name=name, error=result.error.message)
            return None

        tag = Tag.model_validate(result.data)
        self.tags = sorted([*self.tags, tag], key=lambda t: t.name.casefold())
        return tag

    async def delete_tag(self, tag_id: str) -> bool:
        result = await self.remote.delete(f"/tags/{tag_id}")
        if not result.ok:
            log_with_source(logger, "client", "error", "Error deleting tag", tag_id=tag_id, error=result.error.message)
            return False

        self.tags = [t for t in self.tags if t.id != tag_id]
        self.note_tags = [nt for nt in self.note_tags if nt.tag_id != tag_id]
        return True

    async def add_tag_to_note(self, note_id: str, tag_id: str) -> bool:
        result = await self.remote.put(f"/tags/{tag_id}/notes/{note_id}")
        if not result.ok:
            if result.error.code != CONFLICT:
                log_with_source(
                    logger, "client", "error", "Error adding tag to note",
                    note_id=note_id, tag_id=tag_id, error=result.error.message,
                )
            return False

        self.note_tags.append(NoteTag(note_id=note_id, tag_id=tag_id))
        return True

    async def remove_tag_from_note(self, note_id: str, tag_id: str) -> bool:
        result = await self.remote.delete(f"/tags/{tag_id}/notes/{note_id}")
        if not result.ok:
            log_with_source(
                logger, "client", "error", "Error removing tag from note",
                note_id=note_id, tag_id=tag_id, error=result.error.message,
            )
            return False

        self.note_tags = [
            nt for nt in self.note_tags
            if not (nt.note_id == note_id and nt.tag_id == tag_id)
        ]
        return True

    def get_tags_for_note(self, note_id: str) -> list[Tag]:
        tag_ids = {nt.tag_id for nt in self.note_tags if nt.note_id == note_id}
        return [t for t in self.tags if t.id in tag_ids]
