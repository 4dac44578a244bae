"""
Tag Repository.

Data access for tags and note-tag links. Links carry no user id of
their own; they are scoped through the owning tag.
"""

from sqlalchemy import delete, select

from modules.backend.models.tag import NoteTag, Tag
from modules.backend.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """Repository for Tag and NoteTag models."""

    model = Tag

    async def get_all_by_name(self) -> list[Tag]:
        return await self.get_all(Tag.name.asc())

    async def get_by_name(self, name: str) -> Tag | None:
        result = await self.session.execute(self._owned().where(Tag.name == name))
        return result.scalar_one_or_none()

    async def get_links(self) -> list[NoteTag]:
        """All note-tag links for the user's tags."""
        result = await self.session.execute(
            select(NoteTag)
            .join(Tag, Tag.id == NoteTag.tag_id)
            .where(Tag.user_id == self.user_id)
        )
        return list(result.scalars().all())

    async def get_link(self, note_id: str, tag_id: str) -> NoteTag | None:
        return await self.session.get(NoteTag, (note_id, tag_id))

    async def add_link(self, note_id: str, tag_id: str) -> NoteTag:
        link = NoteTag(note_id=note_id, tag_id=tag_id)
        self.session.add(link)
        await self.session.flush()
        return link

    async def remove_link(self, link: NoteTag) -> None:
        await self.session.delete(link)
        await self.session.flush()

    async def delete_with_links(self, tag: Tag) -> None:
        """Delete a tag and every link that references it."""
        await self.session.execute(delete(NoteTag).where(NoteTag.tag_id == tag.id))
        await self.session.delete(tag)
        await self.session.flush()
