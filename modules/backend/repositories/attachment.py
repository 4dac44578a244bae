"""
Attachment Repository.
"""

from modules.backend.models.attachment import Attachment
from modules.backend.repositories.base import BaseRepository


class AttachmentRepository(BaseRepository[Attachment]):
    """Repository for Attachment model."""

    model = Attachment

    async def get_for_note(self, note_id: str) -> list[Attachment]:
        result = await self.session.execute(
            self._owned()
            .where(Attachment.note_id == note_id)
            .order_by(Attachment.created_at.asc())
        )
        return list(result.scalars().all())
