"""
Attachment Manager.

Image attachments of a single note.
"""

from modules.backend.core.logging import get_logger, log_with_source
from modules.client.models import Attachment
from modules.client.remote import RemoteClient

logger = get_logger(__name__)


class AttachmentManager:
    """
    Per-note attachment list with upload and delete.

    `uploading` is True while an upload is in flight.
    """

    def __init__(self, remote: RemoteClient, note_id: str | None) -> None:
        self.remote = remote
        self.note_id = note_id
        self.attachments: list[Attachment] = []
        self.uploading: bool = False

    async def fetch(self) -> None:
        if not self.note_id:
            return
        result = await self.remote.get(f"/notes/{self.note_id}/attachments")
        if not result.ok:
            log_with_source(
                logger, "client", "error", "Error fetching attachments",
                note_id=self.note_id, error=result.error.message,
            )
            return
        self.attachments = [Attachment.model_validate(a) for a in result.data]

    async def upload(self, file_name: str, data: bytes, content_type: str) -> Attachment | None:
        if not self.note_id:
            return None

        self.uploading = True
        try:
            result = await self.remote.post(
                f"/notes/{self.note_id}/attachments",
                files={"file": (file_name, data, content_type)},
            )
        finally:
            self.uploading = False

        if not result.ok:
            log_with_source(
                logger, "client", "error", "Error uploading attachment",
                note_id=self.note_id, file_name=file_name, error=result.error.message,
            )
            return None

        attachment = Attachment.model_validate(result.data)
        self.attachments.append(attachment)
        return attachment

    async def delete(self, attachment_id: str) -> bool:
        """Delete an attachment. Unknown ids are ignored."""
        if not any(a.id == attachment_id for a in self.attachments):
            return False

        result = await self.remote.delete(f"/attachments/{attachment_id}")
        if not result.ok:
            log_with_source(
                logger, "client", "error", "Error deleting attachment",
                attachment_id=attachment_id, error=result.error.message,
            )
            return False

        self.attachments = [a for a in self.attachments if a.id != attachment_id]
        return True
