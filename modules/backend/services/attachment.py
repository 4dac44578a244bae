"""
Attachment Service.

Image attachments for notes. The stored object and its metadata row
are created together and deleted together.
"""

import secrets
import string
import time

from sqlalchemy.ext.asyncio import AsyncSession

from modules.backend.core.exceptions import ValidationError
from modules.backend.models.attachment import Attachment
from modules.backend.repositories.attachment import AttachmentRepository
from modules.backend.repositories.note import NoteRepository
from modules.backend.schemas.attachment import AttachmentResponse
from modules.backend.services.base import BaseService
from modules.backend.services.storage import ObjectStorage

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def build_object_path(user_id: str, note_id: str, file_name: str) -> str:
    """`{user_id}/{note_id}/{epoch_ms}-{random}.{ext}` for a new upload."""
    ext = file_name.rsplit(".", 1)[-1] if "." in file_name else "bin"
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(6))
    return f"{user_id}/{note_id}/{int(time.time() * 1000)}-{suffix}.{ext}"


class AttachmentService(BaseService):
    """Service for note attachments."""

    def __init__(
        self,
        session: AsyncSession,
        user_id: str,
        storage: ObjectStorage,
        max_upload_bytes: int,
        allowed_content_prefixes: list[str],
    ) -> None:
        super().__init__(session, user_id)
        self.repo = AttachmentRepository(session, user_id)
        self.note_repo = NoteRepository(session, user_id)
        self.storage = storage
        self.max_upload_bytes = max_upload_bytes
        self.allowed_content_prefixes = allowed_content_prefixes

    def to_response(self, attachment: Attachment) -> AttachmentResponse:
        return AttachmentResponse(
            id=attachment.id,
            note_id=attachment.note_id,
            file_name=attachment.file_name,
            file_path=attachment.file_path,
            file_type=attachment.file_type,
            file_size=attachment.file_size,
            url=self.storage.public_url(attachment.file_path),
        )

    async def list_attachments(self, note_id: str) -> list[Attachment]:
        await self.note_repo.get_by_id(note_id)
        return await self.repo.get_for_note(note_id)

    async def upload_attachment(
        self,
        note_id: str,
        file_name: str,
        content_type: str,
        data: bytes,
    ) -> Attachment:
        """
        Store an image and record it against a note.

        Raises:
            NotFoundError: If the note is not found
            ValidationError: If the file is not an image or is too large
            ExternalServiceError: If the object cannot be stored
        """
        await self.note_repo.get_by_id(note_id)

        if not any(content_type.startswith(p) for p in self.allowed_content_prefixes):
            raise ValidationError(
                "Unsupported file type",
                details={"content_type": content_type, "allowed": self.allowed_content_prefixes},
            )
        if len(data) > self.max_upload_bytes:
            raise ValidationError(
                "File too large",
                details={"size": len(data), "max_bytes": self.max_upload_bytes},
            )

        path = build_object_path(self.user_id, note_id, file_name)
        self._log_operation("Uploading attachment", note_id=note_id, path=path, size=len(data))
        await self.storage.upload(path, data)

        try:
            return await self._execute_db_operation(
                "create_attachment",
                self.repo.create(
                    note_id=note_id,
                    file_name=file_name,
                    file_path=path,
                    file_type=content_type,
                    file_size=len(data),
                ),
            )
        except Exception:
            await self.storage.remove_quietly([path])
            raise

    async def delete_attachment(self, attachment_id: str) -> None:
        """
        Remove the stored object, then the row. A storage failure is
        logged and does not keep the row alive.

        Raises:
            NotFoundError: If attachment not found
        """
        attachment = await self.repo.get_by_id(attachment_id)
        self._log_operation("Deleting attachment", attachment_id=attachment_id)
        await self.storage.remove_quietly([attachment.file_path])
        await self._execute_db_operation("delete_attachment", self.repo.delete(attachment.id))
