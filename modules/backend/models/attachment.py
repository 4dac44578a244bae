"""
Attachment Model.

Metadata row for an image stored in object storage. The public URL
is derived from file_path and is not persisted.
"""

from sqlalchemy import BigInteger, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, CreatedAtMixin, OwnedMixin, UUIDMixin


class Attachment(UUIDMixin, OwnedMixin, CreatedAtMixin, Base):
    """Attachment database model."""

    __tablename__ = "note_attachments"

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(String(512), nullable=False, unique=True)
    file_type: Mapped[str] = mapped_column(String(100), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)

    def __repr__(self) -> str:
        return f"<Attachment(id={self.id}, file_name={self.file_name!r})>"
