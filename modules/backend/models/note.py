"""
Note Model.

A rich-text note. Content is stored as HTML produced by the editor.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, OwnedMixin, TimestampMixin, UUIDMixin

DEFAULT_NOTE_TITLE = "Untitled Note"
DEFAULT_NOTE_CONTENT = "<p>Start writing...</p>"


class Note(UUIDMixin, OwnedMixin, TimestampMixin, Base):
    """
    Note database model.

    Soft-deleted notes keep their row with is_deleted set and a
    deleted_at stamp; the two fields always change together.
    """

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default=DEFAULT_NOTE_TITLE,
    )
    content: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        default=DEFAULT_NOTE_CONTENT,
    )
    folder_id: Mapped[str | None] = mapped_column(
        ForeignKey("folders.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    is_deleted: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime,
        nullable=True,
    )
    is_pinned: Mapped[bool] = mapped_column(
        default=False,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, title={self.title!r}, deleted={self.is_deleted})>"
