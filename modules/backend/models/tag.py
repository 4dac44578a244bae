"""
Tag Models.

Tags are unique per owner by name. NoteTag is the many-to-many
link between notes and tags.
"""

from sqlalchemy import ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, CreatedAtMixin, OwnedMixin, UUIDMixin

DEFAULT_TAG_COLOR = "#6366f1"


class Tag(UUIDMixin, OwnedMixin, CreatedAtMixin, Base):
    """Tag database model."""

    __tablename__ = "tags"
    __table_args__ = (UniqueConstraint("user_id", "name", name="uq_tags_user_name"),)

    name: Mapped[str] = mapped_column(String(50), nullable=False)
    color: Mapped[str] = mapped_column(String(32), nullable=False, default=DEFAULT_TAG_COLOR)

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name!r})>"


class NoteTag(Base):
    """Link row between a note and a tag (composite primary key)."""

    __tablename__ = "note_tags"

    note_id: Mapped[str] = mapped_column(
        ForeignKey("notes.id", ondelete="CASCADE"),
        primary_key=True,
    )
    tag_id: Mapped[str] = mapped_column(
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    )

    def __repr__(self) -> str:
        return f"<NoteTag(note_id={self.note_id}, tag_id={self.tag_id})>"
