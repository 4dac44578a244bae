"""
Folder Model.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from modules.backend.models.base import Base, CreatedAtMixin, OwnedMixin, UUIDMixin


class Folder(UUIDMixin, OwnedMixin, CreatedAtMixin, Base):
    """A named group of notes. Folders are never soft-deleted."""

    __tablename__ = "folders"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    icon: Mapped[str] = mapped_column(String(50), nullable=False, default="Folder")
    color: Mapped[str] = mapped_column(String(32), nullable=False, default="default")

    def __repr__(self) -> str:
        return f"<Folder(id={self.id}, name={self.name!r})>"
