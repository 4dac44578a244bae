"""
Note and Folder Schemas.

Pydantic schemas for note and folder request/response validation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class NoteCreate(BaseModel):
    """Schema for creating a new note. Title and content start as placeholders."""

    folder_id: str | None = Field(
        default=None,
        description="Folder to file the note under",
    )


class NoteUpdate(BaseModel):
    """Partial update; only fields present in the request are applied."""

    title: str | None = Field(
        default=None,
        max_length=255,
        description="Note title",
    )
    content: str | None = Field(
        default=None,
        description="Note content (HTML)",
    )
    folder_id: str | None = Field(
        default=None,
        description="Folder id, or null to unfile the note",
    )
    is_pinned: bool | None = Field(
        default=None,
        description="Pinned notes sort first",
    )
    is_deleted: bool | None = Field(
        default=None,
        description="Move to or out of the recycle bin",
    )


class NoteResponse(BaseModel):
    """Schema for note in API responses."""

    id: str = Field(description="Note unique identifier")
    title: str = Field(description="Note title")
    content: str = Field(description="Note content (HTML)")
    folder_id: str | None = Field(description="Folder id")
    is_pinned: bool = Field(description="Whether the note is pinned")
    is_deleted: bool = Field(description="Whether the note is in the recycle bin")
    deleted_at: datetime | None = Field(description="When the note was moved to the recycle bin")
    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)


class FolderCreate(BaseModel):
    """Schema for creating a folder."""

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        examples=["Work"],
    )
    icon: str = Field(default="Folder", max_length=50)
    color: str = Field(default="default", max_length=32)


class FolderResponse(BaseModel):
    id: str
    name: str
    icon: str
    color: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
