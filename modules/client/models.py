"""
Client-side entities, parsed from API responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class _ClientModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class Note(_ClientModel):
    id: str
    title: str
    content: str = ""
    folder_id: str | None = None
    created_at: datetime
    updated_at: datetime
    is_deleted: bool = False
    deleted_at: datetime | None = None
    is_pinned: bool = False


class Folder(_ClientModel):
    id: str
    name: str
    icon: str = "Folder"
    color: str = "default"


class Tag(_ClientModel):
    id: str
    name: str
    color: str


class NoteTag(_ClientModel):
    note_id: str
    tag_id: str


class Attachment(_ClientModel):
    id: str
    note_id: str
    file_name: str
    file_path: str
    file_type: str
    file_size: int
    url: str
