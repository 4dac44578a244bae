"""
Attachment Schemas.
"""

from pydantic import BaseModel, Field


class AttachmentResponse(BaseModel):
    """Attachment metadata with its derived public URL."""

    id: str
    note_id: str
    file_name: str
    file_path: str
    file_type: str
    file_size: int
    url: str = Field(description="Public URL of the stored object")
