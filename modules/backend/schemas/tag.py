"""
Tag Schemas.
"""

from pydantic import BaseModel, ConfigDict, Field


class TagCreate(BaseModel):
    """Schema for creating a tag."""

    name: str = Field(..., min_length=1, max_length=50, examples=["ideas"])
    color: str = Field(
        default="#6366f1",
        pattern=r"^#[0-9a-fA-F]{6}$",
        description="Hex color",
    )


class TagResponse(BaseModel):
    id: str
    name: str
    color: str

    model_config = ConfigDict(from_attributes=True)


class NoteTagResponse(BaseModel):
    note_id: str
    tag_id: str

    model_config = ConfigDict(from_attributes=True)
