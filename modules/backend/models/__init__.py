# Database models package. Importing it registers every table on Base.metadata.
from modules.backend.models.attachment import Attachment
from modules.backend.models.base import Base
from modules.backend.models.folder import Folder
from modules.backend.models.note import Note
from modules.backend.models.tag import NoteTag, Tag

__all__ = ["Attachment", "Base", "Folder", "Note", "NoteTag", "Tag"]
