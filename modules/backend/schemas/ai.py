"""
AI Schemas.

Request and response bodies for the writing assistant.
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class ModelState(str, Enum):
    """Lifecycle of the local text-generation model."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)


class TextRequest(BaseModel):
    text: str = Field(..., min_length=1)


class ImproveRequest(TextRequest):
    instruction: str | None = Field(default=None, max_length=500)


class SummarizeRequest(TextRequest):
    length: Literal["short", "medium", "detailed"] = "medium"


class AIResponse(BaseModel):
    """
    Result of an assistant operation.

    `notice` is set when the text came from a fallback rather
    than the model.
    """

    text: str
    notice: str | None = None


class AIStatusResponse(BaseModel):
    state: ModelState
    model: str
