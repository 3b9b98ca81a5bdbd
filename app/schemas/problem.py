"""Schemas for content entries ("problems": trading method articles)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import Difficulty

DEFAULT_TITLE = "New trading method"
DEFAULT_DESCRIPTION = ""
DEFAULT_CATEGORY = "General"


class Problem(BaseModel):
    """Stored content entry as returned by a ProblemRepository."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    difficulty: Difficulty = Difficulty.NORMAL
    category: str = DEFAULT_CATEGORY
    thumbnail_url: str | None = Field(
        default=None, description="Object storage reference for the list thumbnail."
    )
    content_image_url: str | None = Field(
        default=None, description="Object storage reference for the article image."
    )
    created_at: datetime


class ProblemCreate(BaseModel):
    """Create payload. Omitted fields fall back to defaults."""

    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    difficulty: Difficulty | None = None
    category: str | None = Field(default=None, max_length=100)
    thumbnail_url: str | None = None
    content_image_url: str | None = None


class ProblemUpdate(BaseModel):
    """Partial update. Only fields present in the request body are written."""

    title: str | None = Field(default=None, max_length=255)
    description: str | None = None
    difficulty: Difficulty | None = None
    category: str | None = Field(default=None, max_length=100)
    thumbnail_url: str | None = None
    content_image_url: str | None = None


class ProblemDetail(Problem):
    """Detail view: the full entry plus whether the caller may open it."""

    locked: bool = Field(
        default=False,
        description="True when the entry is gated and the caller lacks premium tier or an elevated role.",
    )
