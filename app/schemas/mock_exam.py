"""Schemas for mock-exam sections (premium practice material)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import Frequency


class MockExamSection(BaseModel):
    """Stored mock-exam section as returned by a MockExamRepository."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str = ""
    category: str
    frequency: Frequency = Frequency.MEDIUM
    position: int = Field(default=0, ge=0, description="Rank in the default ordering (ascending).")
    thumbnail_url: str | None = None
    created_at: datetime
