"""ORM model for content entries (trading method articles)."""

from sqlalchemy import Column, String, Text

from app.models.base import Base, RecordMixin


class Problem(RecordMixin, Base):
    """
    Content entry shown in the public catalog.

    difficulty: 'normal' or 'advanced' (advanced entries are gated)
    """

    __tablename__ = "problems"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    difficulty = Column(String(16), nullable=False, default="normal", index=True)
    category = Column(String(100), nullable=False, default="General")
    thumbnail_url = Column(Text, nullable=True)
    content_image_url = Column(Text, nullable=True)
