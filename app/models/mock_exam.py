"""ORM model for mock-exam sections."""

from sqlalchemy import Column, Integer, String, Text

from app.models.base import Base, RecordMixin


class MockExam(RecordMixin, Base):
    """
    Practice section of the mock-exam area (premium tier or admin/master only).

    frequency: 'high', 'medium' or 'low'
    """

    __tablename__ = "mock_exams"

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String(100), nullable=False)
    frequency = Column(String(16), nullable=False, default="medium")
    position = Column(Integer, nullable=False, default=0, index=True)
    thumbnail_url = Column(Text, nullable=True)
