"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.mock_exam import MockExam
from app.models.problem import Problem
from app.models.user import User

__all__ = ["Base", "MockExam", "Problem", "User"]
