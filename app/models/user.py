"""ORM model for application accounts (auth, roles and tiers)."""

from sqlalchemy import Column, DateTime, Integer, String

from app.models.base import Base, RecordMixin


class User(RecordMixin, Base):
    """
    Account for JWT authentication and role/tier based access control.

    role: 'user', 'master' or 'admin'
    tier: 'basic' or 'premium'
    """

    __tablename__ = "users"

    username = Column(String(255), nullable=False, unique=True, index=True)
    name = Column(String(100), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default="user")
    tier = Column(String(16), nullable=False, default="basic")
    visit_count = Column(Integer, nullable=False, default=0)
    last_visit = Column(DateTime(timezone=True), nullable=True)
