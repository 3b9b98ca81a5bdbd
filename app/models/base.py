"""SQLAlchemy declarative Base and the columns every stored record shares."""

import uuid

from sqlalchemy import Column, DateTime, String, func
from sqlalchemy.orm import DeclarativeBase


def new_id() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class RecordMixin:
    """String UUID primary key and a server-set creation time (lists sort on it, newest first)."""

    id = Column(String(36), primary_key=True, default=new_id)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        index=True,
    )
