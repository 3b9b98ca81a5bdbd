"""PostgreSQL repositories (SQLAlchemy ORM). One session and one commit per call."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.database import check_db_connected
from app.core.errors import UpstreamStoreError
from app.models import MockExam as MockExamRow
from app.models import Problem as ProblemRow
from app.models import User as UserRow
from app.models.base import new_id
from app.repositories.base import (
    MOCK_EXAM_FIELDS,
    MUTABLE_ACCOUNT_FIELDS,
    MUTABLE_PROBLEM_FIELDS,
    AccountRepository,
    MockExamRepository,
    ProblemRepository,
    check_fields,
)
from app.schemas.account import Account
from app.schemas.mock_exam import MockExamSection
from app.schemas.problem import Problem

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    """Enum members are stored by value."""
    return getattr(value, "value", value)


class _SqlRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    @contextmanager
    def _session(self) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
        except SQLAlchemyError as e:
            db.rollback()
            logger.error("Store call failed: %s", e)
            raise UpstreamStoreError(str(e)) from e
        finally:
            db.close()

    def ping(self) -> bool:
        db = self._session_factory()
        try:
            return check_db_connected(db)
        finally:
            db.close()


class SqlAccountRepository(_SqlRepository, AccountRepository):
    def list(self) -> list[Account]:
        with self._session() as db:
            rows = db.query(UserRow).order_by(UserRow.created_at.desc()).all()
            return [Account.model_validate(r) for r in rows]

    def get(self, account_id: str) -> Account | None:
        with self._session() as db:
            row = db.get(UserRow, account_id)
            return Account.model_validate(row) if row else None

    def get_by_username(self, username: str) -> Account | None:
        with self._session() as db:
            row = db.query(UserRow).filter(UserRow.username == username).first()
            return Account.model_validate(row) if row else None

    def add(
        self,
        username: str,
        name: str,
        password_hash: str,
        role: str,
        tier: str,
    ) -> Account:
        now = datetime.now(UTC)
        with self._session() as db:
            row = UserRow(
                id=new_id(),
                username=username,
                name=name,
                password_hash=password_hash,
                role=_plain(role),
                tier=_plain(tier),
                visit_count=0,
                last_visit=now,
                created_at=now,
            )
            db.add(row)
            db.commit()
            return Account.model_validate(row)

    def update(self, account_id: str, **fields: Any) -> Account | None:
        check_fields(fields, MUTABLE_ACCOUNT_FIELDS)
        with self._session() as db:
            row = db.get(UserRow, account_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, _plain(value))
            db.commit()
            return Account.model_validate(row)

    def delete(self, account_id: str) -> bool:
        with self._session() as db:
            deleted = (
                db.query(UserRow)
                .filter(UserRow.id == account_id)
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted > 0


class SqlProblemRepository(_SqlRepository, ProblemRepository):
    def list(self) -> list[Problem]:
        with self._session() as db:
            rows = db.query(ProblemRow).order_by(ProblemRow.created_at.desc()).all()
            return [Problem.model_validate(r) for r in rows]

    def get(self, problem_id: str) -> Problem | None:
        with self._session() as db:
            row = db.get(ProblemRow, problem_id)
            return Problem.model_validate(row) if row else None

    def add(self, fields: dict[str, Any]) -> Problem:
        check_fields(fields, MUTABLE_PROBLEM_FIELDS)
        with self._session() as db:
            row = ProblemRow(
                id=new_id(),
                created_at=datetime.now(UTC),
                **{k: _plain(v) for k, v in fields.items()},
            )
            db.add(row)
            db.commit()
            return Problem.model_validate(row)

    def update(self, problem_id: str, fields: dict[str, Any]) -> Problem | None:
        check_fields(fields, MUTABLE_PROBLEM_FIELDS)
        with self._session() as db:
            row = db.get(ProblemRow, problem_id)
            if row is None:
                return None
            for key, value in fields.items():
                setattr(row, key, _plain(value))
            db.commit()
            return Problem.model_validate(row)

    def delete(self, problem_id: str) -> bool:
        with self._session() as db:
            deleted = (
                db.query(ProblemRow)
                .filter(ProblemRow.id == problem_id)
                .delete(synchronize_session=False)
            )
            db.commit()
            return deleted > 0

    def count(self) -> int:
        with self._session() as db:
            return db.query(func.count(ProblemRow.id)).scalar() or 0


class SqlMockExamRepository(_SqlRepository, MockExamRepository):
    def list(self) -> list[MockExamSection]:
        with self._session() as db:
            rows = (
                db.query(MockExamRow)
                .order_by(MockExamRow.position.asc(), MockExamRow.created_at.asc())
                .all()
            )
            return [MockExamSection.model_validate(r) for r in rows]

    def add(self, fields: dict[str, Any]) -> MockExamSection:
        check_fields(fields, MOCK_EXAM_FIELDS)
        with self._session() as db:
            row = MockExamRow(
                id=new_id(),
                created_at=datetime.now(UTC),
                **{k: _plain(v) for k, v in fields.items()},
            )
            db.add(row)
            db.commit()
            return MockExamSection.model_validate(row)

    def count(self) -> int:
        with self._session() as db:
            return db.query(func.count(MockExamRow.id)).scalar() or 0
