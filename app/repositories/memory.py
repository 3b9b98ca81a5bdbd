"""In-memory repositories, used when DATABASE_URL is not configured and in tests."""

from __future__ import annotations

import itertools
import uuid
from datetime import UTC, datetime
from typing import Any

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


class InMemoryAccountRepository(AccountRepository):
    def __init__(self) -> None:
        self._rows: dict[str, Account] = {}
        self._seq: dict[str, int] = {}
        self._counter = itertools.count()

    def list(self) -> list[Account]:
        rows = sorted(
            self._rows.values(),
            key=lambda a: (a.created_at, self._seq[a.id]),
            reverse=True,
        )
        return [a.model_copy() for a in rows]

    def get(self, account_id: str) -> Account | None:
        row = self._rows.get(account_id)
        return row.model_copy() if row else None

    def get_by_username(self, username: str) -> Account | None:
        for row in self._rows.values():
            if row.username == username:
                return row.model_copy()
        return None

    def add(
        self,
        username: str,
        name: str,
        password_hash: str,
        role: str,
        tier: str,
    ) -> Account:
        now = datetime.now(UTC)
        account = Account(
            id=uuid.uuid4().hex,
            username=username,
            name=name,
            password_hash=password_hash,
            role=role,
            tier=tier,
            visit_count=0,
            last_visit=now,
            created_at=now,
        )
        self._rows[account.id] = account
        self._seq[account.id] = next(self._counter)
        return account.model_copy()

    def update(self, account_id: str, **fields: Any) -> Account | None:
        check_fields(fields, MUTABLE_ACCOUNT_FIELDS)
        row = self._rows.get(account_id)
        if row is None:
            return None
        updated = Account.model_validate({**row.model_dump(), **fields})
        self._rows[account_id] = updated
        return updated.model_copy()

    def delete(self, account_id: str) -> bool:
        self._seq.pop(account_id, None)
        return self._rows.pop(account_id, None) is not None


class InMemoryProblemRepository(ProblemRepository):
    def __init__(self) -> None:
        self._rows: dict[str, Problem] = {}
        self._seq: dict[str, int] = {}
        self._counter = itertools.count()

    def list(self) -> list[Problem]:
        rows = sorted(
            self._rows.values(),
            key=lambda p: (p.created_at, self._seq[p.id]),
            reverse=True,
        )
        return [p.model_copy() for p in rows]

    def get(self, problem_id: str) -> Problem | None:
        row = self._rows.get(problem_id)
        return row.model_copy() if row else None

    def add(self, fields: dict[str, Any]) -> Problem:
        check_fields(fields, MUTABLE_PROBLEM_FIELDS)
        problem = Problem(id=uuid.uuid4().hex, created_at=datetime.now(UTC), **fields)
        self._rows[problem.id] = problem
        self._seq[problem.id] = next(self._counter)
        return problem.model_copy()

    def update(self, problem_id: str, fields: dict[str, Any]) -> Problem | None:
        check_fields(fields, MUTABLE_PROBLEM_FIELDS)
        row = self._rows.get(problem_id)
        if row is None:
            return None
        updated = Problem.model_validate({**row.model_dump(), **fields})
        self._rows[problem_id] = updated
        return updated.model_copy()

    def delete(self, problem_id: str) -> bool:
        self._seq.pop(problem_id, None)
        return self._rows.pop(problem_id, None) is not None

    def count(self) -> int:
        return len(self._rows)


class InMemoryMockExamRepository(MockExamRepository):
    def __init__(self) -> None:
        self._rows: list[MockExamSection] = []

    def list(self) -> list[MockExamSection]:
        # sorted() is stable, so equal positions keep insertion order
        return [s.model_copy() for s in sorted(self._rows, key=lambda s: s.position)]

    def add(self, fields: dict[str, Any]) -> MockExamSection:
        check_fields(fields, MOCK_EXAM_FIELDS)
        section = MockExamSection(id=uuid.uuid4().hex, created_at=datetime.now(UTC), **fields)
        self._rows.append(section)
        return section.model_copy()

    def count(self) -> int:
        return len(self._rows)
