"""
Repository interfaces.

All persistence goes through these. The concrete backend (PostgreSQL via
SQLAlchemy, or in-memory) is chosen once at startup by build_repositories().
Every method is a single store call: there are no transactions spanning calls.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from app.schemas.account import Account
from app.schemas.mock_exam import MockExamSection
from app.schemas.problem import Problem

# Fields a caller may change after creation.
MUTABLE_ACCOUNT_FIELDS = frozenset({"name", "role", "tier", "visit_count", "last_visit"})
MUTABLE_PROBLEM_FIELDS = frozenset(
    {"title", "description", "difficulty", "category", "thumbnail_url", "content_image_url"}
)
MOCK_EXAM_FIELDS = frozenset(
    {"title", "description", "category", "frequency", "position", "thumbnail_url"}
)


def check_fields(fields: dict[str, Any], allowed: frozenset[str]) -> None:
    unknown = set(fields) - allowed
    if unknown:
        raise ValueError(f"Cannot update field(s): {', '.join(sorted(unknown))}")


class AccountRepository(ABC):
    """Credential store: accounts keyed by opaque id, unique by username."""

    @abstractmethod
    def list(self) -> list[Account]:
        """All accounts, newest first."""

    @abstractmethod
    def get(self, account_id: str) -> Account | None:
        pass

    @abstractmethod
    def get_by_username(self, username: str) -> Account | None:
        """Exact, case-sensitive match."""

    @abstractmethod
    def add(
        self,
        username: str,
        name: str,
        password_hash: str,
        role: str,
        tier: str,
    ) -> Account:
        """Insert a new account with visit_count=0 and last_visit=created_at=now."""

    @abstractmethod
    def update(self, account_id: str, **fields: Any) -> Account | None:
        """Overwrite the given fields. Returns None if the account does not exist."""

    @abstractmethod
    def delete(self, account_id: str) -> bool:
        """Returns False if nothing was deleted."""

    def ping(self) -> bool:
        return True


class ProblemRepository(ABC):
    """Content store: catalog entries keyed by opaque id."""

    @abstractmethod
    def list(self) -> list[Problem]:
        """All entries, newest first by created_at."""

    @abstractmethod
    def get(self, problem_id: str) -> Problem | None:
        pass

    @abstractmethod
    def add(self, fields: dict[str, Any]) -> Problem:
        """Insert an entry; id and created_at are assigned by the store."""

    @abstractmethod
    def update(self, problem_id: str, fields: dict[str, Any]) -> Problem | None:
        """Overwrite only the given fields. Returns None if the entry does not exist."""

    @abstractmethod
    def delete(self, problem_id: str) -> bool:
        """Returns False if nothing was deleted."""

    @abstractmethod
    def count(self) -> int:
        pass


class MockExamRepository(ABC):
    """Mock-exam sections. Read-mostly: filled by seeding, listed by premium callers."""

    @abstractmethod
    def list(self) -> list[MockExamSection]:
        """All sections in default order: position ascending, then oldest first."""

    @abstractmethod
    def add(self, fields: dict[str, Any]) -> MockExamSection:
        pass

    @abstractmethod
    def count(self) -> int:
        pass
