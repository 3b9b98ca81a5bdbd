"""SQL repositories against an in-process SQLite database, plus store-error wrapping."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.enums import Difficulty, Frequency, Role, Tier
from app.core.errors import UpstreamStoreError
from app.models import Base
from app.repositories.memory import InMemoryMockExamRepository
from app.repositories.sql import (
    SqlAccountRepository,
    SqlMockExamRepository,
    SqlProblemRepository,
)


def _sqlite_session_factory() -> sessionmaker:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


class TestSqlAccountRepository(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = SqlAccountRepository(_sqlite_session_factory())

    def test_add_get_and_lookup(self) -> None:
        created = self.repo.add(
            username="admin", name="Admin", password_hash="h", role=Role.ADMIN, tier=Tier.PREMIUM
        )
        self.assertEqual(created.role, Role.ADMIN)
        self.assertEqual(created.tier, Tier.PREMIUM)
        self.assertEqual(created.visit_count, 0)
        self.assertEqual(self.repo.get(created.id).username, "admin")
        self.assertEqual(self.repo.get_by_username("admin").id, created.id)
        self.assertIsNone(self.repo.get_by_username("Admin"))
        self.assertIsNone(self.repo.get("missing"))

    def test_list_newest_first(self) -> None:
        first = self.repo.add(username="a", name="A", password_hash="h", role="user", tier="basic")
        second = self.repo.add(username="b", name="B", password_hash="h", role="user", tier="basic")
        self.assertEqual([a.id for a in self.repo.list()], [second.id, first.id])

    def test_update_only_given_fields(self) -> None:
        created = self.repo.add(username="a", name="A", password_hash="h", role="user", tier="basic")
        updated = self.repo.update(created.id, tier=Tier.PREMIUM)
        self.assertEqual(updated.tier, Tier.PREMIUM)
        self.assertEqual(updated.role, Role.USER)
        self.assertEqual(self.repo.get(created.id).tier, Tier.PREMIUM)
        self.assertIsNone(self.repo.update("missing", tier=Tier.PREMIUM))

    def test_update_rejects_unknown_field(self) -> None:
        created = self.repo.add(username="a", name="A", password_hash="h", role="user", tier="basic")
        with self.assertRaises(ValueError):
            self.repo.update(created.id, username="b")

    def test_delete_then_delete_again(self) -> None:
        created = self.repo.add(username="a", name="A", password_hash="h", role="user", tier="basic")
        self.assertTrue(self.repo.delete(created.id))
        self.assertFalse(self.repo.delete(created.id))
        self.assertIsNone(self.repo.get(created.id))

    def test_ping(self) -> None:
        self.assertTrue(self.repo.ping())


class TestSqlProblemRepository(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = SqlProblemRepository(_sqlite_session_factory())

    def _fields(self, title: str, **extra) -> dict:
        fields = {
            "title": title,
            "description": "",
            "difficulty": Difficulty.NORMAL,
            "category": "General",
            "thumbnail_url": None,
            "content_image_url": None,
        }
        fields.update(extra)
        return fields

    def test_crud_and_order(self) -> None:
        first = self.repo.add(self._fields("First"))
        second = self.repo.add(self._fields("Second", difficulty=Difficulty.ADVANCED))
        self.assertEqual(self.repo.count(), 2)
        self.assertEqual([p.id for p in self.repo.list()], [second.id, first.id])
        self.assertEqual(self.repo.get(second.id).difficulty, Difficulty.ADVANCED)

        updated = self.repo.update(first.id, {"title": "Renamed", "thumbnail_url": "t.png"})
        self.assertEqual(updated.title, "Renamed")
        self.assertEqual(updated.category, "General")
        self.assertEqual(self.repo.get(first.id).thumbnail_url, "t.png")

        self.assertTrue(self.repo.delete(first.id))
        self.assertFalse(self.repo.delete(first.id))
        self.assertEqual(self.repo.count(), 1)


class TestMockExamRepositories(unittest.TestCase):
    def _check_default_order(self, repo) -> None:
        repo.add({"title": "C", "category": "x", "frequency": Frequency.LOW, "position": 3})
        repo.add({"title": "A", "category": "x", "frequency": Frequency.HIGH, "position": 1})
        repo.add({"title": "B", "category": "x", "frequency": Frequency.MEDIUM, "position": 2})
        self.assertEqual(repo.count(), 3)
        self.assertEqual([s.title for s in repo.list()], ["A", "B", "C"])
        self.assertEqual(repo.list()[0].frequency, Frequency.HIGH)

    def test_sql_position_order(self) -> None:
        self._check_default_order(SqlMockExamRepository(_sqlite_session_factory()))

    def test_memory_position_order(self) -> None:
        self._check_default_order(InMemoryMockExamRepository())


class TestStoreErrorWrapping(unittest.TestCase):
    def setUp(self) -> None:
        self.factory = MagicMock()
        self.db = self.factory.return_value
        self.db.query.side_effect = OperationalError(
            "SELECT users", {}, Exception("could not connect to server")
        )

    def test_sqlalchemy_error_becomes_upstream_store_error(self) -> None:
        repo = SqlAccountRepository(self.factory)
        with self.assertLogs("app.repositories.sql", level="ERROR") as logs:
            with self.assertRaises(UpstreamStoreError) as ctx:
                repo.list()
        self.assertIn("could not connect", ctx.exception.message)
        self.assertIn("could not connect", logs.output[0])
        self.db.rollback.assert_called_once()
        self.db.close.assert_called_once()

    def test_problem_count_wrapped(self) -> None:
        with self.assertRaises(UpstreamStoreError):
            SqlProblemRepository(self.factory).count()


if __name__ == "__main__":
    unittest.main()
