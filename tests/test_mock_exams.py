"""Unit tests for app.services.mock_exams: access gate, orderings, built-in sections."""

import unittest
from datetime import UTC, datetime

from app.core.enums import Frequency, Role, SectionSort, Tier
from app.core.errors import PermissionDenied
from app.repositories.memory import InMemoryMockExamRepository
from app.schemas.mock_exam import MockExamSection
from app.services.mock_exams import (
    DEFAULT_SECTIONS,
    FREQUENCY_RANK,
    MockExamService,
    default_sections,
    sort_sections,
)
from app.services.policy import Actor


def _section(title: str, frequency: Frequency, position: int) -> MockExamSection:
    return MockExamSection(
        id=str(position),
        title=title,
        category="General",
        frequency=frequency,
        position=position,
        created_at=datetime(2026, 3, 1, tzinfo=UTC),
    )


class TestSortSections(unittest.TestCase):
    def setUp(self) -> None:
        self.sections = [
            _section("swing trading", Frequency.MEDIUM, 1),
            _section("Breakout", Frequency.LOW, 2),
            _section("candles", Frequency.HIGH, 3),
            _section("Averages", Frequency.MEDIUM, 4),
        ]

    def test_default_keeps_order(self) -> None:
        self.assertEqual(sort_sections(self.sections), self.sections)

    def test_name_is_case_insensitive(self) -> None:
        ordered = sort_sections(self.sections, SectionSort.NAME)
        self.assertEqual(
            [s.title for s in ordered], ["Averages", "Breakout", "candles", "swing trading"]
        )

    def test_frequency_high_first_and_stable(self) -> None:
        ordered = sort_sections(self.sections, SectionSort.FREQUENCY)
        self.assertEqual([s.position for s in ordered], [3, 1, 4, 2])

    def test_does_not_mutate_input(self) -> None:
        before = list(self.sections)
        sort_sections(self.sections, SectionSort.NAME)
        self.assertEqual(self.sections, before)


class TestDefaultSections(unittest.TestCase):
    def test_twelve_sections_in_position_order(self) -> None:
        sections = default_sections()
        self.assertEqual(len(sections), 12)
        self.assertEqual([s.id for s in sections], [str(i) for i in range(1, 13)])
        self.assertEqual([s.position for s in sections], list(range(1, 13)))
        self.assertEqual({s.frequency for s in sections}, set(Frequency))


class TestMockExamService(unittest.TestCase):
    def setUp(self) -> None:
        self.repo = InMemoryMockExamRepository()
        self.service = MockExamService(self.repo)
        self.service.seed_defaults()

    def test_basic_user_denied(self) -> None:
        with self.assertRaises(PermissionDenied):
            self.service.list(Actor(id="u", role=Role.USER, tier=Tier.BASIC))

    def test_anonymous_denied(self) -> None:
        with self.assertRaises(PermissionDenied):
            self.service.list(None)

    def test_premium_user_and_staff_allowed(self) -> None:
        for actor in (
            Actor(id="u", role=Role.USER, tier=Tier.PREMIUM),
            Actor(id="m", role=Role.MASTER),
            Actor(id="a", role=Role.ADMIN),
        ):
            sections = self.service.list(actor)
            self.assertEqual(len(sections), len(DEFAULT_SECTIONS))
            self.assertEqual(sections[0].title, DEFAULT_SECTIONS[0]["title"])

    def test_frequency_order(self) -> None:
        actor = Actor(id="a", role=Role.ADMIN)
        ranks = [FREQUENCY_RANK[s.frequency] for s in self.service.list(actor, SectionSort.FREQUENCY)]
        self.assertEqual(ranks, sorted(ranks))
        self.assertEqual(ranks[0], 0)

    def test_seed_only_when_empty(self) -> None:
        self.assertEqual(self.service.seed_defaults(), 0)
        self.assertEqual(self.repo.count(), len(DEFAULT_SECTIONS))


if __name__ == "__main__":
    unittest.main()
