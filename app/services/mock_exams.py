"""Mock-exam sections: premium practice material with three orderings."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

from app.core.enums import Frequency, SectionSort
from app.repositories.base import MockExamRepository
from app.schemas.mock_exam import MockExamSection
from app.services.policy import Actor, can_view_mock_exams, ensure

logger = logging.getLogger(__name__)

FREQUENCY_RANK = {Frequency.HIGH: 0, Frequency.MEDIUM: 1, Frequency.LOW: 2}

# Built-in sections: seeded into an empty store, and shown by clients when the API has none.
DEFAULT_SECTIONS: tuple[dict[str, Any], ...] = (
    {
        "title": "Moving average breakout",
        "description": "Trend following with moving averages, using golden and dead crosses.",
        "category": "Technical analysis",
        "frequency": Frequency.HIGH,
    },
    {
        "title": "RSI overbought / oversold",
        "description": "Entry and exit rules in the RSI overbought and oversold zones.",
        "category": "Technical analysis",
        "frequency": Frequency.HIGH,
    },
    {
        "title": "Bollinger band squeeze",
        "description": "Volatility breakouts caught as the bands expand after a squeeze.",
        "category": "Technical analysis",
        "frequency": Frequency.MEDIUM,
    },
    {
        "title": "MACD divergence",
        "description": "Trend reversals spotted from divergence between price and MACD.",
        "category": "Technical analysis",
        "frequency": Frequency.HIGH,
    },
    {
        "title": "Fibonacci retracement",
        "description": "Support and resistance zones and entries from Fibonacci ratios.",
        "category": "Price analysis",
        "frequency": Frequency.MEDIUM,
    },
    {
        "title": "Candlestick patterns",
        "description": "Short-term trades on hammers, dojis, harami and other key candles.",
        "category": "Price analysis",
        "frequency": Frequency.HIGH,
    },
    {
        "title": "Volume analysis",
        "description": "Judging trend strength from the relation between volume and price.",
        "category": "Volume",
        "frequency": Frequency.MEDIUM,
    },
    {
        "title": "Support / resistance trading",
        "description": "Bounce and breakout trades at major support and resistance lines.",
        "category": "Price analysis",
        "frequency": Frequency.HIGH,
    },
    {
        "title": "Scalping",
        "description": "Fast entries and exits for very short-term trading.",
        "category": "Short-term trading",
        "frequency": Frequency.LOW,
    },
    {
        "title": "Swing trading",
        "description": "Holding positions from a few days to a few weeks.",
        "category": "Medium-term trading",
        "frequency": Frequency.MEDIUM,
    },
    {
        "title": "Range breakout",
        "description": "Entering early in a trend when price breaks out of a range.",
        "category": "Price analysis",
        "frequency": Frequency.HIGH,
    },
    {
        "title": "Money management",
        "description": "Risk control and position sizing for steadier returns.",
        "category": "Risk management",
        "frequency": Frequency.HIGH,
    },
)


def default_sections() -> list[MockExamSection]:
    """The built-in sections as records, ids "1".."12" in default order."""
    now = datetime.now(UTC)
    return [
        MockExamSection(id=str(i), position=i, created_at=now, **entry)
        for i, entry in enumerate(DEFAULT_SECTIONS, start=1)
    ]


def sort_sections(
    sections: list[MockExamSection], order: SectionSort = SectionSort.DEFAULT
) -> list[MockExamSection]:
    """Stable sort: DEFAULT keeps store order, NAME is case-insensitive, FREQUENCY is high first."""
    if order is SectionSort.DEFAULT:
        return list(sections)
    if order is SectionSort.NAME:
        return sorted(sections, key=lambda s: s.title.casefold())
    if order is SectionSort.FREQUENCY:
        return sorted(sections, key=lambda s: FREQUENCY_RANK[s.frequency])
    raise ValueError(f"Unknown section order: {order!r}")


class MockExamService:
    def __init__(self, sections: MockExamRepository) -> None:
        self.sections = sections

    def list(
        self, actor: Actor | None, order: SectionSort = SectionSort.DEFAULT
    ) -> list[MockExamSection]:
        """Sections for premium callers and admins/masters; everyone else gets PermissionDenied."""
        decision = can_view_mock_exams(actor)
        if not decision.allowed:
            logger.warning(
                "Denied list_mock_exams: actor=%s reason=%s",
                actor.id if actor else None,
                decision.reason,
            )
        ensure(decision)
        return sort_sections(self.sections.list(), order)

    def seed_defaults(self) -> int:
        """Insert the built-in sections if the store is empty. Returns the number inserted."""
        if self.sections.count() > 0:
            return 0
        for position, entry in enumerate(DEFAULT_SECTIONS, start=1):
            self.sections.add({**entry, "position": position})
        logger.info("Seeded %s default mock-exam sections", len(DEFAULT_SECTIONS))
        return len(DEFAULT_SECTIONS)
