"""Catalog of trading method articles: public reads, gated detail, privileged writes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from app.core.enums import Difficulty
from app.core.errors import NotFound, ValidationError
from app.repositories.base import ProblemRepository
from app.schemas.problem import (
    DEFAULT_CATEGORY,
    DEFAULT_DESCRIPTION,
    DEFAULT_TITLE,
    Problem,
    ProblemCreate,
    ProblemUpdate,
)
from app.services.policy import Actor, can_manage_content, can_view_content, ensure
from app.services.upload import UploadService

logger = logging.getLogger(__name__)

IMAGE_FIELDS = ("thumbnail_url", "content_image_url")

# Fields that may never be stored as null or blank.
REQUIRED_TEXT_FIELDS = ("title",)
NON_NULL_FIELDS = ("title", "description", "difficulty", "category")

# Starter catalog inserted when the store is empty.
DEFAULT_PROBLEMS: tuple[dict[str, Any], ...] = (
    {
        "title": "Moving average crossover",
        "description": "Trend-following entries on golden and dead crosses of the 20/60 moving averages.",
        "difficulty": Difficulty.NORMAL,
        "category": "Technical analysis",
    },
    {
        "title": "RSI overbought / oversold",
        "description": "Entries and exits around the 70/30 RSI bands, filtered by the higher-timeframe trend.",
        "difficulty": Difficulty.NORMAL,
        "category": "Technical analysis",
    },
    {
        "title": "MACD divergence",
        "description": "Spotting trend reversals from divergence between price and the MACD histogram.",
        "difficulty": Difficulty.ADVANCED,
        "category": "Technical analysis",
    },
)


@dataclass(frozen=True)
class ContentView:
    """An entry plus whether the viewer may open its full detail."""

    problem: Problem
    locked: bool


def _check_text(fields: dict[str, Any]) -> None:
    for key in NON_NULL_FIELDS:
        if key in fields and fields[key] is None:
            raise ValidationError(f"Field '{key}' cannot be null.")
    for key in REQUIRED_TEXT_FIELDS:
        if key in fields and not str(fields[key]).strip():
            raise ValidationError(f"Field '{key}' must not be blank.")


class ContentService:
    def __init__(self, problems: ProblemRepository, master_can_manage: bool = True) -> None:
        self.problems = problems
        self.master_can_manage = master_can_manage

    def _authorize(self, actor: Actor, action: str) -> None:
        decision = can_manage_content(actor, master_allowed=self.master_can_manage)
        if not decision.allowed:
            logger.warning(
                "Denied %s: actor=%s role=%s reason=%s",
                action,
                actor.id,
                actor.role.value,
                decision.reason,
            )
        ensure(decision)

    def list(self) -> list[Problem]:
        """Every entry, newest first. Gated entries are listed too; only detail is locked."""
        return self.problems.list()

    def get(self, problem_id: str) -> Problem:
        problem = self.problems.get(problem_id)
        if problem is None:
            raise NotFound("Problem", problem_id)
        return problem

    def view(self, problem_id: str, actor: Actor | None) -> ContentView:
        problem = self.get(problem_id)
        decision = can_view_content(actor, problem.difficulty)
        return ContentView(problem=problem, locked=not decision.allowed)

    def create(self, payload: ProblemCreate, actor: Actor) -> Problem:
        self._authorize(actor, "create_problem")
        supplied = payload.model_dump(exclude_unset=True)
        _check_text({k: v for k, v in supplied.items() if k in REQUIRED_TEXT_FIELDS})
        fields = {
            "title": supplied.get("title") or DEFAULT_TITLE,
            "description": supplied.get("description") or DEFAULT_DESCRIPTION,
            "difficulty": supplied.get("difficulty") or Difficulty.NORMAL,
            "category": supplied.get("category") or DEFAULT_CATEGORY,
            "thumbnail_url": supplied.get("thumbnail_url"),
            "content_image_url": supplied.get("content_image_url"),
        }
        problem = self.problems.add(fields)
        logger.info("Problem created: id=%s by actor=%s", problem.id, actor.id)
        return problem

    def update(self, problem_id: str, payload: ProblemUpdate, actor: Actor) -> Problem:
        """Overwrite only the fields present in the payload. Explicit null clears an image."""
        self._authorize(actor, "update_problem")
        fields = payload.model_dump(exclude_unset=True)
        _check_text(fields)
        if not fields:
            return self.get(problem_id)
        problem = self.problems.update(problem_id, fields)
        if problem is None:
            raise NotFound("Problem", problem_id)
        logger.info(
            "Problem updated: id=%s fields=%s by actor=%s",
            problem_id,
            sorted(fields),
            actor.id,
        )
        return problem

    def delete(self, problem_id: str, actor: Actor) -> bool:
        """False (not an error) when the entry does not exist."""
        self._authorize(actor, "delete_problem")
        deleted = self.problems.delete(problem_id)
        if deleted:
            logger.info("Problem deleted: id=%s by actor=%s", problem_id, actor.id)
        return deleted

    async def update_with_images(
        self, problem_id: str, payload: ProblemUpdate, actor: Actor, uploads: UploadService
    ) -> Problem:
        """update(), then remove stored images the update replaced or cleared."""
        before = self.problems.get(problem_id)
        updated = self.update(problem_id, payload, actor)
        if before is not None:
            for field in IMAGE_FIELDS:
                old = getattr(before, field)
                if old and old != getattr(updated, field):
                    await uploads.delete(old)
        return updated

    async def delete_with_images(
        self, problem_id: str, actor: Actor, uploads: UploadService
    ) -> bool:
        """delete(), then remove the entry's stored images."""
        before = self.problems.get(problem_id)
        deleted = self.delete(problem_id, actor)
        if deleted and before is not None:
            for field in IMAGE_FIELDS:
                await uploads.delete(getattr(before, field))
        return deleted

    def seed_defaults(self) -> int:
        """Insert the starter catalog if the store is empty. Returns the number inserted."""
        if self.problems.count() > 0:
            return 0
        for entry in DEFAULT_PROBLEMS:
            self.problems.add(dict(entry))
        logger.info("Seeded %s default problems", len(DEFAULT_PROBLEMS))
        return len(DEFAULT_PROBLEMS)
