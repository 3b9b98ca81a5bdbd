"""Repository interfaces and the backend selection done once at startup."""

import logging
from dataclasses import dataclass

from app.core.config import Settings
from app.repositories.base import AccountRepository, MockExamRepository, ProblemRepository
from app.repositories.memory import (
    InMemoryAccountRepository,
    InMemoryMockExamRepository,
    InMemoryProblemRepository,
)
from app.repositories.objects import InlineStorage, ObjectStorage, StorageError, SupabaseStorage

logger = logging.getLogger(__name__)


@dataclass
class Repositories:
    """Handles to the external stores, shared by all requests of one process."""

    accounts: AccountRepository
    problems: ProblemRepository
    mock_exams: MockExamRepository
    storage: ObjectStorage
    backend: str = "memory"


def build_storage(settings: Settings) -> ObjectStorage:
    if settings.storage_configured:
        return SupabaseStorage(
            base_url=settings.STORAGE_URL or "",
            service_key=settings.STORAGE_SERVICE_KEY.get_secret_value(),
            bucket=settings.STORAGE_BUCKET,
            timeout=settings.STORAGE_REQUEST_TIMEOUT_SEC,
        )
    logger.warning("Object storage not configured; uploaded images are inlined as data URLs.")
    return InlineStorage()


def build_repositories(settings: Settings) -> Repositories:
    """PostgreSQL repositories when DATABASE_URL is set, in-memory otherwise."""
    storage = build_storage(settings)
    if settings.DATABASE_URL:
        from app.core.database import build_session_factory
        from app.repositories.sql import (
            SqlAccountRepository,
            SqlMockExamRepository,
            SqlProblemRepository,
        )

        session_factory = build_session_factory(settings)
        return Repositories(
            accounts=SqlAccountRepository(session_factory),
            problems=SqlProblemRepository(session_factory),
            mock_exams=SqlMockExamRepository(session_factory),
            storage=storage,
            backend="postgres",
        )
    logger.warning("DATABASE_URL not set; using in-memory repositories (data is lost on restart).")
    return Repositories(
        accounts=InMemoryAccountRepository(),
        problems=InMemoryProblemRepository(),
        mock_exams=InMemoryMockExamRepository(),
        storage=storage,
    )


__all__ = [
    "AccountRepository",
    "InlineStorage",
    "MockExamRepository",
    "ObjectStorage",
    "ProblemRepository",
    "Repositories",
    "StorageError",
    "SupabaseStorage",
    "build_repositories",
    "build_storage",
]
