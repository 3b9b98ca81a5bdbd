"""FastAPI application entrypoint. No business logic; only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1 import router as v1_router
from app.core.config import Settings, get_settings
from app.core.errors import AppError
from app.repositories import Repositories, build_repositories
from app.services.content import ContentService
from app.services.mock_exams import MockExamService

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    repositories: Repositories | None = None,
) -> FastAPI:
    """Build the app. Repositories are chosen once here and shared by all requests."""
    settings = settings or get_settings()
    repositories = repositories or build_repositories(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if settings.SEED_DEFAULT_CONTENT:
            try:
                ContentService(repositories.problems).seed_defaults()
                MockExamService(repositories.mock_exams).seed_defaults()
            except AppError as e:
                logger.error("Seeding default content failed: %s", e.message)
        yield

    app = FastAPI(
        title="MethodHub API",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repositories = repositories

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.APP_ENV == "dev" else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    def root() -> dict[str, str]:
        """Root route; minimal payload for discovery."""
        return {"message": "MethodHub API"}

    return app


app = create_app()
