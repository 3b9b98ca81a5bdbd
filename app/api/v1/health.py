"""Health check endpoint with optional store connectivity check."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_app_settings, get_repositories
from app.core.config import Settings
from app.repositories import Repositories
from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def get_health(
    repos: Annotated[Repositories, Depends(get_repositories)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> HealthResponse:
    """
    Return service health status and store connectivity.
    Used by load balancers and monitoring.
    """
    db_status = "connected" if repos.accounts.ping() else "disconnected"

    return HealthResponse(
        status="ok",
        environment=settings.APP_ENV,
        backend=repos.backend,
        database=db_status,
    )
