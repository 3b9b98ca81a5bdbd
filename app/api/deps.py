"""Shared FastAPI dependencies: settings, repositories, services, and domain-error mapping."""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request

from app.core.config import Settings
from app.core.errors import AppError, UpstreamStoreError
from app.repositories import Repositories
from app.services.accounts import AccountService
from app.services.auth import AuthService
from app.services.content import ContentService
from app.services.mock_exams import MockExamService
from app.services.upload import UploadService

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_repositories(request: Request) -> Repositories:
    return request.app.state.repositories


def get_auth_service(
    repos: Annotated[Repositories, Depends(get_repositories)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> AuthService:
    return AuthService(repos.accounts, settings)


def get_account_service(
    repos: Annotated[Repositories, Depends(get_repositories)],
) -> AccountService:
    return AccountService(repos.accounts)


def get_content_service(
    repos: Annotated[Repositories, Depends(get_repositories)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ContentService:
    return ContentService(repos.problems, master_can_manage=settings.MASTER_CAN_MANAGE_CONTENT)


def get_mock_exam_service(
    repos: Annotated[Repositories, Depends(get_repositories)],
) -> MockExamService:
    return MockExamService(repos.mock_exams)


def get_upload_service(
    repos: Annotated[Repositories, Depends(get_repositories)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> UploadService:
    return UploadService(repos.storage, max_bytes=settings.UPLOAD_MAX_BYTES)


def http_error(e: AppError) -> HTTPException:
    """Map a domain error to an HTTPException. Store failures stay opaque to the caller."""
    if isinstance(e, UpstreamStoreError):
        logger.error("Upstream store error: %s", e.message)
        return HTTPException(status_code=e.status_code, detail=e.public_message)
    headers = {"WWW-Authenticate": "Bearer"} if e.status_code == 401 else None
    return HTTPException(status_code=e.status_code, detail=e.message, headers=headers)
