"""Catalog endpoints: public list/detail, admin (and master) create/update/delete."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_content_service, get_upload_service, http_error
from app.api.v1.auth import get_current_user, get_optional_actor
from app.core.errors import AppError
from app.schemas.account import SuccessResponse
from app.schemas.problem import Problem, ProblemCreate, ProblemDetail, ProblemUpdate
from app.services.content import ContentService
from app.services.policy import Actor
from app.services.upload import UploadService

router = APIRouter()


@router.get("", response_model=list[Problem])
def list_problems(
    content: Annotated[ContentService, Depends(get_content_service)],
) -> list[Problem]:
    """All entries, newest first. Gated entries are listed; their detail view reports locked."""
    try:
        return content.list()
    except AppError as e:
        raise http_error(e) from e


@router.get("/{problem_id}", response_model=ProblemDetail)
def get_problem(
    problem_id: str,
    content: Annotated[ContentService, Depends(get_content_service)],
    actor: Annotated[Actor | None, Depends(get_optional_actor)],
) -> ProblemDetail:
    """
    One entry. No token required; send one to unlock advanced entries.

    `locked` is true when the entry is advanced and the caller is neither premium
    nor admin/master. The client shows a locked affordance instead of the body.
    """
    try:
        view = content.view(problem_id, actor)
    except AppError as e:
        raise http_error(e) from e
    return ProblemDetail(**view.problem.model_dump(), locked=view.locked)


@router.post("", response_model=Problem, status_code=201)
def create_problem(
    body: ProblemCreate,
    content: Annotated[ContentService, Depends(get_content_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> Problem:
    try:
        return content.create(body, actor)
    except AppError as e:
        raise http_error(e) from e


@router.patch("/{problem_id}", response_model=Problem)
async def update_problem(
    problem_id: str,
    body: ProblemUpdate,
    content: Annotated[ContentService, Depends(get_content_service)],
    uploads: Annotated[UploadService, Depends(get_upload_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> Problem:
    """Partial update; replaced or cleared image references are removed from storage."""
    try:
        return await content.update_with_images(problem_id, body, actor, uploads)
    except AppError as e:
        raise http_error(e) from e


@router.delete("/{problem_id}", response_model=SuccessResponse)
async def delete_problem(
    problem_id: str,
    content: Annotated[ContentService, Depends(get_content_service)],
    uploads: Annotated[UploadService, Depends(get_upload_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> SuccessResponse:
    """Returns success=false (not 404) when the entry does not exist."""
    try:
        deleted = await content.delete_with_images(problem_id, actor, uploads)
    except AppError as e:
        raise http_error(e) from e
    return SuccessResponse(success=deleted)
