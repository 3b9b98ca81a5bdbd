"""Mock-exam sections: premium tier or admin/master only."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_mock_exam_service, http_error
from app.api.v1.auth import get_current_user
from app.core.enums import SectionSort
from app.core.errors import AppError
from app.schemas.mock_exam import MockExamSection
from app.services.mock_exams import MockExamService
from app.services.policy import Actor

router = APIRouter()


@router.get("", response_model=list[MockExamSection])
def list_mock_exams(
    mock_exams: Annotated[MockExamService, Depends(get_mock_exam_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
    sort: Annotated[
        SectionSort, Query(description="default, name or frequency")
    ] = SectionSort.DEFAULT,
) -> list[MockExamSection]:
    """
    All sections in the requested order. Returns 401 without a token and 403 for
    basic-tier users; an empty list means none are stored yet.
    """
    try:
        return mock_exams.list(actor, sort)
    except AppError as e:
        raise http_error(e) from e
