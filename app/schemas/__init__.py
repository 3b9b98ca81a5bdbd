"""Pydantic request/response schemas."""

from app.schemas.account import (
    Account,
    AccountStats,
    AccountSummary,
    AccountView,
    Profile,
    RoleUpdate,
    SuccessResponse,
    TierUpdate,
)
from app.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.mock_exam import MockExamSection
from app.schemas.problem import Problem, ProblemCreate, ProblemDetail, ProblemUpdate
from app.schemas.upload import UploadResponse

__all__ = [
    "Account",
    "AccountStats",
    "AccountSummary",
    "AccountView",
    "HealthResponse",
    "LoginRequest",
    "MockExamSection",
    "Problem",
    "ProblemCreate",
    "ProblemDetail",
    "ProblemUpdate",
    "Profile",
    "RegisterRequest",
    "RoleUpdate",
    "SuccessResponse",
    "TierUpdate",
    "TokenResponse",
    "UploadResponse",
]
