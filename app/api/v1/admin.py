"""Admin endpoints: account list, stats, role/tier changes, deletion (admin and master)."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.deps import get_account_service, http_error
from app.api.v1.auth import get_current_user
from app.core.errors import AppError
from app.schemas.account import AccountStats, AccountSummary, RoleUpdate, SuccessResponse, TierUpdate
from app.services.accounts import AccountService
from app.services.policy import Actor

router = APIRouter()


@router.get("/users", response_model=list[AccountSummary])
def list_users(
    accounts: Annotated[AccountService, Depends(get_account_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> list[AccountSummary]:
    """All accounts, newest first, without password hashes."""
    try:
        return accounts.list(actor)
    except AppError as e:
        raise http_error(e) from e


@router.get("/stats", response_model=AccountStats)
def get_stats(
    accounts: Annotated[AccountService, Depends(get_account_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> AccountStats:
    try:
        return accounts.stats(actor)
    except AppError as e:
        raise http_error(e) from e


@router.patch("/users/{user_id}/role", response_model=AccountSummary)
def update_user_role(
    user_id: str,
    body: RoleUpdate,
    accounts: Annotated[AccountService, Depends(get_account_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> AccountSummary:
    """
    Change an account's role.

    Admins: any account but their own. Masters: only plain users, and only to user or master.
    """
    try:
        return accounts.update_role(user_id, body.role, actor)
    except AppError as e:
        raise http_error(e) from e


@router.patch("/users/{user_id}/tier", response_model=AccountSummary)
def update_user_tier(
    user_id: str,
    body: TierUpdate,
    accounts: Annotated[AccountService, Depends(get_account_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> AccountSummary:
    try:
        return accounts.update_tier(user_id, body.tier, actor)
    except AppError as e:
        raise http_error(e) from e


@router.delete("/users/{user_id}", response_model=SuccessResponse)
def delete_user(
    user_id: str,
    accounts: Annotated[AccountService, Depends(get_account_service)],
    actor: Annotated[Actor, Depends(get_current_user)],
) -> SuccessResponse:
    """Nobody can delete themselves; masters can only delete plain users."""
    try:
        return SuccessResponse(success=accounts.delete(user_id, actor))
    except AppError as e:
        raise http_error(e) from e
