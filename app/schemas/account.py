"""Account records and the views derived from them (password hash never leaves Account)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import Role, Tier


class Account(BaseModel):
    """Stored account as returned by an AccountRepository."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str
    password_hash: str
    role: Role = Role.USER
    tier: Tier = Tier.BASIC
    visit_count: int = Field(default=0, ge=0)
    last_visit: datetime | None = None
    created_at: datetime


class AccountView(BaseModel):
    """Account as embedded in login/register responses."""

    id: str
    username: str
    name: str
    role: Role
    tier: Tier

    @classmethod
    def from_account(cls, account: Account) -> "AccountView":
        return cls(
            id=account.id,
            username=account.username,
            name=account.name,
            role=account.role,
            tier=account.tier,
        )


class Profile(AccountView):
    """GET /auth/profile payload."""

    visit_count: int
    created_at: datetime

    @classmethod
    def from_account(cls, account: Account) -> "Profile":
        return cls(
            id=account.id,
            username=account.username,
            name=account.name,
            role=account.role,
            tier=account.tier,
            visit_count=account.visit_count,
            created_at=account.created_at,
        )


class AccountSummary(BaseModel):
    """Account entry for the admin list (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str
    role: Role
    tier: Tier
    visit_count: int
    last_visit: datetime | None = None
    created_at: datetime


class RoleUpdate(BaseModel):
    role: Role = Field(..., description="Requested role: user, master or admin")


class TierUpdate(BaseModel):
    tier: Tier = Field(..., description="Requested tier: basic or premium")


class AccountStats(BaseModel):
    """Counters for the admin dashboard. Serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    total_users: int = Field(..., ge=0, alias="totalUsers")
    admin_count: int = Field(..., ge=0, alias="adminCount")
    master_count: int = Field(..., ge=0, alias="masterCount")
    user_count: int = Field(..., ge=0, alias="userCount")
    today_visits: int = Field(
        ...,
        ge=0,
        alias="todayVisits",
        description="Accounts whose last visit falls on today's server-local calendar date.",
    )


class SuccessResponse(BaseModel):
    success: bool
