"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from app.schemas.account import AccountView


class LoginRequest(BaseModel):
    """Credentials for login."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class RegisterRequest(BaseModel):
    """New account: username, password and display name."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=8, max_length=128, description="Password")
    name: str = Field(..., min_length=1, max_length=100, description="Display name")


class TokenResponse(BaseModel):
    """JWT access token plus the authenticated account, returned by login and register."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    user: AccountView
