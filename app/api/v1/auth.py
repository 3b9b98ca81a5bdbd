"""Login, registration, profile, and the bearer-token dependencies (get_current_user, get_optional_actor)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api.deps import get_auth_service, http_error
from app.core.errors import AppError, Unauthorized
from app.schemas.account import Account, Profile
from app.schemas.auth import LoginRequest, RegisterRequest, TokenResponse
from app.services.auth import AuthService
from app.services.policy import Actor

router = APIRouter()
security = HTTPBearer(auto_error=False)


def get_current_account(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> Account:
    """Dependency: require a valid Bearer JWT and return the live account. Raises 401 otherwise."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return auth.resolve_account(credentials.credentials)
    except AppError as e:
        raise http_error(e) from e


def get_current_user(
    account: Annotated[Account, Depends(get_current_account)],
) -> Actor:
    """Dependency: the authenticated caller as a policy Actor (role/tier from the live record)."""
    return Actor(id=account.id, role=account.role, tier=account.tier)


def get_optional_actor(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> Actor | None:
    """Dependency for public routes: the caller if a valid token was sent, else None."""
    if credentials is None:
        return None
    try:
        return auth.resolve_actor(credentials.credentials)
    except Unauthorized:
        return None
    except AppError as e:
        raise http_error(e) from e


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """
    Authenticate with username and password; returns a JWT access token and the account.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    try:
        session = auth.authenticate(body.username, body.password)
    except AppError as e:
        raise http_error(e) from e
    return TokenResponse(access_token=session.access_token, user=session.user)


@router.post("/register", response_model=TokenResponse, status_code=201)
def register(
    body: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> TokenResponse:
    """Create an account and log it in. Returns 400 if the username is taken."""
    try:
        session = auth.register(body.username, body.password, body.name)
    except AppError as e:
        raise http_error(e) from e
    return TokenResponse(access_token=session.access_token, user=session.user)


@router.get("/profile", response_model=Profile)
def get_profile(
    account: Annotated[Account, Depends(get_current_account)],
    auth: Annotated[AuthService, Depends(get_auth_service)],
) -> Profile:
    """Profile of the token's subject, including visit count."""
    try:
        return auth.get_profile(account.id)
    except AppError as e:
        raise http_error(e) from e
