"""Authentication: login, registration, profile, and resolving bearer tokens to live actors."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

import jwt

from app.core.config import Settings
from app.core.enums import Role, Tier
from app.core.errors import DuplicateUsername, InvalidCredentials, Unauthorized, ValidationError
from app.core.security import (
    NAME_MAX_LEN,
    NAME_MIN_LEN,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from app.repositories.base import AccountRepository
from app.schemas.account import Account, AccountView, Profile
from app.services.policy import Actor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Session:
    """Result of a successful login or registration."""

    access_token: str
    user: AccountView


def _validate_length(value: str, low: int, high: int, label: str) -> None:
    if not (low <= len(value) <= high):
        raise ValidationError(f"Invalid {label} length.")


class AuthService:
    def __init__(self, accounts: AccountRepository, settings: Settings) -> None:
        self.accounts = accounts
        self.settings = settings

    def _issue(self, account: Account) -> Session:
        token = create_access_token(
            sub=account.id,
            username=account.username,
            role=account.role.value,
            tier=account.tier.value,
            settings=self.settings,
        )
        return Session(access_token=token, user=AccountView.from_account(account))

    def authenticate(self, username: str, password: str) -> Session:
        """
        Verify credentials, record the visit, and issue a session token.

        Unknown username and wrong password raise the same InvalidCredentials.
        """
        account = self.accounts.get_by_username(username)
        if account is None or not verify_password(password, account.password_hash):
            logger.info("Login failed for username=%r", username)
            raise InvalidCredentials()
        visited = self.accounts.update(
            account.id,
            visit_count=account.visit_count + 1,
            last_visit=datetime.now(UTC),
        )
        if visited is None:
            # Deleted between lookup and update.
            raise InvalidCredentials()
        logger.info("Login: account=%s visit_count=%s", visited.id, visited.visit_count)
        return self._issue(visited)

    def register(self, username: str, password: str, name: str) -> Session:
        """Create an account (bootstrap usernames become admin/premium) and log it in."""
        _validate_length(username, USERNAME_MIN_LEN, USERNAME_MAX_LEN, "username")
        _validate_length(password, PASSWORD_MIN_LEN, PASSWORD_MAX_LEN, "password")
        _validate_length(name.strip(), NAME_MIN_LEN, NAME_MAX_LEN, "name")
        if self.accounts.get_by_username(username) is not None:
            raise DuplicateUsername(username)

        bootstrap = username in self.settings.BOOTSTRAP_ADMIN_USERNAMES
        account = self.accounts.add(
            username=username,
            name=name.strip(),
            password_hash=hash_password(password, rounds=self.settings.BCRYPT_ROUNDS),
            role=Role.ADMIN if bootstrap else Role.USER,
            tier=Tier.PREMIUM if bootstrap else Tier.BASIC,
        )
        logger.info(
            "Registered account=%s role=%s tier=%s",
            account.id,
            account.role.value,
            account.tier.value,
        )
        return self.authenticate(username, password)

    def get_profile(self, subject_id: str) -> Profile:
        account = self.accounts.get(subject_id)
        if account is None:
            raise Unauthorized("User not found")
        return Profile.from_account(account)

    def resolve_account(self, token: str) -> Account:
        """Decode a bearer token and reload the live account it names."""
        try:
            payload = decode_access_token(token, settings=self.settings)
        except jwt.PyJWTError as e:
            raise Unauthorized("Invalid or expired token") from e
        sub = payload.get("sub")
        if not sub or not isinstance(sub, str):
            raise Unauthorized("Invalid token payload")
        account = self.accounts.get(sub)
        if account is None:
            raise Unauthorized("User not found")
        return account

    def resolve_actor(self, token: str) -> Actor:
        """Actor built from the live record; stale role/tier claims in the token are ignored."""
        account = self.resolve_account(token)
        return Actor(id=account.id, role=account.role, tier=account.tier)
