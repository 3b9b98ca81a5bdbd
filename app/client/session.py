"""Client-side session context: token plus cached account view, with explicit load/save."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from app.core.enums import Role, Tier
from app.schemas.account import AccountView
from app.services.policy import Actor

logger = logging.getLogger(__name__)


class SessionContext:
    """
    The client's session, passed explicitly to whatever needs it.

    Load once at start with SessionContext.load(path); persist with save().
    A missing or unreadable file yields an anonymous session.
    """

    def __init__(
        self,
        path: Path | str | None = None,
        token: str | None = None,
        user: AccountView | None = None,
    ) -> None:
        self.path = Path(path) if path else None
        self.token = token
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token) and self.user is not None

    @property
    def actor(self) -> Actor | None:
        if self.user is None:
            return None
        return Actor(id=self.user.id, role=self.user.role, tier=self.user.tier)

    @classmethod
    def load(cls, path: Path | str) -> SessionContext:
        path = Path(path)
        if not path.exists():
            return cls(path)
        try:
            raw: dict[str, Any] = json.loads(path.read_text(encoding="utf-8"))
            user_data = raw.get("user")
            if user_data is not None:
                # Sessions saved before tiers existed have no tier.
                user_data.setdefault("tier", Tier.BASIC.value)
                user_data.setdefault("role", Role.USER.value)
            user = AccountView.model_validate(user_data) if user_data else None
            return cls(path, token=raw.get("token"), user=user)
        except (OSError, json.JSONDecodeError, ValidationError, AttributeError) as e:
            logger.warning("Ignoring unreadable session file %s: %s", path, e)
            return cls(path)

    def set(self, token: str, user: AccountView | BaseModel | dict[str, Any]) -> None:
        self.token = token
        self.user = AccountView.model_validate(
            user.model_dump() if isinstance(user, BaseModel) else user
        )

    def save(self) -> None:
        if self.path is None:
            return
        payload = {
            "token": self.token,
            "user": self.user.model_dump(mode="json") if self.user else None,
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.path is not None and self.path.exists():
            self.path.unlink()
