"""Authorization policy: pure decisions over (actor, action, target).

No I/O and no side effects. Callers load the target first (absence is a NotFound,
decided before any rule here runs) and build the Actor from the live account
record, never from token claims alone. Every branch over Role ends in
assert_never so a new role cannot fall through to "allow".
"""

from dataclasses import dataclass
from typing import assert_never

from app.core.enums import Difficulty, Role, Tier
from app.core.errors import PermissionDenied

# Reason codes for transparency (logged on deny, returned in the 403 detail).
REASON_OK = "ok"
REASON_NOT_PRIVILEGED = "not_privileged"
REASON_SELF_TARGET = "self_target"
REASON_TARGET_OUTRANKS = "target_outranks_actor"
REASON_ROLE_TOO_HIGH = "requested_role_too_high"
REASON_CONTENT_GATED = "content_gated"

DENY_MESSAGES = {
    REASON_NOT_PRIVILEGED: "Admin or master access required.",
    REASON_SELF_TARGET: "You cannot change or delete your own account here.",
    REASON_TARGET_OUTRANKS: "Masters can only manage plain user accounts.",
    REASON_ROLE_TOO_HIGH: "Masters cannot grant the admin role.",
    REASON_CONTENT_GATED: "Premium tier required to view this content.",
}


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, as loaded from the live account record."""

    id: str
    role: Role
    tier: Tier = Tier.BASIC


@dataclass(frozen=True)
class Target:
    """The account an action is aimed at."""

    id: str
    role: Role


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = REASON_OK

    @property
    def message(self) -> str:
        return DENY_MESSAGES.get(self.reason, "Permission denied.")


ALLOW = Decision(True)


def _deny(reason: str) -> Decision:
    return Decision(False, reason)


def can_manage_accounts(actor: Actor) -> Decision:
    """List/view accounts and dashboard stats."""
    if actor.role is Role.ADMIN or actor.role is Role.MASTER:
        return ALLOW
    if actor.role is Role.USER:
        return _deny(REASON_NOT_PRIVILEGED)
    assert_never(actor.role)


def can_change_role(actor: Actor, target: Target, requested_role: Role) -> Decision:
    """Admins may re-role anyone but themselves; masters only move plain users between user and master."""
    if actor.id == target.id:
        return _deny(REASON_SELF_TARGET)
    if actor.role is Role.ADMIN:
        return ALLOW
    if actor.role is Role.MASTER:
        if target.role is not Role.USER:
            return _deny(REASON_TARGET_OUTRANKS)
        if requested_role is Role.ADMIN:
            return _deny(REASON_ROLE_TOO_HIGH)
        return ALLOW
    if actor.role is Role.USER:
        return _deny(REASON_NOT_PRIVILEGED)
    assert_never(actor.role)


def can_change_tier(actor: Actor, target: Target, requested_tier: Tier) -> Decision:
    """Admins may change any other account's tier; masters any non-admin's."""
    if actor.role is Role.USER:
        return _deny(REASON_NOT_PRIVILEGED)
    if actor.id == target.id:
        return _deny(REASON_SELF_TARGET)
    if actor.role is Role.ADMIN:
        return ALLOW
    if actor.role is Role.MASTER:
        if target.role is Role.ADMIN:
            return _deny(REASON_TARGET_OUTRANKS)
        return ALLOW
    assert_never(actor.role)


def can_delete_account(actor: Actor, target: Target) -> Decision:
    if actor.role is Role.USER:
        return _deny(REASON_NOT_PRIVILEGED)
    if actor.id == target.id:
        return _deny(REASON_SELF_TARGET)
    if actor.role is Role.ADMIN:
        return ALLOW
    if actor.role is Role.MASTER:
        if target.role is not Role.USER:
            return _deny(REASON_TARGET_OUTRANKS)
        return ALLOW
    assert_never(actor.role)


def can_manage_content(actor: Actor, master_allowed: bool = True) -> Decision:
    """Create, update and delete catalog entries."""
    if actor.role is Role.ADMIN:
        return ALLOW
    if actor.role is Role.MASTER:
        return ALLOW if master_allowed else _deny(REASON_NOT_PRIVILEGED)
    if actor.role is Role.USER:
        return _deny(REASON_NOT_PRIVILEGED)
    assert_never(actor.role)


def can_view_content(actor: Actor | None, difficulty: Difficulty) -> Decision:
    """
    Full-detail access to an entry. Anonymous callers count as basic-tier users.

    A deny here is surfaced as "locked", not as an error.
    """
    if difficulty is Difficulty.NORMAL:
        return ALLOW
    if difficulty is Difficulty.ADVANCED:
        if actor is None:
            return _deny(REASON_CONTENT_GATED)
        if actor.tier is Tier.PREMIUM:
            return ALLOW
        if actor.role is Role.ADMIN or actor.role is Role.MASTER:
            return ALLOW
        if actor.role is Role.USER:
            return _deny(REASON_CONTENT_GATED)
        assert_never(actor.role)
    assert_never(difficulty)


def can_view_mock_exams(actor: Actor | None) -> Decision:
    """The mock-exam area is gated like an advanced entry, but a deny is a 403."""
    return can_view_content(actor, Difficulty.ADVANCED)


def ensure(decision: Decision) -> None:
    """Raise PermissionDenied unless the decision allows."""
    if not decision.allowed:
        raise PermissionDenied(decision.message)
