"""Account management: listing, role/tier changes, deletion and dashboard stats."""

from __future__ import annotations

import logging
from datetime import date, datetime

from app.core.enums import Role, Tier
from app.core.errors import NotFound
from app.repositories.base import AccountRepository
from app.schemas.account import Account, AccountStats, AccountSummary
from app.services.policy import (
    Actor,
    Decision,
    Target,
    can_change_role,
    can_change_tier,
    can_delete_account,
    can_manage_accounts,
    ensure,
)

logger = logging.getLogger(__name__)


def _local_date(moment: datetime) -> date:
    """Calendar date of a timestamp in the server's local timezone."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone().date()


class AccountService:
    def __init__(self, accounts: AccountRepository) -> None:
        self.accounts = accounts

    def _check(self, decision: Decision, action: str, actor: Actor, target_id: str | None = None) -> None:
        if not decision.allowed:
            logger.warning(
                "Denied %s: actor=%s role=%s target=%s reason=%s",
                action,
                actor.id,
                actor.role.value,
                target_id,
                decision.reason,
            )
        ensure(decision)

    def _target(self, account_id: str) -> Account:
        account = self.accounts.get(account_id)
        if account is None:
            raise NotFound("Account", account_id)
        return account

    def list(self, actor: Actor) -> list[AccountSummary]:
        self._check(can_manage_accounts(actor), "list_accounts", actor)
        return [AccountSummary.model_validate(a) for a in self.accounts.list()]

    def find_by_id(self, account_id: str) -> Account | None:
        return self.accounts.get(account_id)

    def find_by_username(self, username: str) -> Account | None:
        return self.accounts.get_by_username(username)

    def update_role(self, account_id: str, new_role: Role, actor: Actor) -> AccountSummary:
        target = self._target(account_id)
        decision = can_change_role(actor, Target(target.id, target.role), new_role)
        self._check(decision, "update_role", actor, target.id)
        updated = self.accounts.update(target.id, role=new_role)
        if updated is None:
            raise NotFound("Account", account_id)
        logger.info(
            "Role changed: target=%s %s -> %s by actor=%s",
            target.id,
            target.role.value,
            new_role.value,
            actor.id,
        )
        return AccountSummary.model_validate(updated)

    def update_tier(self, account_id: str, new_tier: Tier, actor: Actor) -> AccountSummary:
        target = self._target(account_id)
        decision = can_change_tier(actor, Target(target.id, target.role), new_tier)
        self._check(decision, "update_tier", actor, target.id)
        updated = self.accounts.update(target.id, tier=new_tier)
        if updated is None:
            raise NotFound("Account", account_id)
        logger.info(
            "Tier changed: target=%s %s -> %s by actor=%s",
            target.id,
            target.tier.value,
            new_tier.value,
            actor.id,
        )
        return AccountSummary.model_validate(updated)

    def delete(self, account_id: str, actor: Actor) -> bool:
        target = self._target(account_id)
        self._check(can_delete_account(actor, Target(target.id, target.role)), "delete_account", actor, target.id)
        deleted = self.accounts.delete(target.id)
        if deleted:
            logger.info("Account deleted: target=%s by actor=%s", target.id, actor.id)
        return deleted

    def stats(self, actor: Actor, today: date | None = None) -> AccountStats:
        """
        Totals by role plus todayVisits: accounts whose last_visit falls on today's
        server-local calendar date (date-only comparison, not a rolling 24h window).
        """
        self._check(can_manage_accounts(actor), "view_stats", actor)
        today = today or date.today()
        accounts = self.accounts.list()
        return AccountStats(
            total_users=len(accounts),
            admin_count=sum(1 for a in accounts if a.role is Role.ADMIN),
            master_count=sum(1 for a in accounts if a.role is Role.MASTER),
            user_count=sum(1 for a in accounts if a.role is Role.USER),
            today_visits=sum(
                1 for a in accounts if a.last_visit is not None and _local_date(a.last_visit) == today
            ),
        )
