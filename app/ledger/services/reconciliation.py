"""
Balance reconciliation for detecting and healing drifted account balances.

current_balance is a cache. Its source of truth is the account history:

    expected = initial_balance
               + sum(signed effects of live transactions)
               + sum(adjustment deltas)

Reconciliation recomputes the expected balance of every account in a ledger
and reports accounts whose stored balance differs. With heal=True the stored
balances are rewritten under row locks. Reconciliation never creates
transactions or adjustments.

Usage:
    from ledger.services import ReconciliationService

    result = ReconciliationService.reconcile_ledger(user, ledger.id)
    if result.success:
        for drift in result.data.drifts:
            print(drift.account_id, drift.stored, drift.expected)

    # Rewrite drifting balances
    ReconciliationService.reconcile_ledger(user, ledger.id, heal=True)
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from django.db.models import Sum
from django.utils import timezone

from core.services import BaseService, ServiceResult
from ledger.authorization import require_ledger_owner
from ledger.balances import BalanceDeltas, effects_of, lock_accounts
from ledger.models import Account, BalanceAdjustment, Transaction

if TYPE_CHECKING:
    from typing import Any

    from authentication.models import User
    from ledger.models import Ledger


logger = logging.getLogger(__name__)


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class BalanceDrift:
    """An account whose stored balance differs from its history."""

    account_id: uuid.UUID
    stored: int
    expected: int

    @property
    def drift(self) -> int:
        return self.stored - self.expected

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": str(self.account_id),
            "stored": self.stored,
            "expected": self.expected,
            "drift": self.drift,
        }


@dataclass
class ReconciliationReport:
    """Summary of one reconciliation pass over a ledger."""

    ledger_id: uuid.UUID
    accounts_checked: int = 0
    drifts: list[BalanceDrift] = field(default_factory=list)
    healed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "ledger_id": str(self.ledger_id),
            "accounts_checked": self.accounts_checked,
            "drifts": [drift.to_dict() for drift in self.drifts],
            "healed": self.healed,
        }


# =============================================================================
# Service
# =============================================================================


class ReconciliationService(BaseService):
    """Recomputes account balances from history and repairs drift."""

    @staticmethod
    def expected_balances(ledger: Ledger) -> dict[uuid.UUID, int]:
        """
        Expected balance of every account in the ledger, from history alone.
        """
        accounts = Account.objects.filter(ledger=ledger).values_list(
            "id", "initial_balance"
        )
        history = BalanceDeltas(dict(accounts))

        for txn in Transaction.objects.filter(ledger=ledger).only(
            "type", "amount", "account_id", "transfer_account_id"
        ):
            for account_id, delta in effects_of(txn).items():
                history.add(account_id, delta)

        adjustments = (
            BalanceAdjustment.objects.filter(ledger=ledger)
            .values("account_id")
            .annotate(total=Sum("delta"))
            .order_by()
        )
        for row in adjustments:
            history.add(row["account_id"], row["total"])

        return {account_id: history.get(account_id) for account_id, _ in accounts}

    @classmethod
    def _find_drifts(
        cls, ledger: Ledger, stored: dict[uuid.UUID, int]
    ) -> list[BalanceDrift]:
        expected = cls.expected_balances(ledger)
        return [
            BalanceDrift(
                account_id=account_id,
                stored=stored[account_id],
                expected=expected.get(account_id, 0),
            )
            for account_id in sorted(stored)
            if stored[account_id] != expected.get(account_id, 0)
        ]

    @classmethod
    def reconcile_ledger(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        heal: bool = False,
    ) -> ServiceResult[ReconciliationReport]:
        """
        Compare stored balances against history for every account.

        Args:
            user: Current principal
            ledger_id: Ledger to reconcile
            heal: Rewrite drifting balances to their expected values

        Returns:
            ServiceResult containing a ReconciliationReport. The result is a
            success even when drift is found; check report.drifts.
        """
        ledger = require_ledger_owner(user, ledger_id)
        report = ReconciliationReport(ledger_id=ledger.id)

        if not heal:
            stored = dict(
                Account.objects.filter(ledger=ledger).values_list(
                    "id", "current_balance"
                )
            )
            report.accounts_checked = len(stored)
            report.drifts = cls._find_drifts(ledger, stored)
            if report.drifts:
                logger.warning(
                    f"Ledger {ledger.id}: {len(report.drifts)} account(s) drifted"
                )
            return ServiceResult.success(report)

        with cls.atomic():
            account_ids = Account.objects.filter(ledger=ledger).values_list(
                "id", flat=True
            )
            locked = lock_accounts(account_ids)
            stored = {
                account_id: account.current_balance
                for account_id, account in locked.items()
            }
            report.accounts_checked = len(stored)
            report.drifts = cls._find_drifts(ledger, stored)

            now = timezone.now()
            for drift in report.drifts:
                Account.objects.filter(id=drift.account_id).update(
                    current_balance=drift.expected,
                    updated_at=now,
                )
            report.healed = bool(report.drifts)

        for drift in report.drifts:
            logger.warning(
                f"Healed account {drift.account_id}: "
                f"{drift.stored} -> {drift.expected} (drift {drift.drift:+d})"
            )
        return ServiceResult.success(report)
