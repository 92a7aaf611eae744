"""
Account store and balance-adjustment ledger.

Accounts are created with an opening balance and afterwards only move
through transactions or explicit, audited balance adjustments.

Usage:
    from ledger.services import AccountService

    account = AccountService.create(user, ledger.id, "Wallet", "cash", 10000)
    AccountService.adjust_balance(user, account.id, -250, reason="Counted cash")
    AccountService.list_adjustments(user, ledger.id, account_id=account.id)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings

from core.model_mixins import Status
from core.services import BaseService
from ledger.authorization import (
    get_or_none,
    require_account_owner,
    require_ledger_owner,
)
from ledger.balances import BalanceDeltas, apply_deltas, lock_accounts
from ledger.exceptions import AccountNotFound, CrossLedgerReference, InvalidArgument
from ledger.models import Account, AccountType, BalanceAdjustment
from ledger.validation import (
    assert_choice,
    assert_integer_amount,
    assert_limit,
    normalize_required_name,
)

if TYPE_CHECKING:
    import uuid

    from authentication.models import User


class AccountService(BaseService):
    """
    Service for account lifecycle and manual balance adjustments.

    All methods take the current principal and authorize against the
    owning ledger before reading or writing.
    """

    @classmethod
    def list(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        status: str | None = None,
    ) -> list[Account]:
        """
        List accounts in a ledger, oldest first.

        Args:
            user: Current principal
            ledger_id: Ledger to list
            status: Optional active/inactive filter
        """
        ledger = require_ledger_owner(user, ledger_id)
        queryset = Account.objects.filter(ledger=ledger)
        if status is not None:
            assert_choice(status, Status, "status")
            queryset = queryset.filter(status=status)
        return list(queryset.order_by("created_at", "id"))

    @classmethod
    def create(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        name: str,
        type: str,
        initial_balance: int,
    ) -> Account:
        """
        Create an active account whose current balance starts at the
        initial balance.

        Raises:
            InvalidArgument: Empty name, unknown type, non-integer balance
        """
        ledger = require_ledger_owner(user, ledger_id)
        name = normalize_required_name(name, "name")
        assert_choice(type, AccountType, "type")
        assert_integer_amount(initial_balance, "initial_balance")

        account = Account.objects.create(
            ledger=ledger,
            name=name,
            type=type,
            status=Status.ACTIVE,
            initial_balance=initial_balance,
            current_balance=initial_balance,
        )
        cls.get_logger().info(
            f"Created account {account.id} in ledger {ledger.id} "
            f"with initial balance {initial_balance}"
        )
        return account

    @classmethod
    def update(
        cls,
        user: User,
        account_id: uuid.UUID,
        name: str | None = None,
        type: str | None = None,
        status: str | None = None,
    ) -> Account:
        """
        Patch name, type and/or status. Balances are never edited here.

        Raises:
            AccountNotFound: If the account does not exist
            InvalidArgument: Empty name or unknown type/status
        """
        account = require_account_owner(user, account_id)

        update_fields = ["updated_at"]
        if name is not None:
            account.name = normalize_required_name(name, "name")
            update_fields.append("name")
        if type is not None:
            assert_choice(type, AccountType, "type")
            account.type = type
            update_fields.append("type")
        if status is not None:
            assert_choice(status, Status, "status")
            account.status = status
            update_fields.append("status")

        account.save(update_fields=update_fields)
        cls.get_logger().info(
            f"Updated account {account.id}: {', '.join(update_fields[1:]) or 'no fields'}"
        )
        return account

    @classmethod
    def adjust_balance(
        cls,
        user: User,
        account_id: uuid.UUID,
        delta: int,
        reason: str | None = None,
    ) -> Account:
        """
        Change a balance without a transaction, leaving an audit record.

        Args:
            user: Current principal, recorded as the actor
            account_id: Account to adjust
            delta: Signed, non-zero change in minor units
            reason: Optional explanation, non-empty when given

        Returns:
            The account with its refreshed balance

        Raises:
            AccountNotFound: If the account does not exist
            InvalidArgument: Non-integer or zero delta, blank reason
        """
        account = require_account_owner(user, account_id)
        assert_integer_amount(delta, "delta")
        if delta == 0:
            raise InvalidArgument(
                "delta cannot be 0",
                details={"field": "delta", "constraint": "non_zero"},
            )

        if reason is not None:
            reason = reason.strip()
            if not reason:
                raise InvalidArgument(
                    "reason cannot be empty",
                    details={"field": "reason", "constraint": "non_empty"},
                )

        with cls.atomic():
            locked = lock_accounts([account.id])
            if account.id not in locked:
                raise AccountNotFound(
                    "Account not found",
                    details={"account_id": str(account.id)},
                )
            apply_deltas(BalanceDeltas({account.id: delta}))
            BalanceAdjustment.objects.create(
                ledger_id=account.ledger_id,
                account_id=account.id,
                delta=delta,
                reason=reason,
                actor=user,
            )

        account.refresh_from_db()
        cls.get_logger().info(
            f"Adjusted account {account.id} by {delta:+d} "
            f"(balance now {account.current_balance})"
        )
        return account

    @classmethod
    def list_adjustments(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        account_id: uuid.UUID | None = None,
        limit: int | None = None,
    ) -> list[BalanceAdjustment]:
        """
        List balance adjustments, newest first.

        Args:
            user: Current principal
            ledger_id: Ledger to list
            account_id: Restrict to one account of the ledger
            limit: Page size in [1, LEDGER_ADJUSTMENT_LIST_MAX_LIMIT], default 20

        Raises:
            InvalidArgument: Limit out of range
            AccountNotFound: If account_id does not exist
            CrossLedgerReference: If the account belongs to another ledger
        """
        ledger = require_ledger_owner(user, ledger_id)
        limit = assert_limit(
            limit,
            "limit",
            maximum=settings.LEDGER_ADJUSTMENT_LIST_MAX_LIMIT,
            default=settings.LEDGER_ADJUSTMENT_LIST_DEFAULT_LIMIT,
        )

        queryset = BalanceAdjustment.objects.filter(ledger=ledger)
        if account_id is not None:
            account = get_or_none(Account.objects.all(), account_id)
            if account is None:
                raise AccountNotFound(
                    "Account not found",
                    details={"account_id": str(account_id)},
                )
            if account.ledger_id != ledger.id:
                raise CrossLedgerReference(
                    "Account does not belong to ledger",
                    details={
                        "account_id": str(account.id),
                        "ledger_id": str(ledger.id),
                    },
                )
            queryset = queryset.filter(account=account)

        return list(queryset.order_by("-created_at", "-id")[:limit])
