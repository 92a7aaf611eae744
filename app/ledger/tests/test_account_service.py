"""
Tests for AccountService: account lifecycle and manual balance adjustments.

Verifies:
- Accounts start with current_balance == initial_balance
- Updates never touch balances
- Adjustments change the balance and leave an audit record
- Adjustment listing is ledger-scoped, newest first and bounded
"""

import uuid

import pytest

from core.model_mixins import Status
from ledger.exceptions import (
    AccountNotFound,
    CrossLedgerReference,
    InvalidArgument,
    LedgerAccessDenied,
)
from ledger.models import Account, AccountType, BalanceAdjustment
from ledger.services import AccountService


# =============================================================================
# TestAccountServiceCreate
# =============================================================================


class TestAccountServiceCreate:
    def test_creates_active_account_with_matching_balances(self, user, ledger):
        account = AccountService.create(
            user, ledger.id, name=" Savings ", type=AccountType.BANK, initial_balance=2500
        )

        assert account.name == "Savings"
        assert account.status == Status.ACTIVE
        assert account.initial_balance == 2500
        assert account.current_balance == 2500
        assert account.ledger_id == ledger.id

    def test_negative_initial_balance_is_allowed(self, user, ledger):
        account = AccountService.create(
            user, ledger.id, name="Card", type=AccountType.CREDIT, initial_balance=-700
        )

        assert account.current_balance == -700

    @pytest.mark.parametrize("initial_balance", [10.5, 10.0, "10", True])
    def test_rejects_non_integer_initial_balance(self, user, ledger, initial_balance):
        with pytest.raises(InvalidArgument) as exc_info:
            AccountService.create(
                user,
                ledger.id,
                name="Cash",
                type=AccountType.CASH,
                initial_balance=initial_balance,
            )

        assert exc_info.value.details["field"] == "initial_balance"
        assert not Account.objects.filter(ledger=ledger).exists()

    def test_rejects_initial_balance_beyond_storable_range(self, user, ledger):
        with pytest.raises(InvalidArgument) as exc_info:
            AccountService.create(
                user,
                ledger.id,
                name="Cash",
                type=AccountType.CASH,
                initial_balance=10**19,
            )

        assert exc_info.value.details["constraint"] == "range"
        assert not Account.objects.filter(ledger=ledger).exists()

    def test_rejects_name_over_max_length(self, user, ledger):
        with pytest.raises(InvalidArgument) as exc_info:
            AccountService.create(
                user,
                ledger.id,
                name="x" * 101,
                type=AccountType.CASH,
                initial_balance=0,
            )

        assert exc_info.value.details["constraint"] == "max_length"
        assert not Account.objects.filter(ledger=ledger).exists()

    def test_rejects_empty_name(self, user, ledger):
        with pytest.raises(InvalidArgument):
            AccountService.create(
                user, ledger.id, name="  ", type=AccountType.CASH, initial_balance=0
            )

    def test_rejects_unknown_type(self, user, ledger):
        with pytest.raises(InvalidArgument):
            AccountService.create(
                user, ledger.id, name="Coins", type="crypto", initial_balance=0
            )

    def test_rejects_other_users_ledger(self, other_user, ledger):
        with pytest.raises(LedgerAccessDenied):
            AccountService.create(
                other_user, ledger.id, name="X", type=AccountType.CASH, initial_balance=0
            )


# =============================================================================
# TestAccountServiceList
# =============================================================================


class TestAccountServiceList:
    def test_lists_accounts_of_ledger(
        self, user, ledger, cash_account, bank_account, foreign_account
    ):
        accounts = AccountService.list(user, ledger.id)

        assert {account.id for account in accounts} == {
            cash_account.id,
            bank_account.id,
        }

    def test_filters_by_status(self, user, ledger, cash_account, inactive_account):
        inactive = AccountService.list(user, ledger.id, status=Status.INACTIVE)

        assert [account.id for account in inactive] == [inactive_account.id]

    def test_rejects_unknown_status(self, user, ledger):
        with pytest.raises(InvalidArgument):
            AccountService.list(user, ledger.id, status="archived")


# =============================================================================
# TestAccountServiceUpdate
# =============================================================================


class TestAccountServiceUpdate:
    def test_updates_name_type_and_status(self, user, cash_account):
        account = AccountService.update(
            user,
            cash_account.id,
            name="Piggy Bank",
            type=AccountType.WALLET,
            status=Status.INACTIVE,
        )

        assert account.name == "Piggy Bank"
        assert account.type == AccountType.WALLET
        assert account.status == Status.INACTIVE

    def test_omitted_fields_are_unchanged(self, user, cash_account):
        account = AccountService.update(user, cash_account.id, name="Renamed")

        assert account.type == AccountType.CASH
        assert account.status == Status.ACTIVE
        assert account.current_balance == 10_000

    def test_reactivates_account(self, user, inactive_account):
        account = AccountService.update(
            user, inactive_account.id, status=Status.ACTIVE
        )

        assert account.is_active

    def test_rejects_blank_name(self, user, cash_account):
        with pytest.raises(InvalidArgument):
            AccountService.update(user, cash_account.id, name="")

    def test_unknown_account(self, user):
        with pytest.raises(AccountNotFound):
            AccountService.update(user, uuid.uuid4(), name="Nope")

    def test_rejects_other_user(self, other_user, cash_account):
        with pytest.raises(LedgerAccessDenied):
            AccountService.update(other_user, cash_account.id, name="Mine")


# =============================================================================
# TestAccountServiceAdjustBalance
# =============================================================================


class TestAccountServiceAdjustBalance:
    def test_applies_delta_and_records_adjustment(self, user, cash_account):
        account = AccountService.adjust_balance(
            user, cash_account.id, -1500, reason="  Bank statement  "
        )

        assert account.current_balance == 8500
        assert account.initial_balance == 10_000

        adjustment = BalanceAdjustment.objects.get(account=cash_account)
        assert adjustment.delta == -1500
        assert adjustment.reason == "Bank statement"
        assert adjustment.actor == user
        assert adjustment.ledger_id == cash_account.ledger_id

    def test_reason_is_optional(self, user, cash_account):
        AccountService.adjust_balance(user, cash_account.id, 300)

        assert BalanceAdjustment.objects.get(account=cash_account).reason is None

    def test_inactive_account_can_be_adjusted(self, user, inactive_account):
        account = AccountService.adjust_balance(user, inactive_account.id, 100)

        assert account.current_balance == 100

    def test_rejects_zero_delta(self, user, cash_account):
        with pytest.raises(InvalidArgument) as exc_info:
            AccountService.adjust_balance(user, cash_account.id, 0)

        assert exc_info.value.message == "delta cannot be 0"
        assert not BalanceAdjustment.objects.exists()

    @pytest.mark.parametrize("delta", [1.5, 100.0, "100", False])
    def test_rejects_non_integer_delta(self, user, cash_account, delta):
        with pytest.raises(InvalidArgument):
            AccountService.adjust_balance(user, cash_account.id, delta)

    def test_rejects_delta_beyond_storable_range(self, user, cash_account):
        with pytest.raises(InvalidArgument) as exc_info:
            AccountService.adjust_balance(user, cash_account.id, -(10**19))

        assert exc_info.value.details["constraint"] == "range"
        assert not BalanceAdjustment.objects.exists()
        cash_account.refresh_from_db()
        assert cash_account.current_balance == 10_000

    def test_rejects_blank_reason(self, user, cash_account):
        with pytest.raises(InvalidArgument) as exc_info:
            AccountService.adjust_balance(user, cash_account.id, 100, reason="   ")

        assert exc_info.value.message == "reason cannot be empty"
        cash_account.refresh_from_db()
        assert cash_account.current_balance == 10_000

    def test_rejects_other_user(self, other_user, cash_account):
        with pytest.raises(LedgerAccessDenied):
            AccountService.adjust_balance(other_user, cash_account.id, 100)

        assert not BalanceAdjustment.objects.exists()


# =============================================================================
# TestAccountServiceListAdjustments
# =============================================================================


class TestAccountServiceListAdjustments:
    def test_lists_newest_first(self, user, ledger, cash_account, bank_account):
        AccountService.adjust_balance(user, cash_account.id, 100)
        AccountService.adjust_balance(user, bank_account.id, 200)
        AccountService.adjust_balance(user, cash_account.id, 300)

        adjustments = AccountService.list_adjustments(user, ledger.id)

        assert [item.delta for item in adjustments] == [300, 200, 100]

    def test_filters_by_account(self, user, ledger, cash_account, bank_account):
        AccountService.adjust_balance(user, cash_account.id, 100)
        AccountService.adjust_balance(user, bank_account.id, 200)

        adjustments = AccountService.list_adjustments(
            user, ledger.id, account_id=bank_account.id
        )

        assert [item.delta for item in adjustments] == [200]

    def test_default_limit(self, user, ledger, cash_account, settings):
        settings.LEDGER_ADJUSTMENT_LIST_DEFAULT_LIMIT = 2
        for delta in (1, 2, 3):
            AccountService.adjust_balance(user, cash_account.id, delta)

        assert len(AccountService.list_adjustments(user, ledger.id)) == 2

    def test_rejects_limit_over_maximum(self, user, ledger, settings):
        settings.LEDGER_ADJUSTMENT_LIST_MAX_LIMIT = 200

        with pytest.raises(InvalidArgument) as exc_info:
            AccountService.list_adjustments(user, ledger.id, limit=201)

        assert exc_info.value.details["max"] == 200

    def test_rejects_account_from_other_ledger(self, user, ledger, foreign_account):
        with pytest.raises(CrossLedgerReference):
            AccountService.list_adjustments(
                user, ledger.id, account_id=foreign_account.id
            )

    def test_unknown_account(self, user, ledger):
        with pytest.raises(AccountNotFound):
            AccountService.list_adjustments(user, ledger.id, account_id=uuid.uuid4())
