"""
Tests for ReconciliationService.

Drift is produced by writing current_balance directly, which the services
never do.
"""

import pytest

from ledger.exceptions import LedgerAccessDenied
from ledger.models import Account, BalanceAdjustment, Transaction
from ledger.services import (
    AccountService,
    ReconciliationService,
    TransactionService,
)
from ledger.services.reconciliation import BalanceDrift
from ledger.tests.factories import ExpenseFactory

T0 = 1_710_504_000_000


@pytest.fixture
def busy_ledger(
    user, ledger, cash_account, bank_account, food_category, salary_category
):
    """A ledger whose balances came from every kind of mutation."""
    TransactionService.create_expense(
        user, ledger.id, cash_account.id, food_category.id, 2500, T0
    )
    TransactionService.create_income(
        user, ledger.id, bank_account.id, salary_category.id, 90_000, T0
    )
    TransactionService.create_transfer(
        user, ledger.id, bank_account.id, cash_account.id, 10_000, T0
    )
    AccountService.adjust_balance(user, cash_account.id, -300, reason="Fees")
    return ledger


class TestBalanceDrift:
    def test_drift_is_stored_minus_expected(self):
        drift = BalanceDrift(account_id="a", stored=900, expected=1000)

        assert drift.drift == -100
        assert drift.to_dict() == {
            "account_id": "a",
            "stored": 900,
            "expected": 1000,
            "drift": -100,
        }


class TestExpectedBalances:
    def test_matches_service_maintained_balances(
        self, busy_ledger, cash_account, bank_account
    ):
        expected = ReconciliationService.expected_balances(busy_ledger)

        assert expected == {
            cash_account.id: 10_000 - 2500 + 10_000 - 300,
            bank_account.id: 90_000 - 10_000,
        }


class TestReconcileLedger:
    def test_consistent_ledger_has_no_drift(
        self, user, busy_ledger, cash_account, bank_account
    ):
        result = ReconciliationService.reconcile_ledger(user, busy_ledger.id)

        assert result.success is True
        assert result.data.accounts_checked == 2
        assert result.data.drifts == []
        assert result.data.healed is False

    def test_reports_drift_without_changing_anything(
        self, user, busy_ledger, cash_account
    ):
        Account.objects.filter(id=cash_account.id).update(current_balance=1)

        result = ReconciliationService.reconcile_ledger(user, busy_ledger.id)

        report = result.data
        assert result.success is True
        assert [drift.account_id for drift in report.drifts] == [cash_account.id]
        assert report.drifts[0].stored == 1
        assert report.drifts[0].expected == 17_200
        assert report.healed is False
        cash_account.refresh_from_db()
        assert cash_account.current_balance == 1

    def test_heal_rewrites_drifting_balances(
        self, user, busy_ledger, cash_account, bank_account
    ):
        Account.objects.filter(id=cash_account.id).update(current_balance=0)
        Account.objects.filter(id=bank_account.id).update(current_balance=123)
        transactions_before = Transaction.objects.count()
        adjustments_before = BalanceAdjustment.objects.count()

        result = ReconciliationService.reconcile_ledger(
            user, busy_ledger.id, heal=True
        )

        assert result.data.healed is True
        assert len(result.data.drifts) == 2
        cash_account.refresh_from_db()
        bank_account.refresh_from_db()
        assert cash_account.current_balance == 17_200
        assert bank_account.current_balance == 80_000
        assert Transaction.objects.count() == transactions_before
        assert BalanceAdjustment.objects.count() == adjustments_before

        follow_up = ReconciliationService.reconcile_ledger(user, busy_ledger.id)
        assert follow_up.data.drifts == []

    def test_heal_on_consistent_ledger_is_noop(self, user, busy_ledger):
        result = ReconciliationService.reconcile_ledger(
            user, busy_ledger.id, heal=True
        )

        assert result.data.drifts == []
        assert result.data.healed is False

    def test_detects_rows_written_around_the_services(
        self, user, ledger, cash_account, food_category
    ):
        ExpenseFactory(
            ledger=ledger, account=cash_account, category=food_category, amount=400
        )

        report = ReconciliationService.reconcile_ledger(user, ledger.id).data

        assert report.drifts[0].drift == 400

    def test_rejects_other_user(self, other_user, ledger):
        with pytest.raises(LedgerAccessDenied):
            ReconciliationService.reconcile_ledger(other_user, ledger.id)
