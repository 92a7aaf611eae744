"""
End-to-end ledger workflows and balance invariants.

These tests drive the services through realistic sequences and check the
ledger-wide invariant after every step:

    current_balance == initial_balance
                       + sum(signed effects of live transactions)
                       + sum(adjustment deltas)

The random sequence is seeded so failures reproduce.
"""

import random

import pytest
from django.db.models import Sum

from core.exceptions import BaseApplicationError
from ledger.balances import effects_of
from ledger.exceptions import (
    CategoryTypeMismatch,
    CrossLedgerReference,
    InactiveAccount,
    InvalidArgument,
    LedgerAccessDenied,
)
from ledger.models import Account, AccountType, BalanceAdjustment, CategoryType, Transaction
from ledger.services import (
    AccountService,
    CategoryService,
    LedgerService,
    ReconciliationService,
    TransactionService,
)
from ledger.types import TransactionFilters, TransactionPatch

T0 = 1_710_504_000_000


def assert_balance_invariant(ledger):
    """Every account balance equals its history."""
    expected = {
        account.id: account.initial_balance
        for account in Account.objects.filter(ledger=ledger)
    }
    for txn in Transaction.objects.filter(ledger=ledger):
        for account_id, delta in effects_of(txn).items():
            expected[account_id] += delta
    for row in (
        BalanceAdjustment.objects.filter(ledger=ledger)
        .values("account_id")
        .annotate(total=Sum("delta"))
        .order_by()
    ):
        expected[row["account_id"]] += row["total"]

    actual = dict(
        Account.objects.filter(ledger=ledger).values_list("id", "current_balance")
    )
    assert actual == expected


def balance(account):
    account.refresh_from_db()
    return account.current_balance


# =============================================================================
# Randomized invariant
# =============================================================================


class TestRandomOperationSequence:
    """
    Random creates, updates, removals and adjustments keep balances exact.

    Why it matters: this is the core promise of the ledger. Any path that
    double-applies or forgets a delta shows up here as drift.
    """

    @pytest.mark.parametrize("seed", [7, 2024])
    def test_invariant_holds_after_every_step(self, user, seed):
        rng = random.Random(seed)
        ledger = LedgerService.ensure_default(user)
        accounts = [
            AccountService.create(
                user, ledger.id, name=f"Account {i}", type=AccountType.BANK,
                initial_balance=rng.randint(-5000, 50_000),
            )
            for i in range(4)
        ]
        expense_categories = CategoryService.list(
            user, ledger.id, type=CategoryType.EXPENSE
        )
        income_categories = CategoryService.list(
            user, ledger.id, type=CategoryType.INCOME
        )
        live = []

        for step in range(120):
            operation = rng.choice(
                ["expense", "income", "transfer", "update", "remove", "adjust"]
            )
            amount = rng.randint(1, 20_000)
            occurred_at = T0 + step * 60_000
            try:
                if operation == "expense":
                    live.append(
                        TransactionService.create_expense(
                            user, ledger.id, rng.choice(accounts).id,
                            rng.choice(expense_categories).id, amount, occurred_at,
                        ).id
                    )
                elif operation == "income":
                    live.append(
                        TransactionService.create_income(
                            user, ledger.id, rng.choice(accounts).id,
                            rng.choice(income_categories).id, amount, occurred_at,
                        ).id
                    )
                elif operation == "transfer":
                    source, destination = rng.sample(accounts, 2)
                    live.append(
                        TransactionService.create_transfer(
                            user, ledger.id, source.id, destination.id,
                            amount, occurred_at,
                        ).id
                    )
                elif operation == "update" and live:
                    txn = Transaction.objects.get(id=rng.choice(live))
                    patch = TransactionPatch(amount=amount)
                    if rng.random() < 0.5:
                        if txn.type == "transfer":
                            source, destination = rng.sample(accounts, 2)
                            patch.account_id = source.id
                            patch.transfer_account_id = destination.id
                        else:
                            patch.account_id = rng.choice(accounts).id
                    TransactionService.update(user, txn.id, patch)
                elif operation == "remove" and live:
                    txn_id = live.pop(rng.randrange(len(live)))
                    TransactionService.remove(user, txn_id)
                elif operation == "adjust":
                    AccountService.adjust_balance(
                        user, rng.choice(accounts).id, rng.choice([-1, 1]) * amount
                    )
            except BaseApplicationError as exc:
                pytest.fail(f"step {step} ({operation}) was rejected: {exc}")

            assert_balance_invariant(ledger)

        report = ReconciliationService.reconcile_ledger(user, ledger.id).data
        assert report.drifts == []


# =============================================================================
# Fixed scenarios
# =============================================================================


class TestTransferSymmetry:
    def test_transfer_preserves_ledger_total(
        self, user, ledger, cash_account, bank_account
    ):
        total_before = balance(cash_account) + balance(bank_account)

        txn = TransactionService.create_transfer(
            user, ledger.id, cash_account.id, bank_account.id, 3333, T0
        )
        TransactionService.update(user, txn.id, TransactionPatch(amount=1111))

        assert balance(cash_account) == 10_000 - 1111
        assert balance(bank_account) == 1111
        assert balance(cash_account) + balance(bank_account) == total_before


class TestNoOpPatch:
    def test_repeating_a_patch_does_not_drift(
        self, user, ledger, cash_account, food_category
    ):
        txn = TransactionService.create_expense(
            user, ledger.id, cash_account.id, food_category.id, 2000, T0
        )

        for _ in range(3):
            TransactionService.update(
                user,
                txn.id,
                TransactionPatch(amount=2000, account_id=cash_account.id),
            )

        assert balance(cash_account) == 8000
        assert_balance_invariant(ledger)


class TestAmountRoundTrip:
    def test_5000_4000_3500_5000(self, user, ledger, cash_account, food_category):
        txn = TransactionService.create_expense(
            user, ledger.id, cash_account.id, food_category.id, 5000, T0
        )
        assert balance(cash_account) == 5000

        TransactionService.update(user, txn.id, TransactionPatch(amount=4000))
        assert balance(cash_account) == 6000

        TransactionService.update(user, txn.id, TransactionPatch(amount=3500))
        assert balance(cash_account) == 6500

        TransactionService.update(user, txn.id, TransactionPatch(amount=5000))
        assert balance(cash_account) == 5000


class TestAccountChangeRebalance:
    def test_income_moves_between_accounts(self, user, ledger, salary_category):
        account_a = AccountService.create(
            user, ledger.id, name="A", type=AccountType.CASH, initial_balance=1000
        )
        account_b = AccountService.create(
            user, ledger.id, name="B", type=AccountType.BANK, initial_balance=0
        )

        txn = TransactionService.create_income(
            user, ledger.id, account_a.id, salary_category.id, 200, T0
        )
        assert balance(account_a) == 1200
        assert balance(account_b) == 0

        TransactionService.update(
            user, txn.id, TransactionPatch(account_id=account_b.id)
        )
        assert balance(account_a) == 1000
        assert balance(account_b) == 200


class TestRejectionsLeaveNoTrace:
    """Every rejected mutation leaves balances and rows untouched."""

    def test_rejections(
        self,
        user,
        other_user,
        ledger,
        cash_account,
        bank_account,
        inactive_account,
        foreign_account,
        food_category,
        salary_category,
    ):
        txn = TransactionService.create_expense(
            user, ledger.id, cash_account.id, food_category.id, 1000, T0
        )
        snapshot = dict(Account.objects.values_list("id", "current_balance"))
        count = Transaction.objects.count()

        rejected = [
            (InvalidArgument, lambda: TransactionService.create_expense(
                user, ledger.id, cash_account.id, food_category.id, 0, T0)),
            (CategoryTypeMismatch, lambda: TransactionService.create_expense(
                user, ledger.id, cash_account.id, salary_category.id, 10, T0)),
            (InactiveAccount, lambda: TransactionService.create_transfer(
                user, ledger.id, cash_account.id, inactive_account.id, 10, T0)),
            (CrossLedgerReference, lambda: TransactionService.create_transfer(
                user, ledger.id, cash_account.id, foreign_account.id, 10, T0)),
            (LedgerAccessDenied, lambda: TransactionService.remove(
                other_user, txn.id)),
            (InvalidArgument, lambda: TransactionService.update(
                user, txn.id, TransactionPatch(amount=-5))),
            (InactiveAccount, lambda: TransactionService.update(
                user, txn.id, TransactionPatch(account_id=inactive_account.id))),
            (InvalidArgument, lambda: AccountService.adjust_balance(
                user, bank_account.id, 0)),
        ]
        for error_class, call in rejected:
            with pytest.raises(error_class):
                call()

        assert dict(Account.objects.values_list("id", "current_balance")) == snapshot
        assert Transaction.objects.count() == count
        assert not BalanceAdjustment.objects.exists()


class TestAccountFilter:
    def test_matches_source_and_destination(
        self, user, ledger, cash_account, bank_account, food_category
    ):
        outgoing = TransactionService.create_transfer(
            user, ledger.id, cash_account.id, bank_account.id, 100, T0
        )
        incoming = TransactionService.create_transfer(
            user, ledger.id, bank_account.id, cash_account.id, 50, T0 + 1
        )
        unrelated = TransactionService.create_expense(
            user, ledger.id, cash_account.id, food_category.id, 10, T0 + 2
        )

        bank_history = TransactionService.list(
            user, ledger.id, TransactionFilters(account_id=bank_account.id)
        )

        assert {txn.id for txn in bank_history} == {outgoing.id, incoming.id}
        assert unrelated.id not in {txn.id for txn in bank_history}
