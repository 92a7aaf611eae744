"""
Tests for balance effect computation and locked balance updates.

BalanceDeltas and transaction_effects are pure; lock_accounts and
apply_deltas hit the database.
"""

import uuid

import pytest
from django.db import transaction

from ledger.balances import (
    BalanceDeltas,
    apply_deltas,
    effects_of,
    lock_accounts,
    transaction_effects,
)
from ledger.models import TransactionType
from ledger.tests.factories import AccountFactory, TransferFactory

A = uuid.UUID("00000000-0000-0000-0000-00000000000a")
B = uuid.UUID("00000000-0000-0000-0000-00000000000b")
C = uuid.UUID("00000000-0000-0000-0000-00000000000c")


class TestBalanceDeltas:
    def test_add_accumulates_per_account(self):
        deltas = BalanceDeltas()
        deltas.add(A, -500)
        deltas.add(A, 200)
        deltas.add(B, 100)

        assert deltas.get(A) == -300
        assert deltas.get(B) == 100
        assert deltas.get(C) == 0

    def test_zero_entries_are_not_reported(self):
        deltas = BalanceDeltas({A: 100, B: 0})
        deltas.add(A, -100)

        assert deltas.account_ids() == set()
        assert list(deltas.items()) == []
        assert not deltas

    def test_items_are_sorted_by_account_id(self):
        deltas = BalanceDeltas({C: 3, A: 1, B: 2})

        assert [account_id for account_id, _ in deltas.items()] == [A, B, C]

    def test_subtraction_yields_net_change(self):
        old = BalanceDeltas({A: -5000})
        new = BalanceDeltas({A: -4000})

        assert new - old == BalanceDeltas({A: 1000})

    def test_addition_combines_accounts(self):
        combined = BalanceDeltas({A: 10}) + BalanceDeltas({A: 5, B: -5})

        assert combined == BalanceDeltas({A: 15, B: -5})

    def test_operators_do_not_mutate_operands(self):
        left = BalanceDeltas({A: 10})
        right = BalanceDeltas({A: 10})

        _ = left - right

        assert left.get(A) == 10
        assert right.get(A) == 10


class TestTransactionEffects:
    def test_expense_debits_account(self):
        effects = transaction_effects(TransactionType.EXPENSE, 700, A)

        assert effects == BalanceDeltas({A: -700})

    def test_income_credits_account(self):
        effects = transaction_effects(TransactionType.INCOME, 700, A)

        assert effects == BalanceDeltas({A: 700})

    def test_transfer_moves_money_between_accounts(self):
        effects = transaction_effects(TransactionType.TRANSFER, 700, A, B)

        assert effects == BalanceDeltas({A: -700, B: 700})

    def test_transfer_conserves_total(self):
        effects = transaction_effects(TransactionType.TRANSFER, 123, A, B)

        assert sum(delta for _, delta in effects.items()) == 0

    def test_transfer_without_destination_is_an_error(self):
        with pytest.raises(ValueError):
            transaction_effects(TransactionType.TRANSFER, 100, A, None)

    def test_unknown_type_is_an_error(self):
        with pytest.raises(ValueError):
            transaction_effects("refund", 100, A)

    def test_swapping_transfer_legs_is_twice_the_amount(self):
        old = transaction_effects(TransactionType.TRANSFER, 200, A, B)
        new = transaction_effects(TransactionType.TRANSFER, 200, B, A)

        assert new - old == BalanceDeltas({A: 400, B: -400})

    def test_moving_expense_between_accounts(self):
        old = transaction_effects(TransactionType.EXPENSE, 200, A)
        new = transaction_effects(TransactionType.EXPENSE, 200, B)

        assert new - old == BalanceDeltas({A: 200, B: -200})


@pytest.mark.django_db
class TestEffectsOf:
    def test_reads_persisted_transfer(self):
        txn = TransferFactory(amount=250)

        assert effects_of(txn) == BalanceDeltas(
            {txn.account_id: -250, txn.transfer_account_id: 250}
        )


@pytest.mark.django_db
class TestLockAndApply:
    def test_lock_accounts_returns_known_rows(self):
        first = AccountFactory()
        second = AccountFactory(ledger=first.ledger)

        with transaction.atomic():
            locked = lock_accounts([second.id, first.id, uuid.uuid4()])

        assert set(locked) == {first.id, second.id}

    def test_lock_accounts_with_no_ids(self):
        with transaction.atomic():
            assert lock_accounts([]) == {}

    def test_apply_deltas_updates_each_account(self):
        first = AccountFactory(initial_balance=1000)
        second = AccountFactory(ledger=first.ledger, initial_balance=0)

        with transaction.atomic():
            lock_accounts([first.id, second.id])
            apply_deltas(BalanceDeltas({first.id: -300, second.id: 300}))

        first.refresh_from_db()
        second.refresh_from_db()
        assert first.current_balance == 700
        assert second.current_balance == 300
        assert first.initial_balance == 1000

    def test_apply_deltas_skips_zero_entries(self):
        account = AccountFactory(initial_balance=1000)
        before = account.updated_at

        apply_deltas(BalanceDeltas({account.id: 0}))

        account.refresh_from_db()
        assert account.current_balance == 1000
        assert account.updated_at == before
