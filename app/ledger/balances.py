"""
Balance effects of transactions and locked balance updates.

Each transaction type moves money with its own signs:

    expense:  account -= amount
    income:   account += amount
    transfer: account -= amount, transfer_account += amount

Mutations never patch balances leg by leg. They build the signed effect of
the old state and the new state, subtract, and apply one net delta per
account. This covers amount edits, account moves and transfer leg swaps
with the same code path and never double-patches an account.

Usage:
    from ledger.balances import BalanceDeltas, apply_deltas, lock_accounts, transaction_effects

    old = transaction_effects(txn.type, txn.amount, txn.account_id, txn.transfer_account_id)
    new = transaction_effects(txn.type, 4000, other_account.id, None)
    net = new - old

    with transaction.atomic():
        accounts = lock_accounts(net.account_ids() | {txn.account_id})
        apply_deltas(net)
"""

from __future__ import annotations

import uuid
from collections import defaultdict
from typing import TYPE_CHECKING

from django.db.models import F
from django.utils import timezone

from ledger.models import Account, TransactionType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class BalanceDeltas:
    """
    Per-account signed balance changes.

    Supports accumulation (add), combination (+, -) and iteration over the
    non-zero entries in ascending account id order.

    Example:
        deltas = BalanceDeltas()
        deltas.add(cash.id, -500)
        deltas.add(cash.id, 200)
        dict(deltas.items())  # {cash.id: -300}
    """

    def __init__(self, deltas: dict[uuid.UUID, int] | None = None):
        self._deltas: defaultdict[uuid.UUID, int] = defaultdict(int)
        for account_id, delta in (deltas or {}).items():
            self.add(account_id, delta)

    def add(self, account_id: uuid.UUID, delta: int) -> None:
        """Accumulate a signed delta for an account."""
        self._deltas[account_id] += delta

    def get(self, account_id: uuid.UUID) -> int:
        return self._deltas.get(account_id, 0)

    def account_ids(self) -> set[uuid.UUID]:
        """Accounts with a non-zero net delta."""
        return {account_id for account_id, delta in self._deltas.items() if delta}

    def items(self) -> Iterator[tuple[uuid.UUID, int]]:
        """Yield (account_id, delta) for non-zero deltas, sorted by account id."""
        for account_id in sorted(self.account_ids()):
            yield account_id, self._deltas[account_id]

    def __add__(self, other: BalanceDeltas) -> BalanceDeltas:
        result = BalanceDeltas(dict(self._deltas))
        for account_id, delta in other._deltas.items():
            result.add(account_id, delta)
        return result

    def __sub__(self, other: BalanceDeltas) -> BalanceDeltas:
        result = BalanceDeltas(dict(self._deltas))
        for account_id, delta in other._deltas.items():
            result.add(account_id, -delta)
        return result

    def __bool__(self) -> bool:
        return bool(self.account_ids())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, BalanceDeltas):
            return NotImplemented
        return dict(self.items()) == dict(other.items())

    def __repr__(self) -> str:
        return f"BalanceDeltas({dict(self.items())!r})"


def transaction_effects(
    txn_type: str,
    amount: int,
    account_id: uuid.UUID,
    transfer_account_id: uuid.UUID | None = None,
) -> BalanceDeltas:
    """
    Signed balance effect of a transaction state.

    Args:
        txn_type: expense, income or transfer
        amount: Positive amount in minor units
        account_id: Affected account (transfer source)
        transfer_account_id: Transfer destination

    Returns:
        BalanceDeltas for the accounts the transaction touches

    Raises:
        ValueError: If the type is unknown or a transfer has no destination
    """
    deltas = BalanceDeltas()
    if txn_type == TransactionType.EXPENSE:
        deltas.add(account_id, -amount)
    elif txn_type == TransactionType.INCOME:
        deltas.add(account_id, amount)
    elif txn_type == TransactionType.TRANSFER:
        if transfer_account_id is None:
            raise ValueError("Transfer transaction is missing transfer_account_id")
        deltas.add(account_id, -amount)
        deltas.add(transfer_account_id, amount)
    else:
        raise ValueError(f"Unknown transaction type: {txn_type}")
    return deltas


def effects_of(txn) -> BalanceDeltas:
    """Signed balance effect of a persisted Transaction."""
    return transaction_effects(
        txn.type, txn.amount, txn.account_id, txn.transfer_account_id
    )


def lock_accounts(account_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, Account]:
    """
    Lock account rows for update in ascending id order.

    Must be called inside transaction.atomic(). A consistent lock order
    means concurrent mutations cannot deadlock on each other.

    Returns:
        Mapping of id to locked Account. Unknown ids are simply absent.
    """
    ids = sorted(set(account_ids))
    if not ids:
        return {}
    return {
        account.id: account
        for account in Account.objects.select_for_update().filter(id__in=ids).order_by("id")
    }


def apply_deltas(deltas: BalanceDeltas) -> None:
    """
    Apply net deltas with one UPDATE per account.

    Uses F() expressions so the increment happens in the database against
    the locked row.
    """
    now = timezone.now()
    for account_id, delta in deltas.items():
        Account.objects.filter(id=account_id).update(
            current_balance=F("current_balance") + delta,
            updated_at=now,
        )
