"""
Data types for ledger operations.

This module defines dataclasses used to pass structured input into the
transaction service.

Types:
    TransactionPatch: Partial update for an existing transaction
    TransactionFilters: Query filters for listing transactions

Usage:
    from ledger.types import TransactionPatch, TransactionFilters

    # Change amount and move the expense to another account
    patch = TransactionPatch(amount=4000, account_id=other_account.id)
    TransactionService.update(user, transaction.id, patch)

    # Transactions touching one account, newest first
    filters = TransactionFilters(account_id=account.id, limit=50)
    TransactionService.list(user, ledger.id, filters)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass


@dataclass
class TransactionPatch:
    """
    Partial update for a transaction.

    Every field defaults to None, meaning "leave unchanged". The note is
    cleared with clear_note=True rather than by sending an empty string.

    Attributes:
        amount: New positive amount in minor units
        occurred_at: New event time in milliseconds since epoch
        account_id: New account (transfer source for transfers)
        category_id: New category (expense and income only)
        transfer_account_id: New transfer destination (transfers only)
        note: New note, must be non-empty after trimming
        clear_note: Remove the existing note
    """

    amount: int | None = None
    occurred_at: int | float | None = None
    account_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    transfer_account_id: uuid.UUID | None = None
    note: str | None = None
    clear_note: bool = False


@dataclass
class TransactionFilters:
    """
    Filters for listing transactions.

    Attributes:
        type: Only this transaction type
        account_id: Transactions where the account is source or destination
        category_id: Only this category
        occurred_from: Inclusive lower bound on occurred_at (ms)
        occurred_to: Inclusive upper bound on occurred_at (ms)
        min_amount: Inclusive lower bound on amount
        max_amount: Inclusive upper bound on amount
        search: Case-insensitive substring of the note
        limit: Maximum rows returned (default 100)
    """

    type: str | None = None
    account_id: uuid.UUID | None = None
    category_id: uuid.UUID | None = None
    occurred_from: int | float | None = None
    occurred_to: int | float | None = None
    min_amount: int | None = None
    max_amount: int | None = None
    search: str | None = None
    limit: int | None = None
