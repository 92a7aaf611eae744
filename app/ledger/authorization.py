"""
Ownership guards for ledger operations.

Every ledger-scoped operation resolves the principal and checks that it owns
the target ledger before touching data. Entity-scoped operations (by account,
category or transaction id) first load the entity, then authorize through
the entity's ledger.

Usage:
    from ledger.authorization import require_ledger_owner, require_account_owner

    ledger = require_ledger_owner(user, ledger_id)
    account = require_account_owner(user, account_id)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import AuthenticationRequiredError
from ledger.exceptions import (
    AccountNotFound,
    CategoryNotFound,
    LedgerAccessDenied,
    LedgerNotFound,
    TransactionNotFound,
)
from ledger.models import Account, Category, Ledger, Transaction

if TYPE_CHECKING:
    import uuid

    from django.db.models import Model, QuerySet

    from authentication.models import User

logger = logging.getLogger(__name__)


def get_or_none(queryset: QuerySet, pk: uuid.UUID | str) -> Model | None:
    """
    Fetch a row by primary key, returning None when it does not exist.

    Malformed ids resolve to None rather than raising, so a garbage id is
    reported the same way as an unknown one.
    """
    try:
        return queryset.filter(pk=pk).first()
    except (ValueError, DjangoValidationError):
        return None


def require_user(user: User | None) -> User:
    """
    Resolve the current principal.

    Raises:
        AuthenticationRequiredError: If there is no authenticated user
    """
    if user is None or not user.is_authenticated:
        raise AuthenticationRequiredError("Unauthenticated")
    return user


def require_ledger_owner(user: User | None, ledger_id: uuid.UUID | str) -> Ledger:
    """
    Check that the principal owns the ledger.

    Returns:
        The Ledger

    Raises:
        AuthenticationRequiredError: If there is no authenticated user
        LedgerNotFound: If the ledger does not exist
        LedgerAccessDenied: If the ledger belongs to another user
    """
    user = require_user(user)
    ledger = get_or_none(Ledger.objects.all(), ledger_id)
    if ledger is None:
        raise LedgerNotFound(
            "Ledger not found",
            details={"ledger_id": str(ledger_id)},
        )
    if ledger.user_id != user.pk:
        logger.warning(f"User {user.pk} denied access to ledger {ledger.id}")
        raise LedgerAccessDenied(
            "Forbidden",
            details={"ledger_id": str(ledger.id)},
        )
    return ledger


def require_account_owner(user: User | None, account_id: uuid.UUID | str) -> Account:
    """
    Load an account and check that the principal owns its ledger.

    Raises:
        AccountNotFound: If the account does not exist
        AuthenticationRequiredError: If there is no authenticated user
        LedgerAccessDenied: If the account's ledger belongs to another user
    """
    account = get_or_none(Account.objects.all(), account_id)
    if account is None:
        raise AccountNotFound(
            "Account not found",
            details={"account_id": str(account_id)},
        )
    require_ledger_owner(user, account.ledger_id)
    return account


def require_category_owner(
    user: User | None, category_id: uuid.UUID | str
) -> Category:
    """
    Load a category and check that the principal owns its ledger.

    Raises:
        CategoryNotFound: If the category does not exist
        AuthenticationRequiredError: If there is no authenticated user
        LedgerAccessDenied: If the category's ledger belongs to another user
    """
    category = get_or_none(Category.objects.all(), category_id)
    if category is None:
        raise CategoryNotFound(
            "Category not found",
            details={"category_id": str(category_id)},
        )
    require_ledger_owner(user, category.ledger_id)
    return category


def require_transaction_owner(
    user: User | None,
    transaction_id: uuid.UUID | str,
    for_update: bool = False,
) -> Transaction:
    """
    Load a transaction and check that the principal owns its ledger.

    Args:
        user: Current principal
        transaction_id: Transaction to load
        for_update: Lock the transaction row (caller must be inside atomic())

    Raises:
        TransactionNotFound: If the transaction does not exist
        AuthenticationRequiredError: If there is no authenticated user
        LedgerAccessDenied: If the transaction's ledger belongs to another user
    """
    queryset = Transaction.objects.all()
    if for_update:
        queryset = queryset.select_for_update()
    txn = get_or_none(queryset, transaction_id)
    if txn is None:
        raise TransactionNotFound(
            "Transaction not found",
            details={"transaction_id": str(transaction_id)},
        )
    require_ledger_owner(user, txn.ledger_id)
    return txn
