"""
Ledger domain models.

This module contains all ledger models:
- Ledger: Ownership boundary, one per book of accounts
- Account: Money container with a cached running balance
- Category: Expense or income classification
- Transaction: Expense, income or transfer
- BalanceAdjustment: Audited manual balance change
"""

from ledger.models.account import Account, AccountType
from ledger.models.adjustment import BalanceAdjustment
from ledger.models.category import Category, CategoryType
from ledger.models.ledger import Ledger
from ledger.models.transaction import Transaction, TransactionType

__all__ = [
    "Account",
    "AccountType",
    "BalanceAdjustment",
    "Category",
    "CategoryType",
    "Ledger",
    "Transaction",
    "TransactionType",
]
