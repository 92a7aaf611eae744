"""
Ledger services.

All ledger writes go through these services so that authorization,
validation, row locking and balance updates happen together.

This module provides:
- LedgerService: List, bootstrap and rename ledgers
- AccountService: Accounts and audited balance adjustments
- CategoryService: Expense and income categories
- TransactionService: Balance-consistent expenses, incomes and transfers
- ReportService: Monthly summaries, category breakdowns, trends
- ReconciliationService: Detect and heal drifted balances

Usage:
    from ledger.services import LedgerService, TransactionService

    ledger = LedgerService.ensure_default(request.user)
    TransactionService.create_expense(
        request.user, ledger.id, account.id, food.id, 5000, 1700000000000
    )
"""

from ledger.services.accounts import AccountService
from ledger.services.categories import CategoryService
from ledger.services.ledgers import LedgerService
from ledger.services.reconciliation import (
    BalanceDrift,
    ReconciliationReport,
    ReconciliationService,
)
from ledger.services.reports import ReportService
from ledger.services.transactions import TransactionService

__all__ = [
    "AccountService",
    "BalanceDrift",
    "CategoryService",
    "LedgerService",
    "ReconciliationReport",
    "ReconciliationService",
    "ReportService",
    "TransactionService",
]
