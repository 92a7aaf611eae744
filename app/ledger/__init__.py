"""
Personal ledger application.

Users track money across accounts (cash, bank, credit, wallet) inside a
ledger they own. Expenses, incomes and transfers move account balances, and
every create, edit or delete keeps those balances consistent with the
transaction history.

Modules:
    - models/: Ledger, Account, Category, Transaction, BalanceAdjustment
    - services/: Business logic (all writes go through services)
    - balances.py: Signed transaction effects and locked balance updates
    - authorization.py: Ownership guards
    - validation.py: Input validation primitives
"""
