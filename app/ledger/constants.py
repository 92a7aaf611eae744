"""
Ledger constants.

Seed data for newly bootstrapped ledgers and the hard bounds on stored
values. Tunable page sizes live in settings (LEDGER_*).
"""

# Categories created with every default ledger, marked is_system=True
DEFAULT_EXPENSE_CATEGORIES = (
    "Food",
    "Transport",
    "Housing",
    "Shopping",
    "Entertainment",
)

DEFAULT_INCOME_CATEGORIES = (
    "Salary",
    "Bonus",
    "Side Job",
    "Other Income",
)

# Largest magnitude for any amount, balance or delta (2**53 - 1). Sums of
# many such values still fit the 64-bit balance columns.
MAX_AMOUNT = 2**53 - 1

# 9999-12-31T23:59:59.999Z, the last instant datetime can render
MAX_TIMESTAMP_MS = 253_402_300_799_999

# Length of the name columns on Ledger, Account and Category
MAX_NAME_LENGTH = 100

# Milliseconds per day, used for month windows
MS_PER_DAY = 86_400_000
