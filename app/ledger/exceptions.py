"""
Ledger-specific exceptions.

Each exception inherits from one of the core exception categories so the
API layer maps it to the right HTTP status without extra code.

Exception Hierarchy:
    NotFoundError (404)
    ├── LedgerNotFound
    ├── AccountNotFound
    ├── CategoryNotFound
    └── TransactionNotFound
    PermissionDeniedError (403)
    └── LedgerAccessDenied - Principal does not own the ledger
    ValidationError (400)
    └── InvalidArgument - Malformed input, rejected before any write
    ConflictError (409)
    ├── CrossLedgerReference - Entity belongs to another ledger
    ├── InactiveAccount - Account is retired
    ├── InactiveCategory - Category is retired
    ├── CategoryTypeMismatch - Category type differs from transaction type
    └── CategoryAlreadyExists - Case-insensitive duplicate name

Usage:
    from ledger.exceptions import AccountNotFound, InactiveAccount

    if account is None:
        raise AccountNotFound(
            "Account not found",
            details={"account_id": str(account_id)},
        )
"""

from __future__ import annotations

from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)


class LedgerNotFound(NotFoundError):
    """Raised when a ledger id does not resolve to a ledger."""

    default_error_code: str = "LEDGER_NOT_FOUND"


class AccountNotFound(NotFoundError):
    """Raised when an account id does not resolve to an account."""

    default_error_code: str = "ACCOUNT_NOT_FOUND"


class CategoryNotFound(NotFoundError):
    """Raised when a category id does not resolve to a category."""

    default_error_code: str = "CATEGORY_NOT_FOUND"


class TransactionNotFound(NotFoundError):
    """Raised when a transaction id does not resolve to a transaction."""

    default_error_code: str = "TRANSACTION_NOT_FOUND"


class LedgerAccessDenied(PermissionDeniedError):
    """
    Raised when the principal is not the owner of the ledger.

    Entity-scoped operations (accounts, categories, transactions) raise
    this too, since they are authorized through the entity's ledger.
    """

    default_error_code: str = "LEDGER_ACCESS_DENIED"


class InvalidArgument(ValidationError):
    """
    Raised when an input is malformed.

    Use for:
    - Non-integer or non-positive amounts
    - Empty names, notes or reasons
    - Out-of-range limits, years, months and time windows
    - Fields that do not apply to the transaction type

    Example:
        raise InvalidArgument(
            "amount must be greater than 0",
            details={"field": "amount", "constraint": "positive_integer"},
        )
    """

    default_error_code: str = "INVALID_ARGUMENT"


class CrossLedgerReference(ConflictError):
    """Raised when an account or category belongs to a different ledger."""

    default_error_code: str = "CROSS_LEDGER_REFERENCE"


class InactiveAccount(ConflictError):
    """
    Raised when attempting to use an inactive account.

    Accounts are retired rather than deleted so history is preserved.
    Retired accounts cannot receive new transactions.
    """

    default_error_code: str = "INACTIVE_ACCOUNT"


class InactiveCategory(ConflictError):
    """Raised when attempting to use an inactive category."""

    default_error_code: str = "INACTIVE_CATEGORY"


class CategoryTypeMismatch(ConflictError):
    """Raised when a category's type differs from the transaction type."""

    default_error_code: str = "CATEGORY_TYPE_MISMATCH"


class CategoryAlreadyExists(ConflictError):
    """
    Raised when a category name collides within a ledger.

    Names are compared case-insensitively among categories of the same type.
    """

    default_error_code: str = "CATEGORY_ALREADY_EXISTS"
