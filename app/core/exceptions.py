"""
Base exception classes for application-wide error handling.

This module provides a standardized exception hierarchy that enables:
- Consistent error responses across the application
- Machine-readable error codes for client handling
- Field-level details so callers can correct and resubmit

Exception Hierarchy:
    BaseApplicationError (base)
    ├── AuthenticationRequiredError - No resolvable principal
    ├── ValidationError - Malformed input (bad amounts, empty names, bad limits)
    ├── NotFoundError - Referenced record does not exist
    ├── PermissionDeniedError - Principal does not own the resource
    └── ConflictError - Valid shape, but violates a business rule

Usage:
    from core.exceptions import ValidationError, NotFoundError

    # Raise with message only
    raise ValidationError("name cannot be empty")

    # Raise with error code and details for client handling
    raise ValidationError(
        "amount must be greater than 0",
        error_code="INVALID_ARGUMENT",
        details={"field": "amount", "constraint": "positive_integer"},
    )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.status_code)

Note:
    These exceptions are for domain/business logic errors raised by the
    service layer. core.exception_handler renders them for DRF views.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Provides a consistent interface for error handling across the application.
    All custom exceptions should inherit from this class.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field, constraint, ids)
        status_code: HTTP status used when rendered by the API layer

    Example:
        try:
            account = AccountService.get_account(account_id)
        except NotFoundError as e:
            logger.warning(f"Account not found: {e.error_code}")
            return Response(e.to_dict(), status=e.status_code)
    """

    default_error_code: str = "APPLICATION_ERROR"
    status_code: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dict with error, error_code, and details keys

        Example:
            {
                "error": "Account is inactive",
                "error_code": "INACTIVE_ACCOUNT",
                "details": {"account_id": "9b1d..."}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class AuthenticationRequiredError(BaseApplicationError):
    """
    Raised when an operation needs a principal and none is available.

    Use for:
    - Service calls made with no user or an anonymous user

    Note:
        DRF's IsAuthenticated normally rejects these requests first.
        This covers direct service-layer callers.
    """

    default_error_code: str = "UNAUTHENTICATED"
    status_code: int = 401


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Non-integer or non-positive amounts
    - Empty required names or notes
    - Out-of-range limits and time windows
    - Conflicting request flags

    Example:
        raise ValidationError(
            "limit must be an integer between 1 and 500",
            details={"field": "limit", "constraint": "range", "max": 500},
        )

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    status_code: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Use for:
    - Ledger, account, category or transaction lookups by id

    Example:
        account = Account.objects.filter(id=account_id).first()
        if not account:
            raise NotFoundError(
                "Account not found",
                error_code="ACCOUNT_NOT_FOUND",
                details={"account_id": str(account_id)},
            )
    """

    default_error_code: str = "NOT_FOUND"
    status_code: int = 404


class PermissionDeniedError(BaseApplicationError):
    """
    Raised when the principal lacks permission for an operation.

    Use for:
    - Accessing a ledger owned by another user
    - Accessing an entity through a ledger owned by another user

    Note:
        For authentication failures (missing principal), use
        AuthenticationRequiredError. Use this for authorization failures.
    """

    default_error_code: str = "PERMISSION_DENIED"
    status_code: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate entries (unique constraint violations)
    - References across ledgers
    - Using inactive accounts or categories

    Example:
        if category.type != transaction.type:
            raise ConflictError(
                "Category type mismatch",
                error_code="CATEGORY_TYPE_MISMATCH",
                details={"expected": transaction.type, "actual": category.type},
            )

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"
    status_code: int = 409
