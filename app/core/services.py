"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for reporting operations
- BaseService: Base class with common service utilities

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.

Pattern Comparison:
    - Exceptions (core.exceptions): Use for rejected mutations. The first
      failing check aborts the whole operation and rolls back the transaction.
    - ServiceResult: Use for read-side operations that produce a report
      alongside a success flag (reconciliation runs, for example).

Usage:
    from core.services import BaseService

    class AccountService(BaseService):
        @classmethod
        def create(cls, user, ledger_id, name, type, initial_balance):
            ledger = require_ledger_owner(user, ledger_id)
            name = normalize_required_name(name, "name")

            with cls.atomic():
                account = Account.objects.create(ledger=ledger, name=name, ...)

            cls.get_logger().info(f"Created account {account.id}")
            return account
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for reporting operations.

    Attributes:
        success: Whether the operation completed
        data: The report produced by the operation

    Usage:
        result = ReconciliationService.reconcile_ledger(user, ledger_id)
        if result.success:
            report = result.data
    """

    success: bool
    data: T | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        """
        Create a successful result.

        Args:
            data: The result data

        Returns:
            ServiceResult with success=True and data set
        """
        return cls(success=True, data=data)


class BaseService:
    """
    Base class for service layer classes.

    Provides common utilities for services:
    - Logging setup per service
    - Database transaction management

    Design Notes:
        - Use @staticmethod or @classmethod (no instance state)
        - Services should be stateless
        - Raise core.exceptions for rejected operations
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """
        Get logger for this service.

        Returns a logger named after the service class for
        easy filtering in logs.

        Returns:
            Logger instance for this service
        """
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.

        Example:
            with cls.atomic():
                accounts = lock_accounts(account_ids)
                Transaction.objects.create(...)
                apply_deltas(net)
                # If any balance update fails, the insert is rolled back too
        """
        with transaction.atomic():
            yield
