"""
Ledger bootstrap and management.

Every user works inside a default ledger that is created on first use,
together with a starter set of system categories.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.db import IntegrityError

from core.model_mixins import Status
from core.services import BaseService
from ledger.authorization import require_ledger_owner, require_user
from ledger.constants import DEFAULT_EXPENSE_CATEGORIES, DEFAULT_INCOME_CATEGORIES
from ledger.models import Category, CategoryType, Ledger
from ledger.validation import normalize_required_name

if TYPE_CHECKING:
    import uuid

    from authentication.models import User


class LedgerService(BaseService):
    """Service for listing, bootstrapping and renaming ledgers."""

    @classmethod
    def list(cls, user: User) -> list[Ledger]:
        """List the principal's ledgers, oldest first."""
        user = require_user(user)
        return list(Ledger.objects.filter(user=user).order_by("created_at", "id"))

    @classmethod
    def ensure_default(cls, user: User) -> Ledger:
        """
        Return the principal's default ledger, creating it on first use.

        A new default ledger is seeded with system expense and income
        categories in the same database transaction.

        Returns:
            The existing or newly created default Ledger
        """
        user = require_user(user)
        existing = Ledger.objects.filter(user=user, is_default=True).first()
        if existing is not None:
            return existing

        try:
            with cls.atomic():
                ledger = Ledger.objects.create(
                    user=user,
                    name=settings.LEDGER_DEFAULT_NAME,
                    is_default=True,
                )
                Category.objects.bulk_create(
                    [
                        Category(
                            ledger=ledger,
                            name=name,
                            type=category_type,
                            is_system=True,
                            status=Status.ACTIVE,
                        )
                        for category_type, names in (
                            (CategoryType.EXPENSE, DEFAULT_EXPENSE_CATEGORIES),
                            (CategoryType.INCOME, DEFAULT_INCOME_CATEGORIES),
                        )
                        for name in names
                    ]
                )
        except IntegrityError:
            # A concurrent request created the default ledger first
            return Ledger.objects.get(user=user, is_default=True)

        cls.get_logger().info(f"Created default ledger {ledger.id} for user {user.pk}")
        return ledger

    @classmethod
    def rename(cls, user: User, ledger_id: uuid.UUID, name: str) -> Ledger:
        """
        Rename a ledger owned by the principal.

        Raises:
            LedgerNotFound: If the ledger does not exist
            LedgerAccessDenied: If another user owns it
            InvalidArgument: If the name is empty after trimming
        """
        ledger = require_ledger_owner(user, ledger_id)
        ledger.name = normalize_required_name(name, "name")
        ledger.save(update_fields=["name", "updated_at"])
        cls.get_logger().info(f"Renamed ledger {ledger.id}")
        return ledger
