"""
Category store.

Category names are unique per ledger and type, compared case-insensitively.
Categories are retired through status and never deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError

from core.model_mixins import Status
from core.services import BaseService
from ledger.authorization import require_category_owner, require_ledger_owner
from ledger.exceptions import CategoryAlreadyExists
from ledger.models import Category, CategoryType
from ledger.validation import assert_choice, normalize_required_name

if TYPE_CHECKING:
    import uuid

    from authentication.models import User
    from ledger.models import Ledger


class CategoryService(BaseService):
    """Service for creating, listing and updating categories."""

    @staticmethod
    def _ensure_unique_name(
        ledger_id: uuid.UUID,
        type: str,
        name: str,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        queryset = Category.objects.filter(ledger_id=ledger_id, type=type, name__iexact=name)
        if exclude_id is not None:
            queryset = queryset.exclude(id=exclude_id)
        if queryset.exists():
            raise CategoryAlreadyExists(
                "Category already exists",
                details={"ledger_id": str(ledger_id), "type": type, "name": name},
            )

    @classmethod
    def list(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        type: str | None = None,
        status: str | None = None,
    ) -> list[Category]:
        """List categories in a ledger, optionally filtered by type and status."""
        ledger = require_ledger_owner(user, ledger_id)
        queryset = Category.objects.filter(ledger=ledger)
        if type is not None:
            assert_choice(type, CategoryType, "type")
            queryset = queryset.filter(type=type)
        if status is not None:
            assert_choice(status, Status, "status")
            queryset = queryset.filter(status=status)
        return list(queryset.order_by("created_at", "id"))

    @classmethod
    def create(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        name: str,
        type: str,
        is_system: bool = False,
    ) -> Category:
        """
        Create an active category.

        Raises:
            InvalidArgument: Empty name or unknown type
            CategoryAlreadyExists: Same name (ignoring case) and type in the ledger
        """
        ledger = require_ledger_owner(user, ledger_id)
        name = normalize_required_name(name, "name")
        assert_choice(type, CategoryType, "type")
        return cls._create(ledger, name, type, is_system)

    @classmethod
    def _create(cls, ledger: Ledger, name: str, type: str, is_system: bool) -> Category:
        cls._ensure_unique_name(ledger.id, type, name)
        try:
            with cls.atomic():
                category = Category.objects.create(
                    ledger=ledger,
                    name=name,
                    type=type,
                    is_system=is_system,
                    status=Status.ACTIVE,
                )
        except IntegrityError:
            # Lost a race with a concurrent insert of the same name
            raise CategoryAlreadyExists(
                "Category already exists",
                details={"ledger_id": str(ledger.id), "type": type, "name": name},
            )

        cls.get_logger().info(
            f"Created {type} category {category.id} in ledger {ledger.id}"
        )
        return category

    @classmethod
    def update(
        cls,
        user: User,
        category_id: uuid.UUID,
        name: str | None = None,
        status: str | None = None,
    ) -> Category:
        """
        Patch name and/or status. The type of a category never changes.

        Raises:
            CategoryNotFound: If the category does not exist
            InvalidArgument: Empty name or unknown status
            CategoryAlreadyExists: Rename collides with a sibling category
        """
        category = require_category_owner(user, category_id)

        update_fields = ["updated_at"]
        if name is not None:
            name = normalize_required_name(name, "name")
            cls._ensure_unique_name(
                category.ledger_id, category.type, name, exclude_id=category.id
            )
            category.name = name
            update_fields.append("name")
        if status is not None:
            assert_choice(status, Status, "status")
            category.status = status
            update_fields.append("status")

        try:
            with cls.atomic():
                category.save(update_fields=update_fields)
        except IntegrityError:
            raise CategoryAlreadyExists(
                "Category already exists",
                details={
                    "ledger_id": str(category.ledger_id),
                    "type": category.type,
                    "name": category.name,
                },
            )

        cls.get_logger().info(f"Updated category {category.id}")
        return category
