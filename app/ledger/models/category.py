"""
Category model.

Categories classify expenses and incomes. A category's type must match the
type of every transaction that references it.
"""

from __future__ import annotations

from django.db import models
from django.db.models.functions import Lower

from core.model_mixins import StatusMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel
from ledger.constants import MAX_NAME_LENGTH


class CategoryType(models.TextChoices):
    """Transaction types a category can classify."""

    EXPENSE = "expense", "Expense"
    INCOME = "income", "Income"


class Category(UUIDPrimaryKeyMixin, StatusMixin, BaseModel):
    """
    An expense or income category inside a ledger.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        ledger: Owning ledger
        name: Display name
        type: expense or income
        status: active or inactive (from StatusMixin)
        is_system: Seeded when the ledger was bootstrapped

    Constraints:
        - Names are unique per (ledger, type), ignoring case
    """

    ledger = models.ForeignKey(
        "ledger.Ledger",
        on_delete=models.PROTECT,
        related_name="categories",
        help_text="Ledger this category belongs to",
    )
    name = models.CharField(
        max_length=MAX_NAME_LENGTH,
        help_text="Display name of the category",
    )
    type = models.CharField(
        max_length=16,
        choices=CategoryType.choices,
        help_text="Transaction type this category classifies",
    )
    is_system = models.BooleanField(
        default=False,
        help_text="Whether this category was seeded with the ledger",
    )

    class Meta:
        ordering = ["created_at"]
        verbose_name_plural = "categories"
        constraints = [
            models.UniqueConstraint(
                Lower("name"),
                "ledger",
                "type",
                name="category_unique_name_per_ledger_type",
            ),
        ]
        indexes = [
            models.Index(fields=["ledger", "type"], name="category_ledger_type_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} [{self.type}]"
