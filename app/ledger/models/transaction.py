"""
Transaction model.

One table holds all three transaction kinds. The shape of each kind is
enforced by check constraints:

    expense / income: account + category, no transfer_account
    transfer:         account (source) + transfer_account (destination),
                      no category, and the two accounts differ

Balance effects per kind (see ledger.balances):

    expense:  account  -= amount
    income:   account  += amount
    transfer: account  -= amount, transfer_account += amount
"""

from __future__ import annotations

from django.db import models
from django.db.models import F, Q

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class TransactionType(models.TextChoices):
    """Kinds of money movement. Immutable once a transaction exists."""

    EXPENSE = "expense", "Expense"
    INCOME = "income", "Income"
    TRANSFER = "transfer", "Transfer"


class Transaction(UUIDPrimaryKeyMixin, BaseModel):
    """
    A single money movement within a ledger.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        ledger: Owning ledger
        type: expense, income or transfer
        amount: Positive amount in minor units (cents)
        occurred_at: Event time in milliseconds since epoch
        note: Optional free-text note
        account: Affected account (source for transfers)
        category: Category for expense/income, null for transfers
        transfer_account: Destination for transfers, null otherwise
    """

    ledger = models.ForeignKey(
        "ledger.Ledger",
        on_delete=models.PROTECT,
        related_name="transactions",
        help_text="Ledger this transaction belongs to",
    )
    type = models.CharField(
        max_length=16,
        choices=TransactionType.choices,
        help_text="Kind of money movement",
    )
    amount = models.BigIntegerField(
        help_text="Amount in minor units (cents), always positive",
    )
    occurred_at = models.BigIntegerField(
        help_text="When the movement happened, in milliseconds since epoch",
    )
    note = models.TextField(
        null=True,
        blank=True,
        help_text="Optional note",
    )
    account = models.ForeignKey(
        "ledger.Account",
        on_delete=models.PROTECT,
        related_name="transactions",
        help_text="Affected account, or transfer source",
    )
    category = models.ForeignKey(
        "ledger.Category",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="transactions",
        help_text="Category for expense and income",
    )
    transfer_account = models.ForeignKey(
        "ledger.Account",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="incoming_transfers",
        help_text="Transfer destination account",
    )

    class Meta:
        ordering = ["-occurred_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(amount__gt=0),
                name="transaction_amount_positive",
            ),
            models.CheckConstraint(
                condition=(
                    Q(
                        type__in=[TransactionType.EXPENSE, TransactionType.INCOME],
                        category__isnull=False,
                        transfer_account__isnull=True,
                    )
                    | (
                        Q(
                            type=TransactionType.TRANSFER,
                            category__isnull=True,
                            transfer_account__isnull=False,
                        )
                        & ~Q(transfer_account=F("account"))
                    )
                ),
                name="transaction_shape_matches_type",
            ),
        ]
        indexes = [
            models.Index(
                fields=["ledger", "occurred_at"], name="txn_ledger_occurred_idx"
            ),
            models.Index(
                fields=["ledger", "type", "occurred_at"],
                name="txn_ledger_type_occurred_idx",
            ),
            models.Index(
                fields=["ledger", "category", "occurred_at"],
                name="txn_ledger_cat_occurred_idx",
            ),
            models.Index(
                fields=["account", "occurred_at"], name="txn_account_occurred_idx"
            ),
            models.Index(
                fields=["transfer_account", "occurred_at"],
                name="txn_transfer_occurred_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.type} {self.amount} @ {self.occurred_at}"
