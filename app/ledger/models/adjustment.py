"""
Balance adjustment model.

Adjustments are the only way to change an account balance without a
transaction (for example, reconciling with a bank statement). They are
append-only and never feed reports.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class BalanceAdjustment(UUIDPrimaryKeyMixin, BaseModel):
    """
    An audited manual change to an account balance.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        ledger: Owning ledger
        account: Adjusted account
        delta: Signed, non-zero change in minor units
        reason: Optional explanation
        actor: User who made the adjustment
    """

    ledger = models.ForeignKey(
        "ledger.Ledger",
        on_delete=models.PROTECT,
        related_name="adjustments",
        help_text="Ledger this adjustment belongs to",
    )
    account = models.ForeignKey(
        "ledger.Account",
        on_delete=models.PROTECT,
        related_name="adjustments",
        help_text="Adjusted account",
    )
    delta = models.BigIntegerField(
        help_text="Signed change in minor units (cents)",
    )
    reason = models.TextField(
        null=True,
        blank=True,
        help_text="Optional reason for the adjustment",
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="balance_adjustments",
        help_text="User who made the adjustment",
    )

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.CheckConstraint(
                condition=~Q(delta=0),
                name="adjustment_delta_nonzero",
            ),
        ]
        indexes = [
            models.Index(
                fields=["ledger", "created_at"], name="adjustment_ledger_created_idx"
            ),
            models.Index(
                fields=["account", "created_at"],
                name="adjustment_account_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"Adjustment {self.delta:+d} on {self.account_id}"
