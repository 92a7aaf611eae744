"""
Ledger model.

A ledger is the ownership boundary: every account, category, transaction and
balance adjustment belongs to exactly one ledger, and a ledger belongs to
exactly one user.
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from ledger.constants import MAX_NAME_LENGTH


class Ledger(UUIDPrimaryKeyMixin, BaseModel):
    """
    A book of accounts owned by a single user.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        user: Owner of the ledger
        name: Display name
        is_default: Whether this is the user's default ledger

    Constraints:
        - At most one default ledger per user
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="ledgers",
        help_text="User who owns this ledger",
    )
    name = models.CharField(
        max_length=MAX_NAME_LENGTH,
        help_text="Display name of the ledger",
    )
    is_default = models.BooleanField(
        default=False,
        help_text="Whether this is the owner's default ledger",
    )

    class Meta:
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["user"],
                condition=Q(is_default=True),
                name="ledger_one_default_per_user",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.user_id})"
