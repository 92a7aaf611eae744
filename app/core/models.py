"""
Abstract base model shared by the domain apps.

BaseModel only carries bookkeeping timestamps. Identity and lifecycle come
from the mixins in core.model_mixins, listed before BaseModel:

    class Category(UUIDPrimaryKeyMixin, StatusMixin, BaseModel):
        name = models.CharField(max_length=100)

Ledger timestamps that carry business meaning (a transaction's occurred_at)
are separate integer fields on the domain models; created_at and updated_at
only describe the row.
"""

from __future__ import annotations

from django.db import models


class BaseModel(models.Model):
    """
    Abstract model with created_at and updated_at.

    QuerySet.update() skips auto_now, so bulk writers such as
    ledger.balances.apply_deltas() set updated_at themselves.
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the row was inserted",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the row was last written",
    )

    class Meta:
        abstract = True

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(id={self.pk})"
