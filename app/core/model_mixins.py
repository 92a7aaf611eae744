"""
Model mixins providing reusable functionality for Django models.

This module contains abstract mixin classes that can be combined with
BaseModel to add specific functionality. They are generic infrastructure
classes with no ledger-specific logic.

Available Mixins:
    UUIDPrimaryKeyMixin: Use UUID as primary key
    StatusMixin: Active/inactive status gating (soft retirement)

Usage:
    from core.models import BaseModel
    from core.model_mixins import StatusMixin, UUIDPrimaryKeyMixin

    class Account(UUIDPrimaryKeyMixin, StatusMixin, BaseModel):
        name = models.CharField(max_length=100)

    account.is_active  # True while status == "active"

Note:
    - Always list mixins before BaseModel in inheritance
    - Mixins are abstract and don't create database tables
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Use UUID as primary key instead of auto-increment integer.

    Fields:
        id: UUIDField as primary key (auto-generated)

    Note:
        Lock ordering in the ledger relies on ids being totally ordered,
        which UUIDs are.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Unique identifier for this record",
    )

    class Meta:
        abstract = True


class Status(models.TextChoices):
    """Lifecycle status for records that are retired instead of deleted."""

    ACTIVE = "active", "Active"
    INACTIVE = "inactive", "Inactive"


class StatusMixin(models.Model):
    """
    Active/inactive status for records that can never be deleted.

    Records referenced by history (accounts, categories) are retired by
    setting status to inactive. Inactive records stay readable but must
    not receive new references.

    Fields:
        status: "active" or "inactive" (indexed)

    Usage:
        if not account.is_active:
            raise InactiveAccount(...)
    """

    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.ACTIVE,
        db_index=True,
        help_text="Whether this record may receive new references",
    )

    class Meta:
        abstract = True

    @property
    def is_active(self) -> bool:
        """Return True while the record accepts new references."""
        return self.status == Status.ACTIVE
