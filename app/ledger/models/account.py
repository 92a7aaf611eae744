"""
Account model.

An account holds a running balance in integer minor units. The stored
current_balance is a denormalized cache kept in step with the transaction
history by the service layer:

    current_balance = initial_balance
                      + sum(signed transaction effects)
                      + sum(adjustment deltas)
"""

from __future__ import annotations

from django.db import models

from core.model_mixins import StatusMixin, UUIDPrimaryKeyMixin
from core.models import BaseModel
from ledger.constants import MAX_NAME_LENGTH


class AccountType(models.TextChoices):
    """
    Kinds of accounts a user can track.

    Values:
        CASH: Physical cash
        BANK: Checking or savings account
        CREDIT: Credit card (balances are typically negative)
        WALLET: Digital wallet
    """

    CASH = "cash", "Cash"
    BANK = "bank", "Bank"
    CREDIT = "credit", "Credit"
    WALLET = "wallet", "Wallet"


class Account(UUIDPrimaryKeyMixin, StatusMixin, BaseModel):
    """
    A money container inside a ledger.

    Fields:
        id: UUID primary key (from UUIDPrimaryKeyMixin)
        ledger: Owning ledger
        name: Display name
        type: cash, bank, credit or wallet
        status: active or inactive (from StatusMixin)
        initial_balance: Opening balance in minor units, immutable
        current_balance: Cached running balance in minor units

    Note:
        Accounts are never deleted. Transactions reference them with
        on_delete=PROTECT, and retirement happens through status.
    """

    ledger = models.ForeignKey(
        "ledger.Ledger",
        on_delete=models.PROTECT,
        related_name="accounts",
        help_text="Ledger this account belongs to",
    )
    name = models.CharField(
        max_length=MAX_NAME_LENGTH,
        help_text="Display name of the account",
    )
    type = models.CharField(
        max_length=16,
        choices=AccountType.choices,
        help_text="Kind of account",
    )
    initial_balance = models.BigIntegerField(
        default=0,
        help_text="Opening balance in minor units (cents)",
    )
    current_balance = models.BigIntegerField(
        default=0,
        help_text="Running balance in minor units (cents)",
    )

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["ledger", "status"], name="account_ledger_status_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} [{self.type}] {self.current_balance}"
