"""
Serializers for the ledger API.

Read and write serializers are separate. Write serializers only check
the shape of the request (types, ids, choices, storable ranges). Business
rules such as positive amounts, non-empty names and ledger ownership are
enforced by the service layer, which raises core.exceptions subclasses.

Serializer Hierarchy:
    LedgerSerializer / LedgerRenameSerializer
    AccountSerializer / AccountCreateSerializer / AccountUpdateSerializer
    AdjustBalanceSerializer / BalanceAdjustmentSerializer
    CategorySerializer / CategoryCreateSerializer / CategoryUpdateSerializer
    TransactionSerializer / CategorizedTransactionCreateSerializer /
        TransferCreateSerializer / TransactionUpdateSerializer
    *QuerySerializer: query string parameters for list and report endpoints
"""

from __future__ import annotations

from rest_framework import serializers

from core.model_mixins import Status
from ledger.constants import MAX_AMOUNT, MAX_TIMESTAMP_MS
from ledger.models import (
    Account,
    AccountType,
    BalanceAdjustment,
    Category,
    CategoryType,
    Ledger,
    Transaction,
    TransactionType,
)
from ledger.services.reports import GRANULARITIES
from ledger.types import TransactionFilters, TransactionPatch


def amount_field(**kwargs):
    """Integer minor units in the storable range. Sign rules stay in services."""
    return serializers.IntegerField(
        min_value=-MAX_AMOUNT, max_value=MAX_AMOUNT, **kwargs
    )


def timestamp_field(**kwargs):
    """Epoch milliseconds no later than the end of year 9999."""
    return serializers.IntegerField(max_value=MAX_TIMESTAMP_MS, **kwargs)


class TimeWindowMixin:
    """
    Adds `from` and `to` millisecond bounds.

    `from` is a Python keyword, so the fields are attached in get_fields().
    """

    window_required = False

    def get_fields(self):
        fields = super().get_fields()
        fields["from"] = timestamp_field(required=self.window_required)
        fields["to"] = timestamp_field(required=self.window_required)
        return fields


# =============================================================================
# Ledgers
# =============================================================================


class LedgerSerializer(serializers.ModelSerializer):
    """Ledger for read operations."""

    user_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = Ledger
        fields = ["id", "user_id", "name", "is_default", "created_at", "updated_at"]
        read_only_fields = fields


class LedgerRenameSerializer(serializers.Serializer):
    """Rename a ledger."""

    name = serializers.CharField(allow_blank=True, trim_whitespace=False)


# =============================================================================
# Accounts
# =============================================================================


class AccountSerializer(serializers.ModelSerializer):
    """Account for read operations."""

    ledger_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Account
        fields = [
            "id",
            "ledger_id",
            "name",
            "type",
            "status",
            "initial_balance",
            "current_balance",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AccountListQuerySerializer(serializers.Serializer):
    """Query parameters for listing accounts."""

    status = serializers.ChoiceField(choices=Status.choices, required=False)


class AccountCreateSerializer(serializers.Serializer):
    """Create an account in a ledger."""

    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    type = serializers.ChoiceField(choices=AccountType.choices)
    initial_balance = amount_field()


class AccountUpdateSerializer(serializers.Serializer):
    """Patch an account. Balances cannot be set here."""

    name = serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=False
    )
    type = serializers.ChoiceField(choices=AccountType.choices, required=False)
    status = serializers.ChoiceField(choices=Status.choices, required=False)


class AdjustBalanceSerializer(serializers.Serializer):
    """Manual balance adjustment."""

    delta = amount_field()
    reason = serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=False
    )


class BalanceAdjustmentSerializer(serializers.ModelSerializer):
    """Balance adjustment audit record."""

    ledger_id = serializers.UUIDField(read_only=True)
    account_id = serializers.UUIDField(read_only=True)
    actor_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = BalanceAdjustment
        fields = [
            "id",
            "ledger_id",
            "account_id",
            "delta",
            "reason",
            "actor_id",
            "created_at",
        ]
        read_only_fields = fields


class AdjustmentListQuerySerializer(serializers.Serializer):
    """Query parameters for listing balance adjustments."""

    account_id = serializers.UUIDField(required=False)
    limit = serializers.IntegerField(required=False)


# =============================================================================
# Categories
# =============================================================================


class CategorySerializer(serializers.ModelSerializer):
    """Category for read operations."""

    ledger_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Category
        fields = [
            "id",
            "ledger_id",
            "name",
            "type",
            "status",
            "is_system",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CategoryListQuerySerializer(serializers.Serializer):
    """Query parameters for listing categories."""

    type = serializers.ChoiceField(choices=CategoryType.choices, required=False)
    status = serializers.ChoiceField(choices=Status.choices, required=False)


class CategoryCreateSerializer(serializers.Serializer):
    """Create a category in a ledger."""

    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    type = serializers.ChoiceField(choices=CategoryType.choices)
    is_system = serializers.BooleanField(required=False, default=False)


class CategoryUpdateSerializer(serializers.Serializer):
    """Patch a category. The type cannot change."""

    name = serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=False
    )
    status = serializers.ChoiceField(choices=Status.choices, required=False)


# =============================================================================
# Transactions
# =============================================================================


class TransactionSerializer(serializers.ModelSerializer):
    """Transaction for read operations."""

    ledger_id = serializers.UUIDField(read_only=True)
    account_id = serializers.UUIDField(read_only=True)
    category_id = serializers.UUIDField(read_only=True, allow_null=True)
    transfer_account_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = Transaction
        fields = [
            "id",
            "ledger_id",
            "type",
            "amount",
            "occurred_at",
            "note",
            "account_id",
            "category_id",
            "transfer_account_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CategorizedTransactionCreateSerializer(serializers.Serializer):
    """Create an expense or an income."""

    account_id = serializers.UUIDField()
    category_id = serializers.UUIDField()
    amount = amount_field()
    occurred_at = timestamp_field()
    note = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )


class TransferCreateSerializer(serializers.Serializer):
    """Create a transfer between two accounts."""

    from_account_id = serializers.UUIDField()
    to_account_id = serializers.UUIDField()
    amount = amount_field()
    occurred_at = timestamp_field()
    note = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, trim_whitespace=False
    )


class TransactionUpdateSerializer(serializers.Serializer):
    """
    Patch a transaction.

    Omitted fields are left unchanged. Use clear_note to remove the note.
    """

    amount = amount_field(required=False)
    occurred_at = timestamp_field(required=False)
    account_id = serializers.UUIDField(required=False)
    category_id = serializers.UUIDField(required=False)
    transfer_account_id = serializers.UUIDField(required=False)
    note = serializers.CharField(
        required=False, allow_blank=True, trim_whitespace=False
    )
    clear_note = serializers.BooleanField(required=False, default=False)

    def to_patch(self) -> TransactionPatch:
        return TransactionPatch(**self.validated_data)


class TransactionListQuerySerializer(TimeWindowMixin, serializers.Serializer):
    """Query parameters for listing transactions."""

    type = serializers.ChoiceField(choices=TransactionType.choices, required=False)
    account_id = serializers.UUIDField(required=False)
    category_id = serializers.UUIDField(required=False)
    min_amount = amount_field(required=False)
    max_amount = amount_field(required=False)
    search = serializers.CharField(required=False, allow_blank=True)
    limit = serializers.IntegerField(required=False)

    def to_filters(self) -> TransactionFilters:
        data = dict(self.validated_data)
        return TransactionFilters(
            occurred_from=data.pop("from", None),
            occurred_to=data.pop("to", None),
            **data,
        )


class TransactionRemovedSerializer(serializers.Serializer):
    """Response body for a deleted transaction."""

    transaction_id = serializers.UUIDField()


# =============================================================================
# Reports
# =============================================================================


class MonthQuerySerializer(serializers.Serializer):
    """A UTC calendar month."""

    year = serializers.IntegerField()
    month = serializers.IntegerField()


class CategoryBreakdownQuerySerializer(MonthQuerySerializer):
    """A UTC calendar month and the transaction type to break down."""

    type = serializers.ChoiceField(choices=CategoryType.choices)


class TrendQuerySerializer(TimeWindowMixin, serializers.Serializer):
    """Inclusive window and bucket size for the trend report."""

    window_required = True

    granularity = serializers.ChoiceField(choices=GRANULARITIES)


class MonthlySummarySerializer(serializers.Serializer):
    year = serializers.IntegerField()
    month = serializers.IntegerField()
    income = serializers.IntegerField()
    expense = serializers.IntegerField()
    transfer = serializers.IntegerField()
    net = serializers.IntegerField()
    transaction_count = serializers.IntegerField()


class CategoryBreakdownRowSerializer(serializers.Serializer):
    category_id = serializers.UUIDField()
    category_name = serializers.CharField()
    amount = serializers.IntegerField()
    count = serializers.IntegerField()
    ratio = serializers.FloatField()


class TrendPointSerializer(serializers.Serializer):
    bucket = serializers.CharField()
    income = serializers.IntegerField()
    expense = serializers.IntegerField()
    net = serializers.IntegerField()


# =============================================================================
# Reconciliation
# =============================================================================


class BalanceDriftSerializer(serializers.Serializer):
    account_id = serializers.UUIDField()
    stored = serializers.IntegerField()
    expected = serializers.IntegerField()
    drift = serializers.IntegerField()


class ReconciliationReportSerializer(serializers.Serializer):
    ledger_id = serializers.UUIDField()
    accounts_checked = serializers.IntegerField()
    drifts = BalanceDriftSerializer(many=True)
    healed = serializers.BooleanField()
