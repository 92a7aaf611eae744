"""
Django admin configuration for ledger models.

Provides admin interfaces for:
- Ledger and account browsing (balances are read-only)
- Category management
- Transaction and balance adjustment inspection (read-only)

Balances only change through the service layer, so the admin never
writes current_balance and never creates or edits money movements.
"""

from django.contrib import admin

from ledger.models import Account, BalanceAdjustment, Category, Ledger, Transaction


class ReadOnlyAdminMixin:
    """Disable add, change and delete for append-only records."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Ledger)
class LedgerAdmin(admin.ModelAdmin):
    """Admin interface for Ledger model."""

    list_display = ["id", "name", "user", "is_default", "created_at"]
    list_filter = ["is_default", "created_at"]
    search_fields = ["name", "user__email"]
    readonly_fields = ["created_at", "updated_at"]
    raw_id_fields = ["user"]
    ordering = ["-created_at"]


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    """Admin interface for Account model."""

    list_display = [
        "id",
        "name",
        "ledger",
        "type",
        "status",
        "initial_balance",
        "current_balance",
    ]
    list_filter = ["type", "status"]
    search_fields = ["name", "ledger__name", "ledger__user__email"]
    readonly_fields = [
        "initial_balance",
        "current_balance",
        "created_at",
        "updated_at",
    ]
    raw_id_fields = ["ledger"]
    ordering = ["-created_at"]

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for Category model."""

    list_display = ["id", "name", "ledger", "type", "status", "is_system"]
    list_filter = ["type", "status", "is_system"]
    search_fields = ["name", "ledger__name"]
    readonly_fields = ["type", "created_at", "updated_at"]
    raw_id_fields = ["ledger"]
    ordering = ["ledger", "type", "name"]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Transaction)
class TransactionAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for Transaction model."""

    list_display = [
        "id",
        "type",
        "amount",
        "occurred_at",
        "account",
        "transfer_account",
        "category",
        "ledger",
    ]
    list_filter = ["type", "created_at"]
    search_fields = ["id", "note"]
    raw_id_fields = ["ledger", "account", "transfer_account", "category"]
    ordering = ["-occurred_at"]


@admin.register(BalanceAdjustment)
class BalanceAdjustmentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Admin interface for BalanceAdjustment model."""

    list_display = ["id", "account", "delta", "actor", "reason", "created_at"]
    list_filter = ["created_at"]
    search_fields = ["reason", "actor__email"]
    raw_id_fields = ["ledger", "account", "actor"]
    ordering = ["-created_at"]
