"""
URL configuration for the ledger API.

URL Structure:
    Ledgers:
        /ledgers/                                         GET
        /ledgers/default/                                 POST
        /ledgers/{ledger_id}/                             PATCH

    Ledger-scoped collections:
        /ledgers/{ledger_id}/accounts/                    GET, POST
        /ledgers/{ledger_id}/adjustments/                 GET
        /ledgers/{ledger_id}/categories/                  GET, POST
        /ledgers/{ledger_id}/transactions/                GET
        /ledgers/{ledger_id}/transactions/expense/        POST
        /ledgers/{ledger_id}/transactions/income/         POST
        /ledgers/{ledger_id}/transactions/transfer/       POST
        /ledgers/{ledger_id}/reports/monthly-summary/     GET
        /ledgers/{ledger_id}/reports/category-breakdown/  GET
        /ledgers/{ledger_id}/reports/trend/               GET
        /ledgers/{ledger_id}/reconciliation/              GET, POST

    Entities:
        /accounts/{account_id}/                           PATCH
        /accounts/{account_id}/adjust-balance/            POST
        /categories/{category_id}/                        PATCH
        /transactions/{transaction_id}/                   PATCH, DELETE

All URLs are prefixed with /api/v1/ in the main URL configuration.
"""

from django.urls import path

from ledger.views import (
    AccountViewSet,
    CategoryViewSet,
    LedgerViewSet,
    ReconciliationViewSet,
    ReportViewSet,
    TransactionViewSet,
)

app_name = "ledger"

urlpatterns = [
    # Ledgers
    path("ledgers/", LedgerViewSet.as_view({"get": "list"}), name="ledger-list"),
    path(
        "ledgers/default/",
        LedgerViewSet.as_view({"post": "default"}),
        name="ledger-default",
    ),
    path(
        "ledgers/<uuid:ledger_pk>/",
        LedgerViewSet.as_view({"patch": "partial_update"}),
        name="ledger-detail",
    ),
    # Accounts
    path(
        "ledgers/<uuid:ledger_pk>/accounts/",
        AccountViewSet.as_view({"get": "list", "post": "create"}),
        name="ledger-account-list",
    ),
    path(
        "ledgers/<uuid:ledger_pk>/adjustments/",
        AccountViewSet.as_view({"get": "adjustments"}),
        name="ledger-adjustment-list",
    ),
    path(
        "accounts/<uuid:pk>/",
        AccountViewSet.as_view({"patch": "partial_update"}),
        name="account-detail",
    ),
    path(
        "accounts/<uuid:pk>/adjust-balance/",
        AccountViewSet.as_view({"post": "adjust_balance"}),
        name="account-adjust-balance",
    ),
    # Categories
    path(
        "ledgers/<uuid:ledger_pk>/categories/",
        CategoryViewSet.as_view({"get": "list", "post": "create"}),
        name="ledger-category-list",
    ),
    path(
        "categories/<uuid:pk>/",
        CategoryViewSet.as_view({"patch": "partial_update"}),
        name="category-detail",
    ),
    # Transactions
    path(
        "ledgers/<uuid:ledger_pk>/transactions/",
        TransactionViewSet.as_view({"get": "list"}),
        name="ledger-transaction-list",
    ),
    path(
        "ledgers/<uuid:ledger_pk>/transactions/expense/",
        TransactionViewSet.as_view({"post": "expense"}),
        name="ledger-transaction-expense",
    ),
    path(
        "ledgers/<uuid:ledger_pk>/transactions/income/",
        TransactionViewSet.as_view({"post": "income"}),
        name="ledger-transaction-income",
    ),
    path(
        "ledgers/<uuid:ledger_pk>/transactions/transfer/",
        TransactionViewSet.as_view({"post": "transfer"}),
        name="ledger-transaction-transfer",
    ),
    path(
        "transactions/<uuid:pk>/",
        TransactionViewSet.as_view(
            {"patch": "partial_update", "delete": "destroy"}
        ),
        name="transaction-detail",
    ),
    # Reports
    path(
        "ledgers/<uuid:ledger_pk>/reports/monthly-summary/",
        ReportViewSet.as_view({"get": "monthly_summary"}),
        name="ledger-report-monthly-summary",
    ),
    path(
        "ledgers/<uuid:ledger_pk>/reports/category-breakdown/",
        ReportViewSet.as_view({"get": "category_breakdown"}),
        name="ledger-report-category-breakdown",
    ),
    path(
        "ledgers/<uuid:ledger_pk>/reports/trend/",
        ReportViewSet.as_view({"get": "trend"}),
        name="ledger-report-trend",
    ),
    # Reconciliation
    path(
        "ledgers/<uuid:ledger_pk>/reconciliation/",
        ReconciliationViewSet.as_view({"get": "retrieve", "post": "heal"}),
        name="ledger-reconciliation",
    ),
]
