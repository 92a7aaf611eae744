"""
ViewSets for the ledger API.

This module provides REST API endpoints over the ledger services:
- LedgerViewSet: List, bootstrap and rename ledgers
- AccountViewSet: Accounts and manual balance adjustments
- CategoryViewSet: Expense and income categories
- TransactionViewSet: Expenses, incomes and transfers
- ReportViewSet: Monthly summary, category breakdown and trend
- ReconciliationViewSet: Balance drift report and repair

URL Structure:
    /api/v1/ledgers/                                         GET
    /api/v1/ledgers/default/                                 POST
    /api/v1/ledgers/{ledger_id}/                             PATCH
    /api/v1/ledgers/{ledger_id}/accounts/                    GET, POST
    /api/v1/ledgers/{ledger_id}/adjustments/                 GET
    /api/v1/ledgers/{ledger_id}/categories/                  GET, POST
    /api/v1/ledgers/{ledger_id}/transactions/                GET
    /api/v1/ledgers/{ledger_id}/transactions/expense/        POST
    /api/v1/ledgers/{ledger_id}/transactions/income/         POST
    /api/v1/ledgers/{ledger_id}/transactions/transfer/       POST
    /api/v1/ledgers/{ledger_id}/reports/monthly-summary/     GET
    /api/v1/ledgers/{ledger_id}/reports/category-breakdown/  GET
    /api/v1/ledgers/{ledger_id}/reports/trend/               GET
    /api/v1/ledgers/{ledger_id}/reconciliation/              GET, POST
    /api/v1/accounts/{account_id}/                           PATCH
    /api/v1/accounts/{account_id}/adjust-balance/            POST
    /api/v1/categories/{category_id}/                        PATCH
    /api/v1/transactions/{transaction_id}/                   PATCH, DELETE

Design Decisions:
    - Views only parse input and serialize output; all rules live in services
    - Ownership is checked by the services, so every view is IsAuthenticated
    - Service exceptions are rendered by core.exception_handler
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ledger.serializers import (
    AccountCreateSerializer,
    AccountListQuerySerializer,
    AccountSerializer,
    AccountUpdateSerializer,
    AdjustBalanceSerializer,
    AdjustmentListQuerySerializer,
    BalanceAdjustmentSerializer,
    CategorizedTransactionCreateSerializer,
    CategoryBreakdownQuerySerializer,
    CategoryBreakdownRowSerializer,
    CategoryCreateSerializer,
    CategoryListQuerySerializer,
    CategorySerializer,
    CategoryUpdateSerializer,
    LedgerRenameSerializer,
    LedgerSerializer,
    MonthlySummarySerializer,
    MonthQuerySerializer,
    ReconciliationReportSerializer,
    TransactionListQuerySerializer,
    TransactionRemovedSerializer,
    TransactionSerializer,
    TransactionUpdateSerializer,
    TransferCreateSerializer,
    TrendPointSerializer,
    TrendQuerySerializer,
)
from ledger.services import (
    AccountService,
    CategoryService,
    LedgerService,
    ReconciliationService,
    ReportService,
    TransactionService,
)


def _validated(serializer_class, data):
    serializer = serializer_class(data=data)
    serializer.is_valid(raise_exception=True)
    return serializer


class LedgerViewSet(viewsets.ViewSet):
    """
    Ledgers owned by the current user.

    list:
        All of the user's ledgers.

    default:
        Return the default ledger, creating it with seeded categories
        on first use.

    partial_update:
        Rename a ledger.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_ledgers",
        summary="List ledgers",
        responses={200: LedgerSerializer(many=True)},
        tags=["Ledger - Ledgers"],
    )
    def list(self, request):
        ledgers = LedgerService.list(request.user)
        return Response(LedgerSerializer(ledgers, many=True).data)

    @extend_schema(
        operation_id="ensure_default_ledger",
        summary="Get or create default ledger",
        request=None,
        responses={200: LedgerSerializer},
        tags=["Ledger - Ledgers"],
    )
    def default(self, request):
        ledger = LedgerService.ensure_default(request.user)
        return Response(LedgerSerializer(ledger).data)

    @extend_schema(
        operation_id="rename_ledger",
        summary="Rename ledger",
        request=LedgerRenameSerializer,
        responses={200: LedgerSerializer},
        tags=["Ledger - Ledgers"],
    )
    def partial_update(self, request, ledger_pk=None):
        serializer = _validated(LedgerRenameSerializer, request.data)
        ledger = LedgerService.rename(
            request.user, ledger_pk, serializer.validated_data["name"]
        )
        return Response(LedgerSerializer(ledger).data)


class AccountViewSet(viewsets.ViewSet):
    """
    Accounts and manual balance adjustments.

    Balances only change through transactions or adjust_balance, which
    leaves an audit record.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_accounts",
        summary="List accounts",
        parameters=[AccountListQuerySerializer],
        responses={200: AccountSerializer(many=True)},
        tags=["Ledger - Accounts"],
    )
    def list(self, request, ledger_pk=None):
        query = _validated(AccountListQuerySerializer, request.query_params)
        accounts = AccountService.list(
            request.user, ledger_pk, status=query.validated_data.get("status")
        )
        return Response(AccountSerializer(accounts, many=True).data)

    @extend_schema(
        operation_id="create_account",
        summary="Create account",
        request=AccountCreateSerializer,
        responses={201: AccountSerializer},
        tags=["Ledger - Accounts"],
    )
    def create(self, request, ledger_pk=None):
        serializer = _validated(AccountCreateSerializer, request.data)
        account = AccountService.create(
            request.user, ledger_pk, **serializer.validated_data
        )
        return Response(
            AccountSerializer(account).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="update_account",
        summary="Update account",
        request=AccountUpdateSerializer,
        responses={200: AccountSerializer},
        tags=["Ledger - Accounts"],
    )
    def partial_update(self, request, pk=None):
        serializer = _validated(AccountUpdateSerializer, request.data)
        account = AccountService.update(
            request.user, pk, **serializer.validated_data
        )
        return Response(AccountSerializer(account).data)

    @extend_schema(
        operation_id="adjust_account_balance",
        summary="Adjust account balance",
        request=AdjustBalanceSerializer,
        responses={200: AccountSerializer},
        tags=["Ledger - Accounts"],
    )
    def adjust_balance(self, request, pk=None):
        serializer = _validated(AdjustBalanceSerializer, request.data)
        account = AccountService.adjust_balance(
            request.user, pk, **serializer.validated_data
        )
        return Response(AccountSerializer(account).data)

    @extend_schema(
        operation_id="list_balance_adjustments",
        summary="List balance adjustments",
        parameters=[AdjustmentListQuerySerializer],
        responses={200: BalanceAdjustmentSerializer(many=True)},
        tags=["Ledger - Accounts"],
    )
    def adjustments(self, request, ledger_pk=None):
        query = _validated(AdjustmentListQuerySerializer, request.query_params)
        adjustments = AccountService.list_adjustments(
            request.user, ledger_pk, **query.validated_data
        )
        return Response(BalanceAdjustmentSerializer(adjustments, many=True).data)


class CategoryViewSet(viewsets.ViewSet):
    """Expense and income categories of a ledger."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_categories",
        summary="List categories",
        parameters=[CategoryListQuerySerializer],
        responses={200: CategorySerializer(many=True)},
        tags=["Ledger - Categories"],
    )
    def list(self, request, ledger_pk=None):
        query = _validated(CategoryListQuerySerializer, request.query_params)
        categories = CategoryService.list(
            request.user, ledger_pk, **query.validated_data
        )
        return Response(CategorySerializer(categories, many=True).data)

    @extend_schema(
        operation_id="create_category",
        summary="Create category",
        request=CategoryCreateSerializer,
        responses={
            201: CategorySerializer,
            409: OpenApiResponse(description="Category already exists"),
        },
        tags=["Ledger - Categories"],
    )
    def create(self, request, ledger_pk=None):
        serializer = _validated(CategoryCreateSerializer, request.data)
        category = CategoryService.create(
            request.user, ledger_pk, **serializer.validated_data
        )
        return Response(
            CategorySerializer(category).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="update_category",
        summary="Update category",
        request=CategoryUpdateSerializer,
        responses={200: CategorySerializer},
        tags=["Ledger - Categories"],
    )
    def partial_update(self, request, pk=None):
        serializer = _validated(CategoryUpdateSerializer, request.data)
        category = CategoryService.update(
            request.user, pk, **serializer.validated_data
        )
        return Response(CategorySerializer(category).data)


class TransactionViewSet(viewsets.ViewSet):
    """
    Expenses, incomes and transfers.

    Every write rebalances the affected accounts in the same database
    transaction.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_transactions",
        summary="List transactions",
        parameters=[TransactionListQuerySerializer],
        responses={200: TransactionSerializer(many=True)},
        tags=["Ledger - Transactions"],
    )
    def list(self, request, ledger_pk=None):
        query = _validated(TransactionListQuerySerializer, request.query_params)
        transactions = TransactionService.list(
            request.user, ledger_pk, query.to_filters()
        )
        return Response(TransactionSerializer(transactions, many=True).data)

    @extend_schema(
        operation_id="create_expense",
        summary="Create expense",
        request=CategorizedTransactionCreateSerializer,
        responses={201: TransactionSerializer},
        tags=["Ledger - Transactions"],
    )
    def expense(self, request, ledger_pk=None):
        serializer = _validated(CategorizedTransactionCreateSerializer, request.data)
        txn = TransactionService.create_expense(
            request.user, ledger_pk, **serializer.validated_data
        )
        return Response(
            TransactionSerializer(txn).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="create_income",
        summary="Create income",
        request=CategorizedTransactionCreateSerializer,
        responses={201: TransactionSerializer},
        tags=["Ledger - Transactions"],
    )
    def income(self, request, ledger_pk=None):
        serializer = _validated(CategorizedTransactionCreateSerializer, request.data)
        txn = TransactionService.create_income(
            request.user, ledger_pk, **serializer.validated_data
        )
        return Response(
            TransactionSerializer(txn).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="create_transfer",
        summary="Create transfer",
        request=TransferCreateSerializer,
        responses={201: TransactionSerializer},
        tags=["Ledger - Transactions"],
    )
    def transfer(self, request, ledger_pk=None):
        serializer = _validated(TransferCreateSerializer, request.data)
        txn = TransactionService.create_transfer(
            request.user, ledger_pk, **serializer.validated_data
        )
        return Response(
            TransactionSerializer(txn).data, status=status.HTTP_201_CREATED
        )

    @extend_schema(
        operation_id="update_transaction",
        summary="Update transaction",
        request=TransactionUpdateSerializer,
        responses={200: TransactionSerializer},
        tags=["Ledger - Transactions"],
    )
    def partial_update(self, request, pk=None):
        serializer = _validated(TransactionUpdateSerializer, request.data)
        txn = TransactionService.update(request.user, pk, serializer.to_patch())
        return Response(TransactionSerializer(txn).data)

    @extend_schema(
        operation_id="delete_transaction",
        summary="Delete transaction",
        responses={200: TransactionRemovedSerializer},
        tags=["Ledger - Transactions"],
    )
    def destroy(self, request, pk=None):
        return Response(TransactionService.remove(request.user, pk))


class ReportViewSet(viewsets.ViewSet):
    """Read-only aggregations over a ledger's transactions."""

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="monthly_summary",
        summary="Monthly summary",
        parameters=[MonthQuerySerializer],
        responses={200: MonthlySummarySerializer},
        tags=["Ledger - Reports"],
    )
    def monthly_summary(self, request, ledger_pk=None):
        query = _validated(MonthQuerySerializer, request.query_params)
        summary = ReportService.monthly_summary(
            request.user, ledger_pk, **query.validated_data
        )
        return Response(summary)

    @extend_schema(
        operation_id="category_breakdown",
        summary="Category breakdown",
        parameters=[CategoryBreakdownQuerySerializer],
        responses={200: CategoryBreakdownRowSerializer(many=True)},
        tags=["Ledger - Reports"],
    )
    def category_breakdown(self, request, ledger_pk=None):
        query = _validated(CategoryBreakdownQuerySerializer, request.query_params)
        rows = ReportService.category_breakdown(
            request.user, ledger_pk, **query.validated_data
        )
        return Response(rows)

    @extend_schema(
        operation_id="trend",
        summary="Income and expense trend",
        parameters=[TrendQuerySerializer],
        responses={200: TrendPointSerializer(many=True)},
        tags=["Ledger - Reports"],
    )
    def trend(self, request, ledger_pk=None):
        query = _validated(TrendQuerySerializer, request.query_params)
        data = query.validated_data
        points = ReportService.trend(
            request.user,
            ledger_pk,
            start=data["from"],
            end=data["to"],
            granularity=data["granularity"],
        )
        return Response(points)


class ReconciliationViewSet(viewsets.ViewSet):
    """
    Compare stored balances with account history.

    retrieve:
        Report drifting accounts without changing anything.

    heal:
        Rewrite drifting balances to their expected values.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="reconciliation_report",
        summary="Report balance drift",
        responses={200: ReconciliationReportSerializer},
        tags=["Ledger - Reconciliation"],
    )
    def retrieve(self, request, ledger_pk=None):
        result = ReconciliationService.reconcile_ledger(request.user, ledger_pk)
        return Response(result.data.to_dict())

    @extend_schema(
        operation_id="reconciliation_heal",
        summary="Heal balance drift",
        request=None,
        responses={200: ReconciliationReportSerializer},
        tags=["Ledger - Reconciliation"],
    )
    def heal(self, request, ledger_pk=None):
        result = ReconciliationService.reconcile_ledger(
            request.user, ledger_pk, heal=True
        )
        return Response(result.data.to_dict())
