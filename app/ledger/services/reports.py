"""
Read-only reports over a ledger's transactions.

Reports sum transactions only. Balance adjustments never appear in them.
All calendar math is done in UTC on occurred_at milliseconds.

Usage:
    from ledger.services import ReportService

    summary = ReportService.monthly_summary(user, ledger.id, 2024, 3)
    summary["net"]  # income - expense

    rows = ReportService.category_breakdown(user, ledger.id, 2024, 3, "expense")
    points = ReportService.trend(user, ledger.id, start_ms, end_ms, "day")
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from django.db.models import Count, Q, Sum

from core.services import BaseService
from ledger.authorization import require_ledger_owner
from ledger.constants import MS_PER_DAY
from ledger.exceptions import InvalidArgument
from ledger.models import CategoryType, Transaction, TransactionType
from ledger.validation import assert_choice, assert_time_window

if TYPE_CHECKING:
    import uuid
    from typing import Any

    from authentication.models import User

GRANULARITY_DAY = "day"
GRANULARITY_MONTH = "month"
GRANULARITIES = (GRANULARITY_DAY, GRANULARITY_MONTH)


def month_range(year: Any, month: Any) -> tuple[int, int]:
    """
    Inclusive [start, end] millisecond bounds of a UTC calendar month.

    Raises:
        InvalidArgument: If year is outside 1970..9999 or month outside 1..12
    """
    if isinstance(year, bool) or not isinstance(year, int) or not 1970 <= year <= 9999:
        raise InvalidArgument(
            "year must be a valid integer",
            details={"field": "year", "constraint": "range", "min": 1970, "max": 9999},
        )
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise InvalidArgument(
            "month must be an integer between 1 and 12",
            details={"field": "month", "constraint": "range", "min": 1, "max": 12},
        )
    start = calendar.timegm((year, month, 1, 0, 0, 0)) * 1000
    days = calendar.monthrange(year, month)[1]
    return start, start + days * MS_PER_DAY - 1


def bucket_key(occurred_at: int, granularity: str) -> str:
    """Format a millisecond timestamp as YYYY-MM-DD or YYYY-MM in UTC."""
    moment = datetime.fromtimestamp(occurred_at / 1000, tz=timezone.utc)
    if granularity == GRANULARITY_MONTH:
        return moment.strftime("%Y-%m")
    return moment.strftime("%Y-%m-%d")


class ReportService(BaseService):
    """Aggregations for dashboards and report screens."""

    @classmethod
    def monthly_summary(
        cls, user: User, ledger_id: uuid.UUID, year: int, month: int
    ) -> dict[str, int]:
        """
        Totals for one UTC month.

        Returns:
            Dict with year, month, income, expense, transfer,
            net (income - expense) and transaction_count
        """
        ledger = require_ledger_owner(user, ledger_id)
        start, end = month_range(year, month)

        totals = Transaction.objects.filter(
            ledger=ledger, occurred_at__gte=start, occurred_at__lte=end
        ).aggregate(
            income=Sum("amount", filter=Q(type=TransactionType.INCOME), default=0),
            expense=Sum("amount", filter=Q(type=TransactionType.EXPENSE), default=0),
            transfer=Sum("amount", filter=Q(type=TransactionType.TRANSFER), default=0),
            transaction_count=Count("id"),
        )

        return {
            "year": year,
            "month": month,
            "income": totals["income"],
            "expense": totals["expense"],
            "transfer": totals["transfer"],
            "net": totals["income"] - totals["expense"],
            "transaction_count": totals["transaction_count"],
        }

    @classmethod
    def category_breakdown(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        year: int,
        month: int,
        type: str,
    ) -> list[dict[str, Any]]:
        """
        Per-category totals for expenses or incomes in one UTC month.

        Rows are sorted by amount, largest first. ratio is the share of the
        type's total for the month (0 when the total is 0).
        """
        ledger = require_ledger_owner(user, ledger_id)
        start, end = month_range(year, month)
        assert_choice(type, CategoryType, "type")

        rows = list(
            Transaction.objects.filter(
                ledger=ledger,
                type=type,
                category__isnull=False,
                occurred_at__gte=start,
                occurred_at__lte=end,
            )
            .values("category_id", "category__name")
            .annotate(amount=Sum("amount"), count=Count("id"))
            .order_by("-amount", "category__name")
        )
        total = sum(row["amount"] for row in rows)

        return [
            {
                "category_id": str(row["category_id"]),
                "category_name": row["category__name"],
                "amount": row["amount"],
                "count": row["count"],
                "ratio": row["amount"] / total if total else 0,
            }
            for row in rows
        ]

    @classmethod
    def trend(
        cls,
        user: User,
        ledger_id: uuid.UUID,
        start: int,
        end: int,
        granularity: str,
    ) -> list[dict[str, Any]]:
        """
        Income, expense and net per day or month within [start, end].

        Transfers do not count toward income or expense, but a bucket that
        only holds transfers is still reported with zeros.

        Returns:
            Rows of {bucket, income, expense, net}, sorted by bucket
        """
        ledger = require_ledger_owner(user, ledger_id)
        if start is None or end is None:
            raise InvalidArgument(
                "from and to are required",
                details={
                    "field": "from" if start is None else "to",
                    "constraint": "required",
                },
            )
        assert_time_window(start, end)
        if granularity not in GRANULARITIES:
            raise InvalidArgument(
                f"granularity must be one of: {', '.join(GRANULARITIES)}",
                details={"field": "granularity", "constraint": "choice"},
            )

        buckets: dict[str, dict[str, int]] = {}
        rows = (
            Transaction.objects.filter(
                ledger=ledger, occurred_at__gte=start, occurred_at__lte=end
            )
            .order_by("occurred_at")
            .values_list("type", "amount", "occurred_at")
        )
        for txn_type, amount, occurred_at in rows:
            bucket = buckets.setdefault(
                bucket_key(occurred_at, granularity), {"income": 0, "expense": 0}
            )
            if txn_type == TransactionType.INCOME:
                bucket["income"] += amount
            elif txn_type == TransactionType.EXPENSE:
                bucket["expense"] += amount

        return [
            {
                "bucket": key,
                "income": value["income"],
                "expense": value["expense"],
                "net": value["income"] - value["expense"],
            }
            for key, value in sorted(buckets.items())
        ]
