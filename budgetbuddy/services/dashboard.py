"""KPI summary for the dashboard.

Computed from a full snapshot on every call; there is no incremental state to
keep in sync with writes.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Sequence

from budgetbuddy.models.constants import MONTH_NAMES
from budgetbuddy.models.expense import Expense
from budgetbuddy.services.aggregation import (
    Series,
    bucket_by_day,
    bucket_by_month,
    group_by_category,
    top_n,
    total_in_range,
)
from budgetbuddy.services.money import ZERO, quantize2

SPARK_DAYS = 12
SPARK_MONTHS = 6
RECENT_LIMIT = 6


@dataclass(frozen=True)
class DashboardSummary:
    as_of: date
    month_label: str
    balance_all: Decimal
    total_this_month: Decimal
    expense_count: int
    top_category: Optional[str]
    top_category_total: Decimal
    avg_daily: Decimal
    largest: Optional[Expense]
    spark_daily: Series
    spark_monthly: Series
    recent: List[Expense]


def month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)


def long_month_label(day: date) -> str:
    return f"{MONTH_NAMES[day.month - 1]} {day.year}"


def month_to_date_total(records: Sequence[Expense], as_of: date) -> Decimal:
    start, end = month_bounds(as_of)
    return total_in_range(records, start, end)


def average_daily_spend(records: Sequence[Expense], as_of: date) -> Decimal:
    """Month total divided by days elapsed in the month (as_of inclusive)."""
    return quantize2(month_to_date_total(records, as_of) / as_of.day)


def recent_expenses(records: Sequence[Expense], limit: int = RECENT_LIMIT) -> List[Expense]:
    ordered = sorted(
        records, key=lambda r: (r.date, r.id if r.id is not None else 0), reverse=True
    )
    return ordered[:limit]


def compute_dashboard(records: Sequence[Expense], as_of: date) -> DashboardSummary:
    categories = group_by_category(records)
    top = categories[0] if categories else None
    largest = top_n(records, 1)

    monthly = bucket_by_month(records, SPARK_MONTHS, as_of)
    # sparkline axis only needs the month name
    spark_monthly = Series(
        labels=[label.split(" ")[0] for label in monthly.labels],
        values=monthly.values,
    )

    return DashboardSummary(
        as_of=as_of,
        month_label=long_month_label(as_of),
        balance_all=sum((r.amount for r in records), ZERO),
        total_this_month=month_to_date_total(records, as_of),
        expense_count=len(records),
        top_category=top.category if top else None,
        top_category_total=top.total if top else ZERO,
        avg_daily=average_daily_spend(records, as_of),
        largest=largest[0] if largest else None,
        spark_daily=bucket_by_day(records, SPARK_DAYS, as_of),
        spark_monthly=spark_monthly,
        recent=recent_expenses(records),
    )


__all__ = [
    "DashboardSummary",
    "month_bounds",
    "long_month_label",
    "month_to_date_total",
    "average_daily_spend",
    "recent_expenses",
    "compute_dashboard",
]
