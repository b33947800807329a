"""Aggregation engine over in-memory expense snapshots.

Every function here is pure: it takes a sequence of validated ``Expense``
records plus parameters and returns a fresh result. Input order never changes
the output. Sums use ``Decimal`` so totals are exact.

Operations:
    - group_by_category: totals per category, largest first
    - bucket_by_month:   zero-filled calendar-month series ending at a reference date
    - bucket_by_day:     zero-filled daily series ending at a reference date
    - total_in_range:    inclusive date-range sum
    - top_n:             largest expenses
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from typing import Dict, Iterable, List, NamedTuple, Sequence, Tuple

from budgetbuddy.models.constants import MONTH_ABBR, OTHER_CATEGORY
from budgetbuddy.models.expense import Expense
from budgetbuddy.services.money import ZERO


class CategoryTotal(NamedTuple):
    category: str
    total: Decimal


class Series(NamedTuple):
    labels: List[str]
    values: List[Decimal]


def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBR[month - 1]} {year}"


def day_label(day: date) -> str:
    return f"{MONTH_ABBR[day.month - 1]} {day.day}"


def _category_key(raw: str | None) -> str:
    if raw is None or not raw.strip():
        return OTHER_CATEGORY
    return raw


def group_by_category(records: Iterable[Expense]) -> List[CategoryTotal]:
    """Sum amounts per category, ordered by total descending.

    Ties keep the order in which categories were first seen; the sort is
    stable so equal totals are never re-ordered alphabetically. Missing or
    blank categories fold into ``OTHER_CATEGORY``.
    """
    sums: Dict[str, Decimal] = {}
    for r in records:
        key = _category_key(r.category)
        sums[key] = sums.get(key, ZERO) + r.amount
    ordered = sorted(sums.items(), key=lambda kv: kv[1], reverse=True)
    return [CategoryTotal(k, v) for k, v in ordered]


def _month_keys(months_back: int, reference_date: date) -> List[Tuple[int, int]]:
    anchor = reference_date.year * 12 + (reference_date.month - 1)
    keys = []
    for offset in range(months_back - 1, -1, -1):
        idx = anchor - offset
        keys.append((idx // 12, idx % 12 + 1))
    return keys


def bucket_by_month(
    records: Iterable[Expense], months_back: int, reference_date: date
) -> Series:
    """Return ``months_back`` monthly totals ending at ``reference_date``'s month.

    Buckets are oldest first and zero-filled. Records outside the window are
    ignored. A non-positive ``months_back`` yields an empty series.
    """
    keys = _month_keys(max(months_back, 0), reference_date)
    totals: Dict[Tuple[int, int], Decimal] = {k: ZERO for k in keys}
    for r in records:
        key = (r.date.year, r.date.month)
        if key in totals:
            totals[key] += r.amount
    return Series(
        labels=[month_label(y, m) for y, m in keys],
        values=[totals[k] for k in keys],
    )


def bucket_by_day(
    records: Iterable[Expense], days_back: int, reference_date: date
) -> Series:
    """Return ``days_back`` daily totals ending at ``reference_date`` inclusive."""
    days = [
        reference_date - timedelta(days=offset)
        for offset in range(max(days_back, 0) - 1, -1, -1)
    ]
    totals: Dict[date, Decimal] = {d: ZERO for d in days}
    for r in records:
        if r.date in totals:
            totals[r.date] += r.amount
    return Series(labels=[day_label(d) for d in days], values=[totals[d] for d in days])


def total_in_range(
    records: Iterable[Expense], start_date: date, end_date: date
) -> Decimal:
    """Sum of amounts with ``start_date <= date <= end_date``; 0 when none match."""
    total = ZERO
    for r in records:
        if start_date <= r.date <= end_date:
            total += r.amount
    return total


def top_n(records: Sequence[Expense], n: int) -> List[Expense]:
    """Largest ``n`` expenses.

    Ordered by amount descending, then most recent date, then ascending id
    (records without an id sort after those with one).
    """
    if n <= 0:
        return []
    ranked = sorted(
        records,
        key=lambda r: (
            -r.amount,
            -r.date.toordinal(),
            r.id is None,
            r.id if r.id is not None else 0,
        ),
    )
    return ranked[:n]


__all__ = [
    "CategoryTotal",
    "Series",
    "month_label",
    "day_label",
    "group_by_category",
    "bucket_by_month",
    "bucket_by_day",
    "total_in_range",
    "top_n",
]
