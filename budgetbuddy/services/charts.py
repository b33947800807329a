"""Chart-series adapters.

Turn aggregation results into the label/value payloads the browser charts
consume. Values leave as floats with two-decimal precision.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List

from budgetbuddy.models.constants import BADGE_RULES, DEFAULT_BADGE
from budgetbuddy.models.expense import Expense
from budgetbuddy.services.aggregation import Series, group_by_category
from budgetbuddy.services.money import quantize2


@dataclass(frozen=True)
class CategoryBreakdownItem:
    category: str
    total: Decimal
    percent: float
    badge: str


def badge_class(category: str | None) -> str:
    if not category:
        return DEFAULT_BADGE
    lowered = category.lower()
    for needle, badge in BADGE_RULES:
        if needle in lowered:
            return badge
    return DEFAULT_BADGE


def category_breakdown(records: Iterable[Expense]) -> List[CategoryBreakdownItem]:
    """Category totals with percent of the grand total (0 when nothing spent)."""
    totals = group_by_category(records)
    grand = sum((t.total for t in totals), Decimal(0))
    return [
        CategoryBreakdownItem(
            category=t.category,
            total=t.total,
            percent=float(quantize2(t.total / grand * 100)) if grand > 0 else 0.0,
            badge=badge_class(t.category),
        )
        for t in totals
    ]


def series_payload(series: Series) -> dict:
    return {
        "labels": list(series.labels),
        "values": [float(quantize2(v)) for v in series.values],
    }
