from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from budgetbuddy.core.config import Settings
from budgetbuddy.core.deps import get_app_settings, get_as_of, get_db
from budgetbuddy.core.errors import InvalidDateRangeError
from budgetbuddy.db.dal import Database
from budgetbuddy.models.expense import ExpenseOut
from budgetbuddy.services.aggregation import (
    bucket_by_day,
    bucket_by_month,
    top_n,
    total_in_range,
)
from budgetbuddy.services.charts import category_breakdown, series_payload
from budgetbuddy.services.dashboard import compute_dashboard
from budgetbuddy.services.money import round2

router = APIRouter(tags=["analytics"])


class CategoryBreakdownItem(BaseModel):
    category: str
    total: float
    percent: float
    badge: str


class SeriesOut(BaseModel):
    labels: List[str]
    values: List[float]


class RangeTotal(BaseModel):
    start: date
    end: date
    total: float


class TopCategory(BaseModel):
    category: Optional[str]
    total: float


class Dashboard(BaseModel):
    as_of: date
    month_label: str
    balance_all: float
    total_this_month: float
    expense_count: int
    top_category: TopCategory
    avg_daily: float
    largest: Optional[ExpenseOut]
    spark_daily: SeriesOut
    spark_monthly: SeriesOut
    recent: List[ExpenseOut]


@router.get(
    "/api/analytics/category-breakdown",
    response_model=List[CategoryBreakdownItem],
    summary="Totals per category, largest first, with percent of total",
)
async def category_breakdown_endpoint(db: Database = Depends(get_db)):
    return [
        CategoryBreakdownItem(
            category=i.category,
            total=round2(i.total),
            percent=i.percent,
            badge=i.badge,
        )
        for i in category_breakdown(db.snapshot())
    ]


@router.get(
    "/api/analytics/monthly",
    response_model=SeriesOut,
    summary="Zero-filled monthly totals ending at the as_of month",
)
async def monthly_endpoint(
    months: Optional[int] = Query(None, ge=1, le=120, description="Months back"),
    as_of: date = Depends(get_as_of),
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    series = bucket_by_month(db.snapshot(), months or settings.chart_months_back, as_of)
    return series_payload(series)


@router.get(
    "/api/analytics/daily",
    response_model=SeriesOut,
    summary="Zero-filled daily totals ending at as_of",
)
async def daily_endpoint(
    days: Optional[int] = Query(None, ge=1, le=366, description="Days back"),
    as_of: date = Depends(get_as_of),
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    series = bucket_by_day(db.snapshot(), days or settings.chart_days_back, as_of)
    return series_payload(series)


@router.get(
    "/api/analytics/top",
    response_model=List[ExpenseOut],
    summary="Largest expenses (amount desc, then most recent)",
)
async def top_endpoint(
    n: Optional[int] = Query(
        None, ge=0, description="How many expenses (capped at chat_top_n_max)"
    ),
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    count = settings.chat_top_n_default if n is None else min(n, settings.chat_top_n_max)
    return [ExpenseOut.from_expense(e) for e in top_n(db.snapshot(), count)]


@router.get(
    "/api/analytics/total",
    response_model=RangeTotal,
    summary="Inclusive date-range total",
)
async def total_endpoint(
    start: date = Query(..., description="Start date inclusive"),
    end: date = Query(..., description="End date inclusive"),
    db: Database = Depends(get_db),
):
    if start > end:
        raise InvalidDateRangeError(start, end)
    total = total_in_range(db.snapshot(), start, end)
    return RangeTotal(start=start, end=end, total=round2(total))


@router.get(
    "/api/dashboard",
    response_model=Dashboard,
    summary="KPI summary, sparklines and recent expenses",
)
async def dashboard_endpoint(
    as_of: date = Depends(get_as_of),
    db: Database = Depends(get_db),
):
    summary = compute_dashboard(db.snapshot(), as_of)
    return Dashboard(
        as_of=summary.as_of,
        month_label=summary.month_label,
        balance_all=round2(summary.balance_all),
        total_this_month=round2(summary.total_this_month),
        expense_count=summary.expense_count,
        top_category=TopCategory(
            category=summary.top_category, total=round2(summary.top_category_total)
        ),
        avg_daily=round2(summary.avg_daily),
        largest=ExpenseOut.from_expense(summary.largest) if summary.largest else None,
        spark_daily=SeriesOut(**series_payload(summary.spark_daily)),
        spark_monthly=SeriesOut(**series_payload(summary.spark_monthly)),
        recent=[ExpenseOut.from_expense(e) for e in summary.recent],
    )
