from datetime import date
from decimal import Decimal

from budgetbuddy.services.charts import badge_class, category_breakdown
from budgetbuddy.services.dashboard import (
    average_daily_spend,
    compute_dashboard,
    month_bounds,
)

D = Decimal


def test_dashboard_kpis(sample_records):
    summary = compute_dashboard(sample_records, date(2025, 8, 5))
    assert summary.month_label == "August 2025"
    assert summary.balance_all == D("109.50")
    assert summary.total_this_month == D("22.25")
    assert summary.avg_daily == D("4.45")
    assert summary.expense_count == 5
    assert (summary.top_category, summary.top_category_total) == ("Utilities", D("60.00"))
    assert summary.largest.description == "Electricity bill"


def test_dashboard_sparklines(sample_records):
    summary = compute_dashboard(sample_records, date(2025, 8, 5))
    assert summary.spark_monthly.labels == ["Mar", "Apr", "May", "Jun", "Jul", "Aug"]
    assert summary.spark_monthly.values == [0, 0, 0, 0, D("87.25"), D("22.25")]
    assert len(summary.spark_daily.labels) == 12
    assert summary.spark_daily.labels[-1] == "Aug 5"
    assert sum(summary.spark_daily.values) == D("22.25")


def test_dashboard_recent_order(sample_records):
    summary = compute_dashboard(sample_records, date(2025, 8, 5))
    assert [r.description for r in summary.recent] == [
        "Lunch",
        "Cinema",
        "Bus ticket",
        "Groceries",
        "Electricity bill",
    ]


def test_dashboard_empty_store():
    summary = compute_dashboard([], date(2025, 8, 5))
    assert summary.balance_all == 0
    assert summary.top_category is None
    assert summary.largest is None
    assert summary.avg_daily == 0
    assert summary.recent == []
    assert summary.spark_monthly.values == [0] * 6


def test_month_bounds_handles_leap_year():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))
    assert month_bounds(date(2025, 12, 31)) == (date(2025, 12, 1), date(2025, 12, 31))


def test_average_daily_on_first_of_month(sample_records):
    assert average_daily_spend(sample_records, date(2025, 8, 1)) == D("12.00")


def test_category_breakdown_percent_and_badges(sample_records):
    items = category_breakdown(sample_records)
    assert [i.category for i in items] == ["Utilities", "Food", "Entertainment", "Transport"]
    assert items[0].percent == 54.79
    assert round(sum(i.percent for i in items)) == 100
    assert [i.badge for i in items] == ["utilities", "food", "entertainment", "transport"]


def test_badge_class_fallback():
    assert badge_class("Public Transportation") == "transport"
    assert badge_class("Gifts") == "other"
    assert badge_class(None) == "other"
