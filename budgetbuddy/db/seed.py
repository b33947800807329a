"""Seeding helpers for a first-run demo dataset.

`seed_sample_expenses` inserts a handful of sample expenses when the store is
empty. Existing data is never touched so this can be safely re-run.
"""

from __future__ import annotations
from decimal import Decimal
from pathlib import Path
import logging
import sqlite3
from typing import Sequence, Tuple

from budgetbuddy.services.money import to_cents
from .schema import init_db

logger = logging.getLogger("budgetbuddy.db")

SAMPLE_EXPENSES: Sequence[Tuple[str, Decimal, str, str]] = (
    ("Groceries", Decimal("24.50"), "Food", "2025-07-10"),
    ("Bus ticket", Decimal("2.75"), "Transport", "2025-07-11"),
    ("Electricity bill", Decimal("60.00"), "Utilities", "2025-07-05"),
    ("Cinema", Decimal("12.00"), "Entertainment", "2025-08-01"),
    ("Lunch", Decimal("10.25"), "Food", "2025-08-03"),
)


def seed_sample_expenses(db_path: Path) -> int:
    """Insert sample rows into an empty expenses table; return rows inserted."""
    init_db(db_path)  # ensure tables exist
    with sqlite3.connect(db_path) as conn:
        cur = conn.cursor()
        cur.execute("SELECT COUNT(*) FROM expenses")
        if cur.fetchone()[0]:
            return 0
        cur.executemany(
            "INSERT INTO expenses (description, amount_cents, category, date) VALUES (?, ?, ?, ?)",
            [(d, to_cents(a), c, day) for d, a, c, day in SAMPLE_EXPENSES],
        )
        conn.commit()
    logger.info("inserted sample data (%d expenses)", len(SAMPLE_EXPENSES))
    return len(SAMPLE_EXPENSES)
