"""Data Access Layer for expense records.

Responsibilities
----------------
- Provide CRUD helpers for the single ``expenses`` table.
- Translate validated ``ExpenseIn`` models into fixed-point storage
  (integer cents) and hand rows back as plain dicts.
- Offer a snapshot loader returning domain ``Expense`` records for the
  aggregation engine. Aggregation itself happens in Python, not SQL.
"""

from __future__ import annotations

from pathlib import Path
import logging
import sqlite3
from typing import Any, Dict, List, Optional
from datetime import date

from budgetbuddy.models import Expense, ExpenseIn
from budgetbuddy.services.money import to_cents

UTC_NOW_SQL = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"

logger = logging.getLogger("budgetbuddy.db")


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    # ------------------------------------------------------------------
    # Reads
    def get_expense(self, expense_id: int) -> Optional[Dict[str, Any]]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT * FROM expenses WHERE id = ?", (expense_id,))
            row = cur.fetchone()
            return dict(row) if row else None

    def list_expenses(
        self,
        category: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        clauses: List[str] = []
        params: List[Any] = []
        if category:
            clauses.append("category = ?")
            params.append(category)
        if start_date:
            clauses.append("date >= ?")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append("date <= ?")
            params.append(end_date.isoformat())
        where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
        sql = f"SELECT * FROM expenses{where} ORDER BY date DESC, id DESC"
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(sql, params)
            return [dict(r) for r in cur.fetchall()]

    def snapshot(self) -> List[Expense]:
        """Every stored record as a domain ``Expense`` (date DESC, id DESC)."""
        return [Expense.from_row(r) for r in self.list_expenses()]

    def count_expenses(self) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM expenses")
            row = cur.fetchone()
            return int(row[0] if row and row[0] is not None else 0)

    def list_categories(self) -> List[str]:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("SELECT DISTINCT category FROM expenses")
            return sorted((r[0] for r in cur.fetchall()), key=lambda c: (c.lower(), c))

    # ------------------------------------------------------------------
    # Writes
    def insert_expense(self, expense: ExpenseIn) -> int:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                INSERT INTO expenses (
                    description, amount_cents, category, date, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ({UTC_NOW_SQL}), ({UTC_NOW_SQL}))
                """,
                (
                    expense.description,
                    to_cents(expense.amount),
                    expense.category,
                    expense.date.isoformat(),
                ),
            )
            conn.commit()
            expense_id = int(cur.lastrowid)
        logger.info("expense created", extra={"expense_id": expense_id})
        return expense_id

    def update_expense(self, expense_id: int, expense: ExpenseIn) -> bool:
        """Replace every client-owned field of a record; False when id is unknown."""
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute(
                f"""
                UPDATE expenses
                SET description = ?, amount_cents = ?, category = ?, date = ?,
                    updated_at = ({UTC_NOW_SQL})
                WHERE id = ?
                """,
                (
                    expense.description,
                    to_cents(expense.amount),
                    expense.category,
                    expense.date.isoformat(),
                    expense_id,
                ),
            )
            conn.commit()
            updated = cur.rowcount > 0
        if updated:
            logger.info("expense updated", extra={"expense_id": expense_id})
        return updated

    def delete_expense(self, expense_id: int) -> bool:
        with self._connect() as conn:
            cur = conn.cursor()
            cur.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
            deleted = cur.rowcount > 0
        if deleted:
            logger.info("expense deleted", extra={"expense_id": expense_id})
        return deleted


__all__ = ["Database"]
