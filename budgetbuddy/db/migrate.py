"""Database migration utilities.

Handles schema evolution by applying idempotent migrations keyed by an integer
`schema_version` stored in the metadata table.

Version 1 is the legacy layout (``amount REAL`` and no timestamps). Version 2
stores amounts as integer cents so that sums are exact.
"""

from __future__ import annotations
from pathlib import Path
import logging
import sqlite3
from typing import Optional

from budgetbuddy.services.money import parse_amount, to_cents
from . import schema as schema_def
from .schema import init_db

CURRENT_SCHEMA_VERSION = 2
SCHEMA_VERSION_KEY = "schema_version"

logger = logging.getLogger("budgetbuddy.db")


def _get_schema_version(conn: sqlite3.Connection) -> Optional[int]:
    try:
        cur = conn.cursor()
        cur.execute("SELECT value FROM metadata WHERE key=?", (SCHEMA_VERSION_KEY,))
        row = cur.fetchone()
        if row:
            return int(row[0])
    except sqlite3.OperationalError:
        # metadata table may not exist yet (first run before init_db)
        return None
    return None


def _detect_version(conn: sqlite3.Connection) -> int:
    cur = conn.cursor()
    if _column_exists(cur, "expenses", "amount_cents"):
        return CURRENT_SCHEMA_VERSION
    return 1


def apply_migrations(db_path: Path) -> int:
    """Apply required migrations and return resulting schema version."""
    init_db(db_path)
    conn = sqlite3.connect(db_path)
    try:
        version = _get_schema_version(conn) or _detect_version(conn)
        if version < 2:
            _migrate_to_v2(conn)
            version = 2
        _set_schema_version(conn, version)
        conn.commit()
        return version
    finally:
        conn.close()


def _set_schema_version(conn: sqlite3.Connection, version: int) -> None:
    cur = conn.cursor()
    cur.execute(
        "INSERT INTO metadata (key, value) VALUES (?, ?) "
        "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
        f"updated_at=({schema_def.BASIC_UTC_NOW})",
        (SCHEMA_VERSION_KEY, str(version)),
    )


def _migrate_to_v2(conn: sqlite3.Connection) -> None:
    """Upgrade schema to version 2 (fixed-point amounts, timestamps)."""
    cur = conn.cursor()
    try:
        _rebuild_expenses(cur)
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def _rebuild_expenses(cur: sqlite3.Cursor) -> None:
    if _column_exists(cur, "expenses", "amount_cents"):
        return
    cur.execute("DROP INDEX IF EXISTS idx_expenses_date")
    cur.execute("DROP INDEX IF EXISTS idx_expenses_category")
    cur.execute("ALTER TABLE expenses RENAME TO expenses_legacy")
    cur.execute(schema_def.EXPENSES_DDL)
    cur.execute(
        "SELECT id, description, amount, category, date FROM expenses_legacy ORDER BY id"
    )
    migrated = skipped = 0
    for row_id, description, amount, category, day in cur.fetchall():
        try:
            cents = to_cents(parse_amount(amount))
        except ValueError:
            cents = 0
        if cents <= 0:
            logger.warning(
                "skipping legacy expense with unusable amount",
                extra={"expense_id": row_id},
            )
            skipped += 1
            continue
        cur.execute(
            """
            INSERT INTO expenses (id, description, amount_cents, category, date)
            VALUES (?, ?, ?, ?, ?)
            """,
            (row_id, description, cents, category, day),
        )
        migrated += 1
    cur.execute("DROP TABLE expenses_legacy")
    schema_def._ensure_indexes(cur)
    _refresh_autoincrement(cur, "expenses", "id")
    logger.info(
        "migrated legacy expenses table (%d rows, %d skipped)", migrated, skipped
    )


def _refresh_autoincrement(cur: sqlite3.Cursor, table: str, pk_column: str) -> None:
    cur.execute(f"SELECT MAX({pk_column}) FROM {table}")
    row = cur.fetchone()
    if not row or row[0] is None:
        return
    cur.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='sqlite_sequence'"
    )
    if cur.fetchone() is None:
        return
    cur.execute("SELECT 1 FROM sqlite_sequence WHERE name=?", (table,))
    if cur.fetchone() is None:
        cur.execute(
            "INSERT INTO sqlite_sequence (name, seq) VALUES (?, ?)",
            (table, int(row[0])),
        )
    else:
        cur.execute(
            "UPDATE sqlite_sequence SET seq=? WHERE name=?",
            (int(row[0]), table),
        )


def _column_exists(cur: sqlite3.Cursor, table: str, column: str) -> bool:
    cur.execute(f"PRAGMA table_info({table})")
    return any(row[1] == column for row in cur.fetchall())
