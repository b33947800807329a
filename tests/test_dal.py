"""Storage layer: CRUD, filters, migrations and seeding against a temp SQLite file."""

import sqlite3
from datetime import date
from decimal import Decimal

from budgetbuddy.db.dal import Database
from budgetbuddy.db.migrate import CURRENT_SCHEMA_VERSION, apply_migrations
from budgetbuddy.db.seed import SAMPLE_EXPENSES, seed_sample_expenses
from budgetbuddy.models.expense import ExpenseIn


def _expense(**overrides):
    data = {
        "description": "Coffee",
        "amount": "3.40",
        "category": "Food",
        "date": "2025-07-12",
    }
    data.update(overrides)
    return ExpenseIn(**data)


def test_insert_and_get_stores_cents(db):
    expense_id = db.insert_expense(_expense())
    row = db.get_expense(expense_id)
    assert row["amount_cents"] == 340
    assert row["description"] == "Coffee"
    assert row["date"] == "2025-07-12"
    assert row["created_at"].endswith("Z")


def test_get_unknown_returns_none(db):
    assert db.get_expense(999) is None


def test_ids_are_not_reused(db):
    first = db.insert_expense(_expense())
    assert db.delete_expense(first)
    second = db.insert_expense(_expense())
    assert second > first


def test_list_orders_newest_first(seeded_db):
    rows = seeded_db.list_expenses()
    assert [r["description"] for r in rows] == [
        "Lunch",
        "Cinema",
        "Bus ticket",
        "Groceries",
        "Electricity bill",
    ]


def test_list_filters(seeded_db):
    food = seeded_db.list_expenses(category="Food")
    assert [r["description"] for r in food] == ["Lunch", "Groceries"]
    july = seeded_db.list_expenses(start_date=date(2025, 7, 1), end_date=date(2025, 7, 31))
    assert len(july) == 3
    assert seeded_db.list_expenses(category="food") == []


def test_snapshot_returns_domain_records(seeded_db):
    records = seeded_db.snapshot()
    assert len(records) == seeded_db.count_expenses() == 5
    assert sum(r.amount for r in records) == Decimal("109.50")
    assert all(isinstance(r.date, date) for r in records)


def test_list_categories_case_insensitive_sort(seeded_db):
    seeded_db.insert_expense(_expense(category="food"))
    assert seeded_db.list_categories() == [
        "Entertainment",
        "Food",
        "food",
        "Transport",
        "Utilities",
    ]


def test_update_replaces_fields(seeded_db):
    assert seeded_db.update_expense(1, _expense(amount="99.99", category="Misc"))
    row = seeded_db.get_expense(1)
    assert row["amount_cents"] == 9999
    assert row["category"] == "Misc"
    assert row["description"] == "Coffee"


def test_update_and_delete_unknown(db):
    assert db.update_expense(42, _expense()) is False
    assert db.delete_expense(42) is False


def test_delete_removes_row(seeded_db):
    assert seeded_db.delete_expense(2)
    assert seeded_db.get_expense(2) is None
    assert seeded_db.count_expenses() == 4


def test_apply_migrations_is_idempotent(settings):
    assert apply_migrations(settings.db_path) == CURRENT_SCHEMA_VERSION
    db = Database(settings.db_path)
    db.insert_expense(_expense())
    assert apply_migrations(settings.db_path) == CURRENT_SCHEMA_VERSION
    assert db.count_expenses() == 1


def test_legacy_real_amounts_migrate_to_cents(tmp_path):
    path = tmp_path / "legacy.sqlite3"
    conn = sqlite3.connect(path)
    conn.execute(
        """
        CREATE TABLE expenses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            description TEXT NOT NULL,
            amount REAL NOT NULL,
            category TEXT NOT NULL,
            date TEXT NOT NULL
        )
        """
    )
    conn.executemany(
        "INSERT INTO expenses (id, description, amount, category, date) VALUES (?, ?, ?, ?, ?)",
        [
            (3, "Groceries", 24.5, "Food", "2025-07-10"),
            (5, "Rounding dust", 0.001, "Misc", "2025-07-11"),
            (9, "Taxi", 0.1 + 0.2, "Transport", "2025-07-12"),
            (11, "Typo", 1e30, "Misc", "2025-07-13"),
        ],
    )
    conn.commit()
    conn.close()

    assert apply_migrations(path) == CURRENT_SCHEMA_VERSION

    db = Database(path)
    assert db.get_expense(3)["amount_cents"] == 2450
    assert db.get_expense(9)["amount_cents"] == 30
    assert db.get_expense(5) is None
    assert db.get_expense(11) is None
    assert db.insert_expense(_expense()) > 9


def test_seed_only_fills_empty_store(settings):
    apply_migrations(settings.db_path)
    assert seed_sample_expenses(settings.db_path) == len(SAMPLE_EXPENSES)
    assert seed_sample_expenses(settings.db_path) == 0
    assert Database(settings.db_path).count_expenses() == len(SAMPLE_EXPENSES)
