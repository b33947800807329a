from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from budgetbuddy.core.config import Settings
from budgetbuddy.db.dal import Database
from budgetbuddy.db.migrate import apply_migrations
from budgetbuddy.main import create_app
from budgetbuddy.models.expense import Expense, ExpenseIn

SAMPLES = [
    ("Groceries", "24.50", "Food", "2025-07-10"),
    ("Bus ticket", "2.75", "Transport", "2025-07-11"),
    ("Electricity bill", "60.00", "Utilities", "2025-07-05"),
    ("Cinema", "12.00", "Entertainment", "2025-08-01"),
    ("Lunch", "10.25", "Food", "2025-08-03"),
]


def make_expense(description, amount, category, day, expense_id=None) -> Expense:
    return Expense(
        id=expense_id,
        description=description,
        amount=Decimal(amount),
        category=category,
        date=date.fromisoformat(day),
    )


@pytest.fixture
def july_records():
    """The three July sample expenses with ids 1..3."""
    return [make_expense(*s, expense_id=i) for i, s in enumerate(SAMPLES[:3], start=1)]


@pytest.fixture
def sample_records():
    return [make_expense(*s, expense_id=i) for i, s in enumerate(SAMPLES, start=1)]


@pytest.fixture
def settings(tmp_path):
    s = Settings(data_dir=tmp_path, db_filename="test.sqlite3", seed_sample_data=False)
    s.init_post_load()
    return s


@pytest.fixture
def db(settings):
    apply_migrations(settings.db_path)
    return Database(settings.db_path)


@pytest.fixture
def seeded_db(db):
    for description, amount, category, day in SAMPLES:
        db.insert_expense(
            ExpenseIn(description=description, amount=amount, category=category, date=day)
        )
    return db


@pytest.fixture
def client(settings):
    app = create_app(settings_override=settings)
    with TestClient(app) as c:
        yield c


@pytest.fixture
def seeded_client(settings):
    settings.seed_sample_data = True
    app = create_app(settings_override=settings)
    with TestClient(app) as c:
        yield c
