"""FastAPI dependencies resolving per-app settings and storage.

Routes read settings from ``app.state`` (populated by ``create_app``) so a
test-supplied ``Settings`` override reaches every request.
"""

from datetime import date
from typing import Optional

from fastapi import Query, Request
from fastapi.exceptions import RequestValidationError

from budgetbuddy.core.config import Settings
from budgetbuddy.db.dal import Database
from budgetbuddy.models.constants import MIN_REFERENCE_DATE


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return Database(request.app.state.settings.db_path)


def get_as_of(
    as_of: Optional[date] = Query(
        None, description="Reference date (defaults to today)"
    ),
) -> date:
    if as_of is not None and as_of < MIN_REFERENCE_DATE:
        raise RequestValidationError(
            [
                {
                    "loc": ("query", "as_of"),
                    "msg": f"as_of must be on or after {MIN_REFERENCE_DATE.isoformat()}",
                    "type": "value_error",
                }
            ]
        )
    return as_of or date.today()
