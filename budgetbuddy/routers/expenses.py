from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from budgetbuddy.core.deps import get_db
from budgetbuddy.core.errors import ExpenseNotFoundError, InvalidDateRangeError
from budgetbuddy.db.dal import Database
from budgetbuddy.models.expense import ExpenseIn, ExpenseOut

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


def _load(db: Database, expense_id: int) -> ExpenseOut:
    row = db.get_expense(expense_id)
    if not row:
        raise ExpenseNotFoundError(expense_id)
    return ExpenseOut.from_row(row)


# Routes -----------------------------------------------------------
@router.get(
    "", response_model=List[ExpenseOut], summary="List expenses with optional filters"
)
async def list_expenses_endpoint(
    category: Optional[str] = Query(None, description="Exact category match"),
    start: Optional[date] = Query(None, description="Filter: start date inclusive"),
    end: Optional[date] = Query(None, description="Filter: end date inclusive"),
    db: Database = Depends(get_db),
):
    if start and end and start > end:
        raise InvalidDateRangeError(start, end)
    rows = db.list_expenses(category=category, start_date=start, end_date=end)
    return [ExpenseOut.from_row(r) for r in rows]


@router.get(
    "/categories",
    response_model=List[str],
    summary="Distinct categories (case-insensitive sort)",
)
async def list_categories_endpoint(db: Database = Depends(get_db)):
    return db.list_categories()


@router.get("/{expense_id}", response_model=ExpenseOut, summary="Fetch one expense")
async def get_expense_endpoint(
    expense_id: int = Path(..., gt=0, description="Expense identifier"),
    db: Database = Depends(get_db),
):
    return _load(db, expense_id)


@router.post(
    "", response_model=ExpenseOut, status_code=201, summary="Create an expense"
)
async def create_expense(payload: ExpenseIn, db: Database = Depends(get_db)):
    expense_id = db.insert_expense(payload)
    return _load(db, expense_id)


@router.put(
    "/{expense_id}", response_model=ExpenseOut, summary="Replace an expense"
)
async def replace_expense(
    payload: ExpenseIn,
    expense_id: int = Path(..., gt=0, description="Expense identifier"),
    db: Database = Depends(get_db),
):
    if not db.update_expense(expense_id, payload):
        raise ExpenseNotFoundError(expense_id)
    return _load(db, expense_id)


@router.delete("/{expense_id}", summary="Delete an expense")
async def delete_expense(
    expense_id: int = Path(..., gt=0, description="Expense identifier"),
    db: Database = Depends(get_db),
):
    if not db.delete_expense(expense_id):
        raise ExpenseNotFoundError(expense_id)
    return {"success": True}
