from fastapi import APIRouter, Depends
from fastapi.responses import Response

from budgetbuddy.core.deps import get_db
from budgetbuddy.db.dal import Database
from budgetbuddy.services.export import CSV_FILENAME, expenses_to_csv

router = APIRouter(tags=["export"])


@router.get(
    "/api/download",
    response_class=Response,
    summary="Download every expense as CSV (newest first)",
)
async def download_csv(db: Database = Depends(get_db)):
    body = expenses_to_csv(db.list_expenses())
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )
