from fastapi import APIRouter, Depends

from budgetbuddy.core.config import Settings
from budgetbuddy.core.deps import get_app_settings, get_db
from budgetbuddy.db.dal import Database

router = APIRouter(tags=["health"])


@router.get("/health", summary="Liveness check with store row count")
async def health(
    settings: Settings = Depends(get_app_settings),
    db: Database = Depends(get_db),
):
    return {
        "status": "ok",
        "version": settings.version,
        "expenses": db.count_expenses(),
    }
