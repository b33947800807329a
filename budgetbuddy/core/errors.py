from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

logger = logging.getLogger("budgetbuddy.errors")

_VALUE_ERROR_PREFIX = "Value error, "


class BudgetBuddyError(Exception):
    """Base class for domain errors surfaced through the API."""


class ExpenseNotFoundError(BudgetBuddyError, LookupError):
    def __init__(self, expense_id: int):
        super().__init__(f"expense {expense_id} not found")
        self.expense_id = expense_id


class InvalidDateRangeError(BudgetBuddyError, ValueError):
    def __init__(self, start, end):
        super().__init__(f"start date {start} cannot be after end date {end}")
        self.start = start
        self.end = end


def expense_not_found_handler(request: Request, exc: ExpenseNotFoundError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "not_found", "detail": str(exc)},
    )


def invalid_date_range_handler(request: Request, exc: InvalidDateRangeError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "invalid_date_range", "detail": str(exc)},
    )


def http_error_handler(request: Request, exc: StarletteHTTPException):  # type: ignore
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        detail = f"No route for {request.method} {request.url.path}"
    else:
        detail = exc.detail
    code = "not_found" if exc.status_code == status.HTTP_404_NOT_FOUND else "http_error"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": code, "detail": detail},
        headers=getattr(exc, "headers", None),
    )


def clean_message(msg: str) -> str:
    """Strip pydantic's "Value error, " prefix from a validator message."""
    if msg.startswith(_VALUE_ERROR_PREFIX):
        return msg[len(_VALUE_ERROR_PREFIX):]
    return msg


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    # ctx may hold exception instances which are not JSON serializable
    errors = [
        {
            "loc": list(e.get("loc", ())),
            "msg": clean_message(str(e.get("msg", ""))),
            "type": e.get("type"),
        }
        for e in exc.errors()
    ]
    message = errors[0]["msg"] if errors else "Invalid request"
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"error": "validation_error", "message": message, "detail": errors},
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
