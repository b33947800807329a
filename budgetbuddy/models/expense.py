from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from pydantic import BaseModel, field_serializer, field_validator

from budgetbuddy.services.money import from_cents, parse_amount
from .constants import DATE_PATTERN

AMOUNT_MESSAGE = "Amount must be a positive number"
DATE_MESSAGE = "Date required (YYYY-MM-DD)"


def _parse_timestamp(raw: Optional[str]) -> Optional[dt.datetime]:
    if not raw:
        return None
    return dt.datetime.fromisoformat(raw.replace("Z", ""))


@dataclass(frozen=True)
class Expense:
    """A validated expense record as consumed by the aggregation engine."""

    id: Optional[int]
    description: str
    amount: Decimal
    category: str
    date: dt.date

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Expense":
        return cls(
            id=int(row["id"]),
            description=row["description"],
            amount=from_cents(row["amount_cents"]),
            category=row["category"],
            date=dt.date.fromisoformat(row["date"]),
        )


class ExpenseIn(BaseModel):
    """Client-supplied fields for create and full replace."""

    description: str
    amount: Decimal
    category: str
    date: dt.date

    @field_validator("description", mode="before")
    @classmethod
    def description_required(cls, v: Any) -> str:
        text = "" if v is None else str(v).strip()
        if not text:
            raise ValueError("Description required")
        return text

    @field_validator("category", mode="before")
    @classmethod
    def category_required(cls, v: Any) -> str:
        text = "" if v is None else str(v).strip()
        if not text:
            raise ValueError("Category required")
        return text

    @field_validator("amount", mode="before")
    @classmethod
    def amount_positive(cls, v: Any) -> Decimal:
        # 0.004 rounds to 0.00; cents above MAX_AMOUNT overflow the INTEGER column
        try:
            return parse_amount(v)
        except ValueError:
            raise ValueError(AMOUNT_MESSAGE) from None

    @field_validator("date", mode="before")
    @classmethod
    def strict_iso_date(cls, v: Any) -> dt.date:
        if isinstance(v, dt.datetime):
            raise ValueError(DATE_MESSAGE)
        if isinstance(v, dt.date):
            return v
        if not isinstance(v, str) or not DATE_PATTERN.match(v):
            raise ValueError(DATE_MESSAGE)
        try:
            return dt.date.fromisoformat(v)
        except ValueError:
            raise ValueError(DATE_MESSAGE) from None


class ExpenseOut(BaseModel):
    id: int
    description: str
    amount: Decimal
    category: str
    date: dt.date
    created_at: Optional[dt.datetime] = None
    updated_at: Optional[dt.datetime] = None

    @field_serializer("amount")
    def amount_as_number(self, v: Decimal) -> float:
        return float(v)

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ExpenseOut":
        return cls(
            id=row["id"],
            description=row["description"],
            amount=from_cents(row["amount_cents"]),
            category=row["category"],
            date=dt.date.fromisoformat(row["date"]),
            created_at=_parse_timestamp(row.get("created_at")),
            updated_at=_parse_timestamp(row.get("updated_at")),
        )

    @classmethod
    def from_expense(cls, expense: Expense) -> "ExpenseOut":
        return cls(
            id=expense.id,
            description=expense.description,
            amount=expense.amount,
            category=expense.category,
            date=expense.date,
        )
