"""Money / rounding helpers.

Centralized so storage, aggregation, export and assistant replies use
identical fixed-point semantics. Amounts are ``Decimal`` in memory and
integer cents on disk.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# largest amount whose cents still fit a signed 64-bit SQLite INTEGER
MAX_AMOUNT = Decimal(2**63 - 1) / 100

Number = Union[Decimal, int, float, str]


def to_decimal(value: Number) -> Decimal:
    """Convert user input to an exact, finite Decimal.

    Floats go through their shortest repr so 24.5 becomes Decimal("24.5")
    rather than its binary expansion. Raises ValueError for anything else.
    """
    if isinstance(value, bool):
        raise ValueError("boolean is not an amount")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValueError(f"not a number: {value!r}") from None
    else:
        raise ValueError(f"unsupported amount type: {type(value).__name__}")
    if not result.is_finite():
        raise ValueError("amount must be finite")
    return result


def quantize2(value: Decimal) -> Decimal:
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value: Number) -> Decimal:
    """Positive amount quantized to cents.

    Raises ValueError for anything ``to_decimal`` rejects, for values that
    round to 0.00 and for values above ``MAX_AMOUNT``.
    """
    amount = to_decimal(value)
    if amount <= 0 or amount > MAX_AMOUNT:
        raise ValueError(f"amount out of range: {value!r}")
    amount = quantize2(amount)
    if amount <= 0:
        raise ValueError(f"amount rounds to zero: {value!r}")
    return amount


def to_cents(value: Decimal) -> int:
    return int(quantize2(value) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(int(cents)) / 100).quantize(CENT)


def round2(value: Number) -> float:
    return float(quantize2(to_decimal(value)))


def format_money(value: Number, symbol: str = "$") -> str:
    return f"{symbol}{quantize2(to_decimal(value))}"
