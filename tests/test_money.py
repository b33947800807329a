from decimal import Decimal

import pytest

from budgetbuddy.services.money import (
    MAX_AMOUNT,
    format_money,
    from_cents,
    parse_amount,
    round2,
    to_cents,
    to_decimal,
)


def test_to_decimal_uses_shortest_float_repr():
    assert to_decimal(24.5) == Decimal("24.5")
    assert to_decimal(0.1) + to_decimal(0.2) == Decimal("0.3")
    assert to_decimal(" 12.00 ") == Decimal("12.00")
    assert to_decimal(7) == Decimal(7)


@pytest.mark.parametrize("bad", [True, False, "abc", "", "nan", "inf", None, [1]])
def test_to_decimal_rejects(bad):
    with pytest.raises(ValueError):
        to_decimal(bad)


def test_cents_round_trip_half_up():
    assert to_cents(Decimal("1.005")) == 101
    assert to_cents(Decimal("87.25")) == 8725
    assert from_cents(8725) == Decimal("87.25")
    assert str(from_cents(1200)) == "12.00"


def test_format_money():
    assert format_money(Decimal("87.25")) == "$87.25"
    assert format_money(2.5, "€") == "€2.50"
    assert format_money(0) == "$0.00"


def test_round2_half_up():
    assert round2("0.125") == 0.13
    assert round2(Decimal("60")) == 60.0


def test_parse_amount_bounds():
    assert parse_amount("0.005") == Decimal("0.01")
    assert parse_amount(MAX_AMOUNT) == Decimal("92233720368547758.07")
    assert to_cents(parse_amount(MAX_AMOUNT)) == 2**63 - 1
    for bad in ("0", "-1", "0.004", "1e20", "1e30", "9" * 40, "1e-30"):
        with pytest.raises(ValueError):
            parse_amount(bad)
