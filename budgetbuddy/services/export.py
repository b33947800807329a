"""CSV serialization of the raw expense list.

Consumes store rows directly (no aggregation). Quoting follows RFC 4180:
fields containing a comma, quote or line break are quoted and embedded
quotes doubled.
"""

from __future__ import annotations

import csv
import io
from typing import Any, Dict, Iterable

from budgetbuddy.models.constants import CSV_FIELDS
from budgetbuddy.services.money import from_cents

CSV_FILENAME = "expenses.csv"


def _csv_row(row: Dict[str, Any]) -> list:
    return [
        row["id"],
        row["description"],
        f"{from_cents(row['amount_cents'])}",
        row["category"],
        row["date"],
    ]


def _has_bare_cr(values: list) -> bool:
    return any(isinstance(v, str) and "\r" in v for v in values)


def expenses_to_csv(rows: Iterable[Dict[str, Any]]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    # QUOTE_MINIMAL does not quote a bare CR under a "\n" terminator
    cr_writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_FIELDS)
    for row in rows:
        values = _csv_row(row)
        (cr_writer if _has_bare_cr(values) else writer).writerow(values)
    return buf.getvalue()
