"""Domain constants shared by validation, storage and presentation."""

import re
from datetime import date
from typing import Tuple

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Earliest accepted reference date; day windows reach back up to 999 days.
MIN_REFERENCE_DATE = date(1900, 1, 1)

# Label used when a record carries no usable category.
OTHER_CATEGORY = "Other"

MONTH_ABBR: Tuple[str, ...] = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
MONTH_NAMES: Tuple[str, ...] = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Substring rules mapping a free-form category to a display badge.
BADGE_RULES: Tuple[Tuple[str, str], ...] = (
    ("food", "food"),
    ("transport", "transport"),
    ("util", "utilities"),
    ("entertain", "entertainment"),
    ("health", "health"),
)
DEFAULT_BADGE = "other"

CSV_FIELDS: Tuple[str, ...] = ("id", "description", "amount", "category", "date")
