"""Rule-based finance assistant.

Intent recognition and answering are separate steps:

    recognize(message) -> ParsedIntent      (ordered rule table, first match wins)
    Assistant.reply(message) -> AssistantReply

Recognition is pure text matching. Answers are computed from a fresh store
snapshot through the aggregation engine; the only write is the explicit
"add expense, ..." command.
"""

from __future__ import annotations

import logging
import random
import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from pydantic import ValidationError

from budgetbuddy.core.config import Settings
from budgetbuddy.core.errors import clean_message
from budgetbuddy.db.dal import Database
from budgetbuddy.models.expense import Expense, ExpenseIn
from budgetbuddy.services.aggregation import group_by_category, top_n, total_in_range
from budgetbuddy.services.dashboard import (
    average_daily_spend,
    long_month_label,
    month_bounds,
    month_to_date_total,
)
from budgetbuddy.services.money import ZERO, format_money, parse_amount, quantize2

logger = logging.getLogger("budgetbuddy.assistant")


class Intent(str, Enum):
    ADD_EXPENSE_COMMAND = "AddExpenseCommand"
    GREETING = "Greeting"
    CATEGORY_SPEND = "CategorySpend"
    TOTAL_THIS_MONTH = "TotalThisMonth"
    TOP_CATEGORY = "TopCategory"
    CATEGORY_BREAKDOWN = "CategoryBreakdown"
    AVERAGE_DAILY = "AverageDaily"
    SPENDING_IN_RANGE = "SpendingInRange"
    TOP_N = "TopN"
    BUDGET_SUGGESTION = "BudgetSuggestion"
    FINANCE_FAQ = "FinanceFaq"
    SPENDING_TIP = "SpendingTip"
    ADD_EXPENSE_HELP = "AddExpenseHelp"
    TOTAL_ALL_TIME = "TotalAllTime"
    FALLBACK = "Fallback"


@dataclass(frozen=True)
class ParsedIntent:
    intent: Intent
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AssistantReply:
    intent: Intent
    reply: str


Extractor = Callable[[str], Optional[Dict[str, Any]]]

_FLAGS = re.IGNORECASE


def _matches(pattern: str) -> Extractor:
    compiled = re.compile(pattern, _FLAGS)

    def extract(text: str) -> Optional[Dict[str, Any]]:
        return {} if compiled.search(text) else None

    return extract


_ADD_COMMAND_RE = re.compile(
    r"add expense[,:\s]+(.+?),\s*([\d.]+),\s*([a-z][a-z ]*?),\s*(\d{4}-\d{2}-\d{2})",
    _FLAGS,
)


def _extract_add_command(text: str) -> Optional[Dict[str, Any]]:
    m = _ADD_COMMAND_RE.search(text)
    if not m:
        return None
    return {
        "description": m.group(1).strip(),
        "amount": m.group(2),
        "category": m.group(3).strip(),
        "date": m.group(4),
    }


_CATEGORY_SPEND_RE = re.compile(
    r"(?:spent|spend|how much).*?\bon\s+([a-z][a-z ]{1,29}?)\s*(?:this month|in\s+\w+)?\s*[?.!]*$",
    _FLAGS,
)


def _extract_category(text: str) -> Optional[Dict[str, Any]]:
    m = _CATEGORY_SPEND_RE.search(text)
    if not m:
        return None
    return {"category": m.group(1).strip()}


_LAST_DAYS_RE = re.compile(r"last\s+(\d{1,3})\s+days?", _FLAGS)
_BETWEEN_RE = re.compile(
    r"(?:between|from)\s+(\d{4}-\d{2}-\d{2})\s+(?:and|to)\s+(\d{4}-\d{2}-\d{2})",
    _FLAGS,
)


def _extract_range(text: str) -> Optional[Dict[str, Any]]:
    m = _LAST_DAYS_RE.search(text)
    if m:
        days = int(m.group(1))
        return {"days": days} if days >= 1 else None
    m = _BETWEEN_RE.search(text)
    if m:
        try:
            start, end = date.fromisoformat(m.group(1)), date.fromisoformat(m.group(2))
        except ValueError:
            return None
        if start > end:
            start, end = end, start
        return {"start": start, "end": end}
    return None


_TOP_COUNT_RE = re.compile(r"\btop\s+(\d+)\b", _FLAGS)
_TOP_WORD_RE = re.compile(r"\b(top|largest|biggest|most expensive)\b", _FLAGS)


def _extract_top(text: str) -> Optional[Dict[str, Any]]:
    m = _TOP_COUNT_RE.search(text)
    if m:
        return {"n": int(m.group(1))}
    if _TOP_WORD_RE.search(text):
        return {"n": None}
    return None


_BUDGET_RE = re.compile(
    r"\b(suggest|help|budget)\b.*\bbudget\b|\b(i want to budget|help me budget)\b",
    _FLAGS,
)
_INCOME_RE = re.compile(r"(\d[\d,]*(?:\.\d+)?)")


def _extract_budget(text: str) -> Optional[Dict[str, Any]]:
    if not _BUDGET_RE.search(text):
        return None
    m = _INCOME_RE.search(text)
    income = None
    if m:
        try:
            income = parse_amount(m.group(1).replace(",", ""))
        except ValueError:
            income = None
    return {"income": income}


_INFLATION_RE = re.compile(r"\binflation\b", _FLAGS)
_SAVINGS_RE = re.compile(r"\bsavings\b", _FLAGS)
_SAVINGS_Q_RE = re.compile(r"\bhow\b|\bwhere\b|\bbest\b", _FLAGS)


def _extract_faq(text: str) -> Optional[Dict[str, Any]]:
    if _INFLATION_RE.search(text):
        return {"topic": "inflation"}
    if _SAVINGS_RE.search(text) and _SAVINGS_Q_RE.search(text):
        return {"topic": "savings"}
    return None


# Priority order matters: the add command must win over the help text, and a
# category question ("spent on food this month") over the plain month total.
RULES: Sequence[Tuple[Intent, Extractor]] = (
    (Intent.ADD_EXPENSE_COMMAND, _extract_add_command),
    (
        Intent.GREETING,
        _matches(r"\b(hi|hello|hey|good morning|good afternoon|good evening)\b"),
    ),
    (Intent.CATEGORY_SPEND, _extract_category),
    (
        Intent.TOTAL_THIS_MONTH,
        _matches(r"\b(total|how much)\b.*this month|spent this month|month.*spent\b"),
    ),
    (Intent.TOP_CATEGORY, _matches(r"\b(top|biggest|largest) category\b")),
    (Intent.CATEGORY_BREAKDOWN, _matches(r"\b(breakdown|by category|categories)\b")),
    (
        Intent.AVERAGE_DAILY,
        _matches(r"\b(avg|average)\b.*\bdaily\b|\bdaily average\b"),
    ),
    (Intent.SPENDING_IN_RANGE, _extract_range),
    (Intent.TOP_N, _extract_top),
    (Intent.BUDGET_SUGGESTION, _extract_budget),
    (Intent.FINANCE_FAQ, _extract_faq),
    (Intent.SPENDING_TIP, _matches(r"\b(tips?|advice|suggest)\b")),
    (
        Intent.ADD_EXPENSE_HELP,
        _matches(r"\b(add|log)\b.*\bexpenses?\b"),
    ),
    (Intent.TOTAL_ALL_TIME, _matches(r"\b(total|overall|all time)\b")),
)


def recognize(message: str) -> ParsedIntent:
    text = (message or "").strip()
    for intent, extract in RULES:
        params = extract(text)
        if params is not None:
            return ParsedIntent(intent, params)
    return ParsedIntent(Intent.FALLBACK)


GREETINGS = (
    "Hello — how can I help you with your finances today?",
    "Hi — I can summarize your expenses, suggest budgets, or answer finance questions.",
)
FALLBACKS = (
    "I can help with expense summaries, budgeting tips, and basic finance explanations. "
    "Ask me things like 'How much did I spend this month?' or 'Suggest a budget.'",
    "I’m here to help with your finances. Would you like a summary of your recent "
    "spending or some budgeting tips?",
)
FAQ_ANSWERS = {
    "inflation": (
        "Inflation means the general rise in prices over time, reducing purchasing "
        "power. A small, steady inflation is normal; high inflation erodes savings "
        "and income."
    ),
    "savings": (
        "For savings: start with an emergency fund (3–6 months expenses), use "
        "high-yield savings for short-term goals, and diversified investments for "
        "long-term growth."
    ),
}
ADD_HELP = (
    "To add an expense use the Add Expense button on the dashboard. Provide "
    "description, amount, category, and date. I can also add it for you if you "
    "paste the details here like: add expense, Lunch, 12.50, Food, 2025-08-09"
)
GENERIC_TIP = (
    "Tip: log every expense for at least two weeks — tracking helps reveal where "
    "to cut back."
)


class Assistant:
    """Answer one chat message against the current store contents."""

    def __init__(
        self,
        db: Database,
        settings: Settings,
        today: Optional[date] = None,
        rng: Optional[random.Random] = None,
    ):
        self.db = db
        self.settings = settings
        self.today = today or date.today()
        self.rng = rng or random.Random()
        self._records: Optional[List[Expense]] = None
        self._handlers: Dict[Intent, Callable[[Dict[str, Any]], str]] = {
            Intent.ADD_EXPENSE_COMMAND: self._add_expense,
            Intent.GREETING: lambda _: self.rng.choice(GREETINGS),
            Intent.CATEGORY_SPEND: self._category_spend,
            Intent.TOTAL_THIS_MONTH: self._total_this_month,
            Intent.TOP_CATEGORY: self._top_category,
            Intent.CATEGORY_BREAKDOWN: self._category_breakdown,
            Intent.AVERAGE_DAILY: self._average_daily,
            Intent.SPENDING_IN_RANGE: self._spending_in_range,
            Intent.TOP_N: self._top_n,
            Intent.BUDGET_SUGGESTION: self._budget_suggestion,
            Intent.FINANCE_FAQ: lambda p: FAQ_ANSWERS[p["topic"]],
            Intent.SPENDING_TIP: self._spending_tip,
            Intent.ADD_EXPENSE_HELP: lambda _: ADD_HELP,
            Intent.TOTAL_ALL_TIME: self._total_all_time,
            Intent.FALLBACK: lambda _: self.rng.choice(FALLBACKS),
        }

    # ------------------------------------------------------------------
    @property
    def records(self) -> List[Expense]:
        if self._records is None:
            self._records = self.db.snapshot()
        return self._records

    def _fmt(self, value) -> str:
        return format_money(value, self.settings.currency_symbol)

    def reply(self, message: str) -> AssistantReply:
        parsed = recognize(message)
        logger.debug("intent recognized", extra={"intent": parsed.intent.value})
        text = self._handlers[parsed.intent](parsed.params)
        return AssistantReply(intent=parsed.intent, reply=text)

    # ------------------------------------------------------------------
    # Handlers
    def _add_expense(self, params: Dict[str, Any]) -> str:
        try:
            expense = ExpenseIn(**params)
        except ValidationError as exc:
            reason = clean_message(exc.errors()[0]["msg"])
            return f"I couldn't add that expense: {reason}."
        self.db.insert_expense(expense)
        self._records = None
        return (
            f"Added expense {expense.description} {self._fmt(expense.amount)} "
            f"in {expense.category} on {expense.date.isoformat()}."
        )

    def _category_spend(self, params: Dict[str, Any]) -> str:
        wanted = params["category"]
        known = sorted({r.category for r in self.records})
        canonical = next((c for c in known if c.lower() == wanted.lower()), None)
        start, end = month_bounds(self.today)
        if canonical is None:
            total = ZERO
            name = wanted
        else:
            total = total_in_range(
                [r for r in self.records if r.category == canonical], start, end
            )
            name = canonical
        return (
            f"You spent {self._fmt(total)} on {name} in "
            f"{long_month_label(self.today)}."
        )

    def _total_this_month(self, params: Dict[str, Any]) -> str:
        total = month_to_date_total(self.records, self.today)
        return f"You spent {self._fmt(total)} in {long_month_label(self.today)}."

    def _top_category(self, params: Dict[str, Any]) -> str:
        totals = group_by_category(self.records)
        if not totals:
            return "I don’t see any expenses yet."
        top = totals[0]
        return (
            f"Your top category is {top.category} with {self._fmt(top.total)} "
            "total spending."
        )

    def _category_breakdown(self, params: Dict[str, Any]) -> str:
        totals = group_by_category(self.records)
        if not totals:
            return "No expenses found to create a breakdown."
        parts = [f"{t.category}: {self._fmt(t.total)}" for t in totals]
        return "Category breakdown — " + " · ".join(parts)

    def _average_daily(self, params: Dict[str, Any]) -> str:
        avg = average_daily_spend(self.records, self.today)
        return f"Your average daily spend so far this month is {self._fmt(avg)}."

    def _spending_in_range(self, params: Dict[str, Any]) -> str:
        if "days" in params:
            days = params["days"]
            end = self.today
            start = end - timedelta(days=days - 1)
            total = total_in_range(self.records, start, end)
            return (
                f"In the last {days} days ({start.isoformat()} → {end.isoformat()}) "
                f"you spent {self._fmt(total)}."
            )
        start, end = params["start"], params["end"]
        total = total_in_range(self.records, start, end)
        return (
            f"Between {start.isoformat()} and {end.isoformat()} you spent "
            f"{self._fmt(total)}."
        )

    def _top_n(self, params: Dict[str, Any]) -> str:
        n = params.get("n")
        if n is None:
            n = self.settings.chat_top_n_default
        n = max(1, min(n, self.settings.chat_top_n_max))
        rows = top_n(self.records, n)
        if not rows:
            return "I don’t see any expenses yet."
        parts = [f"{r.description} ({self._fmt(r.amount)})" for r in rows]
        return f"Top {len(rows)} expenses: " + " • ".join(parts)

    def _budget_suggestion(self, params: Dict[str, Any]) -> str:
        total = month_to_date_total(self.records, self.today)
        lines = [
            "A simple starting plan is the 50/30/20 rule: 50% needs, 30% wants, "
            "20% savings/debt.",
            f"This month you've spent {self._fmt(total)} so far.",
        ]
        income: Optional[Decimal] = params.get("income")
        if income:
            needs = quantize2(income * Decimal("0.5"))
            wants = quantize2(income * Decimal("0.3"))
            save = quantize2(income * Decimal("0.2"))
            lines.append(
                f"If your monthly income is {self._fmt(income)}, try: Needs "
                f"{self._fmt(needs)}, Wants {self._fmt(wants)}, Save {self._fmt(save)}."
            )
        else:
            lines.append(
                "If you tell me your monthly income I can make a budget "
                "recommendation with real numbers."
            )
        return " ".join(lines)

    def _spending_tip(self, params: Dict[str, Any]) -> str:
        totals = group_by_category(self.records)
        if not totals:
            return GENERIC_TIP
        return (
            f"A quick tip: review your top category ({totals[0].category}). If it’s "
            "recurring spending, consider setting a monthly cap and automating "
            "alerts when you approach it."
        )

    def _total_all_time(self, params: Dict[str, Any]) -> str:
        total = sum((r.amount for r in self.records), ZERO)
        return f"Your total spending is {self._fmt(total)}."


__all__ = [
    "Intent",
    "ParsedIntent",
    "AssistantReply",
    "RULES",
    "recognize",
    "Assistant",
]
