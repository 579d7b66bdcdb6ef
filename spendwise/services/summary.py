"""Budget and statement figures derived from a list of expenses.

Everything here is a pure function over already-loaded data. Amounts come in
as integer cents and leave as ``Decimal`` major units; ``to_dict`` turns them
into JSON-friendly floats.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional

from ..categories import MONTH_NAMES, canonical_order
from ..errors import ValidationError
from .installments import parse_date

CENTS = Decimal(100)
TWO_PLACES = Decimal("0.01")
ONE_PLACE = Decimal("0.1")

REDUCTION_STEPS = (10, 15, 20)
FALLBACK_REDUCTION = 25
RECENT_MONTHS = 6


def to_major(cents) -> Decimal:
    return Decimal(int(cents or 0)) / CENTS


def _money(value: Decimal) -> float:
    return float(value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def _share(part: Decimal, whole: Decimal) -> float:
    if not whole:
        return 0.0
    return float((part / whole * CENTS).quantize(ONE_PLACE, rounding=ROUND_HALF_UP))


def _field(expense, name):
    if isinstance(expense, dict):
        return expense[name]
    return getattr(expense, name)


@dataclass(frozen=True)
class SavingSuggestion:
    category: str
    percentage: int
    savings: Decimal
    new_amount: Decimal

    def to_dict(self):
        return {
            "category": self.category,
            "percentage": self.percentage,
            "savings": _money(self.savings),
            "newAmount": _money(self.new_amount),
        }


@dataclass(frozen=True)
class BudgetSummary:
    monthly_income: Decimal
    total_spent: Decimal
    remaining: Decimal
    utilization_pct: Decimal
    is_over_budget: bool
    excess_amount: Decimal
    excess_pct: Decimal
    category_totals: "OrderedDict[str, Decimal]" = field(default_factory=OrderedDict)
    top_category: Optional[str] = None
    suggestion: Optional[SavingSuggestion] = None

    def to_dict(self):
        return {
            "monthlyIncome": _money(self.monthly_income),
            "totalSpent": _money(self.total_spent),
            "remaining": _money(self.remaining),
            "utilizationPct": _money(self.utilization_pct),
            "isOverBudget": self.is_over_budget,
            "excessAmount": _money(self.excess_amount),
            "excessPct": float(self.excess_pct.quantize(ONE_PLACE, rounding=ROUND_HALF_UP)),
            "categoryTotals": [
                {"category": name, "total": _money(total), "sharePct": _share(total, self.total_spent)}
                for name, total in self.category_totals.items()
            ],
            "topCategory": self.top_category,
            "suggestion": self.suggestion.to_dict() if self.suggestion else None,
        }


def category_totals(expenses: Iterable) -> "OrderedDict[str, Decimal]":
    """Sum amounts per category, canonical order, zero sums dropped."""
    sums: Dict[str, int] = {}
    for expense in expenses:
        category = _field(expense, "category")
        sums[category] = sums.get(category, 0) + int(_field(expense, "amount"))
    return OrderedDict(
        (name, to_major(sums[name])) for name in canonical_order(sums) if sums[name] != 0
    )


def top_category(totals: "OrderedDict[str, Decimal]") -> Optional[str]:
    # strict '>' keeps the earlier category on ties
    best = None
    for name, total in totals.items():
        if best is None or total > totals[best]:
            best = name
    return best


def saving_suggestion(category: str, category_total: Decimal, excess: Decimal) -> SavingSuggestion:
    """Smallest of 10/15/20% of the category that covers the excess, else 25%."""
    chosen = FALLBACK_REDUCTION
    for percentage in REDUCTION_STEPS:
        if category_total * percentage / CENTS >= excess:
            chosen = percentage
            break
    savings = category_total * chosen / CENTS
    return SavingSuggestion(
        category=category,
        percentage=chosen,
        savings=savings,
        new_amount=category_total - savings,
    )


def summarize_budget(expenses: Iterable, monthly_income: Optional[int]) -> BudgetSummary:
    expenses = list(expenses)
    income = to_major(monthly_income)
    spent = sum((to_major(_field(e, "amount")) for e in expenses), Decimal(0))

    over = spent > income
    excess = spent - income if over else Decimal(0)
    utilization = spent / income * CENTS if income > 0 else Decimal(0)
    excess_pct = excess / income * CENTS if over and income > 0 else Decimal(0)

    totals = category_totals(expenses)
    top = top_category(totals)
    suggestion = saving_suggestion(top, totals[top], excess) if over and top else None

    return BudgetSummary(
        monthly_income=income,
        total_spent=spent,
        remaining=income - spent,
        utilization_pct=utilization,
        is_over_budget=over,
        excess_amount=excess,
        excess_pct=excess_pct,
        category_totals=totals,
        top_category=top,
        suggestion=suggestion,
    )


# --- Monthly grouping ---

def month_key(value) -> str:
    day = parse_date(value)
    return f"{day.year:04d}-{day.month:02d}"


def parse_month(month: str) -> date:
    try:
        year, mon = month.split("-")
        if len(year) != 4 or len(mon) != 2:
            raise ValueError(month)
        return date(int(year), int(mon), 1)
    except (AttributeError, ValueError):
        raise ValidationError("month must be in YYYY-MM format", details=[{"field": "month", "value": month}])


def shift_month(month: str, delta: int) -> str:
    first = parse_month(month)
    index = first.month - 1 + delta
    return f"{first.year + index // 12:04d}-{index % 12 + 1:02d}"


def month_label(month: str) -> str:
    first = parse_month(month)
    return f"{MONTH_NAMES[first.month - 1]} de {first.year}"


def current_month(today: Optional[date] = None) -> str:
    today = today or date.today()
    return today.strftime("%Y-%m")


def filter_month(expenses: Iterable, month: str) -> List:
    parse_month(month)
    return [e for e in expenses if month_key(_field(e, "date")) == month]


def group_by_month(expenses: Iterable) -> Dict[str, Dict[str, Decimal]]:
    """Bucket expense totals by 'YYYY-MM' of the expense date, then by category."""
    grouped: Dict[str, Dict[str, Decimal]] = {}
    for expense in expenses:
        bucket = grouped.setdefault(month_key(_field(expense, "date")), {})
        category = _field(expense, "category")
        bucket[category] = bucket.get(category, Decimal(0)) + to_major(_field(expense, "amount"))
    return grouped


@dataclass(frozen=True)
class MonthStatement:
    month: str
    label: str
    total: Decimal
    categories: List[tuple]
    previous_month: str
    next_month: str
    is_current_month: bool

    def to_dict(self):
        return {
            "month": self.month,
            "label": self.label,
            "total": _money(self.total),
            "categories": [
                {
                    "category": name,
                    "total": _money(amount),
                    "sharePct": _share(amount, self.total),
                }
                for name, amount in self.categories
            ],
            "previousMonth": self.previous_month,
            "nextMonth": self.next_month,
            "isCurrentMonth": self.is_current_month,
        }


def month_statement(grouped: Dict[str, Dict[str, Decimal]], month: str, today: Optional[date] = None) -> MonthStatement:
    parse_month(month)
    bucket = grouped.get(month, {})
    # largest first; canonical order settles equal amounts
    ordered = canonical_order(bucket)
    categories = sorted(
        ((name, bucket[name]) for name in ordered),
        key=lambda item: item[1],
        reverse=True,
    )
    return MonthStatement(
        month=month,
        label=month_label(month),
        total=sum(bucket.values(), Decimal(0)),
        categories=categories,
        previous_month=shift_month(month, -1),
        next_month=shift_month(month, 1),
        is_current_month=month == current_month(today),
    )


def recent_months(grouped: Dict[str, Dict[str, Decimal]], limit: int = RECENT_MONTHS) -> List[dict]:
    """Newest month buckets first; the zero-padded keys sort chronologically."""
    keys = sorted(grouped, reverse=True)[:limit]
    return [
        {
            "month": key,
            "label": month_label(key),
            "total": _money(sum(grouped[key].values(), Decimal(0))),
        }
        for key in keys
    ]
