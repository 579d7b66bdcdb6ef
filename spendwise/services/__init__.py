from .installments import InstallmentRequest, add_months, split_installments
from .summary import (
    BudgetSummary,
    SavingSuggestion,
    group_by_month,
    month_statement,
    recent_months,
    summarize_budget,
)

__all__ = [
    "InstallmentRequest",
    "add_months",
    "split_installments",
    "BudgetSummary",
    "SavingSuggestion",
    "group_by_month",
    "month_statement",
    "recent_months",
    "summarize_budget",
]
