"""Suggested expense categories and month labels.

The order of ``EXPENSE_CATEGORIES`` is significant: aggregate views list
categories in this order and use it to break ties between equal totals.
"""

EXPENSE_CATEGORIES = [
    "Alimentação",
    "Transporte",
    "Moradia",
    "Saúde",
    "Educação",
    "Lazer",
    "Compras",
    "Utilidades",
    "Outros",
]

MONTH_NAMES = [
    "Janeiro",
    "Fevereiro",
    "Março",
    "Abril",
    "Maio",
    "Junho",
    "Julho",
    "Agosto",
    "Setembro",
    "Outubro",
    "Novembro",
    "Dezembro",
]


def canonical_order(labels):
    """Known categories in declared order, then any other labels alphabetically."""
    labels = set(labels)
    known = [c for c in EXPENSE_CATEGORIES if c in labels]
    extra = sorted(labels.difference(EXPENSE_CATEGORIES))
    return known + extra
