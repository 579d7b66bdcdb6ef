"""Split one purchase into monthly installment expenses ("parcelas")."""
import calendar
from dataclasses import dataclass, asdict
from datetime import date
from typing import List, Optional, Union

from ..errors import ValidationError

MIN_INSTALLMENTS = 1
MAX_INSTALLMENTS = 36


@dataclass(frozen=True)
class InstallmentRequest:
    category: str
    amount: int
    date: str
    description: str
    installments: int
    installment_number: int
    original_purchase_date: str

    def to_dict(self):
        return asdict(self)


def parse_date(value: Union[str, date], field: str = "date") -> date:
    if isinstance(value, date):
        return value
    try:
        if not isinstance(value, str) or len(value) != 10:
            raise ValueError(value)
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"{field} must be a valid YYYY-MM-DD date", details=[{"field": field, "value": str(value)}])


def add_months(start: date, months: int) -> date:
    """Add calendar months, clamping the day to the end of the target month.

    add_months(date(2025, 1, 31), 1) -> date(2025, 2, 28)
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def _validate(total_amount, installments, category):
    if isinstance(total_amount, bool) or not isinstance(total_amount, int) or total_amount <= 0:
        raise ValidationError("amount must be a positive integer (cents)", details=[{"field": "amount", "value": total_amount}])
    if isinstance(installments, bool) or not isinstance(installments, int) \
            or not MIN_INSTALLMENTS <= installments <= MAX_INSTALLMENTS:
        raise ValidationError(
            f"installments must be an integer between {MIN_INSTALLMENTS} and {MAX_INSTALLMENTS}",
            details=[{"field": "installments", "value": installments}],
        )
    if not isinstance(category, str) or not category.strip():
        raise ValidationError("category is required", details=[{"field": "category"}])


def split_installments(
    total_amount: int,
    installments: int,
    purchase_date: Union[str, date],
    category: str,
    description: Optional[str] = None,
) -> List[InstallmentRequest]:
    """Build one expense request per installment.

    Every installment gets ``total_amount // installments``; the last one also
    takes the remainder so the amounts always add up to ``total_amount``.
    Installment ``i`` is dated ``i`` months after the purchase date.
    """
    _validate(total_amount, installments, category)
    purchased_on = parse_date(purchase_date, "purchaseDate")

    base = total_amount // installments
    remainder = total_amount - base * installments
    text = description.strip() if description else ""

    requests = []
    for i in range(installments):
        number = i + 1
        amount = base + remainder if i == installments - 1 else base
        label = f"{text} ({number}/{installments})" if text else f"Parcela {number}/{installments}"
        requests.append(InstallmentRequest(
            category=category,
            amount=amount,
            date=add_months(purchased_on, i).isoformat(),
            description=label,
            installments=installments,
            installment_number=number,
            original_purchase_date=purchased_on.isoformat(),
        ))
    return requests
