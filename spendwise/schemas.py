"""
Request schemas for the JSON API.

Money fields are integer cents. Field aliases keep the camelCase names
used by the web client (``purchaseDate``, ``monthlyIncome``).
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator

from .services.installments import MAX_INSTALLMENTS, MIN_INSTALLMENTS

DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class _Schema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", str_strip_whitespace=True)


def _real_date(value, field):
    if value is not None:
        try:
            date.fromisoformat(value)
        except ValueError:
            raise ValueError(f"{field} is not a valid calendar date")
    return value


class ExpenseCreate(_Schema):
    category: str = Field(..., min_length=1, max_length=100)
    amount: StrictInt = Field(..., gt=0, description="Amount in cents")
    date: str = Field(..., pattern=DATE_PATTERN)
    description: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value):
        return _real_date(value, "date")


class ExpenseUpdate(_Schema):
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[StrictInt] = Field(None, gt=0)
    date: Optional[str] = Field(None, pattern=DATE_PATTERN)
    description: Optional[str] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, value):
        return _real_date(value, "date")


class InstallmentCreate(_Schema):
    category: str = Field(..., min_length=1, max_length=100)
    amount: StrictInt = Field(..., gt=0, description="Total purchase amount in cents")
    installments: StrictInt = Field(..., ge=MIN_INSTALLMENTS, le=MAX_INSTALLMENTS)
    purchase_date: str = Field(..., alias="purchaseDate", pattern=DATE_PATTERN)
    description: Optional[str] = None

    @field_validator("purchase_date")
    @classmethod
    def check_date(cls, value):
        return _real_date(value, "purchaseDate")

    @model_validator(mode="after")
    def check_amount_covers_installments(self):
        # every stored installment must be at least one cent
        if self.amount < self.installments:
            raise ValueError("amount must be at least one cent per installment")
        return self


class BudgetSet(_Schema):
    monthly_income: StrictInt = Field(..., alias="monthlyIncome", gt=0)


class RegisterRequest(_Schema):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6)


class LoginRequest(_Schema):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=1)
