from .user import User
from .expense import Expense
from .budget import Budget

__all__ = ["User", "Expense", "Budget"]
