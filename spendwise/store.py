"""Persistence for expenses and budgets.

``ExpenseStore`` wraps one SQLAlchemy session and is built per request by the
API layer. A store without a session stands for "no database configured":
reads come back empty and writes raise ``StorageError``.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .errors import StorageError
from .models import Budget, Expense

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("category", "amount", "date", "description")


class ExpenseStore:
    def __init__(self, session=None):
        self.session = session

    @property
    def available(self) -> bool:
        return self.session is not None

    def _require(self, action):
        if not self.available:
            logger.warning("Cannot %s: store not available", action)
            raise StorageError(f"Cannot {action}: store not available")

    def _fail(self, action, exc):
        self.session.rollback()
        logger.error("Failed to %s: %s", action, exc, exc_info=True)
        return StorageError(f"Failed to {action}")

    # --- Expenses ---
    def list_expenses(self, user_id: int) -> List[Expense]:
        if not self.available:
            logger.warning("Cannot get expenses: store not available")
            return []
        try:
            return (
                self.session.query(Expense)
                .filter_by(user_id=user_id)
                .order_by(Expense.date.desc(), Expense.id.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Failed to get expenses: %s", exc)
            return []

    def create_expense(self, user_id: int, category: str, amount: int, date: str,
                       description: Optional[str] = None, **installment) -> Expense:
        self._require("create expense")
        expense = Expense(
            user_id=user_id,
            category=category,
            amount=amount,
            date=date,
            description=description or None,
            installments=installment.get("installments"),
            installment_number=installment.get("installment_number"),
            original_purchase_date=installment.get("original_purchase_date"),
        )
        try:
            self.session.add(expense)
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("create expense", exc)
        return expense

    def delete_expense(self, expense_id: int, user_id: int) -> bool:
        """Delete a row the caller owns. False when nothing matched."""
        self._require("delete expense")
        try:
            deleted = (
                self.session.query(Expense)
                .filter_by(id=expense_id, user_id=user_id)
                .delete(synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete expense", exc)
        return deleted > 0

    def update_expense(self, expense_id: int, user_id: int, data: dict) -> Optional[Expense]:
        self._require("update expense")
        try:
            expense = self.session.query(Expense).filter_by(id=expense_id, user_id=user_id).first()
            if expense is None:
                return None
            for name in UPDATABLE_FIELDS:
                if name in data:
                    setattr(expense, name, data[name])
            self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("update expense", exc)
        return expense

    def create_installment_expenses(self, user_id: int, requests: Iterable) -> List[Expense]:
        """Persist installments one at a time.

        Stops at the first failure; rows already written stay and are returned.
        """
        self._require("create installment expenses")
        requests = list(requests)
        created = []
        for request in requests:
            try:
                created.append(self.create_expense(user_id, **request.to_dict()))
            except StorageError as exc:
                logger.warning(
                    "Installment batch stopped at %d/%d for user %s: %s",
                    len(created) + 1, len(requests), user_id, exc.message,
                )
                break
        return created

    # --- Budgets ---
    def get_budget(self, user_id: int, month: str) -> Optional[Budget]:
        if not self.available:
            logger.warning("Cannot get budget: store not available")
            return None
        try:
            return self.session.query(Budget).filter_by(user_id=user_id, month=month).first()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Failed to get budget: %s", exc)
            return None

    def upsert_budget(self, user_id: int, month: str, monthly_income: int) -> Budget:
        """Insert or update the single budget row for (user, month)."""
        self._require("upsert budget")
        try:
            try:
                budget = self._write_budget(user_id, month, monthly_income)
                self.session.commit()
            except IntegrityError:
                # another request inserted the same (user, month) first
                self.session.rollback()
                budget = self._write_budget(user_id, month, monthly_income)
                self.session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("upsert budget", exc)
        return budget

    def _write_budget(self, user_id, month, monthly_income):
        now = datetime.utcnow()
        budget = self.session.query(Budget).filter_by(user_id=user_id, month=month).first()
        if budget:
            budget.monthly_income = monthly_income
            budget.updated_at = now
        else:
            budget = Budget(user_id=user_id, month=month, monthly_income=monthly_income, updated_at=now)
            self.session.add(budget)
            self.session.flush()
        return budget

    def get_or_create_budget(self, user_id: int, month: str, default_income: int) -> Optional[Budget]:
        """Look the budget up; if absent, insert the default and return it."""
        budget = self.get_budget(user_id, month)
        if budget is not None or not self.available:
            return budget
        logger.info("Creating default budget for user %s, month %s", user_id, month)
        try:
            return self.upsert_budget(user_id, month, default_income)
        except StorageError as exc:
            # a failed default insert reads as "no budget"
            logger.warning("Cannot create default budget: %s", exc.message)
            return None
