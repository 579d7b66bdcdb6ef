from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from ...categories import EXPENSE_CATEGORIES
from ...errors import NotFoundError, ValidationError
from ...schemas import ExpenseCreate, ExpenseUpdate, InstallmentCreate
from ...services.installments import split_installments
from ..utils import get_store, parse_body


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")

# Columns that cannot be cleared by sending null
REQUIRED_FIELDS = ("category", "amount", "date")


@expenses_bp.route("/", methods=["GET"])
@login_required
def list_expenses():
    expenses = get_store().list_expenses(current_user.id)
    return jsonify({"items": [e.to_dict() for e in expenses]})


@expenses_bp.route("/categories", methods=["GET"])
@login_required
def list_categories():
    return jsonify({"items": EXPENSE_CATEGORIES})


@expenses_bp.route("/", methods=["POST"])
@login_required
def create_expense():
    data = parse_body(ExpenseCreate)
    expense = get_store().create_expense(
        current_user.id,
        category=data.category,
        amount=data.amount,
        date=data.date,
        description=data.description or None,
    )
    return jsonify(expense.to_dict()), 201


@expenses_bp.route("/<int:expense_id>", methods=["PATCH"])
@login_required
def update_expense(expense_id):
    data = parse_body(ExpenseUpdate).model_dump(exclude_unset=True)
    cleared = [name for name in REQUIRED_FIELDS if name in data and data[name] is None]
    if cleared:
        raise ValidationError("Fields cannot be null", details=[{"field": name} for name in cleared])
    expense = get_store().update_expense(expense_id, current_user.id, data)
    if expense is None:
        raise NotFoundError("Expense not found")
    return jsonify(expense.to_dict())


@expenses_bp.route("/<int:expense_id>", methods=["DELETE"])
@login_required
def delete_expense(expense_id):
    success = get_store().delete_expense(expense_id, current_user.id)
    return jsonify({"success": success})


@expenses_bp.route("/installments", methods=["POST"])
@login_required
def create_installments():
    data = parse_body(InstallmentCreate)
    requests = split_installments(
        data.amount,
        data.installments,
        data.purchase_date,
        data.category,
        data.description,
    )
    created = get_store().create_installment_expenses(current_user.id, requests)
    return jsonify({
        "items": [e.to_dict() for e in created],
        "requested": len(requests),
        "created": len(created),
        "partial": len(created) < len(requests),
    }), 201
