from flask import Blueprint, current_app, jsonify
from flask_login import login_required, current_user
from ...schemas import BudgetSet
from ...services.summary import current_month
from ..utils import get_store, parse_body

budgets_bp = Blueprint("budgets", __name__, url_prefix="/api/budget")


@budgets_bp.route("/", methods=["GET"])
@login_required
def get_budget():
    budget = get_store().get_or_create_budget(
        current_user.id, current_month(), current_app.config["DEFAULT_MONTHLY_INCOME"]
    )
    return jsonify(budget.to_dict() if budget else None)


@budgets_bp.route("/", methods=["PUT"])
@login_required
def set_budget():
    data = parse_body(BudgetSet)
    budget = get_store().upsert_budget(current_user.id, current_month(), data.monthly_income)
    return jsonify(budget.to_dict())
