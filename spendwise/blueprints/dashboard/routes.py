from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required, current_user
from ...services.summary import (
    current_month,
    filter_month,
    group_by_month,
    month_statement,
    recent_months,
    summarize_budget,
)
from ..utils import get_store


dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")


@dashboard_bp.route("/")
@login_required
def index():
    store = get_store()
    this_month = current_month()
    month = request.args.get("month")

    expenses = store.list_expenses(current_user.id)
    budget = None
    if month:
        expenses = filter_month(expenses, month)
        if month != this_month:
            budget = store.get_budget(current_user.id, month)
    if budget is None:
        budget = store.get_or_create_budget(
            current_user.id, this_month, current_app.config["DEFAULT_MONTHLY_INCOME"]
        )

    summary = summarize_budget(expenses, budget.monthly_income if budget else 0)
    return jsonify({
        "month": month,
        "budget": budget.to_dict() if budget else None,
        "summary": summary.to_dict(),
    })


@dashboard_bp.route("/statement")
@login_required
def statement():
    month = request.args.get("month") or current_month()
    grouped = group_by_month(get_store().list_expenses(current_user.id))
    return jsonify({
        "statement": month_statement(grouped, month).to_dict(),
        "recentMonths": recent_months(grouped),
    })
