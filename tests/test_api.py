"""End-to-end tests for the JSON API using the Flask test client."""

from __future__ import annotations

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from spendwise import create_app
from spendwise.config import TestConfig
from spendwise.extensions import db
from spendwise.models import Budget, Expense
from spendwise.services.summary import current_month


def create(client, **overrides):
    body = {"category": "Alimentação", "amount": 2500, "date": "2025-03-10"}
    body.update(overrides)
    return client.post("/api/expenses/", json=body)


def test_requires_login(client) -> None:
    response = client.get("/api/expenses/")
    assert response.status_code == 401
    assert response.get_json()["error"] == "unauthorized"


def test_register_login_logout(client, register_user) -> None:
    assert register_user(client).status_code == 201
    assert client.get("/api/auth/me").get_json()["email"] == "ana@example.com"
    assert client.post("/api/auth/logout").get_json() == {"success": True}
    assert client.get("/api/auth/me").get_json() is None
    bad = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "wrong"})
    assert bad.status_code == 401
    good = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "secret123"})
    assert good.status_code == 200
    assert register_user(client).status_code == 400


def test_create_and_list_expenses(auth_client) -> None:
    response = create(auth_client, description="Mercado")
    assert response.status_code == 201
    created = response.get_json()
    assert created["amount"] == 2500
    assert created["description"] == "Mercado"
    assert created["installments"] is None

    create(auth_client, date="2025-04-01", category="Lazer")
    items = auth_client.get("/api/expenses/").get_json()["items"]
    assert [i["date"] for i in items] == ["2025-04-01", "2025-03-10"]


def test_create_expense_validation(auth_client) -> None:
    for body in (
        {"category": "", "amount": 100, "date": "2025-03-10"},
        {"category": "Lazer", "amount": 0, "date": "2025-03-10"},
        {"category": "Lazer", "amount": 10.5, "date": "2025-03-10"},
        {"category": "Lazer", "amount": "100", "date": "2025-03-10"},
        {"category": "Lazer", "amount": 100, "date": "10/03/2025"},
        {"category": "Lazer", "amount": 100, "date": "2025-02-30"},
        {"category": "Lazer", "date": "2025-03-10"},
    ):
        response = auth_client.post("/api/expenses/", json=body)
        assert response.status_code == 400, body
        assert response.get_json()["error"] == "validation_error"
    assert auth_client.get("/api/expenses/").get_json()["items"] == []


def test_update_expense(auth_client) -> None:
    expense_id = create(auth_client).get_json()["id"]
    response = auth_client.patch(f"/api/expenses/{expense_id}", json={"amount": 4000, "description": "Feira"})
    assert response.status_code == 200
    body = response.get_json()
    assert body["amount"] == 4000
    assert body["description"] == "Feira"
    assert body["category"] == "Alimentação"

    assert auth_client.patch(f"/api/expenses/{expense_id}", json={"amount": -1}).status_code == 400
    assert auth_client.patch(f"/api/expenses/{expense_id}", json={"category": None}).status_code == 400
    assert auth_client.patch("/api/expenses/9999", json={"amount": 1}).status_code == 404


def test_other_owner_cannot_touch_expense(app, auth_client, register_user) -> None:
    expense_id = create(auth_client).get_json()["id"]

    intruder = app.test_client()
    register_user(intruder, email="bruno@example.com", name="Bruno")
    assert intruder.delete(f"/api/expenses/{expense_id}").get_json() == {"success": False}
    assert intruder.patch(f"/api/expenses/{expense_id}", json={"amount": 1}).status_code == 404
    assert intruder.get("/api/expenses/").get_json()["items"] == []

    with app.app_context():
        assert db.session.get(Expense, expense_id).amount == 2500

    assert auth_client.delete(f"/api/expenses/{expense_id}").get_json() == {"success": True}
    assert auth_client.get("/api/expenses/").get_json()["items"] == []


def test_installment_batch(auth_client) -> None:
    response = auth_client.post("/api/expenses/installments", json={
        "category": "Compras",
        "amount": 100,
        "installments": 3,
        "purchaseDate": "2025-01-31",
        "description": "Fone",
    })
    assert response.status_code == 201
    body = response.get_json()
    assert body["requested"] == 3
    assert body["created"] == 3
    assert body["partial"] is False
    items = body["items"]
    assert [i["amount"] for i in items] == [33, 33, 34]
    assert [i["date"] for i in items] == ["2025-01-31", "2025-02-28", "2025-03-31"]
    assert [i["description"] for i in items] == ["Fone (1/3)", "Fone (2/3)", "Fone (3/3)"]
    assert {i["originalPurchaseDate"] for i in items} == {"2025-01-31"}


def test_installment_batch_validation(app, auth_client) -> None:
    base = {"category": "Compras", "amount": 1000, "installments": 3, "purchaseDate": "2025-01-10"}
    for change in ({"installments": 0}, {"installments": 37}, {"amount": 0},
                   {"purchaseDate": "2025-13-01"}, {"amount": 2, "installments": 3}):
        body = dict(base, **change)
        assert auth_client.post("/api/expenses/installments", json=body).status_code == 400, change
    with app.app_context():
        assert Expense.query.count() == 0


def test_budget_default_then_set(app, auth_client) -> None:
    budget = auth_client.get("/api/budget/").get_json()
    assert budget["monthlyIncome"] == 300000
    assert budget["month"] == current_month()

    updated = auth_client.put("/api/budget/", json={"monthlyIncome": 550000}).get_json()
    assert updated["monthlyIncome"] == 550000
    auth_client.put("/api/budget/", json={"monthlyIncome": 600000})
    assert auth_client.get("/api/budget/").get_json()["monthlyIncome"] == 600000
    assert auth_client.put("/api/budget/", json={"monthlyIncome": 0}).status_code == 400

    with app.app_context():
        assert Budget.query.count() == 1


def test_dashboard_summary(auth_client) -> None:
    auth_client.put("/api/budget/", json={"monthlyIncome": 300000})
    create(auth_client, category="Moradia", amount=200000)
    create(auth_client, category="Alimentação", amount=140000)

    body = auth_client.get("/api/dashboard/").get_json()
    summary = body["summary"]
    assert summary["totalSpent"] == 3400.0
    assert summary["isOverBudget"] is True
    assert summary["excessAmount"] == 400.0
    assert summary["topCategory"] == "Moradia"
    assert summary["categoryTotals"] == [
        {"category": "Alimentação", "total": 1400.0, "sharePct": 41.2},
        {"category": "Moradia", "total": 2000.0, "sharePct": 58.8},
    ]
    # 10% and 15% of 2000 fall short of the 400 excess, 20% covers it
    assert summary["suggestion"] == {"category": "Moradia", "percentage": 20, "savings": 400.0, "newAmount": 1600.0}


def test_dashboard_month_filter(auth_client) -> None:
    create(auth_client, amount=1000, date="2025-01-10")
    create(auth_client, amount=3000, date="2025-02-10")
    summary = auth_client.get("/api/dashboard/?month=2025-02").get_json()["summary"]
    assert summary["totalSpent"] == 30.0
    assert auth_client.get("/api/dashboard/?month=2025-2").status_code == 400


def test_statement(auth_client) -> None:
    create(auth_client, category="Lazer", amount=2500, date="2025-03-02")
    create(auth_client, category="Alimentação", amount=7500, date="2025-03-15")
    create(auth_client, category="Lazer", amount=1000, date="2025-01-15")

    body = auth_client.get("/api/dashboard/statement?month=2025-03").get_json()
    statement = body["statement"]
    assert statement["total"] == 100.0
    assert [c["category"] for c in statement["categories"]] == ["Alimentação", "Lazer"]
    assert statement["previousMonth"] == "2025-02"
    assert [m["month"] for m in body["recentMonths"]] == ["2025-03", "2025-01"]


def test_categories(auth_client) -> None:
    items = auth_client.get("/api/expenses/categories").get_json()["items"]
    assert items[0] == "Alimentação"
    assert items[-1] == "Outros"


def test_store_disabled_degrades_reads_and_fails_writes(app, auth_client) -> None:
    app.config["STORE_ENABLED"] = False
    assert auth_client.get("/api/expenses/").get_json() == {"items": []}
    assert auth_client.get("/api/budget/").get_json() is None
    response = create(auth_client)
    assert response.status_code == 503
    assert response.get_json()["error"] == "storage_error"
    installments = auth_client.post("/api/expenses/installments", json={
        "category": "Compras", "amount": 300, "installments": 3, "purchaseDate": "2025-01-10",
    })
    assert installments.status_code == 503
    assert auth_client.put("/api/budget/", json={"monthlyIncome": 1000}).status_code == 503


def test_database_outage_degrades_budget_and_dashboard(auth_client) -> None:
    create(auth_client)
    outage = OperationalError("SELECT", {}, Exception("db down"))
    with patch.object(db.session, "query", side_effect=outage):
        assert auth_client.get("/api/expenses/").get_json() == {"items": []}

        budget = auth_client.get("/api/budget/")
        assert budget.status_code == 200
        assert budget.get_json() is None

        dashboard = auth_client.get("/api/dashboard/")
        assert dashboard.status_code == 200
        body = dashboard.get_json()
        assert body["budget"] is None
        assert body["summary"]["totalSpent"] == 0.0


class NoStoreConfig(TestConfig):
    STORE_ENABLED = False


def test_auth_without_store_answers_json() -> None:
    app = create_app(NoStoreConfig)
    client = app.test_client()
    response = client.post("/api/auth/register", json={
        "name": "Ana", "email": "ana@example.com", "password": "secret123",
    })
    assert response.status_code == 503
    assert response.get_json()["error"] == "storage_error"

    login = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "secret123"})
    assert login.status_code == 503
    assert login.get_json()["ok"] is False
