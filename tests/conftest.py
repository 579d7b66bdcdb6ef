from __future__ import annotations

import pytest

from spendwise import create_app
from spendwise.config import TestConfig
from spendwise.extensions import db
from spendwise.models import User
from spendwise.store import ExpenseStore


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


def register(client, email="ana@example.com", name="Ana", password="secret123"):
    return client.post("/api/auth/register", json={"name": name, "email": email, "password": password})


@pytest.fixture()
def register_user():
    return register


@pytest.fixture()
def auth_client(client):
    response = register(client)
    assert response.status_code == 201
    return client


@pytest.fixture()
def app_ctx(app):
    """Direct database access outside of a request."""
    with app.app_context():
        yield
        db.session.remove()


def _make_user(name, email):
    user = User(name=name, email=email)
    user.set_password("secret123")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture()
def owner(app_ctx):
    return _make_user("Owner", "owner@example.com")


@pytest.fixture()
def other_owner(app_ctx):
    return _make_user("Other", "other@example.com")


@pytest.fixture()
def store(app_ctx):
    return ExpenseStore(db.session)
