import pytest

from expensetrack import create_app
from expensetrack.config import TestingConfig
from expensetrack.extensions import db


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, username="alice", password="secret123"):
    return client.post("/api/auth/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
    })


@pytest.fixture
def auth_client(client):
    resp = register(client)
    assert resp.status_code == 201
    return client


@pytest.fixture
def other_client(app):
    other = app.test_client()
    assert register(other, "bob").status_code == 201
    return other


def add_expense(client, description, amount, category="dining", date="2024-05-10"):
    resp = client.post("/api/expenses", json={
        "description": description,
        "amount": amount,
        "category": category,
        "date": date,
    })
    assert resp.status_code == 201, resp.get_json()
    return resp.get_json()["data"]["expense"]


@pytest.fixture
def may_dining(auth_client):
    """Three dining expenses in May 2024 totalling $100."""
    return [
        add_expense(auth_client, "Pizza night", 50, date="2024-05-17"),
        add_expense(auth_client, "Coffee and cake", 20, date="2024-05-03"),
        add_expense(auth_client, "Sushi lunch", 30, date="2024-05-10"),
    ]
