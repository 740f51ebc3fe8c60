from datetime import date, timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import Expense, User
from .services.budgets import upsert_budget

DEMO_EXPENSES = [
    ("Weekly groceries", "groceries", 86.40, 1),
    ("Electricity bill", "utilities", 120.00, 2),
    ("Bus pass", "transportation", 45.00, 3),
    ("Dinner out", "dining", 62.75, 4),
    ("Cinema tickets", "entertainment", 28.00, 5),
    ("Groceries top-up", "groceries", 34.10, 6),
    ("Pharmacy", "healthcare", 19.99, 7),
    ("Lunch with team", "dining", 23.50, 8),
]

DEMO_BUDGETS = [
    ("groceries", 400.0),
    ("dining", 150.0),
    ("utilities", 200.0),
    ("entertainment", 60.0),
]


@click.command("seed-demo")
@click.option("--username", default="demo", show_default=True)
@click.option("--password", default="demo1234", show_default=True)
@with_appcontext
def seed_demo(username, password):
    """Seed a demo user with sample expenses and budgets for the current month."""
    today = date.today()
    user = User.query.filter_by(username=username).first()
    if user is None:
        user = User(username=username, email=f"{username}@example.com")
        user.set_password(password)
        db.session.add(user)
        db.session.commit()

    if not Expense.query.filter_by(user_id=user.id).first():
        for description, category, amount, days_ago in DEMO_EXPENSES:
            spent_on = max(today - timedelta(days=days_ago), today.replace(day=1))
            db.session.add(Expense(user_id=user.id, description=description, category=category,
                                   amount=amount, date=spent_on))
        db.session.commit()

    for category, amount in DEMO_BUDGETS:
        upsert_budget(user.id, {"category": category, "amount": amount, "month": today.month, "year": today.year})

    current_app.logger.info("Seeded demo data for user %s", user.id)
    click.echo(f"Demo data seeded for '{username}'")
