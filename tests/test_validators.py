from datetime import date

from expensetrack.validators import parse_date, validate_budget, validate_expense, validate_registration

TODAY = date(2024, 6, 1)


def _fields(errors):
    return {e["field"] for e in errors}


def test_valid_expense_is_cleaned():
    cleaned, errors = validate_expense(
        {"description": "  Groceries run ", "amount": "42.5", "category": "Groceries", "date": "2024-05-31"},
        today=TODAY,
    )
    assert errors == []
    assert cleaned == {
        "description": "Groceries run",
        "amount": 42.5,
        "category": "groceries",
        "date": date(2024, 5, 31),
    }


def test_expense_date_defaults_to_today():
    cleaned, _ = validate_expense({"description": "x", "amount": 1, "category": "other"}, today=TODAY)
    assert cleaned["date"] == TODAY


def test_expense_rejects_bad_fields():
    _, errors = validate_expense(
        {"description": "", "amount": -5, "category": "pets", "date": "2024-06-02"},
        today=TODAY,
    )
    assert _fields(errors) == {"description", "amount", "category", "date"}


def test_expense_rejects_long_description_and_non_finite_amount():
    _, errors = validate_expense(
        {"description": "x" * 201, "amount": "nan", "category": "other"}, today=TODAY,
    )
    assert _fields(errors) == {"description", "amount"}
    _, errors = validate_expense({"description": "ok", "amount": True, "category": "other"}, today=TODAY)
    assert _fields(errors) == {"amount"}


def test_partial_expense_only_checks_given_fields():
    cleaned, errors = validate_expense({"amount": 12}, partial=True, today=TODAY)
    assert errors == []
    assert cleaned == {"amount": 12.0}


def test_budget_validation():
    cleaned, errors = validate_budget({"category": "Dining", "amount": 80, "month": "5", "year": 2024})
    assert errors == []
    assert cleaned == {"category": "dining", "amount": 80.0, "month": 5, "year": 2024}

    _, errors = validate_budget({"category": "dining", "amount": 0, "month": 13, "year": 1999, "notes": "n" * 501})
    assert _fields(errors) == {"amount", "month", "year", "notes"}

    _, errors = validate_budget({})
    assert _fields(errors) == {"category", "amount", "month", "year"}


def test_registration_validation():
    cleaned, errors = validate_registration({"username": "alice", "email": "Alice@Example.com", "password": "secret123"})
    assert errors == []
    assert cleaned["email"] == "alice@example.com"

    _, errors = validate_registration({"username": "al", "email": "nope", "password": "123"})
    assert _fields(errors) == {"username", "email", "password"}


def test_parse_date_accepts_whole_iso_values_only():
    assert parse_date("2024-05-01") == date(2024, 5, 1)
    assert parse_date("2024-05-01T10:00:00") == date(2024, 5, 1)
    assert parse_date("2024-05-01T10:00:00.000Z") == date(2024, 5, 1)
    assert parse_date("2024-05-01garbage") is None
    assert parse_date("2024-05-01T99:00") is None
    assert parse_date(20240501) is None
