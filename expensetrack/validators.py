"""Explicit per-entity validation.

Each ``validate_*`` function takes a raw payload (usually parsed JSON) and
returns ``(cleaned, errors)``: a dict of normalised values ready to be written
and a list of ``{"field", "message"}`` entries. Callers raise
:class:`~expensetrack.errors.ValidationError` when ``errors`` is non-empty.
"""
import math
import re
from datetime import date, datetime

from flask import request

from .constants import (
    CATEGORIES,
    DESCRIPTION_MAX_LENGTH,
    MAX_YEAR,
    MIN_YEAR,
    NOTES_MAX_LENGTH,
)
from .errors import ValidationError, field_error

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def parse_amount(value):
    """Return a positive finite float, or None when ``value`` is not one."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def parse_int(value):
    if isinstance(value, bool) or value is None or value == "":
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_date(value):
    """Accept ``YYYY-MM-DD`` or a full ISO timestamp; returns a date or None."""
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or len(value) < 10:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        return None


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def normalize_category(value):
    if not isinstance(value, str):
        return None
    category = value.strip().lower()
    return category if category in CATEGORIES else None


def validate_expense(data, partial=False, today=None):
    """Validate an expense payload.

    With ``partial=True`` (updates) only the keys present are checked and
    returned; otherwise description, amount and category are required and the
    date defaults to today.
    """
    today = today or date.today()
    cleaned, errors = {}, []

    if "description" in data or not partial:
        description = data.get("description")
        description = description.strip() if isinstance(description, str) else ""
        if not description:
            errors.append(field_error("description", "Description is required"))
        elif len(description) > DESCRIPTION_MAX_LENGTH:
            errors.append(field_error("description", f"Description cannot exceed {DESCRIPTION_MAX_LENGTH} characters"))
        else:
            cleaned["description"] = description

    if "amount" in data or not partial:
        if data.get("amount") in (None, ""):
            errors.append(field_error("amount", "Amount is required"))
        else:
            amount = parse_amount(data.get("amount"))
            if amount is None:
                errors.append(field_error("amount", "Amount must be a valid positive number"))
            else:
                cleaned["amount"] = amount

    if "category" in data or not partial:
        if not data.get("category"):
            errors.append(field_error("category", "Category is required"))
        else:
            category = normalize_category(data.get("category"))
            if category is None:
                errors.append(field_error("category", "Category must be one of the predefined options"))
            else:
                cleaned["category"] = category

    if data.get("date"):
        spent_on = parse_date(data.get("date"))
        if spent_on is None:
            errors.append(field_error("date", "Date must be a valid ISO date (YYYY-MM-DD)"))
        elif spent_on > today:
            errors.append(field_error("date", "Date cannot be in the future"))
        else:
            cleaned["date"] = spent_on
    elif not partial:
        cleaned["date"] = today

    return cleaned, errors


def validate_budget(data):
    cleaned, errors = {}, []

    if not data.get("category"):
        errors.append(field_error("category", "Category is required"))
    else:
        category = normalize_category(data.get("category"))
        if category is None:
            errors.append(field_error("category", "Category must be one of the predefined options"))
        else:
            cleaned["category"] = category

    if data.get("amount") in (None, ""):
        errors.append(field_error("amount", "Budget amount is required"))
    else:
        amount = parse_amount(data.get("amount"))
        if amount is None:
            errors.append(field_error("amount", "Budget amount must be a valid positive number"))
        else:
            cleaned["amount"] = amount

    month = parse_int(data.get("month"))
    if data.get("month") in (None, ""):
        errors.append(field_error("month", "Month is required"))
    elif month is None or not 1 <= month <= 12:
        errors.append(field_error("month", "Month must be between 1 and 12"))
    else:
        cleaned["month"] = month

    year = parse_int(data.get("year"))
    if data.get("year") in (None, ""):
        errors.append(field_error("year", "Year is required"))
    elif year is None or not MIN_YEAR <= year <= MAX_YEAR:
        errors.append(field_error("year", f"Year must be between {MIN_YEAR} and {MAX_YEAR}"))
    else:
        cleaned["year"] = year

    notes = data.get("notes")
    if notes is not None:
        if not isinstance(notes, str):
            errors.append(field_error("notes", "Notes must be text"))
        elif len(notes.strip()) > NOTES_MAX_LENGTH:
            errors.append(field_error("notes", f"Notes cannot exceed {NOTES_MAX_LENGTH} characters"))
        else:
            cleaned["notes"] = notes.strip() or None

    if "isActive" in data:
        cleaned["is_active"] = parse_bool(data.get("isActive"), default=True)

    return cleaned, errors


def validate_registration(data):
    cleaned, errors = {}, []

    username = data.get("username")
    username = username.strip() if isinstance(username, str) else ""
    if not 3 <= len(username) <= 50:
        errors.append(field_error("username", "Username must be between 3 and 50 characters"))
    else:
        cleaned["username"] = username

    email = data.get("email")
    email = email.strip().lower() if isinstance(email, str) else ""
    if not EMAIL_RE.match(email):
        errors.append(field_error("email", "A valid email is required"))
    else:
        cleaned["email"] = email

    password = data.get("password")
    if not isinstance(password, str) or len(password) < 6:
        errors.append(field_error("password", "Password must be at least 6 characters"))
    else:
        cleaned["password"] = password

    for key, column in (("firstName", "first_name"), ("lastName", "last_name")):
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            cleaned[column] = value.strip()[:100]

    return cleaned, errors


def json_body():
    """The request's JSON object body; an empty dict when no body was sent."""
    data = request.get_json(silent=True)
    if data is None:
        if request.get_data():
            raise ValidationError("Malformed JSON body")
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def parse_id(raw, label):
    record_id = parse_int(raw)
    if record_id is None or record_id < 1:
        raise ValidationError(f"Invalid {label} ID")
    return record_id
