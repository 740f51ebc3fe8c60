from flask import Blueprint, current_app, request
from flask_login import login_required, current_user
from ...constants import MAX_YEAR, MIN_YEAR
from ...errors import NotFoundError, ValidationError, field_error
from ...extensions import db
from ...models import Budget
from ...responses import success
from ...services import reports
from ...services.budgets import upsert_budget
from ...services.filters import parse_period_args
from ...validators import json_body, normalize_category, parse_bool, parse_id, parse_int, validate_budget

budgets_bp = Blueprint("budgets", __name__, url_prefix="/api/budgets")


def _optional_int(args, name, low, high, errors):
    raw = args.get(name)
    if not raw:
        return None
    value = parse_int(raw)
    if value is None or not low <= value <= high:
        errors.append(field_error(name, f"{name.capitalize()} must be between {low} and {high}"))
        return None
    return value


def _get_owned(budget_id):
    budget = Budget.query.filter_by(id=parse_id(budget_id, "budget"), user_id=current_user.id).first()
    if budget is None:
        raise NotFoundError("Budget not found")
    return budget


@budgets_bp.route("", methods=["POST"])
@login_required
def save_budget():
    cleaned, errors = validate_budget(json_body())
    if errors:
        raise ValidationError(errors=errors)
    budget, created = upsert_budget(current_user.id, cleaned)
    if created:
        return success({"budget": budget.to_dict()}, "Budget created successfully", 201)
    return success({"budget": budget.to_dict()}, "Budget updated successfully")


@budgets_bp.route("", methods=["GET"])
@login_required
def list_budgets():
    args = request.args
    category = args.get("category")
    if category and category.lower() != "all":
        category = normalize_category(category)
        if category is None:
            raise ValidationError("Category must be one of the predefined options")
    else:
        category = None
    include_inactive = parse_bool(args.get("includeInactive"))
    errors = []
    month = _optional_int(args, "month", 1, 12, errors)
    year = _optional_int(args, "year", MIN_YEAR, MAX_YEAR, errors)
    if errors:
        raise ValidationError("Invalid query parameters", errors)
    data = reports.budget_comparisons(
        current_user.id,
        month=month,
        year=year,
        category=category,
        include_inactive=include_inactive,
    )
    data["filters"] = {
        "month": args.get("month"),
        "year": args.get("year"),
        "category": args.get("category"),
        "includeInactive": include_inactive,
    }
    return success(data)


@budgets_bp.route("/dashboard")
@login_required
def dashboard():
    month, year = parse_period_args(request.args)
    return success(reports.budget_dashboard(current_user.id, month, year))


@budgets_bp.route("/<budget_id>", methods=["GET"])
@login_required
def get_budget(budget_id):
    return success(reports.budget_detail(current_user.id, _get_owned(budget_id)))


@budgets_bp.route("/<budget_id>", methods=["DELETE"])
@login_required
def delete_budget(budget_id):
    budget = _get_owned(budget_id)
    db.session.delete(budget)
    db.session.commit()
    current_app.logger.info("Deleted budget %s for user %s", budget_id, current_user.id)
    return success(message="Budget deleted successfully")
