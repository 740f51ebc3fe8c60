from flask import Blueprint, current_app, request
from flask_login import login_required, current_user
from ...errors import NotFoundError, ValidationError
from ...extensions import db
from ...models import Expense
from ...responses import success
from ...services import reports
from ...services.filters import parse_date_range, parse_list_args, parse_period_args
from ...validators import json_body, parse_id, validate_expense

expenses_bp = Blueprint("expenses", __name__, url_prefix="/api/expenses")


def _get_owned(expense_id):
    exp = Expense.query.filter_by(id=parse_id(expense_id, "expense"), user_id=current_user.id).first()
    if exp is None:
        raise NotFoundError("Expense not found")
    return exp


@expenses_bp.route("", methods=["POST"])
@login_required
def create_expense():
    cleaned, errors = validate_expense(json_body())
    if errors:
        raise ValidationError(errors=errors)
    exp = Expense(user_id=current_user.id, **cleaned)
    db.session.add(exp)
    db.session.commit()
    current_app.logger.info("Created expense %s for user %s", exp.id, current_user.id)
    return success({"expense": exp.to_dict()}, "Expense added successfully", 201)


@expenses_bp.route("", methods=["GET"])
@login_required
def list_expenses():
    params = parse_list_args(request.args)
    data = reports.list_expenses(current_user.id, params)
    data["filters"] = {
        key: request.args.get(key)
        for key in ("category", "startDate", "endDate", "search", "minAmount", "maxAmount")
    }
    data["filters"].update({"sortBy": params["sort_by"], "sortOrder": params["sort_order"]})
    return success(data)


@expenses_bp.route("/stats")
@login_required
def expense_stats():
    start, end = parse_date_range(request.args)
    return success(reports.expense_stats(current_user.id, start, end))


@expenses_bp.route("/summary/monthly")
@login_required
def monthly_summary():
    month, year = parse_period_args(request.args)
    return success(reports.monthly_report(current_user.id, month, year))


@expenses_bp.route("/summary/yearly")
@login_required
def yearly_summary():
    _, year = parse_period_args({"year": request.args.get("year")})
    return success(reports.yearly_report(current_user.id, year))


@expenses_bp.route("/categories")
@login_required
def expense_categories():
    return success(reports.categories(current_user.id))


@expenses_bp.route("/date-range")
@login_required
def expense_date_range():
    return success(reports.date_range(current_user.id))


@expenses_bp.route("/<expense_id>", methods=["GET"])
@login_required
def get_expense(expense_id):
    return success({"expense": _get_owned(expense_id).to_dict()})


@expenses_bp.route("/<expense_id>", methods=["PUT"])
@login_required
def update_expense(expense_id):
    exp = _get_owned(expense_id)
    cleaned, errors = validate_expense(json_body(), partial=True)
    if errors:
        raise ValidationError(errors=errors)
    for field, value in cleaned.items():
        setattr(exp, field, value)
    db.session.commit()
    current_app.logger.info("Updated expense %s for user %s", exp.id, current_user.id)
    return success({"expense": exp.to_dict()}, "Expense updated successfully")


@expenses_bp.route("/<expense_id>", methods=["DELETE"])
@login_required
def delete_expense(expense_id):
    exp = _get_owned(expense_id)
    db.session.delete(exp)
    db.session.commit()
    current_app.logger.info("Deleted expense %s for user %s", expense_id, current_user.id)
    return success(message="Expense deleted successfully")
