import math
from datetime import date

from ..constants import CATEGORIES, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, MAX_YEAR, MIN_YEAR
from ..errors import ValidationError, field_error
from ..models import Expense
from ..validators import parse_date, parse_int

SORT_FIELDS = {
    "date": Expense.date,
    "amount": Expense.amount,
    "description": Expense.description,
    "category": Expense.category,
    "createdAt": Expense.created_at,
}


def _float_arg(args, name, errors):
    raw = args.get(name)
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except ValueError:
        errors.append(field_error(name, f"{name} must be a number"))
        return None


def _date_arg(args, name, errors):
    raw = args.get(name)
    if not raw:
        return None
    value = parse_date(raw)
    if value is None:
        errors.append(field_error(name, f"{name} must be a valid ISO date (YYYY-MM-DD)"))
    return value


def parse_date_range(args):
    errors = []
    start = _date_arg(args, "startDate", errors)
    end = _date_arg(args, "endDate", errors)
    if errors:
        raise ValidationError("Invalid query parameters", errors)
    return start, end


def parse_list_args(args):
    """Turn request query args into a normalised filter dict, raising ValidationError."""
    errors = []
    params = {}

    category = (args.get("category") or "").strip().lower()
    if category and category != "all":
        if category not in CATEGORIES:
            errors.append(field_error("category", "Category must be one of the predefined options"))
        params["category"] = category
    else:
        params["category"] = None

    params["start_date"] = _date_arg(args, "startDate", errors)
    params["end_date"] = _date_arg(args, "endDate", errors)
    params["min_amount"] = _float_arg(args, "minAmount", errors)
    params["max_amount"] = _float_arg(args, "maxAmount", errors)
    params["search"] = (args.get("search") or "").strip() or None

    sort_by = args.get("sortBy") or "date"
    if sort_by not in SORT_FIELDS:
        errors.append(field_error("sortBy", f"sortBy must be one of: {', '.join(SORT_FIELDS)}"))
    params["sort_by"] = sort_by

    sort_order = (args.get("sortOrder") or "desc").lower()
    if sort_order not in ("asc", "desc"):
        errors.append(field_error("sortOrder", "sortOrder must be 'asc' or 'desc'"))
    params["sort_order"] = sort_order

    page = parse_int(args.get("page", 1))
    if page is None or page < 1:
        errors.append(field_error("page", "page must be a positive integer"))
    params["page"] = page

    limit = parse_int(args.get("limit", DEFAULT_PAGE_SIZE))
    if limit is None or not 1 <= limit <= MAX_PAGE_SIZE:
        errors.append(field_error("limit", f"limit must be between 1 and {MAX_PAGE_SIZE}"))
    params["limit"] = limit

    if errors:
        raise ValidationError("Invalid query parameters", errors)
    return params


def filter_expenses(query, params):
    if params.get("category"):
        query = query.filter(Expense.category == params["category"])
    if params.get("start_date"):
        query = query.filter(Expense.date >= params["start_date"])
    if params.get("end_date"):
        query = query.filter(Expense.date <= params["end_date"])
    if params.get("min_amount") is not None:
        query = query.filter(Expense.amount >= params["min_amount"])
    if params.get("max_amount") is not None:
        query = query.filter(Expense.amount <= params["max_amount"])
    if params.get("search"):
        query = query.filter(Expense.description.icontains(params["search"], autoescape=True))
    return query


def sort_expenses(query, sort_by="date", sort_order="desc"):
    column = SORT_FIELDS[sort_by]
    primary = column.asc() if sort_order == "asc" else column.desc()
    return query.order_by(primary, Expense.id.desc() if sort_order == "desc" else Expense.id.asc())


def pagination(page, limit, total):
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalExpenses": total,
        "hasNext": page * limit < total,
        "hasPrev": page > 1,
        "limit": limit,
    }


def parse_period_args(args, today=None):
    """Read ``month``/``year`` query args, defaulting to the current period."""
    today = today or date.today()
    errors = []
    month, year = today.month, today.year
    if args.get("month"):
        month = parse_int(args.get("month"))
        if month is None or not 1 <= month <= 12:
            errors.append(field_error("month", "Month must be between 1 and 12"))
    if args.get("year"):
        year = parse_int(args.get("year"))
        if year is None or not MIN_YEAR <= year <= MAX_YEAR:
            errors.append(field_error("year", f"Year must be between {MIN_YEAR} and {MAX_YEAR}"))
    if errors:
        raise ValidationError("Invalid query parameters", errors)
    return month, year
