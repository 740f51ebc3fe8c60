from flask import current_app
from sqlalchemy.exc import IntegrityError

from ..constants import (
    CAUTION_THRESHOLD,
    EXCEEDED_THRESHOLD,
    STATUS_COLORS,
    WARNING_THRESHOLD,
)
from ..errors import ConflictError
from ..extensions import db
from ..formatting import format_currency, percentage
from ..models import Budget
from ..periods import days_in_month, days_remaining, period_label

# Dashboard status -> (message, alert level)
INDICATORS = {
    "danger": ("Budget exceeded", "high"),
    "warning": ("Budget almost exceeded", "medium"),
    "caution": ("Approaching budget limit", "low"),
    "success": ("Within budget", "none"),
}


def percentage_used(total_spent, budget_amount) -> float:
    return percentage(total_spent, budget_amount)


def budget_status(percent_used) -> str:
    if percent_used >= EXCEEDED_THRESHOLD:
        return "exceeded"
    if percent_used >= WARNING_THRESHOLD:
        return "warning"
    if percent_used >= CAUTION_THRESHOLD:
        return "caution"
    return "within_budget"


def dashboard_status(percent_used) -> str:
    return {
        "exceeded": "danger",
        "warning": "warning",
        "caution": "caution",
        "within_budget": "success",
    }[budget_status(percent_used)]


def visual_indicator(percent_used):
    status = dashboard_status(percent_used)
    message, alert_level = INDICATORS[status]
    return {
        "status": status,
        "statusMessage": message,
        "alertLevel": alert_level,
        "progressBarWidth": min(percent_used, 100),
        "color": STATUS_COLORS[status],
    }


def compare(budget, total_spent, expense_count=0, today=None):
    """Spending figures for one budget against its period's actual spending."""
    remaining = budget.amount - total_spent
    used = percentage_used(total_spent, budget.amount)
    return {
        "totalSpent": total_spent,
        "expenseCount": expense_count,
        "remainingBudget": remaining,
        "percentageUsed": used,
        "formattedTotalSpent": format_currency(total_spent),
        "formattedRemainingBudget": format_currency(remaining),
        "status": budget_status(used),
        "isOverBudget": total_spent > budget.amount,
        "daysInPeriod": days_in_month(budget.month, budget.year),
        "daysRemaining": days_remaining(budget.month, budget.year, today),
    }


def summarize(budgets, comparisons):
    total_budget = sum(b.amount for b in budgets)
    total_spent = sum(c["totalSpent"] for c in comparisons)
    return {
        "totalBudgets": len(budgets),
        "totalBudgetAmount": total_budget,
        "totalSpent": total_spent,
        "budgetsExceeded": sum(1 for c in comparisons if c["status"] == "exceeded"),
        "budgetsInWarning": sum(1 for c in comparisons if c["status"] == "warning"),
        "overallPercentageUsed": percentage(total_spent, total_budget),
        "formattedTotalBudgetAmount": format_currency(total_budget),
        "formattedTotalSpent": format_currency(total_spent),
    }


def dashboard_item(budget, total_spent, expense_count):
    remaining = budget.amount - total_spent
    used = percentage_used(total_spent, budget.amount)
    return {
        "budget": budget.to_dict(),
        "spending": {
            "totalSpent": total_spent,
            "remainingBudget": remaining,
            "percentageUsed": used,
            "expenseCount": expense_count,
            "formattedTotalSpent": format_currency(total_spent),
            "formattedRemainingBudget": format_currency(remaining),
        },
        "visualIndicator": visual_indicator(used),
    }


def summarize_dashboard(budgets, items, month, year):
    total_budget = sum(b.amount for b in budgets)
    total_spent = sum(item["spending"]["totalSpent"] for item in items)
    remaining = total_budget - total_spent
    statuses = [item["visualIndicator"]["status"] for item in items]
    return {
        "period": period_label(month, year),
        "totalBudgets": len(budgets),
        "totalBudgetAmount": total_budget,
        "totalSpent": total_spent,
        "totalRemaining": remaining,
        "overallPercentage": percentage(total_spent, total_budget),
        "budgetsExceeded": statuses.count("danger"),
        "budgetsInWarning": statuses.count("warning"),
        "formattedTotalBudgetAmount": format_currency(total_budget),
        "formattedTotalSpent": format_currency(total_spent),
        "formattedTotalRemaining": format_currency(remaining),
    }


def _find(user_id, category, month, year):
    return Budget.query.filter_by(user_id=user_id, category=category, month=month, year=year).first()


def _apply_update(budget, values):
    budget.amount = values["amount"]
    if "notes" in values:
        budget.notes = values["notes"]
    budget.is_active = values.get("is_active", True)


def upsert_budget(user_id, values):
    """Create or update the budget for (user, category, month, year).

    Returns ``(budget, created)``. A concurrent insert of the same tuple is
    caught by the unique constraint and retried as an update.
    """
    budget = _find(user_id, values["category"], values["month"], values["year"])
    if budget:
        _apply_update(budget, values)
        db.session.commit()
        current_app.logger.info("Updated budget %s for user %s (%s)", budget.id, user_id, budget.period)
        return budget, False

    budget = Budget(
        user_id=user_id,
        category=values["category"],
        month=values["month"],
        year=values["year"],
        amount=values["amount"],
        notes=values.get("notes"),
        is_active=values.get("is_active", True),
    )
    db.session.add(budget)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        budget = _find(user_id, values["category"], values["month"], values["year"])
        if budget is None:
            raise ConflictError("Budget already exists for this category and period")
        _apply_update(budget, values)
        db.session.commit()
        current_app.logger.info("Updated budget %s for user %s after concurrent create", budget.id, user_id)
        return budget, False

    current_app.logger.info("Created budget %s for user %s (%s)", budget.id, user_id, budget.period)
    return budget, True
