"""Report builders: load a user's expenses for a window and reduce them."""
from datetime import date

from sqlalchemy import func

from ..constants import CATEGORIES
from ..extensions import db
from ..formatting import format_currency, percentage, round2
from ..models import Budget, Expense
from ..periods import (
    days_in_month,
    is_current_period,
    month_bounds,
    month_name,
    previous_period,
    year_bounds,
)
from . import aggregation, budgets as comparator
from .filters import filter_expenses, pagination, sort_expenses
from .insights import generate_insights


def expenses_between(user_id, start=None, end=None, category=None):
    query = Expense.query.filter(Expense.user_id == user_id)
    if start:
        query = query.filter(Expense.date >= start)
    if end:
        query = query.filter(Expense.date <= end)
    if category:
        query = query.filter(Expense.category == category)
    return query.order_by(Expense.date.desc(), Expense.id.desc()).all()


def spending_by_category(user_id, start, end):
    """Map category -> (total, count) for the window, grouped in the database."""
    rows = (
        db.session.query(Expense.category, func.coalesce(func.sum(Expense.amount), 0.0), func.count(Expense.id))
        .filter(Expense.user_id == user_id, Expense.date >= start, Expense.date <= end)
        .group_by(Expense.category)
        .all()
    )
    return {category: (float(total), int(count)) for category, total, count in rows}


def category_spending(user_id, category, start, end):
    total, count = (
        db.session.query(func.coalesce(func.sum(Expense.amount), 0.0), func.count(Expense.id))
        .filter(
            Expense.user_id == user_id,
            Expense.category == category,
            Expense.date >= start,
            Expense.date <= end,
        )
        .one()
    )
    return float(total), int(count)


def list_expenses(user_id, params):
    query = filter_expenses(Expense.query.filter(Expense.user_id == user_id), params)
    total = query.count()
    page, limit = params["page"], params["limit"]
    rows = (
        sort_expenses(query, params["sort_by"], params["sort_order"])
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return {
        "expenses": [e.to_dict() for e in rows],
        "pagination": pagination(page, limit, total),
        "summary": _list_summary(query),
        "categoryBreakdown": _list_breakdown(query),
    }


def _list_summary(query):
    """Totals over every row matching the list filters, computed in the database."""
    total, count, avg, largest, smallest = query.with_entities(
        func.coalesce(func.sum(Expense.amount), 0.0),
        func.count(Expense.id),
        func.coalesce(func.avg(Expense.amount), 0.0),
        func.coalesce(func.max(Expense.amount), 0.0),
        func.coalesce(func.min(Expense.amount), 0.0),
    ).one()
    return aggregation.with_formatted({
        "totalAmount": float(total),
        "count": int(count),
        "avgAmount": float(avg),
        "maxAmount": float(largest),
        "minAmount": float(smallest),
    })


def _list_breakdown(query):
    rows = (
        query.with_entities(Expense.category, func.sum(Expense.amount), func.count(Expense.id))
        .group_by(Expense.category)
        .all()
    )
    grand_total = sum(float(total) for _, total, _ in rows)
    breakdown = []
    for category, total, count in rows:
        total = float(total)
        avg = total / count
        breakdown.append({
            "category": category,
            "totalAmount": total,
            "count": int(count),
            "avgAmount": avg,
            "percentage": percentage(total, grand_total),
            "formattedAmount": format_currency(total),
            "formattedAvg": format_currency(avg),
        })
    breakdown.sort(key=lambda r: (-r["totalAmount"], r["category"]))
    return breakdown


def expense_stats(user_id, start=None, end=None):
    expenses = expenses_between(user_id, start, end)
    return {
        "categoryStats": aggregation.category_breakdown(expenses),
        "overallStats": aggregation.overall_stats(expenses),
    }


def monthly_report(user_id, month, year, today=None):
    today = today or date.today()
    start, end = month_bounds(month, year)
    expenses = expenses_between(user_id, start, end)
    current = is_current_period(month, year, today)
    days = days_in_month(month, year)

    summary = aggregation.totals(expenses)
    total_spending = summary["totalAmount"]
    per_day = aggregation.average_per_day(total_spending, month, year, today)
    breakdown = aggregation.category_breakdown(expenses, total_spending)
    top = aggregation.top_expenses(expenses)

    prev_month, prev_year = previous_period(month, year)
    prev_start, prev_end = month_bounds(prev_month, prev_year)
    prev_total = sum(total for total, _ in spending_by_category(user_id, prev_start, prev_end).values())
    change = aggregation.change_percent(total_spending, prev_total)

    insights = generate_insights(
        total_spending=total_spending,
        average_per_day=per_day,
        category_breakdown=breakdown,
        change=change,
        days_in_period=days,
        is_current=current,
        top_expenses=top,
    )

    return {
        "summary": {
            "month": month,
            "year": year,
            "monthName": month_name(month),
            "totalSpending": total_spending,
            "totalExpenses": summary["count"],
            "averagePerExpense": summary["avgAmount"],
            "averagePerDay": per_day,
            "daysInMonth": days,
            "daysTracked": aggregation.days_tracked(month, year, today),
            "formattedTotalSpending": format_currency(total_spending),
            "formattedAveragePerExpense": format_currency(summary["avgAmount"]),
            "formattedAveragePerDay": format_currency(per_day),
        },
        "comparison": {
            "previousMonth": {
                "month": prev_month,
                "year": prev_year,
                "totalSpending": prev_total,
                "formattedTotal": format_currency(prev_total),
            },
            "monthOverMonthChange": round2(change),
            "changeType": aggregation.change_type(change),
        },
        "breakdown": {
            "categoryBreakdown": breakdown,
            "dailySpending": aggregation.daily_totals(expenses),
            "weeklySpending": aggregation.weekly_totals(expenses),
            "topExpenses": [e.to_dict() for e in top],
        },
        "insights": insights,
    }


def yearly_report(user_id, year):
    start, end = year_bounds(year)
    expenses = expenses_between(user_id, start, end)
    summary = aggregation.totals(expenses)
    total = summary["totalAmount"]
    return {
        "year": year,
        "totalSpending": total,
        "totalExpenses": summary["count"],
        "averageMonthly": total / 12,
        "monthlyBreakdown": aggregation.monthly_totals(expenses),
        "categoryBreakdown": aggregation.category_breakdown(expenses, total),
        "formattedTotal": format_currency(total),
        "formattedAverageMonthly": format_currency(total / 12),
    }


def categories(user_id):
    used = [
        row[0]
        for row in db.session.query(Expense.category)
        .filter(Expense.user_id == user_id)
        .distinct()
        .order_by(Expense.category)
        .all()
    ]
    return {
        "userCategories": used,
        "allCategories": list(CATEGORIES),
        "categoriesWithData": len(used),
    }


def date_range(user_id):
    earliest, latest = (
        db.session.query(func.min(Expense.date), func.max(Expense.date))
        .filter(Expense.user_id == user_id)
        .one()
    )
    return {
        "earliestDate": earliest.isoformat() if earliest else None,
        "latestDate": latest.isoformat() if latest else None,
        "hasExpenses": earliest is not None,
    }


def budget_comparisons(user_id, month=None, year=None, category=None, include_inactive=False, today=None):
    query = Budget.query.filter(Budget.user_id == user_id)
    if month is not None:
        query = query.filter(Budget.month == month)
    if year is not None:
        query = query.filter(Budget.year == year)
    if category:
        query = query.filter(Budget.category == category)
    if not include_inactive:
        query = query.filter(Budget.is_active.is_(True))
    rows = query.order_by(Budget.year.desc(), Budget.month.desc(), Budget.category).all()

    comparisons = []
    for budget in rows:
        start, end = month_bounds(budget.month, budget.year)
        spent, count = category_spending(user_id, budget.category, start, end)
        comparisons.append(comparator.compare(budget, spent, count, today))

    return {
        "budgets": [
            {"budget": budget.to_dict(), "spending": spending}
            for budget, spending in zip(rows, comparisons)
        ],
        "summary": comparator.summarize(rows, comparisons),
    }


def budget_detail(user_id, budget, today=None):
    start, end = month_bounds(budget.month, budget.year)
    expenses = expenses_between(user_id, start, end, category=budget.category)
    spent = sum(float(e.amount) for e in expenses)
    return {
        "budget": budget.to_dict(),
        "expenses": [e.to_dict() for e in expenses],
        "spending": comparator.compare(budget, spent, len(expenses), today),
    }


def budget_dashboard(user_id, month, year):
    rows = (
        Budget.query.filter_by(user_id=user_id, month=month, year=year, is_active=True)
        .order_by(Budget.category)
        .all()
    )
    start, end = month_bounds(month, year)
    spending = spending_by_category(user_id, start, end)
    items = [comparator.dashboard_item(b, *spending.get(b.category, (0.0, 0))) for b in rows]
    return {
        "dashboardData": items,
        "summary": comparator.summarize_dashboard(rows, items, month, year),
        "period": {"month": month, "year": year},
    }
