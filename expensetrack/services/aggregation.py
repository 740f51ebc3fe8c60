"""Spending reductions over expense collections.

Every function here is pure: it takes an iterable of expense-like objects
(anything with ``amount``, ``category``, ``date`` and ``description``) and
returns plain dicts ready for JSON. Empty inputs produce zero-valued results.
"""
from collections import defaultdict
from datetime import date

from ..constants import TOP_EXPENSES_LIMIT
from ..formatting import format_currency, percentage
from ..periods import days_in_month, is_current_period, month_name


def totals(expenses):
    amounts = [float(e.amount) for e in expenses]
    count = len(amounts)
    total = sum(amounts)
    return {
        "totalAmount": total,
        "count": count,
        "avgAmount": total / count if count else 0.0,
        "maxAmount": max(amounts) if amounts else 0.0,
        "minAmount": min(amounts) if amounts else 0.0,
    }


def with_formatted(summary):
    """Add currency strings to a ``totals``-shaped dict."""
    summary.update({
        "formattedTotalAmount": format_currency(summary["totalAmount"]),
        "formattedAvgAmount": format_currency(summary["avgAmount"]),
        "formattedMaxAmount": format_currency(summary["maxAmount"]),
        "formattedMinAmount": format_currency(summary["minAmount"]),
    })
    return summary


def _group(expenses, key):
    groups = defaultdict(list)
    for e in expenses:
        groups[key(e)].append(float(e.amount))
    return groups


def category_breakdown(expenses, total=None):
    """Per-category totals sorted by descending total (ties by category name)."""
    groups = _group(expenses, lambda e: e.category)
    if total is None:
        total = sum(sum(amounts) for amounts in groups.values())
    rows = []
    for category, amounts in groups.items():
        amount = sum(amounts)
        avg = amount / len(amounts)
        rows.append({
            "category": category,
            "totalAmount": amount,
            "count": len(amounts),
            "avgAmount": avg,
            "percentage": percentage(amount, total),
            "formattedAmount": format_currency(amount),
            "formattedAvg": format_currency(avg),
        })
    rows.sort(key=lambda r: (-r["totalAmount"], r["category"]))
    return rows


def daily_totals(expenses):
    groups = _group(expenses, lambda e: e.date.day)
    return [
        {"day": day, "totalAmount": sum(amounts), "count": len(amounts)}
        for day, amounts in sorted(groups.items())
    ]


def weekly_totals(expenses):
    """Totals keyed by ISO (year, week), so early-January days of the previous ISO year sort first."""
    groups = _group(expenses, lambda e: tuple(e.date.isocalendar())[:2])
    return [
        {"year": iso_year, "week": week, "totalAmount": sum(amounts), "count": len(amounts)}
        for (iso_year, week), amounts in sorted(groups.items())
    ]


def monthly_totals(expenses):
    """Totals for all twelve months of a year window, zero-filled."""
    groups = _group(expenses, lambda e: e.date.month)
    rows = []
    for month in range(1, 13):
        amounts = groups.get(month, [])
        amount = sum(amounts)
        rows.append({
            "month": month,
            "monthName": month_name(month),
            "totalAmount": amount,
            "count": len(amounts),
            "avgAmount": amount / len(amounts) if amounts else 0.0,
            "formattedAmount": format_currency(amount),
        })
    return rows


def top_expenses(expenses, limit=TOP_EXPENSES_LIMIT):
    return sorted(expenses, key=lambda e: float(e.amount), reverse=True)[:limit]


def days_tracked(month, year, today=None):
    """Divisor for the daily average: elapsed days in the current month, else the full month."""
    today = today or date.today()
    if is_current_period(month, year, today):
        return today.day
    return days_in_month(month, year)


def average_per_day(total, month, year, today=None):
    days = days_tracked(month, year, today)
    return total / days if days else 0.0


def change_percent(current, previous):
    """Period-over-period change in percent; zero when there is no previous spending."""
    if not previous:
        return 0.0
    return (current - previous) / previous * 100


def change_type(change):
    if change > 0:
        return "increase"
    if change < 0:
        return "decrease"
    return "no_change"


def overall_stats(expenses):
    summary = totals(expenses)
    return {
        "totalAmount": summary["totalAmount"],
        "totalExpenses": summary["count"],
        "avgExpense": summary["avgAmount"],
        "formattedTotalAmount": format_currency(summary["totalAmount"]),
    }
