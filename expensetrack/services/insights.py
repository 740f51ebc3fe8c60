from ..formatting import format_currency

TREND_THRESHOLD = 10
TREND_WARNING_THRESHOLD = 25
TOP_CATEGORY_WARNING_SHARE = 40
LARGE_EXPENSE_SHARE = 15
LARGE_EXPENSE_WARNING_SHARE = 25
CONCENTRATION_SHARE = 80


def _insight(type_, level, title, message, value):
    return {"type": type_, "level": level, "title": title, "message": message, "value": value}


def generate_insights(total_spending, average_per_day, category_breakdown, change,
                      days_in_period, is_current, top_expenses):
    """Derive spending observations from aggregated figures.

    ``category_breakdown`` rows must be sorted by descending ``totalAmount`` and
    ``top_expenses`` by descending amount. Each rule is checked independently;
    the returned list keeps rule order. A period without spending yields none.
    """
    insights = []
    if not total_spending:
        return insights

    if abs(change) > TREND_THRESHOLD:
        direction = "increased" if change > 0 else "decreased"
        insights.append(_insight(
            "trend",
            "warning" if abs(change) > TREND_WARNING_THRESHOLD else "info",
            f"Monthly Spending {direction}",
            f"Your spending has {direction} by {abs(change):.1f}% compared to last month.",
            f"{'+' if change > 0 else ''}{change:.1f}%",
        ))

    if category_breakdown:
        top = category_breakdown[0]
        share = top["totalAmount"] / total_spending * 100
        insights.append(_insight(
            "category",
            "warning" if share > TOP_CATEGORY_WARNING_SHARE else "info",
            "Top Spending Category",
            f"{top['category'].capitalize()} accounts for {share:.1f}% of your monthly spending.",
            format_currency(top["totalAmount"]),
        ))

    if is_current:
        projected = average_per_day * days_in_period
        insights.append(_insight(
            "projection",
            "info",
            "Monthly Projection",
            f"Based on your current daily average of {format_currency(average_per_day)}, "
            f"you're on track to spend {format_currency(projected)} this month.",
            format_currency(projected),
        ))

    if top_expenses:
        highest = top_expenses[0]
        share = float(highest.amount) / total_spending * 100
        if share > LARGE_EXPENSE_SHARE:
            insights.append(_insight(
                "expense",
                "warning" if share > LARGE_EXPENSE_WARNING_SHARE else "caution",
                "Large Single Expense",
                f'Your highest expense "{highest.description}" represents {share:.1f}% of your monthly spending.',
                format_currency(highest.amount),
            ))

    if len(category_breakdown) >= 3:
        top_three = sum(row["totalAmount"] for row in category_breakdown[:3]) / total_spending * 100
        if top_three > CONCENTRATION_SHARE:
            insights.append(_insight(
                "distribution",
                "info",
                "Concentrated Spending",
                f"{top_three:.1f}% of your spending is concentrated in just 3 categories.",
                f"{top_three:.1f}%",
            ))

    return insights
