"""Display helpers for currency amounts and percentages."""


def round2(value) -> float:
    return round(float(value or 0), 2)


def format_currency(amount) -> str:
    """Render an amount as a fixed two-decimal dollar string, e.g. ``$12.50``."""
    amount = float(amount or 0)
    if amount < 0:
        return f"-${abs(amount):.2f}"
    return f"${amount:.2f}"


def percentage(part, total) -> float:
    """Share of ``part`` in ``total`` in percent, two decimals. Zero when total is zero."""
    if not total:
        return 0.0
    return round(part / total * 100, 2)
