import calendar
from datetime import date

MONTH_NAMES = list(calendar.month_name)[1:]


def current_period(today=None):
    today = today or date.today()
    return today.month, today.year


def days_in_month(month: int, year: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(month: int, year: int):
    """First and last calendar day of the month, both inclusive."""
    return date(year, month, 1), date(year, month, days_in_month(month, year))


def year_bounds(year: int):
    return date(year, 1, 1), date(year, 12, 31)


def previous_period(month: int, year: int):
    if month == 1:
        return 12, year - 1
    return month - 1, year


def is_current_period(month: int, year: int, today=None) -> bool:
    return (month, year) == current_period(today)


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


def period_label(month: int, year: int) -> str:
    return f"{month_name(month)} {year}"


def days_remaining(month: int, year: int, today=None) -> int:
    """Days left in the period after ``today``; zero for past periods."""
    today = today or date.today()
    start, end = month_bounds(month, year)
    if today > end:
        return 0
    if today < start:
        return days_in_month(month, year)
    return (end - today).days
