"""Calendar and arithmetic helpers shared by the evaluators."""

from calendar import monthrange
from datetime import date, datetime
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def to_date(value: DateLike) -> date:
    """Coerce a date, datetime or ISO string to a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def resolve_as_of(as_of: Optional[DateLike]) -> date:
    """Return the evaluation date, defaulting to today."""
    return to_date(as_of) if as_of is not None else date.today()


def first_of_month(value: date) -> date:
    return value.replace(day=1)


def add_months(value: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, monthrange(year, month)[1])
    return date(year, month, day)


def last_day_of_month(year: int, month: int) -> date:
    return date(year, month, monthrange(year, month)[1])


def days_between(start: date, end: date) -> int:
    """Signed whole days from start to end."""
    return (end - start).days


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning 0 when the denominator is zero."""
    if denominator == 0:
        return 0.0
    return numerator / denominator


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves away from zero, unlike the built-in banker's rounding."""
    factor = 10 ** digits
    if value >= 0:
        return int(value * factor + 0.5) / factor
    return -int(-value * factor + 0.5) / factor


def round_money(value: float) -> int:
    """Round a dollar amount to a whole number."""
    return int(round_half_up(value))
