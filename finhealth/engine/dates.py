"""Calendar-month arithmetic. Day of month is ignored for bucketing."""

from datetime import date

from dateutil.relativedelta import relativedelta


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start to end (negative if end precedes start)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def add_months(d: date, months: int) -> date:
    """Shift by calendar months, clamping to the last day of shorter months."""
    return d + relativedelta(months=months)


def month_start(d: date) -> date:
    return d.replace(day=1)


def shift_month_start(d: date, months: int) -> date:
    """First day of the month `months` away from d's month."""
    return month_start(d) + relativedelta(months=months)


def days_in_month(d: date) -> int:
    return ((month_start(d) + relativedelta(months=1)) - month_start(d)).days
