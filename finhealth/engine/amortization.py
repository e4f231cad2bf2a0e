"""Fixed-rate amortization schedules and schedule-adherence diagnostics.

Pure functions: Decimal in, dataclass out. No I/O, no clock reads; callers
pass "now" explicitly.
"""

import logging
import math
from datetime import date
from decimal import Decimal, localcontext
from typing import Iterator

from finhealth.config import settings
from finhealth.engine.dates import add_months, months_between
from finhealth.engine.numeric import ZERO, cents, to_decimal
from finhealth.engine.search import bisect_monotone
from finhealth.models.loan import (
    AmortizationHealth,
    AmortizationPoint,
    DebtSnapshot,
    ScheduleStatus,
    ScheduleSummary,
    YearSummary,
)

logger = logging.getLogger(__name__)

HALF_CENT = Decimal("0.005")
BASE_PRECISION = 28
BALANCE_MATCH_TOLERANCE = Decimal("0.01")


def _monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    # Negative APR is caller error; treat as interest-free
    return max(ZERO, annual_rate_percent) / 12 / 100


def _working_precision(r: Decimal, n: int) -> int:
    """Digits needed so (1+r)^n growth doesn't swamp the cents."""
    return BASE_PRECISION + math.ceil(n * math.log10(1 + float(r)))


def _level_payment(principal: Decimal, r: Decimal, n: int) -> Decimal:
    if r == 0:
        return principal / n
    # M = P * [r(1+r)^n] / [(1+r)^n - 1]
    with localcontext() as ctx:
        ctx.prec = _working_precision(r, n)
        factor = (1 + r) ** n
        return principal * (r * factor) / (factor - 1)


def monthly_payment(
    principal: Decimal | float, annual_rate_percent: Decimal | float, term_months: int
) -> Decimal:
    """Fixed monthly payment, rounded to cents. Zero when the loan is undefined."""
    principal = to_decimal(principal)
    if principal <= 0 or term_months <= 0:
        return ZERO
    return cents(_level_payment(principal, _monthly_rate(to_decimal(annual_rate_percent)), term_months))


def iter_schedule(
    principal: Decimal | float,
    annual_rate_percent: Decimal | float,
    term_months: int,
) -> Iterator[AmortizationPoint]:
    """Yield the month-by-month schedule.

    The running balance is carried at a precision wide enough for the
    loan's compounding; emitted amounts are rounded to cents. Stops as soon
    as the balance reaches zero, which can be before term_months. The last
    scheduled month always clears whatever balance remains.
    """
    principal = to_decimal(principal)
    if principal <= 0 or term_months <= 0:
        return

    r = _monthly_rate(to_decimal(annual_rate_percent))
    prec = _working_precision(r, term_months)
    pmt = _level_payment(principal, r, term_months)
    balance = principal

    for month in range(1, term_months + 1):
        # Context is entered per step so it never leaks across a yield
        with localcontext() as ctx:
            ctx.prec = prec
            interest = balance * r
            if month == term_months:
                principal_paid = balance
            else:
                principal_paid = max(ZERO, min(pmt - interest, balance))
            balance = balance - principal_paid

            # Sub-cent residue counts as paid off
            if balance < HALF_CENT:
                principal_paid += balance
                balance = ZERO

            point = AmortizationPoint(
                month=month,
                payment=cents(interest + principal_paid),
                principal_portion=cents(principal_paid),
                interest_portion=cents(interest),
                balance_after=cents(balance),
            )

        yield point

        if balance == 0:
            break


def generate_schedule(
    principal: Decimal | float,
    annual_rate_percent: Decimal | float,
    term_months: int,
) -> tuple[AmortizationPoint, ...]:
    """Materialized schedule. Empty when principal or term is not positive."""
    return tuple(iter_schedule(principal, annual_rate_percent, term_months))


def get_expected_balance(
    principal: Decimal | float,
    annual_rate_percent: Decimal | float,
    term_months: int,
    month_number: int,
) -> Decimal:
    """Scheduled balance after `month_number` payments (closed form)."""
    principal = to_decimal(principal)
    if principal <= 0:
        return ZERO
    if month_number <= 0:
        return cents(principal)
    if term_months <= 0 or month_number >= term_months:
        return ZERO

    r = _monthly_rate(to_decimal(annual_rate_percent))
    if r == 0:
        return cents(max(ZERO, principal * (1 - Decimal(month_number) / Decimal(term_months))))

    # B(m) = P * [(1+r)^n - (1+r)^m] / [(1+r)^n - 1]
    with localcontext() as ctx:
        ctx.prec = _working_precision(r, term_months)
        growth_n = (1 + r) ** term_months
        growth_m = (1 + r) ** month_number
        return cents(max(ZERO, principal * (growth_n - growth_m) / (growth_n - 1)))


def find_schedule_month(
    principal: Decimal | float,
    annual_rate_percent: Decimal | float,
    term_months: int,
    balance: Decimal | float,
) -> int:
    """Month of the original schedule whose expected balance best matches `balance`."""
    principal = to_decimal(principal)
    rate = to_decimal(annual_rate_percent)
    return bisect_monotone(
        0,
        max(0, term_months),
        lambda m: get_expected_balance(principal, rate, term_months, m),
        to_decimal(balance),
        BALANCE_MATCH_TOLERANCE,
    )


def _classify(
    difference: Decimal,
    expected: Decimal,
    actual: Decimal,
    tolerance_pct: Decimal,
) -> tuple[ScheduleStatus, Decimal]:
    """Status and percent ahead. Within tolerance_pct of expected = on track."""
    if expected <= 0:
        # Schedule says paid off: nothing to compare a percentage against
        status = ScheduleStatus.ON_TRACK if actual <= 0 else ScheduleStatus.BEHIND
        return status, ZERO

    percent = difference / expected * 100
    if abs(percent) <= tolerance_pct:
        status = ScheduleStatus.ON_TRACK
    elif difference > 0:
        status = ScheduleStatus.AHEAD
    else:
        status = ScheduleStatus.BEHIND
    return status, cents(percent)


def get_amortization_health(
    debt: DebtSnapshot,
    now: date,
    tolerance_pct: Decimal | None = None,
) -> AmortizationHealth | None:
    """Compare a debt's actual balance with its theoretical schedule.

    Returns None when there is not enough data to place the debt on a
    schedule (missing or non-positive principal or term, no origination
    date) or when the loan has not started yet.
    """
    if tolerance_pct is None:
        tolerance_pct = settings.on_track_tolerance_pct

    original = to_decimal(debt.original_balance) if debt.original_balance is not None else None
    term = debt.term_months
    if original is None or original <= 0 or not term or term <= 0 or debt.origination_date is None:
        logger.debug("Insufficient data for amortization tracking: %s", debt)
        return None

    months_elapsed = months_between(debt.origination_date, now)
    if months_elapsed < 0:
        logger.debug("Debt originates after %s, no verdict yet", now)
        return None

    rate = to_decimal(debt.annual_rate_percent)
    expected = get_expected_balance(original, rate, term, months_elapsed)
    actual = cents(to_decimal(debt.current_balance))
    difference = expected - actual

    months_ahead = 0
    if difference != 0:
        months_ahead = find_schedule_month(original, rate, term, actual) - months_elapsed

    status, percent_ahead = _classify(difference, expected, actual, tolerance_pct)

    expected_payoff = add_months(debt.origination_date, term)
    projected_payoff = add_months(expected_payoff, -months_ahead)

    return AmortizationHealth(
        months_elapsed=months_elapsed,
        expected_balance=expected,
        actual_balance=actual,
        difference=difference,
        months_ahead_or_behind=months_ahead,
        status=status,
        percent_ahead=percent_ahead,
        expected_payoff_date=expected_payoff,
        projected_payoff_date=projected_payoff,
    )


def schedule_summary(
    principal: Decimal | float,
    annual_rate_percent: Decimal | float,
    term_months: int,
) -> ScheduleSummary:
    """Totals plus a per-year roll-up of the schedule."""
    points = generate_schedule(principal, annual_rate_percent, term_months)

    years: list[YearSummary] = []
    year_principal = ZERO
    year_interest = ZERO
    year_payments = ZERO

    for p in points:
        year_principal += p.principal_portion
        year_interest += p.interest_portion
        year_payments += p.payment

        if p.month % 12 == 0 or p.month == len(points):
            years.append(YearSummary(
                year=(p.month - 1) // 12 + 1,
                principal=year_principal,
                interest=year_interest,
                payments=year_payments,
                ending_balance=p.balance_after,
            ))
            year_principal = ZERO
            year_interest = ZERO
            year_payments = ZERO

    return ScheduleSummary(
        monthly_payment=monthly_payment(principal, annual_rate_percent, term_months),
        total_payments=sum((p.payment for p in points), ZERO),
        total_interest=sum((p.interest_portion for p in points), ZERO),
        total_principal=sum((p.principal_portion for p in points), ZERO),
        months=len(points),
        years=years,
    )
