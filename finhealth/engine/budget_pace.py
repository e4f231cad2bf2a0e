"""Month-to-date budget pace.

Compares the share of a budget already spent with the share of the month
already elapsed. `today` is always passed in.
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from finhealth.engine.dates import days_in_month
from finhealth.engine.numeric import ZERO, cents, to_decimal

# Spending this far above the elapsed-month share counts as over pace
PACE_SLACK = Decimal("0.05")
# Projected overspend below this is noise
MIN_PROJECTED_OVERSPEND = Decimal("1")


class BurnStatus(Enum):
    UNDER_PACE = "under_pace"
    ON_PACE = "on_pace"
    OVER_PACE = "over_pace"
    CRITICAL = "critical"


@dataclass(frozen=True)
class PaceIndicator:
    days_elapsed: int
    days_remaining: int
    projected_total: Decimal
    projected_overspend: Decimal
    is_over_pace: bool

    @property
    def text(self) -> str:
        if self.is_over_pace:
            return f"${self.projected_overspend:,.0f} over by month end"
        return "On pace"


def burn_ratio(spent: Decimal | float, budgeted: Decimal | float, today: date) -> Decimal:
    """Actual spend fraction divided by the expected fraction for today.

    < 1 is under pace, 1 is exactly on pace, > 1 is over pace.
    """
    spent = to_decimal(spent)
    budgeted = to_decimal(budgeted)
    if budgeted <= 0:
        return ZERO
    expected = Decimal(today.day) / Decimal(days_in_month(today))
    return (spent / budgeted / expected).quantize(Decimal("0.0001"))


def burn_status(ratio: Decimal) -> BurnStatus:
    if ratio <= Decimal("0.85"):
        return BurnStatus.UNDER_PACE
    if ratio <= Decimal("1.0"):
        return BurnStatus.ON_PACE
    if ratio <= Decimal("1.25"):
        return BurnStatus.OVER_PACE
    return BurnStatus.CRITICAL


def pace_indicator(
    spent: Decimal | float, budgeted: Decimal | float, today: date
) -> PaceIndicator | None:
    """Project month-end spend at the current daily rate.

    None when there is no budget or on the first day of the month (too
    little data to extrapolate).
    """
    spent = to_decimal(spent)
    budgeted = to_decimal(budgeted)
    if budgeted <= 0:
        return None

    month_days = days_in_month(today)
    days_elapsed = min(today.day, month_days)
    if days_elapsed < 2:
        return None
    days_remaining = month_days - days_elapsed

    daily_rate = spent / days_elapsed
    projected = spent + daily_rate * days_remaining
    expected_pace = Decimal(days_elapsed) / Decimal(month_days)
    actual_pace = spent / budgeted
    overspend = max(ZERO, projected - budgeted)

    over = (projected > budgeted or actual_pace > expected_pace + PACE_SLACK) and (
        overspend > MIN_PROJECTED_OVERSPEND
    )
    return PaceIndicator(
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        projected_total=cents(projected),
        projected_overspend=cents(overspend) if over else ZERO,
        is_over_pace=over,
    )
