"""Loan and amortization data types."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum


class ScheduleStatus(Enum):
    AHEAD = "ahead"
    ON_TRACK = "on_track"
    BEHIND = "behind"


@dataclass(frozen=True)
class LoanTerms:
    original_balance: Decimal
    annual_rate_percent: Decimal  # 6.5 means 6.5% APR
    term_months: int

    @property
    def is_valid(self) -> bool:
        return self.original_balance > 0 and self.term_months > 0


@dataclass(frozen=True)
class AmortizationPoint:
    month: int
    payment: Decimal
    principal_portion: Decimal
    interest_portion: Decimal
    balance_after: Decimal


@dataclass(frozen=True)
class YearSummary:
    year: int
    principal: Decimal
    interest: Decimal
    payments: Decimal
    ending_balance: Decimal


@dataclass(frozen=True)
class ScheduleSummary:
    monthly_payment: Decimal
    total_payments: Decimal
    total_interest: Decimal
    total_principal: Decimal
    months: int
    years: list[YearSummary]


@dataclass(frozen=True)
class DebtSnapshot:
    """A single debt as read from storage. Any field may be missing."""
    original_balance: Decimal | None
    current_balance: Decimal
    annual_rate_percent: Decimal | None
    term_months: int | None
    origination_date: date | None


@dataclass(frozen=True)
class AmortizationHealth:
    months_elapsed: int
    expected_balance: Decimal
    actual_balance: Decimal
    difference: Decimal  # Positive = actual balance below schedule (ahead)
    months_ahead_or_behind: int  # Positive = ahead, negative = behind
    status: ScheduleStatus
    percent_ahead: Decimal
    expected_payoff_date: date
    projected_payoff_date: date | None

    def to_dict(self) -> dict:
        return {
            "months_elapsed": self.months_elapsed,
            "expected_balance": float(self.expected_balance),
            "actual_balance": float(self.actual_balance),
            "difference": float(self.difference),
            "months_ahead_or_behind": self.months_ahead_or_behind,
            "status": self.status.value,
            "percent_ahead": float(self.percent_ahead),
            "expected_payoff_date": self.expected_payoff_date.isoformat(),
            "projected_payoff_date": (
                self.projected_payoff_date.isoformat() if self.projected_payoff_date else None
            ),
        }
