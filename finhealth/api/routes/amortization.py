"""Amortization routes: schedules and schedule-adherence checks."""

from fastapi import APIRouter, HTTPException

from finhealth.api.schemas import (
    AmortizationHealthRequest,
    AmortizationHealthResponse,
    AmortizationPointResponse,
    LoanRequest,
    ScheduleResponse,
    YearSummaryResponse,
)
from finhealth.engine.amortization import generate_schedule, get_amortization_health, schedule_summary
from finhealth.models.loan import DebtSnapshot, LoanTerms

router = APIRouter(prefix="/api/v1/amortization", tags=["amortization"])


@router.post("/schedule", response_model=ScheduleResponse)
async def schedule(req: LoanRequest):
    terms = LoanTerms(
        original_balance=req.original_balance,
        annual_rate_percent=req.annual_rate_percent,
        term_months=req.term_months,
    )
    if not terms.is_valid:
        raise HTTPException(status_code=422, detail="original_balance and term_months must be positive")

    points = generate_schedule(terms.original_balance, terms.annual_rate_percent, terms.term_months)
    summary = schedule_summary(terms.original_balance, terms.annual_rate_percent, terms.term_months)

    return ScheduleResponse(
        monthly_payment=summary.monthly_payment,
        total_payments=summary.total_payments,
        total_interest=summary.total_interest,
        months=summary.months,
        points=[
            AmortizationPointResponse(
                month=p.month,
                payment=p.payment,
                principal_portion=p.principal_portion,
                interest_portion=p.interest_portion,
                balance_after=p.balance_after,
            )
            for p in points
        ],
        years=[
            YearSummaryResponse(
                year=y.year,
                principal=y.principal,
                interest=y.interest,
                payments=y.payments,
                ending_balance=y.ending_balance,
            )
            for y in summary.years
        ],
    )


@router.post("/health", response_model=AmortizationHealthResponse | None)
async def health(req: AmortizationHealthRequest):
    """Compare a debt's balance against its schedule. null when it cannot be placed."""
    result = get_amortization_health(
        DebtSnapshot(
            original_balance=req.original_balance,
            current_balance=req.current_balance,
            annual_rate_percent=req.annual_rate_percent,
            term_months=req.term_months,
            origination_date=req.origination_date,
        ),
        req.today,
    )
    if result is None:
        return None
    return AmortizationHealthResponse(
        months_elapsed=result.months_elapsed,
        expected_balance=result.expected_balance,
        actual_balance=result.actual_balance,
        difference=result.difference,
        months_ahead_or_behind=result.months_ahead_or_behind,
        status=result.status.value,
        percent_ahead=result.percent_ahead,
        expected_payoff_date=result.expected_payoff_date,
        projected_payoff_date=result.projected_payoff_date,
    )
