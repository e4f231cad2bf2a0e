"""Budget pace route."""

from fastapi import APIRouter

from finhealth.api.schemas import BudgetPaceRequest, BudgetPaceResponse
from finhealth.engine.budget_pace import burn_ratio, burn_status, pace_indicator

router = APIRouter(prefix="/api/v1/budgets", tags=["budgets"])


@router.post("/pace", response_model=BudgetPaceResponse)
async def pace(req: BudgetPaceRequest):
    ratio = burn_ratio(req.spent, req.budgeted, req.today)
    indicator = pace_indicator(req.spent, req.budgeted, req.today)
    if indicator is None:
        return BudgetPaceResponse(burn_ratio=ratio, status=burn_status(ratio).value)
    return BudgetPaceResponse(
        burn_ratio=ratio,
        status=burn_status(ratio).value,
        projected_total=indicator.projected_total,
        projected_overspend=indicator.projected_overspend,
        is_over_pace=indicator.is_over_pace,
        text=indicator.text,
    )
