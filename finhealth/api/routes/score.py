"""Score routes: the primary API entry point."""

import logging

from fastapi import APIRouter, Depends

from finhealth.api.cache import ResultCache, cache_key
from finhealth.api.deps import get_cache, get_scoring_config
from finhealth.api.schemas import (
    ScoreChangeResponse,
    ScoreCompareRequest,
    ScoreResponse,
    SnapshotRequest,
)
from finhealth.config import settings
from finhealth.engine.scorer import calculate_financial_health_score, compare_scores
from finhealth.engine.weights import ScoringConfig
from finhealth.models.snapshot import (
    Account,
    BillPayment,
    Budget,
    Debt,
    DebtPayment,
    FinancialSnapshot,
    SavingsContribution,
    SavingsGoal,
    Transaction,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["score"])


def _build_snapshot(req: SnapshotRequest) -> FinancialSnapshot:
    """Convert the request body into the engine's snapshot type."""
    return FinancialSnapshot(
        as_of=req.as_of,
        monthly_income=req.monthly_income,
        accounts=[Account(name=a.name, type=a.type, balance=a.balance) for a in req.accounts],
        budgets=[Budget(category=b.category, budgeted=b.budgeted, spent=b.spent) for b in req.budgets],
        transactions=[
            Transaction(amount=t.amount, date=t.date, category=t.category, cleared=t.cleared)
            for t in req.transactions
        ],
        debts=[
            Debt(
                type=d.type,
                current_balance=d.current_balance,
                monthly_payment=d.monthly_payment,
                annual_rate_percent=d.annual_rate_percent,
                original_balance=d.original_balance,
                term_months=d.term_months,
                origination_date=d.origination_date,
                in_collections=d.in_collections,
                payments=[
                    DebtPayment(amount=p.amount, date=p.date, is_extra=p.is_extra, days_late=p.days_late)
                    for p in d.payments
                ],
            )
            for d in req.debts
        ],
        savings_goals=[
            SavingsGoal(
                type=g.type,
                target=g.target,
                current=g.current,
                monthly_contribution=g.monthly_contribution,
                contributions=[SavingsContribution(amount=c.amount, date=c.date) for c in g.contributions],
            )
            for g in req.savings_goals
        ],
        bill_payments=[BillPayment(due_date=b.due_date, status=b.status) for b in req.bill_payments],
    )


@router.post("/score", response_model=ScoreResponse)
async def score(
    req: SnapshotRequest,
    cache: ResultCache = Depends(get_cache),
    config: ScoringConfig = Depends(get_scoring_config),
):
    """Score a financial snapshot. Results are cached per snapshot and config version."""
    key = cache_key(f"score:{config.version}", req.model_dump(mode="json"))
    cached = await cache.get(key)
    if cached is not None:
        logger.debug("Serving cached score %s", key)
        return ScoreResponse(**cached)

    result = calculate_financial_health_score(
        _build_snapshot(req), config, lookback_months=settings.lookback_months
    )
    payload = result.to_dict()
    await cache.set(key, payload, settings.cache_ttl_seconds)

    logger.info(
        "Score calculated",
        extra={
            "total_score": result.total_score,
            "score_level": result.level,
            "confidence": result.confidence,
            "config_version": result.config_version,
        },
    )
    return ScoreResponse(**payload)


@router.post("/score/compare", response_model=ScoreChangeResponse)
async def compare(
    req: ScoreCompareRequest,
    config: ScoringConfig = Depends(get_scoring_config),
):
    """Score two snapshots and report what moved between them."""
    current = calculate_financial_health_score(
        _build_snapshot(req.current), config, lookback_months=settings.lookback_months
    )
    previous = calculate_financial_health_score(
        _build_snapshot(req.previous), config, lookback_months=settings.lookback_months
    )
    change = compare_scores(current, previous)
    return ScoreChangeResponse(
        current=ScoreResponse(**current.to_dict()),
        previous=ScoreResponse(**previous.to_dict()),
        change=change.change,
        improved=change.improved,
        declined=change.declined,
    )
