"""Financial Health Score engine.

Scale 0-1000 across three pillars:
  Trajectory (35%): where you're headed
  Behavior   (35%): how you handle money
  Position   (30%): where you are now

Every sub-component is a continuous function of its inputs (no cliffs).
Wealth magnitudes are log-scaled so each extra dollar counts for less as
balances grow. Debts are weighted by risk, not balance alone, and Behavior
scores are pulled toward neutral until enough history exists.

Pure functions, no I/O, no clock: identical snapshots give identical scores.
"""

import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable

from finhealth.engine.aggregate import build_score_inputs
from finhealth.engine.numeric import ZERO, clamp, points, safe_ratio
from finhealth.engine.weights import DEFAULT_SCORING_CONFIG, CurveConstants, ScoringConfig
from finhealth.models.score import (
    PillarScore,
    ScoreChange,
    ScoreInputs,
    ScoreResult,
    SubComponent,
    WeightedDebt,
)
from finhealth.models.snapshot import FinancialSnapshot

# (fraction of max points in [0, 1], detail text)
Factor = tuple[float, str]

BEHAVIOR_PILLAR = "behavior"


def weighted_debt(debts: list[WeightedDebt], config: ScoringConfig) -> Decimal:
    """Sum of balances scaled by each debt type's risk multiplier."""
    return sum(
        (d.balance * Decimal(str(config.debt_multiplier(d.type, d.in_collections))) for d in debts),
        ZERO,
    )


def weighted_monthly_payments(debts: list[WeightedDebt], config: ScoringConfig) -> Decimal:
    return sum(
        (d.monthly_payment * Decimal(str(config.debt_multiplier(d.type, d.in_collections))) for d in debts),
        ZERO,
    )


# ---- Trajectory ----

def _wealth_building(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    if inputs.monthly_income <= 0:
        return 0.0, "No income recorded"

    rate = float(inputs.contributions.total / inputs.monthly_income)
    fraction = clamp(rate / config.curves.wealth_rate_target)
    pct = f"{rate * 100:.1f}%"

    if rate >= 0.20:
        detail = f"{pct} wealth building rate. Crushing it!"
    elif rate >= 0.10:
        detail = f"{pct} rate. Solid foundation building"
    elif rate > 0:
        detail = f"{pct} rate. Every dollar counts, keep going"
    else:
        detail = "No wealth building this month"
    return fraction, detail


def _debt_velocity(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    current = weighted_debt(inputs.current_debts, config)
    previous = weighted_debt(inputs.debts_at_window_start, config)

    if current <= 0 and previous <= 0:
        return 1.0, "Debt-free!"
    if current <= 0:
        return 1.0, "You paid off all your debt!"

    curves = config.curves
    change = (
        float((current - previous) / previous * 100) if previous > 0 else curves.new_debt_change_pct
    )
    fraction = clamp(0.5 - 0.5 * math.tanh(change / curves.debt_velocity_scale_pct))

    if change <= -1:
        detail = f"Weighted debt down {abs(change):.1f}%. Moving in the right direction"
    elif change < 1:
        detail = "Debt stable. Can you accelerate payoff?"
    else:
        detail = f"Weighted debt up {change:.1f}%. Time to course correct"
    return fraction, detail


def _cash_flow_trend(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    income = inputs.window_income
    spending = inputs.window_spending
    if income <= 0:
        if spending > 0:
            return 0.0, "Spending with no recorded income"
        return 0.5, "No cash flow recorded yet"

    margin = float((income - spending) / income)
    fraction = clamp(0.5 + 0.5 * math.tanh(margin / config.curves.cash_flow_margin_scale))
    if margin >= 0:
        detail = f"Keeping {margin * 100:.0f}% of income"
    else:
        detail = f"Spending {abs(margin) * 100:.0f}% more than you earn"
    return fraction, detail


# ---- Behavior ----

def _payment_consistency(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    on_time = inputs.paid_on_time
    total = on_time + inputs.paid_late_1_30 + inputs.paid_late_31_60 + inputs.paid_late_61_plus
    if total == 0:
        # No data is neutral, not perfect
        return 0.5, "No bills tracked yet - add bills to build your score"

    curves = config.curves
    penalties = (
        inputs.paid_late_1_30 * curves.late_penalty_1_30
        + inputs.paid_late_31_60 * curves.late_penalty_31_60
        + inputs.paid_late_61_plus * curves.late_penalty_61_plus
    )
    fraction = clamp((total - penalties) / total)

    if on_time == total:
        detail = f"Perfect! {total}/{total} payments on time"
    else:
        detail = f"{on_time / total * 100:.0f}% on-time"
    return fraction, detail


def _budget_discipline(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    budgets = [b for b in inputs.budgets if b.budgeted > 0]
    if not budgets:
        return 0.5, "No budgets set - create budgets to track this"

    decay = config.curves.overspend_decay_pct
    total_budgeted = sum((b.budgeted for b in budgets), ZERO)
    weighted = 0.0
    on_track = 0
    for b in budgets:
        overspend_pct = max(0.0, float((b.spent - b.budgeted) / b.budgeted * 100))
        if overspend_pct == 0:
            on_track += 1
        weighted += float(b.budgeted) * math.exp(-overspend_pct / decay)
    fraction = clamp(weighted / float(total_budgeted))

    if on_track == len(budgets):
        detail = f"All {len(budgets)} budgets on track!"
    else:
        detail = f"{on_track}/{len(budgets)} budgets on track"
    return fraction, detail


def _engagement(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    w = config.curves.engagement_activity_weight
    activity = inputs.active_months / inputs.lookback_months if inputs.lookback_months > 0 else 0.0
    fraction = clamp(w * activity + (1 - w) * inputs.cleared_ratio)
    detail = (
        f"Active {inputs.active_months} of the last {inputs.lookback_months} months, "
        f"{inputs.cleared_ratio * 100:.0f}% cleared"
    )
    return fraction, detail


# ---- Position ----

def _emergency_buffer(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    curves = config.curves
    liquid = max(ZERO, inputs.liquid_savings)
    # Thin or missing expense data is measured against a floor, never zero
    expenses = max(inputs.monthly_expenses, Decimal(str(curves.emergency_expense_floor)))

    months = float(liquid / expenses)
    target = curves.emergency_months_target
    fraction = clamp(math.log1p(months) / math.log1p(target))

    if months >= target:
        detail = f"{months:.1f} months covered. Fortress mode!"
    elif months >= 1:
        detail = f"{months:.1f} months covered"
    elif months > 0:
        detail = f"{round(months * 30)} days covered. Building your safety net"
    else:
        detail = "No emergency buffer - start with a $500 goal"
    return fraction, detail


def _debt_to_income(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    raw_debt = sum((d.balance for d in inputs.current_debts), ZERO)
    if raw_debt <= 0:
        return 1.0, "No debt! Perfect score"
    if inputs.monthly_income <= 0:
        return 0.0, "No income recorded"

    weighted_dti = float(weighted_monthly_payments(inputs.current_debts, config) / inputs.monthly_income)
    raw_dti = safe_ratio(sum((d.monthly_payment for d in inputs.current_debts), ZERO), inputs.monthly_income)
    fraction = clamp(1 - weighted_dti / config.curves.dti_zero_point)
    detail = f"{raw_dti * 100:.0f}% DTI ({weighted_dti * 100:.0f}% risk-weighted)"
    return fraction, detail


def _net_worth(inputs: ScoreInputs, config: ScoringConfig) -> Factor:
    curves = config.curves
    net_worth = float(inputs.total_assets - weighted_debt(inputs.current_debts, config))
    # asinh is log-like in both directions and continuous through zero
    scale = math.asinh(curves.net_worth_target / curves.net_worth_unit)
    fraction = clamp(0.5 + 0.5 * math.asinh(net_worth / curves.net_worth_unit) / scale)

    if net_worth >= 0:
        detail = f"${net_worth:,.0f} risk-adjusted net worth"
    else:
        detail = f"-${abs(net_worth):,.0f} risk-adjusted net worth"
    return fraction, detail


FACTORS: dict[str, Callable[[ScoreInputs, ScoringConfig], Factor]] = {
    "wealth_building": _wealth_building,
    "debt_velocity": _debt_velocity,
    "cash_flow_trend": _cash_flow_trend,
    "payment_consistency": _payment_consistency,
    "budget_discipline": _budget_discipline,
    "engagement": _engagement,
    "emergency_buffer": _emergency_buffer,
    "debt_to_income": _debt_to_income,
    "net_worth": _net_worth,
}


def behavior_confidence(data_months: int, curves: CurveConstants) -> float:
    """Credit given to Behavior scores: 50% with no history, 100% from month 4."""
    if data_months <= 0:
        return curves.cold_start_base
    return min(1.0, curves.cold_start_base + data_months * curves.cold_start_per_month)


def _sub_component(key: str, label: str, max_points: int, fraction: float, detail: str) -> SubComponent:
    score = points(fraction * max_points)
    return SubComponent(
        key=key,
        label=label,
        score=score,
        max_points=max_points,
        percentage=points(score / max_points * 100),
        detail=detail,
    )


def _tips(pillars: list[PillarScore], config: ScoringConfig) -> list[str]:
    tips_by_key = {sc.key: sc.tip for p in config.pillars for sc in p.sub_components}
    ranked = sorted(
        (sc for p in pillars for sc in p.sub_components),
        key=lambda sc: sc.percentage,
    )
    curves = config.curves
    tips = [
        tips_by_key[sc.key]
        for sc in ranked[:curves.max_tips]
        if sc.percentage < Decimal(str(curves.tip_threshold_pct))
    ]
    return tips or [config.all_clear_tip]


def score_inputs(inputs: ScoreInputs, config: ScoringConfig = DEFAULT_SCORING_CONFIG) -> ScoreResult:
    """Score pre-aggregated inputs."""
    confidence = behavior_confidence(inputs.data_months, config.curves)
    partial = inputs.data_months < config.curves.full_confidence_months

    pillars: list[PillarScore] = []
    for pillar_spec in config.pillars:
        subs: list[SubComponent] = []
        for spec in pillar_spec.sub_components:
            fraction, detail = FACTORS[spec.key](inputs, config)
            if pillar_spec.name == BEHAVIOR_PILLAR and partial:
                # Scale toward the neutral midpoint, not toward zero
                fraction = 0.5 + (fraction - 0.5) * confidence
                detail += f" ({round(confidence * 100)}% confidence - builds over time)"
            subs.append(_sub_component(spec.key, spec.label, spec.max_points, fraction, detail))
        pillars.append(PillarScore(
            name=pillar_spec.name,
            score=sum((sc.score for sc in subs), ZERO),
            max_points=pillar_spec.max_points,
            sub_components=subs,
        ))

    raw_total = sum((p.score for p in pillars), ZERO)
    total = int(raw_total.quantize(Decimal("1"), ROUND_HALF_UP))
    total = max(0, min(config.max_total, total))
    level = config.level_for(total)

    return ScoreResult(
        total_score=total,
        pillars=pillars,
        level=level.level,
        level_title=level.title,
        confidence=confidence,
        tips=_tips(pillars, config),
        config_version=config.version,
    )


def calculate_financial_health_score(
    snapshot: FinancialSnapshot,
    config: ScoringConfig = DEFAULT_SCORING_CONFIG,
    lookback_months: int = 3,
) -> ScoreResult:
    """Main entry point: aggregate a snapshot and score it."""
    return score_inputs(build_score_inputs(snapshot, lookback_months), config)


def compare_scores(current: ScoreResult, previous: ScoreResult) -> ScoreChange:
    """Total change plus which sub-components moved, labelled for display."""
    improved: list[str] = []
    declined: list[str] = []
    for pillar in current.pillars:
        for sc in pillar.sub_components:
            try:
                before = previous.sub_component(sc.key).score
            except KeyError:
                continue
            if sc.score > before:
                improved.append(sc.label)
            elif sc.score < before:
                declined.append(sc.label)
    return ScoreChange(
        change=current.total_score - previous.total_score,
        improved=improved,
        declined=declined,
    )
